"""Tests for rate source implementations."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from xerates.data.sources import (RateSource, StaticRateSource, XeRateSource,
                                  extract_rate, parse_rate,
                                  resolve_rate_source)
from xerates.exceptions import (ConfigError, MalformedRateError,
                                NoQuoteForDateError, TransportError)
from xerates.types import (CalendarDate, ConvertConfig, CurrencyCode,
                           RateQuote)

XE_URL = "https://www.xe.com/currencytables/?from=RUB&date=2020-01-01"

RUB_TABLE = """
<html><body>
<div id="table-section"><section><div><div>
<table>
  <thead>
    <tr><th>Currency</th><th>Name</th><th>Units per RUB</th><th>RUB per unit</th></tr>
  </thead>
  <tbody>
    <tr><th><a href="/currency/usd-us-dollar">USD</a></th><td>US Dollar</td>
        <td>0.0161456789</td><td>61.9361</td></tr>
    <tr><th><a href="/currency/eur-euro">EUR</a></th><td>Euro</td>
        <td> 0.0143875 </td><td>69.5048</td></tr>
    <tr><th><a href="/currency/idr-indonesian-rupiah">IDR</a></th><td>Indonesian Rupiah</td>
        <td>1,234.5678</td><td>0.00081</td></tr>
    <tr><th><a href="/currency/gbp-british-pound">GBP</a></th><td>British Pound</td>
        <td>n/a</td><td>n/a</td></tr>
  </tbody>
</table>
</div></div></section></div>
</body></html>
"""

EMPTY_TABLE = """
<html><body>
<div id="table-section"><section><div><div>
<table><tbody></tbody></table>
</div></div></section></div>
</body></html>
"""


def _mock_response(
    session_cls: MagicMock,
    text: str = RUB_TABLE,
    url: str = XE_URL,
) -> MagicMock:
    """Wire a mocked requests.Session to return a single response.

    :returns: The mocked session used inside the ``with`` block.
    """
    session = session_cls.return_value.__enter__.return_value
    response = session.get.return_value.__enter__.return_value
    response.text = text
    response.url = url
    response.status_code = 200
    response.raise_for_status.return_value = None
    return session


class TestExtractRate:
    """Tests for the document extraction function."""

    def test_finds_target_row(self) -> None:
        assert extract_rate(RUB_TABLE, "USD") == "0.0161456789"

    def test_strips_cell_whitespace(self) -> None:
        assert extract_rate(RUB_TABLE, "EUR") == "0.0143875"

    def test_missing_row_returns_none(self) -> None:
        assert extract_rate(RUB_TABLE, "JPY") is None

    def test_match_is_case_sensitive(self) -> None:
        assert extract_rate(RUB_TABLE, "usd") is None

    def test_empty_table_returns_none(self) -> None:
        assert extract_rate(EMPTY_TABLE, "USD") is None

    def test_first_matching_row_wins(self) -> None:
        """Duplicate rows resolve to the first in document order."""
        document = RUB_TABLE.replace(
            "<tbody>",
            "<tbody><tr><th><a>USD</a></th><td>US Dollar</td><td>0.5</td><td>2</td></tr>",
            1,
        )
        assert extract_rate(document, "USD") == "0.5"

    def test_rows_outside_table_section_ignored(self) -> None:
        """Only rows under the rate table path are considered."""
        document = (
            "<html><body><table><tbody><tr><th><a>USD</a></th>"
            "<td>US Dollar</td><td>0.5</td></tr></tbody></table></body></html>"
        )
        assert extract_rate(document, "USD") is None

    def test_label_without_link(self) -> None:
        """A plain header cell is used when the code is not a link."""
        document = RUB_TABLE.replace('<a href="/currency/usd-us-dollar">USD</a>', "USD")
        assert extract_rate(document, "USD") == "0.0161456789"


class TestParseRate:
    """Tests for rate text parsing."""

    def test_plain_decimal(self) -> None:
        assert parse_rate("0.0161456789") == pytest.approx(0.0161456789)

    def test_thousands_separator(self) -> None:
        assert parse_rate("1,234.5678") == pytest.approx(1234.5678)

    @pytest.mark.parametrize(
        "text",
        ["", "n/a", "0", "-1.5", "nan", "inf", "1.2.3", "1_000", "0x1A", "1e999"],
    )
    def test_malformed(self, text: str) -> None:
        with pytest.raises(MalformedRateError):
            parse_rate(text)


class TestRateSourceProtocol:
    """Tests for the RateSource abstract base class."""

    def test_rate_source_is_abstract(self) -> None:
        with pytest.raises(TypeError, match="abstract"):
            RateSource()  # type: ignore[abstract]

    def test_subclass_must_implement_fetch_quote(self) -> None:
        class IncompleteSource(RateSource):
            pass

        with pytest.raises(TypeError, match="abstract"):
            IncompleteSource()  # type: ignore[abstract]


class TestXeRateSource:
    """Tests for XeRateSource."""

    def test_init_with_defaults(self) -> None:
        source = XeRateSource()

        assert source.base_url == "https://www.xe.com/currencytables/"
        assert source.timeout == 30
        assert source.allowed_domains == frozenset(["www.xe.com"])

    def test_init_with_custom_params(self) -> None:
        source = XeRateSource({"base_url": "https://rates.example.com/tables", "timeout": 5})

        assert source.timeout == 5
        assert source.allowed_domains == frozenset(["rates.example.com"])

    def test_invalid_base_url_raises(self) -> None:
        with pytest.raises(ConfigError, match="Invalid base_url"):
            XeRateSource({"base_url": "not a url"})

    def test_boolean_timeout_raises(self) -> None:
        """A YAML boolean is not a timeout."""
        with pytest.raises(ConfigError, match="timeout"):
            XeRateSource({"timeout": True})

    def test_allowed_domains_list(self) -> None:
        source = XeRateSource({"allowed_domains": ["www.xe.com", "xe.com"]})

        assert source.allowed_domains == frozenset(["www.xe.com", "xe.com"])

    @pytest.mark.parametrize("domains", ["www.xe.com", [""], ["www.xe.com", 5], None])
    def test_invalid_allowed_domains_raises(self, domains: object) -> None:
        """A scalar or non-string entries are a config error, not a host set."""
        with pytest.raises(ConfigError, match="allowed_domains"):
            XeRateSource({"allowed_domains": domains})

    def test_invalid_timeout_raises(self) -> None:
        with pytest.raises(ConfigError, match="timeout"):
            XeRateSource({"timeout": 0})

    def test_fetch_quote_returns_quote(self) -> None:
        """A matching row produces a quote echoing the request."""
        with patch("requests.Session") as session_cls:
            session = _mock_response(session_cls)

            quote = XeRateSource().fetch_quote(
                CurrencyCode("RUB"), CurrencyCode("USD"), CalendarDate("2020-01-01")
            )

        assert quote == RateQuote(
            from_currency="RUB", to_currency="USD", date="2020-01-01", rate=0.0161456789
        )
        assert quote.rate > 0
        session.get.assert_called_once_with(
            "https://www.xe.com/currencytables/",
            params={"from": "RUB", "date": "2020-01-01"},
            timeout=30,
        )

    def test_session_closed_after_fetch(self) -> None:
        with patch("requests.Session") as session_cls:
            _mock_response(session_cls)
            XeRateSource().fetch_document(CurrencyCode("RUB"), CalendarDate("2020-01-01"))

        session_cls.return_value.__exit__.assert_called_once()

    def test_missing_row_raises_no_quote(self) -> None:
        """A table without the target row is not a zero-valued success."""
        with patch("requests.Session") as session_cls:
            _mock_response(session_cls, text=EMPTY_TABLE)

            with pytest.raises(NoQuoteForDateError, match="1990-01-01"):
                XeRateSource().fetch_quote(
                    CurrencyCode("RUB"), CurrencyCode("USD"), CalendarDate("1990-01-01")
                )

    def test_malformed_rate_raises(self) -> None:
        with patch("requests.Session") as session_cls:
            _mock_response(session_cls)

            with pytest.raises(MalformedRateError):
                XeRateSource().fetch_quote(
                    CurrencyCode("RUB"), CurrencyCode("GBP"), CalendarDate("2020-01-01")
                )

    def test_connection_error_raises_transport_error(self) -> None:
        with patch("requests.Session") as session_cls:
            session = session_cls.return_value.__enter__.return_value
            session.get.side_effect = requests.ConnectionError("no route to host")

            with pytest.raises(TransportError, match="Unable to fetch"):
                XeRateSource().fetch_quote(
                    CurrencyCode("RUB"), CurrencyCode("USD"), CalendarDate("2020-01-01")
                )

        session_cls.return_value.__exit__.assert_called_once()

    def test_timeout_raises_transport_error(self) -> None:
        with patch("requests.Session") as session_cls:
            session = session_cls.return_value.__enter__.return_value
            session.get.side_effect = requests.Timeout("read timed out")

            with pytest.raises(TransportError, match="Timed out after 30s"):
                XeRateSource().fetch_quote(
                    CurrencyCode("RUB"), CurrencyCode("USD"), CalendarDate("2020-01-01")
                )

    def test_http_error_raises_transport_error(self) -> None:
        with patch("requests.Session") as session_cls:
            session = _mock_response(session_cls)
            response = session.get.return_value.__enter__.return_value
            response.raise_for_status.side_effect = requests.HTTPError("503 Server Error")

            with pytest.raises(TransportError, match="503"):
                XeRateSource().fetch_quote(
                    CurrencyCode("RUB"), CurrencyCode("USD"), CalendarDate("2020-01-01")
                )

    def test_unexpected_host_raises_transport_error(self) -> None:
        """Responses served from other hosts are rejected."""
        with patch("requests.Session") as session_cls:
            _mock_response(session_cls, url="https://elsewhere.example.com/tables")

            with pytest.raises(TransportError, match="unexpected host"):
                XeRateSource().fetch_quote(
                    CurrencyCode("RUB"), CurrencyCode("USD"), CalendarDate("2020-01-01")
                )


class TestStaticRateSource:
    """Tests for StaticRateSource."""

    def test_configured_rates(self) -> None:
        source = StaticRateSource(
            {"rates": [{"from": "eur", "to": "usd", "date": "2021-06-30", "rate": 1.19}]}
        )

        quote = source.fetch_quote(
            CurrencyCode("EUR"), CurrencyCode("USD"), CalendarDate("2021-06-30")
        )
        assert quote.rate == pytest.approx(1.19)

    def test_add_rate(self) -> None:
        source = StaticRateSource()
        source.add_rate("RUB", "USD", "2020-01-01", "0.0161")

        quote = source.fetch_quote(
            CurrencyCode("RUB"), CurrencyCode("USD"), CalendarDate("2020-01-01")
        )
        assert quote.date == "2020-01-01"

    def test_unknown_pair_raises_no_quote(self) -> None:
        with pytest.raises(NoQuoteForDateError):
            StaticRateSource().fetch_quote(
                CurrencyCode("RUB"), CurrencyCode("USD"), CalendarDate("2020-01-01")
            )

    def test_dates_are_normalized(self) -> None:
        """Unquoted YAML dates such as 20200101 still match canonical dates."""
        source = StaticRateSource(
            {"rates": [{"from": "RUB", "to": "USD", "date": 20200101, "rate": 0.0161}]}
        )

        quote = source.fetch_quote(
            CurrencyCode("RUB"), CurrencyCode("USD"), CalendarDate("2020-01-01")
        )
        assert quote.date == "2020-01-01"

    def test_invalid_date_raises(self) -> None:
        with pytest.raises(ConfigError, match="Invalid date for static rate"):
            StaticRateSource(
                {"rates": [{"from": "RUB", "to": "USD", "date": "2020-02-30", "rate": 1.0}]}
            )

    def test_invalid_entry_raises(self) -> None:
        with pytest.raises(ConfigError, match="Invalid static rate entry"):
            StaticRateSource({"rates": [{"from": "RUB", "to": "USD"}]})


class TestResolveRateSource:
    """Tests for resolve_rate_source."""

    def test_resolve_xe(self) -> None:
        source = resolve_rate_source(ConvertConfig(data_source="xe"))
        assert isinstance(source, XeRateSource)

    def test_resolve_static_case_insensitive(self) -> None:
        source = resolve_rate_source(ConvertConfig(data_source="STATIC"))
        assert isinstance(source, StaticRateSource)

    def test_unknown_source_raises(self) -> None:
        with pytest.raises(ConfigError, match="Unrecognized data source"):
            resolve_rate_source(ConvertConfig(data_source="ecb"))
