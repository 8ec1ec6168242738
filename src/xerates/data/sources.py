"""Rate source implementations for fetching exchange rates.

This module provides an abstract interface for rate sources and concrete
implementations for the xe.com historical currency tables and for an
in-memory table of known rates.
"""

from __future__ import annotations

import logging
import math
import re
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any
from urllib.parse import urlparse

import requests
from bs4 import BeautifulSoup

from xerates.dates import normalize_date
from xerates.exceptions import (ConfigError, DateError, MalformedRateError,
                                NoQuoteForDateError, TransportError)
from xerates.types import CalendarDate, CurrencyCode, RateQuote

if TYPE_CHECKING:
    from xerates.types import ConvertConfig

logger = logging.getLogger(__name__)

# Structural path to the rows of the currency table, one row per currency.
ROW_SELECTOR = "div#table-section > section > div > div > table > tbody > tr"
LABEL_SELECTOR = "th > a"
RATE_SELECTOR = "td:nth-of-type(2)"

# Plain decimal with optional thousands separators and exponent.
RATE_PATTERN = re.compile(r"[0-9][0-9,]*(\.[0-9]+)?([eE][-+]?[0-9]+)?")


def extract_rate(document: str, target: str) -> str | None:
    """Find the raw rate text for ``target`` in a currency table document.

    This is the only place that knows the markup of the source page. If more
    than one row is labelled ``target``, the first one in document order wins.

    :param document: HTML body of the currency table page.
    :param target: Upper-case currency code to look for (case-sensitive).
    :returns: The rate cell's text, or None if no row matches.
    """
    soup = BeautifulSoup(document, "html.parser")

    for row in soup.select(ROW_SELECTOR):
        label = row.select_one(LABEL_SELECTOR) or row.find("th")
        if label is None or label.get_text(strip=True) != target:
            continue

        cell = row.select_one(RATE_SELECTOR)
        return cell.get_text(strip=True) if cell is not None else ""

    return None


def parse_rate(text: str) -> float:
    """Parse a decimal rate string such as ``"1,234.5678"``.

    :param text: Raw rate text.
    :returns: The rate as a positive float.
    :raises MalformedRateError: If the text is not a finite positive number.
    """
    stripped = text.strip()
    if RATE_PATTERN.fullmatch(stripped) is None:
        raise MalformedRateError(f"Malformed rate value: '{text}'")

    rate = float(stripped.replace(",", ""))

    if not math.isfinite(rate) or rate <= 0:
        raise MalformedRateError(f"Rate must be a positive number, got '{text}'")
    return rate


class RateSource(ABC):
    """Abstract base class for rate sources.

    All rate source implementations must inherit from this class and implement
    the `fetch_quote` method.
    """

    @abstractmethod
    def fetch_quote(
        self,
        from_currency: CurrencyCode,
        to_currency: CurrencyCode,
        date: CalendarDate,
    ) -> RateQuote:
        """Fetch the exchange rate for a currency pair on a date.

        :param from_currency: Validated currency to convert from.
        :param to_currency: Validated currency to convert to.
        :param date: Canonical date to fetch.
        :returns: RateQuote echoing the requested pair and date.
        :raises TransportError: If the source could not be reached.
        :raises NoQuoteForDateError: If the source has no rate for the pair.
        :raises MalformedRateError: If the published rate cannot be parsed.
        """
        ...


class XeRateSource(RateSource):
    """Rate source that reads the xe.com historical currency tables.

    One table is published per base currency and date, holding one row per
    target currency. No retries are made.

    :param source_params: Optional parameters for configuring the source.
        - base_url: Currency table URL (default: https://www.xe.com/currencytables/)
        - timeout: Request timeout in seconds (default: 30)
        - allowed_domains: Hosts a response may be served from
          (default: the host of base_url)
        - user_agent: User-Agent header to send
    """

    DEFAULT_BASE_URL = "https://www.xe.com/currencytables/"
    DEFAULT_USER_AGENT = "xerates/0.1 (+https://pypi.org/project/xerates/)"

    def __init__(self, source_params: dict[str, Any] | None = None) -> None:
        """Initialize xe.com rate source.

        :param source_params: Optional configuration parameters.
        :raises ConfigError: If base_url has no host, timeout is not positive,
            or allowed_domains is not a list of host names.
        """
        self.params = source_params or {}
        self.base_url = self.params.get("base_url", self.DEFAULT_BASE_URL)
        self.timeout = self.params.get("timeout", 30)
        self.user_agent = self.params.get("user_agent", self.DEFAULT_USER_AGENT)

        host = urlparse(self.base_url).hostname
        if not host:
            raise ConfigError(f"Invalid base_url for xe source: '{self.base_url}'")
        if (
            isinstance(self.timeout, bool)
            or not isinstance(self.timeout, (int, float))
            or self.timeout <= 0
        ):
            raise ConfigError(f"'timeout' must be a positive number, got {self.timeout!r}")

        domains = self.params.get("allowed_domains", [host])
        if not isinstance(domains, (list, tuple)) or not all(
            isinstance(d, str) and d for d in domains
        ):
            raise ConfigError(
                f"'allowed_domains' must be a list of host names, got {domains!r}"
            )
        self.allowed_domains = frozenset(domains)

    def fetch_document(self, from_currency: CurrencyCode, date: CalendarDate) -> str:
        """Download the currency table for ``from_currency`` on ``date``.

        :param from_currency: Base currency of the table.
        :param date: Canonical date of the table.
        :returns: HTML body of the page.
        :raises TransportError: On connection errors, timeouts, non-success
            responses, or responses served from a host that is not allowed.
        """
        params = {"from": from_currency, "date": date}
        logger.debug("Fetching %s with %s", self.base_url, params)

        try:
            with requests.Session() as session:
                session.headers["User-Agent"] = self.user_agent
                with session.get(
                    self.base_url, params=params, timeout=self.timeout
                ) as response:
                    logger.debug("GET %s -> %s", response.url, response.status_code)
                    response.raise_for_status()

                    host = urlparse(response.url).hostname
                    if host not in self.allowed_domains:
                        raise TransportError(
                            f"Response served from unexpected host '{host}'"
                        )
                    return response.text
        except requests.Timeout as e:
            raise TransportError(
                f"Timed out after {self.timeout}s fetching {self.base_url}"
            ) from e
        except requests.RequestException as e:
            raise TransportError(f"Unable to fetch {self.base_url}: {e}") from e

    def fetch_quote(
        self,
        from_currency: CurrencyCode,
        to_currency: CurrencyCode,
        date: CalendarDate,
    ) -> RateQuote:
        """Fetch the rate table for ``from_currency`` and pick ``to_currency``.

        :param from_currency: Validated currency to convert from.
        :param to_currency: Validated currency to convert to.
        :param date: Canonical date to fetch.
        :returns: RateQuote echoing the requested pair and date.
        :raises TransportError: If the page could not be retrieved.
        :raises NoQuoteForDateError: If the page has no row for ``to_currency``.
        :raises MalformedRateError: If the row's rate cannot be parsed.
        """
        document = self.fetch_document(from_currency, date)

        raw_rate = extract_rate(document, to_currency)
        if raw_rate is None:
            logger.debug("No %s row in %s table for %s", to_currency, from_currency, date)
            raise NoQuoteForDateError(
                f"No rate information for {from_currency}/{to_currency} on {date}, "
                f"likely incorrect date"
            )

        return RateQuote(
            from_currency=from_currency,
            to_currency=to_currency,
            date=date,
            rate=parse_rate(raw_rate),
        )


class StaticRateSource(RateSource):
    """Rate source that serves rates from an in-memory table.

    Useful for offline runs and tests.

    :param source_params: Optional parameters:
        - rates: List of mappings with ``from``, ``to``, ``date`` and ``rate``.
    """

    def __init__(self, source_params: dict[str, Any] | None = None) -> None:
        """Initialize static rate source.

        :param source_params: Configuration with an optional rates list.
        :raises ConfigError: If a rate entry is missing a field or has a date
            that does not normalize.
        """
        self.params = source_params or {}
        self._rates: dict[tuple[str, str, str], str] = {}

        for entry in self.params.get("rates", []):
            try:
                self.add_rate(
                    str(entry["from"]), str(entry["to"]), str(entry["date"]), entry["rate"]
                )
            except (KeyError, TypeError) as e:
                raise ConfigError(f"Invalid static rate entry {entry!r}: {e}") from e

    def add_rate(
        self, from_currency: str, to_currency: str, date: str, rate: float | str
    ) -> None:
        """Register a rate for a currency pair and date.

        The date may be in any format ``normalize_date`` accepts.

        :raises ConfigError: If the date does not normalize.
        """
        try:
            canonical = normalize_date(date)
        except DateError as e:
            raise ConfigError(f"Invalid date for static rate: {e}") from e
        self._rates[(from_currency.upper(), to_currency.upper(), canonical)] = str(rate)

    def fetch_quote(
        self,
        from_currency: CurrencyCode,
        to_currency: CurrencyCode,
        date: CalendarDate,
    ) -> RateQuote:
        """Return the registered rate for the pair and date."""
        raw_rate = self._rates.get((from_currency, to_currency, date))
        if raw_rate is None:
            raise NoQuoteForDateError(
                f"No rate information for {from_currency}/{to_currency} on {date}"
            )

        return RateQuote(
            from_currency=from_currency,
            to_currency=to_currency,
            date=date,
            rate=parse_rate(raw_rate),
        )


def resolve_rate_source(config: ConvertConfig) -> RateSource:
    """Construct a rate source from configuration.

    :param config: ConvertConfig with data_source and source_params.
    :returns: RateSource instance for the specified type.
    :raises ConfigError: If data_source type is unrecognized.
    """
    source_type = config.data_source.lower()

    if source_type == "xe":
        return XeRateSource(config.source_params)
    elif source_type == "static":
        return StaticRateSource(config.source_params)
    else:
        raise ConfigError(
            f"Unrecognized data source type: '{config.data_source}'. "
            f"Supported types: xe, static"
        )
