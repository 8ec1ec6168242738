"""Rate lookup pipeline: date normalization, currency validation, fetch."""

from __future__ import annotations

import logging
from datetime import date

from xerates.currencies import validate_currency
from xerates.data.sources import RateSource
from xerates.dates import normalize_date
from xerates.types import LookupDefaults, RateQuote

logger = logging.getLogger(__name__)


class RateLookup:
    """Look up the exchange rate for a currency pair on a date.

    Each call normalizes the date, validates both currency codes and makes
    exactly one request to the rate source, in that order. Errors from every
    step propagate to the caller unchanged.

    :param defaults: Currency pair used when a call does not name one.
    :param source: Rate source to fetch quotes from.
    :param today: Fixed reference date for future-date checks. When None,
        the current UTC date is used on every call.
    """

    def __init__(
        self,
        defaults: LookupDefaults,
        source: RateSource,
        today: date | None = None,
    ) -> None:
        self.defaults = defaults
        self.source = source
        self.today = today

    def lookup(
        self,
        from_code: str | None = None,
        to_code: str | None = None,
        date_value: str = "",
    ) -> RateQuote:
        """Fetch the quote for a currency pair and free-form date.

        :param from_code: Currency to convert from (default from config).
        :param to_code: Currency to convert to (default from config).
        :param date_value: Date in any accepted format.
        :returns: RateQuote for the requested pair and canonical date.
        :raises DateError: If the date is malformed, impossible or in the future.
        :raises UnknownCurrencyError: If either currency is unsupported.
        :raises RateFetchError: If the source cannot provide the rate.
        """
        canonical_date = normalize_date(date_value, self.today)
        from_currency = validate_currency(
            self.defaults.default_from if from_code is None else from_code
        )
        to_currency = validate_currency(
            self.defaults.default_to if to_code is None else to_code
        )

        logger.info("Looking up %s/%s on %s", from_currency, to_currency, canonical_date)
        return self.source.fetch_quote(from_currency, to_currency, canonical_date)

    def convert(
        self,
        amount: float,
        from_code: str | None = None,
        to_code: str | None = None,
        date_value: str = "",
    ) -> tuple[RateQuote, float]:
        """Look up a quote and convert ``amount`` with it.

        :returns: The quote and the converted amount.
        """
        quote = self.lookup(from_code, to_code, date_value)
        return quote, quote.convert(amount)
