"""Exchange-rate lookup exception hierarchy.

All package-specific exceptions derive from :class:`XeRatesError` so callers can
catch every lookup failure uniformly. Each class carries a stable ``kind``
string that output layers can use to classify a failure without matching on
class names.
"""

from __future__ import annotations


class XeRatesError(Exception):
    """Base class for exchange-rate lookup exceptions."""

    kind = "error"


class ConfigError(XeRatesError):
    """Raised when configuration files or parameters are invalid."""

    kind = "config"


# ---------------------------------------------------------------------------
# Date errors
# ---------------------------------------------------------------------------


class DateError(XeRatesError):
    """Raised when a date token cannot be turned into a canonical date.

    :param value: The original, unmodified input.
    :param message: Human readable description of the failed check.
    """

    kind = "date"

    def __init__(self, value: str, message: str) -> None:
        super().__init__(message)
        self.value = value


class DateMalformedError(DateError):
    """Input does not match any accepted date shape."""

    kind = "date_malformed"


class DateImpossibleError(DateError):
    """Input matches a date shape but is not a real calendar date."""

    kind = "date_impossible"


class DateInFutureError(DateError):
    """Date is valid but later than the reference today."""

    kind = "date_in_future"


# ---------------------------------------------------------------------------
# Currency errors
# ---------------------------------------------------------------------------


class UnknownCurrencyError(XeRatesError):
    """Raised when a currency code is not in the supported set."""

    kind = "unknown_currency"

    def __init__(self, code: str) -> None:
        super().__init__(f"Unknown currency code: '{code}'")
        self.code = code


# ---------------------------------------------------------------------------
# Fetch errors
# ---------------------------------------------------------------------------


class RateFetchError(XeRatesError):
    """Raised when a rate could not be obtained from a rate source."""

    kind = "fetch"


class TransportError(RateFetchError):
    """The remote document could not be retrieved at all."""

    kind = "transport_failure"


class NoQuoteForDateError(RateFetchError):
    """The document was retrieved but holds no row for the target currency."""

    kind = "no_quote_for_date"


class MalformedRateError(RateFetchError):
    """A matching row was found but its rate field is not a usable number."""

    kind = "malformed_rate"


__all__ = [
    "XeRatesError",
    "ConfigError",
    "DateError",
    "DateMalformedError",
    "DateImpossibleError",
    "DateInFutureError",
    "UnknownCurrencyError",
    "RateFetchError",
    "TransportError",
    "NoQuoteForDateError",
    "MalformedRateError",
]
