"""Supported currency codes and validation of user-supplied codes."""

from __future__ import annotations

from xerates.exceptions import UnknownCurrencyError
from xerates.types import CurrencyCode

# ISO 4217 codes plus the extra codes the rate tables are published for
# (crown dependencies, Tuvalu, Seborga and precious metals).
SUPPORTED_CURRENCIES = frozenset([
    "AED", "AFN", "ALL", "AMD", "ANG", "AOA", "ARS", "AUD", "AWG", "AZN",
    "BAM", "BBD", "BDT", "BGN", "BHD", "BIF", "BMD", "BND", "BOB", "BRL",
    "BSD", "BTN", "BWP", "BYN", "BZD", "CAD", "CDF", "CHF", "CLP", "CNY",
    "COP", "CRC", "CUC", "CUP", "CVE", "CZK", "DJF", "DKK", "DOP", "DZD",
    "EGP", "ERN", "ETB", "EUR", "FJD", "FKP", "GBP", "GEL", "GGP", "GHS",
    "GIP", "GMD", "GNF", "GTQ", "GYD", "HKD", "HNL", "HRK", "HTG", "HUF",
    "IDR", "ILS", "IMP", "INR", "IQD", "IRR", "ISK", "JEP", "JMD", "JOD",
    "JPY", "KES", "KGS", "KHR", "KMF", "KPW", "KRW", "KWD", "KYD", "KZT",
    "LAK", "LBP", "LKR", "LRD", "LSL", "LYD", "MAD", "MDL", "MGA", "MKD",
    "MMK", "MNT", "MOP", "MRU", "MUR", "MVR", "MWK", "MXN", "MYR", "MZN",
    "NAD", "NGN", "NIO", "NOK", "NPR", "NZD", "OMR", "PAB", "PEN", "PGK",
    "PHP", "PKR", "PLN", "PYG", "QAR", "RON", "RSD", "RUB", "RWF", "SAR",
    "SBD", "SCR", "SDG", "SEK", "SGD", "SHP", "SLE", "SLL", "SOS", "SPL",
    "SRD", "STN", "SVC", "SYP", "SZL", "THB", "TJS", "TMT", "TND", "TOP",
    "TRY", "TTD", "TVD", "TWD", "TZS", "UAH", "UGX", "USD", "UYU", "UZS",
    "VES", "VND", "VUV", "WST", "XAF", "XAG", "XAU", "XCD", "XDR", "XOF",
    "XPD", "XPF", "XPT", "YER", "ZAR", "ZMW", "ZWL",
])


def is_supported(code: str) -> bool:
    """Return True if ``code`` names a supported currency (any case)."""
    return code.upper() in SUPPORTED_CURRENCIES


def validate_currency(code: str) -> CurrencyCode:
    """Validate a currency code against the supported set.

    :param code: Currency code in any case, e.g. ``"usd"``.
    :returns: The upper-cased code.
    :raises UnknownCurrencyError: If the code is empty or not supported.
    """
    normalized = code.upper()
    if normalized not in SUPPORTED_CURRENCIES:
        raise UnknownCurrencyError(code)
    return CurrencyCode(normalized)
