"""Rate sources and extraction of rates from source documents."""

from xerates.data.sources import (RateSource, StaticRateSource, XeRateSource,
                                  extract_rate, parse_rate,
                                  resolve_rate_source)

__all__ = [
    "RateSource",
    "XeRateSource",
    "StaticRateSource",
    "extract_rate",
    "parse_rate",
    "resolve_rate_source",
]
