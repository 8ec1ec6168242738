"""Historical exchange-rate lookup package root."""

from xerates.exceptions import XeRatesError
from xerates.pipeline import RateLookup
from xerates.types import RateQuote

__version__ = "0.1.0"

__all__ = ["XeRatesError", "RateLookup", "RateQuote", "__version__"]
