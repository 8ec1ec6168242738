"""Core type definitions for the exchange-rate lookup.

All data models use Pydantic BaseModel for automatic validation, JSON
serialization, and better error messages.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, NewType

from pydantic import BaseModel, ConfigDict, Field

# Type aliases for domain-specific identifiers
CurrencyCode = NewType("CurrencyCode", str)
CalendarDate = NewType("CalendarDate", str)


# ---------------------------------------------------------------------------
# Base Configuration
# ---------------------------------------------------------------------------


class FrozenModel(BaseModel):
    """Base model with frozen (immutable) configuration."""

    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Quote Types
# ---------------------------------------------------------------------------


class RateQuote(FrozenModel):
    """Exchange rate for one currency pair on one date.

    Quotes are only produced by rate sources after a successful extraction and
    always echo the requested currencies and date.

    :param from_currency: Currency being converted from.
    :param to_currency: Currency being converted to.
    :param date: Canonical date the rate applies to.
    :param rate: Units of ``to_currency`` per one unit of ``from_currency``.
    """

    from_currency: CurrencyCode
    to_currency: CurrencyCode
    date: CalendarDate
    rate: float = Field(gt=0)

    def convert(self, amount: float) -> float:
        """Convert an amount of ``from_currency`` into ``to_currency``."""
        return amount * self.rate


class OutputMode(str, Enum):
    """How a quote is rendered by the command line."""

    FULL = "full"
    RATE_ONLY = "rate_only"
    CONVERTED = "converted"


# ---------------------------------------------------------------------------
# Configuration Types
# ---------------------------------------------------------------------------


class LookupDefaults(FrozenModel):
    """Currency pair used when a caller does not name one.

    :param default_from: Currency converted from when none is given.
    :param default_to: Currency converted to when none is given.
    """

    default_from: str = "RUB"
    default_to: str = "USD"


class ConvertConfig(FrozenModel):
    """Resolved configuration for a rate lookup.

    :param defaults: Default currency pair.
    :param data_source: Rate source type (e.g., "xe", "static").
    :param source_params: Source-specific parameters.
    :param log_level: Logging level name.
    """

    defaults: LookupDefaults = Field(default_factory=LookupDefaults)
    data_source: str = "xe"
    source_params: dict[str, Any] = Field(default_factory=dict)
    log_level: str = "WARNING"
