"""CLI command implementations for the exchange-rate lookup.

Each command module provides:
- Configuration loading and validation
- Output formatting for the command line
"""

from xerates.commands.convert import format_quote, load_convert_config

__all__ = [
    "format_quote",
    "load_convert_config",
]
