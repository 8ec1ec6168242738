"""Configuration and output formatting for the convert command.

Example config file (xerates.yaml):

    default_from: "RUB"
    default_to: "USD"
    data_source: "xe"
    source_params:
      timeout: 10
    log_level: "INFO"

Every key is optional. The environment variables ``XERATES_FROM`` and
``XERATES_TO`` override the default pair from the file, and
``XERATES_CONFIG`` names the file when no path is passed explicitly.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from xerates.currencies import is_supported
from xerates.exceptions import ConfigError
from xerates.types import ConvertConfig, LookupDefaults, OutputMode, RateQuote

# Valid rate source types
VALID_DATA_SOURCES = frozenset(["xe", "static"])

VALID_LOG_LEVELS = frozenset(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])

ENV_FROM = "XERATES_FROM"
ENV_TO = "XERATES_TO"
ENV_CONFIG = "XERATES_CONFIG"


def _read_config_file(config_path: Path) -> dict[str, Any]:
    """Read a YAML configuration file into a mapping.

    :param config_path: Path to the YAML file.
    :returns: Parsed mapping (empty for an empty file).
    :raises ConfigError: If the file is missing, unreadable or not a mapping.
    """
    try:
        with open(config_path) as f:
            raw_config = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"Configuration file not found: {config_path}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in configuration file: {e}") from e

    if raw_config is None:
        return {}
    if not isinstance(raw_config, dict):
        raise ConfigError("Configuration must be a YAML mapping")
    return raw_config


def _currency_setting(name: str, value: Any) -> str:
    if not isinstance(value, str) or not is_supported(value):
        raise ConfigError(f"Invalid currency for '{name}': {value!r}")
    return value.upper()


def load_convert_config(
    config_path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> ConvertConfig:
    """Resolve configuration from an optional YAML file and the environment.

    :param config_path: Path to YAML configuration file. Falls back to
        ``XERATES_CONFIG``; no file is read if neither is set.
    :param environ: Environment mapping, defaults to ``os.environ``.
    :returns: Validated ConvertConfig object.
    :raises ConfigError: If the file cannot be read or a value is invalid.
    """
    if environ is None:
        environ = os.environ

    if config_path is None:
        config_path = environ.get(ENV_CONFIG) or None

    raw_config: dict[str, Any] = {}
    if config_path is not None:
        raw_config = _read_config_file(Path(config_path))

    defaults = LookupDefaults()
    default_from = raw_config.get("default_from", defaults.default_from)
    default_to = raw_config.get("default_to", defaults.default_to)

    # Environment overrides file values
    default_from = environ.get(ENV_FROM) or default_from
    default_to = environ.get(ENV_TO) or default_to

    # Parse data_source
    data_source = raw_config.get("data_source", "xe")
    if data_source not in VALID_DATA_SOURCES:
        raise ConfigError(
            f"Invalid data_source '{data_source}'. "
            f"Valid options: {sorted(VALID_DATA_SOURCES)}"
        )

    # Parse source_params (optional)
    source_params = raw_config.get("source_params", {})
    if not isinstance(source_params, dict):
        raise ConfigError("'source_params' must be a mapping")

    log_level = str(raw_config.get("log_level", "WARNING")).upper()
    if log_level not in VALID_LOG_LEVELS:
        raise ConfigError(
            f"Invalid log_level '{log_level}'. Valid options: {sorted(VALID_LOG_LEVELS)}"
        )

    return ConvertConfig(
        defaults=LookupDefaults(
            default_from=_currency_setting("default_from", default_from),
            default_to=_currency_setting("default_to", default_to),
        ),
        data_source=data_source,
        source_params=source_params,
        log_level=log_level,
    )


def configure_logging(level: str) -> None:
    """Set up root logging for command-line use."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def format_quote(
    quote: RateQuote,
    mode: OutputMode = OutputMode.FULL,
    amount: float | None = None,
) -> str:
    """Render a quote for display.

    :param quote: Quote to render.
    :param mode: Output mode.
    :param amount: Amount of ``from_currency`` to convert, required for
        ``OutputMode.CONVERTED``.
    :returns: Single line of text without a trailing newline.
    """
    if mode == OutputMode.RATE_ONLY:
        return f"{quote.rate:.8f}"

    if mode == OutputMode.CONVERTED:
        if amount is None:
            raise ValueError("amount is required for converted output")
        return (
            f"{amount:,.2f} {quote.from_currency} = "
            f"{quote.convert(amount):,.2f} {quote.to_currency} ({quote.date})"
        )

    return (
        f"{quote.date} rate: {quote.rate:.8f} "
        f"{quote.to_currency} per 1 {quote.from_currency}"
    )
