#!/usr/bin/env python3
"""Command-line interface for historical exchange-rate lookups.

Supported invocations:

    xerates DATE
    xerates FROM TO DATE
    xerates -f FROM -t TO -d DATE [-a AMOUNT | --rate-only]
"""

from __future__ import annotations

import argparse
import logging
import sys

from xerates.commands.convert import (configure_logging, format_quote,
                                      load_convert_config)
from xerates.currencies import SUPPORTED_CURRENCIES
from xerates.data.sources import resolve_rate_source
from xerates.exceptions import ConfigError, DateError, XeRatesError
from xerates.pipeline import RateLookup
from xerates.types import OutputMode

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="xerates",
        description="Historical exchange rates from the xe.com currency tables",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Short forms are also supported:\n"
            "  xerates DATE\n"
            "  xerates FROM TO DATE\n\n"
            "DATE may be YYYY-MM-DD, YYYY/MM/DD, YYYY.MM.DD, YYYYMMDD or the\n"
            "same with a two-digit year (80-99 -> 19xx, 00-79 -> 20xx)."
        ),
    )
    parser.add_argument(
        "positionals",
        nargs="*",
        metavar="ARG",
        help="DATE, or FROM TO DATE",
    )
    parser.add_argument(
        "-f", "--from", dest="from_code", help="Convert FROM (default: RUB)"
    )
    parser.add_argument("-t", "--to", dest="to_code", help="Convert TO (default: USD)")
    parser.add_argument(
        "-d", "--date", dest="date", help="Date to get the rate for (YYYY-MM-DD)"
    )
    output = parser.add_mutually_exclusive_group()
    output.add_argument(
        "-a", "--amount", type=float, help="Amount of FROM currency to convert"
    )
    output.add_argument(
        "--rate-only", action="store_true", help="Print only the bare rate"
    )
    parser.add_argument("--config", help="Path to YAML configuration file")
    parser.add_argument(
        "--list-currencies",
        action="store_true",
        help="List supported currency codes and exit",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    return parser


def resolve_request(
    args: argparse.Namespace,
) -> tuple[str | None, str | None, str] | None:
    """Map the accepted argument shapes to ``(from, to, date)``.

    :returns: The request, or None if the arguments match no accepted shape.
    """
    from_code, to_code, date_value = args.from_code, args.to_code, args.date
    positionals = args.positionals

    if date_value is not None:
        if positionals:
            return None
        return from_code, to_code, date_value

    if len(positionals) == 1:
        return from_code, to_code, positionals[0]

    if len(positionals) == 3 and from_code is None and to_code is None:
        return positionals[0], positionals[1], positionals[2]

    return None


def cmd_list_currencies() -> int:
    """Print the supported currency codes."""
    codes = sorted(SUPPORTED_CURRENCIES)
    for i in range(0, len(codes), 10):
        print(" ".join(codes[i : i + 10]))
    return 0


def cmd_convert(args: argparse.Namespace, parser: argparse.ArgumentParser) -> int:
    """Look up a rate and print it in the requested form."""
    request = resolve_request(args)
    if request is None:
        parser.print_help(sys.stderr)
        return 2
    from_code, to_code, date_value = request

    try:
        config = load_convert_config(args.config)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    configure_logging("DEBUG" if args.verbose else config.log_level)

    if from_code is None:
        from_code = config.defaults.default_from
    if to_code is None:
        to_code = config.defaults.default_to
    from_code, to_code = from_code.upper(), to_code.upper()
    if from_code and from_code == to_code:
        print(f"Error: FROM and TO must differ, both are {from_code}", file=sys.stderr)
        return 1

    try:
        source = resolve_rate_source(config)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    lookup = RateLookup(config.defaults, source)

    try:
        quote = lookup.lookup(from_code, to_code, date_value)
    except DateError as e:
        print(f"Error: {e}", file=sys.stderr)
        print("Date must be in YYYY-MM-DD format (or a short form, see --help)", file=sys.stderr)
        return 1
    except XeRatesError as e:
        logger.debug("Lookup failed with %s", e.kind)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.rate_only:
        mode = OutputMode.RATE_ONLY
    elif args.amount is not None:
        mode = OutputMode.CONVERTED
    else:
        mode = OutputMode.FULL

    print(format_quote(quote, mode, args.amount))
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.list_currencies:
        return cmd_list_currencies()

    return cmd_convert(args, parser)


if __name__ == "__main__":
    sys.exit(main())
