"""Normalization of loosely formatted date input.

Dates are accepted as ``YYYY MM DD`` or ``YY MM DD`` with any run of hyphens,
slashes or dots between the groups (or none at all), and are returned in the
canonical ``YYYY-MM-DD`` form. "Today" is always evaluated in UTC.
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime, timezone

from xerates.exceptions import (DateImpossibleError, DateInFutureError,
                                DateMalformedError)
from xerates.types import CalendarDate

logger = logging.getLogger(__name__)

DATE_PATTERN = re.compile(r"([0-9]{4}|[0-9]{2})[-/.]*([0-9]{2})[-/.]*([0-9]{2})")

# Two-digit years above this value belong to the 1900s, the rest to the 2000s.
CENTURY_PIVOT = 80


def utc_today() -> date:
    """Return the current calendar date in UTC."""
    return datetime.now(timezone.utc).date()


def expand_year(digits: str) -> int:
    """Expand a two- or four-digit year group to a full year.

    :param digits: Year digits as matched from the input.
    :returns: Four-digit year.
    """
    year = int(digits)
    if len(digits) == 4:
        return year
    if year >= CENTURY_PIVOT:
        return 1900 + year
    return 2000 + year


def normalize_date(value: str, reference_today: date | None = None) -> CalendarDate:
    """Parse a free-form date token into a canonical ``YYYY-MM-DD`` date.

    :param value: Date input such as ``2020-01-31``, ``2020/01/31``,
        ``20.01.31`` or ``20200131``.
    :param reference_today: Latest acceptable date, defaults to today in UTC.
    :returns: Canonical date string.
    :raises DateMalformedError: If the input has no accepted date shape.
    :raises DateImpossibleError: If the input is not a real calendar date.
    :raises DateInFutureError: If the date is after ``reference_today``.
    """
    match = DATE_PATTERN.fullmatch(value)
    if match is None:
        raise DateMalformedError(
            value, f"No valid date provided: '{value}', expected YYYY-MM-DD"
        )

    year_digits, month_digits, day_digits = match.groups()
    year = expand_year(year_digits)

    try:
        parsed = date(year, int(month_digits), int(day_digits))
    except ValueError as e:
        raise DateImpossibleError(
            value, f"Not a calendar date: '{value}' ({e})"
        ) from e

    if reference_today is None:
        reference_today = utc_today()

    if parsed > reference_today:
        raise DateInFutureError(
            value,
            f"Date {parsed.isoformat()} is after today ({reference_today.isoformat()})",
        )

    canonical = CalendarDate(parsed.isoformat())
    logger.debug("Normalized date %r to %s", value, canonical)
    return canonical
