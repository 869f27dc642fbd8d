"""Calendar arithmetic on year-month periods.

A period is a ``YYYY-MM`` string. Every month of a series, every month view
and every scheduled date is derived from one.
"""

import calendar
import re
from datetime import date
from typing import Optional

from dateutil.relativedelta import relativedelta

from budgetbook.domain.errors import ValidationError

PERIOD_PATTERN = re.compile(r"^(\d{4})-(0[1-9]|1[0-2])$")

MIN_SEQUENCE_LENGTH = 1
MAX_SEQUENCE_LENGTH = 60


def parse_period(value: str) -> tuple[int, int]:
    """Split a period into (year, month).

    Args:
        value: Period string in YYYY-MM format

    Returns:
        Tuple of (year, month)

    Raises:
        ValidationError: If the period is malformed
    """
    match = PERIOD_PATTERN.match(value or "")
    if match is None:
        raise ValidationError(f"Invalid period '{value}' (expected YYYY-MM)")
    return int(match.group(1)), int(match.group(2))


def format_period(year: int, month: int) -> str:
    """Format (year, month) as a period string."""
    return f"{year:04d}-{month:02d}"


def period_for_date(value: date) -> str:
    """Return the period a date falls into."""
    return format_period(value.year, value.month)


def first_day(period: str) -> date:
    """Return the first day of a period."""
    year, month = parse_period(period)
    return date(year, month, 1)


def shift_period(period: str, months: int) -> str:
    """Move a period forward (or backward) by a number of months."""
    return period_for_date(first_day(period) + relativedelta(months=months))


def sequence_periods(start: str, count: int) -> list[str]:
    """Return ``count`` consecutive periods beginning at ``start``.

    Args:
        start: First period (inclusive)
        count: Number of periods, between 1 and 60

    Returns:
        Ordered list of periods, one calendar month apart

    Raises:
        ValidationError: If start is malformed or count is out of range
    """
    if not MIN_SEQUENCE_LENGTH <= count <= MAX_SEQUENCE_LENGTH:
        raise ValidationError(
            f"Period count must be between {MIN_SEQUENCE_LENGTH} and "
            f"{MAX_SEQUENCE_LENGTH}, got {count}"
        )
    origin = first_day(start)
    return [period_for_date(origin + relativedelta(months=i)) for i in range(count)]


def validate_day(day: int) -> int:
    if not 1 <= day <= 31:
        raise ValidationError(f"Day of month must be between 1 and 31, got {day}")
    return day


def scheduled_date(period: str, day: Optional[int]) -> Optional[date]:
    """Project a day-of-month onto a period.

    Days past the end of the month are clamped to its last day, so day 31
    lands on 2025-02-28.
    """
    if day is None:
        return None
    validate_day(day)
    year, month = parse_period(period)
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day, last_day))
