"""Period parsing utilities."""

from datetime import date, datetime
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from budgetbook.domain.periods import PERIOD_PATTERN, period_for_date


def parse_period_input(period_str: Optional[str], today: Optional[date] = None) -> str:
    """Parse user input into a YYYY-MM period.

    Supports:
    - Exact periods: "2025-03"
    - Relative periods: "this month", "last month", "next month"
    - Month names: "March 2025", "mar 2025"

    Args:
        period_str: Period string; None or empty means this month
        today: Reference date (defaults to today)

    Returns:
        Period string in YYYY-MM format

    Raises:
        ValueError: If the string cannot be parsed
    """
    today = today or date.today()
    if period_str is None or not period_str.strip():
        return period_for_date(today)

    period_str = period_str.strip().lower()
    if PERIOD_PATTERN.match(period_str):
        return period_str

    relative_periods = {
        "this month": today,
        "last month": today - relativedelta(months=1),
        "next month": today + relativedelta(months=1),
    }
    if period_str in relative_periods:
        return period_for_date(relative_periods[period_str])

    try:
        # Day 1 default keeps "February 2025" from borrowing today's day
        parsed = date_parser.parse(period_str, default=datetime(today.year, today.month, 1))
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse period '{period_str}': {e}")
    return period_for_date(parsed.date())
