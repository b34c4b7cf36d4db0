"""Date and accounting period parsing utilities."""

from datetime import date, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

PERIODS = (
    "this-month",
    "last-month",
    "this-quarter",
    "last-quarter",
    "this-year",
    "last-year",
)


def _quarter_start(day: date) -> date:
    return day.replace(month=3 * ((day.month - 1) // 3) + 1, day=1)


def _month_end(day: date) -> date:
    return day.replace(day=1) + relativedelta(months=1) - timedelta(days=1)


def parse_date(date_str: str, today: Optional[date] = None, dayfirst: bool = False) -> date:
    """Parse a date string into a date object.

    Supports absolute dates ("2024-01-15", "15/01/2024" with ``dayfirst``)
    and the relative forms used when closing books:
    - "today", "yesterday"
    - "start of month", "end of month", "end of last month"
    - "start of quarter", "end of last quarter"
    - "start of year", "end of last year"

    Args:
        date_str: Date string
        today: Reference date for relative forms (defaults to date.today())
        dayfirst: Interpret ambiguous numeric dates as day/month/year

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = today or date.today()

    month_start = today.replace(day=1)
    quarter_start = _quarter_start(today)
    year_start = today.replace(month=1, day=1)

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "start of month": month_start,
        "end of month": _month_end(today),
        "end of last month": month_start - timedelta(days=1),
        "start of quarter": quarter_start,
        "end of last quarter": quarter_start - timedelta(days=1),
        "start of year": year_start,
        "end of last year": year_start - timedelta(days=1),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    try:
        return date_parser.parse(date_str, dayfirst=dayfirst).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}") from e


def get_date_range(period: str, today: Optional[date] = None) -> tuple[date, date]:
    """Get start and end dates for an accounting period.

    "this-" periods end today; "last-" periods cover the full calendar period.

    Args:
        period: One of this-month, last-month, this-quarter, last-quarter,
            this-year, last-year

    Returns:
        Tuple of (start_date, end_date)

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = today or date.today()

    if period == "this-month":
        return today.replace(day=1), today

    elif period == "last-month":
        start_date = (today - relativedelta(months=1)).replace(day=1)
        return start_date, today.replace(day=1) - timedelta(days=1)

    elif period == "this-quarter":
        return _quarter_start(today), today

    elif period == "last-quarter":
        end_date = _quarter_start(today) - timedelta(days=1)
        return _quarter_start(end_date), end_date

    elif period == "this-year":
        return today.replace(month=1, day=1), today

    elif period == "last-year":
        year_start = today.replace(month=1, day=1)
        return year_start - relativedelta(years=1), year_start - timedelta(days=1)

    raise ValueError(f"Unknown period: '{period}'. Supported periods: {', '.join(PERIODS)}")
