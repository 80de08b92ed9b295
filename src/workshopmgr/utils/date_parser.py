"""Date and time parsing utilities."""

from datetime import date, time, timedelta
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

PERIODS = ("this-month", "this-quarter", "this-year", "last-month", "last-year")


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports various formats including relative dates:
    - ISO dates: "2024-01-15"
    - Day-first dates: "15/01/2024"
    - Relative dates: "today", "yesterday", "tomorrow", "this month", "last year", etc.

    Args:
        date_str: Date string in various formats

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    if date_str.startswith("last "):
        period = date_str[5:]
        if period == "month":
            return (today - relativedelta(months=1)).replace(day=1)
        elif period == "year":
            return today.replace(month=1, day=1) - relativedelta(years=1)

    elif date_str.startswith("this "):
        period = date_str[5:]
        if period == "month":
            return today.replace(day=1)
        elif period == "quarter":
            return _quarter_start(today)
        elif period == "year":
            return today.replace(month=1, day=1)

    elif date_str.startswith("next "):
        period = date_str[5:]
        if period == "month":
            return (today + relativedelta(months=1)).replace(day=1)
        elif period == "year":
            return today.replace(month=1, day=1) + relativedelta(years=1)

    # Slash dates are written day first
    try:
        dt = date_parser.parse(date_str, dayfirst="/" in date_str)
        return dt.date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_time(time_str: str) -> time:
    """Parse a clock time such as "17:00" or "9.30".

    Raises:
        ValueError: If time string cannot be parsed
    """
    cleaned = time_str.strip().replace(".", ":")
    try:
        parsed = time.fromisoformat(cleaned if len(cleaned) > 4 else cleaned.zfill(5))
    except ValueError as e:
        raise ValueError(f"Could not parse time '{time_str}': {e}")
    return parsed.replace(second=0, microsecond=0)


def _quarter_start(day: date) -> date:
    return day.replace(month=3 * ((day.month - 1) // 3) + 1, day=1)


def get_date_range(period: str) -> tuple[date, date]:
    """Get start and end dates for a specified period.

    Current periods run up to today; past periods are complete.

    Args:
        period: Period string (this-month, this-quarter, this-year, last-month, last-year)

    Returns:
        Tuple of (start_date, end_date) for the specified period

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = date.today()

    if period == "this-month":
        return (today.replace(day=1), today)

    elif period == "this-quarter":
        return (_quarter_start(today), today)

    elif period == "this-year":
        return (today.replace(month=1, day=1), today)

    elif period == "last-month":
        start_date = (today - relativedelta(months=1)).replace(day=1)
        end_date = today.replace(day=1) - timedelta(days=1)
        return (start_date, end_date)

    elif period == "last-year":
        start_date = today.replace(month=1, day=1) - relativedelta(years=1)
        end_date = today.replace(month=1, day=1) - timedelta(days=1)
        return (start_date, end_date)

    else:
        raise ValueError(f"Unknown period: '{period}'. Supported periods: {', '.join(PERIODS)}")
