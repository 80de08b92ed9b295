"""Age and duration helpers."""

from datetime import date
from typing import Optional, Union

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta


def _as_date(value: Union[date, str]) -> date:
    if isinstance(value, date):
        return value
    # Malformed strings raise ValueError: they point at corrupted stored data.
    return date_parser.isoparse(value).date()


def age_in_months(birth_date: Union[date, str], today: Optional[date] = None) -> int:
    """Whole months elapsed since birth, never negative.

    A month only counts once its anniversary day has been reached.
    """
    birth = _as_date(birth_date)
    today = today or date.today()
    months = (today.year - birth.year) * 12 + (today.month - birth.month)
    if today.day < birth.day:
        months -= 1
    return max(months, 0)


def format_age(birth_date: Union[date, str], today: Optional[date] = None) -> str:
    """Human-readable age: years from one year on, months below.

    Examples:
        "1 anno", "4 anni", "1 mese", "11 mesi", "0 mesi"
    """
    months = age_in_months(birth_date, today)
    if months >= 12:
        years = months // 12
        return f"{years} {'anno' if years == 1 else 'anni'}"
    return f"{months} {'mese' if months == 1 else 'mesi'}"


def inscription_end_date(start_date: Union[date, str], months: int) -> date:
    """Start date advanced by calendar months.

    The day of month is kept when the target month is long enough, otherwise
    it is clamped to the month's last day (31 Jan + 1 month = 28/29 Feb).
    """
    return _as_date(start_date) + relativedelta(months=months)
