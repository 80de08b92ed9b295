"""Workshop scheduling math.

Pure functions deriving a workshop series' repetitions, end date and short
identifying code. Nothing here touches the store: callers persist the
derived values themselves.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional, Union

from dateutil import parser as date_parser

from workshopmgr.domain.entities import DayOfWeek, WorkshopType
from workshopmgr.domain.errors import ValidationError

SESSIONS_PER_MONTH = 4
SHORT_NAME_LENGTH = 4
DAY_CODE_LENGTH = 3

FIXED_REPETITIONS: dict[WorkshopType, int] = {
    WorkshopType.OPEN_DAY: 1,
    WorkshopType.EVENT: 1,
    WorkshopType.ONE_MONTH: 4,
    WorkshopType.TWO_MONTHS: 8,
    WorkshopType.THREE_MONTHS: 12,
}

MANUAL_DURATION_TYPES = frozenset({WorkshopType.SCHOOL, WorkshopType.CAMPUS})

_CONSONANTS = frozenset("BCDFGHJKLMNPQRSTVWXYZ")


@dataclass(frozen=True)
class Schedule:
    """Derived schedule of a workshop series.

    ``end_date`` is None when the start date could not be read; such a
    schedule is incomplete and must not be saved as-is.
    """

    repetitions: int
    end_date: Optional[date]

    @property
    def is_complete(self) -> bool:
        return self.end_date is not None and self.repetitions > 0


def requires_duration(workshop_type: WorkshopType) -> bool:
    """Return True for types whose length is set by an explicit month count."""
    return workshop_type in MANUAL_DURATION_TYPES


def count_repetitions(
    workshop_type: WorkshopType, duration_in_months: Optional[int] = None
) -> int:
    """Number of weekly sessions in a workshop series.

    Args:
        workshop_type: Workshop type
        duration_in_months: Length in months, only used by manually clocked types

    Returns:
        Session count; 0 when a manually clocked type has no duration yet

    Raises:
        ValidationError: If a manually clocked type has a non-positive duration
    """
    if workshop_type in FIXED_REPETITIONS:
        return FIXED_REPETITIONS[workshop_type]

    if duration_in_months is None:
        return 0
    if duration_in_months <= 0:
        raise ValidationError(
            f"Duration for '{workshop_type.value}' workshops must be a positive number of months"
        )
    return duration_in_months * SESSIONS_PER_MONTH


def _coerce_date(value: Union[date, str, None]) -> Optional[date]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date_parser.isoparse(value.strip()).date()
    except (ValueError, TypeError, AttributeError):
        return None


def compute_end_date(start_date: date, repetitions: int) -> date:
    """Date of the last weekly occurrence of a series."""
    if repetitions <= 0:
        return start_date
    return start_date + timedelta(weeks=repetitions - 1)


def compute_schedule(
    workshop_type: WorkshopType,
    start_date: Union[date, str, None],
    duration_in_months: Optional[int] = None,
) -> Schedule:
    """Compute repetitions and end date for a workshop series.

    An unreadable start date yields an incomplete schedule (0 repetitions, no
    end date) rather than an error, so half-filled forms can be recomputed
    freely.
    """
    start = _coerce_date(start_date)
    if start is None:
        return Schedule(repetitions=0, end_date=None)

    repetitions = count_repetitions(workshop_type, duration_in_months)
    return Schedule(repetitions=repetitions, end_date=compute_end_date(start, repetitions))


def session_dates(start_date: date, repetitions: int) -> list[date]:
    """All weekly occurrence dates of a series, first to last."""
    return [start_date + timedelta(weeks=week) for week in range(max(repetitions, 0))]


def consonant_short_name(name: str, length: int = SHORT_NAME_LENGTH) -> str:
    """Uppercased leading ASCII consonants of a name.

    Vowels, accented letters, digits, spaces and punctuation are dropped
    before truncation, so "Palestra Comunale" becomes "PLST".
    """
    consonants = [char for char in name.upper() if char in _CONSONANTS]
    return "".join(consonants[:length])


def day_code(day_of_week: Union[DayOfWeek, str]) -> str:
    """Three-letter uppercase abbreviation of a weekday name."""
    label = day_of_week.value if isinstance(day_of_week, DayOfWeek) else day_of_week
    return label[:DAY_CODE_LENGTH].upper()


def workshop_code(
    location_name: str, day_of_week: Union[DayOfWeek, str], start_time: time
) -> str:
    """Short machine-readable code, e.g. ``PLST-LUN-17:00``."""
    return (
        f"{consonant_short_name(location_name)}-"
        f"{day_code(day_of_week)}-"
        f"{start_time.strftime('%H:%M')}"
    )


def default_end_time(start_time: time) -> time:
    """Start time plus one hour, wrapping past midnight."""
    return time((start_time.hour + 1) % 24, start_time.minute)
