"""Tests for age and duration helpers."""

from datetime import date

import pytest

from workshopmgr.domain.age import age_in_months, format_age, inscription_end_date


@pytest.mark.parametrize(
    "birth_date,today,expected",
    [
        (date(2023, 3, 15), date(2024, 3, 15), "1 anno"),
        (date(2023, 3, 15), date(2024, 3, 14), "11 mesi"),
        (date(2024, 3, 15), date(2024, 3, 20), "0 mesi"),
        (date(2024, 2, 15), date(2024, 3, 15), "1 mese"),
        (date(2019, 9, 1), date(2024, 10, 1), "5 anni"),
    ],
)
def test_format_age(birth_date, today, expected):
    assert format_age(birth_date, today) == expected


def test_age_accepts_iso_strings():
    assert age_in_months("2023-03-15", today=date(2024, 3, 15)) == 12


def test_future_birth_date_is_zero():
    assert age_in_months(date(2025, 1, 1), today=date(2024, 1, 1)) == 0


def test_malformed_birth_date_raises():
    with pytest.raises(ValueError):
        age_in_months("not-a-date", today=date(2024, 1, 1))


@pytest.mark.parametrize(
    "start,months,expected",
    [
        (date(2024, 1, 15), 3, date(2024, 4, 15)),
        (date(2024, 1, 31), 1, date(2024, 2, 29)),
        (date(2023, 1, 31), 1, date(2023, 2, 28)),
        (date(2024, 10, 31), 4, date(2025, 2, 28)),
        ("2024-09-01", 10, date(2025, 7, 1)),
    ],
)
def test_inscription_end_date(start, months, expected):
    assert inscription_end_date(start, months) == expected
