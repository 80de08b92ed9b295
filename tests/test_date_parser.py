"""Tests for date and time parsing."""

import pytest
from datetime import date, time, timedelta
from dateutil.relativedelta import relativedelta

from workshopmgr.utils.date_parser import PERIODS, get_date_range, parse_date, parse_time


@pytest.mark.parametrize(
    "text,expected",
    [
        ("2024-01-15", date(2024, 1, 15)),
        ("15/01/2024", date(2024, 1, 15)),
        ("01/02/2024", date(2024, 2, 1)),
        (" 2024-10-01 ", date(2024, 10, 1)),
    ],
)
def test_parse_absolute_date(text, expected):
    assert parse_date(text) == expected


def test_parse_relative_days():
    today = date.today()
    assert parse_date("today") == today
    assert parse_date("Yesterday") == today - timedelta(days=1)
    assert parse_date("tomorrow") == today + timedelta(days=1)


def test_parse_relative_periods():
    today = date.today()
    assert parse_date("this month") == today.replace(day=1)
    assert parse_date("this year") == date(today.year, 1, 1)
    assert parse_date("last year") == date(today.year - 1, 1, 1)
    assert parse_date("last month") == (today - relativedelta(months=1)).replace(day=1)
    assert parse_date("next month") == (today + relativedelta(months=1)).replace(day=1)


def test_parse_this_quarter():
    result = parse_date("this quarter")
    today = date.today()
    assert result.day == 1
    assert result.month in (1, 4, 7, 10)
    assert result <= today < result + relativedelta(months=3)


@pytest.mark.parametrize("text", ["not a date", "2024-13-45", "31/02/2024"])
def test_parse_invalid_date(text):
    with pytest.raises(ValueError):
        parse_date(text)


@pytest.mark.parametrize(
    "text,expected",
    [("17:00", time(17, 0)), ("9:30", time(9, 30)), ("9.30", time(9, 30)), ("23:59", time(23, 59))],
)
def test_parse_time(text, expected):
    assert parse_time(text) == expected


@pytest.mark.parametrize("text", ["25:00", "half past"])
def test_parse_invalid_time(text):
    with pytest.raises(ValueError):
        parse_time(text)


def test_current_periods_end_today():
    today = date.today()
    for period in ("this-month", "this-quarter", "this-year"):
        start, end = get_date_range(period)
        assert end == today
        assert start <= today


def test_last_month_is_complete():
    start, end = get_date_range("last-month")
    assert start.day == 1
    assert end == start + relativedelta(months=1, days=-1)


def test_last_year_is_complete():
    start, end = get_date_range("last-year")
    assert start == date(date.today().year - 1, 1, 1)
    assert end == date(date.today().year - 1, 12, 31)


def test_every_period_is_supported():
    for period in PERIODS:
        get_date_range(period)


def test_unknown_period():
    with pytest.raises(ValueError, match="Unknown period"):
        get_date_range("next-week")
