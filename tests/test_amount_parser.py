"""Tests for amount parsing."""

import pytest
from decimal import Decimal

from workshopmgr.utils.amount_parser import parse_amount


@pytest.mark.parametrize(
    "text,expected",
    [
        ("80", Decimal("80")),
        ("123.45", Decimal("123.45")),
        ("€123.45", Decimal("123.45")),
        ("123,45 €", Decimal("123.45")),
        ("12,5", Decimal("12.5")),
        ("1,234.56", Decimal("1234.56")),
        ("1.234,56", Decimal("1234.56")),
        ("1,234", Decimal("1234")),
        ("-40.00", Decimal("-40.00")),
        ("(15.00)", Decimal("-15.00")),
    ],
)
def test_parse_amount(text, expected):
    assert parse_amount(text) == expected


@pytest.mark.parametrize("text", ["", "   ", "abc", "12..3", "NaN", "Infinity"])
def test_invalid_amounts(text):
    with pytest.raises(ValueError):
        parse_amount(text)
