"""Tests for money parsing."""

from decimal import Decimal

import pytest

from ledgerkit.utils.amount_parser import parse_amount, parse_non_negative_amount


@pytest.mark.parametrize(
    "text,expected",
    [
        ("123.45", "123.45"),
        ("$1,234.56", "1234.56"),
        ("1.234,56", "1234.56"),
        ("ARS 1.234.567", "1234567.00"),
        ("1234,5", "1234.50"),
        ("(50.00)", "-50.00"),
        ("-10", "-10.00"),
        ("2.345", "2.35"),
    ],
)
def test_parse_amount(text, expected):
    assert parse_amount(text) == Decimal(expected)


@pytest.mark.parametrize("text", ["", "   ", "abc", "1.2.3,4,5"])
def test_parse_amount_rejects_garbage(text):
    with pytest.raises(ValueError):
        parse_amount(text)


def test_non_negative_amount():
    assert parse_non_negative_amount("") == Decimal("0.00")
    assert parse_non_negative_amount("10") == Decimal("10.00")
    with pytest.raises(ValueError, match="must not be negative"):
        parse_non_negative_amount("-1")
