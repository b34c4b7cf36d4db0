"""Tests for account code helpers."""

import pytest

from ledgerkit.utils.account_code import (
    code_sort_key,
    is_valid_code,
    level_from_code,
    parent_code,
    validate_code,
)


@pytest.mark.parametrize(
    "code,level,parent",
    [
        ("2.1.3.045", 4, "2.1.3"),
        ("5", 1, None),
        ("1.1", 2, "1"),
        ("1.1.01.001", 4, "1.1.01"),
    ],
)
def test_level_and_parent(code, level, parent):
    assert level_from_code(code) == level
    assert parent_code(code) == parent


@pytest.mark.parametrize("code", ["", "a.1", "1..2", "1.", ".1", "1-2", "1. 2"])
def test_invalid_codes(code):
    assert not is_valid_code(code)
    with pytest.raises(ValueError, match="Invalid account code"):
        validate_code(code)


def test_validate_code_strips_whitespace():
    assert validate_code("  1.1.01 ") == "1.1.01"


def test_sort_key_orders_numerically():
    codes = ["1.10", "1.9", "1.1.01", "1", "2"]
    assert sorted(codes, key=code_sort_key) == ["1", "1.1.01", "1.9", "1.10", "2"]
