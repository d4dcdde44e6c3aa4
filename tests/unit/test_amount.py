"""
Unit tests for amount bounds and input validation.

Tests verify:
1. (is_valid, error) validators
2. check_amount only accepts uint256 ints
3. coerce_amount converts caller-native numbers or rejects them
"""

from decimal import Decimal

import pytest

from buidl.core.token import ValueOutOfBounds, check_amount, coerce_amount
from buidl.core.token.amount import fits
from buidl.utils.validation import (
    MAX_AMOUNT,
    validate_address,
    validate_amount,
    validate_integer,
)


class TestValidators:
    """Tests for tuple-returning validators."""

    def test_valid_amount(self):
        assert validate_amount(10) == (True, "")

    def test_negative_amount(self):
        valid, error = validate_amount(-1)
        assert not valid
        assert ">= 0" in error

    def test_huge_amount_message(self):
        valid, error = validate_amount(10**5000)
        assert not valid
        assert "bits given" in error

    def test_amount_above_uint256(self):
        valid, error = validate_amount(MAX_AMOUNT + 1)
        assert not valid
        assert "<=" in error

    def test_bool_is_not_an_amount(self):
        valid, error = validate_amount(True)
        assert not valid
        assert "bool" in error

    def test_custom_bounds(self):
        assert validate_integer(5, "x", 0, 10)[0]
        assert not validate_integer(11, "x", 0, 10)[0]

    def test_valid_address(self):
        assert validate_address("0x" + "ab" * 20) == (True, "")

    def test_short_address(self):
        assert not validate_address("0x1234")[0]

    def test_non_string_address(self):
        valid, error = validate_address(b"\x00" * 20)
        assert not valid
        assert "bytes" in error


class TestCheckAmount:
    """Tests for strict amount checks."""

    @pytest.mark.parametrize("value", [0, 1, 1000, MAX_AMOUNT])
    def test_accepts_uint256(self, value):
        assert check_amount(value) == value

    @pytest.mark.parametrize("value", [-1, MAX_AMOUNT + 1, 1.0, "1", None, False])
    def test_rejects(self, value):
        with pytest.raises(ValueOutOfBounds) as exc:
            check_amount(value)
        assert exc.value.value is value or exc.value.value == value

    def test_field_name_reported(self):
        with pytest.raises(ValueOutOfBounds) as exc:
            check_amount(-5, "initial_supply")
        assert exc.value.field == "initial_supply"
        assert exc.value.reason == "value out-of-bounds"

    def test_huge_int_rejected_with_typed_error(self):
        # wider than the int-to-str digit limit
        with pytest.raises(ValueOutOfBounds) as exc:
            check_amount(10**5000)
        assert exc.value.field == "amount"

    def test_fits(self):
        assert fits(0)
        assert fits(MAX_AMOUNT)
        assert not fits(-1)
        assert not fits(MAX_AMOUNT + 1)


class TestCoerceAmount:
    """Tests for boundary conversion of caller-native numbers."""

    @pytest.mark.parametrize("value,expected", [
        (10, 10),
        (10.0, 10),
        (Decimal("10"), 10),
        ("10", 10),
        (" 42 ", 42),
        ("1e3", 1000),
        (str(MAX_AMOUNT), MAX_AMOUNT),
    ])
    def test_converts(self, value, expected):
        assert coerce_amount(value) == expected

    @pytest.mark.parametrize("value", [
        -1,
        -1.0,
        "-1",
        1.5,
        Decimal("0.1"),
        "abc",
        "",
        float("nan"),
        float("inf"),
        True,
        None,
        [1],
        MAX_AMOUNT + 1,
        str(MAX_AMOUNT + 1),
    ])
    def test_rejects(self, value):
        with pytest.raises(ValueOutOfBounds):
            coerce_amount(value)

    @pytest.mark.parametrize("value", [
        "1e78",
        "1e1000000",
        "1e100000000",
        Decimal("1e100000000"),
    ])
    def test_rejects_huge_magnitudes(self, value):
        with pytest.raises(ValueOutOfBounds):
            coerce_amount(value)

    def test_rejects_huge_int(self):
        with pytest.raises(ValueOutOfBounds):
            coerce_amount(10**5000)

    def test_zero_with_huge_exponent(self):
        assert coerce_amount("0e100000000") == 0

    def test_tiny_fraction_rejected(self):
        with pytest.raises(ValueOutOfBounds):
            coerce_amount("1e-100000000")
