"""Tests for money utilities"""
from decimal import Decimal

import pytest

from shopping_cart.services.money import (
    add,
    divide,
    is_numeric,
    number_format,
    percent,
    round_money,
    to_decimal,
)


class TestToDecimal:
    """Tests for to_decimal."""

    def test_float_goes_through_str(self):
        """Test floats keep their printed value."""
        assert to_decimal(0.1) == Decimal("0.1")

    @pytest.mark.parametrize("value", [None, "abc", object()])
    def test_invalid_is_zero(self, value):
        """Test junk converts to zero."""
        assert to_decimal(value) == Decimal("0")

    def test_strips_strings(self):
        assert to_decimal(" 12.50 ") == Decimal("12.50")


class TestIsNumeric:
    """Tests for is_numeric."""

    @pytest.mark.parametrize("value", [1, 0, -3, 1.5, Decimal("2.5"), "10", "10.25", " 7 "])
    def test_numeric(self, value):
        assert is_numeric(value) is True

    @pytest.mark.parametrize("value", [None, True, "", "abc", "1,5", [], float("inf"), Decimal("NaN")])
    def test_not_numeric(self, value):
        assert is_numeric(value) is False


class TestRounding:
    """Tests for round_money and percent."""

    def test_half_up(self):
        """Test half-up rounding to cents."""
        assert round_money("2.345") == Decimal("2.35")
        assert round_money("2.344") == Decimal("2.34")

    def test_places(self):
        assert round_money("2.5", 0) == Decimal("3")

    def test_percent(self):
        assert percent("10.00", 21) == Decimal("2.1000")


class TestNumberFormat:
    """Tests for number_format."""

    @pytest.mark.parametrize(
        "value,args,expected",
        [
            (Decimal("6000"), (2, ",", "."), "6.000,00"),
            (5000, (2, ",", ""), "5000,00"),
            (Decimal("1234567.891"), (2, ".", ","), "1,234,567.89"),
            (Decimal("0.005"), (2, ".", ","), "0.01"),
            (Decimal("1999.5"), (0, ".", " "), "2 000"),
            (0, (2, ".", ","), "0.00"),
        ],
    )
    def test_format(self, value, args, expected):
        """Test separators and rounding."""
        assert number_format(value, *args) == expected

    def test_defaults(self):
        assert number_format(Decimal("1234.5")) == "1,234.50"


class TestArithmetic:
    """Tests for add and divide."""

    def test_add_mixed_inputs(self):
        assert add("0.1", 0.2) == Decimal("0.3")

    def test_divide_by_zero_is_zero(self):
        assert divide(10, 0) == Decimal("0")
        assert divide(10, 4) == Decimal("2.5")
