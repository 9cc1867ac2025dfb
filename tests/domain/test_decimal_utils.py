"""Tests for Decimal helpers."""

from decimal import Decimal

from vehicle_reports.utils.decimal_utils import (
    coerce_decimal,
    coerce_optional_decimal,
    percentage,
    round_money,
    round_price,
    round_whole,
    safe_divide,
)


def test_coerce_decimal_handles_floats_and_none():
    """Floats should go through str and None should become zero."""
    assert coerce_decimal(1.1) == Decimal("1.1")
    assert coerce_decimal(None) == Decimal("0")
    assert coerce_optional_decimal(None) is None


def test_rounding_is_half_up():
    """Ties should round away from zero."""
    assert round_money(Decimal("2.345")) == Decimal("2.35")
    assert round_price(Decimal("1.2345")) == Decimal("1.235")
    assert round_whole(Decimal("10.5")) == Decimal("11")
    assert round_whole(None) is None


def test_safe_divide_returns_none_for_zero_or_missing_divisor():
    """Division by zero or by nothing should yield None."""
    assert safe_divide(Decimal("10"), Decimal("0")) is None
    assert safe_divide(Decimal("10"), None) is None
    assert safe_divide(None, Decimal("2")) is None
    assert safe_divide(Decimal("10"), Decimal("4")) == Decimal("2.5")


def test_percentage_is_unrounded():
    """Percentages should keep full precision."""
    assert percentage(Decimal("1"), Decimal("3")) == Decimal("1") / Decimal("3") * 100
    assert percentage(Decimal("1"), Decimal("0")) is None
