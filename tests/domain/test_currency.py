"""Tests for currency aggregation."""

from decimal import Decimal

from vehicle_reports.domain.constants import (
    EXPENSE_TYPE_EXPENSE,
    EXPENSE_TYPE_REFUEL,
    EXPENSE_TYPE_REVENUE,
)
from vehicle_reports.domain.models import CurrencyAmount, ForeignAmountRow
from vehicle_reports.domain.services.currency import (
    CurrencyTotals,
    merge_currency_amounts,
    split_foreign_amounts,
    sum_records_count,
    transform_currency_amounts,
)


def _amount(currency: str, amount: str, count: int) -> CurrencyAmount:
    return CurrencyAmount(currency=currency, amount=Decimal(amount), records_count=count)


def test_merge_is_order_independent():
    """Merging in any order should give the same totals."""
    amounts = [
        _amount("EUR", "10.10", 1),
        _amount("cad", "5.00", 2),
        _amount("EUR", "2.005", 1),
    ]

    forward = merge_currency_amounts(amounts)
    backward = merge_currency_amounts(reversed(amounts))

    assert forward == backward
    assert [item.currency for item in forward] == ["CAD", "EUR"]
    assert forward[1].amount == Decimal("12.105")
    assert forward[1].records_count == 2


def test_transform_rounds_and_sorts():
    """Output copies should be rounded half-up and sorted."""
    result = transform_currency_amounts(
        [_amount("GBP", "1.005", 1), _amount("EUR", "3.333", 2)]
    )

    assert result == [_amount("EUR", "3.33", 2), _amount("GBP", "1.01", 1)]


def test_split_foreign_amounts_keeps_counts_consistent():
    """Section counts should add up and unknown types only reach totals."""
    rows = [
        ForeignAmountRow("EUR", EXPENSE_TYPE_REFUEL, Decimal("40"), 2),
        ForeignAmountRow("EUR", EXPENSE_TYPE_EXPENSE, Decimal("15"), 1),
        ForeignAmountRow("GBP", EXPENSE_TYPE_EXPENSE, Decimal("8"), 1),
        ForeignAmountRow("GBP", EXPENSE_TYPE_REVENUE, Decimal("100"), 1),
    ]

    breakdown = split_foreign_amounts(rows)

    assert sum_records_count(breakdown.refuels) == 2
    assert sum_records_count(breakdown.expenses) == 2
    assert sum_records_count(breakdown.totals) == 5
    totals = {item.currency: item.amount for item in breakdown.totals}
    assert totals == {"EUR": Decimal("55"), "GBP": Decimal("108")}


def test_currency_totals_accumulates_home_and_foreign():
    """The accumulator should track both home and foreign amounts."""
    totals = CurrencyTotals()

    totals.add_home(Decimal("10.50"), 2)
    totals.add_home(Decimal("4.25"), 1)
    totals.add_foreign([_amount("EUR", "3.004", 1)])
    totals.add_foreign([_amount("eur", "1", 2)])

    assert totals.home_amount == Decimal("14.75")
    assert totals.home_records_count == 3
    assert totals.foreign_amounts() == [_amount("EUR", "4.00", 3)]
    assert totals.foreign_records_count == 3
