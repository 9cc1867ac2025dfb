"""Home-currency and foreign-currency aggregation.

The same ``accumulate`` and ``transform_currency_amounts`` pair is used for
refuels, expenses and their combined totals.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import Decimal

from vehicle_reports.domain.constants import (
    EXPENSE_TYPE_EXPENSE,
    EXPENSE_TYPE_REFUEL,
)
from vehicle_reports.domain.models.report_rows import (
    CurrencyAmount,
    ForeignAmountRow,
)
from vehicle_reports.domain.services.normalization import (
    normalize_currency_code,
)
from vehicle_reports.utils.decimal_utils import coerce_decimal, round_money


def accumulate(
    totals: dict[str, CurrencyAmount],
    amount: CurrencyAmount,
) -> dict[str, CurrencyAmount]:
    """Merge ``amount`` into ``totals`` keyed by currency code.

    Args:
        totals: Accumulation map, updated in place.
        amount: Amount to merge.

    Returns:
        dict[str, CurrencyAmount]: The updated map.
    """
    currency = normalize_currency_code(amount.currency) or amount.currency
    existing = totals.get(currency)
    if existing is None:
        totals[currency] = CurrencyAmount(
            currency=currency,
            amount=coerce_decimal(amount.amount),
            records_count=amount.records_count,
        )
    else:
        totals[currency] = CurrencyAmount(
            currency=currency,
            amount=existing.amount + coerce_decimal(amount.amount),
            records_count=existing.records_count + amount.records_count,
        )
    return totals


def merge_currency_amounts(
    amounts: Iterable[CurrencyAmount],
) -> list[CurrencyAmount]:
    """Merge amounts sharing a currency, sorted by currency code."""
    totals: dict[str, CurrencyAmount] = {}
    for amount in amounts:
        accumulate(totals, amount)
    return [totals[currency] for currency in sorted(totals)]


def transform_currency_amounts(
    amounts: Iterable[CurrencyAmount],
) -> list[CurrencyAmount]:
    """Return output copies rounded to two decimals, sorted by currency."""
    return [
        CurrencyAmount(
            currency=amount.currency,
            amount=round_money(amount.amount),
            records_count=amount.records_count,
        )
        for amount in sorted(amounts, key=lambda item: item.currency)
    ]


def sum_records_count(amounts: Iterable[CurrencyAmount]) -> int:
    """Return the total record count across currencies."""
    return sum(amount.records_count for amount in amounts)


@dataclass
class CurrencyTotals:
    """Request-scoped accumulator for home and foreign amounts."""

    home_amount: Decimal = Decimal("0")
    home_records_count: int = 0
    foreign: dict[str, CurrencyAmount] = field(default_factory=dict)

    def add_home(self, amount: Decimal, records_count: int) -> None:
        """Add a home-currency amount."""
        self.home_amount += coerce_decimal(amount)
        self.home_records_count += records_count

    def add_foreign(self, amounts: Iterable[CurrencyAmount]) -> None:
        """Merge foreign-currency amounts."""
        for amount in amounts:
            accumulate(self.foreign, amount)

    def foreign_amounts(self) -> list[CurrencyAmount]:
        """Return the rounded foreign breakdown."""
        return transform_currency_amounts(self.foreign.values())

    @property
    def foreign_records_count(self) -> int:
        """Return the number of foreign-currency records."""
        return sum_records_count(self.foreign.values())


@dataclass(frozen=True)
class ForeignBreakdown:
    """Foreign amounts split into refuels, expenses and their total."""

    refuels: list[CurrencyAmount]
    expenses: list[CurrencyAmount]
    totals: list[CurrencyAmount]


def split_foreign_amounts(rows: Iterable[ForeignAmountRow]) -> ForeignBreakdown:
    """Split foreign rows by record type and merge them per currency.

    Rows of other record types (revenues, checkpoints) count only toward the
    combined totals.

    Args:
        rows: Foreign-currency rows tagged with an expense type.

    Returns:
        ForeignBreakdown: Unrounded merged amounts per section.
    """
    refuels: dict[str, CurrencyAmount] = {}
    expenses: dict[str, CurrencyAmount] = {}
    totals: dict[str, CurrencyAmount] = {}
    for row in rows:
        amount = CurrencyAmount(
            currency=row.currency,
            amount=row.amount,
            records_count=row.records_count,
        )
        if row.expense_type == EXPENSE_TYPE_REFUEL:
            accumulate(refuels, amount)
        elif row.expense_type == EXPENSE_TYPE_EXPENSE:
            accumulate(expenses, amount)
        accumulate(totals, amount)
    return ForeignBreakdown(
        refuels=[refuels[key] for key in sorted(refuels)],
        expenses=[expenses[key] for key in sorted(expenses)],
        totals=[totals[key] for key in sorted(totals)],
    )


__all__ = [
    "accumulate",
    "merge_currency_amounts",
    "transform_currency_amounts",
    "sum_records_count",
    "CurrencyTotals",
    "ForeignBreakdown",
    "split_foreign_amounts",
]
