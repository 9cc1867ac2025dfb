"""Tests for report serialization helpers."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum

import pytest

from vehicle_reports.utils.serialization import report_to_dict, to_primitive


class _Level(Enum):
    HIGH = "high"


@dataclass(frozen=True)
class _Line:
    amount: Decimal
    level: _Level


@dataclass(frozen=True)
class _Report:
    day: date
    generated_at: datetime
    lines: tuple[_Line, ...]
    totals: dict
    note: str | None = None


def test_report_to_dict_converts_nested_values():
    """Nested dataclasses, decimals, dates and enums become primitives."""
    report = _Report(
        day=date(2024, 5, 1),
        generated_at=datetime(2024, 5, 1, 12, 30),
        lines=(_Line(Decimal("12.50"), _Level.HIGH),),
        totals={"USD": Decimal("12.50")},
    )

    assert report_to_dict(report) == {
        "day": "2024-05-01",
        "generated_at": "2024-05-01T12:30:00",
        "lines": [{"amount": "12.50", "level": "high"}],
        "totals": {"USD": "12.50"},
        "note": None,
    }


def test_report_to_dict_rejects_non_dataclasses():
    """Only dataclass instances can be rendered as reports."""
    with pytest.raises(TypeError):
        report_to_dict({"a": 1})
    with pytest.raises(TypeError):
        report_to_dict(_Report)


def test_to_primitive_keeps_plain_values():
    """Strings, numbers and booleans are returned unchanged."""
    assert to_primitive(3) == 3
    assert to_primitive(True) is True
    assert to_primitive("x") == "x"
