"""Helpers turning report dataclasses into JSON-ready primitives."""

from dataclasses import fields, is_dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any


def to_primitive(value: Any) -> Any:
    """Convert a report value into JSON-compatible primitives.

    Decimals become strings so their rounding survives serialization, dates
    and datetimes become ISO 8601 strings and dataclasses become dicts in
    field declaration order.

    Args:
        value: Report, nested dataclass or leaf value.

    Returns:
        Any: Dicts, lists, strings, numbers, booleans or None.
    """
    if is_dataclass(value) and not isinstance(value, type):
        return {item.name: to_primitive(getattr(value, item.name)) for item in fields(value)}
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {str(key): to_primitive(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_primitive(item) for item in value]
    return value


def report_to_dict(report: Any) -> dict:
    """Render a report dataclass as a plain dictionary.

    Raises:
        TypeError: If ``report`` is not a dataclass instance.
    """
    if not is_dataclass(report) or isinstance(report, type):
        raise TypeError(f"Expected a report dataclass, got {type(report).__name__}")
    return to_primitive(report)


__all__ = ["report_to_dict", "to_primitive"]
