"""Tests for scope resolution and the concurrent fetch helper."""

import asyncio
from datetime import date
from unittest.mock import AsyncMock, MagicMock

import pytest

from vehicle_reports.application.errors import (
    ReportDataFetchError,
    ReportRequestError,
)
from vehicle_reports.application.use_cases.report_scope import (
    ReportUseCase,
    fan_out,
    period_days,
    validate_request,
)
from vehicle_reports.domain.models import ReportRequest, UserPreferences


def _preferences() -> UserPreferences:
    return UserPreferences("km", "l", "l100km", "USD")


def _use_case(vehicle_ids: list[str] | None = None) -> ReportUseCase:
    preferences_repository = MagicMock()
    preferences_repository.fetch_preferences = AsyncMock(return_value=_preferences())
    vehicle_repository = MagicMock()
    vehicle_repository.list_vehicle_ids = AsyncMock(
        return_value=vehicle_ids if vehicle_ids is not None else ["b", "a", "a"]
    )
    return ReportUseCase(
        report_repository=MagicMock(),
        vehicle_repository=vehicle_repository,
        preferences_repository=preferences_repository,
        logger=MagicMock(),
    )


def test_period_days_is_inclusive():
    """A single-day range should count as one day."""
    assert period_days(date(2024, 1, 1), date(2024, 1, 1)) == 1
    assert period_days(date(2024, 1, 1), date(2024, 12, 31)) == 366


def test_validate_request_rejects_bad_requests():
    """Inverted ranges, unknown travel types and missing accounts fail."""
    with pytest.raises(ReportRequestError):
        validate_request(ReportRequest("acc", date(2024, 2, 1), date(2024, 1, 1)))
    with pytest.raises(ReportRequestError):
        validate_request(
            ReportRequest(
                "acc",
                date(2024, 1, 1),
                date(2024, 1, 31),
                travel_types=("holiday",),
            )
        )
    with pytest.raises(ReportRequestError):
        validate_request(ReportRequest("", date(2024, 1, 1), date(2024, 1, 31)))


@pytest.mark.asyncio
async def test_resolve_scope_lists_account_vehicles():
    """Without explicit vehicles the account's vehicles are sorted and unique."""
    use_case = _use_case()
    request = ReportRequest(
        "acc",
        date(2024, 1, 1),
        date(2024, 1, 31),
        tag_ids=("t2", "t1"),
    )

    preferences, scope = await use_case._resolve_scope(request)

    assert preferences == _preferences()
    assert scope.vehicle_ids == ("a", "b")
    assert scope.tag_ids == ("t1", "t2")
    use_case._vehicle_repository.list_vehicle_ids.assert_awaited_once_with("acc")


@pytest.mark.asyncio
async def test_resolve_scope_keeps_explicit_vehicles():
    """Explicit vehicle ids should skip the vehicle lookup."""
    use_case = _use_case()
    request = ReportRequest(
        "acc",
        date(2024, 1, 1),
        date(2024, 1, 31),
        vehicle_ids=("v2", "v1"),
    )

    _, scope = await use_case._resolve_scope(request)

    assert scope.vehicle_ids == ("v1", "v2")
    use_case._vehicle_repository.list_vehicle_ids.assert_not_called()


@pytest.mark.asyncio
async def test_fan_out_keeps_submission_order():
    """Results should come back in the order the fetches were given."""

    async def _delayed(value, delay):
        await asyncio.sleep(delay)
        return value

    results = await fan_out(
        _delayed("slow", 0.02),
        _delayed("fast", 0),
        logger=MagicMock(),
        description="values",
    )

    assert results == ["slow", "fast"]


@pytest.mark.asyncio
async def test_fan_out_wraps_failures_and_cancels_siblings():
    """A failing fetch should cancel the others and raise a fetch error."""
    started = asyncio.Event()
    cancelled = []
    logger = MagicMock()

    async def _slow():
        started.set()
        try:
            await asyncio.sleep(10)
        except asyncio.CancelledError:
            cancelled.append(True)
            raise

    async def _failing():
        await started.wait()
        raise ConnectionError("db down")

    with pytest.raises(ReportDataFetchError) as excinfo:
        await fan_out(_slow(), _failing(), logger=logger, description="rows")

    assert isinstance(excinfo.value.__cause__, ConnectionError)
    assert cancelled == [True]
    logger.error.assert_called_once()


@pytest.mark.asyncio
async def test_fan_out_propagates_cancellation():
    """Cancelling the caller should cancel pending fetches untouched."""
    cancelled = []

    async def _slow():
        try:
            await asyncio.sleep(10)
        except asyncio.CancelledError:
            cancelled.append(True)
            raise

    task = asyncio.ensure_future(
        fan_out(_slow(), _slow(), logger=MagicMock(), description="rows")
    )
    await asyncio.sleep(0.01)
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task
    assert cancelled == [True, True]
