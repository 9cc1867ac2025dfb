"""Scope resolution and concurrent fetch helpers shared by report use cases."""

import asyncio
from collections.abc import Awaitable
from datetime import date

from vehicle_reports.application.errors import (
    ReportDataFetchError,
    ReportRequestError,
)
from vehicle_reports.application.ports.preferences_repository import (
    UserPreferencesPort,
)
from vehicle_reports.application.ports.report_repository import (
    ReportRepositoryPort,
)
from vehicle_reports.application.ports.vehicles_repository import (
    VehicleRepositoryPort,
)
from vehicle_reports.domain.constants import TRAVEL_TYPES
from vehicle_reports.domain.models import (
    ConsumptionThresholds,
    ReportRequest,
    ReportScope,
    UserPreferences,
)
from vehicle_reports.infrastructure.logging.logger import get_app_logger


async def _cancel_all(tasks: list[asyncio.Future]) -> None:
    for task in tasks:
        task.cancel()
    await asyncio.gather(*tasks, return_exceptions=True)


async def fan_out(*awaitables: Awaitable, logger, description: str) -> list:
    """Run independent fetches concurrently and join them.

    Results keep the order of ``awaitables``. When one fetch fails or the
    caller is cancelled, the remaining fetches are cancelled before the error
    propagates.

    Args:
        *awaitables: Independent collaborator calls.
        logger: Logger used to report failures.
        description: What is being fetched, for log and error messages.

    Returns:
        list: Results in submission order.

    Raises:
        ReportDataFetchError: If any fetch raises.
    """
    tasks = [asyncio.ensure_future(awaitable) for awaitable in awaitables]
    try:
        return list(await asyncio.gather(*tasks))
    except asyncio.CancelledError:
        await _cancel_all(tasks)
        raise
    except ReportDataFetchError:
        await _cancel_all(tasks)
        raise
    except Exception as exc:
        await _cancel_all(tasks)
        logger.error(f"Failed to fetch {description}: {exc!r}")
        raise ReportDataFetchError(f"Failed to fetch {description}") from exc


def period_days(date_from: date, date_to: date) -> int:
    """Return the number of days in an inclusive date range."""
    return (date_to - date_from).days + 1


def validate_request(request: ReportRequest) -> None:
    """Reject requests that cannot produce a report.

    Raises:
        ReportRequestError: If the account is missing, the range is inverted
            or a travel type is unknown.
    """
    if not request.account_id:
        raise ReportRequestError("Report request requires an account id")
    if request.date_from > request.date_to:
        raise ReportRequestError(
            f"date_from {request.date_from} is after date_to {request.date_to}"
        )
    unknown = sorted(set(request.travel_types) - set(TRAVEL_TYPES))
    if unknown:
        raise ReportRequestError(f"Unknown travel types: {', '.join(unknown)}")


class ReportUseCase:
    """Shared collaborators and scope resolution of every report."""

    def __init__(
        self,
        report_repository: ReportRepositoryPort,
        vehicle_repository: VehicleRepositoryPort,
        preferences_repository: UserPreferencesPort,
        logger=None,
        thresholds: ConsumptionThresholds | None = None,
    ) -> None:
        """Initialize the use case.

        Args:
            report_repository: Port providing pre-aggregated report rows.
            vehicle_repository: Port listing the account's vehicles.
            preferences_repository: Port providing user preferences.
            logger: Optional logger compatible with logging.Logger-like API.
            thresholds: Minimums used by the consumption confidence model.
        """
        self._report_repository = report_repository
        self._vehicle_repository = vehicle_repository
        self._preferences_repository = preferences_repository
        self._logger = logger or get_app_logger()
        self._thresholds = thresholds or ConsumptionThresholds()

    async def _resolve_scope(
        self,
        request: ReportRequest,
    ) -> tuple[UserPreferences, ReportScope]:
        """Validate the request, then load preferences and vehicle ids.

        Explicit vehicle ids are used as given; otherwise every vehicle of
        the account is in scope.
        """
        validate_request(request)
        if request.vehicle_ids:
            (preferences,) = await fan_out(
                self._preferences_repository.fetch_preferences(request.account_id),
                logger=self._logger,
                description="user preferences",
            )
            vehicle_ids = list(request.vehicle_ids)
        else:
            preferences, vehicle_ids = await fan_out(
                self._preferences_repository.fetch_preferences(request.account_id),
                self._vehicle_repository.list_vehicle_ids(request.account_id),
                logger=self._logger,
                description="user preferences and vehicles",
            )
        scope = ReportScope(
            account_id=request.account_id,
            vehicle_ids=tuple(sorted(set(vehicle_ids))),
            date_from=request.date_from,
            date_to=request.date_to,
            tag_ids=tuple(sorted(set(request.tag_ids))),
            lang=request.lang,
        )
        self._logger.info(
            f"Resolved report scope for account {scope.account_id}: "
            f"{len(scope.vehicle_ids)} vehicles, "
            f"{scope.date_from} to {scope.date_to}"
        )
        return preferences, scope


__all__ = [
    "fan_out",
    "period_days",
    "validate_request",
    "ReportUseCase",
]
