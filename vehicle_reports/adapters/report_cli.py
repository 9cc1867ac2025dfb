"""CLI adapter printing a vehicle expense report as JSON.

The report is selected and scoped through environment variables (a ``.env``
file is honoured), wired to the concrete database adapters and rendered with
``report_to_dict``.

Variables:
    REPORT_ACCOUNT_ID: Account to report on (required).
    REPORT_TYPE: ``summary`` (default), ``yearly`` or ``travel``.
    REPORT_DATE_FROM / REPORT_DATE_TO: ISO dates for summary and travel.
    REPORT_YEAR: Calendar year for the yearly report.
    REPORT_VEHICLE_IDS, REPORT_TAG_IDS, REPORT_TRAVEL_TYPES: Comma lists.
    REPORT_LANG: Language of category and kind names (default ``en``).
"""

import asyncio
import json
import os
from datetime import date

import dotenv

from vehicle_reports.domain.models import ReportRequest
from vehicle_reports.infrastructure.container import (
    build_expense_summary_use_case,
    build_travel_report_use_case,
    build_yearly_report_use_case,
)
from vehicle_reports.infrastructure.logging.logger import (
    get_app_logger,
    get_usage_logger,
)
from vehicle_reports.utils.serialization import report_to_dict

REPORT_TYPES = ("summary", "yearly", "travel")


def _split_list(raw: str | None) -> tuple[str, ...]:
    """Split a comma separated value, dropping blanks."""
    if not raw:
        return ()
    return tuple(item.strip() for item in raw.split(",") if item.strip())


def _read_date(name: str) -> date:
    raw = os.getenv(name, "").strip()
    if not raw:
        raise RuntimeError(f"Missing environment variable: {name}")
    try:
        return date.fromisoformat(raw)
    except ValueError as exc:
        raise RuntimeError(f"Invalid {name} value: {raw!r}") from exc


def build_request_from_env() -> tuple[str, ReportRequest]:
    """Build the report type and request from environment variables.

    Returns:
        tuple[str, ReportRequest]: Report type and the request to execute.

    Raises:
        RuntimeError: If a required variable is missing or malformed.
    """
    dotenv.load_dotenv()
    account_id = os.getenv("REPORT_ACCOUNT_ID", "").strip()
    if not account_id:
        raise RuntimeError("Missing environment variable: REPORT_ACCOUNT_ID")
    report_type = os.getenv("REPORT_TYPE", "summary").strip().lower()
    if report_type not in REPORT_TYPES:
        raise RuntimeError(f"Unsupported REPORT_TYPE: {report_type!r}")
    vehicle_ids = _split_list(os.getenv("REPORT_VEHICLE_IDS"))
    tag_ids = _split_list(os.getenv("REPORT_TAG_IDS"))
    lang = os.getenv("REPORT_LANG", "en").strip() or "en"

    if report_type == "yearly":
        raw_year = os.getenv("REPORT_YEAR", "").strip()
        year = int(raw_year) if raw_year.isdigit() else date.today().year
        return report_type, ReportRequest.for_year(
            account_id,
            year,
            vehicle_ids=vehicle_ids,
            tag_ids=tag_ids,
            lang=lang,
        )
    return report_type, ReportRequest(
        account_id=account_id,
        date_from=_read_date("REPORT_DATE_FROM"),
        date_to=_read_date("REPORT_DATE_TO"),
        vehicle_ids=vehicle_ids,
        tag_ids=tag_ids,
        travel_types=(
            _split_list(os.getenv("REPORT_TRAVEL_TYPES"))
            if report_type == "travel"
            else ()
        ),
        lang=lang,
    )


async def run_report(report_type: str, request: ReportRequest) -> dict:
    """Execute the selected report and return it as primitives."""
    builders = {
        "summary": build_expense_summary_use_case,
        "yearly": build_yearly_report_use_case,
        "travel": build_travel_report_use_case,
    }
    use_case = builders[report_type]()
    report = await use_case.execute(request)
    return report_to_dict(report)


def main() -> None:
    """Run the configured report and print it as JSON."""
    logger = get_app_logger()
    usage_logger = get_usage_logger()
    report_type, request = build_request_from_env()
    usage_logger.info(
        f"CLI report {report_type} for account {request.account_id} "
        f"({request.date_from} to {request.date_to})"
    )
    payload = asyncio.run(run_report(report_type, request))
    logger.info(f"Report {report_type} rendered for {request.account_id}")
    print(json.dumps(payload, indent=2, ensure_ascii=False))


if __name__ == "__main__":  # pragma: no cover
    main()
