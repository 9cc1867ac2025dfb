"""Tests for the report CLI adapter."""

import json
from datetime import date

import pytest

from vehicle_reports.adapters import report_cli

_VARIABLES = (
    "REPORT_ACCOUNT_ID",
    "REPORT_TYPE",
    "REPORT_VEHICLE_IDS",
    "REPORT_TAG_IDS",
    "REPORT_LANG",
    "REPORT_YEAR",
    "REPORT_DATE_FROM",
    "REPORT_DATE_TO",
    "REPORT_TRAVEL_TYPES",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.setattr(report_cli.dotenv, "load_dotenv", lambda: None)
    for name in _VARIABLES:
        monkeypatch.delenv(name, raising=False)


def test_summary_request_reads_dates_and_lists(monkeypatch):
    """The summary request should carry dates, vehicles and tags."""
    monkeypatch.setenv("REPORT_ACCOUNT_ID", "acc")
    monkeypatch.setenv("REPORT_DATE_FROM", "2024-01-01")
    monkeypatch.setenv("REPORT_DATE_TO", "2024-03-31")
    monkeypatch.setenv("REPORT_VEHICLE_IDS", "car-1, car-2,")
    monkeypatch.setenv("REPORT_TAG_IDS", "work")
    monkeypatch.setenv("REPORT_TRAVEL_TYPES", "business")

    report_type, request = report_cli.build_request_from_env()

    assert report_type == "summary"
    assert request.date_from == date(2024, 1, 1)
    assert request.date_to == date(2024, 3, 31)
    assert request.vehicle_ids == ("car-1", "car-2")
    assert request.tag_ids == ("work",)
    assert request.travel_types == ()
    assert request.lang == "en"


def test_yearly_request_spans_calendar_year(monkeypatch):
    """The yearly request should cover the configured year."""
    monkeypatch.setenv("REPORT_ACCOUNT_ID", "acc")
    monkeypatch.setenv("REPORT_TYPE", "Yearly")
    monkeypatch.setenv("REPORT_YEAR", "2023")

    report_type, request = report_cli.build_request_from_env()

    assert report_type == "yearly"
    assert request.date_from == date(2023, 1, 1)
    assert request.date_to == date(2023, 12, 31)


def test_travel_request_keeps_travel_types(monkeypatch):
    """Travel requests should forward the travel type filter."""
    monkeypatch.setenv("REPORT_ACCOUNT_ID", "acc")
    monkeypatch.setenv("REPORT_TYPE", "travel")
    monkeypatch.setenv("REPORT_DATE_FROM", "2024-01-01")
    monkeypatch.setenv("REPORT_DATE_TO", "2024-12-31")
    monkeypatch.setenv("REPORT_TRAVEL_TYPES", "business,medical")

    _, request = report_cli.build_request_from_env()

    assert request.travel_types == ("business", "medical")


@pytest.mark.parametrize(
    "overrides",
    [
        {},
        {"REPORT_ACCOUNT_ID": "acc", "REPORT_TYPE": "weekly"},
        {"REPORT_ACCOUNT_ID": "acc", "REPORT_DATE_FROM": "2024-01-01"},
        {
            "REPORT_ACCOUNT_ID": "acc",
            "REPORT_DATE_FROM": "01/01/2024",
            "REPORT_DATE_TO": "2024-12-31",
        },
    ],
)
def test_invalid_configuration_raises(monkeypatch, overrides):
    """Missing or malformed variables should raise a RuntimeError."""
    for name, value in overrides.items():
        monkeypatch.setenv(name, value)

    with pytest.raises(RuntimeError):
        report_cli.build_request_from_env()


@pytest.mark.asyncio
async def test_run_report_serializes_use_case_result(monkeypatch):
    """run_report should execute the selected use case and serialize it."""
    executed = []

    class _FakeUseCase:
        async def execute(self, request):
            executed.append(request)
            return "report"

    monkeypatch.setattr(report_cli, "build_travel_report_use_case", _FakeUseCase)
    monkeypatch.setattr(report_cli, "report_to_dict", lambda report: {"r": report})

    payload = await report_cli.run_report("travel", "request")

    assert payload == {"r": "report"}
    assert executed == ["request"]


def test_main_prints_json(monkeypatch, capsys):
    """main should print the serialized report as JSON."""
    monkeypatch.setenv("REPORT_ACCOUNT_ID", "acc")
    monkeypatch.setenv("REPORT_DATE_FROM", "2024-01-01")
    monkeypatch.setenv("REPORT_DATE_TO", "2024-01-31")

    class _Logger:
        def info(self, msg: str) -> None:
            pass

    async def _fake_run_report(report_type, request):
        return {"type": report_type, "account_id": request.account_id}

    monkeypatch.setattr(report_cli, "get_app_logger", lambda: _Logger())
    monkeypatch.setattr(report_cli, "get_usage_logger", lambda: _Logger())
    monkeypatch.setattr(report_cli, "run_report", _fake_run_report)

    report_cli.main()

    printed = json.loads(capsys.readouterr().out)
    assert printed == {"type": "summary", "account_id": "acc"}
