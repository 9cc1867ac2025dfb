"""Application use cases package."""

from .get_expense_summary import GetExpenseSummaryUseCase
from .get_travel_report import GetTravelReportUseCase
from .get_yearly_report import GetYearlyReportUseCase
from .report_scope import ReportUseCase, fan_out, period_days

__all__ = [
    "GetExpenseSummaryUseCase",
    "GetTravelReportUseCase",
    "GetYearlyReportUseCase",
    "ReportUseCase",
    "fan_out",
    "period_days",
]
