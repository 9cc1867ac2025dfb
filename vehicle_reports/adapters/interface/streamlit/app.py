"""Streamlit dashboard entry point."""

import asyncio
from collections.abc import Sequence
from datetime import date
from decimal import Decimal

import streamlit as st
import altair as alt

from vehicle_reports.domain.constants import TRAVEL_TYPES
from vehicle_reports.domain.models import (
    CategoryBreakdownItem,
    ConsumptionSummary,
    ExpenseSummaryReport,
    ReportRequest,
    TravelReport,
    YearlyReport,
)
from vehicle_reports.infrastructure.container import (
    build_expense_summary_use_case,
    build_travel_report_use_case,
    build_yearly_report_use_case,
)

MONTH_LABELS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def _fetch_expense_summary(request: ReportRequest) -> ExpenseSummaryReport:
    """Fetch the expense summary from the expenses database."""
    use_case = build_expense_summary_use_case()
    return asyncio.run(use_case.execute(request))


@st.cache_data(show_spinner=False)
def _load_expense_summary(request: ReportRequest) -> ExpenseSummaryReport:
    """Cached wrapper around _fetch_expense_summary."""
    return _fetch_expense_summary(request)


def _fetch_yearly_report(request: ReportRequest) -> YearlyReport:
    """Fetch the annual breakdown from the expenses database."""
    use_case = build_yearly_report_use_case()
    return asyncio.run(use_case.execute(request))


@st.cache_data(show_spinner=False)
def _load_yearly_report(request: ReportRequest) -> YearlyReport:
    """Cached wrapper around _fetch_yearly_report."""
    return _fetch_yearly_report(request)


def _fetch_travel_report(request: ReportRequest) -> TravelReport:
    """Fetch the travel report from the expenses database."""
    use_case = build_travel_report_use_case()
    return asyncio.run(use_case.execute(request))


@st.cache_data(show_spinner=False)
def _load_travel_report(request: ReportRequest) -> TravelReport:
    """Cached wrapper around _fetch_travel_report."""
    return _fetch_travel_report(request)


def _format_currency(value: Decimal | None, currency_code: str) -> str:
    """Format currency values for display."""
    if value is None:
        return "n/a"
    return f"{value:,.2f} {currency_code}"


def _format_quantity(value: Decimal | None, unit: str) -> str:
    """Format a distance, volume or consumption value for display."""
    if value is None:
        return "n/a"
    return f"{value:,} {unit}"


def _split_ids(raw: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in raw.split(",") if item.strip())


def _prepare_category_chart_data(
    categories: Sequence[CategoryBreakdownItem],
    currency_code: str,
    max_categories: int = 6,
) -> list[dict[str, str | float]]:
    """Prepare donut chart data with a Top-N + Other grouping.

    Args:
        categories: Category items already sorted by amount.
        currency_code: Home currency used in labels.
        max_categories: Maximum categories to keep before grouping into Other.

    Returns:
        Altair-ready chart rows.
    """
    items = [item for item in categories if item.total_amount_hc > 0]
    top_items = items[:max_categories]
    other_amount = sum(
        (item.total_amount_hc for item in items[max_categories:]),
        start=Decimal("0"),
    )
    data: list[dict[str, str | float]] = [
        {
            "category": item.category_name or item.category_code,
            "amount": float(item.total_amount_hc),
            "amount_label": _format_currency(item.total_amount_hc, currency_code),
            "share_label": (
                f"{item.percentage_hc:.1f}%"
                if item.percentage_hc is not None
                else "n/a"
            ),
        }
        for item in top_items
    ]
    if other_amount > 0:
        data.append(
            {
                "category": "Other",
                "amount": float(other_amount),
                "amount_label": _format_currency(other_amount, currency_code),
                "share_label": "",
            }
        )
    return data


def _render_category_chart(
    categories: Sequence[CategoryBreakdownItem],
    currency_code: str,
    chart_size: int = 320,
) -> None:
    """Render a donut chart of expenses by category."""
    data = _prepare_category_chart_data(categories, currency_code)
    if not data:
        st.info("No categorised expenses in this period.")
        return
    chart = alt.Chart(alt.Data(values=data)).mark_arc(
        innerRadius=chart_size * 0.4,
        cornerRadius=8,
        padAngle=0.02,
    ).encode(
        theta=alt.Theta("amount:Q"),
        color=alt.Color(
            "category:N",
            legend=alt.Legend(orient="bottom", title=None, columns=2),
        ),
        order=alt.Order("amount:Q", sort="descending"),
        tooltip=[
            alt.Tooltip("category:N"),
            alt.Tooltip("amount_label:N"),
            alt.Tooltip("share_label:N"),
        ],
    ).properties(
        width=chart_size,
        height=chart_size,
    )
    st.subheader("Expenses by Category")
    st.altair_chart(chart, width="stretch")


def _prepare_monthly_chart_data(report: YearlyReport) -> list[dict[str, str | float]]:
    """Return one row per month and cost kind for a stacked bar chart."""
    data: list[dict[str, str | float]] = []
    for row in report.months:
        label = MONTH_LABELS[row.month - 1]
        data.append(
            {"month": label, "kind": "Refuels", "amount": float(row.refuels_cost_hc)}
        )
        data.append(
            {"month": label, "kind": "Expenses", "amount": float(row.expenses_cost_hc)}
        )
    return data


def _render_monthly_chart(report: YearlyReport) -> None:
    """Render monthly costs as a stacked bar chart."""
    chart = alt.Chart(alt.Data(values=_prepare_monthly_chart_data(report))).mark_bar(
        cornerRadiusTopLeft=4,
        cornerRadiusTopRight=4,
    ).encode(
        x=alt.X("month:N", sort=list(MONTH_LABELS), title=None),
        y=alt.Y("amount:Q", title=report.preferences.home_currency),
        color=alt.Color("kind:N", legend=alt.Legend(orient="bottom", title=None)),
        tooltip=[
            alt.Tooltip("month:N"),
            alt.Tooltip("kind:N"),
            alt.Tooltip("amount:Q", format=",.2f"),
        ],
    )
    st.subheader(f"Monthly Costs {report.year}")
    st.altair_chart(chart, width="stretch")


def _render_consumption(summary: ConsumptionSummary) -> None:
    """Render the consumption section as a table."""
    st.subheader("Consumption")
    if not summary.by_fuel_type:
        st.caption("Not enough full-tank refuels to estimate consumption.")
        return
    data = [
        {
            "Fuel": item.fuel_type,
            "Consumption": _format_quantity(item.consumption, item.consumption_unit),
            "Distance": _format_quantity(item.distance, summary.distance_unit),
            "Consumed": _format_quantity(item.fuel_consumed, item.fuel_unit),
            "Confidence": item.confidence,
            "Vehicles": item.vehicles_count,
        }
        for item in summary.by_fuel_type
    ]
    st.dataframe(data, width="stretch", hide_index=True)


def _render_summary(report: ExpenseSummaryReport) -> None:
    """Render the period expense summary."""
    currency = report.preferences.home_currency
    distance_unit = report.preferences.distance_unit
    total_col, refuels_col, expenses_col, mileage_col = st.columns(4)
    total_col.metric("Total", _format_currency(report.total_cost_hc, currency))
    refuels_col.metric("Refuels", _format_currency(report.refuels_cost_hc, currency))
    expenses_col.metric(
        "Expenses",
        _format_currency(report.expenses_cost_hc, currency),
    )
    mileage_col.metric("Mileage", _format_quantity(report.mileage, distance_unit))
    st.caption(
        f"{report.total_records_count} records, {report.vehicles_count} vehicles, "
        f"{report.period_days} days"
    )
    if report.foreign_currency_totals:
        st.dataframe(
            [
                {
                    "Currency": item.currency,
                    "Amount": f"{item.amount:,.2f}",
                    "Records": item.records_count,
                }
                for item in report.foreign_currency_totals
            ],
            hide_index=True,
        )
    chart_col, consumption_col = st.columns(2)
    with chart_col:
        _render_category_chart(report.expenses_by_category, currency)
    with consumption_col:
        _render_consumption(report.consumption)


def _render_yearly(report: YearlyReport) -> None:
    """Render the annual breakdown."""
    currency = report.preferences.home_currency
    total_col, mileage_col, vehicles_col = st.columns(3)
    total_col.metric(
        "Total",
        _format_currency(report.totals.total_cost_hc, currency),
    )
    mileage_col.metric(
        "Mileage",
        _format_quantity(report.totals.mileage, report.preferences.distance_unit),
    )
    vehicles_col.metric("Vehicles", report.vehicles_count)
    _render_monthly_chart(report)
    _render_consumption(report.consumption)


def _render_travel(report: TravelReport) -> None:
    """Render the travel and tax deduction report."""
    currency = report.preferences.home_currency
    distance_col, business_col, deduction_col = st.columns(3)
    distance_col.metric(
        "Trips distance",
        _format_quantity(report.filtered_trips_distance, report.distance_unit),
    )
    business_col.metric(
        "Business use",
        (
            f"{report.business_use_percentage:.2f}%"
            if report.business_use_percentage is not None
            else "n/a"
        ),
    )
    deduction = report.standard_mileage_deduction
    deduction_col.metric(
        "Standard deduction",
        (
            _format_currency(deduction.total_deduction, deduction.currency)
            if deduction is not None
            else "n/a"
        ),
    )
    st.subheader("Trips by Type")
    st.dataframe(
        [
            {
                "Type": item.travel_type,
                "Trips": item.trips_count,
                "Distance": _format_quantity(item.total_distance, report.distance_unit),
            }
            for item in report.trips_by_type
        ],
        hide_index=True,
    )
    actual = report.actual_expense_method
    st.subheader("Actual Expense Method")
    st.write(
        f"Deductible total: "
        f"{_format_currency(actual.total_deductible_cost_hc, currency)}"
    )
    st.subheader("Trips")
    st.dataframe(
        [
            {
                "Started": trip.started_at,
                "Type": trip.travel_type,
                "Purpose": trip.purpose or "",
                "Destination": trip.destination or "",
                "Distance": _format_quantity(trip.distance, report.distance_unit),
            }
            for trip in report.trips
        ],
        width="stretch",
        hide_index=True,
    )


def main() -> None:
    """Render the Streamlit app."""
    st.set_page_config(page_title="Vehicle Reports", layout="wide")
    st.title("Vehicle Reports")

    page = st.sidebar.selectbox("Report", ["Summary", "Yearly", "Travel"])
    account_id = st.sidebar.text_input("Account id").strip()
    vehicle_ids = _split_ids(st.sidebar.text_input("Vehicle ids (comma separated)"))
    if not account_id:
        st.info("Enter an account id to load reports.")
        return

    today = date.today()
    if page == "Yearly":
        year = int(
            st.sidebar.number_input(
                "Year",
                min_value=2000,
                max_value=today.year,
                value=today.year,
            )
        )
        request = ReportRequest.for_year(account_id, year, vehicle_ids=vehicle_ids)
        _render_yearly(_load_yearly_report(request))
        return

    date_from = st.sidebar.date_input("From", value=date(today.year, 1, 1))
    date_to = st.sidebar.date_input("To", value=today)
    if date_from > date_to:
        st.warning("The start date must not be after the end date.")
        return
    if page == "Travel":
        travel_types = st.sidebar.multiselect(
            "Travel types",
            list(TRAVEL_TYPES),
            default=["business"],
        )
        request = ReportRequest(
            account_id=account_id,
            date_from=date_from,
            date_to=date_to,
            vehicle_ids=vehicle_ids,
            travel_types=tuple(travel_types),
        )
        _render_travel(_load_travel_report(request))
        return
    request = ReportRequest(
        account_id=account_id,
        date_from=date_from,
        date_to=date_to,
        vehicle_ids=vehicle_ids,
    )
    _render_summary(_load_expense_summary(request))


if __name__ == "__main__":  # pragma: no cover
    main()
