"""Presentation-ready aggregations over forecast rows.

Every function here is an independent pure derivation: month summaries,
highlight lookups, banded rows and per-month category slices. None of them
mutate the rows they are given.
"""

from typing import Dict, List, Literal, Set

from .dates import DateLike, add_months, format_month_label, month_key, to_iso_date
from .schemas import (
    BandedForecastRow,
    Expense,
    ForecastEvent,
    ForecastRow,
    MonthlyBalanceSummary,
    MonthlyCategoryChartData,
    MonthlyCategorySlice,
)

CATEGORY_CHART_MONTHS = 12

FilterMode = Literal["all", "income", "expense"]


def filter_forecast_rows(rows: List[ForecastRow], mode: FilterMode = "all") -> List[ForecastRow]:
    """Rows of one type, or all rows."""
    if mode == "all":
        return list(rows)
    return [row for row in rows if row.type == mode]


def create_monthly_balance_by_key(
    forecast_rows: List[ForecastRow],
    starting_balance: float,
) -> Dict[str, MonthlyBalanceSummary]:
    """Opening/ending balance and total spent per YYYY-MM.

    A month opens at the balance carried from the previous row (the
    starting balance for the first month) and ends at its last row.
    """
    summaries: Dict[str, MonthlyBalanceSummary] = {}
    previous_balance = starting_balance

    for row in forecast_rows:
        key = month_key(row.date)
        spent = row.amount if row.type == "expense" else 0.0
        summary = summaries.get(key)
        if summary is None:
            summaries[key] = MonthlyBalanceSummary(
                opening_balance=previous_balance,
                ending_balance=row.running_balance,
                spent=spent,
            )
        else:
            summary.ending_balance = row.running_balance
            summary.spent += spent
        previous_balance = row.running_balance

    return summaries


def create_finite_expense_id_set(expenses: List[Expense], forecast_rows: List[ForecastRow]) -> Set[str]:
    """Expense ids whose last occurrence should be highlighted.

    An id qualifies when the expense has highlighting enabled and produced
    more than one row. If no expense has explicitly opted in, every expense
    is eligible.
    """
    any_opted_in = any(expense.highlight_last_event is True for expense in expenses)
    eligible = {
        expense.id
        for expense in expenses
        if not any_opted_in or expense.highlight_last_event is True
    }

    counts: Dict[str, int] = {}
    for row in forecast_rows:
        if row.type != "expense" or not row.source_id:
            continue
        counts[row.source_id] = counts.get(row.source_id, 0) + 1

    return {source_id for source_id, count in counts.items() if source_id in eligible and count > 1}


def create_last_expense_date_by_source(forecast_rows: List[ForecastRow]) -> Dict[str, str]:
    """Latest occurrence date per source expense id."""
    last_dates: Dict[str, str] = {}
    for row in forecast_rows:
        if row.type != "expense" or not row.source_id:
            continue
        previous = last_dates.get(row.source_id)
        if previous is None or row.date > previous:
            last_dates[row.source_id] = row.date
    return last_dates


def create_last_expense_row_id_by_month(forecast_rows: List[ForecastRow]) -> Dict[str, str]:
    """Id of the last expense row in each month (anchor for quick-add)."""
    last_ids: Dict[str, str] = {}
    for row in forecast_rows:
        if row.type == "expense":
            last_ids[month_key(row.date)] = row.id
    return last_ids


def build_banded_rows(
    rows: List[ForecastRow],
    monthly_balance_by_key: Dict[str, MonthlyBalanceSummary],
    finite_expense_ids: Set[str],
    last_expense_date_by_source: Dict[str, str],
    last_expense_row_id_by_month: Dict[str, str],
) -> List[BandedForecastRow]:
    """Decorate rows with month boundaries, alternating bands and highlights.

    The spend trend compares a month's total against the previous month
    shown and is only set on month-start rows once a previous month is
    known: 'better' (spent less), 'worse' (spent more) or 'equal'.
    """
    banded = []
    previous_month = ""
    previous_month_spent = None
    band = "a"

    for row in rows:
        key = month_key(row.date)
        is_month_start = key != previous_month
        summary = monthly_balance_by_key.get(key)
        month_spent = summary.spent if summary else 0.0

        trend = ""
        if is_month_start and previous_month_spent is not None:
            if month_spent < previous_month_spent:
                trend = "better"
            elif month_spent > previous_month_spent:
                trend = "worse"
            else:
                trend = "equal"

        if is_month_start and previous_month:
            band = "b" if band == "a" else "a"
        if is_month_start:
            previous_month_spent = month_spent
        previous_month = key

        is_expense = row.type == "expense"
        source_id = row.source_id
        banded.append(BandedForecastRow(
            row=row,
            month_key=key,
            month_label=format_month_label(key),
            month_summary=summary,
            month_spent=month_spent,
            spent_trend=trend,
            is_month_start=is_month_start,
            is_last_payment=bool(
                is_expense
                and source_id
                and source_id in finite_expense_ids
                and last_expense_date_by_source.get(source_id) == row.date
            ),
            is_last_expense_of_month=is_expense and last_expense_row_id_by_month.get(key) == row.id,
            month_band=band,
        ))

    return banded


def build_monthly_category_slices(
    expense_events: List[ForecastEvent],
    horizon_start: DateLike,
) -> List[MonthlyCategoryChartData]:
    """Spend per category for the 12 months starting at the horizon start.

    All 12 months are always present; a month with no expenses has an
    empty slice list. Slices are ordered by amount, largest first.
    """
    spend: Dict[str, Dict[str, float]] = {}
    for event in expense_events:
        by_category = spend.setdefault(month_key(event.date), {})
        by_category[event.category] = by_category.get(event.category, 0.0) + event.amount

    charts = []
    for offset in range(CATEGORY_CHART_MONTHS):
        key = month_key(to_iso_date(add_months(horizon_start, offset)))
        by_category = spend.get(key, {})
        slices = sorted(
            (MonthlyCategorySlice(category=category, amount=amount) for category, amount in by_category.items()),
            key=lambda s: s.amount,
            reverse=True,
        )
        charts.append(MonthlyCategoryChartData(key=key, label=format_month_label(key), slices=slices))

    return charts
