"""Forecast event generation.

Expands the paycheck schedule, the monthly bonus and every expense into
dated ForecastEvents inside an inclusive horizon [start, end].

Unset or invalid inputs produce no events rather than errors: a missing
next pay date is a valid "nothing to forecast yet" state.
"""

import logging
import math
from typing import Dict, List

from .dates import DateLike, month_key, parse_iso_date, start_of_day, to_iso_date
from .pay import compute_net_pay
from .recurrence import expense_step, income_step, iter_occurrences
from .schemas import Expense, ForecastEvent, PaycheckConfig

logger = logging.getLogger(__name__)

PAYCHECK_ITEM = "Paycheck"
BONUS_ITEM = "Monthly Bonus"
INCOME_CATEGORY = "income"


def generate_income_events(
    config: PaycheckConfig,
    horizon_start: DateLike,
    horizon_end: DateLike,
) -> List[ForecastEvent]:
    """Paycheck events from next_pay_date through the horizon.

    Every paycheck carries the same net amount; pay is assumed constant
    across the horizon.

    Returns:
        Events in date order, or an empty list when the next pay date is
        unset/invalid or net pay cannot be derived.
    """
    start = start_of_day(horizon_start)
    end = start_of_day(horizon_end)

    anchor = parse_iso_date(config.next_pay_date)
    if anchor is None:
        logger.debug(f"no income events: next_pay_date {config.next_pay_date!r} unset or invalid")
        return []

    net_pay = compute_net_pay(config)
    if not math.isfinite(net_pay):
        logger.debug("no income events: net pay could not be derived")
        return []

    events = []
    for index, cursor in iter_occurrences(anchor, income_step(config.pay_frequency)):
        if cursor > end:
            break
        if cursor >= start:
            iso = to_iso_date(cursor)
            events.append(ForecastEvent(
                id=f"income-{iso}-{index}",
                date=iso,
                type="income",
                item=PAYCHECK_ITEM,
                category=INCOME_CATEGORY,
                amount=net_pay,
            ))

    return events


def generate_bonus_events(
    config: PaycheckConfig,
    income_events: List[ForecastEvent],
) -> List[ForecastEvent]:
    """One bonus per month, paid with that month's last paycheck.

    Derived from the generated income events, so months without a paycheck
    get no bonus.
    """
    bonus = config.monthly_bonus_amount
    if bonus is None or not math.isfinite(bonus) or bonus <= 0:
        return []

    last_payday_by_month: Dict[str, str] = {}
    for event in income_events:
        key = month_key(event.date)
        previous = last_payday_by_month.get(key)
        if previous is None or event.date > previous:
            last_payday_by_month[key] = event.date

    return [
        ForecastEvent(
            id=f"bonus-{key}",
            date=payday,
            type="income",
            item=BONUS_ITEM,
            category=INCOME_CATEGORY,
            amount=bonus,
        )
        for key, payday in sorted(last_payday_by_month.items())
    ]


def _variable_date_events(expense: Expense, start, end) -> List[ForecastEvent]:
    events = []
    for index, iso in enumerate(sorted(expense.variable_due_dates)):
        due = parse_iso_date(iso)
        if due is None or due < start or due > end:
            continue
        events.append(ForecastEvent(
            id=f"expense-{expense.id}-{iso}-variable-{index}",
            date=iso,
            type="expense",
            item=expense.name,
            category=expense.category,
            amount=expense.amount,
            source_id=expense.id,
        ))
    return events


def max_occurrences(expense: Expense) -> float:
    """Occurrence limit for a fixed-schedule expense (inf when unbounded)."""
    if expense.repeat == "none":
        return 1
    count = expense.repeat_count
    if count is not None and count > 0:
        return math.floor(count)
    return math.inf


def _scheduled_events(expense: Expense, start, end) -> List[ForecastEvent]:
    anchor = parse_iso_date(expense.first_due_date)
    if anchor is None:
        logger.debug(f"expense {expense.id}: first_due_date {expense.first_due_date!r} invalid, skipped")
        return []

    limit = max_occurrences(expense)
    events = []
    for index, cursor in iter_occurrences(anchor, expense_step(expense.repeat)):
        # repeat_count counts from the anchor, including occurrences before the horizon
        if index >= limit or cursor > end:
            break
        if cursor >= start:
            iso = to_iso_date(cursor)
            events.append(ForecastEvent(
                id=f"expense-{expense.id}-{iso}-{index}",
                date=iso,
                type="expense",
                item=expense.name,
                category=expense.category,
                amount=expense.amount,
                source_id=expense.id,
            ))
        if expense.repeat == "none":
            break
    return events


def uses_variable_dates(expense: Expense) -> bool:
    """True when the expense is scheduled by its explicit date list."""
    return expense.variable_dates_enabled and len(expense.variable_due_dates) > 0


def generate_expense_events(
    expenses: List[Expense],
    horizon_start: DateLike,
    horizon_end: DateLike,
) -> List[ForecastEvent]:
    """Expense occurrences inside the horizon, grouped by expense.

    Variable-date expenses ignore repeat/repeat_count; fixed-schedule
    expenses ignore variable_due_dates.
    """
    start = start_of_day(horizon_start)
    end = start_of_day(horizon_end)

    events: List[ForecastEvent] = []
    for expense in expenses:
        if uses_variable_dates(expense):
            events.extend(_variable_date_events(expense, start, end))
        else:
            events.extend(_scheduled_events(expense, start, end))
    return events
