"""Forecast assembly: ordering, running balance and payday metrics.

build_forecast() is the single place events are ordered. The order is a
total order so the same inputs always produce the same ledger:

1. date ascending (ISO strings sort chronologically)
2. on the same date, income before expense
3. two expenses on the same date: category ascending
4. then item name ascending

recompute_forecast() runs the whole pipeline from a profile snapshot. It
holds no state between calls; callers invoke it whenever inputs change.
"""

import logging
import os
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from .dates import DateLike, add_months, start_of_day, to_iso_date
from .events import generate_bonus_events, generate_expense_events, generate_income_events
from .pay import compute_net_pay_breakdown
from .schemas import ForecastEvent, ForecastProfile, ForecastRow, NetPayBreakdown, PaydayMetrics

# Configure logging based on LOG_LEVEL environment variable
_log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, _log_level, logging.INFO),
    format="%(asctime)s.%(msecs)03d %(levelname)s: %(message)s",
    datefmt="%H:%M:%S"
)
logger = logging.getLogger(__name__)

DEFAULT_HORIZON_MONTHS = 12


def event_sort_key(event: ForecastEvent) -> tuple:
    """Sort key implementing the ledger's total order."""
    is_expense = event.type == "expense"
    # Category only breaks ties between two expenses; income rows share ""
    category = event.category if is_expense else ""
    return (event.date, is_expense, category, event.item)


def build_forecast(events: List[ForecastEvent], starting_balance: float) -> List[ForecastRow]:
    """Order events and fold a running balance over them.

    Args:
        events: Income, bonus and expense events in any order (not mutated)
        starting_balance: Balance before the first event

    Returns:
        One row per event, each carrying the balance after it posts.
    """
    running_balance = starting_balance
    rows = []
    for event in sorted(events, key=event_sort_key):
        if event.type == "income":
            running_balance += event.amount
        else:
            running_balance -= event.amount
        rows.append(ForecastRow(**event.model_dump(), running_balance=running_balance))
    return rows


def compute_next_payday_metrics(
    forecast_rows: List[ForecastRow],
    next_payday_date: str,
    minimum_buffer: float,
    starting_balance: float,
) -> PaydayMetrics:
    """How much can be spent before the next paycheck lands.

    - balance on payday: balance after the last row dated on or before
      the payday (starting balance if there is none)
    - lowest before payday: minimum balance over rows strictly before the
      payday, seeded with the starting balance
    - safe to spend: lowest before payday minus the buffer; a negative
      figure is a real signal, not an error
    """
    balance_on_payday = starting_balance
    lowest_before_payday = starting_balance

    for row in forecast_rows:
        if row.date <= next_payday_date:
            balance_on_payday = row.running_balance
        if row.date < next_payday_date:
            lowest_before_payday = min(lowest_before_payday, row.running_balance)

    return PaydayMetrics(
        next_payday_date=next_payday_date,
        balance_on_next_payday=balance_on_payday,
        lowest_balance_before_next_payday=lowest_before_payday,
        safe_to_spend_until_next_payday=lowest_before_payday - minimum_buffer,
    )


def default_horizon(today: Optional[DateLike] = None, months: int = DEFAULT_HORIZON_MONTHS):
    """(start, end) horizon: today through the same day `months` later."""
    start = start_of_day(today) if today is not None else date.today()
    return start, add_months(start, months)


@dataclass
class ForecastResult:
    """Everything derived from one profile snapshot."""

    horizon_start: date
    horizon_end: date
    breakdown: NetPayBreakdown
    income_events: List[ForecastEvent] = field(default_factory=list)
    bonus_events: List[ForecastEvent] = field(default_factory=list)
    expense_events: List[ForecastEvent] = field(default_factory=list)
    rows: List[ForecastRow] = field(default_factory=list)
    payday: Optional[PaydayMetrics] = None

    @property
    def next_payday(self) -> Optional[str]:
        return self.income_events[0].date if self.income_events else None

    def to_dict(self) -> dict:
        return {
            "horizon_start": to_iso_date(self.horizon_start),
            "horizon_end": to_iso_date(self.horizon_end),
            "breakdown": self.breakdown.model_dump(mode="json"),
            "rows": [row.model_dump(mode="json") for row in self.rows],
            "payday": self.payday.model_dump(mode="json") if self.payday else None,
        }


def recompute_forecast(
    profile: ForecastProfile,
    today: Optional[DateLike] = None,
    months: int = DEFAULT_HORIZON_MONTHS,
) -> ForecastResult:
    """Recompute the full forecast from a profile snapshot.

    Args:
        profile: Paycheck config, expenses and user settings
        today: Horizon anchor (defaults to the current date)
        months: Horizon length in calendar months

    Returns:
        ForecastResult; payday is None when no paycheck falls in the horizon.
    """
    horizon_start, horizon_end = default_horizon(today, months)
    settings = profile.user_settings
    paycheck = profile.paycheck_config

    income_events = generate_income_events(paycheck, horizon_start, horizon_end)
    bonus_events = generate_bonus_events(paycheck, income_events)
    expense_events = generate_expense_events(profile.expenses, horizon_start, horizon_end)

    rows = build_forecast(income_events + bonus_events + expense_events, settings.starting_balance)
    logger.debug(
        f"forecast {horizon_start}..{horizon_end}: {len(income_events)} paychecks, "
        f"{len(bonus_events)} bonuses, {len(expense_events)} expenses"
    )

    result = ForecastResult(
        horizon_start=horizon_start,
        horizon_end=horizon_end,
        breakdown=compute_net_pay_breakdown(paycheck),
        income_events=income_events,
        bonus_events=bonus_events,
        expense_events=expense_events,
        rows=rows,
    )
    if result.next_payday:
        result.payday = compute_next_payday_metrics(
            rows, result.next_payday, settings.minimum_buffer, settings.starting_balance
        )
    return result
