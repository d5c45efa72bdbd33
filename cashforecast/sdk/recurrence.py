"""Recurrence stepping shared by event generation and expense status.

A recurrence is walked lazily from an anchor date. Every walk is capped at
MAX_RECURRENCE_STEPS so a degenerate rule can never loop forever; hitting
the cap ends the walk silently.
"""

import logging
from datetime import date
from typing import Callable, Iterator, Tuple

from .dates import add_days, add_months, add_years

logger = logging.getLogger(__name__)

MAX_RECURRENCE_STEPS = 5000

# Step used for repeat='none'. The walk never gets this far because
# callers stop after the first occurrence.
NO_REPEAT_YEARS = 1000

Advance = Callable[[date], date]


def next_semimonthly(current: date) -> date:
    """Next semimonthly payday: the 1st and 15th of each month.

    From the 1st the next payday is the 15th of the same month; from the
    2nd through the 15th it is the 1st of next month; from the 16th on it
    is the 15th of next month.
    """
    if current.day <= 1:
        return current.replace(day=15)
    first_of_next = add_months(current.replace(day=1), 1)
    if current.day <= 15:
        return first_of_next
    return first_of_next.replace(day=15)


def income_step(pay_frequency: str) -> Advance:
    """Advance function for a pay frequency."""
    if pay_frequency == "biweekly":
        return lambda d: add_days(d, 14)
    if pay_frequency == "monthly":
        return lambda d: add_months(d, 1)
    if pay_frequency == "semimonthly":
        return next_semimonthly
    return lambda d: add_days(d, 7)


def expense_step(repeat: str) -> Advance:
    """Advance function for an expense repeat unit."""
    if repeat == "weekly":
        return lambda d: add_days(d, 7)
    if repeat == "biweekly":
        return lambda d: add_days(d, 14)
    if repeat == "monthly":
        return lambda d: add_months(d, 1)
    if repeat == "yearly":
        return lambda d: add_years(d, 1)
    return lambda d: add_years(d, NO_REPEAT_YEARS)


def iter_occurrences(
    anchor: date,
    advance: Advance,
    max_steps: int = MAX_RECURRENCE_STEPS,
) -> Iterator[Tuple[int, date]]:
    """Yield (step_index, date) from the anchor onward.

    The generator is finite: it yields at most max_steps items. Callers
    stop early once they pass their horizon or occurrence limit.

    Args:
        anchor: First occurrence
        advance: Maps one occurrence to the next
        max_steps: Hard cap on yielded occurrences
    """
    cursor = anchor
    for index in range(max_steps):
        yield index, cursor
        try:
            cursor = advance(cursor)
        except (OverflowError, ValueError):
            logger.debug(f"recurrence from {anchor} left the calendar after {index + 1} steps")
            return
    logger.debug(f"recurrence from {anchor} stopped at the {max_steps}-step cap")
