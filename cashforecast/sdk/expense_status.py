"""Active vs finished expenses.

An expense is active while it still has an occurrence on or after the
reference date. The schedule is walked with the same stepping rules the
event generator uses, but without a horizon end.
"""

from dataclasses import dataclass, field
from typing import List

from .dates import DateLike, parse_iso_date, start_of_day
from .events import max_occurrences
from .recurrence import expense_step, iter_occurrences
from .schemas import Expense


@dataclass
class ExpenseStatusPartition:
    """Expenses split by whether anything is still due."""

    active: List[Expense] = field(default_factory=list)
    finished: List[Expense] = field(default_factory=list)


def has_upcoming_occurrence(expense: Expense, from_date: DateLike) -> bool:
    """True if the expense has an occurrence on or after from_date."""
    start = start_of_day(from_date)

    if expense.variable_dates_enabled:
        for iso in expense.variable_due_dates:
            due = parse_iso_date(iso)
            if due is not None and due >= start:
                return True
        return False

    anchor = parse_iso_date(expense.first_due_date)
    if anchor is None:
        return False

    if expense.repeat == "none":
        return anchor >= start

    limit = max_occurrences(expense)
    if limit == float("inf"):
        return True

    for index, cursor in iter_occurrences(anchor, expense_step(expense.repeat)):
        if index >= limit:
            break
        if cursor >= start:
            return True
    return False


def partition_expenses_by_status(expenses: List[Expense], from_date: DateLike) -> ExpenseStatusPartition:
    """Split expenses into active and finished, preserving input order."""
    partition = ExpenseStatusPartition()
    for expense in expenses:
        if has_upcoming_occurrence(expense, from_date):
            partition.active.append(expense)
        else:
            partition.finished.append(expense)
    return partition
