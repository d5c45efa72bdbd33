"""Expense draft validation and normalization.

SDK layer - pure logic. A draft is a plain dict of expense fields without
an id (what a CLI prompt or form collects). validate_expense_draft()
reports the first problem as a user-facing message; normalize_expense_draft()
puts a valid draft into the canonical shape before it becomes an Expense.
"""

import math
import uuid
from typing import Any, Dict, Optional

from .schemas import Expense


def validate_expense_draft(draft: Dict[str, Any]) -> Optional[str]:
    """Check a draft for missing or out-of-range fields.

    Returns:
        Error message, or None if the draft is valid.
    """
    name = draft.get("name") or ""
    if not name.strip():
        return "Name is required."

    amount = draft.get("amount")
    if not isinstance(amount, (int, float)) or not math.isfinite(amount) or amount <= 0:
        return "Amount must be greater than 0."

    variable = bool(draft.get("variable_dates_enabled"))
    if not variable and not draft.get("first_due_date"):
        return "Due date is required."

    if variable:
        due_dates = draft.get("variable_due_dates")
        if not isinstance(due_dates, list) or not due_dates:
            return "Variable due dates are required."
        if any(not d for d in due_dates):
            return "Each variable due date is required."

    repeat_count = draft.get("repeat_count")
    if not variable and draft.get("repeat", "none") != "none" and repeat_count is not None:
        if isinstance(repeat_count, bool) or not isinstance(repeat_count, (int, float)):
            return "Repeat count must be a whole number greater than 0."
        if not float(repeat_count).is_integer() or repeat_count <= 0:
            return "Repeat count must be a whole number greater than 0."

    return None


def normalize_expense_draft(draft: Dict[str, Any]) -> Dict[str, Any]:
    """Canonical form of a valid draft.

    - name trimmed
    - variable due dates sorted; the earliest becomes first_due_date
    - variable-date expenses never repeat
    - repeat_count dropped when the expense does not repeat
    """
    normalized = dict(draft)
    variable = bool(draft.get("variable_dates_enabled"))
    due_dates = sorted(str(d) for d in draft.get("variable_due_dates") or []) if variable else []

    normalized["name"] = (draft.get("name") or "").strip()
    normalized["variable_dates_enabled"] = variable
    normalized["variable_due_dates"] = due_dates
    if variable:
        normalized["first_due_date"] = due_dates[0] if due_dates else ""
        normalized["repeat"] = "none"

    repeat = normalized.get("repeat", "none")
    if variable or repeat == "none":
        normalized["repeat_count"] = None
    normalized["highlight_last_event"] = draft.get("highlight_last_event", True) is not False
    return normalized


def new_expense_id() -> str:
    """Random identifier for a new expense."""
    return str(uuid.uuid4())


def expense_from_draft(draft: Dict[str, Any], expense_id: Optional[str] = None) -> Expense:
    """Validate, normalize and build an Expense.

    Raises:
        ValueError: If the draft is invalid
    """
    error = validate_expense_draft(draft)
    if error:
        raise ValueError(error)
    fields = normalize_expense_draft(draft)
    fields.pop("id", None)
    return Expense(id=expense_id or new_expense_id(), **fields)
