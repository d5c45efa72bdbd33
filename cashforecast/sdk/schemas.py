"""Pydantic schemas for cash-forecast data.

Input schemas (profile.yaml content) use extra='forbid' so typos in the
profile cause clear errors rather than silent ignoring. Loose values that
older profiles carry (unknown categories, legacy keys) are normalized in
"before" validators instead of rejected.

Output schemas are plain serializable containers; they never hide state
and are always recomputed rather than stored.
"""

import math
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator


PayFrequency = Literal["weekly", "biweekly", "semimonthly", "monthly"]
ExpenseRepeat = Literal["none", "weekly", "biweekly", "monthly", "yearly"]
PaycheckInputMode = Literal["net", "calculate"]
GrossInputMode = Literal["direct", "hourly"]
DeductionType = Literal["fixed", "percentOfGross"]
EventType = Literal["income", "expense"]
Category = Literal[
    "rent",
    "utilities",
    "debt",
    "phone bill",
    "car note",
    "house note",
    "subscriptions",
    "food",
    "transport",
    "health",
    "entertainment",
    "other",
]

EXPENSE_REPEATS = ("none", "weekly", "biweekly", "monthly", "yearly")
CATEGORIES = (
    "rent",
    "utilities",
    "debt",
    "phone bill",
    "car note",
    "house note",
    "subscriptions",
    "food",
    "transport",
    "health",
    "entertainment",
    "other",
)

# Misspelling shipped by an early version of the expense form
LEGACY_CATEGORY_ALIASES = {"care note": "car note"}


def _finite_or_none(value: Any) -> Any:
    """Map NaN/inf to None so optional amounts read as 'unset'."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        if not math.isfinite(value):
            return None
    return value


# =============================================================================
# Input Schemas - profile.yaml
# =============================================================================


class DeductionLine(BaseModel):
    """A named deduction or tax withholding line.

    Negative or non-finite values are accepted here; they simply contribute
    nothing when the paycheck is calculated.
    """

    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., description="Line identifier")
    name: str = Field(..., description="Display name (e.g., 'Health insurance')")
    type: DeductionType = Field(default="fixed", description="Fixed dollars or percent of gross")
    value: float = Field(..., description="Dollar amount, or percentage when type is percentOfGross")

    @model_validator(mode="before")
    @classmethod
    def accept_legacy_amount(cls, data: Any) -> Any:
        """Early tax lines stored 'amount' instead of 'value'."""
        if isinstance(data, dict) and "amount" in data:
            data = dict(data)
            amount = data.pop("amount")
            data.setdefault("value", amount)
        return data


class PaycheckConfig(BaseModel):
    """How net pay per period is determined, and when paydays fall."""

    model_config = ConfigDict(extra="forbid")

    paycheck_input_mode: PaycheckInputMode = Field(
        default="net", description="'net' uses net_pay_amount; 'calculate' derives net from gross"
    )
    gross_input_mode: GrossInputMode = Field(
        default="direct", description="'direct' uses gross_pay_amount; 'hourly' derives it"
    )
    net_pay_amount: Optional[float] = Field(default=None, description="Literal net pay per period")
    gross_pay_amount: Optional[float] = Field(default=None, description="Literal gross pay per period")
    hourly_rate: Optional[float] = Field(default=None, description="Hourly rate")
    hours_per_week: Optional[float] = Field(default=None, description="Hours worked per week")
    pretax_deductions: List[DeductionLine] = Field(default_factory=list)
    taxes_withheld: List[DeductionLine] = Field(default_factory=list)
    posttax_deductions: List[DeductionLine] = Field(default_factory=list)
    loan_repayment_amount: float = Field(
        default=0, description="Flat repayment taken after all other deductions"
    )
    pay_frequency: PayFrequency = Field(default="biweekly")
    next_pay_date: str = Field(default="", description="Anchor payday (YYYY-MM-DD)")
    monthly_bonus_amount: float = Field(
        default=0, description="Flat bonus paid with the last paycheck of each month"
    )

    @field_validator("net_pay_amount", "gross_pay_amount", "hourly_rate", "hours_per_week", mode="before")
    @classmethod
    def non_finite_is_unset(cls, v: Any) -> Any:
        return _finite_or_none(v)

    @field_validator("next_pay_date", mode="before")
    @classmethod
    def none_date_is_empty(cls, v: Any) -> Any:
        return "" if v is None else str(v)


class Expense(BaseModel):
    """A recurring or one-off obligation.

    Two mutually exclusive scheduling modes:
    - variable dates: an explicit list of due dates (any order)
    - fixed schedule: first_due_date + repeat (+ optional repeat_count)
    """

    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., description="Unique expense identifier")
    name: str = Field(..., description="Display name")
    amount: float = Field(..., description="Amount per occurrence")
    category: Category = Field(default="other")
    notes: str = Field(default="")
    first_due_date: str = Field(default="", description="Anchor due date (YYYY-MM-DD)")
    repeat: ExpenseRepeat = Field(default="none")
    repeat_count: Optional[int] = Field(
        default=None, description="Total occurrences including the first; None or <=0 is unbounded"
    )
    variable_dates_enabled: bool = Field(default=False)
    variable_due_dates: List[str] = Field(default_factory=list)
    highlight_last_event: bool = Field(default=True)

    @model_validator(mode="before")
    @classmethod
    def accept_legacy_due_date(cls, data: Any) -> Any:
        """Older profiles stored a single 'due_date' instead of 'first_due_date'."""
        if isinstance(data, dict) and "due_date" in data:
            data = dict(data)
            legacy = data.pop("due_date")
            if not data.get("first_due_date"):
                data["first_due_date"] = legacy
        return data

    @field_validator("category", mode="before")
    @classmethod
    def normalize_category(cls, v: Any) -> Any:
        if not isinstance(v, str):
            return "other"
        normalized = v.strip().lower()
        normalized = LEGACY_CATEGORY_ALIASES.get(normalized, normalized)
        return normalized if normalized in CATEGORIES else "other"

    @field_validator("repeat", mode="before")
    @classmethod
    def normalize_repeat(cls, v: Any) -> Any:
        return v if v in EXPENSE_REPEATS else "none"

    @field_validator("repeat_count", mode="before")
    @classmethod
    def whole_repeat_count(cls, v: Any) -> Any:
        v = _finite_or_none(v)
        if isinstance(v, float):
            return math.floor(v)
        return v

    @field_validator("variable_due_dates", mode="before")
    @classmethod
    def drop_blank_dates(cls, v: Any) -> Any:
        if not isinstance(v, list):
            return []
        return [str(d) for d in v if d]

    @field_validator("first_due_date", mode="before")
    @classmethod
    def none_date_is_empty(cls, v: Any) -> Any:
        return "" if v is None else str(v)


class UserSettings(BaseModel):
    """Balance inputs that are not part of the paycheck."""

    model_config = ConfigDict(extra="forbid")

    starting_balance: float = Field(default=0, description="Balance today")
    minimum_buffer: float = Field(default=200, description="Cushion kept out of safe-to-spend")


class ForecastProfile(BaseModel):
    """Root of profile.yaml: everything a forecast is computed from."""

    model_config = ConfigDict(extra="forbid")

    user_settings: UserSettings = Field(default_factory=UserSettings)
    paycheck_config: PaycheckConfig = Field(default_factory=PaycheckConfig)
    expenses: List[Expense] = Field(default_factory=list)


# =============================================================================
# Output Schemas - derived, never persisted
# =============================================================================


class OutputModel(BaseModel):
    """Base for derived figures.

    NaN is the in-memory sentinel for "could not be derived"; JSON output
    writes it (and infinities) as null so strict parsers accept it.
    """

    @field_serializer("*", when_used="json")
    def non_finite_as_null(self, value: Any) -> Any:
        if isinstance(value, float) and not math.isfinite(value):
            return None
        return value


class NetPayBreakdown(OutputModel):
    """Per-period paycheck breakdown. NaN marks a field that could not be derived."""

    gross_pay: float
    pretax_total: float
    taxes_total: float
    posttax_total: float
    loan_repayment_amount: float
    total_withheld_deducted: float
    net_pay: float


class ForecastEvent(OutputModel):
    """A dated income or expense occurrence."""

    id: str
    date: str = Field(..., description="YYYY-MM-DD")
    type: EventType
    item: str = Field(..., description="Display name")
    category: str = Field(..., description="Expense category, or 'income'")
    amount: float
    source_id: Optional[str] = Field(default=None, description="Expense id for expense-derived events")


class ForecastRow(ForecastEvent):
    """A forecast event with the balance immediately after it posts."""

    running_balance: float


class PaydayMetrics(OutputModel):
    """Affordability figures up to the next payday."""

    next_payday_date: str
    balance_on_next_payday: float
    lowest_balance_before_next_payday: float
    safe_to_spend_until_next_payday: float


class MonthlyBalanceSummary(OutputModel):
    """Balance movement within one YYYY-MM month."""

    opening_balance: float
    ending_balance: float
    spent: float


class MonthlyCategorySlice(OutputModel):
    category: str
    amount: float


class MonthlyCategoryChartData(BaseModel):
    key: str = Field(..., description="YYYY-MM")
    label: str
    slices: List[MonthlyCategorySlice] = Field(default_factory=list)


class BandedForecastRow(BaseModel):
    """A forecast row decorated for month-banded display."""

    row: ForecastRow
    month_key: str
    month_label: str
    month_summary: Optional[MonthlyBalanceSummary] = None
    month_spent: float
    spent_trend: Literal["", "better", "worse", "equal"] = ""
    is_month_start: bool
    is_last_payment: bool
    is_last_expense_of_month: bool
    month_band: Literal["a", "b"]
