"""Cash Forecast SDK - balance projection from paychecks and expenses."""

from .config import (
    get_config_dir,
    get_settings_path,
    load_settings,
    save_settings,
    get_setting,
    set_setting,
    get_horizon_months,
    get_profile_path,
    load_profile,
    save_profile,
    get_profile_value,
    set_profile_value,
    load_forecast_profile,
    save_forecast_profile,
    add_expense,
    remove_expense,
    find_expenses,
    ProfileNotFoundError,
)

from .schemas import (
    DeductionLine,
    PaycheckConfig,
    Expense,
    UserSettings,
    ForecastProfile,
    NetPayBreakdown,
    ForecastEvent,
    ForecastRow,
    PaydayMetrics,
    MonthlyBalanceSummary,
    MonthlyCategorySlice,
    MonthlyCategoryChartData,
    BandedForecastRow,
)

from .dates import (
    start_of_day,
    to_iso_date,
    parse_iso_date,
    add_days,
    add_months,
    add_years,
    difference_in_days,
)

from .pay import (
    compute_gross_pay_from_hourly,
    compute_net_pay_breakdown,
    compute_net_pay,
    resolve_pay_input,
    round_to_cents,
)

from .recurrence import MAX_RECURRENCE_STEPS

from .events import (
    generate_income_events,
    generate_bonus_events,
    generate_expense_events,
)

from .forecast import (
    build_forecast,
    compute_next_payday_metrics,
    recompute_forecast,
    ForecastResult,
)

from .views import (
    filter_forecast_rows,
    create_monthly_balance_by_key,
    create_finite_expense_id_set,
    create_last_expense_date_by_source,
    create_last_expense_row_id_by_month,
    build_banded_rows,
    build_monthly_category_slices,
)

from .expense_status import (
    partition_expenses_by_status,
    ExpenseStatusPartition,
)

from .expenses import (
    validate_expense_draft,
    normalize_expense_draft,
    expense_from_draft,
)

__all__ = [
    # Config
    "get_config_dir",
    "get_settings_path",
    "load_settings",
    "save_settings",
    "get_setting",
    "set_setting",
    "get_horizon_months",
    "get_profile_path",
    "load_profile",
    "save_profile",
    "get_profile_value",
    "set_profile_value",
    "load_forecast_profile",
    "save_forecast_profile",
    "add_expense",
    "remove_expense",
    "find_expenses",
    "ProfileNotFoundError",
    # Schemas
    "DeductionLine",
    "PaycheckConfig",
    "Expense",
    "UserSettings",
    "ForecastProfile",
    "NetPayBreakdown",
    "ForecastEvent",
    "ForecastRow",
    "PaydayMetrics",
    "MonthlyBalanceSummary",
    "MonthlyCategorySlice",
    "MonthlyCategoryChartData",
    "BandedForecastRow",
    # Dates
    "start_of_day",
    "to_iso_date",
    "parse_iso_date",
    "add_days",
    "add_months",
    "add_years",
    "difference_in_days",
    # Pay
    "compute_gross_pay_from_hourly",
    "compute_net_pay_breakdown",
    "compute_net_pay",
    "resolve_pay_input",
    "round_to_cents",
    # Events
    "MAX_RECURRENCE_STEPS",
    "generate_income_events",
    "generate_bonus_events",
    "generate_expense_events",
    # Forecast
    "build_forecast",
    "compute_next_payday_metrics",
    "recompute_forecast",
    "ForecastResult",
    # Views
    "filter_forecast_rows",
    "create_monthly_balance_by_key",
    "create_finite_expense_id_set",
    "create_last_expense_date_by_source",
    "create_last_expense_row_id_by_month",
    "build_banded_rows",
    "build_monthly_category_slices",
    # Expense status / editing
    "partition_expenses_by_status",
    "ExpenseStatusPartition",
    "validate_expense_draft",
    "normalize_expense_draft",
    "expense_from_draft",
]
