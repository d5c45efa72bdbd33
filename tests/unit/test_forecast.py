"""Tests for forecast assembly: ordering, running balance, payday metrics."""

import json
import math
from datetime import date

from cashforecast.sdk.forecast import (
    build_forecast,
    compute_next_payday_metrics,
    default_horizon,
    recompute_forecast,
)
from cashforecast.sdk.schemas import ForecastEvent, ForecastProfile, ForecastRow


def event(id, date, type="expense", amount=10, category="other", item=None):
    return ForecastEvent(
        id=id,
        date=date,
        type=type,
        item=item or id,
        category="income" if type == "income" else category,
        amount=amount,
        source_id=None if type == "income" else id,
    )


def row(date, running_balance):
    return ForecastRow(
        id=f"r-{date}",
        date=date,
        type="expense",
        item="x",
        category="other",
        amount=0,
        running_balance=running_balance,
    )


class TestBuildForecast:

    def test_income_before_expense_on_same_day(self):
        events = [
            event("rent", "2025-01-10", amount=500),
            event("pay", "2025-01-10", type="income", amount=1000),
        ]
        rows = build_forecast(events, 100)
        assert [r.id for r in rows] == ["pay", "rent"]
        assert [r.running_balance for r in rows] == [1100, 600]

    def test_orders_by_date_then_category_then_item(self):
        events = [
            event("b", "2025-01-05", category="utilities", item="Water"),
            event("a", "2025-01-05", category="food", item="Groceries"),
            event("c", "2025-01-05", category="food", item="Coffee"),
            event("d", "2025-01-01", category="rent", item="Rent"),
        ]
        rows = build_forecast(events, 0)
        assert [r.item for r in rows] == ["Rent", "Coffee", "Groceries", "Water"]

    def test_running_balance_can_go_negative(self):
        rows = build_forecast([event("big", "2025-01-02", amount=300)], 100)
        assert rows[0].running_balance == -200

    def test_does_not_mutate_input(self):
        events = [event("z", "2025-02-01"), event("a", "2025-01-01")]
        build_forecast(events, 0)
        assert [e.id for e in events] == ["z", "a"]

    def test_idempotent(self):
        events = [
            event("pay", "2025-01-10", type="income", amount=1000),
            event("rent", "2025-01-10", amount=500),
            event("food", "2025-01-03", amount=75.5, category="food"),
        ]
        first = json.dumps([r.model_dump() for r in build_forecast(events, 42)])
        second = json.dumps([r.model_dump() for r in build_forecast(events, 42)])
        assert first == second

    def test_empty(self):
        assert build_forecast([], 500) == []


class TestPaydayMetrics:

    def test_worked_example(self):
        rows = [row("2024-01-05", 100), row("2024-01-10", 80)]
        metrics = compute_next_payday_metrics(rows, "2024-01-10", minimum_buffer=20, starting_balance=50)
        assert metrics.balance_on_next_payday == 80
        assert metrics.lowest_balance_before_next_payday == 50
        assert metrics.safe_to_spend_until_next_payday == 30

    def test_payday_first_event_falls_back_to_starting_balance(self):
        rows = [row("2024-01-12", 900)]
        metrics = compute_next_payday_metrics(rows, "2024-01-10", minimum_buffer=100, starting_balance=250)
        assert metrics.balance_on_next_payday == 250
        assert metrics.lowest_balance_before_next_payday == 250
        assert metrics.safe_to_spend_until_next_payday == 150

    def test_negative_safe_to_spend_is_reported(self):
        rows = [row("2024-01-03", -40), row("2024-01-10", 500)]
        metrics = compute_next_payday_metrics(rows, "2024-01-10", minimum_buffer=200, starting_balance=60)
        assert metrics.safe_to_spend_until_next_payday == -240


class TestRecomputeForecast:

    def profile(self, **paycheck):
        config = {
            "paycheck_input_mode": "net",
            "net_pay_amount": 1000,
            "pay_frequency": "biweekly",
            "next_pay_date": "2025-01-10",
        }
        config.update(paycheck)
        return ForecastProfile.model_validate({
            "user_settings": {"starting_balance": 300, "minimum_buffer": 100},
            "paycheck_config": config,
            "expenses": [{
                "id": "rent",
                "name": "Rent",
                "amount": 800,
                "category": "rent",
                "first_due_date": "2025-01-05",
                "repeat": "monthly",
            }],
        })

    def test_default_horizon(self):
        assert default_horizon(date(2025, 1, 31), 1) == (date(2025, 1, 31), date(2025, 2, 28))

    def test_full_pipeline(self):
        result = recompute_forecast(self.profile(monthly_bonus_amount=50), today=date(2025, 1, 1), months=1)
        assert result.horizon_end == date(2025, 2, 1)
        assert [(r.date, r.item) for r in result.rows] == [
            ("2025-01-05", "Rent"),
            ("2025-01-10", "Paycheck"),
            ("2025-01-24", "Monthly Bonus"),
            ("2025-01-24", "Paycheck"),
        ]
        assert result.rows[-1].running_balance == 300 - 800 + 1000 + 1000 + 50
        assert result.next_payday == "2025-01-10"
        assert result.payday.lowest_balance_before_next_payday == -500
        assert result.payday.safe_to_spend_until_next_payday == -600

    def test_no_paycheck_means_no_payday(self):
        result = recompute_forecast(self.profile(next_pay_date=""), today=date(2025, 1, 1), months=1)
        assert result.payday is None
        assert [r.item for r in result.rows] == ["Rent"]

    def test_breakdown_nan_when_gross_invalid(self):
        profile = self.profile(paycheck_input_mode="calculate", gross_pay_amount=-1)
        result = recompute_forecast(profile, today=date(2025, 1, 1), months=1)
        assert math.isnan(result.breakdown.net_pay)
        assert result.income_events == []

    def test_to_dict_is_serializable(self):
        result = recompute_forecast(self.profile(), today=date(2025, 1, 1), months=2)
        data = json.loads(json.dumps(result.to_dict()))
        assert data["horizon_start"] == "2025-01-01"
        assert data["payday"]["next_payday_date"] == "2025-01-10"
        assert len(data["rows"]) == len(result.rows)
