"""Tests for the cash-forecast CLI.

Each test runs against an isolated config directory set through
CASH_FORECAST_CONFIG_PATH.
"""

import json

import pytest
import yaml
from click.testing import CliRunner

from cashforecast.cli.__main__ import cli


PROFILE = {
    "user_settings": {"starting_balance": 500, "minimum_buffer": 200},
    "paycheck_config": {
        "paycheck_input_mode": "net",
        "net_pay_amount": 1800,
        "pay_frequency": "biweekly",
        "next_pay_date": "2025-01-10",
    },
    "expenses": [{
        "id": "rent-0001",
        "name": "Rent",
        "amount": 1200,
        "category": "rent",
        "first_due_date": "2025-01-01",
        "repeat": "monthly",
    }],
}


@pytest.fixture
def isolated_env(tmp_path, monkeypatch):
    """Set up an isolated config directory."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    monkeypatch.setenv("CASH_FORECAST_CONFIG_PATH", str(config_dir))
    return {"config_dir": config_dir, "profile": config_dir / "profile.yaml"}


@pytest.fixture
def with_profile(isolated_env):
    isolated_env["profile"].write_text(yaml.dump(PROFILE, sort_keys=False))
    return isolated_env


@pytest.fixture
def runner():
    return CliRunner()


def strict_json(text):
    """Parse JSON, rejecting NaN and Infinity tokens."""
    def reject(token):
        raise ValueError(f"non-standard JSON constant: {token}")
    return json.loads(text, parse_constant=reject)


class TestForecastCommands:

    def test_forecast_json(self, runner, with_profile):
        result = runner.invoke(cli, ["forecast", "--today", "2025-01-01", "--months", "1", "--format", "json"])
        assert result.exit_code == 0, result.output

        data = json.loads(result.output)
        assert [(r["date"], r["item"]) for r in data["rows"]] == [
            ("2025-01-01", "Rent"),
            ("2025-01-10", "Paycheck"),
            ("2025-01-24", "Paycheck"),
            ("2025-02-01", "Rent"),
        ]
        assert [r["running_balance"] for r in data["rows"]] == [-700, 1100, 2900, 1700]

    def test_forecast_filter(self, runner, with_profile):
        result = runner.invoke(cli, [
            "forecast", "--today", "2025-01-01", "--months", "1", "--filter", "income", "--format", "json",
        ])
        assert result.exit_code == 0, result.output
        assert {r["type"] for r in json.loads(result.output)["rows"]} == {"income"}

    def test_forecast_text_groups_by_month(self, runner, with_profile):
        result = runner.invoke(cli, ["forecast", "--today", "2025-01-01", "--months", "1"])
        assert result.exit_code == 0, result.output
        assert "January 2025" in result.output
        assert "February 2025" in result.output
        assert "$1,700.00" in result.output

    def test_payday(self, runner, with_profile):
        result = runner.invoke(cli, ["payday", "--today", "2025-01-01"])
        assert result.exit_code == 0, result.output
        assert "2025-01-10" in result.output
        assert "$1,100.00" in result.output
        assert "-$900.00" in result.output

    def test_payday_json(self, runner, with_profile):
        result = runner.invoke(cli, ["payday", "--today", "2025-01-01", "--format", "json"])
        data = json.loads(result.output)
        assert data["lowest_balance_before_next_payday"] == -700
        assert data["safe_to_spend_until_next_payday"] == -900

    def test_payday_without_paycheck(self, runner, isolated_env):
        isolated_env["profile"].write_text(yaml.dump({"user_settings": {"starting_balance": 10}}))
        result = runner.invoke(cli, ["payday", "--today", "2025-01-01"])
        assert result.exit_code == 0
        assert "No payday found" in result.output

    def test_bad_today(self, runner, with_profile):
        result = runner.invoke(cli, ["payday", "--today", "01/02/2025"])
        assert result.exit_code != 0
        assert "Invalid date" in result.output

    def test_breakdown_calculate(self, runner, isolated_env):
        isolated_env["profile"].write_text(yaml.dump({"paycheck_config": {
            "paycheck_input_mode": "calculate",
            "gross_pay_amount": 2000,
            "taxes_withheld": [{"id": "fed", "name": "Federal", "type": "percentOfGross", "value": 10}],
        }}))
        result = runner.invoke(cli, ["breakdown", "--format", "json"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["taxes_total"] == 200
        assert data["net_pay"] == 1800

    def test_breakdown_invalid_gross_shows_dash(self, runner, isolated_env):
        isolated_env["profile"].write_text(yaml.dump({"paycheck_config": {
            "paycheck_input_mode": "calculate",
            "gross_pay_amount": 0,
        }}))
        result = runner.invoke(cli, ["breakdown"])
        assert result.exit_code == 0, result.output
        assert "could not be derived" in result.output

    def test_breakdown_json_writes_null_for_underivable_pay(self, runner, isolated_env):
        isolated_env["profile"].write_text(yaml.dump({"paycheck_config": {
            "paycheck_input_mode": "calculate",
            "gross_pay_amount": 0,
        }}))
        result = runner.invoke(cli, ["breakdown", "--format", "json"])
        assert result.exit_code == 0, result.output
        data = strict_json(result.output)
        assert data["gross_pay"] == 0
        assert data["net_pay"] is None
        assert data["total_withheld_deducted"] is None

    def test_forecast_json_writes_null_for_underivable_pay(self, runner, isolated_env):
        profile = dict(PROFILE, paycheck_config={"paycheck_input_mode": "calculate", "next_pay_date": "2025-01-10"})
        isolated_env["profile"].write_text(yaml.dump(profile))
        result = runner.invoke(cli, ["forecast", "--today", "2025-01-01", "--months", "1", "--format", "json"])
        assert result.exit_code == 0, result.output
        data = strict_json(result.output)
        assert data["breakdown"]["net_pay"] is None
        assert data["payday"] is None
        assert [r["item"] for r in data["rows"]] == ["Rent", "Rent"]

    def test_months(self, runner, with_profile):
        result = runner.invoke(cli, ["months", "--today", "2025-01-01", "--months", "1", "--format", "json"])
        data = json.loads(result.output)
        assert data["2025-01"] == {"opening_balance": 500, "ending_balance": 2900, "spent": 1200}
        assert data["2025-02"]["opening_balance"] == 2900

    def test_categories(self, runner, with_profile):
        result = runner.invoke(cli, ["categories", "--today", "2025-01-01", "--format", "json"])
        data = json.loads(result.output)
        assert len(data) == 12
        assert data[0]["slices"] == [{"category": "rent", "amount": 1200}]

    def test_missing_profile(self, runner, isolated_env):
        result = runner.invoke(cli, ["forecast"])
        assert result.exit_code == 1
        assert "No profile found" in result.output

    def test_invalid_profile(self, runner, isolated_env):
        isolated_env["profile"].write_text("user_settings:\n  starting_balanse: 5\n")
        result = runner.invoke(cli, ["forecast"])
        assert result.exit_code == 1
        assert "validation failed" in result.output


class TestExpenseCommands:

    def test_add_and_list(self, runner, with_profile):
        result = runner.invoke(cli, [
            "expenses", "add", "Gym", "35", "--due", "2025-01-03", "--repeat", "monthly",
            "--count", "6", "--category", "health",
        ])
        assert result.exit_code == 0, result.output
        assert "Added expense" in result.output

        listed = json.loads(runner.invoke(cli, ["expenses", "list", "--format", "json"]).output)
        gym = [e for e in listed if e["name"] == "Gym"][0]
        assert gym["repeat_count"] == 6
        assert gym["category"] == "health"

    def test_add_variable_dates(self, runner, with_profile):
        result = runner.invoke(cli, [
            "expenses", "add", "Car repair", "320", "--date", "2025-04-10", "--date", "2025-03-10",
        ])
        assert result.exit_code == 0, result.output
        saved = yaml.safe_load(with_profile["profile"].read_text())
        repair = saved["expenses"][-1]
        assert repair["variable_due_dates"] == ["2025-03-10", "2025-04-10"]
        assert repair["first_due_date"] == "2025-03-10"

    def test_add_invalid(self, runner, with_profile):
        result = runner.invoke(cli, ["expenses", "add", "Gym", "0", "--due", "2025-01-03"])
        assert result.exit_code == 1
        assert "Amount must be greater than 0." in result.output

    def test_add_missing_due_date(self, runner, with_profile):
        result = runner.invoke(cli, ["expenses", "add", "Gym", "35"])
        assert result.exit_code == 1
        assert "Due date is required." in result.output

    def test_remove(self, runner, with_profile):
        result = runner.invoke(cli, ["expenses", "remove", "rent"])
        assert result.exit_code == 0, result.output
        assert yaml.safe_load(with_profile["profile"].read_text())["expenses"] == []

    def test_remove_unknown(self, runner, with_profile):
        result = runner.invoke(cli, ["expenses", "remove", "zzz"])
        assert result.exit_code == 1

    def test_remove_with_invalid_profile(self, runner, isolated_env):
        isolated_env["profile"].write_text("expenses:\n  - id: x\n    name: X\n    amount: 1\n    bogus: 2\n")
        result = runner.invoke(cli, ["expenses", "remove", "x"])
        assert result.exit_code == 1
        assert "validation failed" in result.output
        assert "Traceback" not in result.output

    def test_status(self, runner, with_profile):
        runner.invoke(cli, ["expenses", "add", "Old bill", "20", "--due", "2024-06-01"])
        result = runner.invoke(cli, ["expenses", "status", "--today", "2025-01-01", "--format", "json"])
        data = json.loads(result.output)
        assert data["active"] == ["rent-0001"]
        assert len(data["finished"]) == 1


class TestSettingsAndProfileCommands:

    def test_horizon(self, runner, isolated_env):
        result = runner.invoke(cli, ["settings", "horizon", "18"])
        assert result.exit_code == 0, result.output
        settings = json.loads((isolated_env["config_dir"] / "settings.json").read_text())
        assert settings["horizon_months"] == 18

        result = runner.invoke(cli, ["settings", "horizon", "--clear"])
        assert "Horizon is now: 12 months" in result.output

    def test_settings_show(self, runner, isolated_env):
        result = runner.invoke(cli, ["settings", "show"])
        assert result.exit_code == 0
        assert "horizon_months: 12" in result.output

    def test_profile_init(self, runner, isolated_env):
        result = runner.invoke(cli, ["profile", "init"])
        assert result.exit_code == 0, result.output
        assert isolated_env["profile"].exists()

        again = runner.invoke(cli, ["profile", "init"])
        assert again.exit_code == 1
        assert "already exists" in again.output

    def test_profile_show(self, runner, with_profile):
        result = runner.invoke(cli, ["profile", "show"])
        assert result.exit_code == 0, result.output
        assert "Expenses: 1" in result.output

    def test_profile_set_and_get(self, runner, with_profile):
        result = runner.invoke(cli, ["profile", "set", "user_settings.minimum_buffer", "350"])
        assert result.exit_code == 0, result.output
        result = runner.invoke(cli, ["profile", "get", "user_settings.minimum_buffer"])
        assert result.output.strip() == "350"

    def test_profile_use(self, runner, isolated_env, tmp_path):
        other = tmp_path / "other.yaml"
        other.write_text(yaml.dump(PROFILE))
        result = runner.invoke(cli, ["profile", "use", str(other)])
        assert result.exit_code == 0, result.output
        assert runner.invoke(cli, ["profile", "path"]).output.strip() == str(other.resolve())

    def test_profile_use_rejects_invalid(self, runner, isolated_env, tmp_path):
        bad = tmp_path / "bad.yaml"
        bad.write_text("expenses: 5\n")
        result = runner.invoke(cli, ["profile", "use", str(bad)])
        assert result.exit_code == 1
        assert "validation failed" in result.output

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "cash-forecast" in result.output
