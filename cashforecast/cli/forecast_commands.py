"""Forecast CLI commands for Cash Forecast.

Read-only views over the forecast recomputed from profile.yaml:
ledger, payday metrics, paycheck breakdown, monthly summaries and
category spend.
"""

import json
import math
from datetime import date, datetime
from typing import Optional

import click
from pydantic import ValidationError

from cashforecast.sdk import (
    ForecastProfile,
    ProfileNotFoundError,
    build_banded_rows,
    build_monthly_category_slices,
    compute_net_pay_breakdown,
    create_finite_expense_id_set,
    create_last_expense_date_by_source,
    create_last_expense_row_id_by_month,
    create_monthly_balance_by_key,
    filter_forecast_rows,
    get_horizon_months,
    load_forecast_profile,
    recompute_forecast,
)
from cashforecast.sdk.dates import format_month_label


TREND_MARKS = {"better": ("down", "green"), "worse": ("up", "red"), "equal": ("flat", None)}


def load_profile_or_fail() -> ForecastProfile:
    """Load the typed profile, converting config errors to ClickException."""
    try:
        return load_forecast_profile(require_exists=True)
    except ProfileNotFoundError as e:
        raise click.ClickException(str(e))
    except ValidationError as e:
        raise click.ClickException(f"Profile validation failed:\n{e}")


def parse_today(value: Optional[str]) -> date:
    """Parse --today, defaulting to the current date."""
    if not value:
        return date.today()
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise click.BadParameter(f"Invalid date '{value}'. Use YYYY-MM-DD.", param_hint="--today")


def money(value: float) -> str:
    """Format a dollar amount; NaN shows as a dash."""
    if value is None or not math.isfinite(value):
        return "-"
    return f"${value:,.2f}" if value >= 0 else f"-${-value:,.2f}"


def today_option(f):
    return click.option(
        "--today", "today", default=None, metavar="YYYY-MM-DD",
        help="Horizon start (default: current date).",
    )(f)


def months_option(f):
    return click.option(
        "--months", type=click.IntRange(min=1), default=None,
        help="Horizon length in months (default: settings horizon_months or 12).",
    )(f)


def format_option(f):
    return click.option(
        "--format", "output_format", type=click.Choice(["text", "json"]),
        default="text", help="Output format.",
    )(f)


def _recompute(today: Optional[str], months: Optional[int]):
    profile = load_profile_or_fail()
    result = recompute_forecast(profile, today=parse_today(today), months=months or get_horizon_months())
    return profile, result


@click.command("forecast")
@today_option
@months_option
@click.option("--filter", "filter_mode", type=click.Choice(["all", "income", "expense"]),
              default="all", help="Show only income or expense rows.")
@format_option
def forecast_cmd(today, months, filter_mode, output_format):
    """Show the projected ledger with running balance.

    Rows are grouped by month. The first row of each month shows whether
    that month's spending is lower (down), higher (up) or the same (flat)
    as the month before. Rows marked * are the final payment of a
    recurring expense; rows marked + are the last expense of their month.
    """
    profile, result = _recompute(today, months)
    rows = filter_forecast_rows(result.rows, filter_mode)

    if output_format == "json":
        output = result.to_dict()
        output["rows"] = [row.model_dump(mode="json") for row in rows]
        click.echo(json.dumps(output, indent=2))
        return

    click.echo(f"Horizon: {result.horizon_start} to {result.horizon_end}")
    if not rows:
        click.echo("\nNo forecast rows. Set paycheck_config.next_pay_date or add expenses.")
        return

    banded = build_banded_rows(
        rows,
        monthly_balance_by_key=create_monthly_balance_by_key(result.rows, profile.user_settings.starting_balance),
        finite_expense_ids=create_finite_expense_id_set(profile.expenses, result.rows),
        last_expense_date_by_source=create_last_expense_date_by_source(result.rows),
        last_expense_row_id_by_month=create_last_expense_row_id_by_month(result.rows),
    )

    for banded_row in banded:
        row = banded_row.row
        if banded_row.is_month_start:
            header = f"\n{banded_row.month_label}  (spent {money(banded_row.month_spent)})"
            if banded_row.spent_trend:
                mark, color = TREND_MARKS[banded_row.spent_trend]
                header += " " + click.style(mark, fg=color)
            click.echo(header)
            click.echo("-" * 72)
            click.echo(f"{'DATE':<12} {'ITEM':<24} {'CATEGORY':<14} {'AMOUNT':>9} {'BALANCE':>10}")

        sign = "+" if row.type == "income" else "-"
        flags = ("*" if banded_row.is_last_payment else "") + ("+" if banded_row.is_last_expense_of_month else "")
        line = (
            f"{row.date:<12} {row.item[:24]:<24} {row.category[:14]:<14} "
            f"{sign}{money(row.amount):>8} {money(row.running_balance):>10} {flags}"
        )
        click.echo(click.style(line.rstrip(), fg="red") if row.running_balance < 0 else line.rstrip())


@click.command("payday")
@today_option
@months_option
@format_option
def payday_cmd(today, months, output_format):
    """Show safe-to-spend until the next payday."""
    profile, result = _recompute(today, months)

    if result.payday is None:
        if output_format == "json":
            click.echo(json.dumps({"payday": None}, indent=2))
            return
        click.echo("No payday found in horizon.")
        click.echo("Verify paycheck_config.next_pay_date, pay_frequency and the pay amounts.")
        return

    metrics = result.payday
    if output_format == "json":
        click.echo(json.dumps(metrics.model_dump(mode="json"), indent=2))
        return

    click.echo(f"Next payday:            {metrics.next_payday_date}")
    click.echo(f"Balance on payday:      {money(metrics.balance_on_next_payday)}")
    click.echo(f"Lowest before payday:   {money(metrics.lowest_balance_before_next_payday)}")
    click.echo(f"Minimum buffer:         {money(profile.user_settings.minimum_buffer)}")
    safe = metrics.safe_to_spend_until_next_payday
    click.echo("Safe to spend:          " + click.style(money(safe), fg="green" if safe >= 0 else "red"))


@click.command("breakdown")
@format_option
def breakdown_cmd(output_format):
    """Show the per-paycheck gross-to-net breakdown."""
    profile = load_profile_or_fail()
    breakdown = compute_net_pay_breakdown(profile.paycheck_config)

    if output_format == "json":
        click.echo(json.dumps(breakdown.model_dump(mode="json"), indent=2))
        return

    config = profile.paycheck_config
    click.echo(f"Mode: {config.paycheck_input_mode}"
               + (f" ({config.gross_input_mode} gross)" if config.paycheck_input_mode == "calculate" else ""))
    click.echo(f"Frequency: {config.pay_frequency}")
    click.echo()
    click.echo(f"{'Gross pay':<26} {money(breakdown.gross_pay):>12}")
    click.echo(f"{'Pretax deductions':<26} {money(breakdown.pretax_total):>12}")
    click.echo(f"{'Taxes withheld':<26} {money(breakdown.taxes_total):>12}")
    click.echo(f"{'Posttax deductions':<26} {money(breakdown.posttax_total):>12}")
    click.echo(f"{'Loan repayment':<26} {money(breakdown.loan_repayment_amount):>12}")
    click.echo(f"{'Total withheld/deducted':<26} {money(breakdown.total_withheld_deducted):>12}")
    click.echo("-" * 39)
    click.echo(f"{'Net pay':<26} {money(breakdown.net_pay):>12}")

    if not math.isfinite(breakdown.net_pay):
        click.echo(click.style("\nNet pay could not be derived; no paychecks will be forecast.", fg="yellow"))


@click.command("months")
@today_option
@months_option
@format_option
def months_cmd(today, months, output_format):
    """Show opening balance, ending balance and spending per month."""
    profile, result = _recompute(today, months)
    summaries = create_monthly_balance_by_key(result.rows, profile.user_settings.starting_balance)

    if output_format == "json":
        click.echo(json.dumps({key: s.model_dump(mode="json") for key, s in summaries.items()}, indent=2))
        return

    if not summaries:
        click.echo("No forecast rows in horizon.")
        return

    click.echo(f"{'MONTH':<16} {'OPENING':>12} {'SPENT':>12} {'ENDING':>12}")
    click.echo("-" * 55)
    for key, summary in summaries.items():
        click.echo(
            f"{format_month_label(key):<16} {money(summary.opening_balance):>12} "
            f"{money(summary.spent):>12} {money(summary.ending_balance):>12}"
        )


@click.command("categories")
@today_option
@format_option
def categories_cmd(today, output_format):
    """Show expense spend by category for the next 12 months."""
    _, result = _recompute(today, None)
    charts = build_monthly_category_slices(result.expense_events, result.horizon_start)

    if output_format == "json":
        click.echo(json.dumps([chart.model_dump(mode="json") for chart in charts], indent=2))
        return

    for chart in charts:
        total = sum(s.amount for s in chart.slices)
        click.echo(f"\n{chart.label}  ({money(total)})")
        if not chart.slices:
            click.echo("  (no expenses)")
        for s in chart.slices:
            click.echo(f"  {s.category:<16} {money(s.amount):>12}")
