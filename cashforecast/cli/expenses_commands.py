"""Expense CLI commands for Cash Forecast.

Lists, adds and removes the expenses stored in profile.yaml, and shows
which of them still have payments due.
"""

import json
from typing import List

import click
from pydantic import ValidationError

from cashforecast.sdk import (
    Expense,
    ProfileNotFoundError,
    add_expense,
    expense_from_draft,
    partition_expenses_by_status,
    remove_expense,
)
from cashforecast.sdk.schemas import CATEGORIES, EXPENSE_REPEATS

from .forecast_commands import load_profile_or_fail, money, parse_today


def describe_schedule(expense: Expense) -> str:
    """Short schedule text, e.g. 'monthly from 2025-01-05 (x6)'."""
    if expense.variable_dates_enabled:
        return f"{len(expense.variable_due_dates)} date(s)"
    if expense.repeat == "none":
        return f"once on {expense.first_due_date}"
    text = f"{expense.repeat} from {expense.first_due_date}"
    if expense.repeat_count and expense.repeat_count > 0:
        text += f" (x{expense.repeat_count})"
    return text


def _print_expense_table(expenses: List[Expense]):
    click.echo(f"{'ID':<10} {'NAME':<22} {'CATEGORY':<14} {'AMOUNT':>10}  SCHEDULE")
    click.echo("-" * 80)
    for e in expenses:
        click.echo(
            f"{e.id[:8]:<10} {e.name[:22]:<22} {e.category:<14} {money(e.amount):>10}  {describe_schedule(e)}"
        )


@click.group()
def expenses():
    """Manage expenses in profile.yaml."""
    pass


@expenses.command("list")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]),
              default="text", help="Output format.")
def expenses_list(output_format):
    """List all expenses."""
    profile = load_profile_or_fail()

    if output_format == "json":
        click.echo(json.dumps([e.model_dump(mode="json") for e in profile.expenses], indent=2))
        return

    if not profile.expenses:
        click.echo("No expenses configured.")
        click.echo("\nRun 'cash-forecast expenses add' to add one.")
        return

    _print_expense_table(profile.expenses)
    click.echo("-" * 80)
    click.echo(f"Total: {len(profile.expenses)} expense(s)")


@expenses.command("status")
@click.option("--today", "today", default=None, metavar="YYYY-MM-DD",
              help="Reference date (default: current date).")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]),
              default="text", help="Output format.")
def expenses_status(today, output_format):
    """Split expenses into active (payments still due) and finished."""
    profile = load_profile_or_fail()
    partition = partition_expenses_by_status(profile.expenses, parse_today(today))

    if output_format == "json":
        click.echo(json.dumps({
            "active": [e.id for e in partition.active],
            "finished": [e.id for e in partition.finished],
        }, indent=2))
        return

    click.echo(f"\nActive ({len(partition.active)})")
    if partition.active:
        _print_expense_table(partition.active)
    click.echo(f"\nFinished ({len(partition.finished)})")
    if partition.finished:
        _print_expense_table(partition.finished)


@expenses.command("add")
@click.argument("name")
@click.argument("amount", type=float)
@click.option("--due", "first_due_date", metavar="YYYY-MM-DD", help="First due date.")
@click.option("--repeat", type=click.Choice(EXPENSE_REPEATS), default="none", show_default=True)
@click.option("--count", "repeat_count", type=int, default=None,
              help="Total number of payments (omit for no end).")
@click.option("--date", "variable_due_dates", multiple=True, metavar="YYYY-MM-DD",
              help="Explicit due date; repeat to list several (switches to variable dates).")
@click.option("--category", type=click.Choice(CATEGORIES), default="other", show_default=True)
@click.option("--notes", default="", help="Free-text notes.")
@click.option("--no-highlight", is_flag=True, help="Don't highlight the final payment.")
def expenses_add(name, amount, first_due_date, repeat, repeat_count, variable_due_dates,
                 category, notes, no_highlight):
    """Add an expense.

    Examples:
        cash-forecast expenses add Rent 1450 --due 2025-02-01 --repeat monthly --category rent
        cash-forecast expenses add "Car repair" 320 --date 2025-03-10 --date 2025-04-10
    """
    draft = {
        "name": name,
        "amount": amount,
        "category": category,
        "notes": notes,
        "first_due_date": first_due_date or "",
        "repeat": repeat,
        "repeat_count": repeat_count,
        "variable_dates_enabled": bool(variable_due_dates),
        "variable_due_dates": list(variable_due_dates),
        "highlight_last_event": not no_highlight,
    }

    try:
        expense = expense_from_draft(draft)
        path = add_expense(expense)
    except (ValueError, ValidationError) as e:
        raise click.ClickException(str(e))

    click.echo(click.style(f"Added expense {expense.id[:8]} ({expense.name})", fg="green"))
    click.echo(f"Saved to: {path}")


@expenses.command("remove")
@click.argument("expense_id")
def expenses_remove(expense_id):
    """Remove an expense by ID (or unique ID prefix)."""
    try:
        removed = remove_expense(expense_id)
    except ProfileNotFoundError as e:
        raise click.ClickException(str(e))
    except ValidationError as e:
        raise click.ClickException(f"Profile validation failed:\n{e}")

    if removed is None:
        raise click.ClickException(f"No unique expense matches '{expense_id}'")
    click.echo(click.style(f"Removed expense {removed.id[:8]} ({removed.name})", fg="green"))
