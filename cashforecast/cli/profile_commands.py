"""Profile CLI commands for Cash Forecast.

Manages user profile data (profile.yaml) - balances, paycheck, expenses.
"""

from pathlib import Path

import click
import yaml
from pydantic import ValidationError

from cashforecast.sdk import (
    ForecastProfile,
    ProfileNotFoundError,
    get_profile_path,
    get_profile_value,
    load_profile,
    save_forecast_profile,
    set_profile_value,
    set_setting,
)


def _validate_profile_file(path) -> ForecastProfile:
    """Validate a profile file at the given path.

    Raises:
        click.ClickException: If file is missing, invalid YAML or fails schema validation
    """
    path = Path(path)

    if not path.exists():
        raise click.ClickException(f"Profile file not found: {path}")

    if path.suffix not in (".yaml", ".yml"):
        raise click.ClickException(f"Profile must be a YAML file: {path}")

    try:
        with open(path, "r") as f:
            profile_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise click.ClickException(f"Invalid YAML in {path}: {e}")

    if profile_data is None:
        profile_data = {}
    if not isinstance(profile_data, dict):
        raise click.ClickException(f"Profile must be a YAML dictionary, got {type(profile_data).__name__}")

    try:
        return ForecastProfile.model_validate(profile_data)
    except ValidationError as e:
        raise click.ClickException(f"Profile validation failed:\n{e}")


@click.group()
def profile():
    """Manage the user profile (profile.yaml)."""
    pass


@profile.command("init")
@click.option("--force", is_flag=True, help="Overwrite an existing profile.")
def profile_init(force):
    """Create a profile.yaml with default values."""
    path = get_profile_path(require_exists=False)
    if path.exists() and not force:
        raise click.ClickException(f"Profile already exists: {path}\nUse --force to overwrite.")

    save_forecast_profile(ForecastProfile(), path)
    click.echo(click.style(f"Created profile: {path}", fg="green"))
    click.echo("\nNext steps:")
    click.echo("  cash-forecast profile set paycheck_config.net_pay_amount 2150")
    click.echo("  cash-forecast profile set paycheck_config.next_pay_date 2025-01-10")
    click.echo("  cash-forecast expenses add Rent 1450 --due 2025-02-01 --repeat monthly --category rent")


@profile.command("show")
def profile_show():
    """Validate the active profile and print its contents."""
    try:
        path = get_profile_path(require_exists=True)
    except ProfileNotFoundError as e:
        raise click.ClickException(str(e))

    validated = _validate_profile_file(path)
    click.echo(f"Profile path: {path}")
    click.echo(f"Expenses: {len(validated.expenses)}")
    click.echo("---")
    click.echo(yaml.dump(load_profile(), default_flow_style=False, sort_keys=False))


@profile.command("path")
def profile_path():
    """Print the active profile path."""
    click.echo(get_profile_path())


@profile.command("use")
@click.argument("path", type=click.Path())
def profile_use(path):
    """Use a profile.yaml stored outside the config directory."""
    resolved = Path(path).expanduser().resolve()
    _validate_profile_file(resolved)
    set_setting("profile", str(resolved))
    click.echo(f"Now using profile: {resolved}")


@profile.command("get")
@click.argument("key")
def profile_get(key):
    """Get a profile value by dot-notation KEY (e.g., user_settings.minimum_buffer)."""
    value = get_profile_value(key)
    if value is None:
        raise click.ClickException(f"Key not set: {key}")
    if isinstance(value, (dict, list)):
        click.echo(yaml.dump(value, default_flow_style=False, sort_keys=False).rstrip())
    else:
        click.echo(value)


@profile.command("set")
@click.argument("key")
@click.argument("value")
def profile_set(key, value):
    """Set a profile value by dot-notation KEY.

    VALUE is parsed as YAML, so numbers stay numbers.

    Examples:
        cash-forecast profile set user_settings.starting_balance 1200
        cash-forecast profile set paycheck_config.pay_frequency semimonthly
    """
    parsed = yaml.safe_load(value)
    if hasattr(parsed, "isoformat"):
        parsed = parsed.isoformat()

    set_profile_value(key, parsed)

    # Re-validate so a bad value is reported right away
    try:
        ForecastProfile.model_validate(load_profile(require_exists=False))
    except ValidationError as e:
        click.echo(click.style(f"Warning: profile no longer validates:\n{e}", fg="yellow"))

    click.echo(f"Set {key} = {parsed!r}")
