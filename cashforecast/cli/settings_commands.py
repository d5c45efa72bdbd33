"""Settings CLI commands for Cash Forecast.

Manages settings.json - horizon length, profile path, preferences.
"""

import click

from cashforecast.sdk import (
    get_horizon_months,
    get_profile_path,
    get_setting,
    get_settings_path,
    load_settings,
    save_settings,
    set_setting,
)


@click.group()
def settings():
    """Manage settings (settings.json).

    Available settings:
    - horizon_months: forecast length in months (default 12)
    - profile: path to profile.yaml (set via 'profile use')
    """
    pass


@settings.command("show")
def settings_show():
    """Show current settings and their values."""
    settings_path = get_settings_path()
    current = load_settings()

    click.echo(f"Settings file: {settings_path}")
    click.echo(f"File exists: {settings_path.exists()}")
    click.echo()

    if not current:
        click.echo("No settings configured (using defaults).")
    else:
        click.echo("Current settings:")
        for key, value in current.items():
            click.echo(f"  {key}: {value}")

    click.echo()
    click.echo("Effective values:")
    click.echo(f"  horizon_months: {get_horizon_months()}")
    click.echo(f"  profile: {get_profile_path()}")


@settings.command("horizon")
@click.argument("months", required=False, type=click.IntRange(min=1))
@click.option("--clear", is_flag=True, help="Clear custom horizon, revert to 12 months")
def settings_horizon(months, clear):
    """Set or clear the forecast horizon length in months.

    Examples:
        cash-forecast settings horizon 18
        cash-forecast settings horizon --clear
    """
    if clear:
        current = load_settings()
        if "horizon_months" in current:
            del current["horizon_months"]
            save_settings(current)
            click.echo("Cleared horizon_months setting.")
        else:
            click.echo("horizon_months was not set.")
        click.echo(f"Horizon is now: {get_horizon_months()} months")
        return

    if months is None:
        configured = get_setting("horizon_months")
        if configured:
            click.echo(f"Current horizon_months: {configured}")
        else:
            click.echo(f"No custom horizon set. Using default: {get_horizon_months()} months")
        return

    set_setting("horizon_months", months)
    click.echo(f"Set horizon_months: {months}")
    click.echo(f"Saved to: {get_settings_path()}")
