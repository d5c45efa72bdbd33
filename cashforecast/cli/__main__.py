"""Cash Forecast CLI - Command-line interface for balance projections."""

import click

from cashforecast import __version__

from .expenses_commands import expenses as expenses_group
from .forecast_commands import breakdown_cmd, categories_cmd, forecast_cmd, months_cmd, payday_cmd
from .profile_commands import profile as profile_group
from .settings_commands import settings as settings_group


@click.group()
@click.version_option(version=__version__, prog_name="cash-forecast")
def cli():
    """Cash Forecast - paycheck-to-paycheck balance projection.

    Projects your balance over the coming months from your paycheck
    schedule and expenses, and shows how much is safe to spend before
    the next payday.

    Configuration is loaded from (in order):

    \b
    1. CASH_FORECAST_CONFIG_PATH environment variable
    2. settings.json 'profile' key (if set via 'profile use')
    3. ~/.config/cash-forecast/profile.yaml (XDG default)

    Run 'cash-forecast profile init' to create a profile.
    """
    pass


# Add subcommand groups
cli.add_command(profile_group)
cli.add_command(settings_group)
cli.add_command(expenses_group)

# Forecast views
cli.add_command(forecast_cmd)
cli.add_command(payday_cmd)
cli.add_command(breakdown_cmd)
cli.add_command(months_cmd)
cli.add_command(categories_cmd)


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
