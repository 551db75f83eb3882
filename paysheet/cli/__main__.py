"""Pay Sheet CLI - Command-line interface for the timesheet workflow."""

import logging

import click

from paysheet import __version__

from .periods_commands import periods as periods_group, holidays as holidays_command
from .profile_commands import profile as profile_group
from .schedule_commands import schedule as schedule_group
from .settings_commands import settings as settings_group
from .timesheet_commands import timesheet as timesheet_group, remind as remind_command


@click.group()
@click.version_option(version=__version__, prog_name="pay-sheet")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def cli(verbose):
    """Pay Sheet - semi-monthly timesheet scheduling and delivery.

    Computes pay periods and their pay, submission and reminder dates
    around British Columbia statutory holidays, renders timesheets to PDF
    and emails them on schedule.

    Configuration is loaded from (in order):

    \b
    1. PAY_SHEET_CONFIG_PATH environment variable
    2. settings.json 'profile' key (if set via CLI)
    3. ~/.config/pay-sheet/profile.yaml (XDG default)

    Run 'pay-sheet profile show' to see profile status and readiness.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


cli.add_command(periods_group)
cli.add_command(holidays_command)
cli.add_command(schedule_group)
cli.add_command(timesheet_group)
cli.add_command(remind_command)
cli.add_command(profile_group)
cli.add_command(settings_group)


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
