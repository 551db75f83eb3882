"""Schedule CLI commands."""

import json
import logging
import time
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo

import click
from rich.console import Console

from paysheet.sdk import (
    ApschedulerBackend,
    get_data_path,
    get_timezone,
    install_schedule,
    plan_jobs,
    select_period,
    send_reminder,
    send_timesheet,
)
from paysheet.sdk.schedule import REMINDER, SUBMISSION
from .periods_commands import parse_date_arg
from .renderers.period_renderer import render_jobs
from .timesheet_commands import load_profile_or_fail, make_mailer


logger = logging.getLogger(__name__)


@click.group()
def schedule():
    """Plan and run the reminder/submission schedule."""
    pass


@schedule.command("show")
@click.argument("day", required=False)
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default="text",
              help="Output format (default: text)")
def schedule_show(day, output_format):
    """Show the jobs planned for the period containing DAY (default today)."""
    target = parse_date_arg(day)
    jobs = plan_jobs(select_period(target), timezone=get_timezone())

    if output_format == "json":
        click.echo(json.dumps([j.to_dict() for j in jobs], indent=2))
        return

    render_jobs(Console(), jobs)


@schedule.command("run")
@click.option("--dry-run", is_flag=True, help="Write emails to the data dir outbox instead of sending")
def schedule_run(dry_run):
    """Run the schedule in the foreground until interrupted.

    Registers the current period's reminder and submission jobs, then
    re-plans at the start of every period.
    """
    # Long-running: job outcomes are reported through the log
    if logging.getLogger("paysheet").getEffectiveLevel() > logging.INFO:
        logging.getLogger("paysheet").setLevel(logging.INFO)

    profile = load_profile_or_fail()
    timezone = get_timezone(profile)
    data_dir = get_data_path()
    mailer = make_mailer(profile, dry_run, outbox_dir=data_dir / "outbox")

    def reminder_job(run_date):
        try:
            send_reminder(run_date, profile, mailer, timezone=timezone)
        except Exception:
            logger.exception(f"Reminder job for {run_date} failed")

    def submission_job(run_date):
        try:
            send_timesheet(run_date, profile, mailer, Path(data_dir) / str(run_date.year), timezone=timezone)
        except Exception:
            logger.exception(f"Submission job for {run_date} failed")

    backend = ApschedulerBackend(timezone=timezone)
    today = datetime.now(ZoneInfo(timezone)).date()
    install_schedule(backend, today, {REMINDER: reminder_job, SUBMISSION: submission_job}, timezone=timezone)
    render_jobs(Console(), backend.jobs())

    backend.start()
    click.echo("Scheduler running. Press Ctrl+C to stop.")
    try:
        while True:
            time.sleep(60)
    except KeyboardInterrupt:
        click.echo("Stopping scheduler.")
    finally:
        backend.shutdown()
