"""Timesheet CLI commands: render, send, remind."""

import json
from pathlib import Path

import click

from paysheet.sdk import (
    ConfigNotFoundError,
    DeliveryError,
    ExportError,
    OutboxMailer,
    ProfileNotFoundError,
    SmtpMailer,
    SmtpSettings,
    get_timezone,
    get_year_data_path,
    load_profile,
    render_timesheet,
    send_reminder,
    send_timesheet,
)
from .periods_commands import parse_date_arg


def load_profile_or_fail() -> dict:
    try:
        return load_profile(require_exists=True)
    except ProfileNotFoundError as e:
        raise click.ClickException(str(e))


def make_mailer(profile: dict, dry_run: bool, outbox_dir: Path = None):
    """SMTP mailer from the profile, or an outbox when dry-running."""
    if dry_run:
        return OutboxMailer(directory=outbox_dir)
    try:
        return SmtpMailer(SmtpSettings.from_profile(profile))
    except KeyError as e:
        raise click.ClickException(f"Profile is missing smtp.{e.args[0]}")


@click.group()
def timesheet():
    """Render and submit timesheets."""
    pass


@timesheet.command("render")
@click.argument("day", required=False)
@click.option("--output-dir", "-o", type=click.Path(), help="Output directory (default: data dir/<year>)")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default="text",
              help="Output format (default: text)")
def timesheet_render(day, output_dir, output_format):
    """Render the timesheet for the period containing DAY (default today).

    Writes an .xlsx workbook and a PDF; nothing is sent.
    """
    target = parse_date_arg(day)
    profile = load_profile_or_fail()
    out = Path(output_dir) if output_dir else get_year_data_path(target.year)

    try:
        result = render_timesheet(target, profile, out, timezone=get_timezone(profile))
    except (ConfigNotFoundError, ExportError) as e:
        raise click.ClickException(str(e))

    if output_format == "json":
        payload = result.timesheet.to_dict()
        payload["files"] = {"pdf": str(result.pdf_path), "workbook": str(result.workbook_path)}
        click.echo(json.dumps(payload, indent=2))
        return

    ts = result.timesheet
    click.echo(f"Timesheet: {ts.label}")
    click.echo(f"  Regular hours: {ts.regular_hours:.2f}")
    click.echo(f"  Stat hours:    {ts.stat_hours:.2f}")
    click.echo(f"  Total hours:   {ts.total_hours:.2f}")
    click.echo(f"  PDF:      {result.pdf_path}")
    click.echo(f"  Workbook: {result.workbook_path}")


@timesheet.command("send")
@click.argument("day", required=False)
@click.option("--output-dir", "-o", type=click.Path(), help="Output directory (default: data dir/<year>)")
@click.option("--dry-run", is_flag=True, help="Write the email to the output directory instead of sending")
def timesheet_send(day, output_dir, dry_run):
    """Render the timesheet for DAY's period and email it to the recipients."""
    target = parse_date_arg(day)
    profile = load_profile_or_fail()
    out = Path(output_dir) if output_dir else get_year_data_path(target.year)
    mailer = make_mailer(profile, dry_run, outbox_dir=out / "outbox")

    try:
        result = send_timesheet(target, profile, mailer, out, timezone=get_timezone(profile))
    except (ConfigNotFoundError, ExportError, DeliveryError) as e:
        raise click.ClickException(str(e))

    verb = "Written to outbox" if dry_run else "Sent"
    click.echo(f"{verb}: timesheet {result.timesheet.label}")
    click.echo(f"  PDF: {result.pdf_path}")


@click.command("remind")
@click.argument("day", required=False)
@click.option("--dry-run", is_flag=True, help="Print the reminder instead of sending it")
def remind(day, dry_run):
    """Send the submission reminder for DAY's period (default today)."""
    target = parse_date_arg(day)
    profile = load_profile_or_fail()
    mailer = make_mailer(profile, dry_run)

    try:
        dates = send_reminder(target, profile, mailer, timezone=get_timezone(profile))
    except (ConfigNotFoundError, DeliveryError) as e:
        raise click.ClickException(str(e))

    if dry_run:
        click.echo(mailer.sent[-1].as_string())
        return
    click.echo(f"Reminder sent for {dates.pay_period_label}")
