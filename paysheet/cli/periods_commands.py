"""Pay period CLI commands."""

import json
from datetime import date, datetime

import click
from rich.console import Console

from paysheet.sdk import (
    InvalidPeriodError,
    PayPeriod,
    get_timezone,
    holidays_for_year,
    matching_rule,
    periods_for_year,
    resolve,
    resolve_period,
    select_period,
)
from .renderers.period_renderer import render_holidays, render_period_dates, render_year


def parse_date_arg(value):
    """Parse an optional YYYY-MM-DD argument (today if omitted)."""
    if value is None:
        return date.today()
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise click.BadParameter(f"Expected YYYY-MM-DD, got {value!r}")


def _rule_name(period: PayPeriod):
    rule = matching_rule(period.year, period.month, period.start_day)
    return rule.name if rule else None


@click.group()
def periods():
    """Pay periods and their pay, submission and reminder dates.

    Periods run from the 1st to the 15th and from the 16th to the end
    of the month. Pay day is the last business day of the period; the
    timesheet goes out two business days earlier at 10:00 and a reminder
    one business day before that.
    """
    pass


@periods.command("show")
@click.argument("day", required=False)
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default="text",
              help="Output format (default: text)")
def periods_show(day, output_format):
    """Show the pay period containing DAY (YYYY-MM-DD, default today)."""
    target = parse_date_arg(day)
    period = select_period(target)
    dates = resolve_period(period, timezone=get_timezone())

    if output_format == "json":
        payload = {"period": period.to_dict(), "dates": dates.to_dict(), "holiday_rule": _rule_name(period)}
        click.echo(json.dumps(payload, indent=2))
        return

    render_period_dates(Console(), dates, rule=_rule_name(period))


@periods.command("list")
@click.argument("year", type=int)
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default="text",
              help="Output format (default: text)")
def periods_list(year, output_format):
    """List all 24 pay periods of YEAR with their dates."""
    timezone = get_timezone()
    try:
        rows = [(p, resolve_period(p, timezone=timezone), _rule_name(p)) for p in periods_for_year(year)]
    except ValueError as e:
        raise click.ClickException(str(e))

    if output_format == "json":
        payload = [
            {"period": p.to_dict(), "dates": d.to_dict(), "holiday_rule": rule}
            for p, d, rule in rows
        ]
        click.echo(json.dumps(payload, indent=2))
        return

    render_year(Console(), year, rows)


@periods.command("resolve")
@click.argument("year", type=int)
@click.argument("month", type=int)
@click.argument("start_day", type=int)
@click.argument("end_day", type=int)
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default="text",
              help="Output format (default: text)")
def periods_resolve(year, month, start_day, end_day, output_format):
    """Resolve dates for an explicit period.

    MONTH is 1-12, START_DAY is 1 or 16.

    Example:
        pay-sheet periods resolve 2025 4 1 15
    """
    try:
        dates = resolve(year, month, start_day, end_day, timezone=get_timezone())
    except InvalidPeriodError as e:
        raise click.ClickException(str(e))

    rule = matching_rule(year, month, start_day)
    if output_format == "json":
        payload = dates.to_dict()
        payload["holiday_rule"] = rule.name if rule else None
        click.echo(json.dumps(payload, indent=2))
        return

    render_period_dates(Console(), dates, rule=rule.name if rule else None)


@click.command("holidays")
@click.argument("year", type=int)
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default="text",
              help="Output format (default: text)")
def holidays(year, output_format):
    """List the observed statutory holidays of YEAR."""
    try:
        records = holidays_for_year(year)
    except ValueError as e:
        raise click.ClickException(str(e))

    if output_format == "json":
        click.echo(json.dumps([h.to_dict() for h in records], indent=2))
        return

    render_holidays(Console(), year, records)
