"""Rich renderers for pay periods, holidays and scheduled jobs.

Transforms SDK objects into formatted Rich tables.
"""

from typing import List, Tuple

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from paysheet.sdk.holidays import HolidayRecord, WEEKDAY_NAMES, day_of_week
from paysheet.sdk.periods import PayPeriod
from paysheet.sdk.resolver import PeriodDates
from paysheet.sdk.schedule import ScheduledJob


def _fmt_date(d) -> str:
    return f"{WEEKDAY_NAMES[day_of_week(d)][:3]} {d.strftime('%Y-%m-%d')}"


def render_period_dates(console: Console, dates: PeriodDates, rule: str = None) -> None:
    """Render resolved dates for a single period."""
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("key", style="dim")
    table.add_column("value")

    table.add_row("Pay period", dates.pay_period_label)
    table.add_row("Reminder", _fmt_date(dates.reminder_date))
    table.add_row("Submission", f"{_fmt_date(dates.email_date.date())} {dates.email_date.strftime('%H:%M %Z')}")
    table.add_row("Pay date", f"[bold]{_fmt_date(dates.pay_date)}[/bold]")
    if rule:
        table.add_row("Holiday rule", f"[yellow]{rule}[/yellow]")

    console.print(Panel(table, title="Pay Period", border_style="dim"))


def render_year(console: Console, year: int, rows: List[Tuple[PayPeriod, PeriodDates, str]]) -> None:
    """Render all periods of a year with their resolved dates."""
    table = Table(title=f"Pay periods {year}", box=box.SIMPLE_HEAD)
    table.add_column("Period")
    table.add_column("Reminder")
    table.add_column("Submission")
    table.add_column("Pay date", style="bold")
    table.add_column("Holiday rule", style="yellow")

    for period, dates, rule in rows:
        table.add_row(
            dates.pay_period_label,
            _fmt_date(dates.reminder_date),
            _fmt_date(dates.email_date.date()),
            _fmt_date(dates.pay_date),
            rule or "",
        )

    console.print(table)


def render_holidays(console: Console, year: int, holidays: List[HolidayRecord]) -> None:
    """Render the observed statutory holidays of a year."""
    table = Table(title=f"Statutory holidays {year}", box=box.SIMPLE_HEAD)
    table.add_column("Holiday")
    table.add_column("Observed")
    table.add_column("Day")

    for holiday in holidays:
        table.add_row(
            holiday.name,
            holiday.observed_date.isoformat(),
            WEEKDAY_NAMES[holiday.day_of_week],
        )

    console.print(table)


def render_jobs(console: Console, jobs: List[ScheduledJob]) -> None:
    """Render planned jobs in run order."""
    if not jobs:
        console.print("[dim]No jobs scheduled.[/dim]")
        return

    table = Table(box=box.SIMPLE_HEAD)
    table.add_column("Job")
    table.add_column("Runs at")
    table.add_column("Period")

    for job in jobs:
        table.add_row(job.kind, job.run_at.strftime("%a %Y-%m-%d %H:%M %Z"), job.period_label)

    console.print(table)
