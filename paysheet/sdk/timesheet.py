"""Timesheet grid for a pay period.

One row per calendar day in the period. Weekdays carry the standard
hours; statutory holidays carry stat hours and the holiday name; weekends
are blank. The grid can be written to an .xlsx workbook and exported to
PDF (see export.py).
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import List, Optional

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side

from .holidays import SATURDAY, SUNDAY, WEEKDAY_NAMES, day_of_week, holidays_for_year
from .periods import PayPeriod
from .resolver import PeriodDates, resolve_period


logger = logging.getLogger(__name__)

HEADER_COLUMNS = ["Date", "Day", "Hours", "Notes"]
SHEET_TITLE = "Timesheet"

_THIN = Side(style="thin", color="000000")
_BORDER = Border(left=_THIN, right=_THIN, top=_THIN, bottom=_THIN)
_HEADER_FILL = PatternFill("solid", fgColor="D9D9D9")
_HOLIDAY_FILL = PatternFill("solid", fgColor="FFF2CC")


@dataclass(frozen=True)
class TimesheetRow:
    """A single day on the timesheet."""

    day: date
    hours: float
    holiday: Optional[str] = None

    @property
    def weekday_name(self) -> str:
        return WEEKDAY_NAMES[day_of_week(self.day)]

    @property
    def is_weekend(self) -> bool:
        return day_of_week(self.day) in (SATURDAY, SUNDAY)

    @property
    def note(self) -> str:
        return f"Stat holiday: {self.holiday}" if self.holiday else ""


@dataclass
class Timesheet:
    """Rendered timesheet for one employee and one pay period."""

    employee: str
    period: PayPeriod
    dates: PeriodDates
    rows: List[TimesheetRow] = field(default_factory=list)

    @property
    def label(self) -> str:
        return self.dates.pay_period_label

    @property
    def total_hours(self) -> float:
        return sum(row.hours for row in self.rows)

    @property
    def stat_hours(self) -> float:
        return sum(row.hours for row in self.rows if row.holiday)

    @property
    def regular_hours(self) -> float:
        return self.total_hours - self.stat_hours

    def to_dict(self) -> dict:
        return {
            "employee": self.employee,
            "period": self.period.to_dict(),
            "dates": self.dates.to_dict(),
            "rows": [
                {
                    "date": row.day.isoformat(),
                    "day": row.weekday_name,
                    "hours": row.hours,
                    "note": row.note,
                }
                for row in self.rows
            ],
            "totals": {
                "regular_hours": self.regular_hours,
                "stat_hours": self.stat_hours,
                "total_hours": self.total_hours,
            },
        }


def build_timesheet(
    period: PayPeriod,
    employee: str,
    hours_per_day: float,
    timezone: Optional[str] = None,
) -> Timesheet:
    """Build the day-by-day grid for a period.

    Args:
        period: The pay period to render.
        employee: Name printed on the sheet.
        hours_per_day: Standard hours for a worked weekday (and stat pay).
        timezone: Passed through to resolve() for the email timestamp.
    """
    holidays = {h.observed_date: h.name for h in holidays_for_year(period.year)}
    dates = resolve_period(period, timezone=timezone)

    rows = []
    for day in period.days:
        if day_of_week(day) in (SATURDAY, SUNDAY):
            rows.append(TimesheetRow(day=day, hours=0.0))
        else:
            rows.append(TimesheetRow(day=day, hours=hours_per_day, holiday=holidays.get(day)))

    return Timesheet(employee=employee, period=period, dates=dates, rows=rows)


def header_lines(timesheet: Timesheet) -> List[List[str]]:
    """Label/value pairs printed above the grid (shared by xlsx and PDF)."""
    return [
        ["Employee", timesheet.employee],
        ["Pay period", timesheet.label],
        ["Pay date", timesheet.dates.pay_date.strftime("%m/%d/%Y")],
    ]


def grid_rows(timesheet: Timesheet) -> List[List[str]]:
    """Header row plus one row per day, as display strings."""
    rows = [list(HEADER_COLUMNS)]
    for row in timesheet.rows:
        hours = "" if row.is_weekend else f"{row.hours:.2f}"
        rows.append([row.day.strftime("%m/%d/%Y"), row.weekday_name, hours, row.note])
    rows.append(["Total", "", f"{timesheet.total_hours:.2f}", ""])
    return rows


def write_workbook(timesheet: Timesheet, path: Path) -> Path:
    """Populate an .xlsx workbook with the timesheet grid.

    Returns:
        Path to the written workbook.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE

    headers = header_lines(timesheet)
    for row_idx, (label, value) in enumerate(headers, start=1):
        ws.cell(row=row_idx, column=1, value=label).font = Font(bold=True)
        ws.cell(row=row_idx, column=2, value=value)

    # One blank row between the header block and the grid
    grid_start = len(headers) + 2
    for offset, values in enumerate(grid_rows(timesheet)):
        for col, value in enumerate(values, start=1):
            ws.cell(row=grid_start + offset, column=col, value=value)

    for col in range(1, len(HEADER_COLUMNS) + 1):
        header = ws.cell(row=grid_start, column=col)
        header.font = Font(bold=True)
        header.fill = _HEADER_FILL
        header.alignment = Alignment(horizontal="center")

    last_row = ws.max_row
    for row_idx in range(grid_start, last_row + 1):
        for col in range(1, len(HEADER_COLUMNS) + 1):
            ws.cell(row=row_idx, column=col).border = _BORDER

    for offset, row in enumerate(timesheet.rows, start=1):
        if row.holiday:
            for col in range(1, len(HEADER_COLUMNS) + 1):
                ws.cell(row=grid_start + offset, column=col).fill = _HOLIDAY_FILL

    for col in range(1, len(HEADER_COLUMNS) + 1):
        ws.cell(row=last_row, column=col).font = Font(bold=True)

    ws.column_dimensions["A"].width = 14
    ws.column_dimensions["B"].width = 12
    ws.column_dimensions["C"].width = 8
    ws.column_dimensions["D"].width = 36

    wb.save(path)
    logger.debug(f"Wrote workbook {path} ({len(timesheet.rows)} day rows)")
    return path
