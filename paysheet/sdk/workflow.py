"""Timesheet workflow jobs.

These are the functions the schedule fires: the reminder to the employee
and the submission of the rendered timesheet. Both recompute the period
and its dates from the run date; nothing is carried between runs.
"""

import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Optional

from .config import get_hours_per_day, get_profile_value, validate_profile
from .export import export_pdf, timesheet_filename
from .mailer import build_reminder, build_submission
from .periods import select_period
from .resolver import PeriodDates, resolve_period
from .timesheet import Timesheet, build_timesheet, write_workbook


logger = logging.getLogger(__name__)


@dataclass
class RenderResult:
    """Files produced for one period."""

    timesheet: Timesheet
    pdf_path: Path
    workbook_path: Path


def _as_list(value) -> list:
    if not value:
        return []
    if isinstance(value, str):
        return [value]
    return list(value)


def send_reminder(today: date, profile: dict, mailer, timezone: Optional[str] = None) -> PeriodDates:
    """Email the employee that the timesheet for today's period is due.

    Raises:
        ConfigNotFoundError: If the profile is not ready for email.
        DeliveryError: If the message could not be sent.
    """
    validate_profile(profile).require_feature("email")

    dates = resolve_period(select_period(today), timezone=timezone)
    message = build_reminder(
        dates,
        employee_name=get_profile_value("employee.name", "", profile=profile),
        to=get_profile_value("employee.email", profile=profile),
        sender=get_profile_value("smtp.sender", profile=profile),
    )
    mailer.send(message)
    logger.info(f"Reminder sent for {dates.pay_period_label}")
    return dates


def render_timesheet(
    today: date,
    profile: dict,
    output_dir: Path,
    timezone: Optional[str] = None,
) -> RenderResult:
    """Build the period's grid and write both the workbook and the PDF.

    Raises:
        ConfigNotFoundError: If the profile is not ready for timesheets.
        ExportError: If the PDF could not be produced.
    """
    validate_profile(profile).require_feature("timesheet")

    period = select_period(today)
    timesheet = build_timesheet(
        period,
        employee=get_profile_value("employee.name", profile=profile),
        hours_per_day=get_hours_per_day(profile),
        timezone=timezone,
    )

    output_dir = Path(output_dir)
    pdf_path = output_dir / timesheet_filename(timesheet)
    workbook_path = write_workbook(timesheet, pdf_path.with_suffix(".xlsx"))
    export_pdf(timesheet, pdf_path)

    return RenderResult(timesheet=timesheet, pdf_path=pdf_path, workbook_path=workbook_path)


def send_timesheet(
    today: date,
    profile: dict,
    mailer,
    output_dir: Path,
    timezone: Optional[str] = None,
) -> RenderResult:
    """Render the period's timesheet and email it to the recipients.

    The email goes out only after a successful export; an ExportError
    propagates and nothing is sent.

    Raises:
        ConfigNotFoundError: If the profile is not ready.
        ExportError: If the PDF could not be produced.
        DeliveryError: If the message could not be sent.
    """
    validate_profile(profile).require_feature("email")

    result = render_timesheet(today, profile, output_dir, timezone=timezone)
    message = build_submission(
        result.timesheet.dates,
        employee_name=result.timesheet.employee,
        to=_as_list(get_profile_value("recipients.to", profile=profile)),
        cc=_as_list(get_profile_value("recipients.cc", profile=profile)),
        attachment=result.pdf_path,
        sender=get_profile_value("smtp.sender", profile=profile)
        or get_profile_value("employee.email", profile=profile),
    )
    mailer.send(message)
    logger.info(f"Timesheet {result.timesheet.label} sent")
    return result
