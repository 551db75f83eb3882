"""Pay period date resolution.

For a pay period, resolves the four dates the timesheet workflow runs on:

- label: "MM/DD/YYYY - MM/DD/YYYY" for the period as worked
- pay_date: last business day on or before the end of the period
- email_date: timesheet submission, two business days before pay day, 10:00
- reminder_date: one business day before the submission email

Business-day offsets are fixed day counts chosen from the pay day's
weekday, not a skip-weekends loop. Five statutory holidays can land
inside that window; each has a rule in HOLIDAY_RULES. At most one rule
applies to a period and a period without a rule takes the default path.
"""

import logging
from dataclasses import dataclass, replace
from datetime import date, datetime, time, timedelta
from typing import Callable, List, Optional
from zoneinfo import ZoneInfo

from .holidays import (
    SATURDAY,
    SUNDAY,
    TUESDAY,
    day_of_week,
    family_day,
    good_friday,
    good_friday_date,
    remembrance_day,
    thanksgiving,
)
from .periods import InvalidPeriodError, PayPeriod, format_label, validate_period


logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = "America/Vancouver"
EMAIL_HOUR = 10


@dataclass(frozen=True)
class PeriodDates:
    """Resolved dates for one pay period."""

    pay_period_label: str
    pay_date: date
    email_date: datetime
    reminder_date: date

    def to_dict(self) -> dict:
        return {
            "pay_period_label": self.pay_period_label,
            "pay_date": self.pay_date.isoformat(),
            "email_date": self.email_date.isoformat(),
            "reminder_date": self.reminder_date.isoformat(),
        }


@dataclass(frozen=True)
class HolidayContext:
    """Working state passed through a holiday rule."""

    year: int
    month: int
    start_day: int
    end_of_period: date
    email_day_affected_by_holiday: bool = False
    reminder_day_affected_by_holiday: bool = False
    rule: Optional[str] = None


@dataclass(frozen=True)
class HolidayRule:
    """A holiday that can fall inside a period's pay/email/reminder window."""

    name: str
    predicate: Callable[[int, int, int], bool]
    adjust: Callable[[HolidayContext], HolidayContext]


def roll_back_weekend(d: date) -> date:
    """Saturday and Sunday move back to the preceding Friday."""
    weekday = day_of_week(d)
    if weekday == SATURDAY:
        return d - timedelta(days=1)
    if weekday == SUNDAY:
        return d - timedelta(days=2)
    return d


def email_day_for(pay_date: date, email_affected: bool = False) -> date:
    """Submission day: two business days before pay day.

    With a holiday in the window, one more business day is skipped.
    """
    pay_weekday = day_of_week(pay_date)
    day = pay_date
    if email_affected:
        day -= timedelta(days=1 if pay_weekday - 2 >= TUESDAY else 3)
    elif pay_weekday - 2 <= SUNDAY:
        # Monday pay days wrap to -1 (Saturday); both land on the weekend
        day -= timedelta(days=2)
    return day - timedelta(days=2)


def reminder_day_for(
    pay_date: date,
    email_day: date,
    email_affected: bool = False,
    reminder_affected: bool = False,
) -> date:
    """Reminder day: one business day before the submission day.

    A flagged submission day can land on Monday (Thursday pay days), in
    which case the reminder goes out the Friday before.
    """
    pay_weekday = day_of_week(pay_date)
    day = email_day
    if not email_affected:
        if reminder_affected:
            day -= timedelta(days=1 if pay_weekday - 3 >= TUESDAY else 3)
        elif pay_weekday - 3 == SUNDAY:
            day -= timedelta(days=2)
    return roll_back_weekend(day - timedelta(days=1))


def _around(name: str, holiday_of_year: Callable[[int], date]) -> Callable[[HolidayContext], HolidayContext]:
    """Build the adjust step for a holiday.

    Holiday on the would-be pay day: the period closes the day before it.
    Holiday between the would-be email day and pay day: email flag.
    Holiday on the would-be reminder day: reminder flag.
    """

    def adjust(context: HolidayContext) -> HolidayContext:
        context = replace(context, rule=name)
        holiday = holiday_of_year(context.year)
        pay_date = roll_back_weekend(context.end_of_period)

        if holiday == pay_date:
            return replace(context, end_of_period=holiday - timedelta(days=1))
        if holiday > pay_date:
            return context

        email_day = email_day_for(pay_date)
        if email_day <= holiday:
            return replace(context, email_day_affected_by_holiday=True)
        if holiday == reminder_day_for(pay_date, email_day):
            return replace(context, reminder_day_affected_by_holiday=True)
        return context

    return adjust


HOLIDAY_RULES: List[HolidayRule] = [
    HolidayRule(
        "Family Day",
        lambda year, month, start_day: month == 2 and start_day == 1,
        _around("Family Day", family_day),
    ),
    HolidayRule(
        "Good Friday (March)",
        lambda year, month, start_day: month == 3 and start_day == 16 and good_friday(year)[0] == 3,
        _around("Good Friday (March)", good_friday_date),
    ),
    HolidayRule(
        "Good Friday (April)",
        lambda year, month, start_day: month == 4 and start_day == 1 and good_friday(year)[0] == 4,
        _around("Good Friday (April)", good_friday_date),
    ),
    HolidayRule(
        "Thanksgiving",
        lambda year, month, start_day: month == 10 and start_day == 1,
        _around("Thanksgiving", thanksgiving),
    ),
    HolidayRule(
        "Remembrance Day",
        lambda year, month, start_day: month == 11 and start_day == 1,
        _around("Remembrance Day", remembrance_day),
    ),
]


def matching_rule(year: int, month: int, start_day: int) -> Optional[HolidayRule]:
    """The holiday rule for a period, or None for the default path."""
    for rule in HOLIDAY_RULES:
        if rule.predicate(year, month, start_day):
            return rule
    return None


def holiday_context(year: int, month: int, start_day: int, end_day: int) -> HolidayContext:
    """Run the period through its holiday rule (if any)."""
    validate_period(year, month, start_day, end_day)
    context = HolidayContext(
        year=year,
        month=month,
        start_day=start_day,
        end_of_period=date(year, month, end_day),
    )
    rule = matching_rule(year, month, start_day)
    if rule is None:
        return context
    adjusted = rule.adjust(context)
    logger.debug(
        f"{rule.name} rule for {year}-{month:02d}/{start_day}: "
        f"end={adjusted.end_of_period} email_flag={adjusted.email_day_affected_by_holiday} "
        f"reminder_flag={adjusted.reminder_day_affected_by_holiday}"
    )
    return adjusted


def resolve(
    year: int,
    month: int,
    start_day: int,
    end_day: int,
    timezone: Optional[str] = None,
) -> PeriodDates:
    """Resolve label, pay, email and reminder dates for a period.

    Args:
        year: Four-digit year.
        month: Month 1-12.
        start_day: 1 or 16.
        end_day: Last worked day of the period (15 or end of month).
        timezone: IANA zone for the 10:00 email time. Defaults to
                  DEFAULT_TIMEZONE.

    Returns:
        PeriodDates

    Raises:
        InvalidPeriodError: If the period is not valid for the month,
            or it has no weekday inside it to pay on.
    """
    context = holiday_context(year, month, start_day, end_day)
    label = format_label(date(year, month, start_day), date(year, month, end_day))

    pay_date = roll_back_weekend(context.end_of_period)
    if pay_date < date(year, month, start_day):
        raise InvalidPeriodError(
            f"Period {label} has no business day to pay on (pay day would be {pay_date})"
        )
    email_day = email_day_for(pay_date, context.email_day_affected_by_holiday)
    reminder_date = reminder_day_for(
        pay_date,
        email_day,
        context.email_day_affected_by_holiday,
        context.reminder_day_affected_by_holiday,
    )

    tz = ZoneInfo(timezone or DEFAULT_TIMEZONE)
    email_date = datetime.combine(email_day, time(hour=EMAIL_HOUR), tzinfo=tz)

    return PeriodDates(
        pay_period_label=label,
        pay_date=pay_date,
        email_date=email_date,
        reminder_date=reminder_date,
    )


def resolve_period(period: PayPeriod, timezone: Optional[str] = None) -> PeriodDates:
    """resolve() for a PayPeriod."""
    return resolve(period.year, period.month, period.start_day, period.end_day, timezone=timezone)
