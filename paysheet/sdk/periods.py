"""Semi-monthly pay periods.

A pay period is a half-month window: the 1st through the 15th, or the 16th
through the last day of the month. There are exactly 24 per year.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import List


FIRST_HALF_START = 1
FIRST_HALF_END = 15
SECOND_HALF_START = 16

LABEL_DATE_FORMAT = "%m/%d/%Y"


class InvalidPeriodError(ValueError):
    """Raised when year/month/start/end do not describe a valid period."""
    pass


def last_day_of_month(month: int, year: int) -> int:
    """Last valid day of a month (first day of the next month, minus one day)."""
    if not 1 <= month <= 12:
        raise InvalidPeriodError(f"Month must be 1-12, got {month}")
    if month == 12:
        first_of_next = date(year + 1, 1, 1)
    else:
        first_of_next = date(year, month + 1, 1)
    return (first_of_next - timedelta(days=1)).day


def validate_period(year: int, month: int, start_day: int, end_day: int) -> None:
    """Check period bounds.

    Raises:
        InvalidPeriodError: If any component is out of range for the month.
    """
    if not isinstance(year, int) or not 1 <= year <= 9998:
        raise InvalidPeriodError(f"Invalid year: {year!r}")
    last_day = last_day_of_month(month, year)
    if start_day not in (FIRST_HALF_START, SECOND_HALF_START):
        raise InvalidPeriodError(
            f"Period must start on day {FIRST_HALF_START} or {SECOND_HALF_START}, got {start_day}"
        )
    if not start_day <= end_day <= last_day:
        raise InvalidPeriodError(
            f"End day {end_day} is outside {start_day}-{last_day} for {year}-{month:02d}"
        )


@dataclass(frozen=True)
class PayPeriod:
    """Half-month pay window."""

    year: int
    month: int
    start_day: int
    end_day: int

    def __post_init__(self):
        validate_period(self.year, self.month, self.start_day, self.end_day)

    @property
    def start_date(self) -> date:
        return date(self.year, self.month, self.start_day)

    @property
    def end_date(self) -> date:
        return date(self.year, self.month, self.end_day)

    @property
    def days(self) -> List[date]:
        """Every date in the window, in order."""
        return [date(self.year, self.month, d) for d in range(self.start_day, self.end_day + 1)]

    @property
    def label(self) -> str:
        return format_label(self.start_date, self.end_date)

    def to_dict(self) -> dict:
        return {
            "year": self.year,
            "month": self.month,
            "start_day": self.start_day,
            "end_day": self.end_day,
            "label": self.label,
        }


def format_label(start: date, end: date) -> str:
    """Canonical "MM/DD/YYYY - MM/DD/YYYY" label."""
    return f"{start.strftime(LABEL_DATE_FORMAT)} - {end.strftime(LABEL_DATE_FORMAT)}"


def select_period(today: date) -> PayPeriod:
    """The standard pay period containing a date."""
    if today.day < SECOND_HALF_START:
        return PayPeriod(today.year, today.month, FIRST_HALF_START, FIRST_HALF_END)
    return PayPeriod(
        today.year,
        today.month,
        SECOND_HALF_START,
        last_day_of_month(today.month, today.year),
    )


def periods_for_year(year: int) -> List[PayPeriod]:
    """All 24 standard pay periods of a year."""
    periods = []
    for month in range(1, 13):
        periods.append(select_period(date(year, month, FIRST_HALF_START)))
        periods.append(select_period(date(year, month, SECOND_HALF_START)))
    return periods


def next_period(period: PayPeriod) -> PayPeriod:
    """The standard period that starts the day after this one ends."""
    return select_period(period.end_date + timedelta(days=1))
