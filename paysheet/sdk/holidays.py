"""British Columbia statutory holiday calculator.

Computes the observed date of each of the ten statutory holidays the
timesheet workflow recognizes. Everything here is a pure function of the
year; nothing is cached or persisted.

Weekday numbers follow the Sunday=0 convention used throughout the
pay-period engine (see day_of_week()).
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, Optional, Tuple


SUNDAY = 0
MONDAY = 1
TUESDAY = 2
WEDNESDAY = 3
THURSDAY = 4
FRIDAY = 5
SATURDAY = 6

WEEKDAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]

# (saturday_shift, sunday_shift) in days. The policies are holiday-specific
# and must not be merged.
ROLL_FORWARD = (2, 1)
SATURDAY_BACK = (-1, 1)

# Victoria Day is the Monday preceding this day of May.
VICTORIA_DAY_ANCHOR = 25


def day_of_week(d: date) -> int:
    """Day of week with Sunday=0 .. Saturday=6."""
    return d.isoweekday() % 7


@dataclass(frozen=True)
class HolidayRecord:
    """A statutory holiday on the weekday it is observed."""

    name: str
    observed_date: date

    @property
    def day_of_week(self) -> int:
        return day_of_week(self.observed_date)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "observed_date": self.observed_date.isoformat(),
            "day_of_week": WEEKDAY_NAMES[self.day_of_week],
        }


def easter_sunday(year: int) -> Tuple[int, int]:
    """Gregorian Easter Sunday as (month, day), Oudin (1940).

    Integer arithmetic only; every intermediate value matches the published
    algorithm step for step.
    """
    century = year // 100
    golden = year % 19
    k = (century - 17) // 25
    i = (century - century // 4 - (century - k) // 3 + 19 * golden + 15) % 30
    i = i - (i // 28) * (1 - (i // 28) * (29 // (i + 1)) * ((21 - golden) // 11))
    j = (year + year // 4 + i + 2 - century + century // 4) % 7
    l = i - j
    month = 3 + (l + 40) // 44
    day = l + 28 - 31 * (month // 4)
    return month, day


def good_friday(year: int) -> Tuple[int, int]:
    """Good Friday as (month, day): two days before Easter Sunday."""
    month, day = easter_sunday(year)
    friday = date(year, month, day) - timedelta(days=2)
    return friday.month, friday.day


def nth_weekday(n: int, weekday: int, month: int, year: int) -> int:
    """Day of month for the nth occurrence of a weekday.

    Args:
        n: 1 for the first occurrence, 2 for the second, and so on.
           0 selects the last occurrence before VICTORIA_DAY_ANCHOR
           (the Victoria Day rule).
        weekday: Weekday number, Sunday=0.
        month: Month 1-12.
        year: Four-digit year.

    Returns:
        Day of month.
    """
    if n == 0:
        anchor = date(year, month, VICTORIA_DAY_ANCHOR)
        back = (day_of_week(anchor) - weekday) % 7 or 7
        return VICTORIA_DAY_ANCHOR - back

    first = date(year, month, 1)
    offset = (weekday - day_of_week(first)) % 7
    day = 1 + offset + 7 * (n - 1)
    # Raises for a sixth Monday and the like
    date(year, month, day)
    return day


def observed_holiday(year: int, month: int, fixed_day: int, policy: Tuple[int, int] = ROLL_FORWARD) -> int:
    """Observed day of month for a fixed-date holiday.

    Args:
        year: Four-digit year.
        month: Month 1-12.
        fixed_day: Calendar day of the holiday.
        policy: (saturday_shift, sunday_shift), ROLL_FORWARD or SATURDAY_BACK.

    Returns:
        Day of month on which the holiday is observed.
    """
    saturday_shift, sunday_shift = policy
    weekday = day_of_week(date(year, month, fixed_day))
    if weekday == SATURDAY:
        return fixed_day + saturday_shift
    if weekday == SUNDAY:
        return fixed_day + sunday_shift
    return fixed_day


def family_day(year: int) -> date:
    return date(year, 2, nth_weekday(3, MONDAY, 2, year))


def good_friday_date(year: int) -> date:
    month, day = good_friday(year)
    return date(year, month, day)


def thanksgiving(year: int) -> date:
    return date(year, 10, nth_weekday(2, MONDAY, 10, year))


def remembrance_day(year: int) -> date:
    return date(year, 11, observed_holiday(year, 11, 11, SATURDAY_BACK))


def holidays_for_year(year: int) -> List[HolidayRecord]:
    """All ten observed statutory holidays for a year, in calendar order."""
    return [
        HolidayRecord("New Year's Day", date(year, 1, observed_holiday(year, 1, 1, ROLL_FORWARD))),
        HolidayRecord("Family Day", family_day(year)),
        HolidayRecord("Good Friday", good_friday_date(year)),
        HolidayRecord("Victoria Day", date(year, 5, nth_weekday(0, MONDAY, 5, year))),
        HolidayRecord("Canada Day", date(year, 7, observed_holiday(year, 7, 1, ROLL_FORWARD))),
        HolidayRecord("British Columbia Day", date(year, 8, nth_weekday(1, MONDAY, 8, year))),
        HolidayRecord("Labour Day", date(year, 9, nth_weekday(1, MONDAY, 9, year))),
        HolidayRecord("Thanksgiving", thanksgiving(year)),
        HolidayRecord("Remembrance Day", remembrance_day(year)),
        HolidayRecord("Christmas Day", date(year, 12, observed_holiday(year, 12, 25, ROLL_FORWARD))),
    ]


def holiday_on(d: date) -> Optional[HolidayRecord]:
    """The holiday observed on a date, if any."""
    for record in holidays_for_year(d.year):
        if record.observed_date == d:
            return record
    return None
