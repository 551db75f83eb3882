"""Tests for the statutory holiday calculator.

Known dates come from published BC holiday calendars; the Easter checks
sweep 1900-2100.
"""

import pytest
from datetime import date

from paysheet.sdk.holidays import (
    FRIDAY,
    MONDAY,
    ROLL_FORWARD,
    SATURDAY,
    SATURDAY_BACK,
    SUNDAY,
    day_of_week,
    easter_sunday,
    good_friday,
    holiday_on,
    holidays_for_year,
    nth_weekday,
    observed_holiday,
)


class TestDayOfWeek:
    def test_sunday_is_zero(self):
        assert day_of_week(date(2024, 9, 1)) == SUNDAY

    def test_saturday_is_six(self):
        assert day_of_week(date(2024, 9, 7)) == SATURDAY


class TestEaster:
    @pytest.mark.parametrize("year,expected", [
        (1981, (4, 19)),
        (2000, (4, 23)),
        (2008, (3, 23)),
        (2011, (4, 24)),
        (2019, (4, 21)),
        (2024, (3, 31)),
        (2025, (4, 20)),
        (2038, (4, 25)),
    ])
    def test_known_dates(self, year, expected):
        assert easter_sunday(year) == expected

    def test_always_a_sunday_in_range(self):
        for year in range(1900, 2101):
            month, day = easter_sunday(year)
            easter = date(year, month, day)
            assert day_of_week(easter) == SUNDAY, year
            assert date(year, 3, 22) <= easter <= date(year, 4, 25), year


class TestGoodFriday:
    @pytest.mark.parametrize("year,expected", [
        (2008, (3, 21)),
        (2022, (4, 15)),
        (2024, (3, 29)),
        (2025, (4, 18)),
    ])
    def test_known_dates(self, year, expected):
        assert good_friday(year) == expected

    def test_always_a_friday_two_days_before_easter(self):
        for year in range(1900, 2101):
            friday = date(year, *good_friday(year))
            easter = date(year, *easter_sunday(year))
            assert day_of_week(friday) == FRIDAY, year
            assert (easter - friday).days == 2, year
            assert date(year, 3, 20) <= friday <= date(year, 4, 23), year


class TestNthWeekday:
    def test_third_monday_of_february(self):
        # Family Day 2024
        assert nth_weekday(3, MONDAY, 2, 2024) == 19

    def test_second_monday_of_october(self):
        # Thanksgiving 2024
        assert nth_weekday(2, MONDAY, 10, 2024) == 14

    def test_first_monday_when_month_starts_on_monday(self):
        # September 1, 2025 is a Monday
        assert nth_weekday(1, MONDAY, 9, 2025) == 1

    @pytest.mark.parametrize("year,expected", [
        (2024, 20),  # May 25 is a Saturday
        (2025, 19),  # May 25 is a Sunday
        (2020, 18),  # May 25 is a Monday: the Monday before, not the day itself
        (2021, 24),  # May 25 is a Tuesday
    ])
    def test_victoria_day_anchor(self, year, expected):
        assert nth_weekday(0, MONDAY, 5, year) == expected

    def test_victoria_day_range(self):
        for year in range(1900, 2101):
            day = nth_weekday(0, MONDAY, 5, year)
            assert 18 <= day <= 24
            assert day_of_week(date(year, 5, day)) == MONDAY

    def test_fifth_occurrence_that_does_not_exist(self):
        with pytest.raises(ValueError):
            nth_weekday(5, MONDAY, 2, 2024)


class TestObservedHoliday:
    def test_weekday_unchanged(self):
        # Christmas 2024 is a Wednesday
        assert observed_holiday(2024, 12, 25, ROLL_FORWARD) == 25

    def test_roll_forward_saturday_to_monday(self):
        # January 1, 2022 is a Saturday
        assert observed_holiday(2022, 1, 1, ROLL_FORWARD) == 3

    def test_roll_forward_sunday_to_monday(self):
        # Christmas 2022 is a Sunday
        assert observed_holiday(2022, 12, 25, ROLL_FORWARD) == 26

    def test_saturday_back_to_friday(self):
        # Remembrance Day 2023 is a Saturday
        assert observed_holiday(2023, 11, 11, SATURDAY_BACK) == 10

    def test_saturday_back_sunday_still_forward(self):
        # Remembrance Day 2018 is a Sunday
        assert observed_holiday(2018, 11, 11, SATURDAY_BACK) == 12

    def test_default_policy_rolls_forward(self):
        # Canada Day 2023 is a Saturday
        assert observed_holiday(2023, 7, 1) == 3


class TestHolidaysForYear:
    def test_2024_calendar(self):
        records = holidays_for_year(2024)
        assert [(h.name, h.observed_date) for h in records] == [
            ("New Year's Day", date(2024, 1, 1)),
            ("Family Day", date(2024, 2, 19)),
            ("Good Friday", date(2024, 3, 29)),
            ("Victoria Day", date(2024, 5, 20)),
            ("Canada Day", date(2024, 7, 1)),
            ("British Columbia Day", date(2024, 8, 5)),
            ("Labour Day", date(2024, 9, 2)),
            ("Thanksgiving", date(2024, 10, 14)),
            ("Remembrance Day", date(2024, 11, 11)),
            ("Christmas Day", date(2024, 12, 25)),
        ]

    def test_observed_dates_are_weekdays(self):
        for year in range(1900, 2101):
            for record in holidays_for_year(year):
                assert record.day_of_week not in (SATURDAY, SUNDAY), (year, record.name)

    def test_calendar_order(self):
        for year in (1999, 2021, 2050):
            observed = [h.observed_date for h in holidays_for_year(year)]
            assert observed == sorted(observed)

    def test_to_dict(self):
        record = holidays_for_year(2024)[7]
        assert record.to_dict() == {
            "name": "Thanksgiving",
            "observed_date": "2024-10-14",
            "day_of_week": "Monday",
        }

    def test_holiday_on(self):
        assert holiday_on(date(2024, 10, 14)).name == "Thanksgiving"
        assert holiday_on(date(2024, 10, 15)) is None
