"""
Tests for the calendar engine.

Covers:
- Easter and the French bank holidays
- BankHolidayCache memoization
- Scheduled, normal and sick-leave hours
- Worked-day counts (bank holidays included)
- Monday-first display grid
"""

from datetime import date
from decimal import Decimal

import pytest

from pajemploi_engines.calendar import (
    BankHolidayCache,
    bank_holiday_entries,
    bank_holiday_names,
    bank_holidays_for_year,
    calendar_grid,
    easter_date,
    hours_for_day,
    normal_hours_in_month,
    sick_leave_hours,
    week_key,
    worked_days_count,
)
from pajemploi_kernel.domain.dates import iter_month_days


# ---------------------------------------------------------------------------
# Bank holidays
# ---------------------------------------------------------------------------


class TestEaster:

    @pytest.mark.parametrize(
        "year,expected",
        [
            (2024, date(2024, 3, 31)),
            (2025, date(2025, 4, 20)),
            (2026, date(2026, 4, 5)),
            (2019, date(2019, 4, 21)),
            (2000, date(2000, 4, 23)),
        ],
    )
    def test_known_easter_sundays(self, year, expected):
        assert easter_date(year) == expected
        assert easter_date(year).weekday() == 6


class TestBankHolidays:

    def test_eleven_holidays_in_2026(self):
        holidays = bank_holidays_for_year(2026)
        assert len(holidays) == 11
        assert all(d.year == 2026 for d in holidays)

    def test_easter_derived_holidays_2026(self):
        holidays = bank_holidays_for_year(2026)
        assert date(2026, 4, 6) in holidays   # Easter Monday
        assert date(2026, 5, 14) in holidays  # Ascension
        assert date(2026, 5, 25) in holidays  # Whit Monday

    def test_fixed_holidays(self):
        holidays = bank_holidays_for_year(2026)
        for month, day in [(1, 1), (5, 1), (5, 8), (7, 14), (8, 15), (11, 1), (11, 11), (12, 25)]:
            assert date(2026, month, day) in holidays

    def test_easter_sunday_itself_is_not_a_holiday(self):
        assert date(2026, 4, 5) not in bank_holidays_for_year(2026)

    def test_entries_always_list_eleven_holidays(self):
        entries = bank_holiday_entries(2026)
        assert len(entries) == 11
        assert [d for d, _ in entries] == sorted(d for d, _ in entries)

    def test_ascension_on_labour_day_collapses_to_ten_dates(self):
        """Easter 2008 fell on March 23, putting Ascension on May 1."""
        assert len(bank_holiday_entries(2008)) == 11
        assert len(bank_holidays_for_year(2008)) == 10
        assert bank_holiday_names(2008)[date(2008, 5, 1)] == "Ascension / Fete du travail"


class TestBankHolidayCache:

    def test_memoizes_per_year(self):
        cache = BankHolidayCache()
        first = cache.for_year(2026)
        second = cache.for_year(2026)
        assert first is second
        assert len(cache) == 1

    def test_matches_pure_function(self):
        cache = BankHolidayCache()
        assert cache.for_year(2025) == bank_holidays_for_year(2025)

    def test_range_spans_years(self):
        cache = BankHolidayCache()
        combined = cache.for_range(date(2025, 6, 1), date(2026, 5, 31))
        assert len(combined) == 22
        assert len(cache) == 2

    def test_is_holiday(self):
        cache = BankHolidayCache()
        assert cache.is_holiday(date(2026, 7, 14))
        assert not cache.is_holiday(date(2026, 7, 15))


# ---------------------------------------------------------------------------
# Hours
# ---------------------------------------------------------------------------


class TestHoursForDay:

    def test_monday_to_thursday(self, rules):
        for d in (date(2026, 2, 2), date(2026, 2, 3), date(2026, 2, 4), date(2026, 2, 5)):
            assert hours_for_day(d, rules) == Decimal("9.25")

    def test_friday(self, rules):
        assert hours_for_day(date(2026, 2, 6), rules) == Decimal("8.75")

    def test_weekend(self, rules):
        assert hours_for_day(date(2026, 2, 7), rules) == 0
        assert hours_for_day(date(2026, 2, 8), rules) == 0

    def test_holiday_is_not_applied(self, rules):
        # 2026-05-14 (Ascension) is a Thursday.
        assert hours_for_day(date(2026, 5, 14), rules) == Decimal("9.25")


class TestNormalHoursInMonth:

    def test_february_2026_has_no_holiday(self, rules, holidays):
        assert normal_hours_in_month(date(2026, 2, 1), rules, holidays) == Decimal("183")

    def test_may_2026_excludes_four_weekday_holidays(self, rules, holidays):
        assert normal_hours_in_month(date(2026, 5, 1), rules, holidays) == Decimal("155.75")

    def test_cache_is_optional(self, rules):
        assert normal_hours_in_month(date(2026, 5, 20), rules) == Decimal("155.75")


class TestSickLeaveHours:

    def test_weekday_hours_summed(self, rules):
        sick = {date(2026, 2, 2), date(2026, 2, 6)}
        assert sick_leave_hours(date(2026, 2, 1), sick, rules) == Decimal("18.00")

    def test_weekend_weighs_zero(self, rules):
        assert sick_leave_hours(date(2026, 2, 1), {date(2026, 2, 7)}, rules) == 0

    def test_other_months_ignored(self, rules):
        sick = {date(2026, 1, 30), date(2026, 3, 2)}
        assert sick_leave_hours(date(2026, 2, 1), sick, rules) == 0


class TestWorkedDaysCount:

    def test_no_absence_counts_every_weekday(self):
        assert worked_days_count(date(2026, 2, 1), set()) == 20

    def test_off_and_sick_excluded(self):
        off = {date(2026, 2, 2)}
        sick = {date(2026, 2, 3), date(2026, 2, 4)}
        assert worked_days_count(date(2026, 2, 1), off, sick) == 17

    def test_weekend_absences_do_not_count(self):
        assert worked_days_count(date(2026, 2, 1), {date(2026, 2, 7)}) == 20

    def test_bank_holidays_count_as_worked_days(self, rules, holidays):
        """Allowances include bank holidays while the hourly divisor does not."""
        may = date(2026, 5, 1)
        weekdays = sum(1 for d in iter_month_days(may) if d.weekday() < 5)
        assert worked_days_count(may, set()) == weekdays == 21
        assert normal_hours_in_month(may, rules, holidays) < weekdays * Decimal("9.25")


# ---------------------------------------------------------------------------
# Display grid
# ---------------------------------------------------------------------------


class TestCalendarGrid:

    def test_february_2026_shape(self):
        grid = calendar_grid(date(2026, 2, 1))
        assert len(grid) == 5
        assert grid[0].days[0].date == date(2026, 1, 26)
        assert grid[-1].days[-1].date == date(2026, 3, 1)
        assert all(len(week.days) == 7 for week in grid)

    def test_overflow_flags(self):
        grid = calendar_grid(date(2026, 2, 1))
        first = grid[0].days[0]
        last = grid[-1].days[-1]
        assert not first.is_current_month and first.is_toggleable
        assert not last.is_current_month and not last.is_toggleable

    def test_today_flag_only_when_given(self):
        grid = calendar_grid(date(2026, 2, 1), today=date(2026, 2, 10))
        flagged = [day.date for week in grid for day in week.days if day.is_today]
        assert flagged == [date(2026, 2, 10)]
        assert not any(day.is_today for week in calendar_grid(date(2026, 2, 1)) for day in week.days)

    def test_business_days(self):
        week = calendar_grid(date(2026, 2, 1))[1]
        assert [d.date_key for d in week.business_days] == [
            "2026-02-02", "2026-02-03", "2026-02-04", "2026-02-05", "2026-02-06",
        ]


class TestWeekKey:

    def test_iso_week(self):
        assert week_key(date(2026, 2, 2)) == "2026-W06"

    def test_iso_year_differs_from_calendar_year(self):
        assert week_key(date(2025, 12, 31)) == "2026-W01"
