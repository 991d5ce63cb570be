"""
Tests for the paid-leave engine.

Covers:
- Reference periods (June 1 - May 31)
- Prorated worked weeks
- Acquired days (2.5 per 4 weeks, rounded up, capped at 30)
- Saturday consumption after paid-leave Fridays
- Period-scoped taken counts
- Counters for a displayed month
"""

from datetime import date
from decimal import Decimal

import pytest

from pajemploi_engines.paid_leave import (
    ReferencePeriod,
    compute_acquired_paid_leave,
    compute_paid_leave_counters,
    compute_paid_leave_saturday_days,
    compute_worked_weeks,
    count_paid_leave_taken_in_period,
    previous_reference_period,
    reference_period,
)

PERIOD_START = date(2026, 6, 1)
PERIOD_END = date(2027, 5, 31)
NO_HOLIDAYS: frozenset[date] = frozenset()


# ---------------------------------------------------------------------------
# Reference periods
# ---------------------------------------------------------------------------


class TestReferencePeriod:

    def test_before_june(self):
        period = reference_period(date(2026, 2, 15))
        assert period == ReferencePeriod(date(2025, 6, 1), date(2026, 5, 31))

    def test_from_june(self):
        period = reference_period(date(2026, 6, 1))
        assert period == ReferencePeriod(PERIOD_START, PERIOD_END)

    def test_last_day_of_may(self):
        assert reference_period(date(2026, 5, 31)).end == date(2026, 5, 31)

    def test_previous_period(self):
        previous = previous_reference_period(date(2026, 10, 1))
        assert previous == ReferencePeriod(date(2025, 6, 1), date(2026, 5, 31))

    def test_leap_year_end(self):
        # Feb 29 sits inside the period; the period still ends May 31.
        period = reference_period(date(2028, 2, 29))
        assert period == ReferencePeriod(date(2027, 6, 1), date(2028, 5, 31))

    def test_contains_is_inclusive(self):
        period = ReferencePeriod(PERIOD_START, PERIOD_END)
        assert period.contains(PERIOD_START)
        assert period.contains(PERIOD_END)
        assert not period.contains(date(2027, 6, 1))

    def test_clipped_start(self):
        period = ReferencePeriod(PERIOD_START, PERIOD_END)
        assert period.clipped_start(None) == PERIOD_START
        assert period.clipped_start(date(2020, 1, 1)) == PERIOD_START
        assert period.clipped_start(date(2026, 9, 1)) == date(2026, 9, 1)

    def test_end_before_start_rejected(self):
        with pytest.raises(ValueError):
            ReferencePeriod(date(2026, 6, 1), date(2026, 5, 31))


# ---------------------------------------------------------------------------
# Accrual
# ---------------------------------------------------------------------------


class TestWorkedWeeks:

    def test_june_2026_has_five_mondays(self):
        assert compute_worked_weeks(PERIOD_START, date(2026, 6, 30)) == Decimal("5")

    def test_absence_prorates_week(self):
        weeks = compute_worked_weeks(
            PERIOD_START, date(2026, 6, 30), days_off={date(2026, 6, 2)}
        )
        assert weeks == Decimal("4.8")

    def test_sick_and_contract_off_reduce(self):
        weeks = compute_worked_weeks(
            PERIOD_START,
            date(2026, 6, 7),
            sick_days={date(2026, 6, 1)},
            contract_off_days={date(2026, 6, 2)},
        )
        assert weeks == Decimal("0.6")

    def test_paid_leave_counts_as_worked(self):
        weeks = compute_worked_weeks(
            PERIOD_START, date(2026, 6, 7), paid_leave_days={date(2026, 6, 3)}
        )
        assert weeks == Decimal("1")

    def test_week_past_period_end_evaluated_whole(self):
        # Monday 2026-06-29 is inside; its Thursday and Friday are in July.
        weeks = compute_worked_weeks(
            date(2026, 6, 29), date(2026, 6, 30), days_off={date(2026, 7, 3)}
        )
        assert weeks == Decimal("0.8")

    def test_full_reference_period(self):
        assert compute_worked_weeks(date(2025, 6, 1), date(2026, 5, 31)) == Decimal("52")


class TestAcquiredPaidLeave:

    @pytest.mark.parametrize(
        "weeks,expected",
        [(4, 3), (8, 5), (52, 30), (0, 0), (-3, 0), (Decimal("0.8"), 1), (48, 30), (47, 30), (44, 28)],
    )
    def test_acquired(self, weeks, expected):
        assert compute_acquired_paid_leave(weeks) == expected

    def test_cap_follows_rules(self, rules):
        from dataclasses import replace

        assert compute_acquired_paid_leave(52, replace(rules, annual_leave_cap=25)) == 25


# ---------------------------------------------------------------------------
# Consumption
# ---------------------------------------------------------------------------


class TestSaturdayRule:

    FRIDAY = date(2026, 10, 16)
    SATURDAY = date(2026, 10, 17)

    def test_balance_two_consumes_saturday(self):
        saturdays = compute_paid_leave_saturday_days(
            {self.FRIDAY}, NO_HOLIDAYS, 2, PERIOD_START, PERIOD_END
        )
        assert saturdays == frozenset({self.SATURDAY})

    def test_balance_exactly_one_does_not(self):
        saturdays = compute_paid_leave_saturday_days(
            {self.FRIDAY}, NO_HOLIDAYS, 1, PERIOD_START, PERIOD_END
        )
        assert saturdays == frozenset()

    def test_holiday_saturday_never_consumed(self, holidays):
        # 2026-08-15 (Assomption) is a Saturday.
        saturdays = compute_paid_leave_saturday_days(
            {date(2026, 8, 14)},
            holidays.for_range(PERIOD_START, PERIOD_END),
            30,
            PERIOD_START,
            PERIOD_END,
        )
        assert saturdays == frozenset()

    def test_running_balance_across_fridays(self):
        fridays = {date(2026, 10, 9), date(2026, 10, 16)}
        saturdays = compute_paid_leave_saturday_days(
            fridays, NO_HOLIDAYS, 3, PERIOD_START, PERIOD_END
        )
        assert saturdays == frozenset({date(2026, 10, 10)})

    def test_non_friday_never_adds_saturday(self):
        saturdays = compute_paid_leave_saturday_days(
            {date(2026, 10, 15)}, NO_HOLIDAYS, 10, PERIOD_START, PERIOD_END
        )
        assert saturdays == frozenset()

    def test_explicit_saturday_not_doubled(self):
        saturdays = compute_paid_leave_saturday_days(
            {self.FRIDAY, self.SATURDAY}, NO_HOLIDAYS, 5, PERIOD_START, PERIOD_END
        )
        assert saturdays == frozenset()

    def test_dates_outside_period_ignored(self):
        saturdays = compute_paid_leave_saturday_days(
            {date(2026, 5, 29)}, NO_HOLIDAYS, 5, PERIOD_START, PERIOD_END
        )
        assert saturdays == frozenset()

    def test_friday_at_period_end(self):
        # 2027-04-30 is the last Friday before May 1, 2027 (a Saturday holiday).
        saturdays = compute_paid_leave_saturday_days(
            {date(2027, 4, 30)}, {date(2027, 5, 1)}, 5, PERIOD_START, PERIOD_END
        )
        assert saturdays == frozenset()


class TestTakenInPeriod:

    def test_endpoints_inclusive_and_outside_excluded(self):
        leave = {
            date(2026, 5, 31),
            PERIOD_START,
            PERIOD_END,
            date(2027, 6, 1),
        }
        assert count_paid_leave_taken_in_period(PERIOD_START, PERIOD_END, leave) == 2

    def test_auto_saturdays_added(self):
        leave = {date(2026, 10, 16)}
        saturdays = {date(2026, 10, 17)}
        assert count_paid_leave_taken_in_period(PERIOD_START, PERIOD_END, leave, saturdays) == 2

    def test_empty(self):
        assert count_paid_leave_taken_in_period(PERIOD_START, PERIOD_END, set()) == 0


# ---------------------------------------------------------------------------
# Counters
# ---------------------------------------------------------------------------


class TestPaidLeaveCounters:

    def test_full_previous_period_and_current_accrual(self, rules, holidays):
        counters = compute_paid_leave_counters(
            month=date(2026, 10, 1),
            paid_leave_days=frozenset({date(2026, 10, 16)}),
            contract_start=date(2025, 6, 1),
            rules=rules,
            holidays=holidays,
        )
        assert counters.acquired_previous == 30
        assert counters.auto_saturdays == frozenset({date(2026, 10, 17)})
        assert counters.taken_in_current == 2
        assert counters.available == 28
        # 22 weeks from 2026-06-01 to 2026-10-31 -> ceil(13.75)
        assert counters.acquiring == 14
        assert counters.balance == 42

    def test_contract_start_clips_accrual(self, rules, holidays):
        counters = compute_paid_leave_counters(
            month=date(2026, 10, 1),
            paid_leave_days=frozenset({date(2026, 10, 16)}),
            contract_start=date(2026, 9, 1),
            rules=rules,
            holidays=holidays,
        )
        assert counters.acquired_previous == 0
        assert counters.auto_saturdays == frozenset()
        assert counters.taken_in_current == 1
        assert counters.available == 0
        # 8 weeks -> 5 days, minus 1 day taken beyond the previous balance
        assert counters.acquiring == 4

    def test_contract_starting_after_month_has_no_balance(self, rules, holidays):
        counters = compute_paid_leave_counters(
            month=date(2026, 10, 1),
            contract_start=date(2026, 10, 27),
            rules=rules,
            holidays=holidays,
        )
        assert counters.balance == 0

    def test_to_dict(self, rules, holidays):
        counters = compute_paid_leave_counters(
            month=date(2026, 2, 1), rules=rules, holidays=holidays
        )
        data = counters.to_dict()
        assert data["currentPeriodStart"] == "2025-06-01"
        assert data["previousPeriodEnd"] == "2025-05-31"
        assert set(data) >= {"acquiredPrevious", "takenInCurrent", "available", "acquiring"}

    def test_emits_engine_trace(self, rules, holidays, captured_logs):
        compute_paid_leave_counters(month=date(2026, 2, 1), rules=rules, holidays=holidays)
        traces = [r for r in captured_logs() if r["message"] == "PAJEMPLOI_ENGINE_TRACE"]
        assert traces and traces[0]["engine_name"] == "paid_leave_counters"

    def test_fills_the_injected_holiday_cache(self, rules, holidays):
        assert len(holidays) == 0
        compute_paid_leave_counters(month=date(2026, 2, 1), rules=rules, holidays=holidays)
        # Saturday rule looks up the holidays of both years of 2025-06-01..2026-05-31
        assert len(holidays) == 2
