"""
Module: pajemploi_engines.paid_leave
Responsibility:
    Paid-leave (conges payes) accounting for a childcare contract:

    * reference periods (June 1 - May 31),
    * prorated worked weeks over a period,
    * acquired days, ``ceil(weeks / 4 x 2.5)`` capped at 30,
    * the "jours ouvrables" Saturday rule: a Friday taken as paid leave
      also consumes the following Saturday while the balance allows it,
    * period-scoped taken counts and the per-month counters shown next to
      the calendar.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Reference periods are exactly twelve months, boundary-inclusive and
      never overlap their neighbours.
    - A week belongs to the period containing its Monday and is always
      evaluated Monday to Friday, even past the period end.
    - Bank holidays and paid-leave days count as worked for accrual.
    - Counts never include a date outside the requested period.

Failure modes:
    - None: non-positive worked weeks accrue 0, an exhausted balance simply
      stops consuming Saturdays.

Usage:
    from datetime import date
    from pajemploi_engines.paid_leave import compute_acquired_paid_leave, reference_period

    period = reference_period(date(2026, 2, 15))  # 2025-06-01 .. 2026-05-31
    compute_acquired_paid_leave(Decimal("8"))      # 5
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import ROUND_CEILING, Decimal

from pajemploi_config.schema import PayrollRules
from pajemploi_engines.calendar import DEFAULT_RULES, BankHolidayCache
from pajemploi_engines.tracer import traced_engine
from pajemploi_kernel.domain.dates import (
    FRIDAY,
    first_monday_on_or_after,
    month_end,
    month_start,
)
from pajemploi_kernel.logging_config import get_logger

logger = get_logger("engines.paid_leave")

ZERO = Decimal("0")
FOUR_WEEKS = Decimal("4")
DAYS_PER_WEEK = Decimal("5")


# ---------------------------------------------------------------------------
# Reference periods
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ReferencePeriod:
    """A paid-leave accounting year, both bounds inclusive."""

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError("ReferencePeriod end cannot precede start")

    def contains(self, d: date) -> bool:
        return self.start <= d <= self.end

    def clipped_start(self, contract_start: date | None) -> date:
        """Start of accrual within this period for a contract starting at ``contract_start``."""
        if contract_start is None or contract_start <= self.start:
            return self.start
        return contract_start

    @property
    def label(self) -> str:
        return f"{self.start.isoformat()}..{self.end.isoformat()}"


def reference_period(d: date, rules: PayrollRules = DEFAULT_RULES) -> ReferencePeriod:
    """The reference period containing ``d``."""
    start_month = rules.reference_period_start_month
    start_year = d.year if d.month >= start_month else d.year - 1
    start = date(start_year, start_month, 1)
    end = date(start_year + 1, start_month, 1) - timedelta(days=1)
    return ReferencePeriod(start=start, end=end)


def previous_reference_period(
    d: date, rules: PayrollRules = DEFAULT_RULES
) -> ReferencePeriod:
    current = reference_period(d, rules)
    return reference_period(current.start - timedelta(days=1), rules)


# ---------------------------------------------------------------------------
# Accrual
# ---------------------------------------------------------------------------


def compute_worked_weeks(
    period_start: date,
    period_end: date,
    days_off: Iterable[date] = (),
    sick_days: Iterable[date] = (),
    paid_leave_days: Iterable[date] = (),
    contract_off_days: Iterable[date] = (),
) -> Decimal:
    """
    Prorated worked weeks in ``[period_start, period_end]``.

    Each week whose Monday falls in the range is worth worked_days / 5,
    where a Monday-Friday day is worked unless it is off, sick or
    contract-off.  ``paid_leave_days`` are accepted for symmetry with the
    other sets and never reduce the count.
    """
    not_worked = set(days_off) | set(sick_days) | set(contract_off_days)

    total = ZERO
    monday = first_monday_on_or_after(period_start)
    while monday <= period_end:
        worked = sum(
            1 for i in range(5) if monday + timedelta(days=i) not in not_worked
        )
        total += Decimal(worked) / DAYS_PER_WEEK
        monday += timedelta(days=7)
    return total


def compute_acquired_paid_leave(
    worked_weeks: Decimal | int,
    rules: PayrollRules = DEFAULT_RULES,
) -> int:
    """Acquired days: ``min(ceil(weeks / 4 x 2.5), 30)``; 0 for non-positive input."""
    weeks = Decimal(worked_weeks)
    if weeks <= 0:
        return 0
    raw = weeks / FOUR_WEEKS * rules.leave_days_per_four_weeks
    acquired = int(raw.to_integral_value(rounding=ROUND_CEILING))
    return min(acquired, rules.annual_leave_cap)


# ---------------------------------------------------------------------------
# Consumption
# ---------------------------------------------------------------------------


def compute_paid_leave_saturday_days(
    paid_leave_days: Iterable[date],
    bank_holidays: Iterable[date],
    acquired_previous: int,
    period_start: date,
    period_end: date,
) -> frozenset[date]:
    """
    Saturdays consumed automatically behind paid-leave Fridays.

    Leave dates inside the period are replayed chronologically against a
    running balance starting at ``acquired_previous``.  Each date consumes
    one day (the balance never goes below zero).  After a Friday, the
    following Saturday is consumed too when at least one day remains and
    that Saturday is not a bank holiday.  A Saturday already recorded as
    explicit paid leave is consumed by its own entry instead.
    """
    leave = sorted(d for d in set(paid_leave_days) if period_start <= d <= period_end)
    explicit = set(leave)
    holidays = set(bank_holidays)

    remaining = max(0, acquired_previous)
    saturdays: set[date] = set()
    for d in leave:
        remaining = max(0, remaining - 1)
        if d.weekday() != FRIDAY:
            continue
        saturday = d + timedelta(days=1)
        if saturday in holidays or saturday in explicit:
            continue
        if remaining >= 1:
            saturdays.add(saturday)
            remaining -= 1
    return frozenset(saturdays)


def count_paid_leave_taken_in_period(
    period_start: date,
    period_end: date,
    paid_leave_days: Iterable[date],
    auto_saturdays: Iterable[date] = (),
) -> int:
    """Explicit leave dates inside the bounds (inclusive) plus the auto Saturdays."""
    explicit = sum(1 for d in set(paid_leave_days) if period_start <= d <= period_end)
    return explicit + len(set(auto_saturdays))


# ---------------------------------------------------------------------------
# Counters
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PaidLeaveCounters:
    """
    Paid-leave balances of one child as of a displayed month.

    Contract:
        ``available == max(0, acquired_previous - taken_in_current)``.
        ``acquiring`` is the accrual of the current period up to the end of
        the displayed month, minus the leave taken beyond the previous
        period's balance, never negative.
    """

    acquired_previous: int
    taken_in_current: int
    available: int
    acquiring: int
    current_period: ReferencePeriod
    previous_period: ReferencePeriod
    auto_saturdays: frozenset[date] = frozenset()

    @property
    def balance(self) -> int:
        """Days that can still be granted: available plus accruing."""
        return self.available + self.acquiring

    def to_dict(self) -> dict:
        return {
            "acquiredPrevious": self.acquired_previous,
            "takenInCurrent": self.taken_in_current,
            "available": self.available,
            "acquiring": self.acquiring,
            "currentPeriodStart": self.current_period.start.isoformat(),
            "currentPeriodEnd": self.current_period.end.isoformat(),
            "previousPeriodStart": self.previous_period.start.isoformat(),
            "previousPeriodEnd": self.previous_period.end.isoformat(),
        }


def _accrued_days(
    window_start: date,
    window_end: date,
    days_off: Iterable[date],
    sick_days: Iterable[date],
    paid_leave_days: Iterable[date],
    contract_off_days: Iterable[date],
    rules: PayrollRules,
) -> tuple[Decimal, int]:
    if window_end < window_start:
        return ZERO, 0
    weeks = compute_worked_weeks(
        window_start,
        window_end,
        days_off,
        sick_days,
        paid_leave_days,
        contract_off_days,
    )
    return weeks, compute_acquired_paid_leave(weeks, rules)


@traced_engine(
    "paid_leave_counters",
    "1.0",
    fingerprint_fields=(
        "month",
        "days_off",
        "sick_days",
        "paid_leave_days",
        "contract_off_days",
        "contract_start",
        "rules",
    ),
)
def compute_paid_leave_counters(
    *,
    month: date,
    days_off: frozenset[date] = frozenset(),
    sick_days: frozenset[date] = frozenset(),
    paid_leave_days: frozenset[date] = frozenset(),
    contract_off_days: frozenset[date] = frozenset(),
    contract_start: date | None = None,
    rules: PayrollRules = DEFAULT_RULES,
    holidays: BankHolidayCache | None = None,
) -> PaidLeaveCounters:
    """
    Balances for the displayed ``month``.

    Accrual windows start no earlier than ``contract_start``.  The previous
    period's acquired days form the balance consumed in the current
    period (Saturday rule included).
    """
    holidays = holidays if holidays is not None else BankHolidayCache()
    current = reference_period(month, rules)
    previous = previous_reference_period(month, rules)

    previous_weeks, acquired_previous = _accrued_days(
        previous.clipped_start(contract_start),
        previous.end,
        days_off,
        sick_days,
        paid_leave_days,
        contract_off_days,
        rules,
    )

    auto_saturdays = compute_paid_leave_saturday_days(
        paid_leave_days,
        holidays.for_range(current.start, current.end),
        acquired_previous,
        current.start,
        current.end,
    )
    taken = count_paid_leave_taken_in_period(
        current.start, current.end, paid_leave_days, auto_saturdays
    )
    available = max(0, acquired_previous - taken)

    current_weeks, acquiring_gross = _accrued_days(
        current.clipped_start(contract_start),
        min(current.end, month_end(month_start(month))),
        days_off,
        sick_days,
        paid_leave_days,
        contract_off_days,
        rules,
    )
    overdraft = max(0, taken - acquired_previous)
    acquiring = max(0, acquiring_gross - overdraft)

    logger.info(
        "paid_leave_counters_computed",
        extra={
            "month": month.isoformat(),
            "previous_period": previous.label,
            "previous_worked_weeks": str(previous_weeks),
            "acquired_previous": acquired_previous,
            "taken_in_current": taken,
            "auto_saturdays": len(auto_saturdays),
            "current_worked_weeks": str(current_weeks),
            "acquiring": acquiring,
        },
    )
    return PaidLeaveCounters(
        acquired_previous=acquired_previous,
        taken_in_current=taken,
        available=available,
        acquiring=acquiring,
        current_period=current,
        previous_period=previous,
        auto_saturdays=auto_saturdays,
    )
