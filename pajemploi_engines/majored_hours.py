"""
Module: pajemploi_engines.majored_hours
Responsibility:
    Count the weeks whose majored ("heures majorees") hours belong to a
    displayed month and price them.

    The schedule is 45.75 h a week against a 45 h threshold, so every
    fully worked Monday-Friday week carries 0.75 majored hours.  A week
    qualifies only when it has five business days and all five are worked.
    A week straddling two months is attributed whole to the later month.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - A qualifying week is counted for exactly one month, never split.
    - Off-like days (off, paid leave, contract-off) and sick days break a
      week identically; bank holidays do not.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from pajemploi_config.schema import PayrollRules
from pajemploi_engines.calendar import DEFAULT_RULES, CalendarDay, calendar_grid, week_key
from pajemploi_kernel.logging_config import get_logger

logger = get_logger("engines.majored_hours")


@dataclass(frozen=True)
class MajoredHours:
    """Majored hours attributed to one month."""

    qualifying_weeks: int
    hours: Decimal
    amount: Decimal


def _attributed_month(business_days: list[CalendarDay]) -> tuple[int, int]:
    latest = max(day.date for day in business_days)
    return latest.year, latest.month


def count_majored_weeks(
    month: date,
    off_like_days: Iterable[date],
    sick_days: Iterable[date] = (),
) -> int:
    """Number of fully worked ISO weeks attributed to ``month``."""
    excluded = set(off_like_days) | set(sick_days)

    weeks: dict[str, list[CalendarDay]] = defaultdict(list)
    for week in calendar_grid(month):
        for day in week.business_days:
            weeks[week_key(day.date)].append(day)

    target = (month.year, month.month)
    count = 0
    for business_days in weeks.values():
        if len(business_days) != 5:
            continue
        if any(day.date in excluded for day in business_days):
            continue
        # Single-month weeks and straddling weeks both land on the month
        # of their last business day.
        if _attributed_month(business_days) == target:
            count += 1
    return count


def compute_majored_hours(
    month: date,
    majored_hour_rate: Decimal,
    off_like_days: Iterable[date],
    sick_days: Iterable[date] = (),
    rules: PayrollRules = DEFAULT_RULES,
) -> MajoredHours:
    weeks = count_majored_weeks(month, off_like_days, sick_days)
    hours = weeks * rules.majored_hours_per_week
    amount = hours * majored_hour_rate
    logger.debug(
        "majored_hours_computed",
        extra={
            "month": month.isoformat(),
            "qualifying_weeks": weeks,
            "majored_hours": str(hours),
            "majored_amount": str(amount),
        },
    )
    return MajoredHours(qualifying_weeks=weeks, hours=hours, amount=amount)
