"""
Module: pajemploi_engines.calendar
Responsibility:
    French calendar rules for the declaration: nominal hours per weekday,
    Easter and the eleven bank holidays (jours feries) of a year, monthly
    normal/sick hours, worked-day counts and the Monday-first display grid.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import pajemploi_kernel domain values and pajemploi_config.schema.

Invariants enforced:
    - Purity: no clock access; ``calendar_grid`` flags today only when the
      caller passes ``today``.
    - Easter uses the Meeus/Jones/Butcher algorithm, integer arithmetic
      only, exact for every Gregorian year.
    - ``bank_holiday_entries`` always lists 11 holidays; the distinct dates
      drop to 10 in years where Ascension falls on May 1 or May 8 (2008).
    - ``worked_days_count`` does NOT exclude bank holidays while
      ``normal_hours_in_month`` does: allowances are paid for a worked
      bank holiday, whereas the hourly-rate divisor only counts days the
      schedule actually expects.

Failure modes:
    - None for well-formed dates; all functions are total.

Usage:
    from datetime import date
    from pajemploi_engines.calendar import BankHolidayCache, normal_hours_in_month

    holidays = BankHolidayCache()
    normal_hours_in_month(date(2026, 5, 1), holidays=holidays)  # Decimal("155.75")
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal

from pajemploi_config.schema import PayrollRules
from pajemploi_kernel.domain.dates import (
    FRIDAY,
    is_business_day,
    iter_days,
    iter_month_days,
    month_end,
    month_start,
    to_date_key,
    week_monday,
)
from pajemploi_kernel.logging_config import get_logger

logger = get_logger("engines.calendar")

DEFAULT_RULES = PayrollRules.with_defaults()

ZERO = Decimal("0")


# ---------------------------------------------------------------------------
# Bank holidays
# ---------------------------------------------------------------------------


def easter_date(year: int) -> date:
    """Easter Sunday (Gregorian) via the anonymous Meeus/Jones/Butcher algorithm."""
    a = year % 19
    b = year // 100
    c = year % 100
    d = b // 4
    e = b % 4
    f = (b + 8) // 25
    g = (b - f + 1) // 3
    h = (19 * a + b - d - g + 15) % 30
    i = c // 4
    k = c % 4
    l = (32 + 2 * e + 2 * i - h - k) % 7
    m = (a + 11 * h + 22 * l) // 451
    month = (h + l - 7 * m + 114) // 31
    day = (h + l - 7 * m + 114) % 31 + 1
    return date(year, month, day)


# (month, day, label)
FIXED_HOLIDAYS: tuple[tuple[int, int, str], ...] = (
    (1, 1, "Jour de l'an"),
    (5, 1, "Fete du travail"),
    (5, 8, "Victoire 1945"),
    (7, 14, "Fete nationale"),
    (8, 15, "Assomption"),
    (11, 1, "Toussaint"),
    (11, 11, "Armistice"),
    (12, 25, "Noel"),
)

# (days after Easter Sunday, label)
EASTER_OFFSETS: tuple[tuple[int, str], ...] = (
    (1, "Lundi de Paques"),
    (39, "Ascension"),
    (50, "Lundi de Pentecote"),
)


def bank_holiday_entries(year: int) -> tuple[tuple[date, str], ...]:
    """The 11 French bank holidays of ``year`` as ``(date, label)``, in calendar order."""
    entries = [(date(year, m, d), label) for m, d, label in FIXED_HOLIDAYS]
    easter = easter_date(year)
    entries.extend(
        (easter + timedelta(days=offset), label) for offset, label in EASTER_OFFSETS
    )
    return tuple(sorted(entries))


def bank_holiday_names(year: int) -> dict[date, str]:
    """Bank holidays of ``year`` by date; labels of coinciding holidays are joined."""
    named: dict[date, str] = {}
    for d, label in bank_holiday_entries(year):
        named[d] = f"{named[d]} / {label}" if d in named else label
    return named


def bank_holidays_for_year(year: int) -> frozenset[date]:
    """Distinct bank-holiday dates of ``year``.  Pure; see ``BankHolidayCache``."""
    return frozenset(bank_holiday_names(year))


class BankHolidayCache:
    """
    Per-year memo of ``bank_holidays_for_year``, owned by the caller.

    Contract:
        Entries are computed on first use and never invalidated: the
        holidays of a given year are constant.  Not shared process-wide;
        inject one instance where memoization is wanted.
    """

    def __init__(self) -> None:
        self._years: dict[int, frozenset[date]] = {}

    def for_year(self, year: int) -> frozenset[date]:
        holidays = self._years.get(year)
        if holidays is None:
            holidays = bank_holidays_for_year(year)
            self._years[year] = holidays
            logger.debug("bank_holidays_cached", extra={"year": year})
        return holidays

    def for_years(self, years: Iterable[int]) -> frozenset[date]:
        combined: frozenset[date] = frozenset()
        for year in sorted(set(years)):
            combined |= self.for_year(year)
        return combined

    def for_range(self, start: date, end: date) -> frozenset[date]:
        return self.for_years(range(start.year, end.year + 1))

    def is_holiday(self, d: date) -> bool:
        return d in self.for_year(d.year)

    def __len__(self) -> int:
        return len(self._years)


def _holidays_of(year: int, holidays: BankHolidayCache | None) -> frozenset[date]:
    if holidays is None:
        return bank_holidays_for_year(year)
    return holidays.for_year(year)


# ---------------------------------------------------------------------------
# Hours
# ---------------------------------------------------------------------------


def hours_for_day(d: date, rules: PayrollRules = DEFAULT_RULES) -> Decimal:
    """Scheduled hours: Mon-Thu 9.25, Fri 8.75, weekend 0.  Holidays are not applied here."""
    weekday = d.weekday()
    if weekday > FRIDAY:
        return ZERO
    if weekday == FRIDAY:
        return rules.hours_fri
    return rules.hours_mon_thu


def normal_hours_in_month(
    month: date,
    rules: PayrollRules = DEFAULT_RULES,
    holidays: BankHolidayCache | None = None,
) -> Decimal:
    """Scheduled hours of the month's weekdays that are not bank holidays."""
    year_holidays = _holidays_of(month.year, holidays)
    return sum(
        (
            hours_for_day(d, rules)
            for d in iter_month_days(month)
            if is_business_day(d) and d not in year_holidays
        ),
        ZERO,
    )


def sick_leave_hours(
    month: date,
    sick_days: Iterable[date],
    rules: PayrollRules = DEFAULT_RULES,
) -> Decimal:
    """Scheduled hours of the sick dates inside ``month`` (weekends weigh 0)."""
    start, end = month_start(month), month_end(month)
    return sum(
        (hours_for_day(d, rules) for d in set(sick_days) if start <= d <= end),
        ZERO,
    )


def worked_days_count(
    month: date,
    off_like_days: Iterable[date],
    sick_days: Iterable[date] = (),
) -> int:
    """Business days of ``month`` that are neither off-like nor sick.

    Bank holidays are counted as worked days here; the allowances they
    feed are owed for them.
    """
    excluded = set(off_like_days) | set(sick_days)
    return sum(
        1 for d in iter_month_days(month) if is_business_day(d) and d not in excluded
    )


# ---------------------------------------------------------------------------
# Display grid
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CalendarDay:
    """One cell of the month grid."""

    date: date
    date_key: str
    is_current_month: bool
    is_business_day: bool
    is_toggleable: bool
    is_today: bool = False


@dataclass(frozen=True)
class CalendarWeek:
    days: tuple[CalendarDay, ...]

    @property
    def business_days(self) -> tuple[CalendarDay, ...]:
        return tuple(day for day in self.days if day.is_business_day)


def calendar_grid(month: date, today: date | None = None) -> tuple[CalendarWeek, ...]:
    """
    Monday-first weeks covering ``month``, overflow days included.

    Overflow from the previous month stays toggleable (its tail may still
    need marking); overflow into the next month does not.
    """
    first, last = month_start(month), month_end(month)
    grid_start = week_monday(first)
    grid_end = week_monday(last) + timedelta(days=6)

    cells = [
        CalendarDay(
            date=d,
            date_key=to_date_key(d),
            is_current_month=first <= d <= last,
            is_business_day=is_business_day(d),
            is_toggleable=d <= last,
            is_today=today is not None and d == today,
        )
        for d in iter_days(grid_start, grid_end)
    ]
    return tuple(
        CalendarWeek(days=tuple(cells[i:i + 7])) for i in range(0, len(cells), 7)
    )


def week_key(d: date) -> str:
    """ISO week key, e.g. ``"2026-W05"``."""
    iso_year, iso_week, _ = d.isocalendar()
    return f"{iso_year}-W{iso_week:02d}"
