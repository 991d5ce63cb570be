"""
Dates -- ISO date keys and month arithmetic.

Responsibility:
    Converts between the ``"YYYY-MM-DD"`` keys used by day-state maps and
    ``datetime.date`` values used by the engines, and provides the small
    month/week helpers every engine needs.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Failure modes:
    - ``parse_date_key`` raises InvalidDateKeyError for anything that is not
      a real calendar date in ``YYYY-MM-DD`` form.  This is the fail-fast
      boundary; engines assume well-formed dates.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from datetime import date, timedelta

from pajemploi_kernel.exceptions import InvalidDateKeyError

DATE_KEY_FORMAT = "%Y-%m-%d"

_DATE_KEY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

MONDAY = 0
FRIDAY = 4
SATURDAY = 5


def parse_date_key(key: str) -> date:
    """Parse a ``YYYY-MM-DD`` key into a date, rejecting anything else."""
    if isinstance(key, date):
        return key
    if not isinstance(key, str) or not _DATE_KEY_RE.match(key):
        raise InvalidDateKeyError(key)
    try:
        return date.fromisoformat(key)
    except ValueError:
        raise InvalidDateKeyError(key) from None


def to_date_key(d: date) -> str:
    return d.strftime(DATE_KEY_FORMAT)


def parse_date_keys(keys: Iterable[str | date]) -> frozenset[date]:
    """Parse a collection of keys (or dates) into a frozenset of dates."""
    return frozenset(parse_date_key(k) for k in keys)


def month_start(d: date) -> date:
    return d.replace(day=1)


def month_end(d: date) -> date:
    if d.month == 12:
        return date(d.year, 12, 31)
    return date(d.year, d.month + 1, 1) - timedelta(days=1)


def add_months(d: date, months: int) -> date:
    """First day of the month ``months`` away from ``d``'s month."""
    index = d.year * 12 + (d.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def month_label(d: date) -> str:
    """``"YYYY-MM"`` label used in logs and results."""
    return f"{d.year:04d}-{d.month:02d}"


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every date from ``start`` to ``end`` inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def iter_month_days(month: date) -> Iterator[date]:
    return iter_days(month_start(month), month_end(month))


def is_weekend(d: date) -> bool:
    return d.weekday() >= SATURDAY


def is_business_day(d: date) -> bool:
    """Monday to Friday.  Bank holidays are a separate concern."""
    return not is_weekend(d)


def week_monday(d: date) -> date:
    return d - timedelta(days=d.weekday())


def first_monday_on_or_after(d: date) -> date:
    return d + timedelta(days=(7 - d.weekday()) % 7)


def week_business_days(d: date) -> tuple[date, ...]:
    """Monday to Friday of the week containing ``d``."""
    monday = week_monday(d)
    return tuple(monday + timedelta(days=i) for i in range(5))
