"""
Module: pajemploi_engines.external_events
Responsibility:
    Turn already-selected external calendar events into day-off dates and
    merge them into a child's state map.

    Selecting which events mean "day off" belongs to the caller; this module
    only expands the dates an event spans.

Architecture position:
    Engines -- pure, zero I/O.  Events arrive as plain data.

Invariants enforced:
    - All-day events have an exclusive end date, so an event from the 20th
      to the 24th covers the 20th to the 23rd.
    - An event whose end is not after its start covers its start day only.
    - Merging never overrides a state the user set explicitly.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta

from pajemploi_kernel.domain.dates import iter_days, parse_date_key, to_date_key
from pajemploi_kernel.domain.day_state import DayState, DayStateMap
from pajemploi_kernel.logging_config import get_logger

logger = get_logger("engines.external_events")


@dataclass(frozen=True)
class CalendarEvent:
    """An external calendar event reduced to its dates."""

    id: str
    summary: str
    start: date
    end: date

    @classmethod
    def from_dict(cls, data: dict) -> CalendarEvent:
        # Timed events carry a full timestamp; only the day matters here.
        return cls(
            id=str(data["id"]),
            summary=data.get("summary") or "",
            start=parse_date_key(str(data["start"])[:10]),
            end=parse_date_key(str(data["end"])[:10]),
        )


def event_dates(event: CalendarEvent) -> list[str]:
    """ISO dates spanned by ``event``, end exclusive."""
    last = event.end - timedelta(days=1)
    if last < event.start:
        return [to_date_key(event.start)]
    return [to_date_key(d) for d in iter_days(event.start, last)]


def dates_from_events(events: Iterable[CalendarEvent]) -> list[str]:
    """Sorted union of the dates of ``events``."""
    dates: set[str] = set()
    for event in events:
        dates.update(event_dates(event))
    return sorted(dates)


def merge_external_days_off(
    states: DayStateMap,
    date_keys: Iterable[str | date],
) -> dict[str, DayState]:
    """Mark ``date_keys`` as off where ``states`` has no entry yet."""
    merged = dict(states)
    added = 0
    for raw in date_keys:
        key = to_date_key(parse_date_key(raw))
        if key not in merged:
            merged[key] = DayState.OFF
            added += 1
    logger.debug("external_days_off_merged", extra={"added": added})
    return merged
