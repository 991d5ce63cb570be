"""
Day-State Model (``pajemploi_kernel.domain.day_state``).

Responsibility
--------------
Per-child, per-day attendance state and the derived date sets that feed
the calendar, paid-leave and declaration engines.

A child's calendar is a mapping ``{"YYYY-MM-DD": DayState}``.  A missing key
means ``WORKED``; setting a day back to ``WORKED`` removes its key so that
the map only ever records absences.

Architecture position
---------------------
**Kernel > Domain** -- pure data and pure transforms.  Every operation
returns a new mapping; inputs are never mutated.

Invariants enforced
-------------------
* A date maps to at most one state per child (dict keys).
* ``WORKED`` is never stored explicitly.
* Keys are validated ISO dates when they enter through ``set_day_state`` or
  ``states_from_dict``.

Failure modes
-------------
* ``InvalidDateKeyError`` for malformed keys.
* ``UnknownDayStateError`` for state values outside the enum.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date
from enum import Enum

from pajemploi_kernel.domain.dates import (
    parse_date_key,
    to_date_key,
    week_business_days,
)
from pajemploi_kernel.exceptions import UnknownDayStateError
from pajemploi_kernel.logging_config import get_logger

logger = get_logger("domain.day_state")


class DayState(Enum):
    """Attendance state of one child on one day."""
    WORKED = "worked"
    OFF = "off"
    SICK = "sick"
    PAID_LEAVE = "paid_leave"
    CONTRACT_OFF = "contract_off"

    @classmethod
    def parse(cls, value: str | DayState, date_key: str | None = None) -> DayState:
        if isinstance(value, DayState):
            return value
        try:
            return cls(value)
        except ValueError:
            raise UnknownDayStateError(value, date_key) from None


DayStateMap = Mapping[str, DayState]


def state_of(states: DayStateMap, date_key: str) -> DayState:
    """State of a day; absent keys are worked."""
    return states.get(date_key, DayState.WORKED)


def set_day_state(
    states: DayStateMap,
    date_key: str | date,
    state: DayState | str,
) -> dict[str, DayState]:
    """Return a copy of ``states`` with one day changed."""
    key = to_date_key(parse_date_key(date_key))
    new_state = DayState.parse(state, key)
    updated = dict(states)
    if new_state is DayState.WORKED:
        updated.pop(key, None)
    else:
        updated[key] = new_state
    return updated


def set_days_state(
    states: DayStateMap,
    date_keys: Iterable[str | date],
    state: DayState | str,
) -> dict[str, DayState]:
    updated = dict(states)
    for key in date_keys:
        updated = set_day_state(updated, key, state)
    return updated


def toggle_week_contract_off(
    states: DayStateMap,
    any_day: str | date,
) -> dict[str, DayState]:
    """Flip the Monday-Friday of a week in or out of ``CONTRACT_OFF``.

    If every business day of the week is already contract-off, the five
    days go back to worked; otherwise all five become contract-off.
    """
    week = [to_date_key(d) for d in week_business_days(parse_date_key(any_day))]
    all_contract_off = all(
        state_of(states, key) is DayState.CONTRACT_OFF for key in week
    )
    target = DayState.WORKED if all_contract_off else DayState.CONTRACT_OFF
    logger.debug(
        "week_contract_off_toggled",
        extra={"week_start": week[0], "target_state": target.value},
    )
    return set_days_state(states, week, target)


def states_to_dict(states: DayStateMap) -> dict[str, str]:
    """JSON-ready form of a state map (sorted by date)."""
    return {key: states[key].value for key in sorted(states)}


def states_from_dict(data: Mapping[str, str]) -> dict[str, DayState]:
    """Inverse of ``states_to_dict``; validates keys and values."""
    parsed: dict[str, DayState] = {}
    for key, value in data.items():
        date_key = to_date_key(parse_date_key(key))
        state = DayState.parse(value, date_key)
        if state is not DayState.WORKED:
            parsed[date_key] = state
    return parsed


@dataclass(frozen=True)
class DayStateSets:
    """
    Date sets derived from one child's state map.

    Contract:
        Frozen; each set holds ``datetime.date`` values and the four sets
        are pairwise disjoint because they come from a single mapping.
    """

    days_off: frozenset[date] = frozenset()
    sick_days: frozenset[date] = frozenset()
    paid_leave_days: frozenset[date] = frozenset()
    contract_off_days: frozenset[date] = frozenset()

    @classmethod
    def from_states(cls, states: DayStateMap) -> DayStateSets:
        buckets: dict[DayState, set[date]] = {
            DayState.OFF: set(),
            DayState.SICK: set(),
            DayState.PAID_LEAVE: set(),
            DayState.CONTRACT_OFF: set(),
        }
        for key, raw_state in states.items():
            state = DayState.parse(raw_state, key)
            if state is DayState.WORKED:
                continue
            buckets[state].add(parse_date_key(key))
        return cls(
            days_off=frozenset(buckets[DayState.OFF]),
            sick_days=frozenset(buckets[DayState.SICK]),
            paid_leave_days=frozenset(buckets[DayState.PAID_LEAVE]),
            contract_off_days=frozenset(buckets[DayState.CONTRACT_OFF]),
        )

    @property
    def all_days_off(self) -> frozenset[date]:
        """Off, paid leave and contract-off: everything that is not worked or sick."""
        return self.days_off | self.paid_leave_days | self.contract_off_days
