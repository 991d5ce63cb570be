"""
Module: pajemploi_engines.reconciliation
Responsibility:
    Multi-child ("all children") view of the day states: decide what one
    calendar cell shows when several children share the calendar, and
    apply a state to every child at once.

Architecture position:
    Engines -- pure transform over immutable state maps, zero I/O.

Invariants enforced:
    - Strict intersection: a day is ``Agreed`` only when every child has the
      same state (absent keys count as worked); otherwise ``Mixed`` keeps
      each child's state.
    - Broadcasting never grants paid leave a child cannot take: when a
      child's balance (available + acquiring) is not positive, paid leave is
      downgraded to a plain day off for that child.
    - Inputs are never mutated; every child gets a fresh map.

Failure modes:
    - InvalidDateKeyError / UnknownDayStateError from the day-state layer
      for malformed keys or states.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date

from pajemploi_kernel.domain.dates import iter_month_days, parse_date_key, to_date_key
from pajemploi_kernel.domain.day_state import (
    DayState,
    DayStateMap,
    set_day_state,
    state_of,
)
from pajemploi_kernel.logging_config import get_logger

logger = get_logger("engines.reconciliation")


@dataclass(frozen=True)
class Agreed:
    """Every child has ``state`` on the day."""

    state: DayState

    @property
    def is_mixed(self) -> bool:
        return False


@dataclass(frozen=True)
class Mixed:
    """Children disagree; ``states`` holds ``(child_name, state)`` sorted by name."""

    states: tuple[tuple[str, DayState], ...]

    @property
    def is_mixed(self) -> bool:
        return True

    def state_for(self, child_name: str) -> DayState:
        for name, state in self.states:
            if name == child_name:
                return state
        raise KeyError(child_name)

    @property
    def distinct_states(self) -> frozenset[DayState]:
        return frozenset(state for _, state in self.states)


Reconciled = Agreed | Mixed


def reconcile_day(
    states_by_child: Mapping[str, DayStateMap],
    date_key: str | date,
) -> Reconciled:
    """What the shared calendar shows for one day."""
    key = to_date_key(parse_date_key(date_key))
    per_child = tuple(
        (name, state_of(states_by_child[name], key)) for name in sorted(states_by_child)
    )
    distinct = {state for _, state in per_child}
    if len(distinct) <= 1:
        return Agreed(distinct.pop() if distinct else DayState.WORKED)
    return Mixed(per_child)


def reconcile_states(
    states_by_child: Mapping[str, DayStateMap],
    days: Iterable[str | date],
) -> dict[str, Reconciled]:
    """``reconcile_day`` over ``days``, keyed by ISO date."""
    return {
        to_date_key(parse_date_key(day)): reconcile_day(states_by_child, day)
        for day in days
    }


def reconcile_month(
    states_by_child: Mapping[str, DayStateMap],
    month: date,
) -> dict[str, Reconciled]:
    return reconcile_states(states_by_child, iter_month_days(month))


def broadcast_state(
    states_by_child: Mapping[str, DayStateMap],
    date_key: str | date,
    state: DayState | str,
    balances: Mapping[str, int] | None = None,
) -> dict[str, dict[str, DayState]]:
    """
    Apply ``state`` on ``date_key`` to every child.

    ``balances`` maps a child to its paid-leave balance (available plus
    acquiring).  A child missing from ``balances`` is treated as having
    no balance.
    """
    key = to_date_key(parse_date_key(date_key))
    target = DayState.parse(state, key)
    balances = balances or {}

    updated: dict[str, dict[str, DayState]] = {}
    for name, states in states_by_child.items():
        child_state = target
        if target is DayState.PAID_LEAVE and balances.get(name, 0) <= 0:
            child_state = DayState.OFF
            logger.info(
                "paid_leave_downgraded",
                extra={
                    "child_name": name,
                    "date_key": key,
                    "balance": balances.get(name, 0),
                },
            )
        updated[name] = set_day_state(states, key, child_state)
    return updated
