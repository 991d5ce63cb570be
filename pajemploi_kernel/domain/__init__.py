"""Domain values shared by the engines and services."""

from pajemploi_kernel.domain.contract import ChildContract
from pajemploi_kernel.domain.day_state import (
    DayState,
    DayStateMap,
    DayStateSets,
    set_day_state,
    set_days_state,
    state_of,
    states_from_dict,
    states_to_dict,
    toggle_week_contract_off,
)

__all__ = [
    "ChildContract",
    "DayState",
    "DayStateMap",
    "DayStateSets",
    "set_day_state",
    "set_days_state",
    "state_of",
    "states_from_dict",
    "states_to_dict",
    "toggle_week_contract_off",
]
