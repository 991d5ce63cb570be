"""
Module: pajemploi_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    payroll engines.  This is the canonical import surface for
    pajemploi_services.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import pajemploi_kernel, pajemploi_config.schema and sibling
    engine modules.  MUST NOT import pajemploi_services.

Invariants enforced:
    - Purity: engines never read the clock; months and "today" are passed in.
    - Decimal-only arithmetic for hours and money.
    - Determinism: identical inputs always produce identical outputs.

Failure modes:
    - Errors from the kernel boundary (malformed date keys or states)
      propagate unchanged.

Usage:
    from pajemploi_engines import compute_declaration, compute_paid_leave_counters
    from pajemploi_engines import BankHolidayCache, reconcile_day
"""

from pajemploi_kernel.logging_config import get_logger

logger = get_logger("engines")

from pajemploi_engines.calendar import (
    BankHolidayCache,
    CalendarDay,
    CalendarWeek,
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
from pajemploi_engines.declaration import (
    CongesPayes,
    DeclarationResult,
    compute_conges_payes,
    compute_declaration,
)
from pajemploi_engines.external_events import (
    CalendarEvent,
    dates_from_events,
    event_dates,
    merge_external_days_off,
)
from pajemploi_engines.majored_hours import (
    MajoredHours,
    compute_majored_hours,
    count_majored_weeks,
)
from pajemploi_engines.paid_leave import (
    PaidLeaveCounters,
    ReferencePeriod,
    compute_acquired_paid_leave,
    compute_paid_leave_counters,
    compute_paid_leave_saturday_days,
    compute_worked_weeks,
    count_paid_leave_taken_in_period,
    previous_reference_period,
    reference_period,
)
from pajemploi_engines.reconciliation import (
    Agreed,
    Mixed,
    broadcast_state,
    reconcile_day,
    reconcile_month,
    reconcile_states,
)
from pajemploi_engines.tracer import compute_input_fingerprint, traced_engine

__all__ = [
    "Agreed",
    "BankHolidayCache",
    "CalendarDay",
    "CalendarEvent",
    "CalendarWeek",
    "CongesPayes",
    "DeclarationResult",
    "MajoredHours",
    "Mixed",
    "PaidLeaveCounters",
    "ReferencePeriod",
    "bank_holiday_entries",
    "bank_holiday_names",
    "bank_holidays_for_year",
    "broadcast_state",
    "calendar_grid",
    "compute_acquired_paid_leave",
    "compute_conges_payes",
    "compute_declaration",
    "compute_input_fingerprint",
    "compute_majored_hours",
    "compute_paid_leave_counters",
    "compute_paid_leave_saturday_days",
    "compute_worked_weeks",
    "count_majored_weeks",
    "count_paid_leave_taken_in_period",
    "dates_from_events",
    "easter_date",
    "event_dates",
    "hours_for_day",
    "merge_external_days_off",
    "normal_hours_in_month",
    "previous_reference_period",
    "reconcile_day",
    "reconcile_month",
    "reconcile_states",
    "reference_period",
    "sick_leave_hours",
    "traced_engine",
    "week_key",
    "worked_days_count",
]
