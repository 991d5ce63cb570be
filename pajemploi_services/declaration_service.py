"""
pajemploi_services.declaration_service -- Monthly declarations for every child.

Responsibility:
    Explicit recompute pipeline behind the calendar screen: turn each
    child's day-state map (plus optional external days off) into paid-leave
    counters and the monthly declaration, and apply "all children" state
    changes with the paid-leave downgrade rule.

Architecture position:
    Services -- orchestration over engines + kernel.  Owns the bank-holiday
    cache for its lifetime and the log context of each computation.

    Dependency direction:
        pajemploi_services/ -> pajemploi_engines/  (allowed)
        pajemploi_services/ -> pajemploi_kernel/   (allowed)
        pajemploi_engines/  -> pajemploi_services/ (FORBIDDEN)

Invariants enforced:
    - Recompute from scratch: a ``MonthlyDeclaration`` depends only on the
      contracts, the state maps and the month passed in.
    - A child without a state map has worked every day.
    - Paid leave paid in the payout month is the previous reference
      period's acquired days.

Failure modes:
    - ChildNotFoundError: a state map or broadcast targets an unknown child.
    - InvalidDateKeyError / UnknownDayStateError: malformed state maps.

Usage:
    from datetime import date
    from pajemploi_services.declaration_service import DeclarationService

    service = DeclarationService()
    monthly = service.compute_month(contracts, states_by_child, date(2026, 2, 1))
    for child in monthly.children:
        print(child.result.total_salary, child.counters.available)
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from pajemploi_config.schema import PayrollRules
from pajemploi_engines.calendar import BankHolidayCache
from pajemploi_engines.declaration import DeclarationResult, compute_declaration
from pajemploi_engines.external_events import merge_external_days_off
from pajemploi_engines.paid_leave import PaidLeaveCounters, compute_paid_leave_counters
from pajemploi_engines.reconciliation import broadcast_state
from pajemploi_kernel.domain.contract import ChildContract
from pajemploi_kernel.domain.dates import month_label, month_start
from pajemploi_kernel.domain.day_state import DayState, DayStateMap, DayStateSets
from pajemploi_kernel.exceptions import ChildNotFoundError
from pajemploi_kernel.logging_config import LogContext, get_logger

logger = get_logger("services.declaration")


@dataclass(frozen=True)
class ChildDeclaration:
    """Declaration and paid-leave counters of one child for one month."""

    contract: ChildContract
    result: DeclarationResult
    counters: PaidLeaveCounters

    @property
    def child_name(self) -> str:
        return self.contract.name


@dataclass(frozen=True)
class MonthlyDeclaration:
    """All children's declarations for one month, in contract order."""

    month: date
    children: tuple[ChildDeclaration, ...]

    def for_child(self, name: str) -> ChildDeclaration:
        for child in self.children:
            if child.child_name == name:
                return child
        raise ChildNotFoundError(name)

    @property
    def results(self) -> tuple[DeclarationResult, ...]:
        return tuple(child.result for child in self.children)

    @property
    def total_salary(self) -> Decimal:
        return sum((child.result.total_salary for child in self.children), Decimal("0"))


def find_contract(contracts: Sequence[ChildContract], name: str) -> ChildContract:
    for contract in contracts:
        if contract.name == name:
            return contract
    raise ChildNotFoundError(name)


class DeclarationService:
    """
    Computes monthly declarations for a set of childcare contracts.

    Contract:
        Given contracts and their day-state maps, produce one
        ``ChildDeclaration`` per contract for the requested month.

    Guarantees:
        - Inputs are never mutated; broadcasting returns new maps.
        - Every child is computed under a log context carrying the month,
          the child name and a correlation id shared by the whole run.

    Non-goals:
        - Does NOT persist state maps or fetch external calendars; callers
          hand over plain data.
    """

    def __init__(
        self,
        rules: PayrollRules | None = None,
        holidays: BankHolidayCache | None = None,
    ):
        self._rules = rules if rules is not None else PayrollRules.with_defaults()
        self._holidays = holidays if holidays is not None else BankHolidayCache()

    @property
    def rules(self) -> PayrollRules:
        return self._rules

    def paid_leave_counters(
        self,
        contract: ChildContract,
        states: DayStateMap,
        month: date,
    ) -> PaidLeaveCounters:
        sets = DayStateSets.from_states(states)
        return compute_paid_leave_counters(
            month=month_start(month),
            days_off=sets.days_off,
            sick_days=sets.sick_days,
            paid_leave_days=sets.paid_leave_days,
            contract_off_days=sets.contract_off_days,
            contract_start=contract.contract_start_date,
            rules=self._rules,
            holidays=self._holidays,
        )

    def compute_child(
        self,
        contract: ChildContract,
        states: DayStateMap,
        month: date,
    ) -> ChildDeclaration:
        month = month_start(month)
        sets = DayStateSets.from_states(states)
        counters = self.paid_leave_counters(contract, states, month)
        result = compute_declaration(
            contract=contract,
            month=month,
            days_off=sets.days_off,
            sick_leave_days=sets.sick_days,
            paid_leave_days=sets.paid_leave_days,
            contract_off_days=sets.contract_off_days,
            acquired_paid_leave_days=counters.acquired_previous,
            rules=self._rules,
            holidays=self._holidays,
        )
        return ChildDeclaration(contract=contract, result=result, counters=counters)

    def compute_month(
        self,
        contracts: Sequence[ChildContract],
        states_by_child: Mapping[str, DayStateMap],
        month: date,
        external_days_off: Iterable[str | date] = (),
    ) -> MonthlyDeclaration:
        """Declarations of every contract for the month containing ``month``."""
        month = month_start(month)
        known = {contract.name for contract in contracts}
        for name in states_by_child:
            if name not in known:
                raise ChildNotFoundError(name)

        external = tuple(external_days_off)
        label = month_label(month)
        children: list[ChildDeclaration] = []
        with LogContext.bind(correlation_id=str(uuid.uuid4()), month=label):
            logger.info(
                "monthly_declaration_started",
                extra={"children": len(contracts), "external_days_off": len(external)},
            )
            for contract in contracts:
                states: DayStateMap = states_by_child.get(contract.name, {})
                if external:
                    states = merge_external_days_off(states, external)
                with LogContext.bind(child_name=contract.name):
                    children.append(self.compute_child(contract, states, month))

            monthly = MonthlyDeclaration(month=month, children=tuple(children))
            logger.info(
                "monthly_declaration_completed",
                extra={"total_salary": str(monthly.total_salary)},
            )
        return monthly

    def broadcast(
        self,
        states_by_child: Mapping[str, DayStateMap],
        contracts: Sequence[ChildContract],
        month: date,
        date_key: str | date,
        state: DayState | str,
    ) -> dict[str, dict[str, DayState]]:
        """Set ``state`` on ``date_key`` for every child (paid leave only where a balance remains)."""
        for name in states_by_child:
            find_contract(contracts, name)

        full: dict[str, DayStateMap] = {
            contract.name: states_by_child.get(contract.name, {}) for contract in contracts
        }
        balances = {
            contract.name: self.paid_leave_counters(
                contract, full[contract.name], month
            ).balance
            for contract in contracts
        }
        return broadcast_state(full, date_key, state, balances)
