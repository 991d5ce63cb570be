"""
Module: pajemploi_engines.declaration
Responsibility:
    Produce the monthly Pajemploi declaration of one child: salary after
    sick-leave deduction, majored hours, maintenance and meal allowances,
    and -- in the payout month -- the paid-leave indemnity computed by the
    more favourable of the two legal methods.

Architecture position:
    Engines -- pure calculation layer, zero I/O.  Composes
    ``calendar``, ``majored_hours`` and the acquired-days figure produced by
    ``paid_leave``.

Invariants enforced:
    - Purity: same inputs, same ``DeclarationResult``; inputs never mutated.
    - Decimal-only arithmetic; monetary outputs are quantized half-up to
      the cent, and ``total_salary`` is the exact sum of its rounded parts.
    - ``hourly_rate`` is 0 when the month has no normal hours.
    - Paid leave is paid only in ``rules.payout_month`` (August) and only
      when acquired days are positive.

Failure modes:
    - None for validated contracts; ``ChildContract`` rejects bad rates at
      construction.

Usage:
    from datetime import date
    from pajemploi_engines.declaration import compute_declaration

    result = compute_declaration(
        contract=contract,
        month=date(2026, 2, 1),
        sick_leave_days=frozenset({date(2026, 2, 2)}),
    )
    result.total_salary
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from pajemploi_config.schema import PayrollRules
from pajemploi_engines.calendar import (
    DEFAULT_RULES,
    BankHolidayCache,
    is_business_day,
    normal_hours_in_month,
    sick_leave_hours,
    worked_days_count,
)
from pajemploi_engines.majored_hours import compute_majored_hours
from pajemploi_engines.tracer import traced_engine
from pajemploi_kernel.domain.contract import ChildContract
from pajemploi_kernel.domain.dates import month_end, month_label, month_start
from pajemploi_kernel.logging_config import get_logger

logger = get_logger("engines.declaration")

ZERO = Decimal("0")
CENT = Decimal("0.01")


def _money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class CongesPayes:
    """Both paid-leave indemnity methods and the one retained."""

    acquired_days: int
    ten_percent: Decimal
    salary_maintenance: Decimal
    amount: Decimal

    @property
    def method(self) -> str:
        """``"salary_maintenance"`` when it wins, otherwise ``"ten_percent"``."""
        if self.salary_maintenance > self.ten_percent:
            return "salary_maintenance"
        return "ten_percent"


NO_CONGES_PAYES = CongesPayes(
    acquired_days=0, ten_percent=ZERO, salary_maintenance=ZERO, amount=ZERO
)


def compute_conges_payes(
    contract: ChildContract,
    monthly_salary: Decimal,
    acquired_days: int,
    rules: PayrollRules = DEFAULT_RULES,
) -> CongesPayes:
    """
    Paid-leave indemnity for ``acquired_days``, whichever method pays more.

    * Ten-percent rule: 10 % of twelve monthly salaries.
    * Salary maintenance: the acquired days converted to weeks of six
      jours ouvrables, paid at the normal and majored weekly hours.
    """
    if acquired_days <= 0:
        return NO_CONGES_PAYES

    ten_percent = monthly_salary * 12 * rules.ten_percent_rate
    equivalent_weeks = Decimal(acquired_days) / rules.leave_days_per_week
    salary_maintenance = (
        equivalent_weeks * rules.normal_hours_per_week * contract.net_hourly_rate
        + equivalent_weeks * rules.majored_hours_per_week * contract.majored_hour_rate
    )
    return CongesPayes(
        acquired_days=acquired_days,
        ten_percent=_money(ten_percent),
        salary_maintenance=_money(salary_maintenance),
        amount=_money(max(ten_percent, salary_maintenance)),
    )


@dataclass(frozen=True)
class DeclarationResult:
    """
    Monthly declaration of one child.

    Contract:
        Frozen; recomputed from scratch whenever day states, the contract or
        the displayed month change.  ``to_dict`` exposes the field set the
        form filler consumes, as plain numbers.
    """

    child_name: str
    month: date
    monthly_salary: Decimal
    majored_hours_count: Decimal
    majored_hours_amount: Decimal
    sick_leave_days: int
    sick_leave_hours: Decimal
    sick_leave_deduction: Decimal
    normal_hours_in_month: Decimal
    hourly_rate: Decimal
    adjusted_salary: Decimal
    paid_leave_days: int
    conges_payes: Decimal
    conges_payes_days_acquired: int
    total_salary: Decimal
    worked_days: int
    maintenance_allowance: Decimal
    meal_allowance: Decimal

    def to_dict(self) -> dict[str, Any]:
        return {
            "childName": self.child_name,
            "monthlySalary": float(self.monthly_salary),
            "majoredHoursCount": float(self.majored_hours_count),
            "majoredHoursAmount": float(self.majored_hours_amount),
            "sickLeaveDays": self.sick_leave_days,
            "sickLeaveHours": float(self.sick_leave_hours),
            "sickLeaveDeduction": float(self.sick_leave_deduction),
            "adjustedSalary": float(self.adjusted_salary),
            "congesPayes": float(self.conges_payes),
            "congesPayesDaysAcquired": self.conges_payes_days_acquired,
            "totalSalary": float(self.total_salary),
            "workedDays": self.worked_days,
            "maintenanceAllowance": float(self.maintenance_allowance),
            "mealAllowance": float(self.meal_allowance),
        }


def _in_month(days: frozenset[date], month: date) -> list[date]:
    start, end = month_start(month), month_end(month)
    return [d for d in days if start <= d <= end]


@traced_engine(
    "declaration",
    "1.0",
    fingerprint_fields=(
        "contract",
        "month",
        "days_off",
        "sick_leave_days",
        "paid_leave_days",
        "contract_off_days",
        "acquired_paid_leave_days",
        "rules",
    ),
)
def compute_declaration(
    *,
    contract: ChildContract,
    month: date,
    days_off: frozenset[date] = frozenset(),
    sick_leave_days: frozenset[date] = frozenset(),
    paid_leave_days: frozenset[date] = frozenset(),
    contract_off_days: frozenset[date] = frozenset(),
    acquired_paid_leave_days: int = 0,
    rules: PayrollRules = DEFAULT_RULES,
    holidays: BankHolidayCache | None = None,
) -> DeclarationResult:
    """Compute the declaration of ``contract`` for the month containing ``month``."""
    month = month_start(month)
    monthly_salary = contract.monthly_salary(rules)

    # Paid leave and contract-off weigh like a plain day off on worked days
    # and majored weeks; only sickness is deducted from the salary.
    all_days_off = frozenset(days_off) | frozenset(paid_leave_days) | frozenset(contract_off_days)

    majored = compute_majored_hours(
        month, contract.majored_hour_rate, all_days_off, sick_leave_days, rules
    )

    normal_hours = normal_hours_in_month(month, rules, holidays)
    hourly_rate = monthly_salary / normal_hours if normal_hours > 0 else ZERO
    sick_hours = sick_leave_hours(month, sick_leave_days, rules)
    sick_deduction = _money(hourly_rate * sick_hours)
    adjusted_salary = monthly_salary - sick_deduction

    worked_days = worked_days_count(month, all_days_off, sick_leave_days)
    maintenance_allowance = _money(worked_days * rules.maintenance_rate)
    meal_allowance = _money(worked_days * rules.meal_rate)

    conges = NO_CONGES_PAYES
    if month.month == rules.payout_month:
        conges = compute_conges_payes(
            contract, monthly_salary, acquired_paid_leave_days, rules
        )

    majored_amount = _money(majored.amount)
    total_salary = adjusted_salary + majored_amount + conges.amount

    result = DeclarationResult(
        child_name=contract.name,
        month=month,
        monthly_salary=monthly_salary,
        majored_hours_count=majored.hours,
        majored_hours_amount=majored_amount,
        sick_leave_days=sum(
            1 for d in _in_month(frozenset(sick_leave_days), month) if is_business_day(d)
        ),
        sick_leave_hours=sick_hours,
        sick_leave_deduction=sick_deduction,
        normal_hours_in_month=normal_hours,
        hourly_rate=hourly_rate,
        adjusted_salary=adjusted_salary,
        paid_leave_days=len(_in_month(frozenset(paid_leave_days), month)),
        conges_payes=conges.amount,
        conges_payes_days_acquired=conges.acquired_days,
        total_salary=total_salary,
        worked_days=worked_days,
        maintenance_allowance=maintenance_allowance,
        meal_allowance=meal_allowance,
    )

    logger.info(
        "declaration_computed",
        extra={
            "child_name": contract.name,
            "month": month_label(month),
            "worked_days": worked_days,
            "majored_hours": str(majored.hours),
            "sick_leave_hours": str(sick_hours),
            "conges_payes": str(conges.amount),
            "conges_payes_method": conges.method if conges.acquired_days else None,
            "total_salary": str(total_salary),
        },
    )
    return result
