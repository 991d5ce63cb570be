"""
Payroll Rules Schema.

Defines the structure and defaults of the rule set used by every engine:
the weekly schedule, the majored-hours threshold, allowance rates and the
paid-leave accrual constants.  Defaults reproduce the contracts the engine
was built for (Mon-Thu 9.25 h, Fri 8.75 h, 45 paid weeks a year, EUR 4 per
worked day for each allowance).

Override at instantiation or from a YAML fragment:

    rules = PayrollRules.from_dict({"maintenance_rate": "4.50"})
"""

from dataclasses import dataclass, fields
from decimal import Decimal, InvalidOperation
from typing import Any, Self

from pajemploi_kernel.logging_config import get_logger

logger = get_logger("config.schema")

_DECIMAL_FIELDS = {
    "hours_mon_thu",
    "hours_fri",
    "majored_threshold",
    "weeks_per_year",
    "maintenance_rate",
    "meal_rate",
    "leave_days_per_four_weeks",
    "ten_percent_rate",
    "leave_days_per_week",
}
_INT_FIELDS = {"annual_leave_cap", "payout_month", "reference_period_start_month"}


@dataclass(frozen=True)
class PayrollRules:
    """
    Rule set for the Pajemploi declaration engine.

    Hours and rates are ``Decimal``; month numbers and the leave cap are
    plain integers.
    """

    # Weekly schedule
    hours_mon_thu: Decimal = Decimal("9.25")
    hours_fri: Decimal = Decimal("8.75")
    majored_threshold: Decimal = Decimal("45")  # weekly hours above this are majored

    # Salary smoothing ("mensualisation")
    weeks_per_year: Decimal = Decimal("45")

    # Allowances, EUR per worked day
    maintenance_rate: Decimal = Decimal("4")
    meal_rate: Decimal = Decimal("4")

    # Paid leave (conges payes)
    leave_days_per_four_weeks: Decimal = Decimal("2.5")
    annual_leave_cap: int = 30
    payout_month: int = 8
    ten_percent_rate: Decimal = Decimal("0.10")
    leave_days_per_week: Decimal = Decimal("6")  # jours ouvrables, Mon-Sat
    reference_period_start_month: int = 6

    def __post_init__(self):
        for name in _DECIMAL_FIELDS:
            value = getattr(self, name)
            if not isinstance(value, Decimal) or not value.is_finite():
                raise ValueError(f"{name} must be a finite Decimal, got {value!r}")

        if self.hours_mon_thu < 0 or self.hours_fri < 0:
            raise ValueError("daily hours cannot be negative")
        if self.majored_threshold <= 0:
            raise ValueError("majored_threshold must be positive")
        if self.weeks_per_year <= 0 or self.weeks_per_year > 52:
            raise ValueError("weeks_per_year must be in (0, 52]")
        if self.maintenance_rate < 0 or self.meal_rate < 0:
            raise ValueError("allowance rates cannot be negative")
        if self.leave_days_per_four_weeks <= 0:
            raise ValueError("leave_days_per_four_weeks must be positive")
        if self.annual_leave_cap <= 0:
            raise ValueError("annual_leave_cap must be positive")
        if not 1 <= self.payout_month <= 12:
            raise ValueError(f"payout_month must be 1-12, got {self.payout_month}")
        if not 1 <= self.reference_period_start_month <= 12:
            raise ValueError(
                "reference_period_start_month must be 1-12, "
                f"got {self.reference_period_start_month}"
            )
        if not Decimal("0") < self.ten_percent_rate <= Decimal("1"):
            raise ValueError("ten_percent_rate must be in (0, 1]")
        if self.leave_days_per_week <= 0:
            raise ValueError("leave_days_per_week must be positive")

        logger.debug(
            "payroll_rules_initialized",
            extra={
                "hours_per_week": str(self.hours_per_week),
                "majored_threshold": str(self.majored_threshold),
                "weeks_per_year": str(self.weeks_per_year),
                "payout_month": self.payout_month,
            },
        )

    @property
    def hours_per_week(self) -> Decimal:
        return 4 * self.hours_mon_thu + self.hours_fri

    @property
    def normal_hours_per_week(self) -> Decimal:
        return min(self.hours_per_week, self.majored_threshold)

    @property
    def majored_hours_per_week(self) -> Decimal:
        return max(Decimal("0"), self.hours_per_week - self.majored_threshold)

    @classmethod
    def with_defaults(cls) -> Self:
        """Create rules with the standard schedule."""
        return cls()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create rules from a dictionary (e.g., loaded from YAML).

        Numbers are coerced through ``str`` so YAML floats keep their
        written precision.  Unknown keys are rejected.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown payroll rule keys: {unknown}")

        logger.info(
            "payroll_rules_loading_from_dict",
            extra={"keys": sorted(data.keys())},
        )
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            if key in _DECIMAL_FIELDS:
                if isinstance(value, Decimal):
                    kwargs[key] = value
                    continue
                try:
                    kwargs[key] = Decimal(str(value))
                except InvalidOperation:
                    raise ValueError(f"{key} must be a number, got {value!r}") from None
            elif key in _INT_FIELDS:
                try:
                    integral = not isinstance(value, bool) and int(value) == value
                except (TypeError, ValueError):
                    integral = False
                if not integral:
                    raise ValueError(f"{key} must be an integer, got {value!r}")
                kwargs[key] = int(value)
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        return {
            f.name: (
                str(getattr(self, f.name))
                if f.name in _DECIMAL_FIELDS
                else getattr(self, f.name)
            )
            for f in fields(self)
        }
