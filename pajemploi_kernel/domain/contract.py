"""
Childcare contract value object.

Responsibility:
    Identity and pay rates of one employment contract (one child).  The
    monthly salary is not stored: it is derived from the net hourly rate
    and the payroll rules so that editing the rate never leaves a stale
    salary behind.

Architecture position:
    Kernel > Domain -- pure data, validated at construction.

Invariants enforced:
    - ``name`` is non-blank.
    - ``net_hourly_rate`` and ``majored_hour_rate`` are finite, positive
      ``Decimal`` values.
    - ``to_dict`` / ``from_dict`` round-trip losslessly using the camelCase
      keys stored by the settings screen.

Failure modes:
    - InvalidContractError on any violated invariant.  A malformed contract
      never reaches the calculation pipeline.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import TYPE_CHECKING, Any, Self

from pajemploi_kernel.domain.dates import parse_date_key, to_date_key
from pajemploi_kernel.exceptions import InvalidContractError, PajemploiError
from pajemploi_kernel.logging_config import get_logger

if TYPE_CHECKING:
    from pajemploi_config.schema import PayrollRules

logger = get_logger("domain.contract")

CENT = Decimal("0.01")


def _to_decimal(field: str, value: Any) -> Decimal:
    if isinstance(value, bool):
        raise InvalidContractError(field, value, "must be a number")
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value).replace(",", ".").strip())
    except (InvalidOperation, ValueError):
        raise InvalidContractError(field, value, "must be a number") from None


@dataclass(frozen=True)
class ChildContract:
    """A Pajemploi employment contract for one child."""

    name: str
    net_hourly_rate: Decimal
    majored_hour_rate: Decimal
    contract_start_date: date | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise InvalidContractError("name", self.name, "must be a non-empty string")
        for field in ("net_hourly_rate", "majored_hour_rate"):
            value = getattr(self, field)
            if not isinstance(value, Decimal) or not value.is_finite():
                raise InvalidContractError(field, value, "must be a finite Decimal")
            if value <= 0:
                logger.warning(
                    "contract_non_positive_rate",
                    extra={"child_name": self.name, "field": field, "value": str(value)},
                )
                raise InvalidContractError(field, value, "must be positive")
        if self.contract_start_date is not None and not isinstance(
            self.contract_start_date, date
        ):
            raise InvalidContractError(
                "contract_start_date", self.contract_start_date, "must be a date"
            )

    def monthly_salary(self, rules: PayrollRules) -> Decimal:
        """Net monthly salary, smoothed over the year ("mensualisation").

        ``net_hourly_rate x normal_hours_per_week x weeks_per_year / 12``,
        rounded half-up to the cent.
        """
        raw = (
            self.net_hourly_rate
            * rules.normal_hours_per_week
            * rules.weeks_per_year
            / Decimal("12")
        )
        return raw.quantize(CENT, rounding=ROUND_HALF_UP)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "netHourlyRate": str(self.net_hourly_rate),
            "majoredHourRate": str(self.majored_hour_rate),
            "contractStartDate": (
                to_date_key(self.contract_start_date)
                if self.contract_start_date
                else None
            ),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Self:
        """Build a contract from its stored form (camelCase or snake_case keys)."""
        def pick(camel: str, snake: str) -> Any:
            if camel in data:
                return data[camel]
            if snake in data:
                return data[snake]
            raise InvalidContractError(camel, None, "is required")

        start_raw = data.get("contractStartDate", data.get("contract_start_date"))
        start: date | None = None
        if start_raw not in (None, ""):
            try:
                start = parse_date_key(start_raw)
            except PajemploiError:
                raise InvalidContractError(
                    "contractStartDate", start_raw, "must be a YYYY-MM-DD date"
                ) from None

        return cls(
            name=data.get("name"),
            net_hourly_rate=_to_decimal("netHourlyRate", pick("netHourlyRate", "net_hourly_rate")),
            majored_hour_rate=_to_decimal(
                "majoredHourRate", pick("majoredHourRate", "majored_hour_rate")
            ),
            contract_start_date=start,
        )
