"""
pajemploi_services.form_payload -- Declarations as handed to the Pajemploi form filler.

Responsibility:
    Serialize declaration results into the plain-number payload accepted by
    the form-filling agent, validate incoming payloads the same way the
    agent does, and format amounts the way the French form expects them
    ("12,87").

Architecture position:
    Services -- outer boundary; depends on engines for ``DeclarationResult``.

Invariants enforced:
    - A payload is a non-empty list; every entry carries a string
      ``childName`` and numeric values for the fields the form fills.
    - Booleans are not numbers here even though Python treats them as ints.
    - Amounts are rounded half-up to the cent before formatting.

Failure modes:
    - InvalidDeclarationPayloadError: wrong container, empty list, missing
      or mistyped field.  ``index`` and ``field`` locate the offending entry.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from pajemploi_engines.declaration import DeclarationResult
from pajemploi_kernel.exceptions import InvalidDeclarationPayloadError
from pajemploi_kernel.logging_config import get_logger

logger = get_logger("services.form_payload")

CENT = Decimal("0.01")

NUMERIC_FIELDS: tuple[str, ...] = (
    "monthlySalary",
    "majoredHoursCount",
    "majoredHoursAmount",
    "totalSalary",
    "workedDays",
    "maintenanceAllowance",
    "mealAllowance",
)


@dataclass(frozen=True)
class FormField:
    """One input of the declaration form, ready to be typed in."""

    key: str
    label: str
    value: str


# (payload key, form label); workedDays is typed as a plain integer.
FORM_FIELDS: tuple[tuple[str, str], ...] = (
    ("monthlySalary", "Salaire mensuel"),
    ("majoredHoursCount", "Heures majorées (nombre)"),
    ("majoredHoursAmount", "Heures majorées (montant)"),
    ("workedDays", "Jours travaillés"),
    ("maintenanceAllowance", "Indemnité d'entretien"),
    ("mealAllowance", "Indemnité de repas"),
    ("totalSalary", "Salaire total"),
)


def _to_cents(value: Decimal | int | float) -> Decimal:
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def format_for_input(value: Decimal | int | float) -> str:
    """Two decimals with a comma separator: ``12.8675 -> "12,87"``."""
    return f"{_to_cents(value):.2f}".replace(".", ",")


def format_euro(value: Decimal | int | float) -> str:
    """French display form: ``1234.5 -> "1 234,50 €"`` (narrow no-break spaces)."""
    grouped = f"{_to_cents(value):,.2f}"
    french = grouped.replace(",", "\u202f").replace(".", ",")
    return f"{french}\u00a0€"


def build_form_payload(results: Iterable[DeclarationResult]) -> list[dict[str, Any]]:
    """One plain-number dict per declaration, in input order."""
    payload = [result.to_dict() for result in results]
    logger.debug("form_payload_built", extra={"declarations": len(payload)})
    return payload


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def validate_declaration_payload(payload: Any) -> list[dict[str, Any]]:
    """Return ``payload`` unchanged if the form filler would accept it."""
    if not isinstance(payload, list) or not payload:
        raise InvalidDeclarationPayloadError("Missing or empty declarations array")

    for index, entry in enumerate(payload):
        if not isinstance(entry, dict):
            raise InvalidDeclarationPayloadError("Declaration must be an object", index)
        if not isinstance(entry.get("childName"), str):
            raise InvalidDeclarationPayloadError(
                "childName must be a string", index, "childName"
            )
        for field in NUMERIC_FIELDS:
            if field not in entry:
                raise InvalidDeclarationPayloadError("Missing field", index, field)
            if not _is_number(entry[field]):
                raise InvalidDeclarationPayloadError(
                    f"Expected a number, got {type(entry[field]).__name__}", index, field
                )
    return payload


def form_fields(entry: dict[str, Any]) -> tuple[FormField, ...]:
    """Formatted form inputs of one validated payload entry."""
    fields = []
    for key, label in FORM_FIELDS:
        raw = entry[key]
        value = str(int(raw)) if key == "workedDays" else format_for_input(raw)
        fields.append(FormField(key=key, label=label, value=value))
    return tuple(fields)
