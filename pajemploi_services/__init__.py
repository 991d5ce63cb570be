"""
pajemploi_services -- Package init and public API.

Responsibility:
    Orchestration over the pure engines: the monthly recompute pipeline
    for every child and the form-filler payload boundary.  This is the
    only layer that generates correlation ids.

Architecture position:
    Services -- orchestration over engines + kernel.
    pajemploi_kernel and pajemploi_engines must never import from this
    package.
"""

from pajemploi_kernel.logging_config import get_logger

logger = get_logger("services")

from pajemploi_services.declaration_service import (
    ChildDeclaration,
    DeclarationService,
    MonthlyDeclaration,
    find_contract,
)
from pajemploi_services.form_payload import (
    FormField,
    build_form_payload,
    form_fields,
    format_euro,
    format_for_input,
    validate_declaration_payload,
)

__all__ = [
    "ChildDeclaration",
    "DeclarationService",
    "FormField",
    "MonthlyDeclaration",
    "build_form_payload",
    "find_contract",
    "form_fields",
    "format_euro",
    "format_for_input",
    "validate_declaration_payload",
]
