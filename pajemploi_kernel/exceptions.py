"""
Typed Exception Hierarchy for the Pajemploi declaration engine.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

The calculation core is made of total functions: a degenerate month returns
an hourly rate of zero, a negative worked-week count accrues nothing, a
Saturday that cannot be paid from the balance is skipped.  None of those are
errors.  What remains are contract violations by callers (a malformed ISO
date key, an unknown day state, a contract with a non-positive rate) and
those must be caught by type, never by parsing a message.

Every exception has a CODE class attribute (machine-readable, API-safe) and
carries its context as attributes.

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    PajemploiError (base)
    |
    +-- ContractError
    |   +-- InvalidContractError
    |   +-- ChildNotFoundError
    |
    +-- DayStateError
    |   +-- InvalidDateKeyError
    |   +-- UnknownDayStateError
    |
    +-- DeclarationError
        +-- InvalidDeclarationPayloadError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                          | When Raised
----------------|-------------------------------|--------------------------------------
Contract        | INVALID_CONTRACT              | Non-positive rate, blank name, bad start date
                | CHILD_NOT_FOUND               | State map or broadcast names an unknown child
----------------|-------------------------------|--------------------------------------
Day state       | INVALID_DATE_KEY              | Key is not a valid "YYYY-MM-DD" date
                | UNKNOWN_DAY_STATE             | State value outside the DayState enum
----------------|-------------------------------|--------------------------------------
Declaration     | INVALID_DECLARATION_PAYLOAD   | Form-filler payload is empty or malformed

===============================================================================
HANDLING PATTERNS
===============================================================================

    try:
        contract = ChildContract.from_dict(raw)
    except InvalidContractError as e:
        return {"error": e.code, "field": e.field, "reason": e.reason}

===============================================================================
"""

from typing import Any


class PajemploiError(Exception):
    """
    Base exception for all declaration engine errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "PAJEMPLOI_ERROR"


# Contract-related exceptions


class ContractError(PajemploiError):
    """Base exception for childcare contract errors."""

    code: str = "CONTRACT_ERROR"


class InvalidContractError(ContractError):
    """A contract field is missing or out of range."""

    code: str = "INVALID_CONTRACT"

    def __init__(self, field: str, value: Any, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid contract field '{field}' ({value!r}): {reason}")


class ChildNotFoundError(ContractError):
    """No contract exists for the given child."""

    code: str = "CHILD_NOT_FOUND"

    def __init__(self, child_name: str):
        self.child_name = child_name
        super().__init__(f"No contract for child: {child_name}")


# Day-state exceptions


class DayStateError(PajemploiError):
    """Base exception for day-state map errors."""

    code: str = "DAY_STATE_ERROR"


class InvalidDateKeyError(DayStateError):
    """Date key is not a well-formed ISO calendar date."""

    code: str = "INVALID_DATE_KEY"

    def __init__(self, date_key: Any):
        self.date_key = date_key
        super().__init__(f"Invalid date key (expected YYYY-MM-DD): {date_key!r}")


class UnknownDayStateError(DayStateError):
    """State value is not one of the known day states."""

    code: str = "UNKNOWN_DAY_STATE"

    def __init__(self, value: Any, date_key: str | None = None):
        self.value = value
        self.date_key = date_key
        where = f" for {date_key}" if date_key else ""
        super().__init__(f"Unknown day state{where}: {value!r}")


# Declaration exceptions


class DeclarationError(PajemploiError):
    """Base exception for declaration output errors."""

    code: str = "DECLARATION_ERROR"


class InvalidDeclarationPayloadError(DeclarationError):
    """Payload handed to the form filler does not match the declaration contract."""

    code: str = "INVALID_DECLARATION_PAYLOAD"

    def __init__(self, reason: str, index: int | None = None, field: str | None = None):
        self.reason = reason
        self.index = index
        self.field = field
        location = ""
        if index is not None:
            location = f" (declaration #{index}"
            location += f", field '{field}')" if field else ")"
        super().__init__(f"Invalid declaration payload{location}: {reason}")
