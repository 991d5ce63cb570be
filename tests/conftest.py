"""
Pytest fixtures for the Pajemploi declaration test suite.

Provides:
- Structured logging configured once per session, context cleared per test
- ``captured_logs`` to assert on emitted JSON log records
- Standard payroll rules, a bank-holiday cache and the reference contracts
"""

import json
import logging
from datetime import date
from decimal import Decimal
from io import StringIO

import pytest

from pajemploi_config.schema import PayrollRules
from pajemploi_engines.calendar import BankHolidayCache
from pajemploi_kernel.domain.contract import ChildContract
from pajemploi_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture pajemploi logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            compute_declaration(...)
            logs = captured_logs()
            assert any(r["message"] == "declaration_computed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("pajemploi")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Domain fixtures
# =============================================================================


@pytest.fixture
def rules() -> PayrollRules:
    return PayrollRules.with_defaults()


@pytest.fixture
def holidays() -> BankHolidayCache:
    return BankHolidayCache()


@pytest.fixture
def axelle() -> ChildContract:
    """Net 3.90 EUR/h: monthly salary 658.13, majored hours at 4.29."""
    return ChildContract(
        name="Axelle",
        net_hourly_rate=Decimal("3.90"),
        majored_hour_rate=Decimal("4.29"),
        contract_start_date=date(2025, 6, 1),
    )


@pytest.fixture
def brune() -> ChildContract:
    return ChildContract(
        name="Brune",
        net_hourly_rate=Decimal("4.20"),
        majored_hour_rate=Decimal("4.62"),
        contract_start_date=date(2025, 6, 1),
    )


@pytest.fixture
def contracts(axelle, brune) -> tuple[ChildContract, ...]:
    return (axelle, brune)
