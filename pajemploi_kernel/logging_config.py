"""
Structured JSON logging for the declaration engine.

Every record under the ``pajemploi`` logger namespace is written as one JSON
object per line.  The envelope is ``ts``/``level``/``logger``/``message``,
followed by the fields of the active ``LogContext`` (month, child, run
correlation id) and the record's ``extra`` dict.  Decimal amounts, dates and
date sets are serialized as strings so log lines stay exact.

Usage:
    from pajemploi_kernel.logging_config import LogContext, get_logger

    logger = get_logger("engines.declaration")
    with LogContext.bind(month="2026-02", child_name="Axelle"):
        logger.info("declaration_computed", extra={"total_salary": "671.00"})
"""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, date, datetime
from decimal import Decimal
from typing import Any, TextIO

__all__ = [
    "LogContext",
    "StructuredFormatter",
    "configure_logging",
    "get_logger",
    "reset_logging",
]

LOGGER_NAMESPACE = "pajemploi"


# ---------------------------------------------------------------------------
# Context propagation
# ---------------------------------------------------------------------------

_context: ContextVar[dict[str, str]] = ContextVar("pajemploi_log_context", default={})


class LogContext:
    """Fields attached to every record emitted inside a computation."""

    FIELDS = ("correlation_id", "month", "child_name")

    @classmethod
    def get_all(cls) -> dict[str, str]:
        return dict(_context.get())

    @classmethod
    def clear(cls) -> None:
        _context.set({})

    @classmethod
    @contextmanager
    def bind(cls, **fields: str | None) -> Iterator[None]:
        """Layer ``fields`` over the current context until the block exits."""
        unknown = sorted(set(fields) - set(cls.FIELDS))
        if unknown:
            raise ValueError(f"Unknown log context fields: {unknown}")
        merged = dict(_context.get())
        merged.update({k: v for k, v in fields.items() if v is not None})
        token = _context.set(merged)
        try:
            yield
        finally:
            _context.reset(token)


# ---------------------------------------------------------------------------
# Formatter
# ---------------------------------------------------------------------------

_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "taskName"}


def _to_json(value: Any) -> Any:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (set, frozenset)):
        return sorted(str(_to_json(v)) for v in value)
    return str(value)


def _exception_fields(exc: BaseException) -> dict[str, Any]:
    fields: dict[str, Any] = {
        "exc_type": type(exc).__name__,
        "exc_message": str(exc),
    }
    code = getattr(exc, "code", None)
    if code is not None:
        fields["exc_code"] = code
    # Structured attributes of PajemploiError subclasses (field, reason, ...)
    fields.update(
        {f"exc_{k}": v for k, v in vars(exc).items() if not k.startswith("_")}
    )
    return fields


class StructuredFormatter(logging.Formatter):

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **LogContext.get_all(),
        }
        for key, value in vars(record).items():
            if key not in _RECORD_ATTRS:
                payload.setdefault(key, value)

        if record.exc_info and record.exc_info[1] is not None:
            payload.update(_exception_fields(record.exc_info[1]))
            payload["traceback"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=_to_json)


# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")


def configure_logging(
    *,
    level: int = logging.INFO,
    stream: TextIO | None = None,
    handler: logging.Handler | None = None,
) -> None:
    """Attach one JSON handler to the ``pajemploi`` logger; later calls are no-ops."""
    root = logging.getLogger(LOGGER_NAMESPACE)
    if root.handlers:
        return
    handler = handler or logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(StructuredFormatter())
    root.addHandler(handler)
    root.setLevel(level)
    root.propagate = False


def reset_logging() -> None:
    """Drop the handlers installed by ``configure_logging`` (tests only)."""
    root = logging.getLogger(LOGGER_NAMESPACE)
    for handler in list(root.handlers):
        root.removeHandler(handler)
    root.setLevel(logging.WARNING)
    root.propagate = True
