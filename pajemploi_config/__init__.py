"""
pajemploi_config -- payroll rules and contract files.

Responsibility:
    Provides the rule set every engine reads (``get_active_rules``) and the
    YAML tooling used to load rule overrides and childcare contracts.

Architecture position:
    Configuration -- sits above ``pajemploi_kernel`` and below
    ``pajemploi_services``.  The kernel MUST NEVER import from
    ``pajemploi_config`` at runtime.
"""

from __future__ import annotations

from pathlib import Path

from pajemploi_config.schema import PayrollRules
from pajemploi_kernel.logging_config import get_logger

logger = get_logger("config")


def get_active_rules(rules_path: Path | None = None) -> PayrollRules:
    """Return the default rules, or the rules of a YAML fragment when given."""
    if rules_path is None:
        return PayrollRules.with_defaults()

    from pajemploi_config.loader import load_rules

    rules = load_rules(rules_path)
    logger.info(
        "PAJEMPLOI_CONFIG_TRACE",
        extra={"rules_path": str(rules_path), "rules": rules.to_dict()},
    )
    return rules


__all__ = ["PayrollRules", "get_active_rules"]
