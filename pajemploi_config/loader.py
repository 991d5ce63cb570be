"""
Configuration Loader (``pajemploi_config.loader``).

Responsibility
--------------
Loads YAML files into typed objects: a ``PayrollRules`` fragment and the
list of childcare contracts edited on the settings screen.  Contracts can be
written back with ``dump_contracts`` and reloaded without loss.

Architecture position
---------------------
**Config layer** -- infrastructure tooling.  Engines never call this; the
host application (or a test) loads rules and contracts and hands them to
``DeclarationService``.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Unknown or invalid rule keys  -> ``ValueError`` from ``PayrollRules``.
* Invalid contract entry  -> ``InvalidContractError``.

Expected file shapes::

    # rules.yaml
    payroll_rules:
      maintenance_rate: 4.5
      meal_rate: 4

    # contracts.yaml
    contracts:
      - name: Axelle
        netHourlyRate: "3.90"
        majoredHourRate: "4.29"
        contractStartDate: "2024-09-02"
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any

import yaml

from pajemploi_config.schema import PayrollRules
from pajemploi_kernel.domain.contract import ChildContract
from pajemploi_kernel.logging_config import get_logger

logger = get_logger("config.loader")


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def parse_rules(data: dict[str, Any]) -> PayrollRules:
    """Parse a ``PayrollRules`` from a dict, with or without the top-level key."""
    section = data.get("payroll_rules", data)
    if section is None:
        return PayrollRules.with_defaults()
    if not isinstance(section, dict):
        raise ValueError(f"payroll_rules must be a mapping, got {type(section).__name__}")
    return PayrollRules.from_dict(section)


def load_rules(path: Path) -> PayrollRules:
    rules = parse_rules(load_yaml_file(path))
    logger.info("payroll_rules_loaded", extra={"path": str(path)})
    return rules


def parse_contracts(data: dict[str, Any] | list[Any]) -> tuple[ChildContract, ...]:
    """Parse contracts from ``{"contracts": [...]}`` or a bare list."""
    entries = data.get("contracts", []) if isinstance(data, dict) else data
    if not isinstance(entries, list):
        raise ValueError(f"contracts must be a list, got {type(entries).__name__}")
    contracts = tuple(ChildContract.from_dict(entry) for entry in entries)
    names = [c.name for c in contracts]
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise ValueError(f"Duplicate contract names: {duplicates}")
    return contracts


def load_contracts(path: Path) -> tuple[ChildContract, ...]:
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    contracts = parse_contracts(data)
    logger.info(
        "contracts_loaded",
        extra={"path": str(path), "contract_count": len(contracts)},
    )
    return contracts


def dump_contracts(contracts: Sequence[ChildContract], path: Path) -> None:
    """Write contracts in the shape ``load_contracts`` reads back."""
    payload = {"contracts": [c.to_dict() for c in contracts]}
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(payload, f, allow_unicode=True, sort_keys=False)
    logger.info(
        "contracts_saved",
        extra={"path": str(path), "contract_count": len(contracts)},
    )
