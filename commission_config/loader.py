"""
Configuration Loader (``commission_config.loader``).

Responsibility
--------------
Loads a YAML configuration file and parses it into the kernel's frozen
``CommissionSettings`` dataclasses. Runtime callers go through
``commission_config.get_active_config()``.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys  -> ``KeyError`` propagates.
* Non-decimal numbers or unknown enum values  -> ``ValueError``.

``compute_checksum`` produces a deterministic SHA-256 hash so a run can be
tied to the exact configuration it used.
"""

from __future__ import annotations

import hashlib
import json
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from commission_kernel.domain.settings import (
    AmountLimit,
    CommissionSettings,
    CurrencySettings,
    DepositRules,
    WithdrawalRules,
)
from commission_kernel.domain.types import CrossRounding, OperationType


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def parse_decimal(value: Any, field_name: str) -> Decimal:
    """Parse a Decimal from a YAML scalar. Strings are preferred over floats."""
    if isinstance(value, bool) or value is None:
        raise ValueError(f"{field_name}: expected a decimal, got {value!r}")
    try:
        return Decimal(str(value).strip())
    except InvalidOperation as e:
        raise ValueError(f"{field_name}: expected a decimal, got {value!r}") from e


def parse_codes(values: Any, field_name: str) -> tuple[str, ...]:
    """Parse a list of codes, normalized the way the kernel normalizes them."""
    if not isinstance(values, (list, tuple)):
        raise ValueError(f"{field_name}: expected a list, got {values!r}")
    return tuple(str(v).strip() for v in values)


def parse_limit(data: dict[str, Any], field_name: str) -> AmountLimit:
    """Parse an ``{amount, currency}`` mapping."""
    return AmountLimit(
        amount=parse_decimal(data["amount"], f"{field_name}.amount"),
        currency=str(data["currency"]).upper().strip(),
    )


def parse_currencies(data: dict[str, Any]) -> CurrencySettings:
    """Parse the ``currencies`` section."""
    rates_raw = data.get("exchange_rates") or {}
    return CurrencySettings(
        main=str(data["main"]).upper().strip(),
        supported=tuple(c.upper() for c in parse_codes(data["supported"], "currencies.supported")),
        exchange_rates={
            str(code).upper().strip(): parse_decimal(rate, f"currencies.exchange_rates.{code}")
            for code, rate in rates_raw.items()
        },
        zero_decimal=tuple(
            c.upper() for c in parse_codes(data.get("zero_decimal", []), "currencies.zero_decimal")
        ),
        conversion_scale=int(data.get("conversion_scale", 5)),
        display_scale=int(data.get("display_scale", 2)),
        cross_rounding=CrossRounding(data.get("cross_rounding", CrossRounding.PER_LEG.value)),
    )


def parse_settings(data: dict[str, Any]) -> CommissionSettings:
    """
    Parse a full configuration mapping.

    Preconditions:
        - ``data`` contains ``currencies``, ``persons``, ``operations`` and
          ``commissions`` sections.
    Postconditions:
        - Returns a fully populated, frozen ``CommissionSettings``.
    Raises:
        KeyError: if required keys are missing.
        ValueError: if a value cannot be parsed.
    """
    commissions = data["commissions"]
    cash_in = commissions[OperationType.DEPOSIT.value]
    cash_out = commissions[OperationType.WITHDRAWAL.value]
    natural = cash_out["natural"]

    return CommissionSettings(
        currencies=parse_currencies(data["currencies"]),
        person_types=parse_codes(data["persons"]["types"], "persons.types"),
        operation_types=parse_codes(data["operations"]["types"], "operations.types"),
        deposit=DepositRules(
            percent=parse_decimal(cash_in["percent"], "commissions.cash_in.percent"),
            max_commission=parse_limit(cash_in["max_amount"], "commissions.cash_in.max_amount"),
        ),
        withdrawal=WithdrawalRules(
            percent=parse_decimal(cash_out["percent"], "commissions.cash_out.percent"),
            legal_min_commission=parse_limit(
                cash_out["legal"]["min_amount"], "commissions.cash_out.legal.min_amount"
            ),
            natural_free_amount=parse_limit(
                natural["free_amount"], "commissions.cash_out.natural.free_amount"
            ),
            natural_free_count=int(natural["free_count"]),
        ),
    )


def compute_checksum(data: dict[str, Any]) -> str:
    """Deterministic SHA-256 of a configuration mapping."""
    canonical = json.dumps(data, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()
