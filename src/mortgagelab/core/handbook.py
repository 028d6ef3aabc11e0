"""Policy handbook: immutable lending policy passed explicitly into calculations."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml

from .errors import ConfigError

__all__ = [
    "BankStrategies",
    "BankTier",
    "DEFAULT_HANDBOOK",
    "GlobalPolicy",
    "IncomeRule",
    "PolicyHandbook",
    "load_handbook",
]

# DSR at which affordability turns RED; the comfort limit must sit at or below it
RED_DSR_LINE = 0.70


@dataclass(frozen=True, slots=True)
class GlobalPolicy:
    """Portfolio-wide limits."""

    max_tenure: int = 35
    max_age: int = 70


@dataclass(frozen=True, slots=True)
class IncomeRule:
    """Recognition rule for one income type; ``haircut`` is the share that counts."""

    haircut: float = 1.0


@dataclass(frozen=True, slots=True)
class BankTier:
    """Per-bank DSR tiers."""

    id: str
    name: str
    tier1_limit: float = 0.6
    tier2_limit: float = 0.7
    notes: str = ""


@dataclass(frozen=True, slots=True)
class BankStrategies:
    """Default DSR comfort limit and per-bank tier strategies."""

    default_dsr_limit: float = 0.6
    banks: tuple[BankTier, ...] = ()


@dataclass(frozen=True, slots=True)
class PolicyHandbook:
    """
    Lending policy configuration.

    The host application owns and persists the handbook; calculators only read
    it. Instances are immutable so one handbook can be shared across
    concurrent calculations.

    Attributes:
        global_policy: Maximum tenure and maximum age at maturity
        income_matrix: Income type (e.g. 'commission') -> IncomeRule
        bank_strategies: DSR limits per bank
    """

    global_policy: GlobalPolicy = field(default_factory=GlobalPolicy)
    income_matrix: Mapping[str, IncomeRule] = field(
        default_factory=lambda: MappingProxyType({})
    )
    bank_strategies: BankStrategies = field(default_factory=BankStrategies)

    def haircut_for(self, income_type: str) -> float:
        """Haircut for an income type; unknown types count in full."""
        rule = self.income_matrix.get(income_type)
        return rule.haircut if rule is not None else 1.0

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the camelCase keys of the stored handbook format."""
        return {
            "global": {
                "maxTenure": self.global_policy.max_tenure,
                "maxAge": self.global_policy.max_age,
            },
            "incomeMatrix": {
                key: {"haircut": rule.haircut}
                for key, rule in self.income_matrix.items()
            },
            "bankStrategies": {
                "defaultDsrLimit": self.bank_strategies.default_dsr_limit,
                "banks": [
                    {
                        "id": bank.id,
                        "name": bank.name,
                        "tier1Limit": bank.tier1_limit,
                        "tier2Limit": bank.tier2_limit,
                        "notes": bank.notes,
                    }
                    for bank in self.bank_strategies.banks
                ],
            },
        }


_DEFAULT_RAW: dict[str, Any] = {
    "global": {"maxTenure": 35, "maxAge": 70},
    "incomeMatrix": {
        "basicSalary": {"haircut": 1.0},
        "fixedAllowance": {"haircut": 1.0},
        "commission": {"haircut": 0.8},
        "bonus": {"haircut": 0.7},
        "rental": {"haircut": 0.8},
        "other": {"haircut": 0.3},
    },
    "bankStrategies": {
        "defaultDsrLimit": 0.6,
        "banks": [
            {
                "id": "mbb",
                "name": "MBB",
                "tier1Limit": 0.6,
                "tier2Limit": 0.7,
                "notes": "Tier 1 for strong profile, Tier 2 for borderline cases.",
            },
            {"id": "cimb", "name": "CIMB", "tier1Limit": 0.6, "tier2Limit": 0.7},
        ],
    },
}


def load_handbook(
    source: str | Path | Mapping[str, Any] | None = None, *, format: str | None = None
) -> PolicyHandbook:
    """
    Build a PolicyHandbook from a mapping or a YAML/JSON file.

    Each top-level section (``global``, ``incomeMatrix``, ``bankStrategies``)
    is shallow-merged over the defaults, so a file only needs the keys it
    changes.

    Raises:
        ConfigError: If the source cannot be parsed or holds invalid values
        FileNotFoundError: If ``source`` is a path that does not exist
    """
    override, label = _read_source(source, format=format)
    merged = {
        section: {
            **_DEFAULT_RAW[section],
            **_ensure_dict(override.get(section), f"{label}::{section}"),
        }
        for section in ("global", "incomeMatrix", "bankStrategies")
    }
    return _build(merged, label)


def _read_source(
    source: str | Path | Mapping[str, Any] | None, *, format: str | None
) -> tuple[dict[str, Any], str]:
    if source is None:
        return {}, "<defaults>"
    if isinstance(source, Mapping):
        return dict(source), "<mapping>"

    path = Path(source)
    if not path.exists():
        raise FileNotFoundError(path)

    fmt = (format or path.suffix.lstrip(".")).lower()
    text = path.read_text(encoding="utf-8")
    if fmt in {"yaml", "yml", ""}:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigError(f"{path}: invalid YAML ({exc})") from exc
    elif fmt == "json":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"{path}: invalid JSON ({exc})") from exc
    else:
        raise ConfigError(f"Unsupported handbook format '{fmt}' for {path}")

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Handbook root must be a mapping (source={path})")
    return data, str(path)


def _build(raw: dict[str, dict[str, Any]], label: str) -> PolicyHandbook:
    g = raw["global"]
    global_policy = GlobalPolicy(
        max_tenure=int(
            _coerce_float(g.get("maxTenure"), f"{label}::global.maxTenure")
        ),
        max_age=int(_coerce_float(g.get("maxAge"), f"{label}::global.maxAge")),
    )

    matrix: dict[str, IncomeRule] = {}
    for key, entry in raw["incomeMatrix"].items():
        ctx = f"{label}::incomeMatrix.{key}"
        data = _ensure_dict(entry, ctx)
        haircut = _coerce_float(data.get("haircut", 1.0), f"{ctx}.haircut")
        if not 0.0 <= haircut <= 1.0:
            raise ConfigError(
                f"{ctx}.haircut must be between 0 and 1, got {haircut}"
            )
        matrix[str(key)] = IncomeRule(haircut=haircut)

    s = raw["bankStrategies"]
    default_limit = _coerce_float(
        s.get("defaultDsrLimit"), f"{label}::bankStrategies.defaultDsrLimit"
    )
    if not 0.0 < default_limit <= RED_DSR_LINE:
        raise ConfigError(
            f"{label}::bankStrategies.defaultDsrLimit must be in (0, {RED_DSR_LINE}], "
            f"got {default_limit}"
        )
    banks_raw = s.get("banks") or []
    if not isinstance(banks_raw, list):
        raise ConfigError(f"{label}::bankStrategies.banks: expected a list")
    banks: list[BankTier] = []
    for idx, entry in enumerate(banks_raw):
        ctx = f"{label}::bankStrategies.banks[{idx}]"
        data = _ensure_dict(entry, ctx)
        bank_id = data.get("id")
        if not isinstance(bank_id, str) or not bank_id.strip():
            raise ConfigError(f"{ctx}: 'id' is required")
        banks.append(
            BankTier(
                id=bank_id,
                name=str(data.get("name") or bank_id.upper()),
                tier1_limit=_coerce_float(
                    data.get("tier1Limit", default_limit), f"{ctx}.tier1Limit"
                ),
                tier2_limit=_coerce_float(
                    data.get("tier2Limit", 0.7), f"{ctx}.tier2Limit"
                ),
                notes=str(data.get("notes") or ""),
            )
        )

    return PolicyHandbook(
        global_policy=global_policy,
        income_matrix=MappingProxyType(matrix),
        bank_strategies=BankStrategies(
            default_dsr_limit=default_limit, banks=tuple(banks)
        ),
    )


def _coerce_float(value: Any, ctx: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{ctx}: expected a number, got {value!r}")
    return float(value)


def _ensure_dict(value: Any, ctx: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigError(f"{ctx}: expected a mapping")
    return dict(value)


DEFAULT_HANDBOOK = load_handbook()
