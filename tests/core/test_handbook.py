from __future__ import annotations

import json
from dataclasses import FrozenInstanceError
from pathlib import Path

import pytest
from mortgagelab.core.errors import ConfigError
from mortgagelab.core.handbook import DEFAULT_HANDBOOK, load_handbook


def _write(tmp_path: Path, name: str, text: str) -> Path:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def test_default_handbook_values() -> None:
    assert DEFAULT_HANDBOOK.global_policy.max_tenure == 35
    assert DEFAULT_HANDBOOK.global_policy.max_age == 70
    assert DEFAULT_HANDBOOK.haircut_for("basicSalary") == 1.0
    assert DEFAULT_HANDBOOK.haircut_for("commission") == 0.8
    assert DEFAULT_HANDBOOK.haircut_for("other") == 0.3
    assert DEFAULT_HANDBOOK.haircut_for("lottery") == 1.0
    assert [b.id for b in DEFAULT_HANDBOOK.bank_strategies.banks] == ["mbb", "cimb"]
    assert DEFAULT_HANDBOOK.bank_strategies.default_dsr_limit == 0.6


def test_handbook_is_immutable() -> None:
    with pytest.raises(FrozenInstanceError):
        DEFAULT_HANDBOOK.global_policy.max_tenure = 40
    with pytest.raises(TypeError):
        DEFAULT_HANDBOOK.income_matrix["bonus"] = None


def test_mapping_is_merged_over_defaults() -> None:
    handbook = load_handbook({"incomeMatrix": {"bonus": {"haircut": 0.5}}})

    assert handbook.haircut_for("bonus") == 0.5
    assert handbook.haircut_for("commission") == 0.8
    assert handbook.global_policy.max_tenure == 35


def test_load_yaml_file(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        "handbook.yaml",
        "global:\n  maxTenure: 30\nbankStrategies:\n  defaultDsrLimit: 0.55\n"
        "  banks:\n    - id: hlb\n",
    )
    handbook = load_handbook(path)

    assert handbook.global_policy.max_tenure == 30
    assert handbook.global_policy.max_age == 70
    (bank,) = handbook.bank_strategies.banks
    assert bank.name == "HLB"
    assert bank.tier1_limit == 0.55
    assert bank.tier2_limit == 0.7


def test_load_json_file(tmp_path: Path) -> None:
    path = _write(
        tmp_path, "handbook.json", json.dumps({"global": {"maxAge": 65}})
    )
    assert load_handbook(path).global_policy.max_age == 65


def test_to_dict_round_trips() -> None:
    assert load_handbook(DEFAULT_HANDBOOK.to_dict()).to_dict() == (
        DEFAULT_HANDBOOK.to_dict()
    )


@pytest.mark.parametrize(
    "override",
    [
        {"incomeMatrix": {"bonus": {"haircut": 1.5}}},
        {"incomeMatrix": {"bonus": "half"}},
        {"global": {"maxTenure": "thirty"}},
        {"global": {"maxTenure": True}},
        {"bankStrategies": {"banks": [{}]}},
        {"bankStrategies": {"banks": {"id": "mbb"}}},
        {"global": ["maxTenure", 30]},
        {"bankStrategies": {"defaultDsrLimit": 0.75}},
        {"bankStrategies": {"defaultDsrLimit": 0}},
    ],
)
def test_invalid_content_raises(override) -> None:
    with pytest.raises(ConfigError):
        load_handbook(override)


def test_invalid_files_raise(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_handbook(_write(tmp_path, "list.yaml", "- a\n- b\n"))
    with pytest.raises(ConfigError):
        load_handbook(_write(tmp_path, "bad.json", "{not json"))
    with pytest.raises(ConfigError):
        load_handbook(_write(tmp_path, "handbook.txt", "global: {}"))
    with pytest.raises(FileNotFoundError):
        load_handbook(tmp_path / "missing.yaml")


def test_empty_yaml_gives_defaults(tmp_path: Path) -> None:
    handbook = load_handbook(_write(tmp_path, "empty.yaml", ""))
    assert handbook.to_dict() == DEFAULT_HANDBOOK.to_dict()
