from __future__ import annotations

"""
Unit tests for the Configuration Validator.

Verifies type coercion, range clamping, source checks and strict mode.
"""

from typing import Any, Dict

import pytest

from rolereach.core.pipeline.validator import missing_required_fields, validate_config


def test_valid_config_passes_without_warnings(mock_config_dict: Dict[str, Any]) -> None:
    cfg, warnings = validate_config(mock_config_dict)

    assert warnings == []
    assert cfg["source"] == "snapshot"
    assert cfg["fetch_workers"] == 4


def test_non_dict_falls_back_to_defaults() -> None:
    cfg, warnings = validate_config(["not", "a", "dict"])

    assert cfg["source"] == "snapshot"
    assert "Invalid config type" in warnings[0]

    with pytest.raises(TypeError):
        validate_config(None, strict=True)


def test_coercion_of_strings(mock_config_dict: Dict[str, Any]) -> None:
    mock_config_dict.update({
        "print_tree": "yes",
        "role_workers": "3",
        "deadline_seconds": "12.5",
        "revision": "42",
    })

    cfg, warnings = validate_config(mock_config_dict)

    assert cfg["print_tree"] is True
    assert cfg["role_workers"] == 3
    assert cfg["deadline_seconds"] == 12.5
    assert cfg["revision"] == 42
    assert len(warnings) == 4


def test_clamping(mock_config_dict: Dict[str, Any]) -> None:
    mock_config_dict.update({"fetch_workers": 0, "deadline_seconds": -5, "revision": -7})

    cfg, warnings = validate_config(mock_config_dict)

    assert cfg["fetch_workers"] == 1
    assert cfg["deadline_seconds"] == 1
    assert cfg["revision"] == -1
    assert len(warnings) == 3


def test_bool_is_not_a_worker_count(mock_config_dict: Dict[str, Any]) -> None:
    mock_config_dict["role_workers"] = True

    cfg, warnings = validate_config(mock_config_dict)

    assert cfg["role_workers"] == 4
    assert any("expected int" in w for w in warnings)


def test_unknown_source(mock_config_dict: Dict[str, Any]) -> None:
    mock_config_dict["source"] = "ftp"

    cfg, warnings = validate_config(mock_config_dict)
    assert cfg["source"] == "snapshot"
    assert any("Invalid source" in w for w in warnings)

    with pytest.raises(ValueError):
        validate_config(mock_config_dict, strict=True)


def test_remote_requires_url_and_project(mock_config_dict: Dict[str, Any]) -> None:
    mock_config_dict.update({"source": "REMOTE", "api_url": "https://models.example"})

    cfg, warnings = validate_config(mock_config_dict)

    assert cfg["source"] == "remote"
    assert missing_required_fields(cfg) == ["project_id"]
    assert "Field 'project_id' is required for source 'remote'." in warnings

    with pytest.raises(ValueError, match="project_id"):
        validate_config(mock_config_dict, strict=True)
