from __future__ import annotations

"""
Integration tests for the Snapshot Model Repository.

Uses real files in tmp_path to verify loading, lazy decoding and the error
mapping for unreadable or malformed snapshots.
"""

import json
from pathlib import Path

import pytest

from rolereach.domain.errors import ModelDecodeError, ResolutionError, SecurityLoadError
from rolereach.domain.model_nodes import Role, Screen, screen_ref
from rolereach.infra.repository.snapshot import SnapshotRepository


def test_load_from_file(tmp_path: Path, minimal_model) -> None:
    path = tmp_path / "model.json"
    path.write_text(json.dumps(minimal_model.document()), encoding="utf-8")
    repo = SnapshotRepository(str(path))

    security = repo.fetch_security_model()
    nav = repo.fetch_navigation(security.user_roles[0])
    login = repo.resolve(screen_ref("Auth.Login"))

    assert [r.name for r in security.user_roles] == ["Anonymous"]
    assert nav.profiles[0].home.screen == screen_ref("Auth.Login")
    assert isinstance(login, Screen) and login.allowed_roles == ["Auth.Anon"]


def test_file_read_once(tmp_path: Path, minimal_model) -> None:
    path = tmp_path / "model.json"
    path.write_text(json.dumps(minimal_model.document()), encoding="utf-8")
    repo = SnapshotRepository(str(path))
    repo.fetch_security_model()

    path.unlink()

    assert repo.resolve(screen_ref("App.Dashboard")).name == "Dashboard"


def test_dangling_reference(minimal_model) -> None:
    repo = minimal_model.repository()
    with pytest.raises(ResolutionError, match="Dangling reference") as exc:
        repo.resolve(screen_ref("App.Nowhere"))
    assert exc.value.ref == screen_ref("App.Nowhere")


def test_missing_file(tmp_path: Path) -> None:
    repo = SnapshotRepository(str(tmp_path / "absent.json"))

    with pytest.raises(SecurityLoadError):
        repo.fetch_security_model()
    with pytest.raises(ResolutionError):
        repo.resolve(screen_ref("App.Home"))


def test_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "model.json"
    path.write_text("{broken", encoding="utf-8")

    with pytest.raises(ModelDecodeError):
        SnapshotRepository(str(path)).fetch_navigation(Role("User"))


@pytest.mark.parametrize("units", [[], "", 0, ["App.Home"]])
def test_units_must_be_a_mapping(units) -> None:
    repo = SnapshotRepository.from_document({"units": units})
    with pytest.raises(ModelDecodeError):
        repo.resolve(screen_ref("App.Home"))


def test_null_units_mean_an_empty_snapshot() -> None:
    repo = SnapshotRepository.from_document({"units": None})
    with pytest.raises(ResolutionError, match="Dangling reference"):
        repo.resolve(screen_ref("App.Home"))
