from __future__ import annotations

"""
Model Repository Infrastructure.

Facade over the concrete model sources. `build_repository` selects the
implementation matching a validated configuration.
"""

from typing import Any, Dict

from rolereach.domain.config import SOURCE_REMOTE, SOURCE_SNAPSHOT
from rolereach.infra.repository.base import ModelRepository
from rolereach.infra.repository.http_client import HttpModelRepository
from rolereach.infra.repository.snapshot import SnapshotRepository


def build_repository(cfg: Dict[str, Any]) -> ModelRepository:
    """
    Instantiate the repository described by `cfg['source']`.

    Raises:
        ValueError: Unknown source.
    """
    source = cfg.get("source")
    if source == SOURCE_SNAPSHOT:
        return SnapshotRepository(path=cfg["snapshot_path"])
    if source == SOURCE_REMOTE:
        return HttpModelRepository(
            api_url=cfg["api_url"],
            project_id=cfg["project_id"],
            username=cfg.get("username", ""),
            api_key=cfg.get("api_key", ""),
            revision=int(cfg.get("revision", -1)),
            branch=cfg.get("branch", ""),
            timeout=float(cfg.get("request_timeout", 10)),
        )
    raise ValueError(f"Unknown model source: {source!r}")


__all__ = [
    "ModelRepository",
    "SnapshotRepository",
    "HttpModelRepository",
    "build_repository",
]
