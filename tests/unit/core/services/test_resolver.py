from __future__ import annotations

"""
Unit tests for the Node Resolver.

Verifies:
1. Declared-order results from concurrent fetches.
2. Kind checking of resolved units.
3. Wrapping of repository I/O failures into ResolutionError, while
   local programming errors propagate unchanged.
4. Fetch accounting.
"""

import threading
import time
from typing import Dict, List, Optional

import pytest

from rolereach.core.services.resolver import NodeResolver
from rolereach.core.services.stats import FETCHES, TraversalStats
from rolereach.domain.errors import ResolutionError
from rolereach.domain.model_nodes import (
    NavigationDocument,
    NodeRef,
    ProjectSecurity,
    Role,
    Screen,
    Unit,
    Workflow,
    screen_ref,
    workflow_ref,
)
from rolereach.infra.repository.base import ModelRepository


class _DictRepository(ModelRepository):
    """Serves prepared units; optional per-name delays shuffle completion order."""

    def __init__(self, units: Dict[str, Unit], delays: Optional[Dict[str, float]] = None) -> None:
        self.units = units
        self.delays = delays or {}
        self.threads: List[str] = []
        self._lock = threading.Lock()

    def fetch_security_model(self) -> ProjectSecurity:
        return ProjectSecurity()

    def fetch_navigation(self, role: Role) -> Optional[NavigationDocument]:
        return None

    def resolve(self, ref: NodeRef) -> Unit:
        with self._lock:
            self.threads.append(threading.current_thread().name)
        time.sleep(self.delays.get(ref.qualified_name, 0))
        if ref.qualified_name == "App.Broken":
            raise ConnectionError("backend exploded")
        if ref.qualified_name == "App.Buggy":
            raise RecursionError("maximum recursion depth exceeded")
        return self.units[ref.qualified_name]


def test_resolve_all_preserves_declared_order() -> None:
    units = {f"App.S{i}": Screen("App", f"S{i}") for i in range(5)}
    # Earlier refs finish last
    delays = {"App.S0": 0.05, "App.S1": 0.03}
    repo = _DictRepository(units, delays)

    with NodeResolver(repo, max_workers=5) as resolver:
        result = resolver.resolve_all([screen_ref(f"App.S{i}") for i in range(5)])

    assert [u.name for u in result] == ["S0", "S1", "S2", "S3", "S4"]
    assert any(name.startswith("NodeFetch") for name in repo.threads)


def test_resolve_all_empty_and_single() -> None:
    repo = _DictRepository({"App.A": Screen("App", "A")})
    with NodeResolver(repo) as resolver:
        assert resolver.resolve_all([]) == []
        assert resolver.resolve_all([screen_ref("App.A")])[0].name == "A"


def test_kind_mismatch_raises() -> None:
    repo = _DictRepository({"App.A": Workflow("App", "A")})
    with NodeResolver(repo) as resolver:
        with pytest.raises(ResolutionError) as exc:
            resolver.resolve(screen_ref("App.A"))
    assert exc.value.ref == screen_ref("App.A")


def test_foreign_exception_is_wrapped() -> None:
    repo = _DictRepository({})
    with NodeResolver(repo) as resolver:
        with pytest.raises(ResolutionError, match="backend exploded"):
            resolver.resolve(workflow_ref("App.Broken"))


def test_local_errors_are_not_blamed_on_the_repository() -> None:
    repo = _DictRepository({})
    with NodeResolver(repo) as resolver:
        with pytest.raises(RecursionError):
            resolver.resolve(screen_ref("App.Buggy"))


def test_resolve_all_propagates_failure() -> None:
    repo = _DictRepository({"App.A": Screen("App", "A")})
    with NodeResolver(repo, max_workers=2) as resolver:
        with pytest.raises(ResolutionError):
            resolver.resolve_all([screen_ref("App.A"), screen_ref("App.Broken")])


def test_every_resolve_counts_a_fetch() -> None:
    """No memoization: the same ref fetched twice counts twice."""
    stats = TraversalStats()
    repo = _DictRepository({"App.A": Screen("App", "A")})
    with NodeResolver(repo, stats=stats) as resolver:
        resolver.resolve(screen_ref("App.A"))
        resolver.resolve(screen_ref("App.A"))
    assert stats.get(FETCHES) == 2
