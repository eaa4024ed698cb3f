from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. A dict-based model builder producing snapshot documents, so tests run
   against the same decoding path as real exports.
3. The minimal Anonymous / Login / DoLogin / Dashboard scenario.
"""

import os
import sys
from typing import Any, Callable, Dict, List, Optional

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from rolereach.core.pipeline.orchestrator import RoleOrchestrator  # noqa: E402
from rolereach.domain.tree_models import Item  # noqa: E402
from rolereach.infra.repository.snapshot import SnapshotRepository  # noqa: E402


# -----------------------------------------------------------------------------
# Model Builder
# -----------------------------------------------------------------------------
class ModelBuilder:
    """Accumulates a snapshot document through small helper calls."""

    def __init__(self) -> None:
        self.roles: List[Dict[str, Any]] = []
        self.profiles: List[Dict[str, Any]] = []
        self.units: Dict[str, Dict[str, Any]] = {}

    # --- Security & navigation ---
    def role(self, name: str, *module_roles: str) -> "ModelBuilder":
        self.roles.append({"name": name, "module_roles": list(module_roles)})
        return self

    def profile(
            self,
            name: str = "Responsive",
            home_screen: Optional[str] = None,
            home_workflow: Optional[str] = None,
    ) -> Dict[str, Any]:
        home: Dict[str, Any] = {}
        if home_screen:
            home["screen"] = home_screen
        if home_workflow:
            home["workflow"] = home_workflow
        profile = {"name": name, "home": home, "role_homes": [], "menu_items": []}
        self.profiles.append(profile)
        return profile

    def role_home(self, user_role: str, screen: Optional[str] = None, workflow: Optional[str] = None) -> "ModelBuilder":
        self._first_profile()["role_homes"].append(
            {"user_role": user_role, "screen": screen, "workflow": workflow}
        )
        return self

    def menu(self, caption: str, action: Optional[Dict[str, Any]], items: Optional[List[Dict[str, Any]]] = None) -> "ModelBuilder":
        self._first_profile()["menu_items"].append(menu_item(caption, action, items))
        return self

    # --- Units ---
    def screen(self, qname: str, roles: List[str], *widgets: Dict[str, Any]) -> "ModelBuilder":
        self.units[qname] = {"type": "screen", "allowed_roles": list(roles), "widgets": list(widgets)}
        return self

    def workflow(self, qname: str, roles: List[str], *steps: Dict[str, Any]) -> "ModelBuilder":
        self.units[qname] = {"type": "workflow", "allowed_roles": list(roles), "steps": list(steps)}
        return self

    def fragment(self, qname: str, *widgets: Dict[str, Any]) -> "ModelBuilder":
        self.units[qname] = {"type": "fragment", "widgets": list(widgets)}
        return self

    def entity(self, qname: str, *rules: Dict[str, Any]) -> "ModelBuilder":
        self.units[qname] = {"type": "entity", "access_rules": list(rules)}
        return self

    # --- Output ---
    def document(self) -> Dict[str, Any]:
        doc: Dict[str, Any] = {"security": {"user_roles": self.roles}, "units": self.units}
        if self.profiles:
            doc["navigation"] = {"profiles": self.profiles}
        return doc

    def repository(self) -> SnapshotRepository:
        return SnapshotRepository.from_document(self.document())

    def _first_profile(self) -> Dict[str, Any]:
        if not self.profiles:
            self.profile()
        return self.profiles[0]


# --- Element helpers (JSON shapes) ---
def open_screen(screen: str) -> Dict[str, Any]:
    return {"type": "open_screen", "screen": screen}


def call_workflow(workflow: str) -> Dict[str, Any]:
    return {"type": "call_workflow", "workflow": workflow}


def button(action: Optional[Dict[str, Any]], caption: str = "Button") -> Dict[str, Any]:
    return {"type": "action_button", "caption": caption, "action": action}


def menu_item(caption: str, action: Optional[Dict[str, Any]], items: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
    return {"caption": caption, "action": action, "items": items or []}


def show_screen_step(screen: str) -> Dict[str, Any]:
    return {"type": "action_activity", "action": {"type": "show_screen", "screen": screen}}


def call_workflow_step(workflow: str) -> Dict[str, Any]:
    return {"type": "action_activity", "action": {"type": "call_workflow", "workflow": workflow}}


def show_home_step() -> Dict[str, Any]:
    return {"type": "action_activity", "action": {"type": "show_home_screen"}}


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def model() -> ModelBuilder:
    """An empty model builder."""
    return ModelBuilder()


@pytest.fixture
def elements() -> Any:
    """Namespace of element helpers, usable from test modules without imports."""

    class _Elements:
        open_screen = staticmethod(open_screen)
        call_workflow = staticmethod(call_workflow)
        button = staticmethod(button)
        menu_item = staticmethod(menu_item)
        show_screen_step = staticmethod(show_screen_step)
        call_workflow_step = staticmethod(call_workflow_step)
        show_home_step = staticmethod(show_home_step)

    return _Elements


@pytest.fixture
def minimal_model() -> ModelBuilder:
    """
    Anonymous logs in through a workflow that shows a screen it may not open.

    Roles: Anonymous {Auth.Anon}.
    Login (Auth.Anon) --button--> DoLogin (Auth.Anon) --show--> Dashboard (App.User).
    """
    builder = ModelBuilder()
    builder.role("Anonymous", "Auth.Anon")
    builder.profile(home_screen="Auth.Login")
    builder.screen("Auth.Login", ["Auth.Anon"], button(call_workflow("Auth.DoLogin"), "Sign in"))
    builder.workflow("Auth.DoLogin", ["Auth.Anon"], show_screen_step("App.Dashboard"))
    builder.screen("App.Dashboard", ["App.User"])
    return builder


@pytest.fixture
def chain_model() -> Callable[[int], ModelBuilder]:
    """
    Factory for a linear navigation chain of `length` screens.

    Roles: User {App.User}. Home App.S0; each App.S<i> has one button
    opening App.S<i+1>.
    """

    def _build(length: int) -> ModelBuilder:
        builder = ModelBuilder()
        builder.role("User", "App.User")
        builder.profile(home_screen="App.S0")
        for i in range(length - 1):
            builder.screen(f"App.S{i}", ["App.User"], button(open_screen(f"App.S{i + 1}")))
        builder.screen(f"App.S{length - 1}", ["App.User"])
        return builder

    return _build


@pytest.fixture
def run_audit_tree() -> Callable[..., Item]:
    """Run the Role Orchestrator over a builder's repository and return the root."""

    def _run(builder: ModelBuilder, **kwargs: Any) -> Item:
        kwargs.setdefault("deadline_seconds", 30)
        return RoleOrchestrator(builder.repository(), **kwargs).run()

    return _run


@pytest.fixture
def mock_config_dict(tmp_path: Any) -> Dict[str, Any]:
    """A complete snapshot-source configuration pointing into tmp_path."""
    return {
        "source": "snapshot",
        "snapshot_path": str(tmp_path / "model.json"),
        "api_url": "",
        "username": "",
        "api_key": "",
        "project_id": "",
        "revision": -1,
        "branch": "",
        "request_timeout": 10,
        "output_path": str(tmp_path / "reachability.json"),
        "print_tree": False,
        "deadline_seconds": 30,
        "fetch_workers": 4,
        "role_workers": 2,
        "strict_workflow_screens": False,
    }
