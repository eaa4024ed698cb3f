from __future__ import annotations

"""
Unit tests for the Access Policy Evaluator.

Verifies:
1. Entry is granted only on module-role overlap.
2. Absent role lists deny.
3. Creation needs a matching rule with the create flag.
"""

from rolereach.core.services.access_policy import can_create, can_enter, has_access_rules
from rolereach.domain.model_nodes import AccessRule, Entity, Role, Screen, Workflow


def test_can_enter_requires_overlap() -> None:
    screen = Screen("App", "Home", allowed_roles=["App.User", "App.Admin"])
    assert can_enter(screen, Role("User", ["App.User"])) is True
    assert can_enter(screen, Role("Guest", ["App.Guest"])) is False


def test_can_enter_denies_on_empty_lists() -> None:
    open_screen = Screen("App", "Home", allowed_roles=[])
    assert can_enter(open_screen, Role("User", ["App.User"])) is False

    wf = Workflow("App", "Act", allowed_roles=["App.User"])
    assert can_enter(wf, Role("Nobody", [])) is False


def test_can_enter_is_exact_match() -> None:
    """No wildcard or prefix matching between module roles."""
    screen = Screen("App", "Home", allowed_roles=["App.User"])
    assert can_enter(screen, Role("X", ["App.Use", "App.User2"])) is False


def test_can_create_needs_flag_and_overlap() -> None:
    entity = Entity("App", "Customer", access_rules=[
        AccessRule(module_roles=["App.User"], allow_create=False),
        AccessRule(module_roles=["App.Admin"], allow_create=True),
    ])
    assert can_create(entity, Role("User", ["App.User"])) is False
    assert can_create(entity, Role("Admin", ["App.Admin"])) is True
    assert can_create(entity, Role("Both", ["App.User", "App.Admin"])) is True


def test_has_access_rules() -> None:
    assert has_access_rules(Entity("App", "Log")) is False
    assert has_access_rules(Entity("App", "Log", [AccessRule(["App.User"])])) is True
    assert can_create(Entity("App", "Log"), Role("User", ["App.User"])) is False
