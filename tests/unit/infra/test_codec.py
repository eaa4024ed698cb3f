from __future__ import annotations

"""
Unit tests for the model document codec.

Verifies decoding of every unit kind, the lenient handling of unknown
widgets and actions, and rejection of malformed documents.
"""

import pytest

from rolereach.domain.errors import ModelDecodeError, SecurityLoadError
from rolereach.domain.model_nodes import (
    ActionButton,
    Container,
    DropdownButton,
    Entity,
    FragmentCall,
    ListView,
    NewButton,
    NoAction,
    OpenScreenAction,
    OtherStep,
    Screen,
    ShowScreenStep,
    Workflow,
    entity_ref,
    fragment_ref,
    screen_ref,
    workflow_ref,
)
from rolereach.infra.repository.codec import decode_navigation, decode_security, decode_unit


def test_decode_security() -> None:
    security = decode_security({"user_roles": [
        {"name": "Anonymous", "module_roles": ["Auth.Anon"]},
        {"name": "Admin"},
    ]})

    assert [r.name for r in security.user_roles] == ["Anonymous", "Admin"]
    assert security.user_roles[1].module_roles == []


@pytest.mark.parametrize("data", [None, [], {"user_roles": "x"}, {"user_roles": [{"module_roles": []}]}])
def test_decode_security_rejects_malformed(data) -> None:
    with pytest.raises(SecurityLoadError):
        decode_security(data)


def test_decode_navigation() -> None:
    nav = decode_navigation({"profiles": [{
        "name": "Responsive",
        "home": {"workflow": "App.Init"},
        "role_homes": [{"user_role": "Admin", "screen": "App.AdminHome"}],
        "menu_items": [{"caption": "Top", "items": [
            {"caption": "Orders", "action": {"type": "open_screen", "screen": "App.Orders"}},
        ]}],
    }]})

    profile = nav.profiles[0]
    assert profile.home.workflow == workflow_ref("App.Init")
    assert profile.home.screen is None
    assert profile.role_homes[0].screen == screen_ref("App.AdminHome")
    assert profile.menu_items[0].action is None
    assert profile.menu_items[0].items[0].action == OpenScreenAction(screen_ref("App.Orders"))


def test_empty_navigation_is_none() -> None:
    assert decode_navigation(None) is None
    assert decode_navigation({}) is None


def test_decode_screen_widgets() -> None:
    ref = screen_ref("App.Home")
    screen = decode_unit(ref, {"type": "screen", "allowed_roles": ["App.User"], "widgets": [
        {"type": "layout_grid", "widgets": [
            {"type": "action_button", "caption": "Go", "action": {"type": "open_screen", "screen": "App.X"}},
        ]},
        {"type": "list_view", "click_action": {"type": "call_workflow", "workflow": "App.Y"}},
        {"type": "new_button", "screen": "App.Edit", "entity": "App.Customer"},
        {"type": "dropdown_button", "caption": "More", "items": [{"type": "sign_out"}]},
        {"type": "fragment_call", "fragment": "App.Header"},
        {"type": "action_button", "action": {"type": "save_changes"}},
    ]})

    assert isinstance(screen, Screen)
    assert (screen.module, screen.name, screen.qualified_name) == ("App", "Home", "App.Home")
    grid, list_view, new_button, dropdown, fragment, save = screen.widgets
    assert isinstance(grid, Container) and grid.kind == "layout_grid"
    assert isinstance(grid.widgets[0], ActionButton)
    assert isinstance(list_view, ListView)
    assert new_button == NewButton("", screen_ref("App.Edit"), entity_ref("App.Customer"))
    assert isinstance(dropdown, DropdownButton) and dropdown.items == [NoAction("sign_out")]
    assert fragment == FragmentCall(fragment_ref("App.Header"))
    assert save.action == NoAction("save_changes")


def test_decode_workflow_and_entity() -> None:
    wf = decode_unit(workflow_ref("App.Flow"), {"type": "workflow", "allowed_roles": ["App.User"], "steps": [
        {"type": "action_activity", "action": {"type": "show_screen", "screen": "App.Done"}},
        {"type": "action_activity", "action": {"type": "retrieve"}},
        {"type": "exclusive_split"},
    ]})
    assert isinstance(wf, Workflow)
    assert wf.steps[0].action == ShowScreenStep(screen_ref("App.Done"))
    assert wf.steps[1].action == OtherStep("retrieve")
    assert wf.steps[2].kind == "exclusive_split" and wf.steps[2].action is None

    entity = decode_unit(entity_ref("App.Customer"), {"type": "entity", "access_rules": [
        {"module_roles": ["App.Admin"], "allow_create": True},
    ]})
    assert isinstance(entity, Entity)
    assert entity.access_rules[0].allow_create is True


def test_decode_unit_rejects_kind_mismatch() -> None:
    ref = screen_ref("App.Flow")
    with pytest.raises(ModelDecodeError) as exc:
        decode_unit(ref, {"type": "workflow"})
    assert exc.value.ref == ref


@pytest.mark.parametrize("data", [
    "screen",
    {"type": "screen", "widgets": "nope"},
    {"type": "screen", "widgets": [42]},
])
def test_decode_unit_rejects_malformed(data) -> None:
    with pytest.raises(ModelDecodeError):
        decode_unit(screen_ref("App.Home"), data)
