from __future__ import annotations

"""
Model Document Codec.

Decodes the JSON documents served by snapshot files and the remote model
service into domain nodes. Structure is checked only as far as traversal
needs it: unknown widget kinds become plain containers and unknown actions
become NoAction / OtherStep, while documents of the wrong shape raise
ModelDecodeError.
"""

from typing import Any, List, Optional, Tuple

from rolereach.domain.constants import (
    KIND_ENTITY,
    KIND_FRAGMENT,
    KIND_SCREEN,
    KIND_WORKFLOW,
)
from rolereach.domain.errors import ModelDecodeError, SecurityLoadError
from rolereach.domain.model_nodes import (
    AccessRule,
    ActionButton,
    CallWorkflowAction,
    CallWorkflowStep,
    ClientAction,
    Container,
    DataViewActionButton,
    DropdownButton,
    Entity,
    Fragment,
    FragmentCall,
    GridEditButton,
    HomeTarget,
    ListView,
    MenuItem,
    NavigationDocument,
    NavigationProfile,
    NewButton,
    NoAction,
    NodeRef,
    OpenScreenAction,
    OtherStep,
    ProjectSecurity,
    Role,
    RoleHome,
    Screen,
    ShowHomeScreenStep,
    ShowScreenStep,
    StepAction,
    Unit,
    Widget,
    Workflow,
    WorkflowStep,
    entity_ref,
    fragment_ref,
    screen_ref,
    workflow_ref,
)

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def decode_security(data: Any) -> ProjectSecurity:
    """
    Decode the project security document.

    Raises:
        SecurityLoadError: If the document is not a mapping with a role list.
    """
    if not isinstance(data, dict) or not isinstance(data.get("user_roles", []), list):
        raise SecurityLoadError("Malformed security document: expected 'user_roles' list.")

    roles: List[Role] = []
    for raw in data.get("user_roles", []):
        if not isinstance(raw, dict) or not raw.get("name"):
            raise SecurityLoadError(f"Malformed user role entry: {raw!r}")
        roles.append(Role(name=str(raw["name"]), module_roles=_str_list(raw.get("module_roles"))))
    return ProjectSecurity(user_roles=roles)


def decode_navigation(data: Any) -> Optional[NavigationDocument]:
    """Decode a navigation document; None/empty input means no navigation."""
    if not data:
        return None
    if not isinstance(data, dict):
        raise ModelDecodeError("Malformed navigation document: expected an object.")

    profiles = [_decode_profile(p) for p in _list(data.get("profiles"), "profiles")]
    return NavigationDocument(profiles=profiles)


def decode_unit(ref: NodeRef, data: Any) -> Unit:
    """
    Decode the document of a single unit.

    The document's 'type' must match the reference kind.

    Raises:
        ModelDecodeError: Wrong shape or kind mismatch.
    """
    if not isinstance(data, dict):
        raise ModelDecodeError(f"Malformed document for {ref}: expected an object.", ref)

    doc_type = data.get("type")
    if doc_type != ref.kind:
        raise ModelDecodeError(f"Document for {ref} has type {doc_type!r}.", ref)

    module, name = _split_qualified(ref.qualified_name)
    module = str(data.get("module", module))
    name = str(data.get("name", name))

    try:
        if doc_type == KIND_SCREEN:
            return Screen(
                module=module,
                name=name,
                allowed_roles=_str_list(data.get("allowed_roles")),
                widgets=_decode_widgets(data.get("widgets")),
            )
        if doc_type == KIND_FRAGMENT:
            return Fragment(module=module, name=name, widgets=_decode_widgets(data.get("widgets")))
        if doc_type == KIND_WORKFLOW:
            return Workflow(
                module=module,
                name=name,
                allowed_roles=_str_list(data.get("allowed_roles")),
                steps=[_decode_step(s) for s in _list(data.get("steps"), "steps")],
            )
        if doc_type == KIND_ENTITY:
            return Entity(
                module=module,
                name=name,
                access_rules=[_decode_rule(r) for r in _list(data.get("access_rules"), "access_rules")],
            )
    except ModelDecodeError as e:
        raise ModelDecodeError(f"Malformed document for {ref}: {e}", ref) from e

    raise ModelDecodeError(f"Unsupported unit type {doc_type!r} for {ref}.", ref)

# -----------------------------------------------------------------------------
# PRIVATE HELPERS: NAVIGATION
# -----------------------------------------------------------------------------

def _decode_profile(raw: Any) -> NavigationProfile:
    if not isinstance(raw, dict):
        raise ModelDecodeError("Navigation profile must be an object.")

    home_raw = raw.get("home")
    home = None
    if isinstance(home_raw, dict):
        home = HomeTarget(
            screen=screen_ref(home_raw.get("screen")),
            workflow=workflow_ref(home_raw.get("workflow")),
        )

    role_homes = []
    for rh in _list(raw.get("role_homes"), "role_homes"):
        if not isinstance(rh, dict) or not rh.get("user_role"):
            raise ModelDecodeError(f"Malformed role home entry: {rh!r}")
        role_homes.append(RoleHome(
            user_role=str(rh["user_role"]),
            screen=screen_ref(rh.get("screen")),
            workflow=workflow_ref(rh.get("workflow")),
        ))

    return NavigationProfile(
        name=str(raw.get("name", "")),
        home=home,
        role_homes=role_homes,
        menu_items=[_decode_menu_item(m) for m in _list(raw.get("menu_items"), "menu_items")],
    )


def _decode_menu_item(raw: Any) -> MenuItem:
    if not isinstance(raw, dict):
        raise ModelDecodeError("Menu item must be an object.")
    return MenuItem(
        caption=str(raw.get("caption", "")),
        action=_decode_action(raw.get("action")),
        items=[_decode_menu_item(m) for m in _list(raw.get("items"), "items")],
    )

# -----------------------------------------------------------------------------
# PRIVATE HELPERS: WIDGETS AND ACTIONS
# -----------------------------------------------------------------------------

def _decode_action(raw: Any) -> Optional[ClientAction]:
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise ModelDecodeError(f"Client action must be an object, got {raw!r}.")

    kind = raw.get("type")
    if kind == "open_screen":
        return OpenScreenAction(screen=screen_ref(raw.get("screen")))
    if kind == "call_workflow":
        return CallWorkflowAction(workflow=workflow_ref(raw.get("workflow")))
    return NoAction(kind=str(kind or "none"))


def _decode_widgets(raw: Any) -> List[Widget]:
    return [_decode_widget(w) for w in _list(raw, "widgets")]


def _decode_widget(raw: Any) -> Widget:
    if not isinstance(raw, dict):
        raise ModelDecodeError(f"Widget must be an object, got {raw!r}.")

    kind = str(raw.get("type", "container"))
    caption = str(raw.get("caption", ""))

    if kind == "action_button":
        return ActionButton(caption=caption, action=_decode_action(raw.get("action")))
    if kind == "dropdown_button":
        items = [_decode_action(a) for a in _list(raw.get("items"), "items")]
        return DropdownButton(caption=caption, items=[a for a in items if a is not None])
    if kind == "new_button":
        return NewButton(
            caption=caption,
            screen=screen_ref(raw.get("screen")),
            entity=entity_ref(raw.get("entity")),
        )
    if kind == "grid_edit_button":
        return GridEditButton(caption=caption, screen=screen_ref(raw.get("screen")))
    if kind == "data_view_action_button":
        return DataViewActionButton(caption=caption, action=_decode_action(raw.get("action")))
    if kind == "list_view":
        return ListView(
            click_action=_decode_action(raw.get("click_action")),
            widgets=_decode_widgets(raw.get("widgets")),
        )
    if kind == "fragment_call":
        return FragmentCall(fragment=fragment_ref(raw.get("fragment")))

    return Container(kind=kind, widgets=_decode_widgets(raw.get("widgets")))

# -----------------------------------------------------------------------------
# PRIVATE HELPERS: WORKFLOWS AND ENTITIES
# -----------------------------------------------------------------------------

def _decode_step(raw: Any) -> WorkflowStep:
    if not isinstance(raw, dict):
        raise ModelDecodeError(f"Workflow step must be an object, got {raw!r}.")
    return WorkflowStep(kind=str(raw.get("type", "")), action=_decode_step_action(raw.get("action")))


def _decode_step_action(raw: Any) -> Optional[StepAction]:
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise ModelDecodeError(f"Step action must be an object, got {raw!r}.")

    kind = raw.get("type")
    if kind == "show_screen":
        return ShowScreenStep(screen=screen_ref(raw.get("screen")))
    if kind == "show_home_screen":
        return ShowHomeScreenStep()
    if kind == "call_workflow":
        return CallWorkflowStep(workflow=workflow_ref(raw.get("workflow")))
    return OtherStep(kind=str(kind or "other"))


def _decode_rule(raw: Any) -> AccessRule:
    if not isinstance(raw, dict):
        raise ModelDecodeError(f"Access rule must be an object, got {raw!r}.")
    return AccessRule(
        module_roles=_str_list(raw.get("module_roles")),
        allow_create=bool(raw.get("allow_create", False)),
    )

# -----------------------------------------------------------------------------
# PRIVATE HELPERS: PRIMITIVES
# -----------------------------------------------------------------------------

def _list(value: Any, field: str) -> List[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ModelDecodeError(f"Field '{field}' must be a list, got {type(value).__name__}.")
    return value


def _str_list(value: Any) -> List[str]:
    return [str(v) for v in _list(value, "roles") if v]


def _split_qualified(qualified_name: str) -> Tuple[str, str]:
    if "." in qualified_name:
        module, name = qualified_name.rsplit(".", 1)
        return module, name
    return "", qualified_name

