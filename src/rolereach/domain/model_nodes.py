from __future__ import annotations

"""
Application Model Data Models.

Read-only representation of the design-time application model as served by
a ModelRepository. Units (screens, workflows, fragments, entities) are
addressed through lazy NodeRef references and materialized on demand by the
Node Resolver; everything nested inside a unit (widgets, steps, actions)
arrives fully loaded with it.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Union

from rolereach.domain.constants import (
    KIND_ENTITY,
    KIND_FRAGMENT,
    KIND_SCREEN,
    KIND_WORKFLOW,
)

# -----------------------------------------------------------------------------
# REFERENCES
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class NodeRef:
    """
    Lazy reference to a model unit.

    Attributes:
        kind: One of the unit kinds (screen, workflow, fragment, entity).
        qualified_name: Module-qualified identity, e.g. 'Auth.Login'.
    """
    kind: str
    qualified_name: str

    @property
    def name(self) -> str:
        """Unqualified name (the part after the module prefix)."""
        return self.qualified_name.rsplit(".", 1)[-1]

    def __str__(self) -> str:
        return f"{self.kind}:{self.qualified_name}"


def screen_ref(qualified_name: Optional[str]) -> Optional[NodeRef]:
    return NodeRef(KIND_SCREEN, qualified_name) if qualified_name else None


def workflow_ref(qualified_name: Optional[str]) -> Optional[NodeRef]:
    return NodeRef(KIND_WORKFLOW, qualified_name) if qualified_name else None


def fragment_ref(qualified_name: Optional[str]) -> Optional[NodeRef]:
    return NodeRef(KIND_FRAGMENT, qualified_name) if qualified_name else None


def entity_ref(qualified_name: Optional[str]) -> Optional[NodeRef]:
    return NodeRef(KIND_ENTITY, qualified_name) if qualified_name else None

# -----------------------------------------------------------------------------
# SECURITY
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class Role:
    """
    A user role and the qualified module roles (permission groups) it holds.
    """
    name: str
    module_roles: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ProjectSecurity:
    user_roles: List[Role] = field(default_factory=list)


@dataclass(frozen=True)
class AccessRule:
    """
    Entity access rule.

    Attributes:
        module_roles: Qualified module roles the rule applies to.
        allow_create: Whether matching roles may create new objects.
    """
    module_roles: List[str] = field(default_factory=list)
    allow_create: bool = False

# -----------------------------------------------------------------------------
# CLIENT ACTIONS (buttons, list views, menu items)
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class OpenScreenAction:
    screen: Optional[NodeRef] = None


@dataclass(frozen=True)
class CallWorkflowAction:
    workflow: Optional[NodeRef] = None


@dataclass(frozen=True)
class NoAction:
    """Any client action that neither opens a screen nor calls a workflow."""
    kind: str = "none"


ClientAction = Union[OpenScreenAction, CallWorkflowAction, NoAction]

# -----------------------------------------------------------------------------
# STRUCTURAL ELEMENTS (screen and fragment widgets)
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class Container:
    """Non-actionable widget whose only role is to hold other widgets."""
    kind: str = "container"
    widgets: List["Widget"] = field(default_factory=list)


@dataclass(frozen=True)
class ActionButton:
    caption: str = ""
    action: Optional[ClientAction] = None


@dataclass(frozen=True)
class DropdownButton:
    caption: str = ""
    items: List[ClientAction] = field(default_factory=list)


@dataclass(frozen=True)
class NewButton:
    """Creates an object of `entity` and opens `screen` to edit it."""
    caption: str = ""
    screen: Optional[NodeRef] = None
    entity: Optional[NodeRef] = None


@dataclass(frozen=True)
class GridEditButton:
    """Control-bar button editing the selected row on `screen`."""
    caption: str = ""
    screen: Optional[NodeRef] = None


@dataclass(frozen=True)
class DataViewActionButton:
    """Control-bar button of a data view carrying a client action."""
    caption: str = ""
    action: Optional[ClientAction] = None


@dataclass(frozen=True)
class ListView:
    click_action: Optional[ClientAction] = None
    widgets: List["Widget"] = field(default_factory=list)


@dataclass(frozen=True)
class FragmentCall:
    fragment: Optional[NodeRef] = None


Widget = Union[
    Container,
    ActionButton,
    DropdownButton,
    NewButton,
    GridEditButton,
    DataViewActionButton,
    ListView,
    FragmentCall,
]

# -----------------------------------------------------------------------------
# WORKFLOW STEPS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class ShowScreenStep:
    screen: Optional[NodeRef] = None


@dataclass(frozen=True)
class ShowHomeScreenStep:
    pass


@dataclass(frozen=True)
class CallWorkflowStep:
    workflow: Optional[NodeRef] = None


@dataclass(frozen=True)
class OtherStep:
    kind: str = "other"


StepAction = Union[ShowScreenStep, ShowHomeScreenStep, CallWorkflowStep, OtherStep]


@dataclass(frozen=True)
class WorkflowStep:
    """
    One object of a workflow's object collection.

    Attributes:
        kind: Step kind; only 'action_activity' steps carry actions we follow.
        action: The activity's action, if any.
    """
    kind: str
    action: Optional[StepAction] = None

# -----------------------------------------------------------------------------
# UNITS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class Screen:
    module: str
    name: str
    allowed_roles: List[str] = field(default_factory=list)
    widgets: List[Widget] = field(default_factory=list)

    @property
    def qualified_name(self) -> str:
        return f"{self.module}.{self.name}"


@dataclass(frozen=True)
class Fragment:
    """Reusable widget tree embedded into screens through FragmentCall."""
    module: str
    name: str
    widgets: List[Widget] = field(default_factory=list)

    @property
    def qualified_name(self) -> str:
        return f"{self.module}.{self.name}"


@dataclass(frozen=True)
class Workflow:
    module: str
    name: str
    allowed_roles: List[str] = field(default_factory=list)
    steps: List[WorkflowStep] = field(default_factory=list)

    @property
    def qualified_name(self) -> str:
        return f"{self.module}.{self.name}"


@dataclass(frozen=True)
class Entity:
    module: str
    name: str
    access_rules: List[AccessRule] = field(default_factory=list)

    @property
    def qualified_name(self) -> str:
        return f"{self.module}.{self.name}"


Unit = Union[Screen, Fragment, Workflow, Entity]

# -----------------------------------------------------------------------------
# NAVIGATION
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class HomeTarget:
    """Default home of a navigation profile: a screen or a workflow."""
    screen: Optional[NodeRef] = None
    workflow: Optional[NodeRef] = None


@dataclass(frozen=True)
class RoleHome:
    """Home override applying to a single user role (matched by name)."""
    user_role: str
    screen: Optional[NodeRef] = None
    workflow: Optional[NodeRef] = None


@dataclass(frozen=True)
class MenuItem:
    caption: str = ""
    action: Optional[ClientAction] = None
    items: List["MenuItem"] = field(default_factory=list)


@dataclass(frozen=True)
class NavigationProfile:
    name: str = ""
    home: Optional[HomeTarget] = None
    role_homes: List[RoleHome] = field(default_factory=list)
    menu_items: List[MenuItem] = field(default_factory=list)


@dataclass(frozen=True)
class NavigationDocument:
    profiles: List[NavigationProfile] = field(default_factory=list)
