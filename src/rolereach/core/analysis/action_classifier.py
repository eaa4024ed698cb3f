from __future__ import annotations

"""
Action Classifier.

Maps every kind of actionable node (buttons, list-view click actions, menu
items, navigation homes, workflow steps) to one normalized ActionTarget.
Creation buttons are the only case needing the repository: the created
entity is loaded to confirm the role may create it.
"""

import logging
from typing import Any, Optional, Union

from rolereach.core.services import access_policy
from rolereach.core.services.resolver import NodeResolver
from rolereach.core.services.stats import TraversalStats
from rolereach.domain.constants import (
    ACTIVITY_STEP,
    REASON_CREATE_DENIED,
    REASON_DROPDOWN,
    REASON_INCOMPLETE_NEW_BUTTON,
    REASON_NO_ACTION,
    REASON_POLICY_GAP,
    REASON_UNSUPPORTED_ACTION,
    REASON_UNSUPPORTED_ELEMENT,
)
from rolereach.domain.model_nodes import (
    ActionButton,
    CallWorkflowAction,
    CallWorkflowStep,
    ClientAction,
    DataViewActionButton,
    DropdownButton,
    GridEditButton,
    HomeTarget,
    ListView,
    MenuItem,
    NewButton,
    NodeRef,
    OpenScreenAction,
    Role,
    RoleHome,
    ShowHomeScreenStep,
    ShowScreenStep,
    WorkflowStep,
)
from rolereach.domain.targets import (
    ActionTarget,
    OpenHomeScreen,
    OpenScreen,
    OpenWorkflow,
    Unhandled,
)

logger = logging.getLogger(__name__)


class ActionClassifier:
    """
    Stateless apart from its collaborators; safe to share between threads.
    """

    def __init__(self, resolver: NodeResolver, stats: Optional[TraversalStats] = None) -> None:
        self._resolver = resolver
        self._stats = stats or TraversalStats()

    def classify(self, actionable: Any, role: Role) -> ActionTarget:
        """
        Classify `actionable` for `role`.

        Unhandled results are counted by reason and logged at DEBUG; they
        never raise.

        Raises:
            ResolutionError: The entity of a creation button cannot be loaded.
        """
        target = self._classify(actionable, role)
        if isinstance(target, Unhandled):
            self._stats.record_unhandled(target.reason)
            logger.debug(f"Unhandled action ({target.reason}) for {role.name}: {target.detail}")
        return target

    def _classify(self, actionable: Any, role: Role) -> ActionTarget:
        if actionable is None:
            return Unhandled(REASON_NO_ACTION, "null element")

        if isinstance(actionable, (ActionButton, DataViewActionButton)):
            return _from_client_action(actionable.action, actionable.caption)

        if isinstance(actionable, ListView):
            return _from_client_action(actionable.click_action, "list view")

        if isinstance(actionable, MenuItem):
            return _from_client_action(actionable.action, actionable.caption)

        if isinstance(actionable, GridEditButton):
            if actionable.screen is None:
                return Unhandled(REASON_NO_ACTION, actionable.caption)
            return OpenScreen(actionable.screen)

        if isinstance(actionable, NewButton):
            return self._classify_new_button(actionable, role)

        if isinstance(actionable, DropdownButton):
            return Unhandled(REASON_DROPDOWN, actionable.caption)

        if isinstance(actionable, WorkflowStep):
            return _from_step(actionable)

        if isinstance(actionable, (HomeTarget, RoleHome)):
            return _from_home(actionable)

        return Unhandled(REASON_UNSUPPORTED_ELEMENT, type(actionable).__name__)

    def _classify_new_button(self, button: NewButton, role: Role) -> ActionTarget:
        if button.screen is None or button.entity is None:
            return Unhandled(REASON_INCOMPLETE_NEW_BUTTON, button.caption)

        entity = self._resolver.resolve(button.entity)
        if not access_policy.has_access_rules(entity):
            return Unhandled(REASON_POLICY_GAP, f"{entity.qualified_name} has no access rules")
        if not access_policy.can_create(entity, role):
            return Unhandled(REASON_CREATE_DENIED, entity.qualified_name)
        return OpenScreen(button.screen)

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _from_client_action(action: Optional[ClientAction], label: str) -> ActionTarget:
    if action is None:
        return Unhandled(REASON_NO_ACTION, label)
    if isinstance(action, OpenScreenAction):
        return _open_screen(action.screen, label)
    if isinstance(action, CallWorkflowAction):
        return _open_workflow(action.workflow, label)
    return Unhandled(REASON_UNSUPPORTED_ACTION, f"{label}: {action.kind}")


def _from_step(step: WorkflowStep) -> ActionTarget:
    if step.kind != ACTIVITY_STEP:
        return Unhandled(REASON_UNSUPPORTED_ELEMENT, step.kind)

    action = step.action
    if action is None:
        return Unhandled(REASON_NO_ACTION, "activity without action")
    if isinstance(action, ShowScreenStep):
        return _open_screen(action.screen, "show screen step")
    if isinstance(action, ShowHomeScreenStep):
        return OpenHomeScreen()
    if isinstance(action, CallWorkflowStep):
        return _open_workflow(action.workflow, "call workflow step")
    return Unhandled(REASON_UNSUPPORTED_ACTION, action.kind)


def _from_home(home: Union[HomeTarget, RoleHome]) -> ActionTarget:
    # Screen takes precedence when a profile names both
    if home.screen is not None:
        return OpenScreen(home.screen)
    if home.workflow is not None:
        return OpenWorkflow(home.workflow)
    return Unhandled(REASON_NO_ACTION, "empty home")


def _open_screen(ref: Optional[NodeRef], label: str) -> ActionTarget:
    return OpenScreen(ref) if ref is not None else Unhandled(REASON_NO_ACTION, label)


def _open_workflow(ref: Optional[NodeRef], label: str) -> ActionTarget:
    return OpenWorkflow(ref) if ref is not None else Unhandled(REASON_NO_ACTION, label)
