from __future__ import annotations

"""
Reachability Traversal Engine.

Depth-first, permission-aware expansion of screens and workflows into the
output tree. For every accepted node the engine:
1. Gates entry through the Access Policy Evaluator.
2. Records the node unless its name is already on the path or among the
   parent's children (this is what terminates graph cycles).
3. Discovers the node's actionable elements, classifies them, fetches the
   targets concurrently and expands them in declared order.

Expansion is driven by an explicit stack of sibling batches rather than
recursion, so arbitrarily long navigation chains are supported.
"""

import logging
import threading
from typing import Iterator, List, Optional, Sequence, Tuple, Union

from rolereach.core.analysis.action_classifier import ActionClassifier
from rolereach.core.analysis.structure_scanner import Actionable, yield_structures
from rolereach.core.analysis.tree_builder import TreeBuilder
from rolereach.core.services import access_policy
from rolereach.core.services.resolver import NodeResolver
from rolereach.core.services.stats import DENIED, ITEMS, SUPPRESSED, TraversalStats
from rolereach.domain.constants import ACTIVITY_STEP, HOME_SCREEN_LEAF
from rolereach.domain.errors import TraversalCancelledError
from rolereach.domain.model_nodes import FragmentCall, Role, Screen, Widget, Workflow
from rolereach.domain.targets import ActionTarget, OpenHomeScreen, OpenScreen, OpenWorkflow
from rolereach.domain.tree_models import Item

logger = logging.getLogger(__name__)

# Parent entry, its pending (target, loaded node) pairs, workflow origin
_Frame = Tuple[Item, Iterator[Tuple[ActionTarget, Union[Screen, Workflow, None]]], bool]


class TraversalEngine:
    """
    Expands reachable screens and workflows for one audit run.

    One engine is shared by all role workers. Each role is expanded on the
    worker's own thread; tree writes go through the TreeBuilder lock.
    """

    def __init__(
            self,
            resolver: NodeResolver,
            classifier: ActionClassifier,
            builder: TreeBuilder,
            stats: Optional[TraversalStats] = None,
            cancel_event: Optional[threading.Event] = None,
            strict_workflow_screens: bool = False,
    ) -> None:
        self._resolver = resolver
        self._classifier = classifier
        self._builder = builder
        self._stats = stats or TraversalStats()
        self._cancel_event = cancel_event or threading.Event()
        self._strict_workflow_screens = strict_workflow_screens

    # -------------------------------------------------------------------------
    # PUBLIC API
    # -------------------------------------------------------------------------

    def expand(
            self,
            parent: Item,
            node: Union[Screen, Workflow, None],
            role: Role,
            called_from_workflow: bool = False,
    ) -> Optional[Item]:
        """
        Record `node` below `parent` and expand everything it reaches.

        Args:
            parent: Output node the new entry is attached to.
            node: Loaded screen or workflow (None is a no-op).
            role: Role whose permissions gate the walk.
            called_from_workflow: True when a workflow step shows this
                screen; such screens skip the entry check unless
                strict_workflow_screens is enabled.

        Returns:
            Optional[Item]: The new entry, or None if denied or suppressed.

        Raises:
            ResolutionError: A referenced node could not be loaded.
            TraversalCancelledError: The run was cancelled.
        """
        self._check_cancelled()
        stack: List[_Frame] = []
        item = self._enter(parent, node, role, called_from_workflow, stack)
        self._drain(stack, role)
        return item

    def follow(
            self,
            parent: Item,
            targets: Sequence[ActionTarget],
            role: Role,
            called_from_workflow: bool = False,
    ) -> None:
        """
        Expand classified targets below `parent`.

        Screens and workflows are fetched concurrently, then expanded one by
        one in declared order, each subtree completed before the next
        sibling. OpenHomeScreen records a leaf; Unhandled targets are terminal.
        """
        self._drain([self._frame(parent, targets, called_from_workflow)], role)

    # -------------------------------------------------------------------------
    # PRIVATE HELPERS
    # -------------------------------------------------------------------------

    def _frame(self, parent: Item, targets: Sequence[ActionTarget], called_from_workflow: bool) -> _Frame:
        """Fetch the targets of one parent and pair each with its loaded node."""
        refs = [t.ref for t in targets if isinstance(t, (OpenScreen, OpenWorkflow))]
        nodes: Iterator = iter(self._resolver.resolve_all(refs))
        pending = [
            (t, next(nodes) if isinstance(t, (OpenScreen, OpenWorkflow)) else None)
            for t in targets
        ]
        return parent, iter(pending), called_from_workflow

    def _drain(self, stack: List[_Frame], role: Role) -> None:
        """Depth-first expansion driven by an explicit stack of sibling batches."""
        while stack:
            self._check_cancelled()
            parent, pending, called_from_workflow = stack[-1]
            entry = next(pending, None)
            if entry is None:
                stack.pop()
                continue

            target, node = entry
            if isinstance(target, (OpenScreen, OpenWorkflow)):
                self._enter(parent, node, role, called_from_workflow, stack)
            elif isinstance(target, OpenHomeScreen):
                if self._builder.attach_if_absent(parent, HOME_SCREEN_LEAF) is not None:
                    self._stats.record(ITEMS)

    def _enter(
            self,
            parent: Item,
            node: Union[Screen, Workflow, None],
            role: Role,
            called_from_workflow: bool,
            stack: List[_Frame],
    ) -> Optional[Item]:
        """Gate and record one node, pushing its targets onto `stack`."""
        if node is None:
            return None

        if isinstance(node, Screen):
            gated = self._strict_workflow_screens or not called_from_workflow
        elif isinstance(node, Workflow):
            gated = True
        else:
            raise TypeError(f"Cannot expand {type(node).__name__}; expected Screen or Workflow.")

        if gated and not access_policy.can_enter(node, role):
            self._stats.record(DENIED)
            logger.debug(f"{role.name}: access to '{node.qualified_name}' denied.")
            return None

        item = self._builder.attach_if_absent(parent, node.name)
        if item is None:
            self._stats.record(SUPPRESSED)
            return None

        self._stats.record(ITEMS)
        logger.debug(f"{role.name}: reached {type(node).__name__.lower()} '{node.name}' via {item.parent}")

        if isinstance(node, Screen):
            elements = self._collect_elements(node.widgets, ())
            targets = [self._classifier.classify(e, role) for e in elements]
            stack.append(self._frame(item, targets, False))
        else:
            steps = [s for s in node.steps if s.kind == ACTIVITY_STEP]
            targets = [self._classifier.classify(s, role) for s in steps]
            stack.append(self._frame(item, targets, True))

        return item

    def _collect_elements(self, widgets: Sequence[Widget], inlined: Tuple[str, ...]) -> List[Actionable]:
        """
        Actionable elements of a widget tree with fragment calls inlined.

        A fragment's elements take the place of its call. Fragments already
        being inlined on the current path are skipped.
        """
        elements: List[Actionable] = []
        for element in yield_structures(widgets):
            if not isinstance(element, FragmentCall):
                elements.append(element)
                continue

            ref = element.fragment
            if ref is None:
                continue
            if ref.qualified_name in inlined:
                self._stats.record(SUPPRESSED)
                logger.debug(f"Fragment '{ref.qualified_name}' includes itself; skipped.")
                continue

            self._check_cancelled()
            fragment = self._resolver.resolve(ref)
            elements.extend(self._collect_elements(fragment.widgets, inlined + (ref.qualified_name,)))
        return elements

    def _check_cancelled(self) -> None:
        if self._cancel_event.is_set():
            raise TraversalCancelledError("Traversal cancelled.")
