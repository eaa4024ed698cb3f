from __future__ import annotations

"""
Role Orchestrator.

Drives one complete audit:
1. Loads the project security model.
2. Attaches one entry per user role below the root, in declared order.
3. Audits the roles concurrently, each starting from its navigation home
   and menu, and waits for all of them under an overall deadline.

The first failing role cancels every other role and its error is re-raised.
"""

import logging
import threading
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from typing import Dict, Iterator, List, Optional, Sequence, Union

from rolereach.core.analysis.action_classifier import ActionClassifier
from rolereach.core.analysis.traversal import TraversalEngine
from rolereach.core.analysis.tree_builder import TreeBuilder
from rolereach.core.services.resolver import NodeResolver
from rolereach.core.services.stats import TraversalStats
from rolereach.domain.errors import (
    ReachabilityError,
    ResolutionError,
    SecurityLoadError,
    TraversalCancelledError,
    TraversalTimeoutError,
)
from rolereach.domain.model_nodes import (
    HomeTarget,
    MenuItem,
    NavigationDocument,
    NavigationProfile,
    ProjectSecurity,
    Role,
    RoleHome,
)
from rolereach.domain.tree_models import Item
from rolereach.infra.repository.base import ModelRepository

logger = logging.getLogger(__name__)


class RoleOrchestrator:
    """
    Builds the reachability tree of every user role of a project.

    Attributes:
        builder: Owner of the output tree.
        stats: Counters shared by every component of the run.
        cancel_event: Set once the run fails or times out.
    """

    def __init__(
            self,
            repository: ModelRepository,
            *,
            fetch_workers: int = 8,
            role_workers: int = 4,
            deadline_seconds: Optional[float] = 300,
            strict_workflow_screens: bool = False,
            stats: Optional[TraversalStats] = None,
    ) -> None:
        self._repository = repository
        self._fetch_workers = max(1, int(fetch_workers))
        self._role_workers = max(1, int(role_workers))
        self._deadline = deadline_seconds
        self._strict_workflow_screens = strict_workflow_screens

        self.builder = TreeBuilder()
        self.stats = stats or TraversalStats()
        self.cancel_event = threading.Event()

    # -------------------------------------------------------------------------
    # PUBLIC API
    # -------------------------------------------------------------------------

    def run(self) -> Item:
        """
        Audit every role and return the root of the completed tree.

        Returns:
            Item: The 'User Roles' root.

        Raises:
            SecurityLoadError: The security model could not be loaded.
            TraversalTimeoutError: The deadline elapsed first.
            ReachabilityError: The first failure of any role.
        """
        security = self._load_security()
        root = self.builder.root

        work: List[tuple] = []
        for role in security.user_roles:
            item = self.builder.attach_if_absent(root, role.name)
            if item is None:
                logger.warning(f"Duplicate user role '{role.name}' ignored.")
                continue
            work.append((role, item))

        if not work:
            logger.warning("Security model declares no user roles.")
            return root

        logger.info(f"Auditing {len(work)} user role(s) with {self._role_workers} worker(s).")

        with NodeResolver(self._repository, self._fetch_workers, self.stats) as resolver:
            classifier = ActionClassifier(resolver, self.stats)
            engine = TraversalEngine(
                resolver,
                classifier,
                self.builder,
                self.stats,
                self.cancel_event,
                strict_workflow_screens=self._strict_workflow_screens,
            )

            executor = ThreadPoolExecutor(max_workers=self._role_workers, thread_name_prefix="RoleWorker")
            futures: List[Future] = [
                executor.submit(self._process_role, engine, classifier, role, item)
                for role, item in work
            ]
            try:
                self._await(futures)
            except BaseException:
                self.cancel_event.set()
                executor.shutdown(wait=False, cancel_futures=True)
                raise
            executor.shutdown(wait=True)

        return root

    # -------------------------------------------------------------------------
    # PRIVATE HELPERS
    # -------------------------------------------------------------------------

    def _load_security(self) -> ProjectSecurity:
        try:
            return self._repository.fetch_security_model()
        except SecurityLoadError:
            raise
        except Exception as e:
            raise SecurityLoadError(f"Failed to load security model: {e}") from e

    def _await(self, futures: Sequence[Future]) -> None:
        done, pending = wait(futures, timeout=self._deadline, return_when=FIRST_EXCEPTION)

        failed = [f for f in futures if f in done and f.exception() is not None]
        if failed:
            # Branches stopped by cancellation only echo the real cause
            causes = [f for f in failed if not isinstance(f.exception(), TraversalCancelledError)]
            error = (causes or failed)[0].exception()
            logger.error(f"Role audit failed: {error}")
            raise error

        if pending:
            msg = f"Audit did not complete within {self._deadline} seconds ({len(pending)} role(s) pending)."
            logger.error(msg)
            raise TraversalTimeoutError(msg)

    def _process_role(
            self,
            engine: TraversalEngine,
            classifier: ActionClassifier,
            role: Role,
            item: Item,
    ) -> None:
        logger.info(f"Role '{role.name}': traversal started.")
        if self.cancel_event.is_set():
            raise TraversalCancelledError("Traversal cancelled.")

        navigation = self._fetch_navigation(role)
        profile = _select_profile(navigation)
        if profile is None:
            logger.info(f"Role '{role.name}': no navigation document, nothing reachable.")
            return

        start: List[Union[HomeTarget, RoleHome, MenuItem, None]] = [_home_for(profile, role)]
        start.extend(flatten_menu(profile.menu_items))

        targets = [classifier.classify(element, role) for element in start]
        engine.follow(item, targets, role, called_from_workflow=False)

        logger.info(f"Role '{role.name}': traversal finished ({len(item.children)} entry point(s)).")

    def _fetch_navigation(self, role: Role) -> Optional[NavigationDocument]:
        try:
            return self._repository.fetch_navigation(role)
        except ReachabilityError:
            raise
        except Exception as e:
            raise ResolutionError(f"Failed to load navigation for role '{role.name}': {e}") from e

# -----------------------------------------------------------------------------
# NAVIGATION HELPERS
# -----------------------------------------------------------------------------

def flatten_menu(items: Sequence[MenuItem]) -> Iterator[MenuItem]:
    """Yield menu items depth-first, each parent before its sub-menu."""
    for menu_item in items or []:
        yield menu_item
        yield from flatten_menu(menu_item.items)


def _select_profile(navigation: Optional[NavigationDocument]) -> Optional[NavigationProfile]:
    if navigation is None or not navigation.profiles:
        return None

    profile = navigation.profiles[0]
    if len(navigation.profiles) > 1:
        ignored = ", ".join(p.name or "<unnamed>" for p in navigation.profiles[1:])
        logger.warning(f"Only navigation profile '{profile.name}' is audited; ignored: {ignored}.")
    return profile


def _home_for(profile: NavigationProfile, role: Role) -> Union[HomeTarget, RoleHome, None]:
    overrides: Dict[str, RoleHome] = {}
    for role_home in profile.role_homes:
        overrides.setdefault(role_home.user_role, role_home)
    return overrides.get(role.name, profile.home)
