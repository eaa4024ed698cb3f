from __future__ import annotations

"""
Node Resolver Service.

Turns lazy NodeRef references into fully loaded units by calling the model
repository. Batches of independent references are fetched concurrently on a
dedicated thread pool; results always come back in the declared order so
the tree built from them is deterministic.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import List, Optional, Sequence

from rolereach.core.services.stats import FETCHES, TraversalStats
from rolereach.domain.constants import KIND_ENTITY, KIND_FRAGMENT, KIND_SCREEN, KIND_WORKFLOW
from rolereach.domain.errors import ReachabilityError, ResolutionError
from rolereach.domain.model_nodes import Entity, Fragment, NodeRef, Screen, Unit, Workflow
from rolereach.infra.repository.base import ModelRepository

logger = logging.getLogger(__name__)

_EXPECTED_TYPES = {
    KIND_SCREEN: Screen,
    KIND_WORKFLOW: Workflow,
    KIND_FRAGMENT: Fragment,
    KIND_ENTITY: Entity,
}


class NodeResolver:
    """
    Repository facade used by the traversal.

    Pool tasks only call the repository and never submit further work, so
    callers may block on them from any thread without risking a deadlock.
    """

    def __init__(
            self,
            repository: ModelRepository,
            max_workers: int = 8,
            stats: Optional[TraversalStats] = None,
    ) -> None:
        self._repository = repository
        self._stats = stats or TraversalStats()
        self._executor = ThreadPoolExecutor(
            max_workers=max(1, int(max_workers)),
            thread_name_prefix="NodeFetch",
        )

    def __enter__(self) -> "NodeResolver":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._executor.shutdown(wait=False, cancel_futures=True)

    def resolve(self, ref: NodeRef) -> Unit:
        """
        Fetch the fully loaded unit behind `ref`.

        Raises:
            ResolutionError: Dangling reference, kind mismatch or repository failure.
        """
        logger.debug(f"Resolving {ref}")
        self._stats.record(FETCHES)
        try:
            node = self._repository.resolve(ref)
        except ReachabilityError:
            raise
        except (OSError, ValueError, LookupError) as e:
            raise ResolutionError(f"Repository failed to resolve {ref}: {e}", ref) from e

        expected = _EXPECTED_TYPES.get(ref.kind)
        if expected is None or not isinstance(node, expected):
            raise ResolutionError(
                f"Reference {ref} resolved to {type(node).__name__}", ref
            )
        return node

    def resolve_all(self, refs: Sequence[NodeRef]) -> List[Unit]:
        """
        Fetch several references concurrently.

        Returns:
            List[Unit]: Loaded units, index-aligned with `refs`.

        Raises:
            ResolutionError: The first failure in declared order; the
                remaining fetches are cancelled.
        """
        if not refs:
            return []
        if len(refs) == 1:
            return [self.resolve(refs[0])]

        futures: List[Future] = [self._executor.submit(self.resolve, ref) for ref in refs]
        try:
            return [f.result() for f in futures]
        except BaseException:
            for f in futures:
                f.cancel()
            raise
