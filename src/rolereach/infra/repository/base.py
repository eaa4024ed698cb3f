from __future__ import annotations

import abc
from typing import Optional

from rolereach.domain.model_nodes import NavigationDocument, NodeRef, ProjectSecurity, Role, Unit


class ModelRepository(abc.ABC):
    """
    Source of the application model.

    Implementations must be safe to call from several threads at once: the
    Node Resolver fetches sibling units concurrently.
    """

    @abc.abstractmethod
    def fetch_security_model(self) -> ProjectSecurity:
        """Load the project security (user roles). Raises SecurityLoadError."""

    @abc.abstractmethod
    def fetch_navigation(self, role: Role) -> Optional[NavigationDocument]:
        """Navigation document applying to `role`, or None if the project has none."""

    @abc.abstractmethod
    def resolve(self, ref: NodeRef) -> Unit:
        """Fully loaded unit behind `ref`. Raises ResolutionError."""

    def close(self) -> None:
        """Release any held resources."""
