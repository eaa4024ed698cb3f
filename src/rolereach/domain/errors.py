from __future__ import annotations

"""
Reachability Error Taxonomy.

Every failure raised by the audit derives from ReachabilityError so the
pipeline boundary can convert it into a failed AuditResult. Gaps that are
not failures (unclassified actions, entities without access rules) are
modelled as Unhandled targets instead, see domain.targets.
"""

from typing import Optional

from rolereach.domain.model_nodes import NodeRef


class ReachabilityError(Exception):
    """Base class for every error raised while auditing reachability."""


class ResolutionError(ReachabilityError):
    """
    The repository could not resolve or load a referenced node.

    Attributes:
        ref: The reference that failed, when known.
    """

    def __init__(self, message: str, ref: Optional[NodeRef] = None) -> None:
        super().__init__(message)
        self.ref = ref


class ModelDecodeError(ResolutionError):
    """A repository document was fetched but could not be decoded."""


class SecurityLoadError(ReachabilityError):
    """The project security model failed to load. Fatal before traversal."""


class TraversalTimeoutError(ReachabilityError):
    """The overall audit deadline elapsed before every role completed."""


class TraversalCancelledError(ReachabilityError):
    """A branch stopped because the run was cancelled elsewhere."""
