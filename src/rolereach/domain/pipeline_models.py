from __future__ import annotations

"""
Audit Pipeline Data Models.

Defines the result object and factory functions used to hand the outcome of
an audit run from the pipeline engine to the interface layer.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from rolereach.domain.tree_models import Item

# -----------------------------------------------------------------------------
# CORE DATA MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class AuditResult:
    """
    Unified result of one reachability audit.

    A run either produces a complete tree or nothing: on failure `tree` is
    None and no document is written.

    Attributes:
        ok: Flag indicating success or failure.
        error: Descriptive message in case of failure.
        source: Model source used ('snapshot' or 'remote').
        output_path: Destination of the JSON document.
        written: Whether the document was actually written (False on dry runs).
        tree: Root of the reachability tree.
        tree_lines: ASCII rendering of the tree, when requested.
        stats: Traversal counters (fetches, denials, suppressions, gaps).
        summary: Technical execution summary.
    """
    ok: bool
    error: str

    source: str
    output_path: str
    written: bool = False

    tree: Optional[Item] = None
    tree_lines: List[str] = field(default_factory=list)

    stats: Dict[str, int] = field(default_factory=dict)
    summary: Dict[str, Any] = field(default_factory=dict)

# -----------------------------------------------------------------------------
# FACTORY FUNCTIONS
# -----------------------------------------------------------------------------

def create_error_result(
        error: str,
        cfg: Dict[str, Any],
        stats: Optional[Dict[str, int]] = None,
        summary_extra: Optional[Dict[str, Any]] = None
) -> AuditResult:
    """
    Create a failed audit result.

    Args:
        error: Detailed error description.
        cfg: The configuration used during the failed run.
        stats: Counters collected before the failure.
        summary_extra: Additional metadata for the summary payload.

    Returns:
        AuditResult: An immutable error result object.
    """
    return AuditResult(
        ok=False,
        error=error,
        source=cfg.get("source", ""),
        output_path=cfg.get("output_path", ""),
        stats=stats or {},
        summary=summary_extra or {},
    )


def create_success_result(
        cfg: Dict[str, Any],
        tree: Item,
        written: bool,
        tree_lines: Optional[List[str]] = None,
        stats: Optional[Dict[str, int]] = None,
        summary_extra: Optional[Dict[str, Any]] = None
) -> AuditResult:
    """
    Create a successful audit result.

    Args:
        cfg: Final configuration used during execution.
        tree: The completed reachability tree.
        written: Whether the document reached the disk.
        tree_lines: Optional ASCII rendering.
        stats: Traversal counters.
        summary_extra: Final execution metrics.

    Returns:
        AuditResult: An immutable success result object.
    """
    return AuditResult(
        ok=True,
        error="",
        source=cfg.get("source", ""),
        output_path=cfg.get("output_path", ""),
        written=written,
        tree=tree,
        tree_lines=tree_lines or [],
        stats=stats or {},
        summary=summary_extra or {},
    )
