from __future__ import annotations

"""
Action Target Variants.

Normalized outcome of classifying any actionable node. The variant set is
closed: consumers dispatch with isinstance and finish with the Unhandled arm.
"""

from dataclasses import dataclass
from typing import Union

from rolereach.domain.model_nodes import NodeRef


@dataclass(frozen=True)
class OpenScreen:
    ref: NodeRef


@dataclass(frozen=True)
class OpenWorkflow:
    ref: NodeRef


@dataclass(frozen=True)
class OpenHomeScreen:
    pass


@dataclass(frozen=True)
class Unhandled:
    """
    Terminal leaf: nothing to expand.

    Attributes:
        reason: Short code from domain.constants (REASON_*).
        detail: Free text for diagnostics (caption, action kind, ...).
    """
    reason: str
    detail: str = ""


ActionTarget = Union[OpenScreen, OpenWorkflow, OpenHomeScreen, Unhandled]
