from __future__ import annotations

"""
Access Policy Evaluator.

Pure predicates deciding whether a role may enter a screen or workflow, or
create an entity. Overlap between the role's module roles and the node's
allowed module roles grants access; absent lists deny.
"""

from typing import Iterable, Set, Union

from rolereach.domain.model_nodes import Entity, Role, Screen, Workflow


def can_enter(node: Union[Screen, Workflow], role: Role) -> bool:
    """
    Check whether `role` may open a screen or execute a workflow.

    Args:
        node: The loaded screen or workflow.
        role: The user role under audit.

    Returns:
        bool: True if at least one module role is shared.
    """
    return bool(_as_set(node.allowed_roles) & _as_set(role.module_roles))


def can_create(entity: Entity, role: Role) -> bool:
    """
    Check whether `role` may create objects of `entity`.

    A rule grants creation only if it applies to one of the role's module
    roles and has its create flag set.
    """
    role_modules = _as_set(role.module_roles)
    for rule in entity.access_rules or []:
        if rule.allow_create and _as_set(rule.module_roles) & role_modules:
            return True
    return False


def has_access_rules(entity: Entity) -> bool:
    """False when the entity carries no rule at all (deny-by-default gap)."""
    return bool(entity.access_rules)


def _as_set(values: Iterable[str]) -> Set[str]:
    return set(values or ())
