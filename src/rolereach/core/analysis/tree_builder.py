from __future__ import annotations

"""
Reachability Tree Builder.

Single owner of every mutation of the output tree. Membership checks and
appends happen under one lock, so "check, then append" is atomic even when
several role workers write at the same time.
"""

import threading
from typing import Optional

from rolereach.domain.constants import ROOT_NAME
from rolereach.domain.tree_models import Item


class TreeBuilder:
    """
    Holds the root of the tree and guards every children list.

    Attributes:
        root: The synthetic 'User Roles' root.
    """

    def __init__(self, root_name: str = ROOT_NAME) -> None:
        self.root = Item(name=root_name)
        self._lock = threading.Lock()

    def already_present(self, name: str, node: Item) -> bool:
        """
        Check whether `name` may not be added below `node`.

        True when `name` is `node` itself, any of its ancestors, or one of
        its current children. Comparison is exact.
        """
        with self._lock:
            return self._present(name, node)

    def attach(self, node: Item, name: str) -> Item:
        """Append a new child unconditionally and return it."""
        with self._lock:
            return self._append(node, name)

    def attach_if_absent(self, node: Item, name: str) -> Optional[Item]:
        """
        Append a new child unless `already_present` holds.

        Returns:
            Optional[Item]: The new child, or None if it was suppressed.
        """
        with self._lock:
            if self._present(name, node):
                return None
            return self._append(node, name)

    @staticmethod
    def _present(name: str, node: Item) -> bool:
        return name in node.lineage or any(c.name == name for c in node.children)

    @staticmethod
    def _append(node: Item, name: str) -> Item:
        child = Item(name=name, ancestors=node.lineage)
        node.children.append(child)
        return child
