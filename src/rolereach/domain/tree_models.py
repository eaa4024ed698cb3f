from __future__ import annotations

"""
Reachability Tree Data Models.

Provides the recursive output node used to record what each role can reach.
Nodes are only ever appended to; mutation goes through the TreeBuilder,
which holds the lock guarding every children list.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

from rolereach.domain.constants import PATH_SEPARATOR

# -----------------------------------------------------------------------------
# STRUCTURAL COMPONENTS
# -----------------------------------------------------------------------------

@dataclass
class Item:
    """
    One node of the reachability tree.

    Attributes:
        name: Display label (role, screen, workflow or leaf marker).
        children: Child nodes in discovery order.
        ancestors: Names of every ancestor, nearest first.
    """
    name: str
    children: List["Item"] = field(default_factory=list)
    ancestors: Tuple[str, ...] = ()

    @property
    def parent(self) -> Optional[str]:
        """Comma-joined ancestor path as written to the document (None on the root)."""
        if not self.ancestors:
            return None
        return PATH_SEPARATOR.join(self.ancestors)

    @property
    def lineage(self) -> Tuple[str, ...]:
        """This node's name followed by its ancestors."""
        return (self.name,) + self.ancestors

    def child_names(self) -> List[str]:
        return [c.name for c in self.children]

    def walk(self) -> Iterator["Item"]:
        """Depth-first, pre-order iteration over this subtree."""
        stack: List[Item] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def find(self, name: str) -> Optional["Item"]:
        """First node of this subtree (pre-order) carrying `name`."""
        for node in self.walk():
            if node.name == name:
                return node
        return None

    def depth(self) -> int:
        """Number of edges on the longest path down from this node."""
        deepest = 0
        stack: List[Tuple[Item, int]] = [(self, 0)]
        while stack:
            node, level = stack.pop()
            deepest = max(deepest, level)
            stack.extend((c, level + 1) for c in node.children)
        return deepest

    def to_dict(self) -> Dict[str, Any]:
        """Serialize into the JSON-compatible document shape."""
        document = self._entry()
        stack: List[Tuple[Item, Dict[str, Any]]] = [(self, document)]
        while stack:
            node, entry = stack.pop()
            for child in node.children:
                child_entry = child._entry()
                entry["children"].append(child_entry)
                stack.append((child, child_entry))
        return document

    def _entry(self) -> Dict[str, Any]:
        return {"name": self.name, "children": [], "parent": self.parent}

    @classmethod
    def from_dict(cls, data: Dict[str, Any], ancestors: Tuple[str, ...] = ()) -> "Item":
        """
        Rebuild a tree from its document shape.

        Ancestors are recomputed from the nesting, so a re-parsed tree has
        the same parent paths as the one that was serialized.
        """
        node = cls(name=str(data.get("name", "")), ancestors=ancestors)
        for child in data.get("children") or []:
            node.children.append(cls.from_dict(child, node.lineage))
        return node
