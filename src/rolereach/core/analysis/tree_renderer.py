from __future__ import annotations

"""
Tree Renderer.

Converts the reachability tree into a visual ASCII representation for
terminal output. Children are rendered in discovery order.
"""

from typing import List, Tuple

from rolereach.domain.tree_models import Item

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def render_tree(root: Item) -> List[str]:
    """
    Render `root` and all its descendants.

    Returns:
        List[str]: One line per node, the root label first.
    """
    lines: List[str] = [root.name]
    render_tree_structure(root, lines)
    return lines


def render_tree_structure(node: Item, lines: List[str], prefix: str = "") -> None:
    """
    Transform the descendants of `node` into a list of strings.

    Uses standard ASCII connectors (├──, └──) and manages indentation
    levels for nested entries. Walks with an explicit stack, children in
    discovery order.

    Args:
        node: Current tree node to process.
        lines: Accumulator list for output strings.
        prefix: Indentation prefix of the first level.
    """
    stack: List[Tuple[Item, str, bool]] = [
        (child, prefix, i == len(node.children) - 1)
        for i, child in reversed(list(enumerate(node.children)))
    ]

    while stack:
        child, child_prefix, is_last = stack.pop()
        connector = "└── " if is_last else "├── "
        lines.append(f"{child_prefix}{connector}{child.name}")

        if child.children:
            new_prefix = child_prefix + ("    " if is_last else "│   ")
            total = len(child.children)
            stack.extend(
                (grandchild, new_prefix, i == total - 1)
                for i, grandchild in reversed(list(enumerate(child.children)))
            )
