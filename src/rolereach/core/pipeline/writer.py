from __future__ import annotations

"""
Reachability Document Writer.

Serializes the completed tree to JSON and publishes it atomically.

Objects are emitted line by line from an explicit stack, so arbitrarily
deep trees serialize. The layout is identical to
`json.dumps(root.to_dict(), indent=2)`.
"""

import json
import logging
from typing import Iterator, List, Tuple, Union

from rolereach.domain.tree_models import Item
from rolereach.infra.fs import write_text_atomic

logger = logging.getLogger(__name__)

_INDENT = "  "


def serialize_tree(root: Item) -> str:
    """Render the `{name, children, parent}` document of `root`."""
    return "\n".join(_document_lines(root))


def write_document(root: Item, path: str) -> None:
    """
    Write the reachability document to `path`.

    Raises:
        OSError: If the destination cannot be written.
    """
    write_text_atomic(path, serialize_tree(root) + "\n")
    logger.info(f"Reachability document written to {path}")

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _document_lines(root: Item) -> Iterator[str]:
    # Stack entries are literal lines or (item, level, trailing comma) objects
    stack: List[Union[str, Tuple[Item, int, bool]]] = [(root, 0, False)]

    while stack:
        entry = stack.pop()
        if isinstance(entry, str):
            yield entry
            continue

        item, level, comma = entry
        pad = _INDENT * level
        inner = _INDENT * (level + 1)

        yield f"{pad}{{"
        yield f'{inner}"name": {_scalar(item.name)},'

        closing: List[str] = [
            f'{inner}"parent": {_scalar(item.parent)}',
            f"{pad}}}" + ("," if comma else ""),
        ]
        if not item.children:
            yield f'{inner}"children": [],'
            stack.extend(reversed(closing))
            continue

        yield f'{inner}"children": ['
        stack.extend(reversed(closing))
        stack.append(f"{inner}],")
        total = len(item.children)
        for i in range(total - 1, -1, -1):
            stack.append((item.children[i], level + 2, i < total - 1))


def _scalar(value: object) -> str:
    return json.dumps(value, ensure_ascii=False)
