from __future__ import annotations

"""
Structure Scanner.

Walks the widget tree of a screen or fragment and yields every actionable
element (buttons, control-bar buttons, list views, fragment calls) in
document order. The walk covers the whole sub-tree: a button nested inside
a list view is reported after the list view itself.
"""

from typing import Iterator, Sequence, Union

from rolereach.domain.model_nodes import (
    ActionButton,
    Container,
    DataViewActionButton,
    DropdownButton,
    FragmentCall,
    GridEditButton,
    ListView,
    NewButton,
    Widget,
)

Actionable = Union[
    ActionButton,
    DropdownButton,
    NewButton,
    GridEditButton,
    DataViewActionButton,
    ListView,
    FragmentCall,
]

_ACTIONABLE_TYPES = (
    ActionButton,
    DropdownButton,
    NewButton,
    GridEditButton,
    DataViewActionButton,
    ListView,
    FragmentCall,
)


def yield_structures(widgets: Sequence[Widget]) -> Iterator[Actionable]:
    """
    Depth-first, pre-order scan for actionable elements.

    Args:
        widgets: Top-level widgets of a screen or fragment.

    Yields:
        Actionable: Every actionable element, in document order.
    """
    for widget in widgets or []:
        if isinstance(widget, _ACTIONABLE_TYPES):
            yield widget
        # Only containers and list views nest further widgets
        if isinstance(widget, (Container, ListView)):
            yield from yield_structures(widget.widgets)
