from __future__ import annotations

"""
Unit tests for the Structure Scanner.

Verifies that nested actionable elements are found in document order and
that plain containers are descended into but never reported.
"""

from rolereach.core.analysis.structure_scanner import yield_structures
from rolereach.domain.model_nodes import (
    ActionButton,
    Container,
    DataViewActionButton,
    FragmentCall,
    GridEditButton,
    ListView,
    fragment_ref,
)


def test_scan_is_preorder_and_covers_the_subtree() -> None:
    inner_button = ActionButton(caption="Inner")
    list_view = ListView(widgets=[Container(widgets=[inner_button])])
    grid_edit = GridEditButton(caption="Edit")
    fragment = FragmentCall(fragment=fragment_ref("App.Header"))
    widgets = [
        Container(kind="layout_grid", widgets=[
            ActionButton(caption="First"),
            Container(widgets=[list_view]),
        ]),
        Container(kind="data_grid", widgets=[grid_edit, DataViewActionButton(caption="Save")]),
        fragment,
    ]

    found = list(yield_structures(widgets))

    assert [type(w).__name__ for w in found] == [
        "ActionButton", "ListView", "ActionButton",
        "GridEditButton", "DataViewActionButton", "FragmentCall",
    ]
    assert found[2] is inner_button
    assert found[-1] is fragment


def test_scan_of_empty_tree() -> None:
    assert list(yield_structures([])) == []
    assert list(yield_structures([Container(widgets=[Container()])])) == []
