from __future__ import annotations

"""
Unit tests for the TreeBuilder.

Verifies the suppression rule (self, ancestors, siblings; exact equality)
and that concurrent attach_if_absent calls never produce duplicate siblings.
"""

from concurrent.futures import ThreadPoolExecutor

from rolereach.core.analysis.tree_builder import TreeBuilder
from rolereach.domain.constants import ROOT_NAME


def test_root_and_parent_paths() -> None:
    builder = TreeBuilder()
    role = builder.attach(builder.root, "Anonymous")
    login = builder.attach(role, "Login")

    assert builder.root.name == ROOT_NAME
    assert builder.root.parent is None
    assert role.parent == "User Roles"
    assert login.parent == "Anonymous,User Roles"


def test_already_present_covers_self_ancestors_and_siblings() -> None:
    builder = TreeBuilder()
    role = builder.attach(builder.root, "User")
    home = builder.attach(role, "Home")
    builder.attach(home, "Orders")

    assert builder.already_present("Home", home) is True  # self
    assert builder.already_present("User", home) is True  # ancestor
    assert builder.already_present("Orders", home) is True  # sibling
    assert builder.already_present("Invoices", home) is False


def test_exact_equality_not_substring() -> None:
    """'Home' must not be suppressed because an ancestor is 'HomePage'."""
    builder = TreeBuilder()
    role = builder.attach(builder.root, "User")
    page = builder.attach(role, "HomePage")

    assert builder.attach_if_absent(page, "Home") is not None
    assert builder.attach_if_absent(page, "Page") is not None


def test_attach_if_absent_returns_none_for_duplicates() -> None:
    builder = TreeBuilder()
    role = builder.attach(builder.root, "User")
    first = builder.attach_if_absent(role, "Home")

    assert first is not None
    assert builder.attach_if_absent(role, "Home") is None
    assert role.child_names() == ["Home"]


def test_concurrent_attach_keeps_siblings_unique() -> None:
    builder = TreeBuilder()
    role = builder.attach(builder.root, "User")
    names = [f"S{i % 10}" for i in range(200)]

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(lambda n: builder.attach_if_absent(role, n), names))

    assert sorted(role.child_names()) == sorted({f"S{i}" for i in range(10)})
