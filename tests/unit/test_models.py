"""Tests for domain models."""

import pytest

from branch_graph.models.branch import (
    BranchNode,
    Edge,
    LayoutRequest,
    NodeKind,
    TentativeTask,
    freeze_sibling_order,
)
from branch_graph.models.layout import BranchLayout, Offset, Point, Rect


def test_edge_is_frozen() -> None:
    edge = Edge("main", "a")
    with pytest.raises(AttributeError):
        edge.child = "b"  # type: ignore[misc]


def test_branch_node_defaults_to_real() -> None:
    assert BranchNode("main").kind is NodeKind.REAL


def test_branch_name_wins_over_title() -> None:
    task = TentativeTask(id="t1", title="Anything", branch_name="feat/login")
    assert task.display_name == "feat/login"


def test_freeze_sibling_order_is_key_sorted() -> None:
    frozen = freeze_sibling_order({"b": ["y", "x"], "a": ["z"]})
    assert frozen == (("a", ("z",)), ("b", ("y", "x")))
    assert freeze_sibling_order(None) == ()


def test_layout_request_is_hashable() -> None:
    one = LayoutRequest.build(["main", "a"], [("main", "a")], default_branch="main")
    two = LayoutRequest.build(["main", "a"], [Edge("main", "a")], default_branch="main")
    assert one == two
    assert hash(one) == hash(two)


def test_sibling_order_map_is_a_copy() -> None:
    request = LayoutRequest.build(["main"], [], default_branch="main", sibling_order={"main": []})
    request.sibling_order_map()["main"].append("x")
    assert request.sibling_order_map() == {"main": []}


def test_rect_geometry() -> None:
    rect = Rect(10, 0, 30, 20)
    assert rect.width == 20
    assert rect.center_x == 20
    assert rect.shifted(5).left == 15
    assert rect.union(Rect(0, 5, 15, 40)) == Rect(0, 0, 30, 40)
    assert rect.contains(Point(30, 20))
    assert not rect.contains(Point(31, 0))


def test_offsets_add() -> None:
    assert Offset(1, 2) + Offset(3) == Offset(4, 2)


def test_layout_lookup(nested: BranchLayout) -> None:
    assert "a1" in nested
    assert "zzz" not in nested
    assert nested.node("zzz") is None
    assert set(nested.children("a")) == {"a1", "a2"}
    assert set(nested.descendants("main")) == {"a", "a1", "a2", "b"}
