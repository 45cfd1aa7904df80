"""Tests for the drop-onto-parent gesture."""

import pytest

from branch_graph.core.gestures.reparent import ReparentEngine
from branch_graph.models.layout import BranchLayout, Point
from tests.unit.fakes import RecordingListener


def _engine(listener: RecordingListener) -> ReparentEngine:
    return ReparentEngine(on_edge_create=listener.on_edge_create)


def test_drop_on_other_node_creates_edge(three_roots: BranchLayout) -> None:
    listener = RecordingListener()
    engine = _engine(listener)
    engine.start_drag(three_roots, "c", Point(600, 110))
    assert engine.on_pointer_move(three_roots, Point(120, 110)) == "a"
    assert engine.offset().dx == -480
    assert engine.on_pointer_up(three_roots) == ("a", "c")
    assert listener.edges == [("a", "c")]


def test_drop_on_empty_space_does_nothing(three_roots: BranchLayout) -> None:
    listener = RecordingListener()
    engine = _engine(listener)
    engine.start_drag(three_roots, "c", Point(600, 110))
    engine.on_pointer_move(three_roots, Point(240, 110))
    assert engine.on_pointer_up(three_roots) is None
    assert listener.edges == []


def test_drop_on_own_descendant_is_rejected(nested: BranchLayout) -> None:
    listener = RecordingListener()
    engine = _engine(listener)
    engine.start_drag(nested, "a", Point(120, 110))
    a2 = nested.node("a2")
    assert a2 is not None
    engine.on_pointer_move(nested, Point(a2.x + 10, a2.y + 10))
    assert engine.on_pointer_up(nested) is None
    assert listener.edges == []


def test_drop_on_current_parent_is_rejected(nested: BranchLayout) -> None:
    engine = _engine(RecordingListener())
    engine.start_drag(nested, "a1", Point(120, 200))
    engine.on_pointer_move(nested, Point(120, 110))
    assert engine.drop_target(nested) is None


def test_default_branch_cannot_be_reparented(three_roots: BranchLayout) -> None:
    with pytest.raises(ValueError):
        _engine(RecordingListener()).start_drag(three_roots, "main", Point(30, 30))
