"""Shared test fixtures."""

import json
from pathlib import Path

import pytest

from branch_graph.core.layout.engine import compute_layout
from branch_graph.models.branch import LayoutRequest
from branch_graph.models.layout import BranchLayout

# main -> a, b, c. With default metrics the root sibling columns are
# a [20, 220], b [260, 460], c [500, 700], all at y 80..140.
THREE_ROOTS_SNAPSHOT = {
    "defaultBranch": "main",
    "nodes": ["main", "a", "b", "c"],
    "edges": [
        {"parent": "main", "child": "a"},
        {"parent": "main", "child": "b"},
        {"parent": "main", "child": "c"},
    ],
}


@pytest.fixture
def three_roots() -> BranchLayout:
    request = LayoutRequest.build(
        ["main", "a", "b", "c"],
        [("main", "a"), ("main", "b"), ("main", "c")],
        default_branch="main",
    )
    return compute_layout(request)


@pytest.fixture
def nested() -> BranchLayout:
    """main -> a -> (a1, a2), main -> b."""
    request = LayoutRequest.build(
        ["main", "a", "a1", "a2", "b"],
        [("main", "a"), ("main", "b"), ("a", "a1"), ("a", "a2")],
        default_branch="main",
    )
    return compute_layout(request)


@pytest.fixture
def snapshot_file(tmp_path: Path) -> Path:
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(THREE_ROOTS_SNAPSHOT))
    return path
