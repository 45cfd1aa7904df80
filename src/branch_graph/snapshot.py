"""Read and write JSON snapshots of the layout inputs."""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from loguru import logger

from branch_graph.core.tree.focus import unfocused_branches
from branch_graph.models.branch import (
    BranchNode,
    Edge,
    LayoutRequest,
    TentativeEdge,
    TentativeTask,
)
from branch_graph.models.layout import BranchLayout


@dataclass(frozen=True)
class Snapshot:
    """Layout inputs plus the separator index a host keeps alongside them."""

    request: LayoutRequest
    separator_index: int | None = None


def parse_snapshot(data: dict[str, Any]) -> Snapshot:
    """Parse snapshot JSON data.

    Args:
        data: Decoded snapshot, with at least ``defaultBranch`` and ``nodes``.

    Returns:
        The parsed Snapshot.
    """
    if "defaultBranch" not in data:
        msg = "Snapshot is missing 'defaultBranch'"
        raise ValueError(msg)

    tentative = data.get("tentative") or {}
    separator = data.get("focusSeparatorIndex")
    request = LayoutRequest.build(
        (BranchNode(name) for name in data.get("nodes", [])),
        (
            Edge(parent=e["parent"], child=e["child"], designed=bool(e.get("designed", False)))
            for e in data.get("edges", [])
        ),
        default_branch=data["defaultBranch"],
        sibling_order=data.get("siblingOrder"),
        filter_enabled=bool(data.get("filterEnabled", False)),
        checked=data.get("checkedBranches", []),
        tentative_nodes=(
            TentativeTask(id=t["id"], title=t.get("title", ""), branch_name=t.get("branchName"))
            for t in tentative.get("nodes", [])
        ),
        tentative_edges=(
            TentativeEdge(parent=e["parent"], child=e["child"]) for e in tentative.get("edges", [])
        ),
        tentative_base_branch=tentative.get("baseBranch"),
    )
    return Snapshot(request=request, separator_index=None if separator is None else int(separator))


def snapshot_to_dict(snapshot: Snapshot) -> dict[str, Any]:
    """Inverse of ``parse_snapshot``."""
    request = snapshot.request
    data: dict[str, Any] = {
        "defaultBranch": request.default_branch,
        "nodes": [n.name for n in request.nodes],
        "edges": [
            {"parent": e.parent, "child": e.child, "designed": e.designed} for e in request.edges
        ],
        "siblingOrder": request.sibling_order_map(),
        "focusSeparatorIndex": snapshot.separator_index,
        "filterEnabled": request.minimization.filter_enabled,
        "checkedBranches": sorted(request.minimization.checked),
    }
    if request.tentative_nodes:
        data["tentative"] = {
            "baseBranch": request.tentative_base_branch,
            "nodes": [
                {"id": t.id, "title": t.title, "branchName": t.branch_name}
                for t in request.tentative_nodes
            ],
            "edges": [{"parent": e.parent, "child": e.child} for e in request.tentative_edges],
        }
    return data


def load_snapshot(path: Path) -> Snapshot:
    with open(path, encoding="utf-8") as f:
        return parse_snapshot(json.load(f))


def save_snapshot(path: Path, snapshot: Snapshot) -> bool:
    """Write a snapshot; leave the file untouched if contents are the same.

    Returns:
        True if the file was written.
    """
    contents = json.dumps(snapshot_to_dict(snapshot), sort_keys=True, indent=4) + "\n"
    try:
        if path.read_text(encoding="utf-8") == contents:
            logger.debug("Snapshot {} unchanged", path)
            return False
    except FileNotFoundError:
        pass
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(contents, encoding="utf-8")
    logger.debug("Wrote snapshot {}", path)
    return True


def layout_to_dict(layout: BranchLayout, *, separator_index: int | None = None) -> dict[str, Any]:
    """Serialize a layout for JSON output, with focus state per node."""
    unfocused = unfocused_branches(layout, separator_index)
    return {
        "width": layout.width,
        "height": layout.height,
        "rootSiblings": list(layout.root_siblings),
        "nodes": [
            {
                "id": n.id,
                "x": n.x,
                "y": n.y,
                "width": n.width,
                "height": n.height,
                "depth": n.depth,
                "column": n.column,
                "kind": n.kind.value,
                "parent": n.parent_branch,
                "title": n.title,
                "unfocused": n.id in unfocused,
            }
            for n in layout.nodes
        ],
        "edges": [
            {
                "parent": e.parent,
                "child": e.child,
                "designed": e.designed,
                "tentative": e.tentative,
            }
            for e in layout.edges
        ],
    }
