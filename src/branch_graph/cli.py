"""CLI for branch-graph: lay out a snapshot and simulate gestures against it."""

import dataclasses
import json
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger

from branch_graph.core.gestures.port import PointerPort, parse_events, replay, straight_path
from branch_graph.core.layout.engine import compute_layout
from branch_graph.core.tree.focus import focus_offsets, separator_zone, unfocused_branches
from branch_graph.core.tree.indexer import CyclicEdgesError, reparent_edges
from branch_graph.logging_config import configure_logging
from branch_graph.models.branch import freeze_sibling_order
from branch_graph.models.layout import BranchLayout, LayoutNode, Offset, Point
from branch_graph.snapshot import Snapshot, layout_to_dict, load_snapshot, save_snapshot

app = typer.Typer(help="Branch graph: columnar branch-tree layout and reorder gestures.")

SnapshotArg = Annotated[Path, typer.Argument(help="Snapshot JSON file")]
WriteOpt = Annotated[
    bool, typer.Option("--write", "-w", help="Persist the result back into the snapshot")
]
StepsOpt = Annotated[int, typer.Option("--steps", "-s", help="Pointer samples along the path")]


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    configure_logging(verbose=verbose)


class SnapshotHost:
    """Gesture listener that folds commits back into a snapshot."""

    def __init__(self, snapshot: Snapshot) -> None:
        self.snapshot = snapshot
        self.separator_changes: list[int] = []
        self.edges_created: list[tuple[str, str]] = []
        self.port: PointerPort | None = None

    def attach(self, port: PointerPort) -> None:
        """Re-lay out into ``port`` whenever a commit changes the layout inputs."""
        self.port = port

    def _relayout(self) -> None:
        if self.port is not None:
            self.port.set_layout(compute_layout(self.snapshot.request))

    def on_sibling_order_change(self, new_order: dict[str, list[str]]) -> None:
        request = dataclasses.replace(
            self.snapshot.request, sibling_order=freeze_sibling_order(new_order)
        )
        self.snapshot = dataclasses.replace(self.snapshot, request=request)
        self._relayout()

    def on_focus_separator_index_change(self, index: int) -> None:
        self.separator_changes.append(index)
        self.snapshot = dataclasses.replace(self.snapshot, separator_index=index)

    def on_edge_create(self, parent: str, child: str) -> None:
        self.edges_created.append((parent, child))
        edges = reparent_edges(self.snapshot.request.edges, parent=parent, child=child)
        request = dataclasses.replace(self.snapshot.request, edges=edges)
        self.snapshot = dataclasses.replace(self.snapshot, request=request)
        self._relayout()


def _load(path: Path) -> Snapshot:
    if not path.exists():
        logger.error("Snapshot not found: {}", path)
        raise typer.Exit(1)
    try:
        return load_snapshot(path)
    except (ValueError, KeyError, TypeError) as e:
        logger.error("Invalid snapshot {}: {}", path, e)
        raise typer.Exit(1) from e


def _layout(snapshot: Snapshot) -> BranchLayout:
    try:
        return compute_layout(snapshot.request)
    except CyclicEdgesError as e:
        logger.error("{}", e)
        raise typer.Exit(1) from e


def _require_node(layout: BranchLayout, node_id: str) -> LayoutNode:
    node = layout.node(node_id)
    if node is None or node.is_tentative:
        logger.error("Branch not found in layout: {}", node_id)
        raise typer.Exit(1)
    return node


def _finish(path: Path, host: SnapshotHost, *, write: bool) -> None:
    order = host.snapshot.request.sibling_order_map()
    typer.echo(
        json.dumps(
            {
                "siblingOrder": order,
                "focusSeparatorIndex": host.snapshot.separator_index,
                "separatorChanges": host.separator_changes,
                "edgesCreated": [list(e) for e in host.edges_created],
            },
            indent=2,
            sort_keys=True,
        )
    )
    if write:
        if save_snapshot(path, host.snapshot):
            logger.info("Updated {}", path)
        else:
            logger.info("{} unchanged", path)


@app.command()
def layout(
    snapshot_path: SnapshotArg,
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
    separator: Annotated[
        int | None,
        typer.Option("--separator", help="Override the snapshot's focus separator index"),
    ] = None,
) -> None:
    """Print the computed layout."""
    snapshot = _load(snapshot_path)
    result = _layout(snapshot)
    index = separator if separator is not None else snapshot.separator_index

    if output_json:
        typer.echo(json.dumps(layout_to_dict(result, separator_index=index), indent=2))
        return

    unfocused = unfocused_branches(result, index)
    typer.echo(f"Canvas {result.width:.0f}x{result.height:.0f}, {len(result.nodes)} nodes:\n")
    for n in result.nodes:
        flags = []
        if n.is_tentative:
            flags.append("tentative")
        if n.id in unfocused:
            flags.append("unfocused")
        suffix = f"  [{', '.join(flags)}]" if flags else ""
        typer.echo(
            f"  {n.id:<32} col={n.column:<3} depth={n.depth:<3} "
            f"x={n.x:<7.1f} y={n.y:<7.1f} {n.width}x{n.height}{suffix}"
        )


@app.command()
def drag(
    snapshot_path: SnapshotArg,
    node_id: str = typer.Argument(..., help="Branch heading the dragged column"),
    to_x: float = typer.Option(..., "--to", help="Pointer x to release at"),
    from_x: Annotated[
        float | None, typer.Option("--from-x", help="Pointer x to grab at (default: node center)")
    ] = None,
    steps: StepsOpt = 20,
    write: WriteOpt = False,
) -> None:
    """Simulate a column drag along a straight pointer path."""
    snapshot = _load(snapshot_path)
    result = _layout(snapshot)
    node = _require_node(result, node_id)

    host = SnapshotHost(snapshot)
    port = PointerPort(
        result,
        listener=host,
        sibling_order=snapshot.request.sibling_order_map(),
        separator_index=snapshot.separator_index,
    )
    shift = focus_offsets(result, snapshot.separator_index).get(node_id, Offset())
    start = Point(
        from_x if from_x is not None else node.rect.center_x + shift.dx,
        node.y + node.height / 2,
    )
    port.pointer_down_column(node_id, start)
    for pointer in straight_path(start, Point(to_x, start.y), steps):
        port.pointer_move(pointer)
    port.pointer_up()
    _finish(snapshot_path, host, write=write)


@app.command()
def separator(
    snapshot_path: SnapshotArg,
    to_x: float = typer.Option(..., "--to", help="Pointer x to release at"),
    steps: StepsOpt = 20,
    write: WriteOpt = False,
) -> None:
    """Simulate dragging the focus separator from its current zone."""
    snapshot = _load(snapshot_path)
    result = _layout(snapshot)

    host = SnapshotHost(snapshot)
    port = PointerPort(result, listener=host, separator_index=snapshot.separator_index)
    rect = separator_zone(result, snapshot.separator_index)
    if rect is None:
        logger.error("No root siblings to separate")
        raise typer.Exit(1)
    start = Point(rect.center_x, result.height / 2)
    port.pointer_down_separator(start)
    for pointer in straight_path(start, Point(to_x, start.y), steps):
        port.pointer_move(pointer)
    port.pointer_up()
    _finish(snapshot_path, host, write=write)


@app.command()
def reparent(
    snapshot_path: SnapshotArg,
    child: str = typer.Argument(..., help="Branch to move"),
    parent: str = typer.Argument(..., help="New parent branch"),
    write: WriteOpt = False,
) -> None:
    """Drop CHILD onto PARENT, creating the edge PARENT -> CHILD."""
    snapshot = _load(snapshot_path)
    result = _layout(snapshot)
    source = _require_node(result, child)
    target = _require_node(result, parent)

    host = SnapshotHost(snapshot)
    port = PointerPort(result, listener=host, separator_index=snapshot.separator_index)
    offsets = focus_offsets(result, snapshot.separator_index)
    shift = offsets.get(parent, Offset())
    port.pointer_down_body(child, Point(source.rect.center_x, source.y + source.height / 2))
    port.pointer_move(Point(target.rect.center_x + shift.dx, target.y + target.height / 2))
    port.pointer_up()
    if not host.edges_created:
        logger.error("Cannot reparent {} under {}", child, parent)
        raise typer.Exit(1)
    _finish(snapshot_path, host, write=write)


@app.command(name="replay")
def replay_cmd(
    snapshot_path: SnapshotArg,
    events_path: Annotated[Path, typer.Argument(help="JSON list of pointer events")],
    write: WriteOpt = False,
) -> None:
    """Replay recorded pointer events against the snapshot."""
    snapshot = _load(snapshot_path)
    result = _layout(snapshot)
    try:
        events = parse_events(json.loads(events_path.read_text(encoding="utf-8")))
    except (OSError, ValueError) as e:
        logger.error("Cannot read events {}: {}", events_path, e)
        raise typer.Exit(1) from e

    host = SnapshotHost(snapshot)
    port = PointerPort(
        result,
        listener=host,
        sibling_order=snapshot.request.sibling_order_map(),
        separator_index=snapshot.separator_index,
    )
    host.attach(port)
    try:
        replay(port, events)
    except (ValueError, RuntimeError) as e:
        logger.error("Replay failed: {}", e)
        raise typer.Exit(1) from e
    _finish(snapshot_path, host, write=write)
