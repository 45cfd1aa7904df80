"""Input port wiring host pointer events to the gesture engines."""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from loguru import logger

from branch_graph.config import DEFAULT_METRICS, LayoutMetrics
from branch_graph.core.gestures.drag import DragReorderEngine
from branch_graph.core.gestures.reparent import ReparentEngine
from branch_graph.core.gestures.separator import SeparatorEngine
from branch_graph.core.tree.focus import focus_offsets
from branch_graph.models.layout import BranchLayout, Offset, Point
from branch_graph.protocols import GestureListener

EVENT_KINDS = ("down-column", "down-separator", "down-body", "move", "up")


class PointerPort:
    """Route pointer events to whichever gesture is active.

    The port keeps the latest sibling order and separator index, updating
    them from its own commits, so a host only has to persist what the
    listener receives and call ``set_layout`` after re-laying out.
    """

    def __init__(
        self,
        layout: BranchLayout,
        *,
        listener: GestureListener | None = None,
        sibling_order: Mapping[str, Sequence[str]] | None = None,
        separator_index: int | None = None,
        metrics: LayoutMetrics = DEFAULT_METRICS,
    ) -> None:
        self.layout = layout
        self.listener = listener
        self.sibling_order: dict[str, list[str]] = {
            k: list(v) for k, v in (sibling_order or {}).items()
        }
        self.separator_index = separator_index
        self.metrics = metrics
        self.drag = DragReorderEngine(
            on_sibling_order_change=self._sibling_order_changed,
            on_focus_separator_index_change=self._separator_changed,
            metrics=metrics,
        )
        self.separator = SeparatorEngine(
            on_focus_separator_index_change=self._separator_changed, metrics=metrics
        )
        self.reparent = ReparentEngine(on_edge_create=self._edge_created, metrics=metrics)

    def set_layout(self, layout: BranchLayout) -> None:
        self.layout = layout

    def pointer_down_column(self, node_id: str, pointer: Point) -> None:
        self.drag.start_drag(
            self.layout,
            node_id,
            pointer,
            sibling_order=self.sibling_order,
            separator_index=self.separator_index,
        )

    def pointer_down_separator(self, pointer: Point) -> None:
        self.separator.start_drag(self.layout, pointer, separator_index=self.separator_index)

    def pointer_down_body(self, node_id: str, pointer: Point) -> None:
        self.reparent.start_drag(
            self.layout, node_id, pointer, separator_index=self.separator_index
        )

    def pointer_move(self, pointer: Point) -> None:
        self.drag.on_pointer_move(self.layout, pointer)
        self.separator.on_pointer_move(self.layout, pointer)
        self.reparent.on_pointer_move(self.layout, pointer)

    def pointer_up(self) -> None:
        self.drag.on_pointer_up(self.layout)
        self.separator.on_pointer_up()
        self.reparent.on_pointer_up(self.layout)

    def offsets(self) -> dict[str, Offset]:
        """Total rendering offset per node for the current frame."""
        out = dict(focus_offsets(self.layout, self.separator_index, self.metrics))
        for node_id, offset in self.drag.offsets(self.layout).items():
            out[node_id] = out.get(node_id, Offset()) + offset
        return out

    def _sibling_order_changed(self, new_order: dict[str, list[str]]) -> None:
        self.sibling_order = new_order
        if self.listener is not None:
            self.listener.on_sibling_order_change(new_order)

    def _separator_changed(self, index: int) -> None:
        self.separator_index = index
        if self.listener is not None:
            self.listener.on_focus_separator_index_change(index)

    def _edge_created(self, parent: str, child: str) -> None:
        if self.listener is not None:
            self.listener.on_edge_create(parent, child)


@dataclass(frozen=True)
class PointerEvent:
    """One recorded pointer event."""

    kind: str
    x: float = 0.0
    y: float = 0.0
    node: str | None = None


def parse_events(data: Iterable[Mapping[str, Any]]) -> list[PointerEvent]:
    """Parse a list of ``{"type", "x", "y", "node"}`` dicts into events."""
    events: list[PointerEvent] = []
    for i, raw in enumerate(data):
        kind = raw.get("type")
        if kind not in EVENT_KINDS:
            msg = f"Event {i}: unknown type {kind!r}, expected one of {EVENT_KINDS}"
            raise ValueError(msg)
        node = raw.get("node")
        if kind in ("down-column", "down-body") and not node:
            msg = f"Event {i}: {kind!r} needs a node"
            raise ValueError(msg)
        events.append(PointerEvent(kind, float(raw.get("x", 0)), float(raw.get("y", 0)), node))
    return events


def replay(port: PointerPort, events: Iterable[PointerEvent]) -> None:
    """Drive a port from recorded events."""
    for event in events:
        pointer = Point(event.x, event.y)
        logger.debug("Replay {} at ({}, {})", event.kind, event.x, event.y)
        if event.kind == "down-column":
            port.pointer_down_column(event.node or "", pointer)
        elif event.kind == "down-separator":
            port.pointer_down_separator(pointer)
        elif event.kind == "down-body":
            port.pointer_down_body(event.node or "", pointer)
        elif event.kind == "move":
            port.pointer_move(pointer)
        else:
            port.pointer_up()


def straight_path(start: Point, end: Point, steps: int) -> list[Point]:
    """Evenly spaced pointer samples from ``start`` to ``end`` (inclusive)."""
    steps = max(1, steps)
    return [
        Point(
            start.x + (end.x - start.x) * i / steps,
            start.y + (end.y - start.y) * i / steps,
        )
        for i in range(1, steps + 1)
    ]
