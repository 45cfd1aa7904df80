"""Drop a node onto another node to give it a new parent."""

import dataclasses
from collections.abc import Callable
from dataclasses import dataclass

from loguru import logger

from branch_graph.config import DEFAULT_METRICS, LayoutMetrics
from branch_graph.core.tree.focus import focus_offsets
from branch_graph.models.layout import BranchLayout, Offset, Point


@dataclass(frozen=True)
class ReparentGesture:
    source_id: str
    pointer_start: Point
    pointer: Point
    separator_index: int | None = None


class ReparentEngine:
    """Body drag that emits an edge creation when released over a valid target."""

    def __init__(
        self,
        *,
        on_edge_create: Callable[[str, str], None] | None = None,
        metrics: LayoutMetrics = DEFAULT_METRICS,
    ) -> None:
        self.on_edge_create = on_edge_create
        self.metrics = metrics
        self.gesture: ReparentGesture | None = None

    @property
    def active(self) -> bool:
        return self.gesture is not None

    def start_drag(
        self,
        layout: BranchLayout,
        node_id: str,
        pointer: Point,
        *,
        separator_index: int | None = None,
    ) -> ReparentGesture:
        if self.gesture is not None:
            msg = f"Reparent drag already active for {self.gesture.source_id!r}"
            raise RuntimeError(msg)
        node = layout.node(node_id)
        if node is None or node.is_tentative or node_id == layout.default_branch:
            msg = f"Cannot reparent {node_id!r}"
            raise ValueError(msg)
        self.gesture = ReparentGesture(node_id, pointer, pointer, separator_index)
        return self.gesture

    def on_pointer_move(self, layout: BranchLayout, pointer: Point) -> str | None:
        """Track the pointer; return the node it would drop onto, if valid."""
        if self.gesture is None:
            return None
        self.gesture = dataclasses.replace(self.gesture, pointer=pointer)
        return self.drop_target(layout)

    def drop_target(self, layout: BranchLayout) -> str | None:
        g = self.gesture
        if g is None:
            return None
        offsets = focus_offsets(layout, g.separator_index, self.metrics)
        excluded = {g.source_id, *layout.descendants(g.source_id)}
        for node in layout.nodes:
            if node.is_tentative or node.id in excluded:
                continue
            shift = offsets.get(node.id, Offset())
            if node.rect.shifted(shift.dx, shift.dy).contains(g.pointer):
                if g.source_id in layout.children(node.id):
                    return None
                return node.id
        return None

    def on_pointer_up(self, layout: BranchLayout) -> tuple[str, str] | None:
        """Finish; return ``(parent, child)`` if an edge was created."""
        target = self.drop_target(layout)
        g = self.gesture
        self.gesture = None
        if g is None or target is None:
            return None
        logger.debug("Edge create: {} -> {}", target, g.source_id)
        if self.on_edge_create:
            self.on_edge_create(target, g.source_id)
        return target, g.source_id

    def offset(self) -> Offset:
        """Offset of the ghost that follows the pointer."""
        if self.gesture is None:
            return Offset()
        g = self.gesture
        return Offset(g.pointer.x - g.pointer_start.x, g.pointer.y - g.pointer_start.y)
