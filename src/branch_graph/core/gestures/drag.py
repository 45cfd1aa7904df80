"""Column drag-reorder among siblings."""

import dataclasses
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass

from loguru import logger

from branch_graph.config import DEFAULT_METRICS, ROOTS_KEY, LayoutMetrics
from branch_graph.core.tree.focus import (
    column_box,
    effective_separator_index,
    focus_offsets,
    separator_zone,
)
from branch_graph.models.layout import BranchLayout, Offset, Point, Rect

# Virtual slot standing in for the focus separator among root siblings.
SEPARATOR_SLOT = "\x00separator"


@dataclass(frozen=True)
class ColumnDragGesture:
    """State of one column drag, from pointer-down to pointer-up."""

    dragging_id: str
    parent_id: str | None
    sibling_ids: tuple[str, ...]
    pointer_start: Point
    pointer: Point
    # Signed distance from the node's visual center to the pointer.
    pointer_offset: float
    start_center: float
    start_box: Rect
    original_index: int
    current_insert_index: int
    sibling_order: Mapping[str, Sequence[str]]
    # Tracked only while dragging root siblings.
    separator_index: int | None = None

    @property
    def parent_key(self) -> str:
        return self.parent_id if self.parent_id is not None else ROOTS_KEY

    @property
    def is_root_drag(self) -> bool:
        return self.separator_index is not None


def _measure(
    layout: BranchLayout,
    ids: Sequence[str],
    separator_index: int | None,
    metrics: LayoutMetrics,
) -> dict[str, Rect]:
    offsets: dict[str, Offset] = {}
    if separator_index is not None:
        offsets = focus_offsets(layout, separator_index, metrics)
    return {sid: column_box(layout, sid, offsets) for sid in ids if sid in layout}


def _left_to_right(boxes: Mapping[str, Rect]) -> list[str]:
    return sorted(boxes, key=lambda sid: (boxes[sid].left, sid))


def _splice(order: Sequence[str], item: str, index: int) -> list[str]:
    rest = [s for s in order if s != item]
    rest.insert(max(0, min(index, len(rest))), item)
    return rest


class DragReorderEngine:
    """Reorder a column against its siblings while the pointer moves.

    When root siblings are dragged, the focus separator is treated as an
    extra slot; crossing it moves the separator instead of the column.
    """

    def __init__(
        self,
        *,
        on_sibling_order_change: Callable[[dict[str, list[str]]], None] | None = None,
        on_focus_separator_index_change: Callable[[int], None] | None = None,
        metrics: LayoutMetrics = DEFAULT_METRICS,
    ) -> None:
        self.on_sibling_order_change = on_sibling_order_change
        self.on_focus_separator_index_change = on_focus_separator_index_change
        self.metrics = metrics
        self.gesture: ColumnDragGesture | None = None

    @property
    def active(self) -> bool:
        return self.gesture is not None

    def start_drag(
        self,
        layout: BranchLayout,
        node_id: str,
        pointer: Point,
        *,
        sibling_order: Mapping[str, Sequence[str]] | None = None,
        separator_index: int | None = None,
    ) -> ColumnDragGesture:
        """Begin dragging the column headed by ``node_id``."""
        if self.gesture is not None:
            msg = f"Column drag already active for {self.gesture.dragging_id!r}"
            raise RuntimeError(msg)
        node = layout.node(node_id)
        if node is None or node.is_tentative:
            msg = f"Cannot drag {node_id!r}: not a real branch in the layout"
            raise ValueError(msg)

        siblings = tuple(s for s in node.siblings if s in layout) or (node_id,)
        sep: int | None = None
        if node.parent_branch == layout.root_parent and node_id in layout.root_siblings:
            sep = effective_separator_index(separator_index, len(layout.root_siblings))

        boxes = _measure(layout, siblings, sep, self.metrics)
        ordered = _left_to_right(boxes)
        offsets = focus_offsets(layout, sep, self.metrics) if sep is not None else {}
        center = node.rect.center_x + offsets.get(node_id, Offset()).dx
        index = ordered.index(node_id)

        self.gesture = ColumnDragGesture(
            dragging_id=node_id,
            parent_id=node.parent_branch,
            sibling_ids=tuple(ordered),
            pointer_start=pointer,
            pointer=pointer,
            pointer_offset=pointer.x - center,
            start_center=center,
            start_box=boxes[node_id],
            original_index=index,
            current_insert_index=index,
            sibling_order=dict(sibling_order or {}),
            separator_index=sep,
        )
        logger.debug(
            "Column drag start: {} at index {} of {}", node_id, index, self.gesture.parent_key
        )
        return self.gesture

    def dragging_edges(self, pointer: Point) -> tuple[float, float]:
        """Left/right edges of the dragged column under the live pointer."""
        g = self._require()
        shift = (pointer.x - g.pointer_offset) - g.start_center
        return g.start_box.left + shift, g.start_box.right + shift

    def on_pointer_move(self, layout: BranchLayout, pointer: Point) -> ColumnDragGesture | None:
        """Advance the gesture by one pointer sample; at most one swap per sample."""
        g = self.gesture
        if g is None:
            return None

        sep = g.separator_index
        boxes = _measure(layout, g.sibling_ids, sep, self.metrics)
        if g.dragging_id not in boxes:
            self.gesture = dataclasses.replace(g, pointer=pointer)
            return self.gesture
        candidate = _splice(_left_to_right(boxes), g.dragging_id, g.current_insert_index)
        insert = candidate.index(g.dragging_id)

        slots = list(candidate)
        effective = insert
        if sep is not None:
            zone = separator_zone(layout, sep, self.metrics)
            if zone is not None:
                boxes[SEPARATOR_SLOT] = zone
                slots.insert(sep, SEPARATOR_SLOT)
                if insert >= sep:
                    effective += 1

        left, right = self.dragging_edges(pointer)
        target = effective
        if effective > 0 and left < boxes[slots[effective - 1]].left:
            target = effective - 1
        elif effective < len(slots) - 1 and right > boxes[slots[effective + 1]].right:
            target = effective + 1

        new_sep = sep
        if target != effective:
            crossed = slots[target]
            slots[effective], slots[target] = crossed, g.dragging_id
            position = slots.index(g.dragging_id)
            if SEPARATOR_SLOT in slots:
                sep_slot = slots.index(SEPARATOR_SLOT)
                new_sep = sep_slot
                insert = position - 1 if position > sep_slot else position
            else:
                insert = position
            if crossed == SEPARATOR_SLOT:
                logger.debug(
                    "Column {} crossed the separator: {} -> {}", g.dragging_id, sep, new_sep
                )
            else:
                logger.debug("Column {} swapped with {}, index {}", g.dragging_id, crossed, insert)

        self.gesture = dataclasses.replace(
            g, pointer=pointer, current_insert_index=insert, separator_index=new_sep
        )
        if new_sep != sep and new_sep is not None and self.on_focus_separator_index_change:
            self.on_focus_separator_index_change(new_sep)
        return self.gesture

    def on_pointer_up(self, layout: BranchLayout) -> dict[str, list[str]] | None:
        """Finish the gesture; commit and return the new sibling order if it changed."""
        g = self.gesture
        if g is None:
            return None
        self.gesture = None

        boxes = _measure(layout, g.sibling_ids, g.separator_index, self.metrics)
        ordered = _left_to_right(boxes)
        if g.dragging_id not in ordered:
            logger.debug("Column drag end: {} no longer in layout", g.dragging_id)
            return None
        final = _splice(ordered, g.dragging_id, g.current_insert_index)
        if final == ordered:
            logger.debug("Column drag end: {} order unchanged", g.dragging_id)
            return None

        new_order = {key: list(children) for key, children in g.sibling_order.items()}
        new_order[g.parent_key] = final
        logger.debug("Column drag commit: {} = {}", g.parent_key, final)
        if self.on_sibling_order_change:
            self.on_sibling_order_change(new_order)
        return new_order

    def offsets(self, layout: BranchLayout) -> dict[str, Offset]:
        """Live rendering offsets: the dragged column follows the pointer,
        displaced siblings slide over by one dragged-column width.
        """
        g = self.gesture
        if g is None:
            return {}
        boxes = _measure(layout, g.sibling_ids, g.separator_index, self.metrics)
        ordered = _left_to_right(boxes)
        candidate = _splice(ordered, g.dragging_id, g.current_insert_index)
        step = g.start_box.width + self.metrics.horizontal_gap

        out: dict[str, Offset] = {}
        follow = Offset(g.pointer.x - g.pointer_start.x, g.pointer.y - g.pointer_start.y)
        for member in (g.dragging_id, *layout.descendants(g.dragging_id)):
            out[member] = follow
        for sid in ordered:
            if sid == g.dragging_id:
                continue
            moved = candidate.index(sid) - ordered.index(sid)
            if moved:
                slide = Offset(step if moved > 0 else -step, 0)
                for member in (sid, *layout.descendants(sid)):
                    out[member] = slide
        return out

    def _require(self) -> ColumnDragGesture:
        if self.gesture is None:
            msg = "No column drag in progress"
            raise RuntimeError(msg)
        return self.gesture
