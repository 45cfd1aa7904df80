"""Dragging the focus separator across root siblings."""

import dataclasses
from collections.abc import Callable
from dataclasses import dataclass

from loguru import logger

from branch_graph.config import DEFAULT_METRICS, LayoutMetrics
from branch_graph.core.tree.focus import (
    column_box,
    effective_separator_index,
    focus_offsets,
    separator_zone,
)
from branch_graph.models.layout import BranchLayout, Point, Rect


@dataclass(frozen=True)
class SeparatorGesture:
    current_index: int
    pointer: Point


class SeparatorEngine:
    """Move the focus separator one slot at a time as the pointer crosses columns.

    Every index change is reported right away; releasing only drops the gesture.
    """

    def __init__(
        self,
        *,
        on_focus_separator_index_change: Callable[[int], None] | None = None,
        metrics: LayoutMetrics = DEFAULT_METRICS,
    ) -> None:
        self.on_focus_separator_index_change = on_focus_separator_index_change
        self.metrics = metrics
        self.gesture: SeparatorGesture | None = None

    @property
    def active(self) -> bool:
        return self.gesture is not None

    def start_drag(
        self, layout: BranchLayout, pointer: Point, *, separator_index: int | None
    ) -> SeparatorGesture:
        if self.gesture is not None:
            msg = "Separator drag already active"
            raise RuntimeError(msg)
        index = effective_separator_index(separator_index, len(layout.root_siblings))
        self.gesture = SeparatorGesture(current_index=index, pointer=pointer)
        logger.debug("Separator drag start at index {}", index)
        return self.gesture

    def on_pointer_move(self, layout: BranchLayout, pointer: Point) -> int | None:
        """Return the new index if this sample crossed a column boundary."""
        g = self.gesture
        if g is None:
            return None
        roots = [r for r in layout.root_siblings if r in layout]
        index = min(g.current_index, len(roots))
        if index != g.current_index:
            logger.debug("Separator index clamped to {} after re-layout", index)
        offsets = focus_offsets(layout, index, self.metrics)
        boxes: dict[str, Rect] = {r: column_box(layout, r, offsets) for r in roots}

        new_index = index
        if index > 0 and pointer.x < boxes[roots[index - 1]].left:
            new_index = index - 1
        elif index < len(roots) and pointer.x > boxes[roots[index]].right:
            new_index = index + 1

        self.gesture = dataclasses.replace(g, current_index=new_index, pointer=pointer)
        if new_index == index:
            return None
        logger.debug("Separator moved: {} -> {}", index, new_index)
        if self.on_focus_separator_index_change:
            self.on_focus_separator_index_change(new_index)
        return new_index

    def on_pointer_up(self) -> None:
        if self.gesture is not None:
            logger.debug("Separator drag end at index {}", self.gesture.current_index)
        self.gesture = None

    def zone(self, layout: BranchLayout) -> Rect | None:
        """Where to draw the separator while it is dragged."""
        if self.gesture is None:
            return None
        return separator_zone(layout, self.gesture.current_index, self.metrics)
