"""Configuration constants for branch-graph layout and gestures."""

from dataclasses import dataclass

# Node box sizes. Minimized height only applies to always-minimized branches.
NODE_WIDTH: int = 200
NODE_HEIGHT: int = 60
MINIMIZED_WIDTH: int = 120
MINIMIZED_HEIGHT: int = 32

HORIZONTAL_GAP: int = 40
VERTICAL_GAP: int = 28
PADDING: int = 20

# Room below each node for ahead/behind badges.
BADGE_ALLOWANCE: int = 22

MIN_CANVAS_WIDTH: int = 400
MIN_CANVAS_HEIGHT: int = 150
EMPTY_CANVAS_WIDTH: int = 400
EMPTY_CANVAS_HEIGHT: int = 200

# Horizontal room reserved for the focus separator between root columns.
SEPARATOR_ZONE_WIDTH: int = 48

# Sibling-order key for parentless branches.
ROOTS_KEY: str = "__roots__"

# Branches rendered minimized regardless of filter state (besides the default branch).
ALWAYS_MINIMIZED: tuple[str, ...] = ("develop",)


@dataclass(frozen=True)
class LayoutMetrics:
    """Sizes and gaps used by a layout pass."""

    node_width: int = NODE_WIDTH
    node_height: int = NODE_HEIGHT
    minimized_width: int = MINIMIZED_WIDTH
    minimized_height: int = MINIMIZED_HEIGHT
    horizontal_gap: int = HORIZONTAL_GAP
    vertical_gap: int = VERTICAL_GAP
    padding: int = PADDING
    badge_allowance: int = BADGE_ALLOWANCE
    min_width: int = MIN_CANVAS_WIDTH
    min_height: int = MIN_CANVAS_HEIGHT
    empty_width: int = EMPTY_CANVAS_WIDTH
    empty_height: int = EMPTY_CANVAS_HEIGHT
    separator_zone_width: int = SEPARATOR_ZONE_WIDTH


DEFAULT_METRICS = LayoutMetrics()
