"""Convert grid placements into pixel coordinates."""

from collections.abc import Iterable, Mapping

from branch_graph.config import DEFAULT_METRICS, LayoutMetrics
from branch_graph.core.layout.columns import Placement
from branch_graph.core.layout.dimensions import NodeSize


def column_widths(
    placements: Iterable[Placement],
    sizes: Mapping[str, NodeSize],
    *,
    default_branch: str,
) -> dict[int, int]:
    """Width of each column: the widest member, ignoring the default branch.

    A column holding only the default branch takes the default branch's width.
    """
    widths: dict[int, int] = {}
    fallback: dict[int, int] = {}
    for p in placements:
        width = sizes[p.name].width
        if p.name == default_branch:
            fallback[p.column] = width
            continue
        widths[p.column] = max(widths.get(p.column, 0), width)
    for column, width in fallback.items():
        widths.setdefault(column, width)
    return widths


def column_starts(
    widths: Mapping[int, int], metrics: LayoutMetrics = DEFAULT_METRICS
) -> dict[int, int]:
    """Left edge of each column, packing columns left to right."""
    starts: dict[int, int] = {}
    offset = metrics.padding
    for column in sorted(widths):
        starts[column] = offset
        offset += widths[column] + metrics.horizontal_gap
    return starts


def node_x(
    placement: Placement,
    size: NodeSize,
    *,
    widths: Mapping[int, int],
    starts: Mapping[int, int],
    default_branch: str,
) -> float:
    """Center a node in its column; the default branch stays left-aligned."""
    start = starts[placement.column]
    if placement.name == default_branch:
        return start
    return start + (widths[placement.column] - size.width) / 2


def node_ys(
    placements: Iterable[Placement],
    sizes: Mapping[str, NodeSize],
    metrics: LayoutMetrics = DEFAULT_METRICS,
) -> dict[str, float]:
    """Stack each node below its placement parent.

    Placements must come parents-first. Nodes without a positioned parent
    hang from a synthetic parent so that they land at the top padding.
    """
    ys: dict[str, float] = {}
    for p in placements:
        if p.parent is not None and p.parent in ys:
            parent_y = ys[p.parent]
            parent_height = sizes[p.parent].height
        else:
            parent_y = metrics.padding - metrics.vertical_gap
            parent_height = 0
        ys[p.name] = parent_y + parent_height + metrics.vertical_gap
    return ys


def canvas_size(
    boxes: Iterable[tuple[float, float, int, int]],
    metrics: LayoutMetrics = DEFAULT_METRICS,
) -> tuple[float, float]:
    """Canvas size covering every ``(x, y, width, height)`` box, with badges and padding."""
    max_x = 0.0
    max_y = 0.0
    for x, y, width, height in boxes:
        max_x = max(max_x, x + width)
        max_y = max(max_y, y + height + metrics.badge_allowance)
    return (
        max(metrics.min_width, max_x + metrics.padding),
        max(metrics.min_height, max_y + metrics.padding),
    )
