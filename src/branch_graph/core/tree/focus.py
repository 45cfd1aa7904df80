"""Focus separator partitioning of root siblings and their descendants."""

from branch_graph.config import DEFAULT_METRICS, LayoutMetrics
from branch_graph.models.layout import BranchLayout, Offset, Rect


def effective_separator_index(index: int | None, root_count: int) -> int:
    """Resolve a stored separator index; None means everything is focused."""
    if index is None:
        return root_count
    return max(0, min(index, root_count))


def root_ancestor(layout: BranchLayout, node_id: str) -> str | None:
    """Walk placement parents up to the root sibling that owns ``node_id``."""
    roots = set(layout.root_siblings)
    seen: set[str] = set()
    current: str | None = node_id
    while current is not None and current not in seen:
        if current in roots:
            return current
        seen.add(current)
        node = layout.node(current)
        current = node.parent_branch if node else None
    return None


def unfocused_branches(layout: BranchLayout, separator_index: int | None) -> frozenset[str]:
    """Nodes whose root sibling sits at or after the separator."""
    cut = effective_separator_index(separator_index, len(layout.root_siblings))
    unfocused_roots = set(layout.root_siblings[cut:])
    if not unfocused_roots:
        return frozenset()
    return frozenset(n.id for n in layout.nodes if root_ancestor(layout, n.id) in unfocused_roots)


def is_unfocused(layout: BranchLayout, node_id: str, separator_index: int | None) -> bool:
    root = root_ancestor(layout, node_id)
    if root is None:
        return False
    cut = effective_separator_index(separator_index, len(layout.root_siblings))
    return layout.root_siblings.index(root) >= cut


def column_box(
    layout: BranchLayout,
    node_id: str,
    offsets: dict[str, Offset] | None = None,
) -> Rect:
    """Bounding box of a node and all of its real descendants."""
    box: Rect | None = None
    for member in (node_id, *layout.descendants(node_id)):
        node = layout.node(member)
        if node is None:
            continue
        rect = node.rect
        if offsets and member in offsets:
            rect = rect.shifted(offsets[member].dx, offsets[member].dy)
        box = rect if box is None else box.union(rect)
    if box is None:
        msg = f"Unknown node: {node_id!r}"
        raise ValueError(msg)
    return box


def separator_anchor(
    layout: BranchLayout,
    separator_index: int | None,
    metrics: LayoutMetrics = DEFAULT_METRICS,
) -> float | None:
    """Resting x where the separator zone starts, or None without root siblings."""
    roots = [r for r in layout.root_siblings if r in layout]
    if not roots:
        return None
    cut = effective_separator_index(separator_index, len(roots))
    if cut < len(roots):
        return column_box(layout, roots[cut]).left
    return column_box(layout, roots[-1]).right + metrics.horizontal_gap


def separator_zone(
    layout: BranchLayout,
    separator_index: int | None,
    metrics: LayoutMetrics = DEFAULT_METRICS,
) -> Rect | None:
    """Where the separator is drawn (and hit-tested as a virtual column)."""
    anchor = separator_anchor(layout, separator_index, metrics)
    if anchor is None:
        return None
    return Rect(anchor, 0, anchor + metrics.separator_zone_width, layout.height)


def focus_offsets(
    layout: BranchLayout,
    separator_index: int | None,
    metrics: LayoutMetrics = DEFAULT_METRICS,
) -> dict[str, Offset]:
    """Shift unfocused nodes, and unowned nodes right of the separator, to make room for it.

    The root parent never moves, even when it shares the first root sibling's column.
    """
    anchor = separator_anchor(layout, separator_index, metrics)
    if anchor is None:
        return {}
    unfocused = unfocused_branches(layout, separator_index)
    shift = Offset(metrics.separator_zone_width + metrics.horizontal_gap, 0)
    offsets: dict[str, Offset] = {}
    for n in layout.nodes:
        if n.id in unfocused:
            offsets[n.id] = shift
        elif n.id != layout.root_parent and n.x >= anchor and root_ancestor(layout, n.id) is None:
            offsets[n.id] = shift
    return offsets
