"""Full layout pass: index, place, size, position, merge the tentative tree."""

import functools

from loguru import logger

from branch_graph.config import DEFAULT_METRICS, LayoutMetrics
from branch_graph.core.layout.columns import ColumnAssigner, Placement
from branch_graph.core.layout.dimensions import DimensionResolver
from branch_graph.core.layout.positions import (
    canvas_size,
    column_starts,
    column_widths,
    node_x,
    node_ys,
)
from branch_graph.core.layout.tentative import TentativeMerger
from branch_graph.core.tree.indexer import TreeIndex
from branch_graph.models.branch import LayoutRequest
from branch_graph.models.layout import BranchLayout, LayoutEdge, LayoutNode


def compute_layout(
    request: LayoutRequest,
    *,
    metrics: LayoutMetrics = DEFAULT_METRICS,
    strict: bool = True,
) -> BranchLayout:
    """Lay out a branch forest and its tentative overlay.

    The result depends only on ``request`` and ``metrics``. With ``strict``
    a cyclic edge list raises CyclicEdgesError; otherwise nodes already placed
    are skipped and the cyclic part of the forest comes out partial.
    """
    default = request.default_branch
    if not request.nodes and not request.tentative_nodes:
        return BranchLayout(
            nodes=(),
            edges=(),
            width=metrics.empty_width,
            height=metrics.empty_height,
            default_branch=default,
        )

    index = TreeIndex(
        (n.name for n in request.nodes),
        request.edges,
        default_branch=default,
        sibling_order=request.sibling_order_map(),
    )
    if strict:
        index.check_acyclic()

    primary = ColumnAssigner(index).assign()
    tentative, tentative_edges = TentativeMerger(
        request.tentative_nodes,
        request.tentative_edges,
        base_branch=request.tentative_base_branch,
        primary=primary,
    ).merge()

    placements: list[Placement] = [*primary.values(), *tentative]
    resolver = DimensionResolver(
        default_branch=default, minimization=request.minimization, metrics=metrics
    )
    sizes = {p.name: resolver.size(p.name) for p in placements}

    widths = column_widths(placements, sizes, default_branch=default)
    starts = column_starts(widths, metrics)
    ys = node_ys(placements, sizes, metrics)

    nodes = tuple(
        LayoutNode(
            id=p.name,
            x=node_x(p, sizes[p.name], widths=widths, starts=starts, default_branch=default),
            y=ys[p.name],
            width=sizes[p.name].width,
            height=sizes[p.name].height,
            depth=p.depth,
            column=p.column,
            kind=p.kind,
            parent_branch=p.parent,
            siblings=p.siblings,
            title=p.title,
            always_minimized=sizes[p.name].always_minimized,
            filter_minimized=sizes[p.name].filter_minimized,
        )
        for p in placements
    )

    # Dangling edges are dropped; duplicates are drawn once.
    edges: dict[tuple[str, str], LayoutEdge] = {}
    for edge in request.edges:
        if edge.parent in primary and edge.child in primary:
            edges.setdefault(
                (edge.parent, edge.child),
                LayoutEdge(parent=edge.parent, child=edge.child, designed=edge.designed),
            )

    width, height = canvas_size(((n.x, n.y, n.width, n.height) for n in nodes), metrics)
    logger.debug(
        "Layout: {} nodes ({} tentative) in {} columns, canvas {}x{}",
        len(nodes),
        len(tentative),
        len(widths),
        width,
        height,
    )
    return BranchLayout(
        nodes=nodes,
        edges=(*edges.values(), *tentative_edges),
        width=width,
        height=height,
        default_branch=default,
        root_parent=index.root_parent(),
        root_siblings=tuple(index.root_siblings()),
    )


@functools.lru_cache(maxsize=32)
def cached_layout(
    request: LayoutRequest,
    metrics: LayoutMetrics = DEFAULT_METRICS,
    strict: bool = True,
) -> BranchLayout:
    """Memoized ``compute_layout`` keyed on the full input tuple."""
    return compute_layout(request, metrics=metrics, strict=strict)
