"""Columnar branch-tree layout with live drag-reorder and focus separator."""

from branch_graph.core.gestures.drag import DragReorderEngine
from branch_graph.core.gestures.port import PointerPort
from branch_graph.core.gestures.reparent import ReparentEngine
from branch_graph.core.gestures.separator import SeparatorEngine
from branch_graph.core.layout.engine import cached_layout, compute_layout
from branch_graph.core.tree.indexer import CyclicEdgesError
from branch_graph.models.branch import BranchNode, Edge, LayoutRequest, TentativeEdge, TentativeTask
from branch_graph.models.layout import BranchLayout, LayoutEdge, LayoutNode, Point
from branch_graph.protocols import GestureListener

__all__ = [
    "BranchLayout",
    "BranchNode",
    "CyclicEdgesError",
    "DragReorderEngine",
    "Edge",
    "GestureListener",
    "LayoutEdge",
    "LayoutNode",
    "LayoutRequest",
    "Point",
    "PointerPort",
    "ReparentEngine",
    "SeparatorEngine",
    "TentativeEdge",
    "TentativeTask",
    "cached_layout",
    "compute_layout",
]
