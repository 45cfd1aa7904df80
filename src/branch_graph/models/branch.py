"""Input models for a layout pass: branches, edges and the tentative overlay."""

import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum

SiblingOrder = tuple[tuple[str, tuple[str, ...]], ...]


class NodeKind(str, Enum):
    """Whether a node is a real branch or a draft planning task."""

    REAL = "real"
    TENTATIVE = "tentative"


@dataclass(frozen=True)
class BranchNode:
    """A branch in the forest, identified by its name."""

    name: str
    kind: NodeKind = NodeKind.REAL


@dataclass(frozen=True)
class Edge:
    """A parent -> child dependency between two branches."""

    parent: str
    child: str
    designed: bool = False


@dataclass(frozen=True)
class TentativeTask:
    """A draft task from a planning session, not yet a real branch."""

    id: str
    title: str
    branch_name: str | None = None

    @property
    def display_name(self) -> str:
        """Branch name the task will be shown under."""
        if self.branch_name:
            return self.branch_name
        slug = re.sub(r"\s+", "-", self.title.lower())
        slug = re.sub(r"[^a-z0-9-]", "", slug)
        slug = re.sub(r"-+", "-", slug).strip("-")[:30]
        if not slug:
            slug = self.id[:8]
        return f"task/{slug}"


@dataclass(frozen=True)
class TentativeEdge:
    """A parent -> child link between two tentative tasks (by task id)."""

    parent: str
    child: str


@dataclass(frozen=True)
class MinimizationState:
    """Snapshot of the branch filter: which branches are checked, and whether it applies."""

    filter_enabled: bool = False
    checked: frozenset[str] = frozenset()


def freeze_sibling_order(mapping: Mapping[str, Sequence[str]] | None) -> SiblingOrder:
    """Convert a sibling-order mapping into a hashable, key-sorted tuple."""
    if not mapping:
        return ()
    return tuple(sorted((key, tuple(children)) for key, children in mapping.items()))


@dataclass(frozen=True)
class LayoutRequest:
    """Everything a layout pass depends on.

    Hashable, so callers can memoize layouts on the exact input tuple.
    """

    nodes: tuple[BranchNode, ...]
    edges: tuple[Edge, ...]
    default_branch: str
    sibling_order: SiblingOrder = ()
    minimization: MinimizationState = field(default_factory=MinimizationState)
    tentative_nodes: tuple[TentativeTask, ...] = ()
    tentative_edges: tuple[TentativeEdge, ...] = ()
    tentative_base_branch: str | None = None

    @classmethod
    def build(
        cls,
        nodes: Iterable[str | BranchNode],
        edges: Iterable[Edge | tuple[str, str]],
        *,
        default_branch: str,
        sibling_order: Mapping[str, Sequence[str]] | None = None,
        filter_enabled: bool = False,
        checked: Iterable[str] = (),
        tentative_nodes: Iterable[TentativeTask] = (),
        tentative_edges: Iterable[TentativeEdge | tuple[str, str]] = (),
        tentative_base_branch: str | None = None,
    ) -> "LayoutRequest":
        """Build a request from plain Python values."""
        return cls(
            nodes=tuple(n if isinstance(n, BranchNode) else BranchNode(n) for n in nodes),
            edges=tuple(e if isinstance(e, Edge) else Edge(*e) for e in edges),
            default_branch=default_branch,
            sibling_order=freeze_sibling_order(sibling_order),
            minimization=MinimizationState(
                filter_enabled=filter_enabled, checked=frozenset(checked)
            ),
            tentative_nodes=tuple(tentative_nodes),
            tentative_edges=tuple(
                e if isinstance(e, TentativeEdge) else TentativeEdge(*e) for e in tentative_edges
            ),
            tentative_base_branch=tentative_base_branch,
        )

    def sibling_order_map(self) -> dict[str, list[str]]:
        """Return the sibling order as a fresh mutable mapping."""
        return {key: list(children) for key, children in self.sibling_order}
