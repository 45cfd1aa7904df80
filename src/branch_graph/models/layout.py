"""Output models of a layout pass, plus the small geometry values gestures use."""

from dataclasses import dataclass, field

from branch_graph.models.branch import NodeKind


@dataclass(frozen=True)
class Point:
    """A pointer position in canvas coordinates."""

    x: float
    y: float


@dataclass(frozen=True)
class Offset:
    """An additive rendering offset."""

    dx: float = 0.0
    dy: float = 0.0

    def __add__(self, other: "Offset") -> "Offset":
        return Offset(self.dx + other.dx, self.dy + other.dy)


@dataclass(frozen=True)
class Rect:
    """An axis-aligned box."""

    left: float
    top: float
    right: float
    bottom: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def center_x(self) -> float:
        return (self.left + self.right) / 2

    def union(self, other: "Rect") -> "Rect":
        return Rect(
            min(self.left, other.left),
            min(self.top, other.top),
            max(self.right, other.right),
            max(self.bottom, other.bottom),
        )

    def shifted(self, dx: float, dy: float = 0.0) -> "Rect":
        return Rect(self.left + dx, self.top + dy, self.right + dx, self.bottom + dy)

    def contains(self, point: Point) -> bool:
        return self.left <= point.x <= self.right and self.top <= point.y <= self.bottom


@dataclass(frozen=True)
class LayoutNode:
    """A positioned node.

    ``parent_branch`` and ``siblings`` are captured at placement time so that
    gestures can reorder without re-deriving the tree.
    """

    id: str
    x: float
    y: float
    width: int
    height: int
    depth: int
    column: int
    kind: NodeKind = NodeKind.REAL
    parent_branch: str | None = None
    siblings: tuple[str, ...] = ()
    title: str | None = None
    always_minimized: bool = False
    filter_minimized: bool = False

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.x + self.width, self.y + self.height)

    @property
    def is_tentative(self) -> bool:
        return self.kind is NodeKind.TENTATIVE


@dataclass(frozen=True)
class LayoutEdge:
    """A drawn edge. ``tentative`` edges are synthesized from the planning overlay."""

    parent: str
    child: str
    designed: bool = False
    tentative: bool = False


@dataclass(frozen=True)
class BranchLayout:
    """The result of one layout pass."""

    nodes: tuple[LayoutNode, ...]
    edges: tuple[LayoutEdge, ...]
    width: float
    height: float
    default_branch: str = ""
    # Parent of the separator-partitioned siblings (the default branch), or None
    # when the default branch is absent and the parentless roots play that role.
    root_parent: str | None = None
    root_siblings: tuple[str, ...] = ()
    _by_id: dict[str, LayoutNode] = field(default_factory=dict, compare=False, repr=False)
    _children: dict[str, tuple[str, ...]] = field(
        default_factory=dict, compare=False, repr=False
    )

    def __post_init__(self) -> None:
        self._by_id.update((n.id, n) for n in self.nodes)
        children: dict[str, list[str]] = {}
        for edge in self.edges:
            if not edge.tentative:
                children.setdefault(edge.parent, []).append(edge.child)
        self._children.update((k, tuple(v)) for k, v in children.items())

    def node(self, node_id: str) -> LayoutNode | None:
        return self._by_id.get(node_id)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._by_id

    def children(self, node_id: str) -> tuple[str, ...]:
        """Real children drawn below a node."""
        return self._children.get(node_id, ())

    def descendants(self, node_id: str) -> list[str]:
        """All real descendants of a node, depth-first, each listed once."""
        seen = {node_id}
        out: list[str] = []
        stack = list(reversed(self.children(node_id)))
        while stack:
            current = stack.pop()
            if current in seen:
                continue
            seen.add(current)
            out.append(current)
            stack.extend(reversed(self.children(current)))
        return out
