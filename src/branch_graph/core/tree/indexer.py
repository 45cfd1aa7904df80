"""Parent/child indexing and deterministic sibling ordering."""

from collections.abc import Iterable, Mapping, Sequence

from loguru import logger

from branch_graph.config import ROOTS_KEY
from branch_graph.models.branch import Edge


class CyclicEdgesError(ValueError):
    """The edge list does not describe a forest."""

    def __init__(self, cycle: Sequence[str]) -> None:
        self.cycle = tuple(cycle)
        msg = f"Edges contain a cycle: {' -> '.join(self.cycle)}"
        super().__init__(msg)


def order_names(names: Iterable[str], custom: Sequence[str] | None) -> list[str]:
    """Sort names by a custom order, unknown names after known ones alphabetically.

    Without a custom order, names are sorted alphabetically.
    """
    unique = list(dict.fromkeys(names))
    if not custom:
        return sorted(unique)
    rank = {name: i for i, name in enumerate(dict.fromkeys(custom))}
    unknown = len(rank)
    return sorted(unique, key=lambda name: (rank.get(name, unknown), name))


class TreeIndex:
    """Index of a branch forest built from its edge list.

    At most one parent per child is assumed; with several parent edges the
    last one wins in ``parent_of`` while ``children_of`` keeps them all.
    """

    def __init__(
        self,
        names: Iterable[str],
        edges: Iterable[Edge],
        *,
        default_branch: str,
        sibling_order: Mapping[str, Sequence[str]] | None = None,
    ) -> None:
        self.names: list[str] = list(dict.fromkeys(names))
        self.default_branch = default_branch
        self.sibling_order: Mapping[str, Sequence[str]] = sibling_order or {}
        self._known = set(self.names)
        self._children: dict[str, list[str]] = {}
        self._parent: dict[str, str] = {}
        for edge in edges:
            self._children.setdefault(edge.parent, []).append(edge.child)
            self._parent[edge.child] = edge.parent

    def __contains__(self, name: object) -> bool:
        return name in self._known

    def children_of(self, parent: str) -> list[str]:
        """Direct children in edge-list order."""
        return list(self._children.get(parent, ()))

    def parent_of(self, child: str) -> str | None:
        return self._parent.get(child)

    def ordered_children(self, parent: str) -> list[str]:
        """Known children of ``parent`` in display order."""
        known = (c for c in self._children.get(parent, ()) if c in self._known)
        return order_names(known, self.sibling_order.get(parent))

    def roots(self) -> list[str]:
        """Known branches without a parent edge, default branch first."""
        parentless = [n for n in self.names if n not in self._parent]
        others = order_names(
            (n for n in parentless if n != self.default_branch),
            self.sibling_order.get(ROOTS_KEY),
        )
        if self.default_branch in parentless:
            return [self.default_branch, *others]
        return others

    def root_parent(self) -> str | None:
        """The branch whose children are partitioned by the focus separator."""
        return self.default_branch if self.default_branch in self._known else None

    def root_siblings(self) -> list[str]:
        """Ordered siblings eligible for separator partitioning."""
        parent = self.root_parent()
        if parent is None:
            return self.roots()
        return self.ordered_children(parent)

    def find_cycle(self) -> list[str] | None:
        """Return one cycle in the edge list as a closed path, or None."""
        state: dict[str, int] = {}
        for start in sorted(self._children):
            if start in state:
                continue
            # Iterative DFS; 1 = on stack, 2 = done.
            path: list[str] = []
            stack: list[tuple[str, int]] = [(start, 0)]
            while stack:
                node, i = stack.pop()
                if i == 0:
                    state[node] = 1
                    path.append(node)
                children = self._children.get(node, [])
                if i < len(children):
                    stack.append((node, i + 1))
                    child = children[i]
                    if state.get(child) == 1:
                        return [*path[path.index(child) :], child]
                    if child not in state:
                        stack.append((child, 0))
                else:
                    state[node] = 2
                    path.pop()
        return None

    def check_acyclic(self) -> None:
        """Raise CyclicEdgesError if the edges contain a cycle."""
        cycle = self.find_cycle()
        if cycle is not None:
            logger.debug("Cycle detected in branch edges: {}", cycle)
            raise CyclicEdgesError(cycle)


def reparent_edges(edges: Iterable[Edge], *, parent: str, child: str) -> tuple[Edge, ...]:
    """Return edges with ``child`` moved under ``parent``.

    Any previous incoming edge of ``child`` is dropped. If the exact edge
    already exists the edges are returned unchanged.
    """
    current = tuple(edges)
    if any(e.parent == parent and e.child == child for e in current):
        return current
    return (*(e for e in current if e.child != child), Edge(parent=parent, child=child))
