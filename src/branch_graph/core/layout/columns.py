"""Depth-first column assignment for the primary branch forest."""

from dataclasses import dataclass

from loguru import logger

from branch_graph.core.tree.indexer import TreeIndex
from branch_graph.models.branch import NodeKind


@dataclass(frozen=True)
class Placement:
    """Where a node sits in the grid, before pixel positions are known."""

    name: str
    depth: int
    column: int
    parent: str | None = None
    siblings: tuple[str, ...] = ()
    kind: NodeKind = NodeKind.REAL
    title: str | None = None


class ColumnAssigner:
    """Assign ``(depth, column)`` to every known branch.

    A subtree occupies a contiguous column range starting at the column its
    parent offers it; the first child shares the parent's column.
    """

    def __init__(self, index: TreeIndex) -> None:
        self.index = index
        self.placements: dict[str, Placement] = {}

    def assign(self) -> dict[str, Placement]:
        roots = self.index.roots()
        default = self.index.default_branch
        others = tuple(r for r in roots if r != default)

        next_column = 0
        for root in roots:
            siblings = (root,) if root == default else others
            next_column = self._place(root, 0, next_column, None, siblings)

        for name in self.index.names:
            if name not in self.placements:
                logger.debug("Orphan branch {} placed in column {}", name, next_column)
                self.placements[name] = Placement(name, 0, next_column, None, (name,))
                next_column += 1

        return self.placements

    def _place(
        self,
        name: str,
        depth: int,
        min_column: int,
        parent: str | None,
        siblings: tuple[str, ...],
    ) -> int:
        """Place ``name`` and its subtree, returning the next free column."""
        # Already placed means a duplicate or cyclic edge; leave the first placement.
        if name not in self.index or name in self.placements:
            return min_column

        self.placements[name] = Placement(name, depth, min_column, parent, siblings)

        children = tuple(self.index.ordered_children(name))
        current = min_column
        for child in children:
            current = self._place(child, depth + 1, current, name, children)
        return max(min_column + 1, current)
