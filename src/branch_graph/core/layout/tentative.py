"""Lay out the tentative planning tree next to the primary forest."""

from collections.abc import Iterable, Mapping

from loguru import logger

from branch_graph.core.layout.columns import Placement
from branch_graph.models.branch import NodeKind, TentativeEdge, TentativeTask
from branch_graph.models.layout import LayoutEdge


class TentativeMerger:
    """Place draft tasks hanging off a base branch.

    The first child of a task shares its column; every further child, and
    every root task, claims a new column after the highest one in use.
    A task whose tentative parent is not shown is left out with its subtree.
    """

    def __init__(
        self,
        tasks: Iterable[TentativeTask],
        edges: Iterable[TentativeEdge],
        *,
        base_branch: str | None,
        primary: Mapping[str, Placement],
    ) -> None:
        self.base_branch = base_branch
        self.primary = primary

        self.tasks: dict[str, TentativeTask] = {}
        taken = set(primary)
        for task in tasks:
            name = task.display_name
            if task.id in self.tasks or name in taken:
                logger.debug("Tentative task {} skipped, {} already shown", task.id, name)
                continue
            self.tasks[task.id] = task
            taken.add(name)

        self.parent: dict[str, str] = {}
        self.children: dict[str, list[str]] = {}
        # Children of a task that is not shown (unknown id, or a real branch name).
        self.detached: set[str] = set()
        for edge in edges:
            if edge.child not in self.tasks:
                continue
            if edge.parent not in self.tasks:
                self.detached.add(edge.child)
                continue
            if edge.parent == edge.child or edge.child in self.parent:
                continue
            self.parent[edge.child] = edge.parent
            self.children.setdefault(edge.parent, []).append(edge.child)

        base = primary.get(base_branch) if base_branch else None
        self.base_depth = base.depth if base else 0
        if base is not None:
            self.anchor: str | None = base.name
        else:
            self.anchor = next(iter(primary), None)

        self._depths: dict[str, int] = {}
        self._placed: dict[str, Placement] = {}
        self._next_column = max((p.column for p in primary.values()), default=-1) + 1

    def depth(self, task_id: str, _visiting: frozenset[str] = frozenset()) -> int:
        """Depth of a task: its tentative parent's depth + 1, else base depth + 1."""
        if task_id in self._depths:
            return self._depths[task_id]
        parent = self.parent.get(task_id)
        if parent is None or parent in _visiting:
            if parent is not None:
                logger.debug("Tentative parent cycle at {}", task_id)
            depth = self.base_depth + 1
        else:
            depth = self.depth(parent, _visiting | {task_id}) + 1
        self._depths[task_id] = depth
        return depth

    def merge(self) -> tuple[list[Placement], list[LayoutEdge]]:
        """Return tentative placements (parents first) and their synthesized edges."""
        if not self.tasks or not self.base_branch:
            return [], []

        roots = [tid for tid in self.tasks if tid not in self.parent and tid not in self.detached]
        hidden = self._hidden()
        # Tasks on a parent cycle are unreachable from any root.
        for task_id in [*roots, *self.tasks]:
            if task_id not in self._placed and task_id not in hidden:
                self._place(task_id, self._claim_column(), self.anchor)

        placements = list(self._placed.values())
        edges = [
            LayoutEdge(parent=p.parent, child=p.name, designed=False, tentative=True)
            for p in placements
            if p.parent is not None
        ]
        logger.debug(
            "Merged {} tentative tasks under {} from column {}",
            len(placements),
            self.anchor,
            placements[0].column if placements else None,
        )
        return placements, edges

    def _hidden(self) -> set[str]:
        """Detached tasks without a shown parent, and all of their descendants."""
        stack = [tid for tid in self.detached if tid not in self.parent]
        hidden: set[str] = set()
        while stack:
            task_id = stack.pop()
            if task_id in hidden:
                continue
            hidden.add(task_id)
            stack.extend(self.children.get(task_id, ()))
        if hidden:
            logger.debug("Tentative tasks {} hang from a hidden parent", sorted(hidden))
        return hidden

    def _claim_column(self) -> int:
        column = self._next_column
        self._next_column += 1
        return column

    def _place(self, task_id: str, column: int, parent: str | None) -> None:
        if task_id in self._placed:
            return
        task = self.tasks[task_id]
        name = task.display_name
        self._placed[task_id] = Placement(
            name=name,
            depth=self.depth(task_id),
            column=column,
            parent=parent,
            kind=NodeKind.TENTATIVE,
            title=task.title,
        )
        for i, child in enumerate(self.children.get(task_id, ())):
            if child in self._placed:
                continue
            self._place(child, column if i == 0 else self._claim_column(), name)
