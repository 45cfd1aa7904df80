"""Per-node box sizes from the two minimization predicates."""

from dataclasses import dataclass

from branch_graph.config import ALWAYS_MINIMIZED, DEFAULT_METRICS, LayoutMetrics
from branch_graph.models.branch import MinimizationState


@dataclass(frozen=True)
class NodeSize:
    width: int
    height: int
    always_minimized: bool
    filter_minimized: bool


class DimensionResolver:
    """Resolve node sizes.

    Always-minimized branches (the default branch and ``develop``) shrink in
    both dimensions. Filter-minimized branches shrink in width only.
    """

    def __init__(
        self,
        *,
        default_branch: str,
        minimization: MinimizationState,
        metrics: LayoutMetrics = DEFAULT_METRICS,
    ) -> None:
        self.default_branch = default_branch
        self.minimization = minimization
        self.metrics = metrics

    def always_minimized(self, name: str) -> bool:
        return name == self.default_branch or name in ALWAYS_MINIMIZED

    def filter_minimized(self, name: str) -> bool:
        return self.minimization.filter_enabled and name in self.minimization.checked

    def size(self, name: str) -> NodeSize:
        always = self.always_minimized(name)
        filtered = self.filter_minimized(name)
        m = self.metrics
        return NodeSize(
            width=m.minimized_width if always or filtered else m.node_width,
            height=m.minimized_height if always else m.node_height,
            always_minimized=always,
            filter_minimized=filtered,
        )
