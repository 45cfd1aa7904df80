"""Protocols for the host collaborators gestures report to."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class GestureListener(Protocol):
    """Receives the values a gesture commits.

    The host is expected to persist them and feed them back into the next
    layout pass.
    """

    def on_sibling_order_change(self, new_order: dict[str, list[str]]) -> None:
        """A column drag released with a changed order."""
        ...

    def on_focus_separator_index_change(self, index: int) -> None:
        """The focus separator moved by one slot."""
        ...

    def on_edge_create(self, parent: str, child: str) -> None:
        """A node was dropped onto a new parent."""
        ...
