"""Base node shared by the spatial index trees."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class Node:
    """A tree node holding the ids of every point in its subtree."""

    ids: list[int] = field(default_factory=list)
    children: list[Node] = field(default_factory=list)

    def is_leaf(self) -> bool:
        """True when the node has no children."""
        return not self.children

    def subtree_ids(self) -> list[int]:
        """Ids of all points under this node, as a new list."""
        return list(self.ids)