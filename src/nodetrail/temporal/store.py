"""Records produced while walking a node's history."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..ast.tree import SyntaxNode, SyntaxTree
from ..git.history import Commit


@dataclass(slots=True, frozen=True)
class NodeSnapshot:
    """A node as it appears in one revision of the file."""

    commit: Commit
    tree: SyntaxTree
    node: SyntaxNode

    @property
    def content(self) -> bytes:
        return self.tree.content

    @property
    def span(self) -> bytes:
        return self.tree.content[self.node.start:self.node.end]

    @property
    def text(self) -> str:
        return self.tree.text(self.node.id)


# The tracker's working state has the same shape as a snapshot: the tracked
# node, the tree it belongs to and the commit it was last confirmed in.
TrackedState = NodeSnapshot


@dataclass(slots=True, frozen=True)
class ChangeRecord:
    """One reported step of a node's history.

    ``commit`` is the commit in which the ``current`` shape was last confirmed.
    A missing ``previous`` side means the node was introduced at ``current``.
    """

    commit: Commit
    previous: Optional[NodeSnapshot]
    current: NodeSnapshot

    @property
    def is_introduction(self) -> bool:
        return self.previous is None

    @property
    def previous_text(self) -> str:
        return self.previous.text if self.previous is not None else ""

    @property
    def current_text(self) -> str:
        return self.current.text
