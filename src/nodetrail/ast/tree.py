"""Arena representation of a parsed revision."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple


@dataclass(slots=True, frozen=True)
class SyntaxNode:
    """Single node of a :class:`SyntaxTree`.

    Nodes are numbered in post-order, so ``id`` doubles as the index into the
    owning tree's ``nodes`` tuple and the descendants of a node occupy the ids
    ``id - size + 1`` up to ``id - 1``.
    """

    id: int
    type: str
    label: str
    start: int
    end: int
    parent: Optional[int]
    children: Tuple[int, ...]
    height: int
    size: int
    digest: str  # type, label and shape of the subtree; offsets excluded

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def __str__(self) -> str:
        if self.label:
            return f"{self.type}: {self.label!r}"
        return self.type


@dataclass(slots=True, frozen=True)
class SyntaxTree:
    path: str
    content: bytes
    nodes: Tuple[SyntaxNode, ...]

    @property
    def root(self) -> SyntaxNode:
        return self.nodes[-1]

    def __len__(self) -> int:
        return len(self.nodes)

    def node(self, node_id: int) -> SyntaxNode:
        return self.nodes[node_id]

    def post_order(self) -> Iterator[SyntaxNode]:
        return iter(self.nodes)

    def pre_order(self) -> Iterator[Tuple[SyntaxNode, int]]:
        """Yield ``(node, depth)`` pairs starting at the root."""
        stack: List[Tuple[int, int]] = [(self.root.id, 0)]
        while stack:
            node_id, depth = stack.pop()
            node = self.nodes[node_id]
            yield node, depth
            for child in reversed(node.children):
                stack.append((child, depth + 1))

    def descendants(self, node_id: int) -> range:
        node = self.nodes[node_id]
        return range(node_id - node.size + 1, node_id)

    def ancestors(self, node_id: int) -> Iterator[SyntaxNode]:
        parent = self.nodes[node_id].parent
        while parent is not None:
            node = self.nodes[parent]
            yield node
            parent = node.parent

    def text(self, node_id: int) -> str:
        """Return the source text covered by a node."""
        node = self.nodes[node_id]
        return self.content[node.start:node.end].decode("utf-8", errors="replace")
