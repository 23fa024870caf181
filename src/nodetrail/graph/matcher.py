"""GumTree-style matching between an older and a newer syntax tree.

The matcher runs three phases over the arena trees produced by
:mod:`nodetrail.ast.parser`:

1. *Top-down*: the tallest subtrees of both trees are compared by structural
   digest. Subtrees that are isomorphic and unique at their height are mapped
   node by node; ambiguous candidates are ranked by how similar their parents
   already are.
2. *Bottom-up*: inner nodes left unmapped are paired with the dst node of the
   same type that shares the most mapped descendants (dice similarity).
3. *Recovery*: inside every container mapped by phase 2, remaining nodes are
   paired with unmapped siblings of the same type.

Every step iterates in id order so the result is deterministic for a given
pair of trees.
"""

from __future__ import annotations

import heapq
from collections import defaultdict
from typing import Dict, List, Optional, Tuple

from ..ast.tree import SyntaxNode, SyntaxTree
from .model import MappingStore


class _HeightQueue:
    """Priority list of subtree roots ordered by height, tallest first."""

    def __init__(self, tree: SyntaxTree, min_height: int):
        self.tree = tree
        self.min_height = min_height
        self._heap: List[Tuple[int, int]] = []

    def push(self, node_id: int) -> None:
        height = self.tree.node(node_id).height
        if height >= self.min_height:
            heapq.heappush(self._heap, (-height, node_id))

    def open(self, node_id: int) -> None:
        for child in self.tree.node(node_id).children:
            self.push(child)

    def peek_height(self) -> int:
        return -self._heap[0][0] if self._heap else 0

    def pop(self) -> List[int]:
        height = self.peek_height()
        popped = []
        while self._heap and -self._heap[0][0] == height:
            popped.append(heapq.heappop(self._heap)[1])
        return popped


def _group_by_digest(tree: SyntaxTree, node_ids: List[int]) -> Dict[str, List[int]]:
    groups: Dict[str, List[int]] = defaultdict(list)
    for node_id in sorted(node_ids):
        groups[tree.node(node_id).digest].append(node_id)
    return groups


def _sibling_index(tree: SyntaxTree, node_id: int) -> int:
    parent = tree.node(node_id).parent
    if parent is None:
        return 0
    return tree.node(parent).children.index(node_id)


class TreeMatcher:
    """Computes node mappings from an older (src) tree to a newer (dst) tree."""

    def __init__(self, min_height: int = 2, sim_threshold: float = 0.5, max_recovery_size: int = 1000):
        self.min_height = min_height
        self.sim_threshold = sim_threshold
        self.max_recovery_size = max_recovery_size

    @staticmethod
    def is_isomorphic(node_a: SyntaxNode, node_b: SyntaxNode) -> bool:
        """Whether two nodes have the same type, labels and shape, offsets aside."""
        return node_a.digest == node_b.digest

    def match(self, src: SyntaxTree, dst: SyntaxTree) -> MappingStore:
        store = MappingStore()
        self._top_down(src, dst, store)
        self._bottom_up(src, dst, store)
        return store

    # -- top-down ---------------------------------------------------------

    def _top_down(self, src: SyntaxTree, dst: SyntaxTree, store: MappingStore) -> None:
        src_queue = _HeightQueue(src, self.min_height)
        dst_queue = _HeightQueue(dst, self.min_height)
        src_queue.push(src.root.id)
        dst_queue.push(dst.root.id)
        ambiguous: List[Tuple[int, int]] = []

        while min(src_queue.peek_height(), dst_queue.peek_height()) >= self.min_height:
            src_height = src_queue.peek_height()
            dst_height = dst_queue.peek_height()

            if src_height > dst_height:
                for node_id in src_queue.pop():
                    src_queue.open(node_id)
                continue
            if dst_height > src_height:
                for node_id in dst_queue.pop():
                    dst_queue.open(node_id)
                continue

            src_nodes = src_queue.pop()
            dst_nodes = dst_queue.pop()
            src_groups = _group_by_digest(src, src_nodes)
            dst_groups = _group_by_digest(dst, dst_nodes)

            matched_src = set()
            matched_dst = set()
            for digest, src_ids in src_groups.items():
                dst_ids = dst_groups.get(digest)
                if not dst_ids:
                    continue
                if len(src_ids) == 1 and len(dst_ids) == 1:
                    self._map_subtree(src, dst, src_ids[0], dst_ids[0], store)
                else:
                    ambiguous.extend((s, d) for s in src_ids for d in dst_ids)
                matched_src.update(src_ids)
                matched_dst.update(dst_ids)

            for node_id in src_nodes:
                if node_id not in matched_src:
                    src_queue.open(node_id)
            for node_id in dst_nodes:
                if node_id not in matched_dst:
                    dst_queue.open(node_id)

        def rank(pair: Tuple[int, int]) -> tuple:
            s, d = pair
            similarity = self._dice(src, dst, src.node(s).parent, dst.node(d).parent, store)
            distance = abs(_sibling_index(src, s) - _sibling_index(dst, d))
            return (-similarity, distance, s, d)

        for s, d in sorted(ambiguous, key=rank):
            if store.has_src(s) or store.has_dst(d):
                continue
            self._map_subtree(src, dst, s, d, store)

    @staticmethod
    def _map_subtree(src: SyntaxTree, dst: SyntaxTree, s: int, d: int, store: MappingStore) -> None:
        # isomorphic subtrees line up node for node in post-order
        pairs = list(zip(src.descendants(s), dst.descendants(d))) + [(s, d)]
        if any(store.has_src(x) or store.has_dst(y) for x, y in pairs):
            return
        for x, y in pairs:
            store.add(x, y)

    # -- bottom-up --------------------------------------------------------

    def _bottom_up(self, src: SyntaxTree, dst: SyntaxTree, store: MappingStore) -> None:
        for node in src.post_order():
            if node.parent is None or node.is_leaf or store.has_src(node.id):
                continue
            if not any(store.has_src(x) for x in src.descendants(node.id)):
                continue

            best: Optional[int] = None
            best_similarity = -1.0
            for candidate in self._candidates(src, dst, node, store):
                similarity = self._dice(src, dst, node.id, candidate, store)
                if similarity > best_similarity:
                    best, best_similarity = candidate, similarity

            if best is not None and best_similarity >= self.sim_threshold:
                store.add(node.id, best)
                self._recover(src, dst, node.id, best, store)

        if not store.has_src(src.root.id) and not store.has_dst(dst.root.id):
            store.add(src.root.id, dst.root.id)
            self._recover(src, dst, src.root.id, dst.root.id, store)

    @staticmethod
    def _candidates(src: SyntaxTree, dst: SyntaxTree, node: SyntaxNode, store: MappingStore) -> List[int]:
        seen = set()
        candidates = []
        for x in src.descendants(node.id):
            mapped = store.dst_for(x)
            if mapped is None:
                continue
            for ancestor in dst.ancestors(mapped):
                if ancestor.id in seen:
                    break
                seen.add(ancestor.id)
                if ancestor.parent is None or store.has_dst(ancestor.id):
                    continue
                if ancestor.type == node.type:
                    candidates.append(ancestor.id)
        return sorted(candidates)

    @staticmethod
    def _dice(src: SyntaxTree, dst: SyntaxTree, s: Optional[int], d: Optional[int], store: MappingStore) -> float:
        if s is None or d is None:
            return 0.0
        src_desc = src.descendants(s)
        dst_desc = dst.descendants(d)
        total = len(src_desc) + len(dst_desc)
        if total == 0:
            return 0.0
        common = 0
        for x in src_desc:
            mapped = store.dst_for(x)
            if mapped is not None and mapped in dst_desc:
                common += 1
        return 2.0 * common / total

    # -- recovery ---------------------------------------------------------

    def _recover(self, src: SyntaxTree, dst: SyntaxTree, s: int, d: int, store: MappingStore) -> None:
        # unique isomorphic subtrees left over inside the container; the
        # sibling pass below runs for containers of any size
        if max(src.node(s).size, dst.node(d).size) <= self.max_recovery_size:
            src_free = _group_by_digest(src, [x for x in src.descendants(s) if not store.has_src(x)])
            dst_free = _group_by_digest(dst, [y for y in dst.descendants(d) if not store.has_dst(y)])
            for digest, src_ids in src_free.items():
                dst_ids = dst_free.get(digest)
                if dst_ids and len(src_ids) == 1 and len(dst_ids) == 1:
                    self._map_subtree(src, dst, src_ids[0], dst_ids[0], store)

        # parents before children, so each node sees its parent's mapping
        for x in reversed(src.descendants(s)):
            if store.has_src(x):
                continue
            node = src.node(x)
            mapped_parent = store.dst_for(node.parent)
            if mapped_parent is None:
                continue
            siblings = [
                y
                for y in dst.node(mapped_parent).children
                if not store.has_dst(y) and dst.node(y).type == node.type
            ]
            if not siblings:
                continue
            index = _sibling_index(src, x)

            def preference(y: int) -> tuple:
                return (
                    -self._dice(src, dst, x, y, store),
                    dst.node(y).label != node.label,
                    abs(_sibling_index(dst, y) - index),
                    y,
                )

            store.add(x, min(siblings, key=preference))
