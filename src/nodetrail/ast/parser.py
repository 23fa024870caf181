"""Multi-language parsing into arena syntax trees using tree-sitter.

Supports: Python, C#, JavaScript and TypeScript (including TSX).
"""

from __future__ import annotations

import hashlib
from pathlib import PurePosixPath
from typing import Callable, Dict, List, Optional, Tuple

import tree_sitter_c_sharp
import tree_sitter_javascript
import tree_sitter_python
import tree_sitter_typescript
from tree_sitter import Language, Node, Parser

from ..errors import ParseServiceError
from .tree import SyntaxNode, SyntaxTree

# Language configuration
LANGUAGE_EXTENSIONS = {
    ".py": "python",
    ".pyw": "python",
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".ts": "typescript",
    ".tsx": "tsx",
    ".cs": "csharp",
}

_GRAMMARS: Dict[str, Callable[[], object]] = {
    "python": tree_sitter_python.language,
    "javascript": tree_sitter_javascript.language,
    "typescript": tree_sitter_typescript.language_typescript,
    "tsx": tree_sitter_typescript.language_tsx,
    "csharp": tree_sitter_c_sharp.language,
}


def detect_language(path: str) -> Optional[str]:
    """Detect programming language from file extension."""
    return LANGUAGE_EXTENSIONS.get(PurePosixPath(path).suffix.lower())


def _digest(node_type: str, leaf_bytes: bytes, child_digests: List[str]) -> str:
    hasher = hashlib.sha1()
    hasher.update(node_type.encode("utf-8"))
    hasher.update(b"\x1f")
    hasher.update(leaf_bytes)
    for child in child_digests:
        hasher.update(b"\x1e")
        hasher.update(child.encode("ascii"))
    return hasher.hexdigest()


def _build_arena(root: Node, content: bytes) -> Tuple[SyntaxNode, ...]:
    """Number tree-sitter nodes in post-order and freeze them into an arena."""
    # (type, label, start, end, children, height, size, digest)
    records: List[tuple] = []
    stack = [(root, iter(root.children), [])]

    while stack:
        ts_node, pending, child_ids = stack[-1]
        child = next(pending, None)
        if child is not None:
            stack.append((child, iter(child.children), []))
            continue

        stack.pop()
        node_id = len(records)
        leaf_bytes = b"" if child_ids else content[ts_node.start_byte:ts_node.end_byte]
        # labels are for display; the digest sees the undecoded bytes
        label = leaf_bytes.decode("utf-8", errors="replace")
        height = 1 + max((records[c][5] for c in child_ids), default=0)
        size = 1 + sum(records[c][6] for c in child_ids)
        digest = _digest(ts_node.type, leaf_bytes, [records[c][7] for c in child_ids])
        records.append(
            (ts_node.type, label, ts_node.start_byte, ts_node.end_byte, tuple(child_ids), height, size, digest)
        )
        if stack:
            stack[-1][2].append(node_id)

    parents: List[Optional[int]] = [None] * len(records)
    for node_id, record in enumerate(records):
        for child in record[4]:
            parents[child] = node_id

    return tuple(
        SyntaxNode(
            id=node_id,
            type=node_type,
            label=label,
            start=start,
            end=end,
            parent=parents[node_id],
            children=children,
            height=height,
            size=size,
            digest=digest,
        )
        for node_id, (node_type, label, start, end, children, height, size, digest) in enumerate(records)
    )


def _first_error(root: Node) -> Optional[Node]:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.is_error or node.is_missing:
            return node
        if node.has_error:
            stack.extend(reversed(node.children))
    return None


class SyntaxParser:
    """Turns raw file content into a :class:`SyntaxTree`.

    One tree-sitter parser is kept per language for the lifetime of the
    instance.
    """

    def __init__(self) -> None:
        self._parsers: Dict[str, Parser] = {}

    def _parser_for(self, path: str) -> Parser:
        language = detect_language(path)
        if language is None:
            raise ParseServiceError(f"can't parse the file {path}: unsupported language")

        parser = self._parsers.get(language)
        if parser is None:
            parser = Parser(Language(_GRAMMARS[language]()))
            self._parsers[language] = parser
        return parser

    def parse(self, path: str, content: bytes) -> SyntaxTree:
        """Parse ``content`` of the file at ``path``.

        Parameters
        ----------
        path:
            File path, used to pick the grammar
        content:
            Raw bytes of the file

        Returns
        -------
        The arena tree of the revision
        """
        parser = self._parser_for(path)
        ts_tree = parser.parse(content)
        root = ts_tree.root_node

        if root.has_error:
            error = _first_error(root)
            where = ""
            if error is not None:
                line, column = error.start_point
                where = f" at line {line + 1}, column {column + 1}"
            raise ParseServiceError(f"can't parse the file {path}: syntax error{where}")

        return SyntaxTree(path=path, content=content, nodes=_build_arena(root, content))

    @staticmethod
    def find_by_id(tree: SyntaxTree, node_id: int) -> Optional[SyntaxNode]:
        """Locate a node by a full post-order traversal of ``tree``."""
        for node in tree.post_order():
            if node.id == node_id:
                return node
        return None
