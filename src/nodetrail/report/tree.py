"""Indented dump of a syntax tree for choosing a node id."""

from __future__ import annotations

from ..ast.tree import SyntaxTree


def format_tree(tree: SyntaxTree) -> str:
    lines = []
    for node, depth in tree.pre_order():
        lines.append(f"{'-' * depth} {node} [{node.start}:{node.end}] {node.id}")
    return "\n".join(lines)
