"""Syntax trees of single file revisions."""

from .parser import SyntaxParser, detect_language
from .tree import SyntaxNode, SyntaxTree

__all__ = ["SyntaxNode", "SyntaxParser", "SyntaxTree", "detect_language"]
