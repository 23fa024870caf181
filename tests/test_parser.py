from __future__ import annotations

import pytest

from nodetrail.ast.parser import SyntaxParser, detect_language
from nodetrail.errors import ParseServiceError

SOURCE = b"""def alpha(x):
    return x + 1


class Beta:
    def method(self):
        return 1
"""


def _first(tree, node_type, startswith=""):
    for node in tree.post_order():
        if node.type == node_type and tree.text(node.id).startswith(startswith):
            return node
    raise AssertionError(f"no {node_type} node")


def test_detect_language() -> None:
    assert detect_language("pkg/module.py") == "python"
    assert detect_language("web/App.TSX") == "tsx"
    assert detect_language("Program.cs") == "csharp"
    assert detect_language("notes.txt") is None


def test_parse_builds_post_order_arena() -> None:
    tree = SyntaxParser().parse("example.py", SOURCE)

    assert tree.root.type == "module"
    assert tree.root.parent is None
    assert tree.root.id == len(tree) - 1
    for node in tree.post_order():
        assert tree.node(node.id) is node
        assert all(child < node.id for child in node.children)
        for child in node.children:
            assert tree.node(child).parent == node.id
        assert list(tree.descendants(node.id)) == sorted(
            d for d in range(len(tree)) if node.id in {a.id for a in tree.ancestors(d)}
        )


def test_node_spans_are_byte_offsets() -> None:
    tree = SyntaxParser().parse("example.py", SOURCE)

    function = _first(tree, "function_definition", "def alpha")
    text = tree.text(function.id)

    assert text == SOURCE[function.start:function.end].decode("utf-8")
    assert text.startswith("def alpha(x):")
    assert "return x + 1" in text
    assert "class Beta" not in text


def test_leaves_carry_their_source_text() -> None:
    tree = SyntaxParser().parse("example.py", SOURCE)

    identifiers = [node.label for node in tree.post_order() if node.type == "identifier"]

    assert "alpha" in identifiers
    assert "Beta" in identifiers
    assert all(node.label == "" for node in tree.post_order() if node.children)


def test_find_by_id() -> None:
    parser = SyntaxParser()
    tree = parser.parse("example.py", SOURCE)

    target = _first(tree, "class_definition")

    assert parser.find_by_id(tree, target.id) is target
    assert parser.find_by_id(tree, len(tree) + 5) is None


def test_ids_are_stable_for_same_content() -> None:
    parser = SyntaxParser()

    first = parser.parse("example.py", SOURCE)
    second = parser.parse("example.py", SOURCE)

    assert first == second


def test_digest_ignores_positions() -> None:
    parser = SyntaxParser()
    plain = parser.parse("a.py", b"def f():\n    return 1\n")
    shifted = parser.parse("a.py", b"\n\n\ndef f():\n    return 1\n")
    edited = parser.parse("a.py", b"def f():\n    return 2\n")

    plain_fn = _first(plain, "function_definition")
    shifted_fn = _first(shifted, "function_definition")
    edited_fn = _first(edited, "function_definition")

    assert plain_fn.start != shifted_fn.start
    assert plain_fn.digest == shifted_fn.digest
    assert plain_fn.digest != edited_fn.digest


def test_digest_uses_raw_leaf_bytes() -> None:
    parser = SyntaxParser()
    e_acute = parser.parse("latin.py", "x = 'é'\n".encode("latin-1"))
    e_grave = parser.parse("latin.py", "x = 'è'\n".encode("latin-1"))

    assert e_acute.text(e_acute.root.id) == e_grave.text(e_grave.root.id)
    assert e_acute.root.digest != e_grave.root.digest


def test_syntax_error_is_reported() -> None:
    with pytest.raises(ParseServiceError, match="syntax error"):
        SyntaxParser().parse("broken.py", b"def broken(:\n    pass\n")


def test_unsupported_language() -> None:
    with pytest.raises(ParseServiceError, match="unsupported language"):
        SyntaxParser().parse("notes.txt", b"hello")


def test_parse_javascript() -> None:
    tree = SyntaxParser().parse("app.js", b"function add(a, b) { return a + b; }\n")

    function = _first(tree, "function_declaration")

    assert tree.root.type == "program"
    assert tree.text(function.id) == "function add(a, b) { return a + b; }"
