"""TSX parsing on top of tree-sitter.

A fresh ``Parser`` is created per call so that files can be compiled from
several threads without sharing parser state.
"""

from __future__ import annotations

from collections.abc import Iterator

import tree_sitter_typescript as _ts_mod
from tree_sitter import Language, Node, Parser, Tree

from widgetforge.errors import SourceParseError

TSX_LANGUAGE = Language(_ts_mod.language_tsx())

JSX_ELEMENT_TYPES = ("jsx_element", "jsx_self_closing_element")


def parse_tsx(source: str, file_path: str = "") -> Tree:
    """Parse TSX/JSX source text.

    Raises:
        SourceParseError: if tree-sitter had to recover from a syntax error.
    """
    parser = Parser(TSX_LANGUAGE)
    tree = parser.parse(source.encode("utf-8"))
    if tree.root_node.has_error:
        bad = _first_error(tree.root_node)
        line, column = (bad.start_point[0] + 1, bad.start_point[1] + 1) if bad else (0, 0)
        raise SourceParseError("Unparseable source", file_path=file_path, line=line, column=column)
    return tree


def _first_error(node: Node) -> Node | None:
    for child in walk(node):
        if child.is_error or child.is_missing:
            return child
    return None


def walk(node: Node) -> Iterator[Node]:
    """Pre-order (document order) traversal."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def text_of(node: Node) -> str:
    return node.text.decode("utf-8") if node.text is not None else ""


def named_children(node: Node) -> list[Node]:
    """Named children without comments."""
    return [c for c in node.named_children if c.type != "comment"]


def unwrap(node: Node) -> Node:
    """Strip parentheses and TypeScript-only wrappers (``as``, ``satisfies``, ``!``)."""
    while node.type in ("parenthesized_expression", "as_expression", "satisfies_expression", "non_null_expression"):
        inner = named_children(node)
        if not inner:
            break
        node = inner[0]
    return node
