"""Tree-sitter backend for goreorder.

Provides the Go parser, node helpers and syntax-error location used by the
declaration extractor and the in-process formatter.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Tuple

from tree_sitter import Node, Parser
from tree_sitter_language_pack import get_language

GO_LANGUAGE = "go"


# =============================================================================
# Data Types
# =============================================================================


@dataclass(frozen=True)
class TsParsed:
    """Parsed source code with tree-sitter AST."""

    language: str
    src: bytes
    tree: Any
    root: Node


# =============================================================================
# Parser Infrastructure
# =============================================================================

_THREAD_LOCAL = threading.local()


def _get_parser(language_name: str) -> Parser:
    """Get or create a thread-local parser for the given language."""
    parsers = getattr(_THREAD_LOCAL, "parsers", None)
    if parsers is None:
        parsers = {}
        _THREAD_LOCAL.parsers = parsers

    parser = parsers.get(language_name)
    if parser is None:
        lang = get_language(language_name)
        parser = Parser()
        if hasattr(parser, "set_language"):
            parser.set_language(lang)
        else:
            parser.language = lang
        parsers[language_name] = parser
    return parser


# =============================================================================
# AST Utilities
# =============================================================================


def iter_named_nodes(root: Node) -> Iterable[Node]:
    """Iterate over all named nodes in the AST."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        for child in reversed(node.named_children):
            stack.append(child)


def node_text(src: bytes, node: Node) -> str:
    """Extract text content of a node."""
    return src[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


def node_rows(node: Node) -> Tuple[int, int]:
    """0-indexed first and last line occupied by a node."""
    start_row = node.start_point[0]
    (end_row, end_col) = node.end_point
    # a node that swallowed its terminating newline ends at column 0 of the next row
    if end_col == 0 and end_row > start_row:
        end_row -= 1
    return start_row, end_row


def first_error(root: Node) -> Optional[Node]:
    """Return the first ERROR or MISSING node in document order, if any."""
    if not root.has_error:
        return None
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node
        # MISSING nodes are unnamed, so walk every child
        for child in reversed(node.children):
            if child.has_error or child.is_missing:
                stack.append(child)
    return root


# =============================================================================
# Core Parsing
# =============================================================================


def parse_source(text: str, *, language: str = GO_LANGUAGE) -> TsParsed:
    """Parse source code with tree-sitter.

    Args:
        text: Source code text
        language: tree-sitter language name

    Returns:
        TsParsed object (check ``root.has_error`` for syntax errors)
    """
    src = text.encode("utf-8")
    parser = _get_parser(language)
    tree = parser.parse(src)
    return TsParsed(language=language, src=src, tree=tree, root=tree.root_node)


__all__ = [
    "GO_LANGUAGE",
    "TsParsed",
    "first_error",
    "iter_named_nodes",
    "node_rows",
    "node_text",
    "parse_source",
]
