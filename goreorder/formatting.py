"""Formatter adapter.

Two implementations of the same capability: an in-process formatter built on
the tree-sitter parse, and a wrapper around an external tool such as
``gofmt`` or ``goimports`` that rewrites a temporary file in place.
"""

from __future__ import annotations

import logging
import os
import subprocess
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import List, Protocol, Set, Tuple

from tree_sitter import Node

from .core.errors import FormatError, ParseError
from .core.models import BUILTIN_FORMATTER
from .parser import iter_named_nodes, node_rows, parse_source
from .parser.go import check_syntax, doc_start_row

logger = logging.getLogger(__name__)

# Keyword of each top-level declaration, as gofmt groups them.
_DECL_KEYWORDS = {
    "package_clause": "package",
    "import_declaration": "import",
    "const_declaration": "const",
    "var_declaration": "var",
    "type_declaration": "type",
    "function_declaration": "func",
    "method_declaration": "func",
}

_MULTILINE_LITERALS = {"raw_string_literal", "interpreted_string_literal", "comment"}


class Formatter(Protocol):
    def format(self, source: str) -> str:
        """Return ``source`` with normalized layout."""


# =============================================================================
# In-process Formatter
# =============================================================================


@dataclass(frozen=True)
class BuiltinFormatter:
    """Layout normalization without an external process.

    Mirrors gofmt's handling of the space between top-level declarations:
    trailing blanks go, blank-line runs collapse to one, declarations of a
    different keyword or with a doc comment are separated by a blank line,
    and the file ends with a single newline. Indentation is left alone.
    """

    name: str = BUILTIN_FORMATTER

    def format(self, source: str) -> str:
        source = source.replace("\r\n", "\n")
        parsed = parse_source(source)
        try:
            check_syntax(parsed.root, filename="<spliced>")
        except ParseError as exc:
            raise FormatError(f"reordered source does not parse: {exc}") from exc

        lines = source.split("\n")
        (inside, open_rows) = _literal_rows(parsed.root)
        separated = _separated_rows(parsed.root)

        out: List[str] = []
        for i, line in enumerate(lines):
            if i in inside:
                out.append(line)
                continue
            if i not in open_rows:
                line = line.rstrip(" \t")
            if not line:
                if out and out[-1] != "":
                    out.append("")
                continue
            if i in separated and out and out[-1] != "":
                out.append("")
            out.append(line)

        while out and out[-1] == "":
            out.pop()
        return "\n".join(out) + "\n" if out else ""


def _literal_rows(root: Node) -> Tuple[Set[int], Set[int]]:
    """Rows starting inside a multi-line literal, and rows ending inside one."""
    inside: Set[int] = set()
    open_rows: Set[int] = set()
    for node in iter_named_nodes(root):
        if node.type not in _MULTILINE_LITERALS:
            continue
        start = node.start_point[0]
        end = node.end_point[0]
        if end > start:
            open_rows.update(range(start, end))
            inside.update(range(start + 1, end + 1))
    return inside, open_rows


def _separated_rows(root: Node) -> Set[int]:
    """Rows that must be preceded by a blank line."""
    rows: Set[int] = set()
    siblings = root.named_children
    prev_keyword = None
    prev_end = -1
    for idx, node in enumerate(siblings):
        keyword = _DECL_KEYWORDS.get(node.type)
        if keyword is None:
            continue
        (start, end) = node_rows(node)
        lead = doc_start_row(siblings, idx, prev_end)
        if prev_keyword is not None and prev_end == lead - 1:
            if keyword != prev_keyword or lead < start:
                rows.add(lead)
        prev_keyword = keyword
        prev_end = end
    return rows


# =============================================================================
# External Formatter
# =============================================================================


@dataclass(frozen=True)
class ExternalFormatter:
    """Run ``<tool> -w <file>`` on a temporary copy and read the result back."""

    tool: str

    def format(self, source: str) -> str:
        try:
            fd, path = tempfile.mkstemp(prefix="goreorder-", suffix=".go")
        except OSError as exc:
            raise FormatError(f"failed to create temporary file: {exc}") from exc

        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as fh:
                fh.write(source)

            logger.debug("running %s -w %s", self.tool, path)
            try:
                proc = subprocess.run(
                    [self.tool, "-w", path],
                    stdout=subprocess.PIPE,
                    stderr=subprocess.PIPE,
                    text=True,
                )
            except OSError as exc:
                raise FormatError(f"cannot run {self.tool!r}: {exc}") from exc

            if proc.returncode != 0:
                detail = proc.stderr.strip() or proc.stdout.strip()
                raise FormatError(f"{self.tool} exited with status {proc.returncode}: {detail}")

            return Path(path).read_text(encoding="utf-8")
        except OSError as exc:
            raise FormatError(f"temporary file error: {exc}") from exc
        finally:
            try:
                os.unlink(path)
            except FileNotFoundError:
                pass


def get_formatter(tool: str) -> Formatter:
    """Formatter for a tool name: the builtin one or an external executable."""
    if tool == BUILTIN_FORMATTER:
        return BuiltinFormatter()
    return ExternalFormatter(tool)
