"""Go declaration extraction.

Builds the categorized, line-addressed inventory of top-level declarations
(constants, variables, interfaces, types, functions, methods, constructors)
that the splice engine reorders.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Union

from tree_sitter import Node

from ..core.errors import ParseError
from ..core.models import Category, Declaration, ParsedInfo
from . import first_error, node_rows, node_text, parse_source

logger = logging.getLogger(__name__)

# Top-level nodes that are left where they are.
_PASSIVE_NODES = {"package_clause", "import_declaration", "comment"}

_DECLARATION_NODES = {
    "const_declaration",
    "var_declaration",
    "type_declaration",
    "function_declaration",
    "method_declaration",
}


def extract(source: Union[bytes, str], *, filename: str = "<source>") -> ParsedInfo:
    """Parse Go source and classify its top-level declarations.

    Args:
        source: Go source text or UTF-8 bytes
        filename: Name used in error messages

    Returns:
        ParsedInfo inventory

    Raises:
        ParseError: The source is not valid Go.
    """
    text = decode_source(source, filename=filename)
    parsed = parse_source(text)
    check_syntax(parsed.root, filename=filename)

    lines = text.split("\n")
    src = parsed.src
    info = ParsedInfo()
    functions: List[tuple] = []

    prev_end_row = -1
    siblings = parsed.root.named_children
    for idx, node in enumerate(siblings):
        if node.type == "comment":
            continue
        if node.type not in _DECLARATION_NODES and node.type not in _PASSIVE_NODES:
            (row, col) = node.start_point
            raise ParseError(
                f"{filename}:{row + 1}:{col + 1}: expected declaration, found {node.type}",
                line=row + 1,
                column=col + 1,
            )

        doc_row = doc_start_row(siblings, idx, prev_end_row)
        prev_end_row = node_rows(node)[1]

        if node.type in {"const_declaration", "var_declaration"}:
            _collect_values(src, node, doc_row, lines, info)
        elif node.type == "type_declaration":
            _collect_types(src, node, doc_row, lines, info)
        elif node.type == "method_declaration":
            _collect_method(src, node, doc_row, lines, info)
        elif node.type == "function_declaration":
            # constructors need every type name first
            functions.append((node, doc_row))

    type_names = set(info.type_names)
    for node, doc_row in functions:
        _collect_function(src, node, doc_row, lines, info, type_names)

    return info


def decode_source(source: Union[bytes, str], *, filename: str = "<source>") -> str:
    """Return source as text, rejecting input that is not UTF-8."""
    if isinstance(source, str):
        return source
    try:
        return source.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ParseError(f"{filename}: source is not valid UTF-8: {exc}") from exc


def check_syntax(root: Node, *, filename: str = "<source>") -> None:
    """Raise ParseError at the first syntax error in the tree."""
    bad = first_error(root)
    if bad is None:
        return
    (row, col) = bad.start_point
    what = f"missing {bad.type}" if bad.is_missing else "syntax error"
    raise ParseError(f"{filename}:{row + 1}:{col + 1}: {what}", line=row + 1, column=col + 1)


# =============================================================================
# Doc Comments
# =============================================================================


def doc_start_row(siblings: List[Node], idx: int, prev_end_row: int) -> int:
    """First row of the comment block attached to ``siblings[idx]``.

    Comments must sit on consecutive lines directly above the declaration. A
    comment starting on the row where the previous construct ends trails that
    construct and is not attached.
    """
    row = siblings[idx].start_point[0]
    j = idx - 1
    while j >= 0 and siblings[j].type == "comment":
        comment = siblings[j]
        (start, end) = node_rows(comment)
        if end != row - 1 or start <= prev_end_row:
            break
        row = start
        j -= 1
    return row


def _make_declaration(
    node: Node,
    doc_row: int,
    lines: List[str],
    *,
    name: str,
    category: Category,
    owner: Optional[str] = None,
) -> Declaration:
    (_, end_row) = node_rows(node)
    return Declaration(
        name=name,
        category=category,
        text="\n".join(lines[doc_row : end_row + 1]),
        start_line=doc_row + 1,
        end_line=end_row + 1,
        owner=owner,
        doc_lines=node.start_point[0] - doc_row,
    )


# =============================================================================
# Const / Var
# =============================================================================


def _iter_specs(node: Node, *spec_types: str) -> Iterable[Node]:
    """Specs of a declaration in source order, flattening ``( ... )`` groups."""
    for child in node.named_children:
        if child.type in spec_types:
            yield child
        elif child.type.endswith("_spec_list"):
            for spec in child.named_children:
                if spec.type in spec_types:
                    yield spec


def _collect_values(src: bytes, node: Node, doc_row: int, lines: List[str], info: ParsedInfo) -> None:
    if node.type == "const_declaration":
        (spec_type, category, target) = ("const_spec", Category.CONST, info.constants)
    else:
        (spec_type, category, target) = ("var_spec", Category.VAR, info.variables)

    for spec in _iter_specs(node, spec_type):
        for name_node in spec.children_by_field_name("name"):
            decl = _make_declaration(node, doc_row, lines, name=node_text(src, name_node), category=category)
            # every name of a group shares the span: keep the block once
            if decl.signature in target:
                continue
            target[decl.signature] = decl


# =============================================================================
# Types / Interfaces
# =============================================================================


def _collect_types(src: bytes, node: Node, doc_row: int, lines: List[str], info: ParsedInfo) -> None:
    for spec in _iter_specs(node, "type_spec", "type_alias"):
        _record_type(src, node, spec, doc_row, lines, info)


def _record_type(src: bytes, decl_node: Node, spec: Node, doc_row: int, lines: List[str], info: ParsedInfo) -> None:
    name_node = spec.child_by_field_name("name")
    type_node = spec.child_by_field_name("type")
    if name_node is None:
        return
    name = node_text(src, name_node)

    if type_node is not None and type_node.type == "interface_type":
        if name not in info.interfaces:
            info.interface_names.append(name)
        info.interfaces[name] = _make_declaration(decl_node, doc_row, lines, name=name, category=Category.INTERFACE)
    else:
        if name not in info.types:
            info.type_names.append(name)
        info.types[name] = _make_declaration(decl_node, doc_row, lines, name=name, category=Category.TYPE)


# =============================================================================
# Functions / Methods / Constructors
# =============================================================================


def _collect_method(src: bytes, node: Node, doc_row: int, lines: List[str], info: ParsedInfo) -> None:
    name_node = node.child_by_field_name("name")
    receiver = node.child_by_field_name("receiver")
    if name_node is None:
        return
    name = node_text(src, name_node)

    owner = _receiver_type(src, receiver) if receiver is not None else None
    if owner is None:
        logger.debug("line %d: method %s has no usable receiver type, left in place", node.start_point[0] + 1, name)
        return

    decl = _make_declaration(node, doc_row, lines, name=name, category=Category.METHOD, owner=owner)
    info.methods.setdefault(owner, []).append(decl)


def _collect_function(
    src: bytes,
    node: Node,
    doc_row: int,
    lines: List[str],
    info: ParsedInfo,
    type_names: set,
) -> None:
    name_node = node.child_by_field_name("name")
    if name_node is None:
        return
    name = node_text(src, name_node)

    # Heuristic: returning a known type makes a function that type's constructor,
    # whether or not it really builds one.
    owner = next((t for t in _result_type_names(src, node.child_by_field_name("result")) if t in type_names), None)
    if owner is not None:
        decl = _make_declaration(node, doc_row, lines, name=name, category=Category.CONSTRUCTOR, owner=owner)
        info.constructors.setdefault(owner, []).append(decl)
        return

    decl = _make_declaration(node, doc_row, lines, name=name, category=Category.FUNC)
    info.functions.setdefault(name, []).append(decl)


def _receiver_type(src: bytes, receiver: Node) -> Optional[str]:
    """Extract the type name from a method receiver."""
    params = [c for c in receiver.named_children if c.type == "parameter_declaration"]
    if len(params) != 1:
        return None
    return _named_type(src, params[0].child_by_field_name("type"))


def _result_type_names(src: bytes, result: Optional[Node]) -> List[str]:
    """Named types appearing in a function result, in order."""
    if result is None:
        return []
    if result.type == "parameter_list":
        candidates = [p.child_by_field_name("type") for p in result.named_children if p.type == "parameter_declaration"]
    else:
        candidates = [result]

    names: List[str] = []
    for candidate in candidates:
        name = _named_type(src, candidate)
        if name is not None:
            names.append(name)
    return names


def _named_type(src: bytes, node: Optional[Node]) -> Optional[str]:
    """Base identifier of ``T``, ``*T``, ``(T)`` or ``T[P]``."""
    if node is None:
        return None
    if node.type == "type_identifier":
        return node_text(src, node)
    if node.type in {"pointer_type", "parenthesized_type"}:
        inner = node.named_children[0] if node.named_children else None
        return _named_type(src, inner)
    if node.type == "generic_type":
        return _named_type(src, node.child_by_field_name("type"))
    return None


def summarize(info: ParsedInfo) -> Dict[str, int]:
    """Count of recorded declarations per category."""
    counts: Dict[str, int] = {}
    for decl in info.declarations():
        counts[decl.category.value] = counts.get(decl.category.value, 0) + 1
    return counts
