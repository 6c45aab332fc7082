"""Splice engine: move declarations to a single injection point, in order.

Lines are addressed by index. Moved spans go into a removed-index set and the
output is rebuilt by walking the original lines once, emitting the ordered
block just before the first moved line. Everything that is not part of a
moved span (orphan comments, imports, blank lines) keeps its relative place.
"""

from __future__ import annotations

from typing import Iterator, List, Optional, Set

from .models import Declaration, ParsedInfo
from .order import CONST, FUNC, INIT, INTERFACE, MAIN, TYPE, VAR, ResolvedOrder


def splice(text: str, info: ParsedInfo, order: ResolvedOrder, *, reorder_types: bool = False) -> str:
    """Rewrite ``text`` with the declarations of ``info`` laid out per ``order``.

    Args:
        text: Original source text
        info: Extracted declarations of ``text``
        order: Resolved category order
        reorder_types: Sort types by name instead of keeping discovery order

    Returns:
        The spliced text, or ``text`` itself when nothing moved
    """
    lines = text.split("\n")
    removed: Set[int] = set()
    block: List[str] = []
    inject_at: Optional[int] = None
    prev: Optional[Declaration] = None

    for token in order.tokens:
        for decl in _declarations_for(token, info, order, reorder_types):
            span = range(decl.start_line - 1, decl.end_line)
            # grouped declarations share a span: the first name moves the block
            if any(i in removed for i in span):
                continue
            if inject_at is None:
                inject_at = span.start
            removed.update(span)

            if prev is not None and _needs_separator(prev, decl):
                block.append("")
            block.extend(decl.text.split("\n"))
            prev = decl

    if inject_at is None:
        return text

    out: List[str] = []
    for i, line in enumerate(lines):
        if i == inject_at:
            out.extend(block)
            following = _next_kept(lines, removed, i)
            if following is not None and following.strip():
                out.append("")
        if i not in removed:
            out.append(line)
    return "\n".join(out)


def _declarations_for(
    token: str,
    info: ParsedInfo,
    order: ResolvedOrder,
    reorder_types: bool,
) -> Iterator[Declaration]:
    """Declarations of one order slot, in emission order."""
    if token == CONST:
        yield from _by_name(info.constants.values())
    elif token == VAR:
        yield from _by_name(info.variables.values())
    elif token == INTERFACE:
        for name in sorted(info.interface_names):
            yield info.interfaces[name]
    elif token == TYPE:
        names = sorted(info.type_names) if reorder_types else list(info.type_names)
        for name in names:
            yield info.types[name]
            yield from _by_name(info.constructors.get(name, ()))
            yield from _by_name(info.methods.get(name, ()))
    elif token == FUNC:
        skip = order.extracted()
        for name in sorted(info.functions):
            if name in skip:
                continue
            yield from info.functions[name]
    elif token in (INIT, MAIN):
        yield from info.functions.get(token, ())


def _by_name(decls) -> List[Declaration]:
    return sorted(decls, key=lambda d: (d.name, d.start_line))


def _needs_separator(prev: Declaration, decl: Declaration) -> bool:
    """Blank line between fragments unless both are compact and of one category."""
    return not (prev.is_compact and decl.is_compact and prev.category == decl.category)


def _next_kept(lines: List[str], removed: Set[int], start: int) -> Optional[str]:
    for j in range(start, len(lines)):
        if j not in removed:
            return lines[j]
    return None
