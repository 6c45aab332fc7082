"""Data model: declaration categories, extracted declarations and run options."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Sequence, Tuple, Union


# format_tool value selecting the in-process formatter
BUILTIN_FORMATTER = "builtin"


class Category(str, Enum):
    """Classification of a top-level declaration."""

    CONST = "const"
    VAR = "var"
    INTERFACE = "interface"
    TYPE = "type"
    FUNC = "func"
    METHOD = "method"
    CONSTRUCTOR = "constructor"


# Categories whose single-line, undocumented members are kept on adjacent lines.
COMPACT_CATEGORIES = frozenset({Category.CONST, Category.VAR, Category.INTERFACE, Category.TYPE})


@dataclass(frozen=True)
class Declaration:
    """One classified unit of source.

    ``text`` holds the attached doc comment lines followed by the declaration
    lines, verbatim. ``start_line``/``end_line`` are the 1-indexed inclusive
    span in the original file, doc comment included.
    """

    name: str
    category: Category
    text: str
    start_line: int
    end_line: int
    owner: Optional[str] = None
    doc_lines: int = 0

    @property
    def span(self) -> Tuple[int, int]:
        return (self.start_line, self.end_line)

    @property
    def signature(self) -> str:
        """Span key shared by every name of a grouped declaration."""
        return f"{self.start_line}-{self.end_line}"

    @property
    def is_compact(self) -> bool:
        """Single line, no doc comment, in a category that packs tightly."""
        return self.doc_lines == 0 and "\n" not in self.text and self.category in COMPACT_CATEGORIES


@dataclass
class ParsedInfo:
    """Everything the splice engine needs, as produced by the extractor."""

    constants: Dict[str, Declaration] = field(default_factory=dict)  # keyed by span signature
    variables: Dict[str, Declaration] = field(default_factory=dict)  # keyed by span signature
    interfaces: Dict[str, Declaration] = field(default_factory=dict)
    types: Dict[str, Declaration] = field(default_factory=dict)
    functions: Dict[str, List[Declaration]] = field(default_factory=dict)
    methods: Dict[str, List[Declaration]] = field(default_factory=dict)
    constructors: Dict[str, List[Declaration]] = field(default_factory=dict)

    # dicts keep insertion order, these make first-seen order explicit
    type_names: List[str] = field(default_factory=list)
    interface_names: List[str] = field(default_factory=list)

    def declarations(self) -> Iterator[Declaration]:
        """All recorded declarations (grouped blocks may repeat a span)."""
        yield from self.constants.values()
        yield from self.variables.values()
        yield from self.interfaces.values()
        yield from self.types.values()
        for group in (self.functions, self.methods, self.constructors):
            for decls in group.values():
                yield from decls

    def is_empty(self) -> bool:
        return next(self.declarations(), None) is None


@dataclass
class ReorderConfig:
    """Input record for :func:`goreorder.core.reorder.reorder_source`."""

    filename: str
    source: Optional[Union[bytes, str]] = None  # read from ``filename`` when empty
    format_tool: str = BUILTIN_FORMATTER
    reorder_types: bool = False
    order: Optional[Sequence[str]] = None
    diff: bool = False
