"""
Core reorder engine: data model, errors, order planning and splicing.
"""

from .errors import FormatError, ParseError, ProcessError, ReorderError, ReorderIOError
from .models import BUILTIN_FORMATTER, Category, Declaration, ParsedInfo, ReorderConfig
from .order import DEFAULT_ORDER, VALID_TOKENS, ResolvedOrder, resolve_order, validate_order
from .splice import splice

__all__ = [
    # Models
    "BUILTIN_FORMATTER",
    "Category",
    "Declaration",
    "ParsedInfo",
    "ReorderConfig",
    # Errors
    "FormatError",
    "ParseError",
    "ProcessError",
    "ReorderError",
    "ReorderIOError",
    # Ordering
    "DEFAULT_ORDER",
    "VALID_TOKENS",
    "ResolvedOrder",
    "resolve_order",
    "validate_order",
    "splice",
]
