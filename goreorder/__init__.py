"""
goreorder: reorder the declarations of Go source files.

Main interface: reorder_source()
"""

__version__ = "0.1.0"

from .core import ReorderConfig, ReorderError
from .core.reorder import reorder_source
from .parser.go import extract

__all__ = ["ReorderConfig", "ReorderError", "extract", "reorder_source"]
