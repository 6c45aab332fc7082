"""Errors raised by the reorder pipeline.

Every error carries ``content``: the best text a caller can fall back to,
which is the untouched original source whenever it could be read. Input that
is not valid UTF-8 is kept as the raw bytes.
"""

from __future__ import annotations

from typing import Optional, Union


class ReorderError(Exception):
    """Base class for all reorder failures."""

    def __init__(self, message: str, content: Optional[Union[str, bytes]] = None):
        super().__init__(message)
        self.content = content


class ParseError(ReorderError):
    """The source (or the spliced output) is not valid Go."""

    def __init__(
        self,
        message: str,
        content: Optional[Union[str, bytes]] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ):
        super().__init__(message, content)
        self.line = line
        self.column = column


class FormatError(ReorderError):
    """The formatting step failed."""


class ReorderIOError(ReorderError):
    """Reading or writing the source, a temp file or a temp directory failed."""


class ProcessError(ReorderError):
    """An external tool exited unexpectedly."""

    def __init__(self, message: str, content: Optional[Union[str, bytes]] = None, code: Optional[int] = None):
        super().__init__(message, content)
        self.code = code
