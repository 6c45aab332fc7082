"""Unified diff between the original and the reordered source.

Both versions are written under two temporary trees mirroring the file's
relative path, compared with ``diff -Naur``, and the temporary roots are
rewritten to ``a/`` and ``b/`` so the result applies with ``patch -p1``.
"""

from __future__ import annotations

import logging
import os
import subprocess
import tempfile
from dataclasses import dataclass
from pathlib import Path, PurePath
from typing import Protocol

from .core.errors import ProcessError, ReorderIOError

logger = logging.getLogger(__name__)


class Differ(Protocol):
    def diff(self, original: str, formatted: str, filename: str) -> str:
        """Return a unified diff turning ``original`` into ``formatted``."""


def mirrored_path(filename: str) -> PurePath:
    """Relative form of ``filename`` that stays inside a temporary root."""
    parts = [p for p in PurePath(filename).parts if p not in {"..", "."}]
    anchor = PurePath(filename).anchor
    if parts and anchor and parts[0] == anchor:
        parts = parts[1:]
    if not parts:
        return PurePath("source.go")
    return PurePath(*parts)


@dataclass(frozen=True)
class UnifiedDiffer:
    tool: str = "diff"

    def diff(self, original: str, formatted: str, filename: str) -> str:
        rel = mirrored_path(filename)
        try:
            with tempfile.TemporaryDirectory(prefix="goreorder-a-") as root_a:
                with tempfile.TemporaryDirectory(prefix="goreorder-b-") as root_b:
                    _write(Path(root_a) / rel, original)
                    _write(Path(root_b) / rel, formatted)
                    return self._run(root_a, root_b)
        except OSError as exc:
            raise ReorderIOError(f"temporary directory error: {exc}") from exc

    def _run(self, root_a: str, root_b: str) -> str:
        logger.debug("running %s -Naur %s %s", self.tool, root_a, root_b)
        try:
            proc = subprocess.run(
                [self.tool, "-Naur", root_a, root_b],
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
            )
        except OSError as exc:
            raise ProcessError(f"cannot run {self.tool!r}: {exc}") from exc

        # 0: identical, 1: differences found
        if proc.returncode not in (0, 1):
            detail = proc.stderr.strip() or proc.stdout.strip()
            raise ProcessError(f"{self.tool} exited with status {proc.returncode}: {detail}", code=proc.returncode)

        out = proc.stdout.replace(root_a + os.sep, "a/")
        return out.replace(root_b + os.sep, "b/")


def _write(path: Path, text: str) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise ReorderIOError(f"failed to write temporary file {path}: {exc}") from exc
