"""File, directory and stdin processing for the command line.

Usage:
    from goreorder.walker import Walker
    walker = Walker(settings)
    summary = walker.process_path(Path("./mypackage"))
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional, TextIO, Union

from .config import Settings
from .core.errors import ReorderError
from .core.models import ReorderConfig
from .core.reorder import reorder_source

logger = logging.getLogger(__name__)

STDIN_FILENAME = "stdin.go"

_EXCLUDED_DIRS = {"vendor", ".git"}


@dataclass
class WalkSummary:
    """Summary of a run over one or more paths."""

    processed_files: int = 0
    skipped_files: int = 0
    failures: Dict[str, str] = field(default_factory=dict)

    def add_failure(self, path: str, reason: str) -> None:
        self.failures[path] = reason

    @property
    def ok(self) -> bool:
        return not self.failures


def is_test_file(path: Path) -> bool:
    return path.name.endswith("_test.go")


def iter_go_files(root: Path) -> Iterator[Path]:
    """Go files under ``root`` in a stable order, pruning vendor directories."""
    for dirpath, dirnames, filenames in os.walk(root, topdown=True):
        dirnames[:] = sorted(d for d in dirnames if d not in _EXCLUDED_DIRS)
        for name in sorted(filenames):
            if name.endswith(".go"):
                yield Path(dirpath) / name


class Walker:
    """Apply one set of settings to files, directories or stdin."""

    def __init__(self, settings: Settings, out: Optional[TextIO] = None):
        self.settings = settings
        self.out = out if out is not None else sys.stdout
        self.summary = WalkSummary()

    def process_path(self, path: Path) -> WalkSummary:
        """Reorder a file, or every Go file below a directory."""
        if path.is_dir():
            if path.name in _EXCLUDED_DIRS:
                logger.info("skipping directory %s", path)
                self.summary.skipped_files += 1
                return self.summary
            logger.info("processing directory %s", path)
            for file_path in iter_go_files(path):
                self._process_file(file_path)
            return self.summary

        if not path.exists():
            self.summary.add_failure(str(path), "no such file or directory")
            logger.warning("%s: no such file or directory", path)
            return self.summary

        self._process_file(path)
        return self.summary

    def process_stdin(self, data: Union[bytes, str]) -> WalkSummary:
        """Reorder source read from stdin; the result is always printed."""
        logger.info("processing stdin, write is disabled")
        self._reorder(STDIN_FILENAME, source=data, write_back=False)
        return self.summary

    def _process_file(self, path: Path) -> None:
        if is_test_file(path):
            logger.info("skipping test file %s", path)
            self.summary.skipped_files += 1
            return
        logger.info("processing file %s", path)
        self._reorder(str(path), source=None, write_back=self.settings.write)

    def _reorder(self, filename: str, *, source: Optional[Union[bytes, str]], write_back: bool) -> None:
        config = ReorderConfig(
            filename=filename,
            source=source,
            format_tool=self.settings.format,
            reorder_types=self.settings.reorder_types,
            order=self.settings.order,
            diff=self.settings.diff,
        )
        try:
            output = reorder_source(config)
        except ReorderError as exc:
            logger.warning("%s: %s", filename, exc)
            self.summary.add_failure(filename, str(exc))
            return

        self.summary.processed_files += 1
        # a diff is a report, never a replacement for the file
        if write_back and not self.settings.diff:
            try:
                Path(filename).write_text(output, encoding="utf-8")
            except OSError as exc:
                logger.warning("%s: cannot write file: %s", filename, exc)
                self.summary.add_failure(filename, f"cannot write file: {exc}")
            return
        self.out.write(output)


def failed_paths(summary: WalkSummary) -> List[str]:
    return sorted(summary.failures)
