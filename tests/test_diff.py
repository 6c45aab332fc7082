"""Tests for the unified diff capability."""

import shutil
from pathlib import PurePath

import pytest

from goreorder.core.errors import ProcessError
from goreorder.diff import UnifiedDiffer, mirrored_path

needs_diff = pytest.mark.skipif(shutil.which("diff") is None, reason="needs diff")


def test_mirrored_path():
    assert mirrored_path("pkg/a.go") == PurePath("pkg/a.go")
    assert mirrored_path("/abs/pkg/a.go") == PurePath("abs/pkg/a.go")
    assert mirrored_path("../up/a.go") == PurePath("up/a.go")
    assert mirrored_path("..") == PurePath("source.go")


@needs_diff
def test_identical_sources_give_empty_diff():
    assert UnifiedDiffer().diff("package main\n", "package main\n", "a.go") == ""


@needs_diff
def test_headers_use_a_and_b_prefixes():
    out = UnifiedDiffer().diff("package main\n\nvar b = 1\n", "package main\n\nvar a = 1\n", "pkg/example.go")
    assert "--- a/pkg/example.go" in out
    assert "+++ b/pkg/example.go" in out
    assert "-var b = 1" in out
    assert "+var a = 1" in out
    assert "goreorder-a-" not in out and "goreorder-b-" not in out


def test_missing_tool():
    with pytest.raises(ProcessError):
        UnifiedDiffer(tool="goreorder-no-such-diff").diff("a\n", "b\n", "a.go")
