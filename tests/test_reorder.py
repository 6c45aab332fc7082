"""End to end tests for reorder_source."""

import shutil
import subprocess
from dataclasses import dataclass, field
from typing import List

import pytest

from goreorder import ReorderConfig, reorder_source
from goreorder.core.errors import FormatError, ParseError, ReorderIOError
from goreorder.formatting import ExternalFormatter


def reorder(src, **kwargs):
    return reorder_source(ReorderConfig(filename="example.go", source=src, **kwargs))


ORDERED = """package main

import "fmt"

const (
\tA = 1
\tB = 2
)

var x = 1
var y = 2

// Shape is a shape.
type Shape interface {
\tArea() float64
}

// Point is a point.
type Point struct {
\tX, Y int
}

// NewPoint builds a Point.
func NewPoint() *Point {
\treturn &Point{}
}

func (p *Point) Area() float64 {
\treturn 0
}

func helper() {
\tfmt.Println("x")
}
"""

ORPHANS = """package main
// orphan comment 1 here

func main() {
\tfmt.Println("nothing")
}

// orphan comment 2 here

type Foo struct {}

func (f *Foo) FooMethod1() {}

// foo comment
func foo() {
}

func (f *Foo) FooMethod2() {}

// orphan comment 3 here

func (f *Foo) FooMethod3() {}

// bar comment
func bar() {
}

func (f *Foo) FooMethod4() {}
"""

ORPHANS_EXPECTED = """package main
// orphan comment 1 here

// orphan comment 2 here

type Foo struct {}

func (f *Foo) FooMethod1() {}

func (f *Foo) FooMethod2() {}

func (f *Foo) FooMethod3() {}

func (f *Foo) FooMethod4() {}

// bar comment
func bar() {
}

// foo comment
func foo() {
}

func main() {
\tfmt.Println("nothing")
}

// orphan comment 3 here
"""


@dataclass
class UpperFormatter:
    calls: List[str] = field(default_factory=list)

    def format(self, source):
        self.calls.append(source)
        return source.upper()


@dataclass
class RecordingDiffer:
    calls: list = field(default_factory=list)

    def diff(self, original, formatted, filename):
        self.calls.append((original, formatted, filename))
        return "DIFF"


def test_ordered_file_is_unchanged():
    assert reorder(ORDERED) == ORDERED


def test_orphan_comments_stay_in_place():
    out = reorder(ORPHANS)
    assert out == ORPHANS_EXPECTED
    assert reorder(out) == out


def test_different_order():
    src = "package main\n\nvar a = 1\nconst c = 3\nvar b = 2\n"
    out = reorder(src, order=["var", "const"])
    assert out == "package main\n\nvar a = 1\nvar b = 2\n\nconst c = 3\n"


def test_interfaces_are_sorted():
    src = "package main\n\ntype Foo interface {\n\tFooMethod1()\n}\n\ntype Bar interface {\n\tBarMethod1()\n}\n"
    expected = "package main\n\ntype Bar interface {\n\tBarMethod1()\n}\n\ntype Foo interface {\n\tFooMethod1()\n}\n"
    assert reorder(src) == expected


@pytest.mark.parametrize(
    "reorder_types, expected",
    [
        (False, "package main\n\ntype grault struct {}\ntype xyzzy struct {}\ntype bar struct {}\n"),
        (True, "package main\n\ntype bar struct {}\ntype grault struct {}\ntype xyzzy struct {}\n"),
    ],
)
def test_struct_order(reorder_types, expected):
    src = "package main\ntype grault struct {}\n\ntype xyzzy struct {}\ntype bar struct {}\n"
    assert reorder(src, reorder_types=reorder_types) == expected


def test_init_and_main_slots():
    src = "package main\n\nfunc zeta() {}\n\nfunc main() {}\n\nfunc alpha() {}\n\nfunc init() {}\n"
    out = reorder(src, order=["const", "var", "init", "main"])
    assert out == (
        "package main\n\nfunc init() {}\n\nfunc main() {}\n\nfunc alpha() {}\n\nfunc zeta() {}\n"
    )
    # without the slots they sort with the other functions
    plain = reorder(src)
    assert plain == (
        "package main\n\nfunc alpha() {}\n\nfunc init() {}\n\nfunc main() {}\n\nfunc zeta() {}\n"
    )


def test_injected_formatter_receives_spliced_text():
    fmt = UpperFormatter()
    out = reorder_source(
        ReorderConfig(filename="x.go", source="package main\n\nvar b = 1\nconst a = 1\n"), formatter=fmt
    )
    assert fmt.calls == ["package main\n\nconst a = 1\n\nvar b = 1\n"]
    assert out == fmt.calls[0].upper()


def test_diff_mode_uses_differ():
    differ = RecordingDiffer()
    src = "package main\n\nvar b = 1\nconst a = 1\n"
    out = reorder_source(ReorderConfig(filename="x.go", source=src, diff=True), differ=differ)
    assert out == "DIFF"
    assert differ.calls == [(src, "package main\n\nconst a = 1\n\nvar b = 1\n", "x.go")]


@pytest.mark.skipif(
    shutil.which("diff") is None or shutil.which("patch") is None, reason="needs diff and patch"
)
def test_diff_mode_default_differ(tmp_path):
    src = "package main\n\nvar b = 1\nconst a = 1\n"
    out = reorder(src, diff=True)
    assert "--- a/example.go" in out
    assert "+++ b/example.go" in out

    target = tmp_path / "example.go"
    target.write_text(src)
    subprocess.run(["patch", "-p1", "--quiet"], input=out, text=True, cwd=tmp_path, check=True)
    assert target.read_text() == reorder(src)


def test_parse_error_keeps_original_content():
    src = "package main\n\nfunc (\n"
    with pytest.raises(ParseError) as excinfo:
        reorder(src)
    assert excinfo.value.content == src


def test_undecodable_source_keeps_raw_bytes():
    src = b'package main\n\nvar b = "\xff"\nconst a = 1\n'
    with pytest.raises(ParseError, match="UTF-8") as excinfo:
        reorder(src)
    assert excinfo.value.content == src


def test_undecodable_file_keeps_raw_bytes(tmp_path):
    path = tmp_path / "latin1.go"
    path.write_bytes(b"package main\n\n// caf\xe9\nvar b = 1\n")
    with pytest.raises(ParseError) as excinfo:
        reorder_source(ReorderConfig(filename=str(path)))
    assert excinfo.value.content == path.read_bytes()


def test_nothing_to_move_is_only_formatted():
    fmt = UpperFormatter()
    src = 'package main\n\nimport "fmt"\n'
    out = reorder_source(ReorderConfig(filename="x.go", source=src), formatter=fmt)
    assert fmt.calls == [src]
    assert out == src.upper()


def test_format_error_keeps_original_content():
    src = "package main\n\nvar b = 1\nconst a = 1\n"
    with pytest.raises(FormatError) as excinfo:
        reorder_source(
            ReorderConfig(filename="x.go", source=src),
            formatter=ExternalFormatter("goreorder-no-such-tool"),
        )
    assert excinfo.value.content == src


def test_reads_file_when_no_source(tmp_path):
    path = tmp_path / "a.go"
    path.write_text("package main\n\nvar b = 1\nconst a = 1\n")
    out = reorder_source(ReorderConfig(filename=str(path)))
    assert out == "package main\n\nconst a = 1\n\nvar b = 1\n"


def test_unreadable_file(tmp_path):
    with pytest.raises(ReorderIOError) as excinfo:
        reorder_source(ReorderConfig(filename=str(tmp_path / "missing.go")))
    assert excinfo.value.content is None
