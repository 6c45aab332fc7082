#!/usr/bin/env python3
"""
goreorder CLI - reorder vars, consts, types, methods and functions in Go files

Usage:
    goreorder reorder [options] <file.go|directory>   Reorder files, print the result
    cat file.go | goreorder reorder                    Reorder stdin
    goreorder print-config                             Show the merged configuration
"""

import argparse
import logging
import sys
from pathlib import Path

from . import __version__
from .config import FORMAT_TOOLS, dump_settings, load_settings
from .core.order import DEFAULT_ORDER, VALID_TOKENS
from .walker import Walker, failed_paths

ORDER_HELP = f"""Order of elements when rewriting, comma separated. Omitted elements are
placed after the given ones, in the default order. main and init are ordered as
plain functions unless listed, in which case they take the listed position.
Allowed values: {", ".join(VALID_TOKENS)}. Default: {",".join(DEFAULT_ORDER)}"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="goreorder",
        description="goreorder: reorder the vars, consts, types... in a Go source file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    goreorder reorder --write --reorder-types --format gofmt file.go
    goreorder reorder --diff ./mypackage
    cat file.go | goreorder reorder
        """,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # reorder command; every option defaults to None so that unset flags
    # leave the configuration file and environment values in place
    reorder_parser = subparsers.add_parser(
        "reorder",
        help="Reorder vars, consts, types, methods/functions and constructors",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    reorder_parser.add_argument("paths", nargs="*", help="Go files or directories (default: stdin)")
    reorder_parser.add_argument(
        "--format", "-f", choices=FORMAT_TOOLS, default=None, help="Format tool to use (default: builtin)"
    )
    reorder_parser.add_argument(
        "--write", "-w", action="store_true", default=None, help="Write result to the source file instead of stdout"
    )
    reorder_parser.add_argument("--verbose", "-v", action="store_true", default=None, help="Verbose output")
    reorder_parser.add_argument(
        "--reorder-types", "-r", action="store_true", default=None, help="Sort types by name too"
    )
    reorder_parser.add_argument(
        "--diff", "-d", action="store_true", default=None, help="Print a unified diff instead of the source"
    )
    reorder_parser.add_argument("--order", "-o", default=None, help=ORDER_HELP)

    # print-config command
    subparsers.add_parser("print-config", help="Print the configuration")

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    overrides = {}
    if args.command == "reorder":
        overrides = {
            "format": args.format,
            "write": args.write,
            "verbose": args.verbose,
            "reorder_types": args.reorder_types,
            "diff": args.diff,
            "order": args.order,
        }

    try:
        settings = load_settings(overrides)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.command == "print-config":
        return cmd_print_config(settings)
    if args.command == "reorder":
        return cmd_reorder(settings, args)
    return 0


def cmd_print_config(settings):
    """Handle print-config command."""
    sys.stdout.write(dump_settings(settings))
    return 0


def cmd_reorder(settings, args):
    """Handle reorder command."""
    logging.basicConfig(
        level=logging.INFO if settings.verbose else logging.WARNING,
        format="%(asctime)s %(message)s",
        stream=sys.stderr,
    )

    walker = Walker(settings, out=sys.stdout)

    if not args.paths:
        if sys.stdin is None or sys.stdin.isatty():
            print("Error: provide a file or a directory, or pipe content to stdin", file=sys.stderr)
            return 1
        summary = walker.process_stdin(sys.stdin.read())
    else:
        for path in args.paths:
            summary = walker.process_path(Path(path))

    if not summary.ok:
        failed = failed_paths(summary)
        print(f"Error: {len(failed)} file(s) could not be reordered: {', '.join(failed)}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
