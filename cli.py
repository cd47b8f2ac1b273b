#!/usr/bin/env python3
"""
ts-unused-exports CLI

Finds exported symbols in a TypeScript project that no other module
imports. Entry files come from the command line or from the tsconfig's
"files" key; everything they import is scanned as well.
"""

import argparse
import logging
import sys
from pathlib import Path

from exporters import to_json, to_text
from graph.unused import find_unused_exports
from scanner.builder import build_closure
from scanner.errors import ScanError
from scanner.tsconfig import DEFAULT_EXCLUDES, load_tsconfig, normalize_excludes


USAGE_ERROR = -1


def parse_args(args=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="ts-unused-exports",
        description="Report exports of a TypeScript project that are never imported.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Note: if no file is specified after tsconfig, the files will be read from the
tsconfig's "files" key which must be present.

If the files are specified, their path must be relative to the tsconfig file.
For example, given:
  /
  |-- config
  |    \\-- tsconfig.json
  \\-- src
       \\-- file.ts

Then the usage would be:
  ts-unused-exports config/tsconfig.json ../src/file.ts
        """,
    )

    parser.add_argument(
        "tsconfig",
        help="Path to the project's tsconfig.json",
    )

    parser.add_argument(
        "files",
        nargs="*",
        help="Entry files, relative to the tsconfig's directory",
    )

    parser.add_argument(
        "--excludes",
        default=DEFAULT_EXCLUDES,
        help="'|'-separated module suffixes never scanned (default: d.ts)",
    )

    parser.add_argument(
        "-f", "--format",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )

    parser.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        help="Output file (default: stdout)",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log scanning progress",
    )

    return parser.parse_args(args)


def main(args=None):
    """Main entry point. Returns the number of modules with unused exports."""
    parsed = parse_args(args)

    level = logging.DEBUG if parsed.verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    tsconfig = Path(parsed.tsconfig)
    if not tsconfig.is_file():
        print(f"Error: '{parsed.tsconfig}' is not a file", file=sys.stderr)
        return USAGE_ERROR

    try:
        config = load_tsconfig(tsconfig, parsed.files or None)
        graph = build_closure(
            root=config.root,
            paths=config.files,
            base_url=config.base_url,
            excludes=normalize_excludes(parsed.excludes),
        )
        unused = find_unused_exports(graph.files, config.files)
    except (ScanError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return USAGE_ERROR

    if parsed.format == "json":
        output = to_json(unused, graph)
    else:
        output = to_text(unused)

    if parsed.output:
        try:
            output_path = Path(parsed.output)
            output_path.write_text(output + "\n", encoding="utf-8")
            print(f"Output written to: {output_path}", file=sys.stderr)
        except OSError as e:
            print(f"Error writing output: {e}", file=sys.stderr)
            return USAGE_ERROR
    else:
        print(output)

    return len(unused)


if __name__ == "__main__":
    sys.exit(main())
