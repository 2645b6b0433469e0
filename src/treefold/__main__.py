"""CLI entry point: run `treefold file.js` or `python -m treefold file.js`."""

import json
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

from .utils.config import DEFAULT_ALGEBRA, DEFAULT_FILE_ENCODING, DEFAULT_SOURCE_NAME, JSON_INDENT


def _to_json(value: Any) -> str:
    from .algebras.graph import Graph
    from .shared.nodes import Node

    def default(obj: Any) -> Any:
        if isinstance(obj, Graph):
            return obj.to_dict()
        if isinstance(obj, Node):
            return {"type": obj.kind, **dict(obj.fields)}
        if isinstance(obj, tuple):
            return list(obj)
        raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")

    return json.dumps(value, default=default, indent=JSON_INDENT)


def main(argv: Optional[List[str]] = None) -> int:
    import argparse
    from .algebras import ALGEBRAS, assemble
    from .engine import fold
    from .frontend import Parser, ParseError
    from .shared.errors import ErrorReporter, FoldError

    parser = argparse.ArgumentParser(prog="treefold", description="Fold a program's syntax tree.")
    source_group = parser.add_mutually_exclusive_group(required=True)
    source_group.add_argument("file", nargs="?", type=Path, help="Path to source file")
    source_group.add_argument("-e", "--expr", help="Source text to fold instead of a file")
    parser.add_argument("--algebra", choices=sorted(ALGEBRAS), default=DEFAULT_ALGEBRA,
                        help=f"Handler table to fold with (default: {DEFAULT_ALGEBRA})")
    parser.add_argument("--format", choices=("json", "dot"), default="json",
                        help="Output format; dot only applies to --algebra graph")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if args.expr is not None:
        source, source_name = args.expr, DEFAULT_SOURCE_NAME
    else:
        path = args.file.resolve()
        if not path.is_file():
            sys.stderr.write(f"treefold: error: not a file: {path}\n")
            return 1
        try:
            source = path.read_text(encoding=DEFAULT_FILE_ENCODING)
        except OSError as e:
            sys.stderr.write(f"treefold: error: could not read file: {e}\n")
            return 1
        source_name = str(path)

    reporter = ErrorReporter({source_name: source})
    try:
        tree = Parser().parse(source, source_name)
        table = ALGEBRAS[args.algebra]()
        result = fold(tree, table, assemble if args.algebra == "graph" else None)
    except ParseError as e:
        reporter.report_error(e.message, e.location, code=ParseError.code)
    except FoldError as e:
        reporter.report(e)

    if reporter.has_errors():
        sys.stderr.write(reporter.format_all_errors() + "\n")
        return 1

    if args.format == "dot" and args.algebra == "graph":
        sys.stdout.write(result.to_dot() + "\n")
    else:
        sys.stdout.write(_to_json(result) + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
