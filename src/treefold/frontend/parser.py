"""
Parser

Produces the kind-tagged trees the fold engine consumes. Uses a Lark LALR
parser with position tracking so every node carries a SourceLocation.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from lark import Lark
from lark.exceptions import UnexpectedInput, VisitError

from .transformer import TreeTransformer
from ..shared.nodes import Node
from ..shared.source_location import SourceLocation
from ..utils.config import DEFAULT_PARSER_CACHE_FILE, DEFAULT_SOURCE_NAME

logger = logging.getLogger("treefold.frontend.parser")

GRAMMAR_PATH = Path(__file__).parent / "grammar.lark"


class ParseError(Exception):
    """Parse error with source location"""
    code = "P0001"

    def __init__(self, message: str, source_file: str, location: Optional[SourceLocation] = None):
        self.message = message
        self.source_file = source_file
        self.location = location
        super().__init__(f"{message} in {source_file}")


class Parser:
    """
    Source text -> Program node.

    The Lark instance is built once; `cache_file=False` disables Lark's
    grammar cache.
    """

    def __init__(self, cache_file: Union[str, bool] = DEFAULT_PARSER_CACHE_FILE):
        self.parser = Lark.open(
            str(GRAMMAR_PATH),
            start="program",
            parser="lalr",
            cache=cache_file,
            propagate_positions=True,
            maybe_placeholders=True,
        )
        self.transformer = TreeTransformer()

    def parse(self, source: str, source_file: str = DEFAULT_SOURCE_NAME) -> Node:
        try:
            self.transformer.current_file = source_file
            tree = self.parser.parse(source)
            program = self.transformer.transform(tree)
        except UnexpectedInput as e:
            location = None
            line = getattr(e, "line", -1)
            column = getattr(e, "column", -1)
            if isinstance(line, int) and line > 0:
                location = SourceLocation(file=source_file, line=line, column=max(column, 1))
            first_line = str(e).strip().split("\n")[0]
            raise ParseError(f"Parse error: {first_line}", source_file, location) from e
        except VisitError as e:
            raise ParseError(f"Parse error: {e.orig_exc}", source_file) from e

        logger.debug(f"Parsed {source_file}: {len(program['body'])} top-level statements")
        return program

    def parse_file(self, path: Union[str, Path], encoding: str = "utf-8") -> Node:
        path = Path(path)
        return self.parse(path.read_text(encoding=encoding), str(path))
