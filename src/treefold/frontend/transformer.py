"""
Lark parse tree -> ESTree-style Node tree
"""

import logging
import re
from typing import Any, List, Optional

from lark import Transformer, v_args
from lark.lexer import Token
from typing_extensions import TypeAlias

from ..shared.nodes import Node
from ..shared.source_location import SourceLocation

LarkMeta: TypeAlias = Any  # Lark's internal Meta object

logger: logging.Logger = logging.getLogger(__name__)


def _parse_number(text: str) -> Any:
    if "." in text or "e" in text.lower():
        return float(text)
    return int(text)


_SIMPLE_ESCAPES = {"b": "\b", "f": "\f", "n": "\n", "r": "\r", "t": "\t", "v": "\v", "0": "\0"}
_ESCAPE = re.compile(r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|.)", re.DOTALL)


def _decode_escape(match: "re.Match[str]") -> str:
    escape = match.group(1)
    if len(escape) > 1:
        digits = escape[2:-1] if escape.startswith("u{") else escape[1:]
        code = int(digits, 16)
        if code <= 0x10FFFF:
            return chr(code)
    elif escape in _SIMPLE_ESCAPES:
        return _SIMPLE_ESCAPES[escape]
    elif escape not in "ux123456789":
        # Any other escaped character stands for itself: \' \" \\
        return escape
    raise ValueError(f"invalid escape sequence '\\{escape}' in string literal")


def _parse_string(text: str) -> str:
    """Decode a double-quoted literal with JS escapes; surrogate pairs are joined"""
    value = _ESCAPE.sub(_decode_escape, text[1:-1])
    return value.encode("utf-16-le", "surrogatepass").decode("utf-16-le", "surrogatepass")


@v_args(inline=True, meta=True)
class TreeTransformer(Transformer):
    """Builds Nodes bottom-up, attaching a SourceLocation to each"""

    def __init__(self) -> None:
        super().__init__()
        self.current_file: str = ""  # Must be set by parser before use

    # Locations -----------------------------------------------------------

    def _location(self, meta: LarkMeta) -> Optional[SourceLocation]:
        if meta is None or getattr(meta, "empty", True):
            return None
        return SourceLocation(
            file=self.current_file,
            line=meta.line,
            column=meta.column,
            start=meta.start_pos,
            end=meta.end_pos,
            end_line=meta.end_line,
            end_column=meta.end_column,
        )

    def _token_location(self, token: Token) -> SourceLocation:
        return SourceLocation(
            file=self.current_file,
            line=token.line,
            column=token.column,
            start=token.start_pos,
            end=token.end_pos,
            end_line=token.end_line,
            end_column=token.end_column,
        )

    def _identifier(self, token: Token) -> Node:
        return Node("Identifier", {"name": str(token)}, self._token_location(token))

    # Statements ----------------------------------------------------------

    def program(self, meta: LarkMeta, *statements: Node) -> Node:
        return Node("Program", {"body": list(statements)}, self._location(meta))

    def var_decl(self, meta: LarkMeta, kind: Token, *declarators: Node) -> Node:
        return Node("VariableDeclaration",
                    {"kind": str(kind), "declarations": list(declarators)},
                    self._location(meta))

    def declarator(self, meta: LarkMeta, name: Token, init: Optional[Node] = None) -> Node:
        return Node("VariableDeclarator",
                    {"id": self._identifier(name), "init": init},
                    self._location(meta))

    def function_decl(self, meta: LarkMeta, name: Token, params: Optional[List[Node]], body: Node) -> Node:
        return Node("FunctionDeclaration",
                    {"id": self._identifier(name), "params": params or [], "body": body},
                    self._location(meta))

    def params(self, meta: LarkMeta, *names: Token) -> List[Node]:
        return [self._identifier(name) for name in names]

    def if_stmt(self, meta: LarkMeta, test: Node, consequent: Node, alternate: Optional[Node] = None) -> Node:
        return Node("IfStatement",
                    {"test": test, "consequent": consequent, "alternate": alternate},
                    self._location(meta))

    def return_stmt(self, meta: LarkMeta, argument: Optional[Node] = None) -> Node:
        return Node("ReturnStatement", {"argument": argument}, self._location(meta))

    def block(self, meta: LarkMeta, *statements: Node) -> Node:
        return Node("BlockStatement", {"body": list(statements)}, self._location(meta))

    def expr_stmt(self, meta: LarkMeta, expression: Node) -> Node:
        return Node("ExpressionStatement", {"expression": expression}, self._location(meta))

    # Expressions ---------------------------------------------------------

    def assign(self, meta: LarkMeta, left: Node, right: Node) -> Node:
        return Node("AssignmentExpression",
                    {"operator": "=", "left": left, "right": right},
                    self._location(meta))

    def ternary(self, meta: LarkMeta, test: Node, consequent: Node, alternate: Node) -> Node:
        return Node("ConditionalExpression",
                    {"test": test, "consequent": consequent, "alternate": alternate},
                    self._location(meta))

    def logical(self, meta: LarkMeta, left: Node, operator: Token, right: Node) -> Node:
        return Node("LogicalExpression",
                    {"operator": str(operator), "left": left, "right": right},
                    self._location(meta))

    def binary(self, meta: LarkMeta, left: Node, operator: Token, right: Node) -> Node:
        return Node("BinaryExpression",
                    {"operator": str(operator), "left": left, "right": right},
                    self._location(meta))

    def unary(self, meta: LarkMeta, operator: Token, argument: Node) -> Node:
        return Node("UnaryExpression",
                    {"operator": str(operator), "prefix": True, "argument": argument},
                    self._location(meta))

    def call(self, meta: LarkMeta, callee: Node, arguments: Optional[List[Node]]) -> Node:
        return Node("CallExpression",
                    {"callee": callee, "arguments": arguments or []},
                    self._location(meta))

    def member(self, meta: LarkMeta, obj: Node, name: Token) -> Node:
        return Node("MemberExpression",
                    {"object": obj, "property": self._identifier(name), "computed": False},
                    self._location(meta))

    def computed_member(self, meta: LarkMeta, obj: Node, prop: Node) -> Node:
        return Node("MemberExpression",
                    {"object": obj, "property": prop, "computed": True},
                    self._location(meta))

    def arguments(self, meta: LarkMeta, *expressions: Node) -> List[Node]:
        return list(expressions)

    def array(self, meta: LarkMeta, elements: Optional[List[Node]]) -> Node:
        return Node("ArrayExpression", {"elements": elements or []}, self._location(meta))

    # Leaves --------------------------------------------------------------

    def identifier(self, meta: LarkMeta, name: Token) -> Node:
        return self._identifier(name)

    def number(self, meta: LarkMeta, token: Token) -> Node:
        return Node("Literal", {"value": _parse_number(str(token)), "raw": str(token)},
                    self._token_location(token))

    def string(self, meta: LarkMeta, token: Token) -> Node:
        return Node("Literal", {"value": _parse_string(str(token)), "raw": str(token)},
                    self._token_location(token))

    def true(self, meta: LarkMeta) -> Node:
        return Node("Literal", {"value": True, "raw": "true"}, self._location(meta))

    def false(self, meta: LarkMeta) -> Node:
        return Node("Literal", {"value": False, "raw": "false"}, self._location(meta))

    def null(self, meta: LarkMeta) -> Node:
        return Node("Literal", {"value": None, "raw": "null"}, self._location(meta))
