"""
Test utilities for the treefold test suite.

Small tree builders so tests read like the trees they describe.
"""

import sys
from pathlib import Path
from typing import Any, Dict, List

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
from treefold.shared.nodes import Node


def lit(value: Any) -> Node:
    raw = "null" if value is None else str(value).lower() if isinstance(value, bool) else str(value)
    return Node("Literal", {"value": value, "raw": raw})


def ident(name: str) -> Node:
    return Node("Identifier", {"name": name})


def binary(op: str, left: Node, right: Node) -> Node:
    return Node("BinaryExpression", {"operator": op, "left": left, "right": right})


def unary(op: str, argument: Node) -> Node:
    return Node("UnaryExpression", {"operator": op, "prefix": True, "argument": argument})


def program(*statements: Node) -> Node:
    return Node("Program", {"body": list(statements)})


def expr_stmt(expression: Node) -> Node:
    return Node("ExpressionStatement", {"expression": expression})


def let(name: str, init: Any = None) -> Node:
    declarator = Node("VariableDeclarator", {"id": ident(name), "init": init})
    return Node("VariableDeclaration", {"kind": "let", "declarations": [declarator]})


def sample_program() -> Node:
    """`let x = 1; x;` as a 7-node tree"""
    return program(let("x", lit(1)), expr_stmt(ident("x")))


def product_chain() -> Node:
    """((1 * 1) * 2)"""
    return binary("*", binary("*", lit(1), lit(1)), lit(2))


def unary_chain(depth: int) -> Node:
    """`depth` nested UnaryExpressions over one Literal, built without recursion"""
    tree = lit(0)
    for _ in range(depth):
        tree = unary("-", tree)
    return tree


def recording_table(log: List[Any], schema: Dict[str, tuple]):
    """Handler table whose combine appends each node to `log` when it is combined"""
    from treefold.engine import HandlerTable

    def combine(node: Node, children: List[Any]) -> Node:
        log.append(node)
        return node

    return HandlerTable.uniform(schema, combine, name="recording")
