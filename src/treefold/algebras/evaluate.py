"""
Expression evaluator

Folds expression trees to Python values against a read-only environment.
Only expression kinds (plus Program and ExpressionStatement) are handled,
so declarations and control flow surface as UnknownKindError. Every
operand is evaluated, including both arms of `?:` and both sides of
`&&`/`||`.
"""

import logging
import operator
from typing import Any, Callable, Dict, List, Mapping, Optional

from ..engine import HandlerTable, fold
from ..shared.errors import CombineError
from ..shared.nodes import Node

logger = logging.getLogger("treefold.algebras.evaluate")


def _divide(left: Any, right: Any) -> Any:
    if right == 0:
        raise ZeroDivisionError
    if isinstance(left, int) and isinstance(right, int) and left % right == 0:
        return left // right
    return left / right


def _remainder(left: Any, right: Any) -> Any:
    if right == 0:
        raise ZeroDivisionError
    return left % right


BINARY_OPERATORS: Dict[str, Callable[[Any, Any], Any]] = {
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
    "/": _divide,
    "%": _remainder,
    "==": operator.eq,
    "!=": operator.ne,
    "===": operator.eq,
    "!==": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}

UNARY_OPERATORS: Dict[str, Callable[[Any], Any]] = {
    "-": operator.neg,
    "+": operator.pos,
    "!": operator.not_,
}


def _apply(node: Node, func: Callable[..., Any], *args: Any) -> Any:
    try:
        return func(*args)
    except ZeroDivisionError:
        raise CombineError("division by zero", node.kind, node.location) from None
    except TypeError as e:
        raise CombineError(f"invalid operands for '{node.get('operator')}': {e}",
                           node.kind, node.location) from e


def evaluation_table(env: Optional[Mapping[str, Any]] = None) -> HandlerTable:
    """Handler table evaluating expressions with identifiers bound by `env`"""
    env = dict(env or {})
    table = HandlerTable("evaluate")

    @table.register("Program", ["body*"])
    def _program(node: Node, children: List[Any]) -> List[Any]:
        (statements,) = children
        return statements

    @table.register("ExpressionStatement", ["expression"])
    def _statement(node: Node, children: List[Any]) -> Any:
        return children[0]

    @table.register("Literal")
    def _literal(node: Node, children: List[Any]) -> Any:
        return node["value"]

    @table.register("Identifier")
    def _identifier(node: Node, children: List[Any]) -> Any:
        name = node["name"]
        if name not in env:
            raise CombineError(f"unbound identifier '{name}'", node.kind, node.location)
        return env[name]

    @table.register("BinaryExpression", ["left", "right"])
    def _binary(node: Node, children: List[Any]) -> Any:
        op = node["operator"]
        func = BINARY_OPERATORS.get(op)
        if func is None:
            raise CombineError(f"unsupported binary operator '{op}'", node.kind, node.location)
        left, right = children
        return _apply(node, func, left, right)

    @table.register("LogicalExpression", ["left", "right"])
    def _logical(node: Node, children: List[Any]) -> Any:
        left, right = children
        op = node["operator"]
        if op == "&&":
            return right if left else left
        if op == "||":
            return left if left else right
        raise CombineError(f"unsupported logical operator '{op}'", node.kind, node.location)

    @table.register("UnaryExpression", ["argument"])
    def _unary(node: Node, children: List[Any]) -> Any:
        op = node["operator"]
        func = UNARY_OPERATORS.get(op)
        if func is None:
            raise CombineError(f"unsupported unary operator '{op}'", node.kind, node.location)
        return _apply(node, func, children[0])

    @table.register("ConditionalExpression", ["test", "consequent", "alternate"])
    def _conditional(node: Node, children: List[Any]) -> Any:
        test, consequent, alternate = children
        return consequent if test else alternate

    @table.register("ArrayExpression", ["elements*"])
    def _array(node: Node, children: List[Any]) -> List[Any]:
        return list(children[0])

    @table.register("CallExpression", ["callee", "arguments*"])
    def _call(node: Node, children: List[Any]) -> Any:
        callee, arguments = children
        if not callable(callee):
            raise CombineError(f"value of type {type(callee).__name__} is not callable",
                               node.kind, node.location)
        return callee(*arguments)

    return table


def evaluate(tree: Node, env: Optional[Mapping[str, Any]] = None) -> Any:
    logger.debug(f"Evaluating {tree.kind} with {len(env or {})} bindings")
    return fold(tree, evaluation_table(env))
