"""
Tree-to-tree reductions: reshaping into plain data and rebuilding nodes.
"""

from typing import Any, Dict, List, Optional, Sequence

from ..engine import ChildSelector, HandlerTable, fold
from ..engine.handlers import Combine, Schema
from ..shared.nodes import Node
from .schema import ESTREE_SCHEMA, SOURCE_ONLY_FIELDS


def _field_names(children: Sequence[Any]) -> List[str]:
    return [ChildSelector.parse(spec).field for spec in children]


def _reshape_node(names: List[str]) -> Combine:
    def combine(node: Node, children: List[Any]) -> Dict[str, Any]:
        shaped: Dict[str, Any] = {"type": node.kind}
        for name, value in node.fields.items():
            if name not in names and name not in SOURCE_ONLY_FIELDS:
                shaped[name] = value
        shaped.update(zip(names, children))
        return shaped
    return combine


def _reshape_binary(node: Node, children: List[Any]) -> Dict[str, Any]:
    left, right = children
    return {"op": node["operator"], "left": left, "right": right}


def _reshape_literal(node: Node, children: List[Any]) -> Any:
    return node["value"]


def _reshape_identifier(node: Node, children: List[Any]) -> Any:
    return node["name"]


def reshape_table(schema: Optional[Schema] = None) -> HandlerTable:
    """
    Plain-data view of a tree for downstream consumers.

    BinaryExpression becomes {op, left, right}, Literal its bare value,
    Identifier its name; everything else a dict tagged with "type".
    """
    schema = schema or ESTREE_SCHEMA
    table = HandlerTable("reshape")
    for kind, children in schema.items():
        table.register(kind, children, _reshape_node(_field_names(children)))
    table.register("BinaryExpression", schema.get("BinaryExpression", ("left", "right")),
                   _reshape_binary, replace=True)
    table.register("Literal", (), _reshape_literal, replace=True)
    table.register("Identifier", (), _reshape_identifier, replace=True)
    return table


def _rebuild_node(names: List[str]) -> Combine:
    def combine(node: Node, children: List[Any]) -> Node:
        present = {name: value for name, value in zip(names, children) if name in node}
        return node.replace(**present)
    return combine


def rebuild_table(schema: Optional[Schema] = None) -> HandlerTable:
    """Copies every node; the result compares equal to the input tree"""
    schema = schema or ESTREE_SCHEMA
    table = HandlerTable("rebuild")
    for kind, children in schema.items():
        table.register(kind, children, _rebuild_node(_field_names(children)))
    return table


def reshape(tree: Node, schema: Optional[Schema] = None) -> Any:
    return fold(tree, reshape_table(schema))


def rebuild(tree: Node, schema: Optional[Schema] = None) -> Node:
    return fold(tree, rebuild_table(schema))
