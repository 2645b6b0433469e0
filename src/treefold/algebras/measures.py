"""
Scalar summaries: node count and tree height.
"""

from typing import Any, List, Optional

from ..engine import HandlerTable, fold, iter_results
from ..engine.handlers import Schema
from ..shared.nodes import Node
from .schema import ESTREE_SCHEMA


def _count(node: Node, children: List[Any]) -> int:
    return 1 + sum(iter_results(children))


def _height(node: Node, children: List[Any]) -> int:
    return max(iter_results(children), default=0) + 1


def count_table(schema: Optional[Schema] = None) -> HandlerTable:
    """Every kind folds to 1 + the counts of its children"""
    return HandlerTable.uniform(schema or ESTREE_SCHEMA, _count, name="count")


def height_table(schema: Optional[Schema] = None) -> HandlerTable:
    """Leaves have height 1; every other node is one above its tallest child"""
    return HandlerTable.uniform(schema or ESTREE_SCHEMA, _height, name="height")


def count_nodes(tree: Node, schema: Optional[Schema] = None) -> int:
    return fold(tree, count_table(schema))


def tree_height(tree: Node, schema: Optional[Schema] = None) -> int:
    return fold(tree, height_table(schema))
