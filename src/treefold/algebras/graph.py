"""
Renderable graph translation

The fold turns each node into a GraphFragment (vertex label plus labelled
edges to its children's fragments). `to_graph` then numbers the fragments
into a flat vertex/edge list that renderers can draw: Graphviz text via
`Graph.to_dot`, JSON via `Graph.to_dict`, or a numpy adjacency matrix.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

from ..engine import ChildSelector, HandlerTable, fold
from ..engine.handlers import Combine, Schema
from ..shared.nodes import Node
from .schema import ESTREE_SCHEMA

# Scalar fields worth showing next to the kind, in priority order
LABEL_FIELDS = ("operator", "name", "raw", "kind")


@dataclass(frozen=True)
class GraphFragment:
    kind: str
    label: str
    edges: Tuple[Tuple[str, "GraphFragment"], ...] = ()


@dataclass(frozen=True)
class Vertex:
    id: int
    kind: str
    label: str


@dataclass(frozen=True)
class Edge:
    source: int
    target: int
    label: str


@dataclass
class Graph:
    vertices: List[Vertex] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.vertices)

    @property
    def root(self) -> Optional[Vertex]:
        return self.vertices[0] if self.vertices else None

    def adjacency(self) -> np.ndarray:
        """Square 0/1 matrix, row = parent vertex, column = child vertex"""
        size = len(self.vertices)
        matrix = np.zeros((size, size), dtype=np.int8)
        if self.edges:
            sources = np.fromiter((e.source for e in self.edges), dtype=np.intp, count=len(self.edges))
            targets = np.fromiter((e.target for e in self.edges), dtype=np.intp, count=len(self.edges))
            matrix[sources, targets] = 1
        return matrix

    def leaves(self) -> List[int]:
        """Ids of vertices without outgoing edges"""
        if not self.vertices:
            return []
        out_degree = self.adjacency().sum(axis=1)
        return [int(i) for i in np.flatnonzero(out_degree == 0)]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "vertices": [{"id": v.id, "kind": v.kind, "label": v.label} for v in self.vertices],
            "edges": [{"source": e.source, "target": e.target, "label": e.label} for e in self.edges],
        }

    def to_dot(self, name: str = "tree") -> str:
        lines = [f"digraph {name} {{"]
        for v in self.vertices:
            lines.append(f"  n{v.id} [label={_dot_quote(v.label)}];")
        for e in self.edges:
            lines.append(f"  n{e.source} -> n{e.target} [label={_dot_quote(e.label)}];")
        lines.append("}")
        return "\n".join(lines)


def _dot_quote(text: str) -> str:
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


def vertex_label(node: Node) -> str:
    for name in LABEL_FIELDS:
        value = node.get(name)
        if isinstance(value, str):
            return f"{node.kind} {value}"
    if "value" in node:
        return f"{node.kind} {node['value']!r}"
    return node.kind


def _fragment(selectors: Sequence[ChildSelector]) -> Combine:
    def combine(node: Node, children: List[Any]) -> GraphFragment:
        edges: List[Tuple[str, GraphFragment]] = []
        for selector, value in zip(selectors, children):
            if value is None:
                continue
            if selector.sequence:
                edges.extend((f"{selector.field}[{i}]", item) for i, item in enumerate(value))
            else:
                edges.append((selector.field, value))
        return GraphFragment(node.kind, vertex_label(node), tuple(edges))
    return combine


def graph_table(schema: Optional[Schema] = None) -> HandlerTable:
    table = HandlerTable("graph")
    for kind, children in (schema or ESTREE_SCHEMA).items():
        selectors = [ChildSelector.parse(spec) for spec in children]
        table.register(kind, selectors, _fragment(selectors))
    return table


def assemble(root: GraphFragment) -> Graph:
    """Number fragments in pre-order (children left to right)"""
    graph = Graph()
    stack: List[Tuple[GraphFragment, Optional[int], str]] = [(root, None, "")]
    while stack:
        fragment, parent, label = stack.pop()
        vid = len(graph.vertices)
        graph.vertices.append(Vertex(vid, fragment.kind, fragment.label))
        if parent is not None:
            graph.edges.append(Edge(parent, vid, label))
        for edge_label, child in reversed(fragment.edges):
            stack.append((child, vid, edge_label))
    return graph


def to_graph(tree: Node, schema: Optional[Schema] = None) -> Graph:
    return fold(tree, graph_table(schema), assemble)
