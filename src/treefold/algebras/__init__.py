"""
Ready-made handler tables over the ESTree-style schema.
"""

from .schema import ESTREE_SCHEMA, child_fields
from .measures import count_table, height_table, count_nodes, tree_height
from .structural import reshape_table, rebuild_table, reshape, rebuild
from .graph import Graph, GraphFragment, Vertex, Edge, graph_table, to_graph, assemble
from .evaluate import evaluation_table, evaluate

ALGEBRAS = {
    "count": count_table,
    "height": height_table,
    "reshape": reshape_table,
    "graph": graph_table,
    "evaluate": evaluation_table,
}
