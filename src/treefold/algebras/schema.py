"""
Child declarations for the ESTree-style kinds the frontend produces.

Tables built from this schema cover every tree the parser can emit; a
table only needs the kinds it wants to handle, so narrower tables (the
evaluator) pick a subset.
"""

from typing import Dict, Tuple

ESTREE_SCHEMA: Dict[str, Tuple[str, ...]] = {
    # Statements
    "Program": ("body*",),
    "VariableDeclaration": ("declarations*",),
    "VariableDeclarator": ("id", "init?"),
    "ExpressionStatement": ("expression",),
    "BlockStatement": ("body*",),
    "IfStatement": ("test", "consequent", "alternate?"),
    "ReturnStatement": ("argument?",),
    "FunctionDeclaration": ("id", "params*", "body"),
    # Expressions
    "AssignmentExpression": ("left", "right"),
    "ConditionalExpression": ("test", "consequent", "alternate"),
    "LogicalExpression": ("left", "right"),
    "BinaryExpression": ("left", "right"),
    "UnaryExpression": ("argument",),
    "CallExpression": ("callee", "arguments*"),
    "MemberExpression": ("object", "property"),
    "ArrayExpression": ("elements*",),
    # Leaves
    "Identifier": (),
    "Literal": (),
}

# Fields that only describe source text and are dropped by reshaping
SOURCE_ONLY_FIELDS = frozenset({"raw"})


def child_fields(kind: str) -> Tuple[str, ...]:
    """Bare field names holding children of `kind`"""
    return tuple(spec.rstrip("*?") for spec in ESTREE_SCHEMA[kind])
