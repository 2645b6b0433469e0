#!/usr/bin/env python3
"""
Tests for the node model: frozen fields, structural equality on deep trees,
and field replacement.
"""

import sys

import pytest

from tests.test_utils import binary, ident, lit, unary, unary_chain
from treefold.algebras import rebuild
from treefold.shared.nodes import Node, node
from treefold.shared.source_location import SourceLocation


class TestNodeFields:

    def test_lists_are_frozen(self):
        tree = Node("Program", {"body": [lit(1)]})
        assert tree["body"] == (lit(1),)
        with pytest.raises(TypeError):
            tree.fields["body"] = ()

    def test_keyword_constructor(self):
        assert node("Literal", value=1, raw="1") == Node("Literal", {"value": 1, "raw": "1"})

    def test_kind_must_be_a_string(self):
        with pytest.raises(TypeError):
            Node("")

    def test_unhashable(self):
        with pytest.raises(TypeError):
            hash(lit(1))


class TestEquality:

    def test_location_ignored(self):
        here = SourceLocation(file="a.js", line=1, column=1)
        assert Node("Identifier", {"name": "x"}, here) == ident("x")

    @pytest.mark.parametrize("other", [
        Node("Identifier", {"value": 1, "raw": "1"}),
        Node("Literal", {"value": 2, "raw": "1"}),
        Node("Literal", {"value": 1}),
    ])
    def test_differences_detected(self, other):
        assert lit(1) != other

    def test_sequence_length_and_order(self):
        first = Node("Program", {"body": [lit(1), lit(2)]})
        assert first != Node("Program", {"body": [lit(2), lit(1)]})
        assert first != Node("Program", {"body": [lit(1)]})
        assert first == Node("Program", {"body": (lit(1), lit(2))})

    def test_node_against_scalar(self):
        assert Node("Pair", {"first": lit(1)}) != Node("Pair", {"first": 1})
        assert lit(1) != "Literal"

    def test_deep_trees(self):
        depth = 100_000
        assert depth > sys.getrecursionlimit()
        tree = unary_chain(depth)
        assert rebuild(tree) == tree
        assert unary_chain(depth) == tree

    def test_deep_trees_differing_at_the_leaf(self):
        depth = 100_000
        other = lit(1)
        for _ in range(depth):
            other = unary("-", other)
        assert other != unary_chain(depth)


class TestReplace:

    def test_replace_keeps_kind_and_location(self):
        here = SourceLocation(file="a.js", line=2, column=3)
        original = Node("BinaryExpression", {"operator": "+", "left": lit(1), "right": lit(2)}, here)
        changed = original.replace(right=ident("y"))
        assert changed == binary("+", lit(1), ident("y"))
        assert changed.location is here
        assert original["right"] == lit(2)

    def test_replace_adds_fields(self):
        assert lit(1).replace(extra=[lit(2)])["extra"] == (lit(2),)
