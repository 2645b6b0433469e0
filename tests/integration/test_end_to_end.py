#!/usr/bin/env python3
"""
End-to-end tests: parse source, fold it with the ready-made tables, and
drive the command line interface.
"""

import json

import pytest

from treefold.__main__ import main
from treefold.algebras import count_table, height_table, reshape_table, to_graph
from treefold.engine import fold

pytestmark = pytest.mark.integration


class TestScenarios:

    def test_count_seven_nodes(self, parser, counting):
        tree = parser.parse("let x = 1;\nx;")
        assert fold(tree, counting) == 7

    def test_height_of_product_chain(self, parser, measuring):
        tree = parser.parse("(1 * 1) * 2;")
        expression = tree["body"][0]["expression"]
        assert fold(expression, measuring) == 3

    def test_reshape_product_chain(self, parser, reshaping):
        expression = parser.parse("(1 * 1) * 2;")["body"][0]["expression"]
        assert fold(expression, reshaping) == {
            "op": "*",
            "left": {"op": "*", "left": 1, "right": 1},
            "right": 2,
        }

    def test_same_tree_many_tables(self, parser):
        tree = parser.parse("function f(a) { if (a) { return a * 2; } return 0; }")
        count = fold(tree, count_table())
        graph = to_graph(tree)
        assert len(graph) == count
        assert graph.adjacency().sum() == count - 1
        assert fold(tree, height_table()) == max(
            len(path) for path in _paths(graph)
        )

    def test_deeply_nested_source(self, parser, counting):
        depth = 3_000
        source = "(" * depth + "1" + ")" * depth + ";"
        tree = parser.parse(source)
        assert fold(tree, counting) == 3
        negations = "-" * 100 + "1;"
        assert fold(parser.parse(negations), counting) == 103

    def test_reshape_program(self, parser):
        shaped = fold(parser.parse("let y = f(1);"), reshape_table())
        declarator = shaped["body"][0]["declarations"][0]
        assert declarator == {
            "type": "VariableDeclarator",
            "id": "y",
            "init": {"type": "CallExpression", "callee": "f", "arguments": [1]},
        }


def _paths(graph):
    """Root-to-leaf vertex paths, built iteratively"""
    children = {}
    for edge in graph.edges:
        children.setdefault(edge.source, []).append(edge.target)
    stack = [(0, [0])]
    while stack:
        vid, path = stack.pop()
        if vid not in children:
            yield path
            continue
        for child in children[vid]:
            stack.append((child, path + [child]))


class TestCommandLine:

    def test_count_expression(self, capsys):
        assert main(["-e", "let x = 1; x;"]) == 0
        assert json.loads(capsys.readouterr().out) == 7

    def test_reshape_file(self, tmp_path, capsys):
        path = tmp_path / "prog.js"
        path.write_text("(1 * 1) * 2;", encoding="utf-8")
        assert main([str(path), "--algebra", "reshape"]) == 0
        shaped = json.loads(capsys.readouterr().out)
        assert shaped["body"][0]["expression"] == {
            "op": "*", "left": {"op": "*", "left": 1, "right": 1}, "right": 2,
        }

    def test_graph_as_dot(self, capsys):
        assert main(["-e", "a + 1;", "--algebra", "graph", "--format", "dot"]) == 0
        out = capsys.readouterr().out
        assert out.startswith("digraph tree {")
        assert '[label="BinaryExpression +"]' in out

    def test_graph_as_json(self, capsys):
        assert main(["-e", "a;", "--algebra", "graph"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert [v["kind"] for v in data["vertices"]] == ["Program", "ExpressionStatement", "Identifier"]

    def test_evaluate(self, capsys):
        assert main(["-e", "1 + 2 * 3; 7 / 2;", "--algebra", "evaluate"]) == 0
        assert json.loads(capsys.readouterr().out) == [7, 3.5]

    def test_unknown_kind_reported(self, capsys, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "1")
        assert main(["-e", "let x = 1;", "--algebra", "evaluate"]) == 1
        err = capsys.readouterr().err
        assert "error[F0001]: no handler registered for node kind 'VariableDeclaration'" in err
        assert "1 | let x = 1;" in err
        assert "= note: while folding Program > body[0]:VariableDeclaration" in err

    def test_combine_error_reported(self, capsys, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "1")
        assert main(["-e", "1 / 0;", "--algebra", "evaluate"]) == 1
        err = capsys.readouterr().err
        assert "error[F0003]: division by zero" in err

    def test_parse_error_reported(self, capsys, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "1")
        assert main(["-e", "let x = ;"]) == 1
        err = capsys.readouterr().err
        assert "error[P0001]" in err
        assert "aborting due to 1 previous error" in err

    def test_missing_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "nope.js")]) == 1
        assert "not a file" in capsys.readouterr().err

    def test_requires_a_source(self):
        with pytest.raises(SystemExit):
            main([])
