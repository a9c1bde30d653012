"""Tests for the Ramen parser: statement forms, disambiguation and recovery."""

from __future__ import annotations

import pytest

from ramen.core import ir
from ramen.core.dsl_parser_impl import parse_dsl


def _parse_ok(text: str) -> list[ir.Statement]:
    tree, diagnostics = parse_dsl(text)
    assert diagnostics == [], [str(d) for d in diagnostics]
    return tree.statements


def _codes(text: str) -> list[ir.DiagnosticCode]:
    _, diagnostics = parse_dsl(text)
    return [d.code for d in diagnostics]


# ---------------------------------------------------------------------------
# Statement forms
# ---------------------------------------------------------------------------


class TestStatements:
    """Each statement kind parses into its syntax node."""

    def test_container_with_nodes(self):
        (container,) = _parse_ok("Frontend { app web }")
        assert isinstance(container, ir.ContainerStmt)
        assert container.name == "Frontend"
        assert [s.name for s in container.statements] == ["app", "web"]

    def test_nested_containers(self):
        (outer,) = _parse_ok("Cloud { Region { server } }")
        (inner,) = outer.statements
        assert isinstance(inner, ir.ContainerStmt)
        assert inner.statements[0].name == "server"

    def test_plain_node(self):
        (node,) = _parse_ok("app")
        assert isinstance(node, ir.NodeStmt)
        assert node.name == "app"
        assert node.ref_id is None

    def test_node_with_ref_id(self):
        first, second = _parse_ok("router :mainRouter\nrouter :backupRouter")
        assert (first.name, first.ref_id) == ("router", "mainRouter")
        assert (second.name, second.ref_id) == ("router", "backupRouter")

    def test_ref_is_an_ordinary_name_without_parenthesis(self):
        (node,) = _parse_ok("ref")
        assert isinstance(node, ir.NodeStmt)
        assert node.name == "ref"

    def test_edge_with_label(self):
        (edge,) = _parse_ok('a -> b | "calls"')
        assert isinstance(edge, ir.EdgeStmt)
        assert str(edge.source) == "a"
        assert str(edge.target) == "b"
        assert edge.direction == ir.EdgeDirection.FORWARD
        assert edge.label == "calls"

    @pytest.mark.parametrize(
        "operator,direction",
        [
            ("->", ir.EdgeDirection.FORWARD),
            ("<-", ir.EdgeDirection.BACKWARD),
            ("-", ir.EdgeDirection.UNDIRECTED),
            ("<->", ir.EdgeDirection.BIDIRECTIONAL),
        ],
    )
    def test_edge_directions(self, operator, direction):
        (edge,) = _parse_ok(f"a {operator} b")
        assert edge.direction == direction
        assert edge.label is None

    def test_edge_spanning_lines(self):
        (edge,) = _parse_ok("a\n->\nb")
        assert isinstance(edge, ir.EdgeStmt)

    def test_metadata_block(self):
        (meta,) = _parse_ok('app: { shape: "circle" x: 10 y: 2.5 }')
        assert isinstance(meta, ir.MetadataStmt)
        assert str(meta.target) == "app"
        assert [(a.key, a.value) for a in meta.assignments] == [
            ("shape", "circle"),
            ("x", 10),
            ("y", 2.5),
        ]
        assert isinstance(meta.assignments[1].value, int)
        assert isinstance(meta.assignments[2].value, float)
        assert meta.assignments[0].value_kind == ir.ValueKind.STRING
        assert meta.assignments[1].value_kind == ir.ValueKind.NUMBER

    def test_metadata_multiline_value(self):
        (meta,) = _parse_ok('app: {\n  content: \\"First line\nSecond line"\\\n}')
        (assignment,) = meta.assignments
        assert assignment.value_kind == ir.ValueKind.MULTILINE_STRING
        assert assignment.value == "First line\nSecond line"

    def test_empty_metadata_block(self):
        (meta,) = _parse_ok("app: { }")
        assert meta.assignments == []

    def test_metadata_on_path(self):
        (meta,) = _parse_ok('Frontend.app: { shape: "circle" }')
        assert meta.target.kind == ir.ReferenceKind.PATH
        assert [s.value for s in meta.target.segments] == ["Frontend", "app"]

    def test_no_separators_needed_between_statements(self):
        statements = _parse_ok("Frontend { app }  Backend { api }  Frontend.app -> Backend.api")
        assert [s.kind for s in statements] == ["container", "container", "edge"]


class TestReferences:
    """Reference expressions: bare names, dot-paths and ref(...)."""

    def test_dot_path_with_ref_id(self):
        (edge,) = _parse_ok("Network.ref(mainRouter) -> Network.switch")
        assert edge.source.kind == ir.ReferenceKind.PATH
        assert [s.kind for s in edge.source.segments] == [
            ir.SegmentKind.NAME,
            ir.SegmentKind.REF_ID,
        ]
        assert edge.source.final.value == "mainRouter"
        assert str(edge.source) == "Network.ref(mainRouter)"

    def test_lone_ref(self):
        (edge,) = _parse_ok("ref(main) - b")
        assert edge.source.is_bare
        assert edge.source.final.is_ref_id

    def test_lone_ref_as_metadata_target(self):
        (meta,) = _parse_ok('ref(main): { color: "red" }')
        assert meta.target.final.is_ref_id

    def test_ref_must_be_final_segment(self):
        tree, diagnostics = parse_dsl("A.ref(x).b -> c")
        assert [d.code for d in diagnostics] == [ir.DiagnosticCode.UNEXPECTED_TOKEN]
        assert tree.statements == []

    def test_segment_spans(self):
        (edge,) = _parse_ok("Frontend.app -> Backend.db")
        db = edge.target.segments[1]
        assert (db.span.line, db.span.column, db.span.length) == (1, 25, 2)


# ---------------------------------------------------------------------------
# Errors and recovery
# ---------------------------------------------------------------------------


class TestSyntaxErrors:
    """Each syntax error code."""

    def test_empty_container(self):
        tree, diagnostics = parse_dsl("Container {}")
        assert [d.code for d in diagnostics] == [ir.DiagnosticCode.EMPTY_CONTAINER]
        (container,) = tree.statements
        assert container.statements == []

    def test_missing_closing_brace(self):
        tree, diagnostics = parse_dsl("A { b")
        assert [d.code for d in diagnostics] == [ir.DiagnosticCode.EXPECTED_CLOSING_BRACE]
        assert tree.statements[0].statements[0].name == "b"

    def test_missing_closing_brace_in_metadata(self):
        assert _codes("a: { x: 1") == [ir.DiagnosticCode.EXPECTED_CLOSING_BRACE]

    def test_unexpected_end_of_input(self):
        assert _codes("a ->") == [ir.DiagnosticCode.UNEXPECTED_END_OF_INPUT]

    def test_stray_closing_brace(self):
        tree, diagnostics = parse_dsl("a }")
        assert [d.code for d in diagnostics] == [ir.DiagnosticCode.UNEXPECTED_TOKEN]
        assert [s.name for s in tree.statements] == ["a"]

    def test_statement_cannot_start_with_punctuation(self):
        assert _codes(": b") == [ir.DiagnosticCode.UNEXPECTED_TOKEN]

    def test_label_must_be_single_line_string(self):
        assert _codes('a -> b | \\"multi"\\') == [ir.DiagnosticCode.UNEXPECTED_TOKEN]

    def test_colon_needs_brace_or_ref_id(self):
        assert _codes("a : 5") == [ir.DiagnosticCode.UNEXPECTED_TOKEN]

    def test_path_cannot_declare_a_node(self):
        tree, diagnostics = parse_dsl("A.b c")
        assert [d.code for d in diagnostics] == [ir.DiagnosticCode.UNEXPECTED_TOKEN]
        assert [s.name for s in tree.statements] == ["c"]

    def test_error_position(self):
        _, diagnostics = parse_dsl("a\nb -> | x")
        (diagnostic,) = diagnostics
        assert (diagnostic.line, diagnostic.column) == (2, 6)


class TestRecovery:
    """The parser skips to the next statement and keeps going."""

    def test_resumes_at_next_statement(self):
        tree, diagnostics = parse_dsl('a -> | "x"\nb\nc { d }')
        assert [d.code for d in diagnostics] == [ir.DiagnosticCode.UNEXPECTED_TOKEN]
        assert [s.name for s in tree.statements] == ["b", "c"]

    def test_reports_every_independent_error(self):
        tree, diagnostics = parse_dsl('a -> | "x"\nb\nc : 5\nd')
        assert [d.line for d in diagnostics] == [1, 3]
        assert [s.name for s in tree.statements] == ["b", "d"]

    def test_recovers_inside_container(self):
        tree, diagnostics = parse_dsl('A { x -> | "l" y }\nB { z }')
        assert len(diagnostics) == 1
        container_a, container_b = tree.statements
        assert [s.name for s in container_a.statements] == ["y"]
        assert container_b.statements[0].name == "z"

    def test_skips_bad_assignment_but_keeps_block(self):
        tree, diagnostics = parse_dsl('a: { shape: circle color: "red" }\nb')
        assert [d.code for d in diagnostics] == [ir.DiagnosticCode.UNEXPECTED_TOKEN]
        meta, node = tree.statements
        assert [a.key for a in meta.assignments] == ["color"]
        assert node.name == "b"

    @pytest.mark.parametrize("block", ["{ layout: }", "{ shape }"])
    def test_bad_last_assignment_keeps_following_statements(self, block):
        tree, diagnostics = parse_dsl(f"a: {block}\nB {{ c }}\nd")
        assert [d.code for d in diagnostics] == [ir.DiagnosticCode.UNEXPECTED_TOKEN]
        meta, container, node = tree.statements
        assert meta.assignments == []
        assert container.name == "B"
        assert [s.name for s in container.statements] == ["c"]
        assert node.name == "d"

    def test_missing_colon_keeps_next_assignment(self):
        tree, diagnostics = parse_dsl('a: { shape x: 1 }')
        assert [d.code for d in diagnostics] == [ir.DiagnosticCode.UNEXPECTED_TOKEN]
        (meta,) = tree.statements
        assert [a.key for a in meta.assignments] == ["x"]

    def test_empty_container_does_not_stop_parsing(self):
        tree, diagnostics = parse_dsl("Empty {}\nFull { a }")
        assert [d.code for d in diagnostics] == [ir.DiagnosticCode.EMPTY_CONTAINER]
        assert [s.name for s in tree.statements] == ["Empty", "Full"]

    def test_lexical_and_syntax_errors_are_both_reported(self):
        _, diagnostics = parse_dsl("a # b\nc ->")
        assert [d.code for d in diagnostics] == [
            ir.DiagnosticCode.INVALID_CHARACTER,
            ir.DiagnosticCode.UNEXPECTED_END_OF_INPUT,
        ]
