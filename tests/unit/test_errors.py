"""Tests for error types and diagnostic rendering."""

from __future__ import annotations

from ramen.core import ir
from ramen.core.errors import (
    ErrorContext,
    ParseError,
    RamenError,
    format_diagnostic,
    make_parse_error,
    snippet_for,
)

SOURCE = "Frontend { app }\nBackend { api }\nFrontend.app -> Backend.db\n"


class TestErrorContext:
    def test_location_only(self):
        assert ErrorContext(line=3, column=5).format() == "3:5"

    def test_snippet_marks_error(self):
        context = ErrorContext(line=2, column=3, length=2, snippet="first\nsecond")
        lines = context.format().split("\n")
        assert lines[0] == "2:3"
        assert lines[1] == "   1 | first"
        assert lines[2] == "   2 | second"
        assert lines[3] == " " * 9 + "^^"

    def test_error_message_includes_context(self):
        error = RamenError("Something broke", ErrorContext(line=1, column=2))
        assert str(error) == "1:2\nSomething broke"

    def test_snippet_for(self):
        assert snippet_for(SOURCE, 3) == SOURCE
        assert snippet_for(SOURCE, 1, context_lines=0) == "Frontend { app }"
        assert snippet_for(SOURCE, 0) is None
        assert snippet_for(SOURCE, 10) is None


class TestParseError:
    def test_make_parse_error(self):
        error = make_parse_error(ir.DiagnosticCode.UNEXPECTED_TOKEN, "Expected '{'", 4, 7, 3)
        assert isinstance(error, ParseError)
        assert isinstance(error, RamenError)
        assert error.code == ir.DiagnosticCode.UNEXPECTED_TOKEN
        assert (error.context.line, error.context.column, error.context.length) == (4, 7, 3)
        assert error.message == "Expected '{'"


class TestFormatDiagnostic:
    def _diagnostic(self) -> ir.Diagnostic:
        return ir.Diagnostic.error(
            ir.DiagnosticCode.UNRESOLVED_REFERENCE,
            "Cannot resolve 'Backend.db'",
            ir.SourceSpan(line=3, column=25, length=2),
        )

    def test_without_source(self):
        assert format_diagnostic(self._diagnostic()) == (
            "error[UnresolvedReference] 3:25: Cannot resolve 'Backend.db'"
        )

    def test_with_source(self):
        rendered = format_diagnostic(self._diagnostic(), SOURCE).split("\n")
        assert rendered[0] == "error[UnresolvedReference] 3:25: Cannot resolve 'Backend.db'"
        assert rendered[3] == "   3 | Frontend.app -> Backend.db"
        assert rendered[4].index("^^") == len("   3 | ") + 24

    def test_pipeline_level_diagnostic(self):
        diagnostic = ir.Diagnostic.error(ir.DiagnosticCode.CANCELLED, "Compilation cancelled")
        assert format_diagnostic(diagnostic, SOURCE) == "error[Cancelled]: Compilation cancelled"

    def test_warning(self):
        diagnostic = ir.Diagnostic.warning(
            ir.DiagnosticCode.UNRECOGNIZED_PROPERTY_KEY,
            "Unrecognized property 'glow'",
            ir.SourceSpan(line=1, column=1, length=4),
        )
        assert format_diagnostic(diagnostic).startswith("warning[UnrecognizedPropertyKey] 1:1:")
        assert str(diagnostic) == (
            "1:1: warning [UnrecognizedPropertyKey] Unrecognized property 'glow'"
        )
