"""
Error types for Ramen compilation.

Problems in the source text are reported as diagnostics (see ir.diagnostics).
The exceptions here are used for control flow inside the pipeline and for
callers that prefer raising over inspecting a diagnostic list.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .ir import Diagnostic, DiagnosticCode


class RamenError(Exception):
    """Base exception for all Ramen errors."""

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


class ParseError(RamenError):
    """
    Raised inside the parser when a statement cannot be parsed.

    The parser catches it at the statement level, records a diagnostic with
    the carried code, and resynchronizes at the next statement boundary.
    """

    def __init__(
        self,
        code: "DiagnosticCode",
        message: str,
        context: Optional["ErrorContext"] = None,
    ):
        self.code = code
        super().__init__(message, context)


class CompilationCancelled(RamenError):
    """Raised at a phase boundary when the caller's cancel signal is set."""

    pass


class ConfigError(RamenError):
    """
    Raised when compiler configuration is invalid.

    Examples:
    - Config file missing or not valid TOML
    - Unknown key in the [compiler] table
    - Value of the wrong type
    """

    pass


@dataclass
class ErrorContext:
    """
    Source location of an error.

    Attributes:
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        length: Number of characters to underline
        snippet: Optional source lines around the error
    """

    line: int
    column: int
    length: int = 1
    snippet: str | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like "10:5", followed by the marked snippet if any
        """
        location = f"{self.line}:{self.column}"
        if self.snippet:
            return f"{location}\n{self._format_snippet()}"
        return location

    def _format_snippet(self) -> str:
        """Format code snippet with line numbers and error marker."""
        if not self.snippet:
            return ""

        lines = self.snippet.split("\n")
        formatted = []

        # Snippet shows up to 2 lines before the error line
        start_line = max(1, self.line - 2)

        for i, line in enumerate(lines):
            line_num = start_line + i
            prefix = f"{line_num:4d} | "
            formatted.append(prefix + line)

            if line_num == self.line:
                marker_pos = len(prefix) + self.column - 1
                formatted.append(" " * marker_pos + "^" * max(1, self.length))

        return "\n".join(formatted)


def snippet_for(source: str, line: int, context_lines: int = 2) -> str | None:
    """Return the source lines around `line` (1-indexed), or None if out of range."""
    lines = source.split("\n")
    if line < 1 or line > len(lines):
        return None
    start = max(1, line - context_lines)
    end = min(len(lines), line + context_lines)
    return "\n".join(lines[start - 1 : end])


def make_parse_error(
    code: "DiagnosticCode",
    message: str,
    line: int,
    column: int,
    length: int = 1,
) -> ParseError:
    """
    Helper to create a ParseError with context.

    Args:
        code: Diagnostic code to report when the error is recorded
        message: Error description
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        length: Length of the offending token

    Returns:
        ParseError with context attached
    """
    context = ErrorContext(line=line, column=column, length=length)
    return ParseError(code, message, context)


def format_diagnostic(diagnostic: "Diagnostic", source: str | None = None) -> str:
    """
    Render a diagnostic for display, with a marked snippet when source is given.

    Example:
        error[UnresolvedReference] 3:25: ...
           1 | Frontend { app }
           2 | Backend { api }
           3 | Frontend.app -> Backend.db
                                       ^^
    """
    header = f"{diagnostic.severity.value}[{diagnostic.code.value}]"
    if diagnostic.line < 1:
        return f"{header}: {diagnostic.message}"

    snippet = snippet_for(source, diagnostic.line) if source is not None else None
    context = ErrorContext(
        line=diagnostic.line,
        column=diagnostic.column,
        length=diagnostic.length,
        snippet=snippet,
    )
    location = f"{header} {diagnostic.line}:{diagnostic.column}: {diagnostic.message}"
    if not snippet:
        return location
    return f"{location}\n{context._format_snippet()}"
