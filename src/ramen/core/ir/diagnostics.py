"""
Diagnostic types for the Ramen compiler.

Every stage of the pipeline reports problems as Diagnostic values rather than
raising, so a single compile surfaces every problem in the source at once.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict

from .location import NO_SPAN, SourceSpan


class Severity(StrEnum):
    """Diagnostic severity. Only errors make a compile fail."""

    ERROR = "error"
    WARNING = "warning"


class DiagnosticCode(StrEnum):
    """Taxonomy of diagnostic codes, grouped by the stage that emits them."""

    # Lexical
    UNTERMINATED_STRING = "UnterminatedString"
    INVALID_CHARACTER = "InvalidCharacter"
    INVALID_IDENTIFIER_START = "InvalidIdentifierStart"

    # Syntactic
    UNEXPECTED_TOKEN = "UnexpectedToken"
    EXPECTED_CLOSING_BRACE = "ExpectedClosingBrace"
    EMPTY_CONTAINER = "EmptyContainer"
    UNEXPECTED_END_OF_INPUT = "UnexpectedEndOfInput"

    # Structural (scope tree)
    DUPLICATE_NAME = "DuplicateName"
    AMBIGUOUS_NAME = "AmbiguousName"
    DUPLICATE_REF_ID = "DuplicateRefId"

    # Referential
    UNRESOLVED_REFERENCE = "UnresolvedReference"

    # Metadata
    INVALID_PROPERTY_VALUE = "InvalidPropertyValue"
    UNRECOGNIZED_PROPERTY_KEY = "UnrecognizedPropertyKey"
    INAPPLICABLE_PROPERTY = "InapplicableProperty"

    # Pipeline
    CANCELLED = "Cancelled"


class Diagnostic(BaseModel):
    """
    A single problem found while compiling.

    Attributes:
        severity: Error or warning
        code: Taxonomy code
        message: Human-readable description
        line: 1-indexed line (0 for pipeline-level diagnostics)
        column: 1-indexed column (0 for pipeline-level diagnostics)
        length: Number of source characters the problem covers
    """

    severity: Severity
    code: DiagnosticCode
    message: str
    line: int
    column: int
    length: int = 1

    model_config = ConfigDict(frozen=True)

    @classmethod
    def error(cls, code: DiagnosticCode, message: str, span: SourceSpan = NO_SPAN) -> Diagnostic:
        return cls(
            severity=Severity.ERROR,
            code=code,
            message=message,
            line=span.line,
            column=span.column,
            length=span.length,
        )

    @classmethod
    def warning(cls, code: DiagnosticCode, message: str, span: SourceSpan = NO_SPAN) -> Diagnostic:
        return cls(
            severity=Severity.WARNING,
            code=code,
            message=message,
            line=span.line,
            column=span.column,
            length=span.length,
        )

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR

    @property
    def span(self) -> SourceSpan:
        return SourceSpan(line=self.line, column=self.column, length=self.length)

    def __str__(self) -> str:
        return (
            f"{self.line}:{self.column}: {self.severity.value} [{self.code.value}] {self.message}"
        )
