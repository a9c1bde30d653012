"""
Ramen Intermediate Representation (IR) types.

Types are organized into submodules by pipeline stage and re-exported here.
"""

# Diagnostics
from .diagnostics import (
    Diagnostic,
    DiagnosticCode,
    Severity,
)

# Resolved diagram model
from .diagram import (
    ROOT_SCOPE_ID,
    Document,
    Edge,
    Element,
    ElementKind,
    MetadataDecl,
    NameEntry,
    NameKind,
    PropertyValue,
    Scope,
)

# Source locations
from .location import (
    NO_SPAN,
    SourceSpan,
)

# References
from .references import (
    ReferenceExpr,
    ReferenceKind,
    Segment,
    SegmentKind,
)

# Syntax tree
from .syntax import (
    ContainerStmt,
    EdgeDirection,
    EdgeStmt,
    MetadataStmt,
    NodeStmt,
    PropertyAssignment,
    Statement,
    SyntaxTree,
    ValueKind,
)

__all__ = [
    # Diagnostics
    "Diagnostic",
    "DiagnosticCode",
    "Severity",
    # Diagram
    "ROOT_SCOPE_ID",
    "Document",
    "Edge",
    "Element",
    "ElementKind",
    "MetadataDecl",
    "NameEntry",
    "NameKind",
    "PropertyValue",
    "Scope",
    # Locations
    "NO_SPAN",
    "SourceSpan",
    # References
    "ReferenceExpr",
    "ReferenceKind",
    "Segment",
    "SegmentKind",
    # Syntax
    "ContainerStmt",
    "EdgeDirection",
    "EdgeStmt",
    "MetadataStmt",
    "NodeStmt",
    "PropertyAssignment",
    "Statement",
    "SyntaxTree",
    "ValueKind",
]
