"""
Unresolved syntax tree produced by the parser.

Statements carry reference expressions exactly as written; nothing here knows
about scopes or elements. The scope-tree builder consumes this tree.

DSL Syntax:

    Frontend {
      app
      router :mainRouter
    }
    Frontend.app -> Backend.api | "calls"
    Frontend.app: { shape: "circle" x: 10 }
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from .location import SourceSpan
from .references import ReferenceExpr


class EdgeDirection(StrEnum):
    """Edge directions, keyed by the operator that declares them."""

    FORWARD = "->"
    BACKWARD = "<-"
    UNDIRECTED = "-"
    BIDIRECTIONAL = "<->"


class ValueKind(StrEnum):
    """Literal kinds accepted as property values."""

    STRING = "string"
    MULTILINE_STRING = "multiline_string"
    NUMBER = "number"


class PropertyAssignment(BaseModel):
    """A `key: value` pair inside a metadata block."""

    key: str
    value_kind: ValueKind
    value: str | int | float
    span: SourceSpan
    value_span: SourceSpan

    model_config = ConfigDict(frozen=True)

    @property
    def is_string(self) -> bool:
        return self.value_kind in (ValueKind.STRING, ValueKind.MULTILINE_STRING)


class NodeStmt(BaseModel):
    """`name` or `name :refId`."""

    kind: Literal["node"] = "node"
    name: str
    ref_id: str | None = None
    span: SourceSpan

    model_config = ConfigDict(frozen=True)


class EdgeStmt(BaseModel):
    """`source op target`, optionally followed by `| "label"`."""

    kind: Literal["edge"] = "edge"
    source: ReferenceExpr
    target: ReferenceExpr
    direction: EdgeDirection
    label: str | None = None
    span: SourceSpan

    model_config = ConfigDict(frozen=True)


class MetadataStmt(BaseModel):
    """`target: { key: value ... }`."""

    kind: Literal["metadata"] = "metadata"
    target: ReferenceExpr
    assignments: list[PropertyAssignment] = Field(default_factory=list)
    span: SourceSpan

    model_config = ConfigDict(frozen=True)


class ContainerStmt(BaseModel):
    """
    `name { statements }`.

    An empty container is kept in the tree (the parser has already reported
    it) so that references to it do not produce follow-on errors.
    """

    kind: Literal["container"] = "container"
    name: str
    statements: list[Statement] = Field(default_factory=list)
    span: SourceSpan

    model_config = ConfigDict(frozen=True)


Statement = Annotated[
    ContainerStmt | NodeStmt | EdgeStmt | MetadataStmt,
    Field(discriminator="kind"),
]


class SyntaxTree(BaseModel):
    """Top-level statements of one source text (the implicit root)."""

    statements: list[Statement] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


ContainerStmt.model_rebuild()
SyntaxTree.model_rebuild()
