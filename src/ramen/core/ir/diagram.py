"""
Resolved diagram model.

Scopes and elements live in flat arenas owned by the Document and refer to
each other by integer handle (list index), so the parent/child graph has no
object cycles. Scope 0 is always the implicit root.
"""

from __future__ import annotations

from collections.abc import Iterator
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .diagnostics import Diagnostic
from .location import SourceSpan
from .references import ReferenceExpr
from .syntax import EdgeDirection, PropertyAssignment

ROOT_SCOPE_ID = 0

PropertyValue = str | int | float


class ElementKind(StrEnum):
    """Element variants."""

    NODE = "node"
    CONTAINER = "container"


class Element(BaseModel):
    """
    A declared node or container.

    Attributes:
        id: Handle into Document.elements
        kind: Node or container
        name: Declared name
        ref_id: Optional scope-local disambiguating tag
        scope_id: Handle of the scope the element was declared in
        child_scope_id: Handle of the owned scope (containers only)
        path: Names from the root down to this element
        span: Declaration position
        implicit: True for a node declared only by appearing as an edge endpoint
        properties: Bound metadata; None until metadata has been bound
    """

    id: int
    kind: ElementKind
    name: str
    ref_id: str | None = None
    scope_id: int
    child_scope_id: int | None = None
    path: tuple[str, ...]
    span: SourceSpan
    implicit: bool = False
    properties: dict[str, PropertyValue] | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def is_container(self) -> bool:
        return self.kind == ElementKind.CONTAINER

    @property
    def dotted_path(self) -> str:
        return ".".join(self.path)


class NameKind(StrEnum):
    UNIQUE = "unique"
    AMBIGUOUS = "ambiguous"


class NameEntry(BaseModel):
    """
    Name-table entry of a scope.

    A name declared once is UNIQUE. A name declared more than once stays in
    the table as AMBIGUOUS (holding every declaration) so bare-name lookups
    fail deterministically instead of picking one of them.
    """

    kind: NameKind
    element_ids: tuple[int, ...]

    model_config = ConfigDict(frozen=True)

    @property
    def is_unique(self) -> bool:
        return self.kind == NameKind.UNIQUE

    @property
    def element_id(self) -> int | None:
        return self.element_ids[0] if self.is_unique else None


class Scope(BaseModel):
    """
    Namespace of the root or of one container.

    Attributes:
        id: Handle into Document.scopes
        path: Container names from the root (empty for the root)
        parent_id: Enclosing scope (None for the root)
        owner_id: Container element owning this scope (None for the root)
        element_ids: Declared elements in source order
        names: Name table
        ref_ids: Ref-id table, unique within this scope
    """

    id: int
    path: tuple[str, ...] = ()
    parent_id: int | None = None
    owner_id: int | None = None
    element_ids: list[int] = Field(default_factory=list)
    names: dict[str, NameEntry] = Field(default_factory=dict)
    ref_ids: dict[str, int] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    @property
    def label(self) -> str:
        return ".".join(self.path) if self.path else "<root>"


class Edge(BaseModel):
    """A connection between two elements, resolved after pass 2."""

    source: ReferenceExpr
    target: ReferenceExpr
    direction: EdgeDirection
    label: str | None = None
    scope_id: int
    span: SourceSpan
    source_id: int | None = None
    target_id: int | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def resolved(self) -> bool:
        return self.source_id is not None and self.target_id is not None


class MetadataDecl(BaseModel):
    """A metadata block targeting one element, resolved after pass 2."""

    target: ReferenceExpr
    scope_id: int
    assignments: list[PropertyAssignment] = Field(default_factory=list)
    span: SourceSpan
    target_id: int | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def resolved(self) -> bool:
        return self.target_id is not None


class Document(BaseModel):
    """
    Compiled diagram: the single output artifact handed to a renderer.

    Attributes:
        scopes: Scope arena; index 0 is the root
        elements: Element arena
        edges: Edges in source order
        metadata: Metadata declarations in source order
        diagnostics: Every diagnostic, ordered by source position
    """

    scopes: list[Scope]
    elements: list[Element] = Field(default_factory=list)
    edges: list[Edge] = Field(default_factory=list)
    metadata: list[MetadataDecl] = Field(default_factory=list)
    diagnostics: list[Diagnostic] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @property
    def root(self) -> Scope:
        return self.scopes[ROOT_SCOPE_ID]

    def scope(self, scope_id: int) -> Scope:
        return self.scopes[scope_id]

    def element(self, element_id: int) -> Element:
        return self.elements[element_id]

    def children(self, scope: Scope | int) -> list[Element]:
        """Elements declared directly in a scope, in source order."""
        if isinstance(scope, int):
            scope = self.scopes[scope]
        return [self.elements[eid] for eid in scope.element_ids]

    def iter_elements(self, scope: Scope | int = ROOT_SCOPE_ID) -> Iterator[Element]:
        """Depth-first walk in source order."""
        for element in self.children(scope):
            yield element
            if element.child_scope_id is not None:
                yield from self.iter_elements(element.child_scope_id)

    def lookup(self, path: str) -> Element | None:
        """
        Find an element by dot-path from the root (e.g. "Network.ref(main)").

        Uses the same rules as reference resolution; returns None when the
        path does not resolve to exactly one element.
        """
        from ..resolver import lookup_path

        element_id = lookup_path(self.scopes, self.elements, path)
        return None if element_id is None else self.elements[element_id]

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.is_error]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if not d.is_error]

    @property
    def success(self) -> bool:
        return not self.errors

    def summary(self) -> dict[str, Any]:
        return {
            "scopes": len(self.scopes),
            "elements": len(self.elements),
            "edges": len(self.edges),
            "metadata": len(self.metadata),
            "errors": len(self.errors),
            "warnings": len(self.warnings),
        }
