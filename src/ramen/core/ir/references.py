"""
Reference expression types for Ramen IR.

A reference names an element either by a bare name resolved in the
referencing scope, or by a dot-path resolved top-down from the root:

    api                  bare name
    ref(mainRouter)      lone ref-id, resolved in the referencing scope
    Backend.api          dot-path
    Network.ref(main)    dot-path ending in a ref-id
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, model_validator

from .location import SourceSpan


class SegmentKind(StrEnum):
    """Kinds of path segment."""

    NAME = "name"
    REF_ID = "ref_id"


class Segment(BaseModel):
    """One segment of a reference: a plain name or a `ref(id)` selector."""

    kind: SegmentKind
    value: str
    span: SourceSpan

    model_config = ConfigDict(frozen=True)

    @property
    def is_ref_id(self) -> bool:
        return self.kind == SegmentKind.REF_ID

    def __str__(self) -> str:
        if self.is_ref_id:
            return f"ref({self.value})"
        return self.value


class ReferenceKind(StrEnum):
    """Kinds of reference expression."""

    BARE = "bare"
    PATH = "path"


class ReferenceExpr(BaseModel):
    """
    An unresolved reference to an element.

    A BARE reference has exactly one segment, which is a name or a lone
    `ref(id)`. A PATH reference has two or more segments; only the final one
    may be a ref-id.
    """

    kind: ReferenceKind
    segments: tuple[Segment, ...]

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _check_segments(self) -> ReferenceExpr:
        if not self.segments:
            raise ValueError("reference needs at least one segment")
        if self.kind == ReferenceKind.BARE and len(self.segments) != 1:
            raise ValueError("bare reference must have exactly one segment")
        if self.kind == ReferenceKind.PATH and len(self.segments) < 2:
            raise ValueError("path reference must have at least two segments")
        if any(seg.is_ref_id for seg in self.segments[:-1]):
            raise ValueError("ref(...) is only valid as the final segment")
        return self

    @classmethod
    def from_segments(cls, segments: list[Segment]) -> ReferenceExpr:
        kind = ReferenceKind.BARE if len(segments) == 1 else ReferenceKind.PATH
        return cls(kind=kind, segments=tuple(segments))

    @property
    def is_bare(self) -> bool:
        return self.kind == ReferenceKind.BARE

    @property
    def final(self) -> Segment:
        return self.segments[-1]

    @property
    def span(self) -> SourceSpan:
        """Span from the first segment to the end of the last one."""
        first = self.segments[0].span
        last = self.segments[-1].span
        if first.line != last.line:
            return first
        return SourceSpan(
            line=first.line,
            column=first.column,
            length=last.column + last.length - first.column,
        )

    def __str__(self) -> str:
        return ".".join(str(seg) for seg in self.segments)
