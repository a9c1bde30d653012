"""Source location tracking for IR nodes.

Records the line, column, and length of a construct in the source text,
enabling source-mapped diagnostics.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class SourceSpan(BaseModel):
    """Source position where a construct was written.

    Attributes:
        line: 1-indexed line number
        column: 1-indexed column number
        length: Number of source characters covered (at least 1 for real tokens)
    """

    line: int
    column: int
    length: int = 1

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


# Position used for pipeline-level diagnostics that have no source location.
NO_SPAN = SourceSpan(line=0, column=0, length=0)
