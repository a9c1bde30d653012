"""
Metadata binding for Ramen.

Merges the property assignments of every resolved metadata declaration into
its target element's property map. Declarations apply in source order and
later values overwrite earlier ones key by key.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from . import ir
from .manifest import CompilerConfig
from .resolver import map_in_order
from .validator import PropertyCheck, check_assignment

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BoundMetadata:
    """Elements with properties attached, plus metadata diagnostics."""

    elements: tuple[ir.Element, ...]
    diagnostics: tuple[ir.Diagnostic, ...]


def bind_metadata(
    elements: Sequence[ir.Element],
    metadata: Sequence[ir.MetadataDecl],
    config: CompilerConfig,
) -> BoundMetadata:
    """
    Validate and bind metadata to elements.

    Every assignment is validated, including those whose target did not
    resolve, so value errors are reported alongside resolution errors. Only
    accepted assignments on resolved targets are bound.

    Args:
        elements: Element arena from the scope tree
        metadata: Resolved metadata declarations in source order
        config: Compiler configuration

    Returns:
        BoundMetadata with updated element copies
    """
    jobs = [(decl, assignment) for decl in metadata for assignment in decl.assignments]

    def check(job: tuple[ir.MetadataDecl, ir.PropertyAssignment]) -> PropertyCheck:
        decl, assignment = job
        kind = elements[decl.target_id].kind if decl.target_id is not None else None
        return check_assignment(assignment, kind, config)

    checks = map_in_order(check, jobs, config.workers)

    properties: dict[int, dict[str, ir.PropertyValue]] = {}
    diagnostics: list[ir.Diagnostic] = []
    for (decl, assignment), result in zip(jobs, checks, strict=True):
        diagnostics.extend(result.diagnostics)
        if decl.target_id is None or not result.accepted:
            continue
        properties.setdefault(decl.target_id, {})[assignment.key] = assignment.value

    bound = tuple(
        element.model_copy(update={"properties": properties[element.id]})
        if element.id in properties
        else element
        for element in elements
    )

    logger.debug(
        "Bound %d assignments to %d elements (%d metadata diagnostics)",
        len(jobs),
        len(properties),
        len(diagnostics),
    )
    return BoundMetadata(elements=bound, diagnostics=tuple(diagnostics))
