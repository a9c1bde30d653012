"""
Final validation stage: collect diagnostics and publish the Document.
"""

import logging
from collections.abc import Iterable

from . import ir
from .binder import BoundMetadata
from .linker_impl import ScopeTree
from .resolver import ResolvedReferences

logger = logging.getLogger(__name__)


def collect_diagnostics(*batches: Iterable[ir.Diagnostic]) -> list[ir.Diagnostic]:
    """
    Merge diagnostic batches from every stage.

    The result is ordered by (line, column). The sort is stable, so
    diagnostics at the same position keep pipeline order (lexer first).
    """
    merged = [diagnostic for batch in batches for diagnostic in batch]
    return sorted(merged, key=lambda d: (d.line, d.column))


def assemble_document(
    syntax_diagnostics: Iterable[ir.Diagnostic],
    scope_tree: ScopeTree,
    resolved: ResolvedReferences,
    bound: BoundMetadata,
) -> ir.Document:
    """
    Build the immutable Document from the results of every stage.

    Args:
        syntax_diagnostics: Lexer and parser diagnostics
        scope_tree: Output of pass 1
        resolved: Output of pass 2
        bound: Output of metadata binding

    Returns:
        Document carrying every diagnostic
    """
    diagnostics = collect_diagnostics(
        syntax_diagnostics,
        scope_tree.diagnostics,
        resolved.diagnostics,
        bound.diagnostics,
    )
    document = ir.Document(
        scopes=list(scope_tree.scopes),
        elements=list(bound.elements),
        edges=list(resolved.edges),
        metadata=list(resolved.metadata),
        diagnostics=diagnostics,
    )

    errors, warnings = len(document.errors), len(document.warnings)
    if errors:
        logger.debug("Document has %d error(s) and %d warning(s)", errors, warnings)
    else:
        logger.debug("Document is valid (%d warning(s))", warnings)
    return document
