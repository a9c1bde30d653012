"""
Reference resolution for Ramen (pass 2).

Runs only against a frozen ScopeTree, so every reference sees every
declaration regardless of where it appears in the source. Rules:

- Dot-path (A.B.C): top-down from the root. Every segment but the last must
  name a unique container; the last names a unique element or, as ref(id),
  an entry in the ref-id table of the scope reached.
- Bare name: only the scope that declares the referencing statement. Never
  ancestors, never nested containers.
- Lone ref(id): the ref-id table of the declaring scope.

Resolution never mutates the tree. Results are returned as updated copies of
the Edge/MetadataDecl records, which makes independent items safe to resolve
on worker threads.
"""

import logging
import re
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import TypeVar

from . import ir
from .linker_impl import ScopeTree

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

_REF_SEGMENT = re.compile(r"^ref\((\w+)\)$")


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving one reference."""

    element_id: int | None
    diagnostic: ir.Diagnostic | None = None

    @property
    def ok(self) -> bool:
        return self.element_id is not None


def map_in_order(fn: Callable[[T], R], items: Sequence[T], workers: int = 1) -> list[R]:
    """
    Apply fn to every item, returning results in input order.

    With more than one worker the calls run on a thread pool; the result
    order still matches the input order.
    """
    if workers <= 1 or len(items) < 2:
        return [fn(item) for item in items]
    with ThreadPoolExecutor(max_workers=workers) as executor:
        return list(executor.map(fn, items))


def _unresolved(
    reference: ir.ReferenceExpr, index: int, reason: str, span: ir.SourceSpan
) -> Resolution:
    segment = reference.segments[index]
    message = f"Cannot resolve '{reference}': segment {index} ('{segment}') {reason}"
    return Resolution(
        element_id=None,
        diagnostic=ir.Diagnostic.error(ir.DiagnosticCode.UNRESOLVED_REFERENCE, message, span),
    )


def _lookup_segment(scope: ir.Scope, reference: ir.ReferenceExpr, index: int) -> Resolution:
    """Resolve one segment within one scope."""
    segment = reference.segments[index]

    if segment.is_ref_id:
        element_id = scope.ref_ids.get(segment.value)
        if element_id is None:
            return _unresolved(
                reference, index, f"is not a ref id in scope {scope.label}", segment.span
            )
        return Resolution(element_id=element_id)

    entry = scope.names.get(segment.value)
    if entry is None:
        return _unresolved(
            reference, index, f"is not declared in scope {scope.label}", segment.span
        )
    if not entry.is_unique:
        return _unresolved(
            reference,
            index,
            f"is ambiguous in scope {scope.label}; refer to it with ref(...)",
            segment.span,
        )
    return Resolution(element_id=entry.element_id)


def resolve_reference(tree: ScopeTree, reference: ir.ReferenceExpr, scope_id: int) -> Resolution:
    """
    Resolve a reference written in the scope `scope_id`.

    Returns:
        Resolution with the element handle, or an UnresolvedReference diagnostic
    """
    if reference.is_bare:
        return _lookup_segment(tree.scopes[scope_id], reference, 0)

    scope = tree.root
    last = len(reference.segments) - 1
    for index in range(last):
        step = _lookup_segment(scope, reference, index)
        if not step.ok:
            return step
        assert step.element_id is not None
        element = tree.elements[step.element_id]
        if element.child_scope_id is None:
            return _unresolved(
                reference,
                index,
                "is a node, not a container",
                reference.segments[index].span,
            )
        scope = tree.scopes[element.child_scope_id]

    return _lookup_segment(scope, reference, last)


def _resolve_edge(tree: ScopeTree, edge: ir.Edge) -> tuple[ir.Edge, list[ir.Diagnostic]]:
    source = resolve_reference(tree, edge.source, edge.scope_id)
    target = resolve_reference(tree, edge.target, edge.scope_id)
    diagnostics = [r.diagnostic for r in (source, target) if r.diagnostic is not None]
    resolved = edge.model_copy(
        update={"source_id": source.element_id, "target_id": target.element_id}
    )
    return resolved, diagnostics


def _resolve_metadata(
    tree: ScopeTree, decl: ir.MetadataDecl
) -> tuple[ir.MetadataDecl, list[ir.Diagnostic]]:
    target = resolve_reference(tree, decl.target, decl.scope_id)
    diagnostics = [target.diagnostic] if target.diagnostic is not None else []
    return decl.model_copy(update={"target_id": target.element_id}), diagnostics


@dataclass(frozen=True)
class ResolvedReferences:
    """Output of pass 2, in source order."""

    edges: tuple[ir.Edge, ...]
    metadata: tuple[ir.MetadataDecl, ...]
    diagnostics: tuple[ir.Diagnostic, ...]


def resolve_references(tree: ScopeTree, workers: int = 1) -> ResolvedReferences:
    """
    Run pass 2: resolve every edge endpoint and metadata target.

    Args:
        tree: Frozen scope tree from pass 1
        workers: Thread count; 1 resolves sequentially

    Returns:
        Resolved copies of edges and metadata declarations, with diagnostics
        merged in source order
    """
    edge_results = map_in_order(lambda edge: _resolve_edge(tree, edge), tree.edges, workers)
    metadata_results = map_in_order(
        lambda decl: _resolve_metadata(tree, decl), tree.metadata, workers
    )

    diagnostics: list[ir.Diagnostic] = []
    for _, batch in edge_results:
        diagnostics.extend(batch)
    for _, batch in metadata_results:
        diagnostics.extend(batch)

    logger.debug(
        "Resolved %d edges and %d metadata targets with %d worker(s) (%d unresolved)",
        len(edge_results),
        len(metadata_results),
        workers,
        len(diagnostics),
    )
    return ResolvedReferences(
        edges=tuple(edge for edge, _ in edge_results),
        metadata=tuple(decl for decl, _ in metadata_results),
        diagnostics=tuple(diagnostics),
    )


def parse_path(path: str) -> ir.ReferenceExpr | None:
    """
    Parse a dot-path string such as "Network.ref(main)" into a reference.

    Returns None for malformed paths.
    """
    segments = []
    parts = path.split(".")
    for index, part in enumerate(parts):
        match = _REF_SEGMENT.match(part)
        if match:
            if index != len(parts) - 1:
                return None
            kind, value = ir.SegmentKind.REF_ID, match.group(1)
        elif part.isalnum() and part[0].isalpha():
            kind, value = ir.SegmentKind.NAME, part
        else:
            return None
        segments.append(ir.Segment(kind=kind, value=value, span=ir.NO_SPAN))
    return ir.ReferenceExpr.from_segments(segments)


def lookup_path(
    scopes: Sequence[ir.Scope], elements: Sequence[ir.Element], path: str
) -> int | None:
    """Resolve a dot-path string from the root; None when it does not resolve."""
    reference = parse_path(path)
    if reference is None:
        return None
    tree = ScopeTree(
        scopes=tuple(scopes),
        elements=tuple(elements),
        edges=(),
        metadata=(),
        diagnostics=(),
    )
    return resolve_reference(tree, reference, ir.ROOT_SCOPE_ID).element_id
