from collections.abc import Callable

from . import ir
from .linker_impl import ScopeTree, build_scope_tree
from .resolver import ResolvedReferences, resolve_references


def link(
    tree: ir.SyntaxTree,
    workers: int = 1,
    checkpoint: Callable[[str], None] | None = None,
) -> tuple[ScopeTree, ResolvedReferences]:
    """
    Link a parsed document: build its scope tree, then resolve references.

    Performs:
    1. Scope tree construction (names, ref ids, structural errors)
    2. Freezing the tree
    3. Resolution of every edge endpoint and metadata target

    Resolution starts only after every declaration is registered, so forward
    references resolve exactly like backward ones.

    Args:
        tree: Parsed syntax tree
        workers: Thread count for resolution
        checkpoint: Called with the next phase name between passes; may raise
            CompilationCancelled

    Returns:
        Tuple of (scope tree, resolved references)
    """
    scope_tree = build_scope_tree(tree)

    if checkpoint is not None:
        checkpoint("reference resolution")

    resolved = resolve_references(scope_tree, workers=workers)
    return scope_tree, resolved
