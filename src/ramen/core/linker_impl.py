"""
Scope-tree construction for Ramen (pass 1).

Walks the syntax tree depth-first, creating one scope per container and
registering every declared element in the name and ref-id tables of the scope
that declares it. A bare name used as an edge endpoint and declared nowhere in
the edge's scope becomes an implicit node of that scope.

Structural problems are recorded as diagnostics; the tree is always built,
with colliding names kept as AMBIGUOUS entries so later passes report
consistent follow-on errors.
"""

import logging
from dataclasses import dataclass, field

from . import ir

logger = logging.getLogger(__name__)


@dataclass
class ScopeTable:
    """
    Mutable name/ref-id tables for one scope while pass 1 runs.

    Frozen into an ir.Scope once the walk is complete.
    """

    id: int
    path: tuple[str, ...] = ()
    parent_id: int | None = None
    owner_id: int | None = None
    element_ids: list[int] = field(default_factory=list)
    names: dict[str, list[int]] = field(default_factory=dict)
    ref_ids: dict[str, int] = field(default_factory=dict)

    @property
    def label(self) -> str:
        return ".".join(self.path) if self.path else "<root>"

    def freeze(self) -> ir.Scope:
        names = {
            name: ir.NameEntry(
                kind=ir.NameKind.UNIQUE if len(ids) == 1 else ir.NameKind.AMBIGUOUS,
                element_ids=tuple(ids),
            )
            for name, ids in self.names.items()
        }
        return ir.Scope(
            id=self.id,
            path=self.path,
            parent_id=self.parent_id,
            owner_id=self.owner_id,
            element_ids=list(self.element_ids),
            names=names,
            ref_ids=dict(self.ref_ids),
        )


@dataclass(frozen=True)
class ScopeTree:
    """
    Frozen output of pass 1.

    Scopes and elements are read-only from here on; edges and metadata
    declarations are recorded unresolved, in source order.
    """

    scopes: tuple[ir.Scope, ...]
    elements: tuple[ir.Element, ...]
    edges: tuple[ir.Edge, ...]
    metadata: tuple[ir.MetadataDecl, ...]
    diagnostics: tuple[ir.Diagnostic, ...]

    @property
    def root(self) -> ir.Scope:
        return self.scopes[ir.ROOT_SCOPE_ID]


class ScopeTreeBuilder:
    """Builds the scope tree for one syntax tree."""

    def __init__(self) -> None:
        self.scopes: list[ScopeTable] = [ScopeTable(id=ir.ROOT_SCOPE_ID)]
        self.elements: list[ir.Element] = []
        self.edges: list[ir.Edge] = []
        self.metadata: list[ir.MetadataDecl] = []
        self.diagnostics: list[ir.Diagnostic] = []

    def build(self, tree: ir.SyntaxTree) -> ScopeTree:
        """Walk the tree and return the frozen result."""
        self.walk(tree.statements, self.scopes[ir.ROOT_SCOPE_ID])
        return ScopeTree(
            scopes=tuple(table.freeze() for table in self.scopes),
            elements=tuple(self.elements),
            edges=tuple(self.edges),
            metadata=tuple(self.metadata),
            diagnostics=tuple(self.diagnostics),
        )

    def walk(self, statements: list[ir.Statement], table: ScopeTable) -> None:
        local_edges: list[ir.Edge] = []
        for stmt in statements:
            if isinstance(stmt, ir.ContainerStmt):
                self.add_container(stmt, table)
            elif isinstance(stmt, ir.NodeStmt):
                self.add_node(stmt, table)
            elif isinstance(stmt, ir.EdgeStmt):
                edge = ir.Edge(
                    source=stmt.source,
                    target=stmt.target,
                    direction=stmt.direction,
                    label=stmt.label,
                    scope_id=table.id,
                    span=stmt.span,
                )
                self.edges.append(edge)
                local_edges.append(edge)
            else:
                self.metadata.append(
                    ir.MetadataDecl(
                        target=stmt.target,
                        scope_id=table.id,
                        assignments=list(stmt.assignments),
                        span=stmt.span,
                    )
                )

        self.declare_edge_endpoints(local_edges, table)

    def declare_edge_endpoints(self, edges: list[ir.Edge], table: ScopeTable) -> None:
        """
        Declare bare-name edge endpoints that the scope never declares itself.

        Runs after the whole scope has been walked, so an explicit declaration
        anywhere in the scope takes precedence over the implicit one.
        """
        for edge in edges:
            for reference in (edge.source, edge.target):
                segment = reference.final
                if not reference.is_bare or segment.is_ref_id or segment.value in table.names:
                    continue
                element = ir.Element(
                    id=len(self.elements),
                    kind=ir.ElementKind.NODE,
                    name=segment.value,
                    scope_id=table.id,
                    path=table.path + (segment.value,),
                    span=segment.span,
                    implicit=True,
                )
                self.elements.append(element)
                table.element_ids.append(element.id)
                table.names[element.name] = [element.id]

    def add_node(self, stmt: ir.NodeStmt, table: ScopeTable) -> None:
        element = ir.Element(
            id=len(self.elements),
            kind=ir.ElementKind.NODE,
            name=stmt.name,
            ref_id=stmt.ref_id,
            scope_id=table.id,
            path=table.path + (stmt.name,),
            span=stmt.span,
        )
        self.elements.append(element)
        table.element_ids.append(element.id)
        self._register_name(table, element)
        if element.ref_id is not None:
            self._register_ref_id(table, element)

    def add_container(self, stmt: ir.ContainerStmt, table: ScopeTable) -> None:
        child = ScopeTable(
            id=len(self.scopes),
            path=table.path + (stmt.name,),
            parent_id=table.id,
            owner_id=len(self.elements),
        )
        element = ir.Element(
            id=len(self.elements),
            kind=ir.ElementKind.CONTAINER,
            name=stmt.name,
            scope_id=table.id,
            child_scope_id=child.id,
            path=child.path,
            span=stmt.span,
        )
        self.elements.append(element)
        self.scopes.append(child)
        table.element_ids.append(element.id)
        self._register_name(table, element)

        self.walk(stmt.statements, child)

        # A body with no statements at all was already reported by the parser.
        if stmt.statements and not child.element_ids:
            self.diagnostics.append(
                ir.Diagnostic.error(
                    ir.DiagnosticCode.EMPTY_CONTAINER,
                    f"Container '{child.label}' declares no elements",
                    stmt.span,
                )
            )

    def _register_name(self, table: ScopeTable, element: ir.Element) -> None:
        """
        Add an element to its scope's name table.

        A name clash involving a container is a DuplicateName. Two nodes with
        the same name are legal when at least one of any clashing pair carries
        a ref-id; otherwise the clash is an AmbiguousName. The entry is kept
        either way and becomes AMBIGUOUS.
        """
        existing = table.names.get(element.name)
        if existing is None:
            table.names[element.name] = [element.id]
            return

        previous = [self.elements[eid] for eid in existing]
        if element.is_container or any(p.is_container for p in previous):
            self.diagnostics.append(
                ir.Diagnostic.error(
                    ir.DiagnosticCode.DUPLICATE_NAME,
                    f"'{element.name}' is already declared in scope {table.label}",
                    element.span,
                )
            )
        elif element.ref_id is None and any(p.ref_id is None for p in previous):
            self.diagnostics.append(
                ir.Diagnostic.error(
                    ir.DiagnosticCode.AMBIGUOUS_NAME,
                    f"'{element.name}' is declared more than once in scope {table.label}; "
                    f"give the declarations ref ids (e.g. '{element.name} :someId')",
                    element.span,
                )
            )
        existing.append(element.id)

    def _register_ref_id(self, table: ScopeTable, element: ir.Element) -> None:
        ref_id = element.ref_id
        assert ref_id is not None
        if ref_id in table.ref_ids:
            self.diagnostics.append(
                ir.Diagnostic.error(
                    ir.DiagnosticCode.DUPLICATE_REF_ID,
                    f"Ref id '{ref_id}' is already used in scope {table.label}",
                    element.span,
                )
            )
            return
        table.ref_ids[ref_id] = element.id


def build_scope_tree(tree: ir.SyntaxTree) -> ScopeTree:
    """
    Run pass 1 over a syntax tree.

    Args:
        tree: Parsed syntax tree

    Returns:
        Frozen ScopeTree with structural diagnostics attached
    """
    result = ScopeTreeBuilder().build(tree)
    logger.debug(
        "Built scope tree: %d scopes, %d elements, %d edges, %d metadata blocks "
        "(%d structural errors)",
        len(result.scopes),
        len(result.elements),
        len(result.edges),
        len(result.metadata),
        len(result.diagnostics),
    )
    return result
