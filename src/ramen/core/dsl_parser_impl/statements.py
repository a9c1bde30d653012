"""
Statement parsing for the Ramen DSL.

Decides which kind of statement starts at the current token using bounded
lookahead after the leading identifier or reference:

    Name { ... }          container
    Name :refId           node with ref-id
    Ref : { ... }         metadata
    Ref op Ref | "label"  edge
    Name                  plain node
"""

from typing import TYPE_CHECKING, Any

from .. import ir
from ..errors import ParseError, make_parse_error
from ..lexer import EDGE_OPERATORS, TokenType
from .base import describe, join_spans

EDGE_DIRECTIONS = {
    TokenType.ARROW: ir.EdgeDirection.FORWARD,
    TokenType.LARROW: ir.EdgeDirection.BACKWARD,
    TokenType.DASH: ir.EdgeDirection.UNDIRECTED,
    TokenType.BIARROW: ir.EdgeDirection.BIDIRECTIONAL,
}

# Tokens that may not directly follow `name :refId`.
_NODE_TRAILING_TOKENS = frozenset(
    {TokenType.DOT, TokenType.LPAREN, TokenType.COLON, TokenType.LBRACE, TokenType.PIPE}
    | EDGE_OPERATORS
)


class StatementParserMixin:
    """Parser mixin for containers, nodes and edges."""

    if TYPE_CHECKING:
        expect: Any
        advance: Any
        match: Any
        current_token: Any
        peek_token: Any
        pos: Any
        unexpected: Any
        report: Any
        record: Any
        synchronize: Any
        is_ref_call: Any
        parse_reference: Any
        parse_metadata_block: Any

    def parse_statement_list(self, in_container: bool) -> list[ir.Statement]:
        """
        Parse statements until end of input or, inside a container, `}`.

        A statement that fails to parse is reported and skipped; parsing
        resumes at the next statement boundary.
        """
        statements: list[ir.Statement] = []
        while not self.match(TokenType.EOF):
            if self.match(TokenType.RBRACE):
                if in_container:
                    break
                token = self.advance()
                self.report(
                    ir.DiagnosticCode.UNEXPECTED_TOKEN,
                    "Unexpected '}' with no open container",
                    token.span,
                )
                continue

            start_pos = self.pos
            try:
                statements.append(self.parse_statement())
            except ParseError as e:
                self.record(e)
                self.synchronize(start_pos)

        return statements

    def parse_statement(self) -> ir.Statement:
        """
        Parse one statement.

        Grammar:
            Statement := ContainerDecl | NodeDecl | EdgeDecl | MetadataDecl
        """
        token = self.current_token()
        if token.type != TokenType.IDENTIFIER:
            raise make_parse_error(
                ir.DiagnosticCode.UNEXPECTED_TOKEN,
                f"Expected a statement, got {describe(token)}",
                token.line,
                token.column,
                token.length,
            )

        if not self.is_ref_call() and self.peek_token().type == TokenType.LBRACE:
            return self.parse_container()

        reference = self.parse_reference()

        if self.match(TokenType.COLON):
            following = self.peek_token()
            if following.type == TokenType.LBRACE:
                return self.parse_metadata_block(reference)
            if _is_plain_name(reference) and following.type == TokenType.IDENTIFIER:
                return self.parse_node_ref_id(reference)
            self.advance()
            raise self.unexpected("'{' or a ref id after ':'")

        if self.match(*EDGE_OPERATORS):
            return self.parse_edge(reference)

        if _is_plain_name(reference):
            segment = reference.final
            return ir.NodeStmt(name=segment.value, span=segment.span)

        raise self.unexpected(f"an edge operator or ':' after '{reference}'")

    def parse_container(self) -> ir.ContainerStmt:
        """
        Parse `Name { Statement+ }`.

        An empty body is reported as EmptyContainer; a body cut off by end of
        input as ExpectedClosingBrace. Either way the container is returned so
        later passes can still see it.
        """
        name = self.advance()
        lbrace = self.advance()

        if self.match(TokenType.RBRACE):
            self.advance()
            self.report(
                ir.DiagnosticCode.EMPTY_CONTAINER,
                f"Container '{name.value}' must declare at least one element",
                join_spans(name, lbrace),
            )
            return ir.ContainerStmt(name=name.value, statements=[], span=name.span)

        statements = self.parse_statement_list(in_container=True)

        if self.match(TokenType.EOF):
            self.report(
                ir.DiagnosticCode.EXPECTED_CLOSING_BRACE,
                f"Container '{name.value}' is missing its closing '}}'",
                lbrace.span,
            )
        else:
            self.advance()

        return ir.ContainerStmt(name=name.value, statements=statements, span=name.span)

    def parse_node_ref_id(self, reference: ir.ReferenceExpr) -> ir.NodeStmt:
        """Parse the `:refId` tail of `name :refId`."""
        self.advance()  # colon
        ref_id = self.advance()
        if self.match(*_NODE_TRAILING_TOKENS):
            raise self.unexpected(f"end of node declaration after ':{ref_id.value}'")

        segment = reference.final
        return ir.NodeStmt(name=segment.value, ref_id=ref_id.value, span=segment.span)

    def parse_edge(self, source: ir.ReferenceExpr) -> ir.EdgeStmt:
        """
        Parse the operator, target and optional label of an edge.

        Grammar:
            EdgeDecl := RefExpr EdgeOp RefExpr ('|' SingleLineString)?
        """
        operator = self.advance()
        if not self.match(TokenType.IDENTIFIER):
            raise self.unexpected(f"a target reference after '{operator.value}'")
        target = self.parse_reference()

        label = None
        if self.match(TokenType.PIPE):
            self.advance()
            label = self.expect(TokenType.STRING, "a single-line string label after '|'").value

        return ir.EdgeStmt(
            source=source,
            target=target,
            direction=EDGE_DIRECTIONS[operator.type],
            label=label,
            span=source.span,
        )


def _is_plain_name(reference: ir.ReferenceExpr) -> bool:
    return reference.is_bare and not reference.final.is_ref_id
