r"""
Metadata block parsing for the Ramen DSL.

DSL Syntax:

    Frontend.app: {
      shape: "circle"
      x: 120
      content: \"Multi-line
    description"\
    }
"""

from typing import TYPE_CHECKING, Any

from .. import ir
from ..errors import ParseError
from ..lexer import Token, TokenType
from .base import join_spans

VALUE_TOKENS = {
    TokenType.STRING: ir.ValueKind.STRING,
    TokenType.MULTILINE_STRING: ir.ValueKind.MULTILINE_STRING,
    TokenType.NUMBER: ir.ValueKind.NUMBER,
}


def _number_value(token: Token) -> int | float:
    if "." in token.value:
        return float(token.value)
    return int(token.value)


class MetadataParserMixin:
    """Parser mixin for metadata blocks and property assignments."""

    if TYPE_CHECKING:
        expect: Any
        advance: Any
        match: Any
        current_token: Any
        peek_token: Any
        unexpected: Any
        report: Any
        record: Any

    def parse_metadata_block(self, target: ir.ReferenceExpr) -> ir.MetadataStmt:
        """
        Parse `: { assignments }` after an already-parsed target reference.

        Grammar:
            MetadataDecl := RefExpr ':' '{' PropertyAssignment* '}'

        A bad assignment is reported and skipped without abandoning the rest
        of the block. A block cut off by end of input is reported as
        ExpectedClosingBrace and kept with the assignments read so far.
        """
        self.expect(TokenType.COLON)
        lbrace = self.expect(TokenType.LBRACE)

        assignments: list[ir.PropertyAssignment] = []
        while not self.match(TokenType.RBRACE, TokenType.EOF):
            try:
                assignments.append(self.parse_property_assignment())
            except ParseError as e:
                self.record(e)
                self._skip_to_next_assignment()

        if self.match(TokenType.EOF):
            self.report(
                ir.DiagnosticCode.EXPECTED_CLOSING_BRACE,
                f"Metadata block for '{target}' is missing its closing '}}'",
                lbrace.span,
            )
        else:
            self.advance()

        return ir.MetadataStmt(target=target, assignments=assignments, span=target.span)

    def parse_property_assignment(self) -> ir.PropertyAssignment:
        """
        Parse a single `key: value` pair.

        Grammar:
            PropertyAssignment := Identifier ':' (SingleLineString | MultiLineString | Number)
        """
        key = self.expect(TokenType.IDENTIFIER, "property name")
        self.expect(TokenType.COLON)

        value_token = self.current_token()
        value_kind = VALUE_TOKENS.get(value_token.type)
        if value_kind is None:
            raise self.unexpected(f"a string or number value for '{key.value}'")
        self.advance()

        value: str | int | float
        if value_kind == ir.ValueKind.NUMBER:
            value = _number_value(value_token)
        else:
            value = value_token.value

        return ir.PropertyAssignment(
            key=key.value,
            value_kind=value_kind,
            value=value,
            span=join_spans(key, value_token),
            value_span=value_token.span,
        )

    def _skip_to_next_assignment(self) -> None:
        """
        Skip to the next `identifier :` pair or the end of the block.

        The block's own `}` is left for the caller to consume.
        """
        while not self.match(TokenType.RBRACE, TokenType.EOF):
            if self.match(TokenType.IDENTIFIER) and self.peek_token().type == TokenType.COLON:
                return
            self.advance()
