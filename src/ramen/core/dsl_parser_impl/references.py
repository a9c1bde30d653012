"""
Reference expression parsing for the Ramen DSL.

Handles:
- Bare names: app
- Lone ref-ids: ref(mainRouter)
- Dot-paths: Frontend.app, Network.ref(mainRouter)
"""

from typing import TYPE_CHECKING, Any

from .. import ir
from ..errors import make_parse_error
from ..lexer import TokenType
from .base import join_spans

REF_KEYWORD = "ref"


class ReferenceParserMixin:
    """Parser mixin for reference expressions."""

    if TYPE_CHECKING:
        expect: Any
        advance: Any
        match: Any
        current_token: Any
        peek_token: Any

    def is_ref_call(self) -> bool:
        """True when the current tokens read `ref (`."""
        token = self.current_token()
        return (
            token.type == TokenType.IDENTIFIER
            and token.value == REF_KEYWORD
            and self.peek_token().type == TokenType.LPAREN
        )

    def parse_ref_call(self) -> ir.Segment:
        """Parse `ref(identifier)` into a ref-id segment."""
        ref_token = self.advance()
        self.expect(TokenType.LPAREN)
        id_token = self.expect(TokenType.IDENTIFIER, "ref id")
        close = self.expect(TokenType.RPAREN)
        return ir.Segment(
            kind=ir.SegmentKind.REF_ID,
            value=id_token.value,
            span=join_spans(ref_token, close),
        )

    def parse_reference(self) -> ir.ReferenceExpr:
        """
        Parse a reference expression.

        RefExpr := 'ref' '(' Identifier ')'
                 | Identifier ('.' (Identifier | 'ref' '(' Identifier ')'))*
        """
        if self.is_ref_call():
            return ir.ReferenceExpr.from_segments([self.parse_ref_call()])

        first = self.expect(TokenType.IDENTIFIER)
        segments = [ir.Segment(kind=ir.SegmentKind.NAME, value=first.value, span=first.span)]

        while self.match(TokenType.DOT):
            self.advance()
            if self.is_ref_call():
                segments.append(self.parse_ref_call())
                if self.match(TokenType.DOT):
                    dot = self.current_token()
                    raise make_parse_error(
                        ir.DiagnosticCode.UNEXPECTED_TOKEN,
                        "ref(...) must be the final segment of a path",
                        dot.line,
                        dot.column,
                    )
                break
            token = self.expect(TokenType.IDENTIFIER, "name or ref(...) after '.'")
            segments.append(
                ir.Segment(kind=ir.SegmentKind.NAME, value=token.value, span=token.span)
            )

        return ir.ReferenceExpr.from_segments(segments)
