"""
Base parser class for the Ramen DSL.

Provides token navigation, expectation and error-recovery utilities used by
all parser mixins.
"""

from ..errors import ParseError, make_parse_error
from ..ir import Diagnostic, DiagnosticCode, SourceSpan
from ..lexer import EDGE_OPERATORS, Token, TokenType

# Tokens after which an identifier continues the current statement rather
# than starting a new one.
CONNECTOR_TOKENS = frozenset(
    {TokenType.DOT, TokenType.LPAREN, TokenType.COLON, TokenType.PIPE} | EDGE_OPERATORS
)


def describe(token: Token) -> str:
    """Human-readable description of a token for error messages."""
    if token.type == TokenType.EOF:
        return "end of input"
    if token.type in (TokenType.STRING, TokenType.MULTILINE_STRING):
        return "string literal"
    return repr(token.value)


def join_spans(first: Token, last: Token) -> SourceSpan:
    """Span covering first..last when on one line, else just first."""
    if first.line != last.line:
        return first.span
    return SourceSpan(
        line=first.line,
        column=first.column,
        length=last.column + last.length - first.column,
    )


class BaseParser:
    """
    Base parser class with token manipulation utilities.

    This class provides the foundation for recursive descent parsing,
    including token navigation, matching, error reporting and recovery.
    Errors inside a statement are raised as ParseError and caught at the
    statement level, which records a diagnostic and resynchronizes.
    """

    def __init__(self, tokens: list[Token]):
        """
        Initialize parser.

        Args:
            tokens: List of tokens from lexer, ending with EOF
        """
        self.tokens = tokens
        self.pos = 0
        self.diagnostics: list[Diagnostic] = []

    def current_token(self) -> Token:
        """Get current token."""
        if self.pos >= len(self.tokens):
            return self.tokens[-1]  # Return EOF
        return self.tokens[self.pos]

    def peek_token(self, offset: int = 1) -> Token:
        """Peek ahead at token."""
        pos = self.pos + offset
        if pos >= len(self.tokens):
            return self.tokens[-1]  # Return EOF
        return self.tokens[pos]

    def previous_token(self) -> Token | None:
        """Last consumed token, if any."""
        if self.pos == 0:
            return None
        return self.tokens[min(self.pos, len(self.tokens)) - 1]

    def advance(self) -> Token:
        """Consume and return current token."""
        token = self.current_token()
        if token.type != TokenType.EOF:
            self.pos += 1
        return token

    def match(self, *token_types: TokenType) -> bool:
        """Check if current token matches any of the given types."""
        return self.current_token().type in token_types

    def unexpected(self, expected: str) -> ParseError:
        """
        Build the error for the current token not being what was expected.

        End of input becomes UnexpectedEndOfInput, anything else UnexpectedToken.
        """
        token = self.current_token()
        if token.type == TokenType.EOF:
            return make_parse_error(
                DiagnosticCode.UNEXPECTED_END_OF_INPUT,
                f"Unexpected end of input, expected {expected}",
                token.line,
                token.column,
                0,
            )
        return make_parse_error(
            DiagnosticCode.UNEXPECTED_TOKEN,
            f"Expected {expected}, got {describe(token)}",
            token.line,
            token.column,
            token.length,
        )

    def expect(self, token_type: TokenType, what: str | None = None) -> Token:
        """
        Expect a specific token type and consume it.

        Raises:
            ParseError: If token doesn't match
        """
        if not self.match(token_type):
            if what is None:
                if token_type == TokenType.IDENTIFIER:
                    what = "identifier"
                else:
                    what = repr(token_type.value)
            raise self.unexpected(what)
        return self.advance()

    def report(self, code: DiagnosticCode, message: str, span: SourceSpan) -> None:
        """Record a syntax diagnostic without unwinding."""
        self.diagnostics.append(Diagnostic.error(code, message, span))

    def record(self, error: ParseError) -> None:
        """Record a caught ParseError as a diagnostic."""
        context = error.context
        if context is None:
            token = self.current_token()
            span = token.span
        else:
            span = SourceSpan(line=context.line, column=context.column, length=context.length)
        self.report(error.code, error.message, span)

    def synchronize(self, start_pos: int) -> None:
        """
        Skip to the next statement boundary after a failed statement.

        A boundary is a closing brace of the enclosing block (left for the
        caller to consume) or an identifier that cannot continue the broken
        statement. Braced blocks met while skipping are skipped whole.
        """
        depth = 0
        while not self.match(TokenType.EOF):
            token = self.current_token()
            if token.type == TokenType.LBRACE:
                depth += 1
            elif token.type == TokenType.RBRACE:
                if depth == 0:
                    return
                depth -= 1
            elif depth == 0 and token.type == TokenType.IDENTIFIER and self.pos > start_pos:
                previous = self.previous_token()
                if previous is None or previous.type not in CONNECTOR_TOKENS:
                    return
            self.advance()
