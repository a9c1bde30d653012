"""
Lexer/Tokenizer for the Ramen DSL.

Converts raw DSL text into a stream of tokens with source location tracking.
Whitespace, including newlines, is insignificant outside string literals.

Lexical problems never stop the lexer: the offending character or run is
skipped, a diagnostic is recorded, and tokenizing continues so one pass
reports every lexical error in the text.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from .ir import Diagnostic, DiagnosticCode, SourceSpan

logger = logging.getLogger(__name__)


class TokenType(Enum):
    """Token types in the Ramen DSL."""

    # Literals
    IDENTIFIER = "IDENTIFIER"
    STRING = "STRING"
    MULTILINE_STRING = "MULTILINE_STRING"
    NUMBER = "NUMBER"

    # Punctuation
    LBRACE = "{"
    RBRACE = "}"
    DOT = "."
    COLON = ":"
    PIPE = "|"
    LPAREN = "("
    RPAREN = ")"

    # Edge operators
    ARROW = "->"
    LARROW = "<-"
    BIARROW = "<->"
    DASH = "-"

    # Special
    EOF = "EOF"


EDGE_OPERATORS = frozenset({TokenType.ARROW, TokenType.LARROW, TokenType.BIARROW, TokenType.DASH})

SINGLE_CHAR_TOKENS = {
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    ".": TokenType.DOT,
    ":": TokenType.COLON,
    "|": TokenType.PIPE,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
}

WHITESPACE = frozenset({" ", "\t", "\r", "\n"})


@dataclass
class Token:
    """
    A single token in the DSL.

    Attributes:
        type: Type of token
        value: String value of the token (string literals without quotes)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        length: Number of source characters the token spans
    """

    type: TokenType
    value: str
    line: int
    column: int
    length: int = 1

    @property
    def span(self) -> SourceSpan:
        return SourceSpan(line=self.line, column=self.column, length=self.length)

    def __repr__(self) -> str:
        return f"Token({self.type.value}, {self.value!r}, {self.line}:{self.column})"


def _is_letter(ch: str | None) -> bool:
    return ch is not None and ch.isalpha()


def _is_digit(ch: str | None) -> bool:
    return ch is not None and "0" <= ch <= "9"


def _is_word_char(ch: str | None) -> bool:
    return ch is not None and (ch.isalnum() or ch == "_")


class Lexer:
    """
    Lexer for the Ramen DSL.

    Converts source text into a stream of tokens, collecting diagnostics
    instead of raising.
    """

    def __init__(self, text: str):
        """
        Initialize lexer.

        Args:
            text: Source text to tokenize
        """
        self.text = text
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: list[Token] = []
        self.diagnostics: list[Diagnostic] = []

    def current_char(self) -> str | None:
        """Get current character or None if at end."""
        if self.pos >= len(self.text):
            return None
        return self.text[self.pos]

    def peek_char(self, offset: int = 1) -> str | None:
        """Peek ahead at character."""
        pos = self.pos + offset
        if pos >= len(self.text):
            return None
        return self.text[pos]

    def advance(self) -> None:
        """Move to next character, updating line/column."""
        if self.pos < len(self.text):
            if self.text[self.pos] == "\n":
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.pos += 1

    def skip_whitespace(self) -> None:
        """Skip whitespace characters, newlines included."""
        while self.current_char() in WHITESPACE:
            self.advance()

    def error(
        self, code: DiagnosticCode, message: str, line: int, column: int, length: int = 1
    ) -> None:
        """Record a lexical diagnostic."""
        span = SourceSpan(line=line, column=column, length=max(1, length))
        self.diagnostics.append(Diagnostic.error(code, message, span))

    def emit(self, token_type: TokenType, value: str, line: int, column: int, start: int) -> None:
        self.tokens.append(Token(token_type, value, line, column, self.pos - start))

    def read_string(self) -> tuple[str, bool]:
        """
        Read a single-line string. Backslashes are literal.

        Returns:
            Tuple of (content, terminated)
        """
        self.advance()  # skip opening quote

        chars = []
        while True:
            current = self.current_char()
            if current is None or current == "\n" or current == '"':
                break
            chars.append(current)
            self.advance()

        if self.current_char() != '"':
            return "".join(chars), False

        self.advance()  # skip closing quote
        return "".join(chars), True

    def read_multiline_string(self) -> tuple[str, bool]:
        r"""
        Read a multi-line string opened by `\"` and closed by `"\`.

        Content is captured verbatim, newlines included.

        Returns:
            Tuple of (content, terminated)
        """
        self.advance()  # skip backslash
        self.advance()  # skip quote

        chars = []
        while True:
            current = self.current_char()
            if current is None:
                return "".join(chars), False
            if current == '"' and self.peek_char() == "\\":
                self.advance()
                self.advance()
                return "".join(chars), True
            chars.append(current)
            self.advance()

    def read_number(self) -> str:
        """Read an integer or decimal number."""
        chars = []
        while _is_digit(self.current_char()):
            chars.append(self.current_char())
            self.advance()

        if self.current_char() == "." and _is_digit(self.peek_char()):
            chars.append(".")
            self.advance()
            while _is_digit(self.current_char()):
                chars.append(self.current_char())
                self.advance()

        return "".join(chars)

    def read_word(self) -> str:
        """Read a run of letters, digits and underscores."""
        chars = []
        while _is_word_char(self.current_char()):
            chars.append(self.current_char())
            self.advance()
        return "".join(chars)

    def tokenize(self) -> list[Token]:
        """
        Tokenize the entire source text.

        Returns:
            List of tokens ending with EOF. Lexical problems are recorded in
            self.diagnostics.
        """
        while True:
            self.skip_whitespace()

            ch = self.current_char()
            if ch is None:
                break

            # Save position for token
            start = self.pos
            token_line = self.line
            token_col = self.column

            # Multi-line strings: \" ... "\
            if ch == "\\" and self.peek_char() == '"':
                value, terminated = self.read_multiline_string()
                if not terminated:
                    self.error(
                        DiagnosticCode.UNTERMINATED_STRING,
                        'Unterminated multi-line string (expected closing "\\)',
                        token_line,
                        token_col,
                        2,
                    )
                self.emit(TokenType.MULTILINE_STRING, value, token_line, token_col, start)

            # Single-line strings
            elif ch == '"':
                value, terminated = self.read_string()
                if not terminated:
                    self.error(
                        DiagnosticCode.UNTERMINATED_STRING,
                        "Unterminated string literal",
                        token_line,
                        token_col,
                        self.pos - start,
                    )
                self.emit(TokenType.STRING, value, token_line, token_col, start)

            # Numbers
            elif _is_digit(ch):
                value = self.read_number()
                if _is_word_char(self.current_char()):
                    # Digit-led word such as "2fa"
                    value += self.read_word()
                    self.error(
                        DiagnosticCode.INVALID_IDENTIFIER_START,
                        f"Identifier {value!r} must start with a letter",
                        token_line,
                        token_col,
                        self.pos - start,
                    )
                else:
                    self.emit(TokenType.NUMBER, value, token_line, token_col, start)

            # Identifiers
            elif _is_letter(ch) or ch == "_":
                value = self.read_word()
                underscore = value.find("_")
                if underscore == 0:
                    self.error(
                        DiagnosticCode.INVALID_IDENTIFIER_START,
                        f"Identifier {value!r} must start with a letter",
                        token_line,
                        token_col,
                        self.pos - start,
                    )
                elif underscore > 0:
                    self.error(
                        DiagnosticCode.INVALID_CHARACTER,
                        f"Underscores are not allowed in identifiers: {value!r}",
                        token_line,
                        token_col + underscore,
                    )
                else:
                    self.emit(TokenType.IDENTIFIER, value, token_line, token_col, start)

            # Edge operators
            elif ch == "-":
                self.advance()
                if self.current_char() == ">":
                    self.advance()
                    self.emit(TokenType.ARROW, "->", token_line, token_col, start)
                else:
                    self.emit(TokenType.DASH, "-", token_line, token_col, start)

            elif ch == "<" and self.peek_char() == "-":
                self.advance()
                self.advance()
                if self.current_char() == ">":
                    self.advance()
                    self.emit(TokenType.BIARROW, "<->", token_line, token_col, start)
                else:
                    self.emit(TokenType.LARROW, "<-", token_line, token_col, start)

            elif ch in SINGLE_CHAR_TOKENS:
                self.advance()
                self.emit(SINGLE_CHAR_TOKENS[ch], ch, token_line, token_col, start)

            else:
                self.advance()
                self.error(
                    DiagnosticCode.INVALID_CHARACTER,
                    f"Unexpected character: {ch!r}",
                    token_line,
                    token_col,
                )

        # Add EOF token
        self.tokens.append(Token(TokenType.EOF, "", self.line, self.column, 0))

        logger.debug(
            "Tokenized %d characters into %d tokens (%d lexical errors)",
            len(self.text),
            len(self.tokens),
            len(self.diagnostics),
        )
        return self.tokens


def tokenize(text: str) -> tuple[list[Token], list[Diagnostic]]:
    """
    Convenience function to tokenize DSL text.

    Args:
        text: Source text

    Returns:
        Tuple of (tokens, lexical diagnostics)
    """
    lexer = Lexer(text)
    tokens = lexer.tokenize()
    return tokens, lexer.diagnostics
