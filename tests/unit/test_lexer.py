"""Tests for the Ramen lexer."""

from __future__ import annotations

import pytest

from ramen.core.ir import DiagnosticCode
from ramen.core.lexer import TokenType, tokenize


def _types(text: str) -> list[TokenType]:
    tokens, _ = tokenize(text)
    return [t.type for t in tokens]


class TestTokens:
    """Token kinds and values."""

    def test_container_with_node(self):
        assert _types("Frontend { app }") == [
            TokenType.IDENTIFIER,
            TokenType.LBRACE,
            TokenType.IDENTIFIER,
            TokenType.RBRACE,
            TokenType.EOF,
        ]

    def test_empty_input_is_just_eof(self):
        tokens, diagnostics = tokenize("")
        assert [t.type for t in tokens] == [TokenType.EOF]
        assert diagnostics == []

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("->", TokenType.ARROW),
            ("<-", TokenType.LARROW),
            ("<->", TokenType.BIARROW),
            ("-", TokenType.DASH),
        ],
    )
    def test_edge_operators(self, text, expected):
        assert _types(f"a {text} b") == [
            TokenType.IDENTIFIER,
            expected,
            TokenType.IDENTIFIER,
            TokenType.EOF,
        ]

    def test_dash_without_spaces(self):
        assert _types("a-b") == [
            TokenType.IDENTIFIER,
            TokenType.DASH,
            TokenType.IDENTIFIER,
            TokenType.EOF,
        ]

    def test_punctuation(self):
        assert _types("A.ref(x): { } |") == [
            TokenType.IDENTIFIER,
            TokenType.DOT,
            TokenType.IDENTIFIER,
            TokenType.LPAREN,
            TokenType.IDENTIFIER,
            TokenType.RPAREN,
            TokenType.COLON,
            TokenType.LBRACE,
            TokenType.RBRACE,
            TokenType.PIPE,
            TokenType.EOF,
        ]

    def test_identifiers_are_case_sensitive_and_may_contain_digits(self):
        tokens, diagnostics = tokenize("Web2 web2")
        assert [t.value for t in tokens[:2]] == ["Web2", "web2"]
        assert diagnostics == []

    def test_numbers(self):
        tokens, diagnostics = tokenize("12 3.5")
        assert [(t.type, t.value) for t in tokens[:2]] == [
            (TokenType.NUMBER, "12"),
            (TokenType.NUMBER, "3.5"),
        ]
        assert diagnostics == []

    def test_trailing_dot_is_not_part_of_number(self):
        assert _types("3.") == [TokenType.NUMBER, TokenType.DOT, TokenType.EOF]

    def test_positions(self):
        tokens, _ = tokenize("a\n  bee")
        bee = tokens[1]
        assert (bee.line, bee.column, bee.length) == (2, 3, 3)


class TestStrings:
    """Single- and multi-line string literals."""

    def test_single_line_string(self):
        tokens, diagnostics = tokenize('"hello world"')
        assert tokens[0].type == TokenType.STRING
        assert tokens[0].value == "hello world"
        assert tokens[0].length == 13
        assert diagnostics == []

    def test_backslash_is_literal(self):
        tokens, diagnostics = tokenize('"a\\b"')
        assert tokens[0].value == "a\\b"
        assert diagnostics == []

    def test_multiline_string_keeps_newlines(self):
        tokens, diagnostics = tokenize('\\"line one\nline two"\\')
        assert tokens[0].type == TokenType.MULTILINE_STRING
        assert tokens[0].value == "line one\nline two"
        assert diagnostics == []

    def test_multiline_string_does_not_process_escapes(self):
        tokens, _ = tokenize('\\"a \\n b"\\')
        assert tokens[0].value == "a \\n b"

    def test_unterminated_string_at_end_of_line(self):
        tokens, diagnostics = tokenize('"abc\nnext')
        assert [d.code for d in diagnostics] == [DiagnosticCode.UNTERMINATED_STRING]
        assert (diagnostics[0].line, diagnostics[0].column) == (1, 1)
        assert tokens[0].type == TokenType.STRING
        assert tokens[0].value == "abc"
        assert tokens[1].value == "next"
        assert tokens[1].line == 2

    def test_unterminated_multiline_string(self):
        tokens, diagnostics = tokenize('\\"never closed\n')
        assert [d.code for d in diagnostics] == [DiagnosticCode.UNTERMINATED_STRING]
        assert tokens[0].type == TokenType.MULTILINE_STRING


class TestLexicalErrors:
    """Lexical errors are collected and lexing continues."""

    def test_invalid_character(self):
        tokens, diagnostics = tokenize("a # b")
        assert [d.code for d in diagnostics] == [DiagnosticCode.INVALID_CHARACTER]
        assert (diagnostics[0].line, diagnostics[0].column) == (1, 3)
        assert [t.value for t in tokens if t.type == TokenType.IDENTIFIER] == ["a", "b"]

    def test_comment_like_sequences_are_not_comments(self):
        _, diagnostics = tokenize("a // note")
        assert [d.code for d in diagnostics] == [
            DiagnosticCode.INVALID_CHARACTER,
            DiagnosticCode.INVALID_CHARACTER,
        ]

    def test_all_errors_reported_in_one_pass(self):
        _, diagnostics = tokenize("a # b $ c\n2fa")
        assert [d.code for d in diagnostics] == [
            DiagnosticCode.INVALID_CHARACTER,
            DiagnosticCode.INVALID_CHARACTER,
            DiagnosticCode.INVALID_IDENTIFIER_START,
        ]

    def test_digit_led_identifier(self):
        tokens, diagnostics = tokenize("2fa")
        assert [d.code for d in diagnostics] == [DiagnosticCode.INVALID_IDENTIFIER_START]
        assert diagnostics[0].length == 3
        assert [t.type for t in tokens] == [TokenType.EOF]

    def test_underscore_in_identifier(self):
        tokens, diagnostics = tokenize("my_node")
        assert [d.code for d in diagnostics] == [DiagnosticCode.INVALID_CHARACTER]
        assert diagnostics[0].column == 3
        assert [t.type for t in tokens] == [TokenType.EOF]

    def test_leading_underscore(self):
        _, diagnostics = tokenize("_hidden")
        assert [d.code for d in diagnostics] == [DiagnosticCode.INVALID_IDENTIFIER_START]

    def test_hyphen_splits_identifier(self):
        assert _types("api-gateway") == [
            TokenType.IDENTIFIER,
            TokenType.DASH,
            TokenType.IDENTIFIER,
            TokenType.EOF,
        ]
