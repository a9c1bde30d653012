"""
Ramen DSL Parser Package.

The parser is built from mixins, one per construct family, on top of
BaseParser's token navigation and error recovery.

The main exports are:
- Parser: The complete parser class
- parse_dsl: Convenience function to lex and parse source text

Usage:
    from ramen.core.dsl_parser_impl import parse_dsl

    tree, diagnostics = parse_dsl(text)
"""

import logging

from .. import ir
from ..lexer import tokenize
from .base import BaseParser
from .metadata import MetadataParserMixin
from .references import ReferenceParserMixin
from .statements import StatementParserMixin

logger = logging.getLogger(__name__)


class Parser(
    BaseParser,
    ReferenceParserMixin,
    MetadataParserMixin,
    StatementParserMixin,
):
    """
    Complete Ramen DSL Parser.

    - ReferenceParserMixin: bare names, dot-paths and ref(...) selectors
    - MetadataParserMixin: metadata blocks and property assignments
    - StatementParserMixin: statement dispatch, containers, nodes, edges
    """

    def parse(self) -> ir.SyntaxTree:
        """
        Parse the whole token stream.

        Grammar:
            Document := Statement*
        """
        statements = self.parse_statement_list(in_container=False)
        return ir.SyntaxTree(statements=statements)


def parse_dsl(text: str) -> tuple[ir.SyntaxTree, list[ir.Diagnostic]]:
    """
    Lex and parse source text.

    Args:
        text: Ramen source text

    Returns:
        Tuple of (syntax tree, lexical and syntactic diagnostics)
    """
    tokens, lex_diagnostics = tokenize(text)
    parser = Parser(tokens)
    tree = parser.parse()

    logger.debug(
        "Parsed %d top-level statements (%d syntax errors)",
        len(tree.statements),
        len(parser.diagnostics),
    )
    return tree, lex_diagnostics + parser.diagnostics


__all__ = [
    "Parser",
    "parse_dsl",
]
