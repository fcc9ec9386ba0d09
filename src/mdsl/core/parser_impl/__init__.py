"""
MDSL Parser Package.

This package provides a modular parser for the MediaLanguage DSL.
The parser is built using mixins to separate parsing logic by construct type,
making it easier to maintain and extend.

The main exports are:
- Parser: The complete parser class
- parse_dsl: Convenience function to parse DSL text into a Program

Usage:
    from mdsl.core.parser import parse_dsl

    program = parse_dsl(text, file)
"""

import logging
from pathlib import Path

from .. import ast
from ..errors import ParseError
from ..lexer import Token, TokenType, tokenize
from .base import COMMENT_TOKENS, BaseParser, ParserProtocol
from .blocks import BlockParserMixin
from .data import DataParserMixin
from .declarations import DeclarationParserMixin
from .events import EventParserMixin
from .expressions import ExpressionParserMixin
from .outlets import OutletParserMixin
from .relationships import RelationshipParserMixin

logger = logging.getLogger(__name__)


class Parser(
    BaseParser,
    ExpressionParserMixin,
    DeclarationParserMixin,
    OutletParserMixin,
    BlockParserMixin,
    DataParserMixin,
    RelationshipParserMixin,
    EventParserMixin,
):
    """
    Complete MDSL Parser.

    This class composes all parser mixins to provide full DSL parsing capability.
    Each mixin provides parsing for a specific construct type:

    - ExpressionParserMixin: Expressions, object literals and dates
    - DeclarationParserMixin: Imports, variables, units and vocabularies
    - OutletParserMixin: Families, templates, outlets and outlet references
    - BlockParserMixin: Identity, lifecycle, characteristics and metadata blocks
    - DataParserMixin: DATA FOR market data blocks
    - RelationshipParserMixin: Diachronic and synchronous links
    - EventParserMixin: Events and catalogs
    """

    def __init__(self, tokens: list[Token], file: Path | None = None, source: str | None = None):
        super().__init__(tokens, file, source)
        self.errors: list[ParseError] = []

    def parse(self) -> ast.Program:
        """
        Parse the whole token stream.

        After an error the parser synchronizes and keeps going so that
        ``errors`` lists every failure; the first one is raised.

        Returns:
            Program with top-level statements in source order

        Raises:
            ParseError: The first error encountered
        """
        statements: list[ast.Statement] = []

        while True:
            while self.match(TokenType.NEWLINE, TokenType.SEMICOLON):
                self.advance()
            if self.match(TokenType.EOF):
                break

            try:
                statements.append(self.parse_statement())
            except ParseError as e:
                logger.debug("Parse error: %s", e.message)
                self.errors.append(e)
                self.synchronize()

        if self.errors:
            raise self.errors[0]

        logger.debug("Parsed %d top-level statements", len(statements))
        return ast.Program(statements=statements)

    def parse_statement(self) -> ast.Statement:
        token = self.current_token()

        if token.type == TokenType.IMPORT:
            return self.parse_import()
        if token.type == TokenType.LET:
            return self.parse_let()
        if token.type == TokenType.UNIT:
            return self.parse_unit()
        if token.type == TokenType.VOCABULARY:
            return self.parse_vocabulary()
        if token.type == TokenType.FAMILY:
            return self.parse_family()
        if token.type == TokenType.TEMPLATE:
            return self.parse_template()
        if token.type == TokenType.DATA:
            return self.parse_data()
        if token.type == TokenType.EVENT:
            return self.parse_event()
        if token.type == TokenType.CATALOG:
            return self.parse_catalog()
        if token.type == TokenType.DIACHRONIC_LINK:
            return self.parse_diachronic_link()
        if token.type in (TokenType.SYNCHRONOUS_LINK, TokenType.SYNCHRONOUS_LINKS):
            return self.parse_synchronous_link()
        if token.type in COMMENT_TOKENS:
            return self.parse_comment()
        if token.type == TokenType.ANNOTATION:
            return self.annotation_as_comment()

        if token.type == TokenType.IDENTIFIER:
            next_type = self.peek_token().type
            if token.text.lower() == "group" and next_type == TokenType.STRING:
                return self.parse_family()
            if next_type == TokenType.LBRACE:
                return self.parse_standalone_vocabulary()

        raise self.error("declaration")


def parse_tokens(
    tokens: list[Token], file: Path | None = None, source: str | None = None
) -> ast.Program:
    """Parse an already tokenized stream."""
    return Parser(tokens, file, source).parse()


def parse_dsl(text: str, file: Path | None = None) -> ast.Program:
    """
    Parse MDSL text into a Program.

    Args:
        text: DSL source text
        file: Source file path (for error reporting)

    Returns:
        Parsed Program

    Raises:
        LexerError: On the first lexical error
        ParseError: On the first syntax error
    """
    tokens = tokenize(text, file)
    return parse_tokens(tokens, file, text)


__all__ = [
    "BaseParser",
    "Parser",
    "ParserProtocol",
    "parse_dsl",
    "parse_tokens",
]
