"""
Base parser class for MDSL.

Provides common token manipulation and utility methods used by all parser mixins.
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from ..ast import Annotation, Comment
from ..errors import (
    ParseError,
    make_invalid_syntax,
    make_missing_delimiter,
    make_unexpected_eof,
    make_unexpected_token,
)
from ..lexer import Token, TokenType

if TYPE_CHECKING:
    from .. import ast

logger = logging.getLogger(__name__)

# Statements the parser can resume at after an error.
SYNC_TOKENS = frozenset(
    {
        TokenType.IMPORT,
        TokenType.LET,
        TokenType.UNIT,
        TokenType.VOCABULARY,
        TokenType.FAMILY,
        TokenType.TEMPLATE,
        TokenType.DATA,
    }
)

COMMENT_TOKENS = frozenset({TokenType.COMMENT, TokenType.MULTILINE_COMMENT})

CLOSING_TOKENS = frozenset({TokenType.RBRACE, TokenType.RPAREN, TokenType.RBRACKET})


@runtime_checkable
class ParserProtocol(Protocol):
    """
    Protocol defining the interface available to parser mixins.

    This allows mypy to understand that mixins will have access to
    BaseParser methods when combined in the final Parser class.
    """

    tokens: list[Token]
    file: Path | None
    pos: int

    def current_token(self) -> Token: ...
    def peek_token(self, offset: int = 1) -> Token: ...
    def advance(self) -> Token: ...
    def expect(self, token_type: TokenType, message: str | None = None) -> Token: ...
    def match(self, *token_types: TokenType) -> bool: ...
    def skip_newlines(self) -> None: ...
    def consume_identifier(self) -> str: ...
    def error(self, message: str) -> ParseError: ...

    # Methods from other mixins that may be called cross-mixin
    def parse_expression(self) -> "ast.Expression": ...
    def parse_date(self) -> "ast.DateExpr": ...


class BaseParser:
    """
    Base parser class with token manipulation utilities.

    This class provides the foundation for recursive descent parsing,
    including token navigation, matching, and error generation.
    """

    def __init__(self, tokens: list[Token], file: Path | None = None, source: str | None = None):
        """
        Initialize parser.

        Args:
            tokens: List of tokens from lexer
            file: Source file path (for error reporting)
            source: Source text (for error snippets)
        """
        self.tokens = tokens
        self.file = file
        self.source = source
        self.pos = 0

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

    def advance(self) -> Token:
        """Consume and return current token."""
        token = self.current_token()
        if token.type != TokenType.EOF:
            self.pos += 1
        return token

    def match(self, *token_types: TokenType) -> bool:
        """Check if current token matches any of the given types."""
        return self.current_token().type in token_types

    def accept(self, *token_types: TokenType) -> bool:
        """Consume the current token if it matches; report whether it did."""
        if self.match(*token_types):
            self.advance()
            return True
        return False

    def expect(self, token_type: TokenType, message: str | None = None) -> Token:
        """
        Expect a specific token type and consume it.

        Raises:
            ParseError: If token doesn't match
        """
        if not self.match(token_type):
            if token_type in CLOSING_TOKENS and self.match(TokenType.EOF):
                raise self.missing_delimiter(token_type.value)
            raise self.error(message or f"'{token_type.value}'")
        return self.advance()

    def error(self, message: str) -> ParseError:
        """Build an unexpected-token error at the current token."""
        token = self.current_token()
        if token.type == TokenType.EOF:
            return make_unexpected_eof(message, token.position, self.file, self.source)
        return make_unexpected_token(token.text, [message], token.position, self.file, self.source)

    def missing_delimiter(self, delimiter: str) -> ParseError:
        position = self.current_token().position
        return make_missing_delimiter(delimiter, position, self.file, self.source)

    # -------------------------------------------------------------------------
    # Trivia
    # -------------------------------------------------------------------------

    def skip_newlines(self) -> None:
        """Skip any newline tokens."""
        while self.match(TokenType.NEWLINE):
            self.advance()

    def skip_trivia(self) -> None:
        """Skip newlines and comments without recording them."""
        while self.match(TokenType.NEWLINE, *COMMENT_TOKENS):
            self.advance()

    def skip_separators(self) -> None:
        """Skip optional ``;`` and ``,`` after a field."""
        while self.match(TokenType.SEMICOLON, TokenType.COMMA):
            self.advance()

    def parse_comment(self) -> Comment:
        token = self.advance()
        return Comment(
            text=str(token.value),
            is_multiline=token.type == TokenType.MULTILINE_COMMENT,
            position=token.position,
        )

    def parse_annotation(self) -> Annotation:
        """
        Parse an annotation.

        Grammar:
            ANNOTATION (STRING | ASSIGN STRING)?
        """
        token = self.expect(TokenType.ANNOTATION, "annotation")
        value = None
        if self.match(TokenType.STRING):
            value = str(self.advance().value)
        elif self.accept(TokenType.ASSIGN):
            value = self.consume_string("string value after '='")
        return Annotation(name=str(token.value), value=value, position=token.position)

    def skip_annotation(self) -> None:
        """Consume an annotation in a block that has no comment slot."""
        annotation = self.parse_annotation()
        logger.debug("Dropping annotation @%s at %s", annotation.name, annotation.position)
        self.skip_separators()

    def annotation_as_comment(self) -> Comment:
        """Record an annotation as a ``@name: value`` comment."""
        annotation = self.parse_annotation()
        return Comment(
            text=f"@{annotation.name}: {annotation.value or ''}",
            position=annotation.position,
        )

    # -------------------------------------------------------------------------
    # Terminals
    # -------------------------------------------------------------------------

    def consume_identifier(self) -> str:
        """
        Consume a field name.

        Keywords are accepted as names. The source spelling is kept in
        both cases; lookups by name compare lowercased.
        """
        token = self.current_token()
        if token.type == TokenType.IDENTIFIER or token.is_keyword:
            self.advance()
            return token.text
        raise self.error("identifier")

    def consume_field_name(self, known: frozenset[str], kind: str) -> str:
        """Consume ``name =`` where ``name`` must be one of ``known``."""
        token = self.current_token()
        if token.type == TokenType.IDENTIFIER:
            name = token.text.lower()
        elif token.is_keyword:
            name = token.type.value
        else:
            raise self.error(f"{kind} field")
        if name not in known:
            raise make_invalid_syntax(
                f"unknown {kind} field '{token.text}'", token.position, self.file, self.source
            )
        self.advance()
        self.expect(TokenType.ASSIGN, "'='")
        return name

    def consume_string(self, message: str = "string literal") -> str:
        return str(self.expect(TokenType.STRING, message).value)

    def consume_number(self, message: str = "number") -> float:
        return float(self.expect(TokenType.NUMBER, message).value)  # type: ignore[arg-type]

    def skip_balanced_braces(self) -> None:
        """Skip a ``{ ... }`` body, counting nested braces."""
        self.expect(TokenType.LBRACE, "'{'")
        depth = 1
        while depth > 0:
            token = self.advance()
            if token.type == TokenType.EOF:
                raise self.missing_delimiter("}")
            if token.type == TokenType.LBRACE:
                depth += 1
            elif token.type == TokenType.RBRACE:
                depth -= 1

    # -------------------------------------------------------------------------
    # Error recovery
    # -------------------------------------------------------------------------

    def synchronize(self) -> None:
        """Advance past the failing token to a ``;`` or a statement keyword."""
        self.advance()
        while not self.match(TokenType.EOF):
            if self.accept(TokenType.SEMICOLON):
                break
            if self.match(*SYNC_TOKENS):
                break
            self.advance()
        logger.debug("Synchronized at %r", self.current_token())
