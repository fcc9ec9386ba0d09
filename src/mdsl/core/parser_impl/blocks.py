"""
Outlet block parser mixin for MDSL.

Parses the four typed blocks that make up an outlet or template body.

DSL Syntax:

    identity {
        id = 200001;
        title = "Kronen Zeitung";
        historical_titles = [
            { title = "Krone"; period = "1900-01-02" TO "1944-08-31"; },
        ];
    };
    lifecycle {
        status "active" FROM "1959-01-01" TO CURRENT {
            precision_start = "known";
            @comment "Relaunch";
        };
    };
    characteristics {
        language = "de";
        distribution = { primary_area = "national"; };
    };
    metadata {
        verified = true;
    };
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .. import ast
from ..errors import ParseError
from ..lexer import TokenType
from .base import COMMENT_TOKENS

logger = logging.getLogger(__name__)


class BlockParserMixin:
    """Parser mixin for identity, lifecycle, characteristics and metadata blocks."""

    if TYPE_CHECKING:
        expect: Any
        advance: Any
        accept: Any
        match: Any
        peek_token: Any
        current_token: Any
        skip_newlines: Any
        skip_trivia: Any
        skip_separators: Any
        skip_balanced_braces: Any
        consume_identifier: Any
        consume_string: Any
        parse_comment: Any
        annotation_as_comment: Any
        skip_annotation: Any
        error: Any
        parse_expression: Any
        parse_object_literal: Any
        parse_date: Any

    def parse_outlet_block(self) -> ast.OutletBlock:
        """
        Parse one block inside an outlet or template.

        Grammar:
            identity_block | lifecycle_block | characteristics_block
            | metadata_block | COMMENT | ANNOTATION ... | name ASSIGN expression

        A bare ``name = value`` is wrapped in a single-field identity block.
        """
        token = self.current_token()

        if token.type in COMMENT_TOKENS:
            return self.parse_comment()
        if token.type == TokenType.ANNOTATION:
            return self.annotation_as_comment()
        if token.type == TokenType.IDENTITY:
            return self.parse_identity_block()
        if token.type == TokenType.LIFECYCLE:
            return self.parse_lifecycle_block()
        if token.type == TokenType.CHARACTERISTICS:
            return self.parse_characteristics_block()
        if token.type == TokenType.METADATA:
            return self.parse_metadata_block()

        if (
            token.type == TokenType.IDENTIFIER or token.type == TokenType.ID
        ) and self.peek_token().type == TokenType.ASSIGN:
            field = self.parse_identity_field()
            return ast.IdentityBlock(fields=[field], position=field.position)

        raise self.error("outlet block")

    # =========================================================================
    # Identity
    # =========================================================================

    def parse_identity_block(self) -> ast.IdentityBlock:
        """
        Parse an identity block.

        Grammar:
            IDENTITY LBRACE ((identity_field | COMMENT) (SEMICOLON | COMMA)*)* RBRACE
        """
        start = self.expect(TokenType.IDENTITY)
        self.expect(TokenType.LBRACE, "'{'")

        fields: list[ast.Assignment | ast.ArrayAssignment | ast.Comment] = []
        while True:
            self.skip_newlines()
            if self.match(TokenType.RBRACE, TokenType.EOF):
                break
            if self.match(*COMMENT_TOKENS):
                fields.append(self.parse_comment())
                continue
            if self.match(TokenType.ANNOTATION):
                fields.append(self.annotation_as_comment())
                self.skip_separators()
                continue
            fields.append(self.parse_identity_field())
            self.skip_separators()

        self.expect(TokenType.RBRACE, "'}'")
        return ast.IdentityBlock(fields=fields, position=start.position)

    def parse_identity_field(self) -> ast.Assignment | ast.ArrayAssignment:
        """
        Parse an identity field.

        Grammar:
            name ASSIGN (LBRACKET object_literal (COMMA object_literal)* RBRACKET | expression)
        """
        name_token = self.current_token()
        name = self.consume_identifier()
        self.expect(TokenType.ASSIGN, "'='")

        if self.accept(TokenType.LBRACKET):
            values: list[ast.ObjectExpr] = []
            while True:
                self.skip_trivia()
                if self.match(TokenType.RBRACKET, TokenType.EOF):
                    break
                values.append(self.parse_object_literal())
                self.skip_trivia()
                if not self.accept(TokenType.COMMA):
                    break
            self.skip_trivia()
            self.expect(TokenType.RBRACKET, "']'")
            return ast.ArrayAssignment(name=name, values=values, position=name_token.position)

        return ast.Assignment(
            name=name, value=self.parse_expression(), position=name_token.position
        )

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def parse_lifecycle_block(self) -> ast.LifecycleBlock:
        """
        Parse a lifecycle block.

        Grammar:
            LIFECYCLE LBRACE (lifecycle_entry (SEMICOLON | COMMA)*)* RBRACE
        """
        start = self.expect(TokenType.LIFECYCLE)
        self.expect(TokenType.LBRACE, "'{'")

        entries: list[ast.LifecycleEntry] = []
        while True:
            self.skip_trivia()
            if self.match(TokenType.RBRACE, TokenType.EOF):
                break
            if self.match(TokenType.ANNOTATION):
                self.skip_annotation()
                continue
            entries.append(self.parse_lifecycle_entry())
            self.skip_separators()

        self.expect(TokenType.RBRACE, "'}'")
        return ast.LifecycleBlock(entries=entries, position=start.position)

    def parse_lifecycle_entry(self) -> ast.LifecycleEntry:
        """
        Parse a lifecycle status entry.

        Grammar:
            STATUS STRING FROM date (TO date)? LBRACE attribute* RBRACE
            attribute := COMMENT | ANNOTATION ... | name ASSIGN expression
        """
        start = self.expect(TokenType.STATUS, "'status'")
        status = self.consume_string("status name")
        self.expect(TokenType.FROM, "'from'")
        start_date = self.parse_date()
        end_date = self.parse_date() if self.accept(TokenType.TO) else None

        self.expect(TokenType.LBRACE, "'{'")
        attributes: list[ast.Assignment | ast.Comment] = []
        while True:
            self.skip_newlines()
            if self.match(TokenType.RBRACE, TokenType.EOF):
                break
            if self.match(*COMMENT_TOKENS):
                attributes.append(self.parse_comment())
            elif self.match(TokenType.ANNOTATION):
                attributes.append(self.annotation_as_comment())
            else:
                name_token = self.current_token()
                name = self.consume_identifier()
                self.expect(TokenType.ASSIGN, "'='")
                attributes.append(
                    ast.Assignment(
                        name=name, value=self.parse_expression(), position=name_token.position
                    )
                )
            self.skip_separators()

        self.expect(TokenType.RBRACE, "'}'")
        return ast.LifecycleEntry(
            status=status,
            start=start_date,
            end=end_date,
            attributes=attributes,
            position=start.position,
        )

    # =========================================================================
    # Characteristics and metadata
    # =========================================================================

    def parse_characteristics_block(self) -> ast.CharacteristicsBlock:
        """
        Parse a characteristics block.

        Grammar:
            CHARACTERISTICS LBRACE ((characteristic | COMMENT) (SEMICOLON | COMMA)*)* RBRACE
            characteristic := name ASSIGN (STRING object_body? | object_body | expression)

        Object values are skipped and recorded as the string ``complex_object``;
        a string followed by an object body keeps the string.
        """
        start = self.expect(TokenType.CHARACTERISTICS)
        self.expect(TokenType.LBRACE, "'{'")

        fields: list[ast.Assignment | ast.Comment] = []
        while True:
            self.skip_newlines()
            if self.match(TokenType.RBRACE, TokenType.EOF):
                break
            if self.match(*COMMENT_TOKENS):
                fields.append(self.parse_comment())
                continue
            if self.match(TokenType.ANNOTATION):
                fields.append(self.annotation_as_comment())
                self.skip_separators()
                continue

            field = self.parse_characteristic()
            if field is not None:
                fields.append(field)
            self.skip_separators()

        self.expect(TokenType.RBRACE, "'}'")
        return ast.CharacteristicsBlock(fields=fields, position=start.position)

    def parse_characteristic(self) -> ast.Assignment | None:
        name_token = self.current_token()
        name = self.consume_identifier()
        self.expect(TokenType.ASSIGN, "'='")

        value_token = self.current_token()
        if value_token.type == TokenType.STRING:
            self.advance()
            if self.match(TokenType.LBRACE):
                self.skip_balanced_braces()
            value: ast.Expression = ast.StringExpr(
                value=str(value_token.value), position=value_token.position
            )
        elif value_token.type == TokenType.LBRACE:
            self.skip_balanced_braces()
            value = ast.StringExpr(value="complex_object", position=value_token.position)
        else:
            try:
                value = self.parse_expression()
            except ParseError:
                logger.debug(
                    "Skipping unparseable characteristic %r at %s", name, name_token.position
                )
                while not self.match(TokenType.SEMICOLON, TokenType.RBRACE, TokenType.EOF):
                    self.advance()
                return None

        return ast.Assignment(name=name, value=value, position=name_token.position)

    def parse_metadata_block(self) -> ast.MetadataBlock:
        """
        Parse a metadata block.

        Grammar:
            METADATA LBRACE ((name ASSIGN expression | COMMENT) SEMICOLON?)* RBRACE
        """
        start = self.expect(TokenType.METADATA)
        self.expect(TokenType.LBRACE, "'{'")

        fields: list[ast.Assignment | ast.Comment] = []
        while True:
            self.skip_newlines()
            if self.match(TokenType.RBRACE, TokenType.EOF):
                break
            if self.match(*COMMENT_TOKENS):
                fields.append(self.parse_comment())
                continue
            if self.match(TokenType.ANNOTATION):
                fields.append(self.annotation_as_comment())
                self.skip_separators()
                continue

            name_token = self.current_token()
            name = self.consume_identifier()
            self.expect(TokenType.ASSIGN, "'='")
            fields.append(
                ast.Assignment(
                    name=name, value=self.parse_expression(), position=name_token.position
                )
            )
            self.skip_separators()

        self.expect(TokenType.RBRACE, "'}'")
        return ast.MetadataBlock(fields=fields, position=start.position)
