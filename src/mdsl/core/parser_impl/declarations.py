"""
Declaration parser mixin for MDSL.

Parses imports, variables, units and vocabularies.

DSL Syntax:

    IMPORT "shared/units.mdsl";
    LET default_language = "de";

    UNIT MediaOutlet {
        id_mo: ID PRIMARY KEY,
        title: TEXT(120),
        sector: CATEGORY("Daily", "Weekly"),
        is_digital: BOOLEAN,
    }

    VOCABULARY MediaTypes {
        TYPES {
            1: "Print",
            "online": "Online",
        }
    }

    SECTOR {
        1: "Daily newspaper",
    }
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .. import ast
from ..lexer import TokenType


class DeclarationParserMixin:
    """Parser mixin for import, let, unit and vocabulary statements."""

    if TYPE_CHECKING:
        expect: Any
        advance: Any
        accept: Any
        match: Any
        peek_token: Any
        current_token: Any
        skip_trivia: Any
        skip_annotation: Any
        consume_identifier: Any
        consume_string: Any
        error: Any
        parse_expression: Any

    def parse_import(self) -> ast.ImportStatement:
        """
        Parse an import statement.

        Grammar:
            IMPORT STRING SEMICOLON?
        """
        start = self.expect(TokenType.IMPORT)
        path = self.consume_string("string literal after 'import'")
        self.accept(TokenType.SEMICOLON)
        return ast.ImportStatement(path=path, position=start.position)

    def parse_let(self) -> ast.VariableDeclaration:
        """
        Parse a variable declaration.

        Grammar:
            LET name ASSIGN expression SEMICOLON?
        """
        start = self.expect(TokenType.LET)
        name = self.consume_identifier()
        self.expect(TokenType.ASSIGN, "'='")
        value = self.parse_expression()
        self.accept(TokenType.SEMICOLON)
        return ast.VariableDeclaration(name=name, value=value, position=start.position)

    # =========================================================================
    # Units
    # =========================================================================

    def parse_unit(self) -> ast.UnitDeclaration:
        """
        Parse a unit (table) declaration.

        Grammar:
            UNIT name LBRACE (field COMMA*)* RBRACE
            field := name COLON field_type (PRIMARY KEY)?
        """
        start = self.expect(TokenType.UNIT)
        name = self.consume_identifier()
        self.expect(TokenType.LBRACE, "'{'")

        fields: list[ast.FieldDeclaration] = []
        while True:
            self.skip_trivia()
            if self.match(TokenType.RBRACE, TokenType.EOF):
                break
            if self.match(TokenType.ANNOTATION):
                self.skip_annotation()
                continue
            fields.append(self.parse_field())
            while self.accept(TokenType.COMMA):
                self.skip_trivia()

        self.expect(TokenType.RBRACE, "'}'")
        return ast.UnitDeclaration(name=name, fields=fields, position=start.position)

    def parse_field(self) -> ast.FieldDeclaration:
        name_token = self.current_token()
        name = self.consume_identifier()
        self.expect(TokenType.COLON, "':'")
        field_type = self.parse_field_type()

        is_primary_key = False
        if self.match(TokenType.PRIMARY) and self.peek_token().type == TokenType.KEY:
            self.advance()
            self.advance()
            is_primary_key = True

        return ast.FieldDeclaration(
            name=name,
            field_type=field_type,
            is_primary_key=is_primary_key,
            position=name_token.position,
        )

    def parse_field_type(self) -> ast.FieldType:
        """
        Parse a field type.

        Grammar:
            ID | TEXT (LPAREN NUMBER RPAREN)? | NUMBER | BOOLEAN
            | CATEGORY LPAREN STRING (COMMA STRING)* RPAREN
        """
        token = self.current_token()

        if self.accept(TokenType.ID):
            return ast.FieldType(kind=ast.FieldTypeKind.ID, position=token.position)

        if self.accept(TokenType.TEXT):
            length = None
            if self.accept(TokenType.LPAREN):
                length = int(self.expect(TokenType.NUMBER, "text length").value)
                self.expect(TokenType.RPAREN, "')'")
            return ast.FieldType(
                kind=ast.FieldTypeKind.TEXT, length=length, position=token.position
            )

        if self.accept(TokenType.NUMBER_TYPE):
            return ast.FieldType(kind=ast.FieldTypeKind.NUMBER, position=token.position)

        if self.accept(TokenType.BOOLEAN_TYPE):
            return ast.FieldType(kind=ast.FieldTypeKind.BOOLEAN, position=token.position)

        if self.accept(TokenType.CATEGORY):
            self.expect(TokenType.LPAREN, "'('")
            values: list[str] = []
            while True:
                self.skip_trivia()
                if self.match(TokenType.RPAREN, TokenType.EOF):
                    break
                values.append(self.consume_string("category value"))
                self.skip_trivia()
                if not self.accept(TokenType.COMMA):
                    break
            self.skip_trivia()
            self.expect(TokenType.RPAREN, "')'")
            return ast.FieldType(
                kind=ast.FieldTypeKind.CATEGORY, values=values, position=token.position
            )

        raise self.error("field type")

    # =========================================================================
    # Vocabularies
    # =========================================================================

    def parse_vocabulary(self) -> ast.VocabularyDeclaration:
        """
        Parse a vocabulary declaration.

        Grammar:
            VOCABULARY name LBRACE (body COMMA?)* RBRACE
        """
        start = self.expect(TokenType.VOCABULARY)
        name = self.consume_identifier()
        self.expect(TokenType.LBRACE, "'{'")

        bodies: list[ast.VocabularyBody] = []
        while True:
            self.skip_trivia()
            if self.match(TokenType.RBRACE, TokenType.EOF):
                break
            if self.match(TokenType.ANNOTATION):
                self.skip_annotation()
                continue
            bodies.append(self.parse_vocabulary_body())
            self.accept(TokenType.COMMA)

        self.expect(TokenType.RBRACE, "'}'")
        return ast.VocabularyDeclaration(name=name, bodies=bodies, position=start.position)

    def parse_standalone_vocabulary(self) -> ast.VocabularyDeclaration:
        """
        Parse a bare ``NAME { entries }`` vocabulary.

        Produces one body carrying the vocabulary's own name.
        """
        body = self.parse_vocabulary_body()
        return ast.VocabularyDeclaration(name=body.name, bodies=[body], position=body.position)

    def parse_vocabulary_body(self) -> ast.VocabularyBody:
        """
        Parse a vocabulary body.

        Grammar:
            name LBRACE ((NUMBER | STRING) COLON STRING COMMA?)* RBRACE
        """
        start = self.current_token()
        name = self.consume_identifier()
        self.expect(TokenType.LBRACE, "'{'")

        entries: list[ast.VocabularyEntry] = []
        while True:
            self.skip_trivia()
            if self.match(TokenType.RBRACE, TokenType.EOF):
                break
            if self.match(TokenType.ANNOTATION):
                self.skip_annotation()
                continue

            key_token = self.current_token()
            if key_token.type == TokenType.NUMBER:
                key: float | str = float(key_token.value)
            elif key_token.type == TokenType.STRING:
                key = str(key_token.value)
            else:
                raise self.error("number or string key")
            self.advance()

            self.expect(TokenType.COLON, "':'")
            value = self.consume_string("vocabulary value")
            entries.append(
                ast.VocabularyEntry(key=key, value=value, position=key_token.position)
            )
            self.accept(TokenType.COMMA)

        self.expect(TokenType.RBRACE, "'}'")
        return ast.VocabularyBody(name=name, entries=entries, position=start.position)
