"""
Event and catalog parser mixin for MDSL.

DSL Syntax:

    EVENT krone_merger {
        type = "merger";
        date = "1971-06-01";
        status = "completed";
        entities = {
            krone = { id = 200001; role = "acquirer"; stake_before = 50; stake_after = 100; };
        };
        impact = { circulation_change = 15000; };
        metadata = { verified = true; };
    };

    CATALOG sources {
        SOURCE "Media Analyse" {
            url = "https://www.media-analyse.at";
            config { type_code = 1; };
        };
    };
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .. import ast
from ..lexer import TokenType
from ..position import SourcePosition
from .base import COMMENT_TOKENS

ENTITY_FIELDS = frozenset({"id", "role", "stake_before", "stake_after"})


class EventParserMixin:
    """Parser mixin for EVENT and CATALOG declarations."""

    if TYPE_CHECKING:
        expect: Any
        advance: Any
        accept: Any
        match: Any
        current_token: Any
        skip_newlines: Any
        skip_trivia: Any
        skip_separators: Any
        consume_identifier: Any
        consume_string: Any
        consume_number: Any
        parse_comment: Any
        parse_annotation: Any
        annotation_as_comment: Any
        consume_field_name: Any
        error: Any
        parse_expression: Any
        parse_date: Any

    def parse_event(self) -> ast.EventDeclaration:
        """
        Parse an event declaration.

        Grammar:
            EVENT name LBRACE
                ((event_field ASSIGN value | ANNOTATION ... | COMMENT) SEMICOLON?)*
            RBRACE SEMICOLON?
            event_field := type | date | status | entities | impact | metadata
        """
        start = self.expect(TokenType.EVENT)
        name = self.consume_identifier()
        self.expect(TokenType.LBRACE, "'{'")

        values: dict[str, Any] = {}
        annotations: list[ast.Annotation] = []
        comments: list[ast.Comment] = []
        while True:
            self.skip_newlines()
            if self.match(TokenType.RBRACE, TokenType.EOF):
                break
            if self.match(*COMMENT_TOKENS):
                comments.append(self.parse_comment())
                continue
            if self.match(TokenType.ANNOTATION):
                annotations.append(self.parse_annotation())
                self.skip_separators()
                continue

            field = self.consume_field_name(
                frozenset({"type", "date", "status", "entities", "impact", "metadata"}), "event"
            )
            if field == "type":
                values["event_type"] = self.consume_string("event type")
            elif field == "date":
                values["date"] = self.parse_date()
            elif field == "status":
                values["status"] = self.consume_string("event status")
            elif field == "entities":
                values["entities"] = self.parse_event_entities()
            else:
                values[field] = self.parse_assignment_body()
            self.skip_separators()

        self.expect(TokenType.RBRACE, "'}'")
        self.accept(TokenType.SEMICOLON)
        return ast.EventDeclaration(
            name=name,
            annotations=annotations,
            comments=comments,
            position=start.position,
            **values,
        )

    def parse_event_entities(self) -> list[ast.EventEntity]:
        """
        Parse the entities of an event.

        Grammar:
            LBRACE (name ASSIGN LBRACE (entity_field ASSIGN value SEMICOLON?)* RBRACE SEMICOLON?)*
            RBRACE
        """
        self.expect(TokenType.LBRACE, "'{'")
        entities: list[ast.EventEntity] = []
        while True:
            self.skip_trivia()
            if self.match(TokenType.RBRACE, TokenType.EOF):
                break

            name_token = self.current_token()
            name = self.consume_identifier()
            self.expect(TokenType.ASSIGN, "'='")
            self.expect(TokenType.LBRACE, "'{'")

            values: dict[str, Any] = {}
            while True:
                self.skip_trivia()
                if self.match(TokenType.RBRACE, TokenType.EOF):
                    break
                field = self.consume_field_name(ENTITY_FIELDS, "entity")
                if field == "role":
                    values["role"] = self.consume_string("role")
                elif field == "id":
                    values["outlet_id"] = self.consume_number("outlet id")
                else:
                    values[field] = self.consume_number("stake")
                self.skip_separators()

            self.expect(TokenType.RBRACE, "'}'")
            entities.append(ast.EventEntity(name=name, position=name_token.position, **values))
            self.skip_separators()

        self.expect(TokenType.RBRACE, "'}'")
        return entities

    def parse_assignment_body(self) -> list[ast.Assignment]:
        """
        Parse ``{ name = expr; ... }`` into assignments.

        Grammar:
            LBRACE (name ASSIGN expression (SEMICOLON | COMMA)*)* RBRACE
        """
        self.expect(TokenType.LBRACE, "'{'")
        assignments: list[ast.Assignment] = []
        while True:
            self.skip_trivia()
            if self.match(TokenType.RBRACE, TokenType.EOF):
                break
            name_token = self.current_token()
            name = self.consume_identifier()
            self.expect(TokenType.ASSIGN, "'='")
            assignments.append(
                ast.Assignment(
                    name=name, value=self.parse_expression(), position=name_token.position
                )
            )
            self.skip_separators()
        self.expect(TokenType.RBRACE, "'}'")
        return assignments

    # =========================================================================
    # Catalogs
    # =========================================================================

    def parse_catalog(self) -> ast.CatalogDeclaration:
        """
        Parse a catalog declaration.

        Grammar:
            CATALOG name LBRACE (SOURCE source SEMICOLON?)* RBRACE SEMICOLON?
        """
        start = self.expect(TokenType.CATALOG)
        name = self.consume_identifier()
        self.expect(TokenType.LBRACE, "'{'")

        sources: list[ast.SourceDeclaration] = []
        while True:
            self.skip_trivia()
            if self.match(TokenType.RBRACE, TokenType.EOF):
                break
            if not self.match(TokenType.SOURCE):
                raise self.error("'source' declaration")
            sources.append(self.parse_source())
            self.skip_separators()

        self.expect(TokenType.RBRACE, "'}'")
        self.accept(TokenType.SEMICOLON)
        return ast.CatalogDeclaration(name=name, sources=sources, position=start.position)

    def parse_source(self) -> ast.SourceDeclaration:
        """
        Parse a catalog source.

        Grammar:
            SOURCE STRING LBRACE
                ((name ASSIGN expression | name LBRACE assignment* RBRACE
                  | ANNOTATION ... | COMMENT) SEMICOLON?)*
            RBRACE
        """
        start = self.expect(TokenType.SOURCE)
        name = self.consume_string("source name")
        self.expect(TokenType.LBRACE, "'{'")

        fields: list[ast.Assignment | ast.NestedAssignment | ast.Annotation | ast.Comment] = []
        while True:
            self.skip_newlines()
            if self.match(TokenType.RBRACE, TokenType.EOF):
                break
            if self.match(*COMMENT_TOKENS):
                fields.append(self.parse_comment())
                continue
            if self.match(TokenType.ANNOTATION):
                fields.append(self.parse_annotation())
            else:
                name_token = self.current_token()
                field_name = self.consume_identifier()
                if self.match(TokenType.LBRACE):
                    fields.append(self.parse_nested_assignment(field_name, name_token.position))
                else:
                    self.expect(TokenType.ASSIGN, "'=' or '{'")
                    fields.append(
                        ast.Assignment(
                            name=field_name,
                            value=self.parse_expression(),
                            position=name_token.position,
                        )
                    )
            self.skip_separators()

        self.expect(TokenType.RBRACE, "'}'")
        return ast.SourceDeclaration(name=name, fields=fields, position=start.position)

    def parse_nested_assignment(
        self, name: str, position: SourcePosition
    ) -> ast.NestedAssignment:
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
            field_name = self.consume_identifier()
            self.expect(TokenType.ASSIGN, "'='")
            fields.append(
                ast.Assignment(
                    name=field_name, value=self.parse_expression(), position=name_token.position
                )
            )
            self.skip_separators()
        self.expect(TokenType.RBRACE, "'}'")
        return ast.NestedAssignment(name=name, fields=fields, position=position)
