"""
Relationship parser mixin for MDSL.

DSL Syntax:

    DIACHRONIC_LINK succession_1971 {
        predecessor = 200001;
        successor = 200002;
        event_date = "1971-01-01" TO "1971-12-31";
        relationship_type = "succession";
        triggered_by_event = krone_merger;
        @maps_to "11_succession";
        @comment "Title change";
    };

    SYNCHRONOUS_LINK umbrella {
        outlet_1 = { id = 200001; role = "main"; };
        outlet_2 = { id = 200003; role = "sub"; };
        relationship_type = "umbrella";
        period_start = "1990-01-01";
        period_end = CURRENT;
        details = "Shared editorial office";
    };
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .. import ast
from ..lexer import TokenType
from .base import COMMENT_TOKENS

DIACHRONIC_FIELDS = frozenset(
    {"predecessor", "successor", "relationship_type", "event_date", "triggered_by_event"}
)

SYNCHRONOUS_FIELDS = frozenset(
    {
        "outlet_1",
        "outlet_2",
        "relationship_type",
        "period_start",
        "period_end",
        "period",
        "details",
        "created_by_event",
    }
)


class RelationshipParserMixin:
    """Parser mixin for diachronic and synchronous links."""

    if TYPE_CHECKING:
        expect: Any
        advance: Any
        accept: Any
        match: Any
        current_token: Any
        skip_newlines: Any
        skip_separators: Any
        consume_identifier: Any
        consume_string: Any
        consume_number: Any
        parse_comment: Any
        parse_annotation: Any
        skip_annotation: Any
        error: Any
        parse_date: Any
        parse_date_range: Any

    def parse_link_name(self) -> str:
        if self.match(TokenType.STRING):
            return str(self.advance().value)
        return self.consume_identifier()

    def parse_diachronic_link(self) -> ast.DiachronicLink:
        """
        Parse a diachronic link.

        Grammar:
            DIACHRONIC_LINK (STRING | name) LBRACE
                ((field ASSIGN value | ANNOTATION ... | COMMENT) (SEMICOLON | COMMA)*)*
            RBRACE SEMICOLON?
        """
        start = self.expect(TokenType.DIACHRONIC_LINK)
        name = self.parse_link_name()
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

            field = self.consume_field_name(DIACHRONIC_FIELDS, "diachronic")
            if field in ("predecessor", "successor"):
                values[field] = self.consume_number("outlet id")
            elif field == "relationship_type":
                values[field] = self.consume_string("relationship type")
            elif field == "event_date":
                values[field] = self.parse_date_range()
            else:
                values[field] = self.consume_identifier()
            self.skip_separators()

        self.expect(TokenType.RBRACE, "'}'")
        self.accept(TokenType.SEMICOLON)
        return ast.DiachronicLink(
            name=name,
            annotations=annotations,
            comments=comments,
            position=start.position,
            **values,
        )

    def parse_synchronous_link(self) -> ast.SynchronousLink:
        """
        Parse a synchronous link.

        Grammar:
            (SYNCHRONOUS_LINK | SYNCHRONOUS_LINKS) (STRING | name) LBRACE
                ((field ASSIGN value | ANNOTATION ... | COMMENT) (SEMICOLON | COMMA)*)*
            RBRACE SEMICOLON?
        """
        start = self.advance()  # SYNCHRONOUS_LINK or SYNCHRONOUS_LINKS
        name = self.parse_link_name()
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

            field = self.consume_field_name(SYNCHRONOUS_FIELDS, "synchronous")
            if field in ("outlet_1", "outlet_2"):
                values[field] = self.parse_outlet_spec()
            elif field in ("relationship_type", "details"):
                values[field] = self.consume_string(field.replace("_", " "))
            elif field in ("period_start", "period_end"):
                values[field] = self.parse_date()
            elif field == "period":
                period = self.parse_date_range()
                values["period_start"] = period.start
                values["period_end"] = period.end
            else:
                values[field] = self.consume_identifier()
            self.skip_separators()

        self.expect(TokenType.RBRACE, "'}'")
        self.accept(TokenType.SEMICOLON)
        return ast.SynchronousLink(
            name=name,
            annotations=annotations,
            comments=comments,
            position=start.position,
            **values,
        )

    def parse_outlet_spec(self) -> ast.OutletSpec:
        """
        Parse one side of a synchronous link.

        Grammar:
            LBRACE ((ID ASSIGN NUMBER | "role" ASSIGN STRING) (SEMICOLON | COMMA)*)* RBRACE
        """
        start = self.expect(TokenType.LBRACE, "'{'")
        outlet_id = 0.0
        role = None
        while True:
            self.skip_newlines()
            if self.match(TokenType.RBRACE, TokenType.EOF):
                break
            if self.match(*COMMENT_TOKENS):
                self.advance()
                continue
            if self.match(TokenType.ANNOTATION):
                self.skip_annotation()
                continue

            field = self.consume_field_name(frozenset({"id", "role"}), "outlet")
            if field == "id":
                outlet_id = self.consume_number("outlet id")
            else:
                role = self.consume_string("role")
            self.skip_separators()

        self.expect(TokenType.RBRACE, "'}'")
        return ast.OutletSpec(outlet_id=outlet_id, role=role, position=start.position)
