"""
Expression parser mixin for MDSL.

Parses values on the right-hand side of assignments, object literals and
dates.

DSL Syntax:

    title = "Kronen Zeitung";
    circulation = 500000;
    verified = true;
    language = $default_language;
    historical = { title = "Krone"; period = "1950-01-01" TO "1959-12-31"; };
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .. import ast
from ..lexer import TokenType


class ExpressionParserMixin:
    """Parser mixin for expressions and dates."""

    if TYPE_CHECKING:
        expect: Any
        advance: Any
        accept: Any
        match: Any
        peek_token: Any
        current_token: Any
        skip_trivia: Any
        skip_separators: Any
        consume_identifier: Any
        error: Any

    def parse_expression(self) -> ast.Expression:
        """
        Parse an expression.

        Grammar:
            DOLLAR IDENTIFIER | STRING | NUMBER | BOOLEAN | object_literal
        """
        token = self.current_token()

        if token.type == TokenType.DOLLAR:
            self.advance()
            return ast.VariableExpr(name=self.consume_identifier(), position=token.position)
        if token.type == TokenType.STRING:
            self.advance()
            return ast.StringExpr(value=str(token.value), position=token.position)
        if token.type == TokenType.NUMBER:
            self.advance()
            return ast.NumberExpr(value=float(token.value), position=token.position)
        if token.type == TokenType.BOOLEAN:
            self.advance()
            return ast.BooleanExpr(value=bool(token.value), position=token.position)
        if token.type == TokenType.LBRACE:
            return self.parse_object_literal()

        raise self.error("expression")

    def parse_object_literal(self) -> ast.ObjectExpr:
        """
        Parse an object literal.

        Grammar:
            LBRACE (name ASSIGN (STRING TO date | expression) (SEMICOLON | COMMA)*)* RBRACE

        A string followed by ``TO`` makes the field a period.
        """
        start = self.expect(TokenType.LBRACE, "'{'")
        fields: list[ast.ObjectAssignment | ast.ObjectPeriod] = []

        while True:
            self.skip_trivia()
            if self.match(TokenType.RBRACE, TokenType.EOF):
                break

            name_token = self.current_token()
            name = self.consume_identifier()
            self.expect(TokenType.ASSIGN, "'='")

            if self.match(TokenType.STRING) and self.peek_token().type == TokenType.TO:
                from_token = self.advance()
                self.advance()  # TO
                period = ast.DateRange(
                    start=ast.DateExpr(value=str(from_token.value), position=from_token.position),
                    end=self.parse_date(),
                    position=from_token.position,
                )
                fields.append(
                    ast.ObjectPeriod(name=name, value=period, position=name_token.position)
                )
            else:
                fields.append(
                    ast.ObjectAssignment(
                        name=name, value=self.parse_expression(), position=name_token.position
                    )
                )

            self.skip_separators()

        self.expect(TokenType.RBRACE, "'}'")
        return ast.ObjectExpr(fields=fields, position=start.position)

    def parse_date(self) -> ast.DateExpr:
        """
        Parse a date.

        Grammar:
            STRING | CURRENT
        """
        token = self.current_token()
        if token.type == TokenType.CURRENT:
            self.advance()
            return ast.DateExpr.current(token.position)
        if token.type == TokenType.STRING:
            self.advance()
            return ast.DateExpr(value=str(token.value), position=token.position)
        raise self.error("date string or CURRENT")

    def parse_date_range(self) -> ast.DateRange:
        """Parse ``D [TO D]``."""
        start = self.parse_date()
        end = self.parse_date() if self.accept(TokenType.TO) else None
        return ast.DateRange(start=start, end=end, position=start.position)
