"""
Market data parser mixin for MDSL.

DSL Syntax:

    DATA FOR 200001 {
        @maps_to "MarketData";
        AGGREGATION = { circulation = "national"; reach = "verified"; };
        YEAR 2023 {
            METRICS {
                circulation = { value = 500000; unit = "copies"; source = "official"; };
                reach_national = { value = 15.5; unit = "percent"; source = "survey"; };
            };
            comment = "Annual data";
        };
    };
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .. import ast
from ..lexer import TokenType
from .base import COMMENT_TOKENS


class DataParserMixin:
    """Parser mixin for DATA FOR blocks."""

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
        annotation_as_comment: Any
        skip_annotation: Any
        error: Any
        parse_expression: Any

    def parse_data(self) -> ast.DataDeclaration:
        """
        Parse a market data declaration.

        Grammar:
            DATA FOR NUMBER LBRACE (data_block (SEMICOLON | COMMA)*)* RBRACE
            data_block := ANNOTATION ... | COMMENT | aggregation | year
        """
        start = self.expect(TokenType.DATA)
        self.expect(TokenType.FOR, "'for'")
        target_id = self.consume_number("outlet id")
        self.expect(TokenType.LBRACE, "'{'")

        blocks: list[
            ast.Annotation | ast.AggregationDeclaration | ast.YearDeclaration | ast.Comment
        ] = []
        while True:
            self.skip_newlines()
            if self.match(TokenType.RBRACE, TokenType.EOF):
                break

            token = self.current_token()
            if token.type in COMMENT_TOKENS:
                blocks.append(self.parse_comment())
                continue
            if token.type == TokenType.ANNOTATION:
                blocks.append(self.parse_annotation())
            elif token.type == TokenType.AGGREGATION:
                blocks.append(self.parse_aggregation())
            elif token.type == TokenType.YEAR:
                blocks.append(self.parse_year())
            else:
                raise self.error("data block")
            self.skip_separators()

        self.expect(TokenType.RBRACE, "'}'")
        return ast.DataDeclaration(target_id=target_id, blocks=blocks, position=start.position)

    def parse_aggregation(self) -> ast.AggregationDeclaration:
        """
        Parse an aggregation block.

        Grammar:
            AGGREGATION ASSIGN? LBRACE (name ASSIGN value (SEMICOLON | COMMA)*)* RBRACE
        """
        start = self.expect(TokenType.AGGREGATION)
        self.accept(TokenType.ASSIGN)
        self.expect(TokenType.LBRACE, "'{'")

        fields: list[ast.AggregationField] = []
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

            name_token = self.current_token()
            name = self.consume_identifier()
            self.expect(TokenType.ASSIGN, "'='")
            value = _expression_text(self.parse_expression())
            fields.append(
                ast.AggregationField(name=name, value=value, position=name_token.position)
            )
            self.skip_separators()

        self.expect(TokenType.RBRACE, "'}'")
        return ast.AggregationDeclaration(fields=fields, position=start.position)

    def parse_year(self) -> ast.YearDeclaration:
        """
        Parse a year block.

        Grammar:
            YEAR NUMBER LBRACE (year_entry SEMICOLON?)* RBRACE
            year_entry := metrics | "comment" ASSIGN STRING | COMMENT | ANNOTATION ...
        """
        start = self.expect(TokenType.YEAR)
        year = self.consume_number("year")
        self.expect(TokenType.LBRACE, "'{'")

        blocks: list[ast.MetricsBlock | ast.YearComment | ast.Comment] = []
        while True:
            self.skip_newlines()
            if self.match(TokenType.RBRACE, TokenType.EOF):
                break

            token = self.current_token()
            if token.type in COMMENT_TOKENS:
                blocks.append(self.parse_comment())
                continue
            if token.type == TokenType.ANNOTATION:
                blocks.append(self.annotation_as_comment())
                self.skip_separators()
                continue
            if token.type == TokenType.METRICS:
                blocks.append(self.parse_metrics())
            elif token.type == TokenType.IDENTIFIER and token.text.lower() == "comment":
                self.advance()
                self.expect(TokenType.ASSIGN, "'='")
                blocks.append(
                    ast.YearComment(
                        value=self.consume_string("year comment"), position=token.position
                    )
                )
            else:
                raise self.error("'metrics' or 'comment'")
            self.skip_separators()

        self.expect(TokenType.RBRACE, "'}'")
        return ast.YearDeclaration(year=year, blocks=blocks, position=start.position)

    def parse_metrics(self) -> ast.MetricsBlock:
        """
        Parse a metrics block.

        Grammar:
            METRICS LBRACE (name ASSIGN LBRACE (name ASSIGN expression (SEMICOLON | COMMA)*)* RBRACE
                (SEMICOLON | COMMA)*)* RBRACE
        """
        start = self.expect(TokenType.METRICS)
        self.expect(TokenType.LBRACE, "'{'")

        fields: list[ast.MetricField] = []
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
            fields.append(self.parse_metric())
            self.skip_separators()

        self.expect(TokenType.RBRACE, "'}'")
        return ast.MetricsBlock(fields=fields, position=start.position)

    def parse_metric(self) -> ast.MetricField:
        name_token = self.current_token()
        name = self.consume_identifier()
        self.expect(TokenType.ASSIGN, "'='")
        self.expect(TokenType.LBRACE, "'{'")

        attributes: list[ast.Assignment] = []
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

            attr_token = self.current_token()
            attr_name = self.consume_identifier()
            self.expect(TokenType.ASSIGN, "'='")
            attributes.append(
                ast.Assignment(
                    name=attr_name, value=self.parse_expression(), position=attr_token.position
                )
            )
            self.skip_separators()

        self.expect(TokenType.RBRACE, "'}'")
        return ast.MetricField(name=name, attributes=attributes, position=name_token.position)


def _expression_text(expr: ast.Expression) -> str:
    """Plain text of a scalar aggregation value."""
    if isinstance(expr, ast.StringExpr):
        return expr.value
    if isinstance(expr, ast.NumberExpr):
        return f"{expr.value:g}"
    if isinstance(expr, ast.BooleanExpr):
        return "true" if expr.value else "false"
    if isinstance(expr, ast.VariableExpr):
        return f"${expr.name}"
    return "complex_object"
