"""
Family, template and outlet parser mixin for MDSL.

DSL Syntax:

    TEMPLATE OUTLET "AustrianNewspaper" {
        characteristics { language = "de"; };
    };

    FAMILY "Kronen Zeitung Family" {
        @comment "Austria's largest daily";
        OUTLET "Kronen Zeitung" EXTENDS TEMPLATE "AustrianNewspaper" {
            identity { id = 200001; title = "Kronen Zeitung"; };
        };
        OUTLET "Krone Bunt" BASED_ON 200001 { ... };
        OUTLET_REF 300001 ["Heute"];
    };

``GROUP "name" { ... }`` is accepted wherever ``FAMILY`` is.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .. import ast
from ..lexer import TokenType
from .base import COMMENT_TOKENS


class OutletParserMixin:
    """Parser mixin for family, template, outlet and outlet reference declarations."""

    if TYPE_CHECKING:
        expect: Any
        advance: Any
        accept: Any
        match: Any
        peek_token: Any
        current_token: Any
        skip_newlines: Any
        skip_trivia: Any
        skip_balanced_braces: Any
        consume_string: Any
        consume_number: Any
        parse_comment: Any
        annotation_as_comment: Any
        error: Any
        parse_outlet_block: Any
        parse_data: Any
        parse_diachronic_link: Any
        parse_synchronous_link: Any

    def parse_family(self) -> ast.FamilyDeclaration:
        """
        Parse a family declaration.

        Grammar:
            (FAMILY | "group") STRING LBRACE (member SEMICOLON?)* RBRACE
        """
        start = self.advance()  # FAMILY or GROUP
        name = self.consume_string("family name")
        self.expect(TokenType.LBRACE, "'{'")

        members: list[ast.FamilyMember] = []
        while True:
            self.skip_members_trivia()
            if self.match(TokenType.RBRACE, TokenType.EOF):
                break
            members.append(self.parse_family_member())

        self.expect(TokenType.RBRACE, "'}'")
        return ast.FamilyDeclaration(name=name, members=members, position=start.position)

    def skip_members_trivia(self) -> None:
        while self.match(TokenType.NEWLINE, TokenType.SEMICOLON):
            self.advance()

    def parse_family_member(self) -> ast.FamilyMember:
        token = self.current_token()

        if token.type == TokenType.OUTLET:
            return self.parse_outlet()
        if token.type == TokenType.OUTLET_REF:
            return self.parse_outlet_reference()
        if token.type == TokenType.DATA:
            return self.parse_data()
        if token.type == TokenType.DIACHRONIC_LINK:
            return self.parse_diachronic_link()
        if token.type in (TokenType.SYNCHRONOUS_LINK, TokenType.SYNCHRONOUS_LINKS):
            return self.parse_synchronous_link()
        if token.type in COMMENT_TOKENS:
            return self.parse_comment()
        if token.type == TokenType.ANNOTATION:
            return self.annotation_as_comment()

        raise self.error("family member")

    # =========================================================================
    # Templates and outlets
    # =========================================================================

    def parse_template(self) -> ast.TemplateDeclaration:
        """
        Parse a template declaration.

        Grammar:
            TEMPLATE keyword? STRING LBRACE (block SEMICOLON?)* RBRACE
        """
        start = self.expect(TokenType.TEMPLATE)
        template_type = "OUTLET"
        if self.current_token().is_keyword:
            template_type = self.advance().type.value.upper()

        name = self.consume_string("template name")
        blocks = self.parse_outlet_body()
        return ast.TemplateDeclaration(
            name=name, template_type=template_type, blocks=blocks, position=start.position
        )

    def parse_outlet(self) -> ast.OutletDeclaration:
        """
        Parse an outlet declaration.

        Grammar:
            OUTLET STRING (EXTENDS TEMPLATE STRING | BASED_ON NUMBER)?
                LBRACE (block SEMICOLON?)* RBRACE
        """
        start = self.expect(TokenType.OUTLET)
        name = self.consume_string("outlet name")

        inheritance: ast.Inheritance | None = None
        token = self.current_token()
        if self.accept(TokenType.EXTENDS):
            self.expect(TokenType.TEMPLATE, "'template'")
            inheritance = ast.ExtendsTemplate(
                template=self.consume_string("template name"), position=token.position
            )
        elif self.accept(TokenType.BASED_ON):
            inheritance = ast.BasedOn(
                outlet_id=self.consume_number("outlet id"), position=token.position
            )

        blocks = self.parse_outlet_body()
        return ast.OutletDeclaration(
            name=name, inheritance=inheritance, blocks=blocks, position=start.position
        )

    def parse_outlet_body(self) -> list[ast.OutletBlock]:
        self.expect(TokenType.LBRACE, "'{'")
        blocks: list[ast.OutletBlock] = []
        while True:
            self.skip_members_trivia()
            if self.match(TokenType.RBRACE, TokenType.EOF):
                break
            blocks.append(self.parse_outlet_block())
        self.expect(TokenType.RBRACE, "'}'")
        return blocks

    def parse_outlet_reference(self) -> ast.OutletReference:
        """
        Parse an outlet reference.

        Grammar:
            OUTLET_REF NUMBER (LBRACKET STRING RBRACKET | STRING) object_body?

        The optional body is skipped.
        """
        start = self.expect(TokenType.OUTLET_REF)
        outlet_id = self.consume_number("outlet id")

        if self.accept(TokenType.LBRACKET):
            name = self.consume_string("outlet name")
            self.expect(TokenType.RBRACKET, "']'")
        else:
            name = self.consume_string("outlet name")

        self.skip_newlines()
        if self.match(TokenType.LBRACE):
            self.skip_balanced_braces()

        return ast.OutletReference(outlet_id=outlet_id, name=name, position=start.position)
