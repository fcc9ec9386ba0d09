"""
Lexer/Tokenizer for the MediaLanguage DSL (MDSL).

Converts raw DSL text into a stream of tokens with source position tracking.
Newlines are kept as tokens so the parser can treat them as optional
statement separators; comments and annotations are kept so they can be
recorded in the AST.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .errors import (
    make_invalid_escape,
    make_invalid_number,
    make_unexpected_character,
    make_unterminated_string,
)
from .position import SourcePosition

logger = logging.getLogger(__name__)


class TokenType(Enum):
    """Token types in the MDSL language."""

    # Literals
    IDENTIFIER = "IDENTIFIER"
    STRING = "STRING"
    NUMBER = "NUMBER"
    BOOLEAN = "BOOLEAN"

    # Declarations
    IMPORT = "import"
    LET = "let"
    UNIT = "unit"
    VOCABULARY = "vocabulary"
    FAMILY = "family"
    OUTLET = "outlet"
    TEMPLATE = "template"
    EXTENDS = "extends"
    BASED_ON = "based_on"
    OUTLET_REF = "outlet_ref"
    CATALOG = "catalog"
    SOURCE = "source"

    # Field types
    ID = "id"
    TEXT = "text"
    NUMBER_TYPE = "number"
    BOOLEAN_TYPE = "boolean"
    CATEGORY = "category"
    PRIMARY = "primary"
    KEY = "key"

    # Lifecycle
    STATUS = "status"
    FROM = "from"
    TO = "to"
    CURRENT = "current"

    # Blocks
    IDENTITY = "identity"
    LIFECYCLE = "lifecycle"
    CHARACTERISTICS = "characteristics"
    METADATA = "metadata"
    METRICS = "metrics"
    AGGREGATION = "aggregation"

    # Market data
    DATA = "data"
    FOR = "for"
    YEAR = "year"

    # Events
    EVENT = "event"
    TYPE = "type"
    DATE = "date"
    ENTITIES = "entities"
    IMPACT = "impact"
    STAKE_BEFORE = "stake_before"
    STAKE_AFTER = "stake_after"
    TRIGGERED_BY_EVENT = "triggered_by_event"
    CREATED_BY_EVENT = "created_by_event"

    # Relationships
    DIACHRONIC_LINK = "diachronic_link"
    SYNCHRONOUS_LINK = "synchronous_link"
    SYNCHRONOUS_LINKS = "synchronous_links"
    PREDECESSOR = "predecessor"
    SUCCESSOR = "successor"
    RELATIONSHIP_TYPE = "relationship_type"
    EVENT_DATE = "event_date"
    PERIOD = "period"
    DETAILS = "details"
    OUTLET_1 = "outlet_1"
    OUTLET_2 = "outlet_2"
    ROLE = "role"

    # Special values
    NOT_AVAILABLE = "n.v."
    NOT_APPLICABLE = "n.a."
    OVERRIDE = "override"
    FOR_PERIOD = "for_period"
    INHERITS_FROM = "inherits_from"
    UNTIL = "until"

    # Punctuation
    ASSIGN = "="
    SEMICOLON = ";"
    COLON = ":"
    COMMA = ","
    DOT = "."
    DOLLAR = "$"
    LBRACE = "{"
    RBRACE = "}"
    LPAREN = "("
    RPAREN = ")"
    LBRACKET = "["
    RBRACKET = "]"
    LANGLE = "<"
    RANGLE = ">"

    # Trivia
    COMMENT = "COMMENT"
    MULTILINE_COMMENT = "MULTILINE_COMMENT"
    ANNOTATION = "ANNOTATION"
    NEWLINE = "NEWLINE"
    EOF = "EOF"


# Keyword table, matched case-insensitively. true/false become BOOLEAN tokens.
KEYWORDS: dict[str, TokenType] = {
    "import": TokenType.IMPORT,
    "let": TokenType.LET,
    "unit": TokenType.UNIT,
    "vocabulary": TokenType.VOCABULARY,
    "family": TokenType.FAMILY,
    "outlet": TokenType.OUTLET,
    "template": TokenType.TEMPLATE,
    "extends": TokenType.EXTENDS,
    "based_on": TokenType.BASED_ON,
    "outlet_ref": TokenType.OUTLET_REF,
    "catalog": TokenType.CATALOG,
    "source": TokenType.SOURCE,
    "id": TokenType.ID,
    "text": TokenType.TEXT,
    "number": TokenType.NUMBER_TYPE,
    "boolean": TokenType.BOOLEAN_TYPE,
    "category": TokenType.CATEGORY,
    "primary": TokenType.PRIMARY,
    "key": TokenType.KEY,
    "status": TokenType.STATUS,
    "from": TokenType.FROM,
    "to": TokenType.TO,
    "current": TokenType.CURRENT,
    "identity": TokenType.IDENTITY,
    "lifecycle": TokenType.LIFECYCLE,
    "characteristics": TokenType.CHARACTERISTICS,
    "metadata": TokenType.METADATA,
    "metrics": TokenType.METRICS,
    "aggregation": TokenType.AGGREGATION,
    "data": TokenType.DATA,
    "for": TokenType.FOR,
    "year": TokenType.YEAR,
    "event": TokenType.EVENT,
    "type": TokenType.TYPE,
    "date": TokenType.DATE,
    "entities": TokenType.ENTITIES,
    "impact": TokenType.IMPACT,
    "stake_before": TokenType.STAKE_BEFORE,
    "stake_after": TokenType.STAKE_AFTER,
    "triggered_by_event": TokenType.TRIGGERED_BY_EVENT,
    "created_by_event": TokenType.CREATED_BY_EVENT,
    "diachronic_link": TokenType.DIACHRONIC_LINK,
    "synchronous_link": TokenType.SYNCHRONOUS_LINK,
    "synchronous_links": TokenType.SYNCHRONOUS_LINKS,
    "predecessor": TokenType.PREDECESSOR,
    "successor": TokenType.SUCCESSOR,
    "relationship_type": TokenType.RELATIONSHIP_TYPE,
    "event_date": TokenType.EVENT_DATE,
    "period": TokenType.PERIOD,
    "details": TokenType.DETAILS,
    "outlet_1": TokenType.OUTLET_1,
    "outlet_2": TokenType.OUTLET_2,
    "role": TokenType.ROLE,
    "n.v.": TokenType.NOT_AVAILABLE,
    "n.a.": TokenType.NOT_APPLICABLE,
    "override": TokenType.OVERRIDE,
    "for_period": TokenType.FOR_PERIOD,
    "inherits_from": TokenType.INHERITS_FROM,
    "until": TokenType.UNTIL,
}

BOOLEANS = {"true": True, "false": False}

SINGLE_CHAR_TOKENS = {
    "=": TokenType.ASSIGN,
    ";": TokenType.SEMICOLON,
    ":": TokenType.COLON,
    ",": TokenType.COMMA,
    ".": TokenType.DOT,
    "$": TokenType.DOLLAR,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    "<": TokenType.LANGLE,
    ">": TokenType.RANGLE,
}

@dataclass
class Token:
    """
    A single token in the DSL.

    Attributes:
        type: Type of token
        text: Source slice of the token
        position: Where the token starts
        value: Literal payload: unescaped string, float, bool, comment or
            annotation text. None for keywords and punctuation.
    """

    type: TokenType
    text: str
    position: SourcePosition
    value: str | float | bool | None = None

    @property
    def line(self) -> int:
        return self.position.line

    @property
    def column(self) -> int:
        return self.position.column

    @property
    def is_keyword(self) -> bool:
        return self.type in KEYWORD_TYPES

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.text!r}, {self.line}:{self.column})"


KEYWORD_TYPES = frozenset(KEYWORDS.values())


def _is_ident_start(ch: str) -> bool:
    return ch.isascii() and (ch.isalpha() or ch == "_")


def _is_ident_char(ch: str) -> bool:
    return ch.isascii() and (ch.isalnum() or ch in "_.")


class Lexer:
    """
    Lexer for MDSL.

    Single pass over the source, tracking line, column and UTF-8 byte offset.
    """

    def __init__(self, text: str, file: Path | None = None):
        """
        Initialize lexer.

        Args:
            text: Source text to tokenize
            file: Source file path (for error reporting)
        """
        self.text = text
        self.file = file
        self.pos = 0
        self.line = 1
        self.column = 1
        self.offset = 0
        self.tokens: list[Token] = []

    @property
    def position(self) -> SourcePosition:
        return SourcePosition(line=self.line, column=self.column, offset=self.offset)

    def current_char(self) -> str | None:
        """Get current character or None if at end."""
        if self.pos >= len(self.text):
            return None
        return self.text[self.pos]

    def peek_char(self, offset: int = 1) -> str | None:
        """Peek ahead at character."""
        pos = self.pos + offset
        if pos >= len(self.text):
            return None
        return self.text[pos]

    def advance(self) -> None:
        """Move to next character, updating line/column/offset."""
        if self.pos < len(self.text):
            ch = self.text[self.pos]
            self.offset += len(ch.encode("utf-8"))
            if ch == "\n":
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.pos += 1

    def add_token(self, type: TokenType, text: str, position: SourcePosition, value=None) -> None:
        self.tokens.append(Token(type, text, position, value))

    def read_line_comment(self, marker: str) -> None:
        """Read a ``//`` or ``#`` comment up to (not including) the newline."""
        start = self.position
        for _ in marker:
            self.advance()

        chars = []
        while self.current_char() is not None and self.current_char() != "\n":
            chars.append(self.current_char())
            self.advance()

        body = "".join(chars)
        self.add_token(TokenType.COMMENT, marker + body, start, body.strip())

    def read_block_comment(self) -> None:
        """Read a ``/* ... */`` comment. Unterminated is reported at the opener."""
        start = self.position
        self.advance()
        self.advance()

        chars = []
        while True:
            current = self.current_char()
            if current is None:
                raise make_unterminated_string(start, self.file, self.text)
            if current == "*" and self.peek_char() == "/":
                self.advance()
                self.advance()
                break
            chars.append(current)
            self.advance()

        body = "".join(chars)
        self.add_token(TokenType.MULTILINE_COMMENT, f"/*{body}*/", start, body)

    def read_annotation(self) -> None:
        start = self.position
        self.advance()  # skip '@'

        chars = []
        while self.current_char() is not None and (
            _is_ident_char(self.current_char()) and self.current_char() != "."
        ):
            chars.append(self.current_char())
            self.advance()

        name = "".join(chars)
        self.add_token(TokenType.ANNOTATION, f"@{name}", start, name)

    def read_string(self) -> None:
        """Read a double-quoted string with ``\\n \\t \\r \\\\ \\"`` escapes."""
        start = self.position
        start_pos = self.pos
        self.advance()  # skip opening quote

        chars = []
        while True:
            current = self.current_char()
            if current is None or current == "\n":
                raise make_unterminated_string(start, self.file, self.text)
            if current == '"':
                self.advance()
                break

            if current == "\\":
                self.advance()
                escape_char = self.current_char()
                if escape_char is None:
                    raise make_unterminated_string(start, self.file, self.text)
                if escape_char == "n":
                    chars.append("\n")
                elif escape_char == "t":
                    chars.append("\t")
                elif escape_char == "r":
                    chars.append("\r")
                elif escape_char in ('\\', '"'):
                    chars.append(escape_char)
                else:
                    raise make_invalid_escape(
                        f"\\{escape_char}", self.position, self.file, self.text
                    )
                self.advance()
            else:
                chars.append(current)
                self.advance()

        value = "".join(chars)
        self.add_token(TokenType.STRING, self.text[start_pos : self.pos], start, value)

    def read_number(self) -> None:
        """Read an integer with an optional fractional part; stored as float."""
        start = self.position
        chars = []
        while self.current_char() is not None and self.current_char().isdigit():
            chars.append(self.current_char())
            self.advance()

        next_char = self.peek_char()
        if self.current_char() == "." and next_char is not None and next_char.isdigit():
            chars.append(".")
            self.advance()
            while self.current_char() is not None and self.current_char().isdigit():
                chars.append(self.current_char())
                self.advance()

        text = "".join(chars)
        try:
            value = float(text)
        except ValueError:
            raise make_invalid_number(text, start, self.file, self.text) from None
        self.add_token(TokenType.NUMBER, text, start, value)

    def read_identifier(self) -> None:
        """Read an identifier, keyword or boolean literal."""
        start = self.position
        chars = []
        while self.current_char() is not None and _is_ident_char(self.current_char()):
            chars.append(self.current_char())
            self.advance()

        text = "".join(chars)
        lowered = text.lower()
        if lowered in BOOLEANS:
            self.add_token(TokenType.BOOLEAN, text, start, BOOLEANS[lowered])
        elif lowered in KEYWORDS:
            self.add_token(KEYWORDS[lowered], text, start)
        else:
            self.add_token(TokenType.IDENTIFIER, text, start, text)

    def tokenize(self) -> list[Token]:
        """
        Tokenize the entire source text.

        Returns:
            List of tokens ending with EOF

        Raises:
            LexerError: On the first lexical error
        """
        while self.pos < len(self.text):
            ch = self.current_char()

            if ch in (" ", "\t", "\r"):
                self.advance()
            elif ch == "\n":
                self.add_token(TokenType.NEWLINE, "\n", self.position)
                self.advance()
            elif ch == "/":
                if self.peek_char() == "/":
                    self.read_line_comment("//")
                elif self.peek_char() == "*":
                    self.read_block_comment()
                else:
                    raise make_unexpected_character(ch, self.position, self.file, self.text)
            elif ch == "#":
                self.read_line_comment("#")
            elif ch == "@":
                self.read_annotation()
            elif ch == '"':
                self.read_string()
            elif ch.isascii() and ch.isdigit():
                self.read_number()
            elif _is_ident_start(ch):
                self.read_identifier()
            elif ch in SINGLE_CHAR_TOKENS:
                self.add_token(SINGLE_CHAR_TOKENS[ch], ch, self.position)
                self.advance()
            else:
                raise make_unexpected_character(ch, self.position, self.file, self.text)

        self.add_token(TokenType.EOF, "", self.position)
        logger.debug("Tokenized %d tokens", len(self.tokens))
        return self.tokens


def tokenize(text: str, file: Path | None = None) -> list[Token]:
    """
    Convenience function to tokenize DSL text.

    Args:
        text: Source text
        file: Source file path

    Returns:
        List of tokens
    """
    lexer = Lexer(text, file)
    return lexer.tokenize()
