"""
Error types for MDSL lexing, parsing, semantic analysis and code generation.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .position import SourcePosition


class MdslError(Exception):
    """Base exception for all MDSL errors."""

    prefix = "Error"

    def __init__(
        self,
        message: str,
        context: Optional["ErrorContext"] = None,
        kind: str = "",
        position: SourcePosition | None = None,
    ):
        self.message = message
        self.context = context
        self.kind = kind
        self.position = position
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        text = f"{self.prefix}: {self.message}"
        if self.context:
            return f"{self.context.format()}\n{text}"
        return text


class LexerError(MdslError):
    """
    Raised when source text cannot be tokenized.

    Examples:
    - Unexpected character
    - Unterminated string literal or block comment
    - Invalid number
    - Invalid escape sequence
    """

    prefix = "Lexer error"


class ParseError(MdslError):
    """
    Raised when the token stream does not match the grammar.

    Examples:
    - Unexpected token
    - Missing closing delimiter
    - Unexpected end of input
    """

    prefix = "Parser error"


class SemanticError(MdslError):
    """
    Raised for semantic failures outside the validator's issue list.

    Examples:
    - Undefined variable
    - Duplicate definition
    - Circular dependency
    """

    prefix = "Semantic error"


class CodeGenError(MdslError):
    """
    Raised when an emitter cannot produce output.

    Examples:
    - Unsupported feature for a target
    - Invalid target configuration
    - Generation failure
    """

    prefix = "Code generation error"


class ConfigError(MdslError):
    """Raised when an mdsl.toml manifest cannot be read."""

    prefix = "Config error"


@dataclass
class ErrorContext:
    """
    Context information for an error, including source location.

    Attributes:
        file: Path to the source file where error occurred
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        snippet: Optional source lines around the error location
    """

    file: Path
    line: int
    column: int
    snippet: str | None = None

    def format(self) -> str:
        location = f"{self.file}:{self.line}:{self.column}"
        if self.snippet:
            return f"{location}\n{self._format_snippet()}"
        return location

    def _format_snippet(self) -> str:
        """Format code snippet with line numbers and error marker."""
        if not self.snippet:
            return ""

        formatted = []
        start_line = max(1, self.line - 2)
        for i, line in enumerate(self.snippet.split("\n")):
            line_num = start_line + i
            prefix = f"{line_num:4d} | "
            formatted.append(prefix + line)
            if line_num == self.line:
                formatted.append(" " * (len(prefix) + self.column - 1) + "^^^")

        return "\n".join(formatted)


def snippet_for(source: str, line: int) -> str:
    """Return up to two lines either side of ``line`` from ``source``."""
    lines = source.split("\n")
    start = max(1, line - 2)
    end = min(len(lines), line + 2)
    return "\n".join(lines[start - 1 : end])


def _context(
    position: SourcePosition, file: Path | None, source: str | None
) -> ErrorContext | None:
    if file is None:
        return None
    snippet = snippet_for(source, position.line) if source else None
    return ErrorContext(file=file, line=position.line, column=position.column, snippet=snippet)


# =============================================================================
# Lexer errors
# =============================================================================


def make_unexpected_character(
    character: str, position: SourcePosition, file: Path | None = None, source: str | None = None
) -> LexerError:
    return LexerError(
        f"Unexpected character '{character}' at {position}",
        _context(position, file, source),
        kind="unexpected_character",
        position=position,
    )


def make_unterminated_string(
    position: SourcePosition, file: Path | None = None, source: str | None = None
) -> LexerError:
    return LexerError(
        f"Unterminated string literal at {position}",
        _context(position, file, source),
        kind="unterminated_string",
        position=position,
    )


def make_invalid_number(
    text: str, position: SourcePosition, file: Path | None = None, source: str | None = None
) -> LexerError:
    return LexerError(
        f"Invalid number '{text}' at {position}",
        _context(position, file, source),
        kind="invalid_number",
        position=position,
    )


def make_invalid_escape(
    sequence: str, position: SourcePosition, file: Path | None = None, source: str | None = None
) -> LexerError:
    return LexerError(
        f"Invalid escape sequence '{sequence}' at {position}",
        _context(position, file, source),
        kind="invalid_escape",
        position=position,
    )


# =============================================================================
# Parser errors
# =============================================================================


def make_unexpected_token(
    found: str,
    expected: list[str],
    position: SourcePosition,
    file: Path | None = None,
    source: str | None = None,
) -> ParseError:
    """
    Create an unexpected-token parse error.

    Args:
        found: Text of the token actually found
        expected: Human-readable descriptions of acceptable tokens
        position: Position of the offending token
        file: Optional source file for context
        source: Optional source text for a snippet

    Returns:
        ParseError rendered as
        ``Unexpected token 'x' at L:C, expected a or b``
    """
    error = ParseError(
        f"Unexpected token '{found}' at {position}, expected {' or '.join(expected)}",
        _context(position, file, source),
        kind="unexpected_token",
        position=position,
    )
    error.found = found
    error.expected = list(expected)
    return error


def make_missing_delimiter(
    delimiter: str, position: SourcePosition, file: Path | None = None, source: str | None = None
) -> ParseError:
    return ParseError(
        f"Missing closing '{delimiter}' at {position}",
        _context(position, file, source),
        kind="missing_closing_delimiter",
        position=position,
    )


def make_invalid_syntax(
    message: str, position: SourcePosition, file: Path | None = None, source: str | None = None
) -> ParseError:
    return ParseError(
        f"Invalid syntax at {position}: {message}",
        _context(position, file, source),
        kind="invalid_syntax",
        position=position,
    )


def make_unexpected_eof(
    expected: str, position: SourcePosition, file: Path | None = None, source: str | None = None
) -> ParseError:
    return ParseError(
        f"Unexpected end of input at {position}, expected {expected}",
        _context(position, file, source),
        kind="unexpected_eof",
        position=position,
    )


# =============================================================================
# Semantic errors
# =============================================================================


def make_semantic_error(kind: str, message: str, position: SourcePosition) -> SemanticError:
    return SemanticError(f"{message} at {position}", kind=kind, position=position)


# =============================================================================
# Code generation errors
# =============================================================================


def make_unsupported_feature(
    feature: str, target: str, position: SourcePosition | None = None
) -> CodeGenError:
    """Unsupported IR shape; position defaults to 1:1 as a placeholder."""
    position = position or SourcePosition.start()
    return CodeGenError(
        f"Unsupported feature '{feature}' for target '{target}' at {position}",
        kind="unsupported_feature",
        position=position,
    )


def make_invalid_target(target: str, message: str) -> CodeGenError:
    return CodeGenError(f"Invalid target '{target}': {message}", kind="invalid_target")


def make_generation_failure(
    message: str, position: SourcePosition | None = None
) -> CodeGenError:
    position = position or SourcePosition.start()
    return CodeGenError(
        f"Generation failure at {position}: {message}",
        kind="generation_failure",
        position=position,
    )
