"""Core MDSL functionality: lexer, parser, AST, IR, lowering, validation, reporting, config."""

from . import ast, ir
from .config import MdslConfig, load_config
from .errors import (
    CodeGenError,
    ConfigError,
    ErrorContext,
    LexerError,
    MdslError,
    ParseError,
    SemanticError,
)
from .lexer import Lexer, Token, TokenType, tokenize
from .lowering import lower_program
from .parser import parse_file
from .parser_impl import parse_dsl
from .position import SourcePosition
from .reporter import ValidationReporter
from .validator import (
    ValidationIssue,
    ValidationResult,
    ValidationSeverity,
    ValidationSummary,
    validate_program,
)

__all__ = [
    "ast",
    "ir",
    "CodeGenError",
    "ConfigError",
    "ErrorContext",
    "Lexer",
    "LexerError",
    "MdslConfig",
    "MdslError",
    "ParseError",
    "SemanticError",
    "SourcePosition",
    "Token",
    "TokenType",
    "ValidationIssue",
    "ValidationReporter",
    "ValidationResult",
    "ValidationSeverity",
    "ValidationSummary",
    "load_config",
    "lower_program",
    "parse_dsl",
    "parse_file",
    "tokenize",
    "validate_program",
]
