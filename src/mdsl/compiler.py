"""
One-call compilation from MDSL text to an emitter's output.
"""

import logging
from pathlib import Path

from .core.lowering import lower_program
from .core.parser_impl import parse_dsl
from .core.validator import validate_program
from .emitters import get_generator, run_generator

logger = logging.getLogger(__name__)


def compile_source(text: str, target: str = "sql", file: Path | None = None) -> str:
    """
    Parse, validate, lower and emit ``text`` for one target.

    Warnings and info issues do not stop compilation.

    Args:
        text: DSL source text
        target: Generator name (``sql``, ``sql_anmi`` or ``cypher``)
        file: Source file path (for error reporting)

    Returns:
        Generated artifact text

    Raises:
        LexerError: On the first lexical error
        ParseError: On the first syntax error
        SemanticError: On the first validation error
        CodeGenError: If the target is unknown or generation fails
    """
    generator_class = get_generator(target)
    program = parse_dsl(text, file)

    result = validate_program(program)
    logger.debug(
        "Validated %s: %d error(s), %d warning(s)",
        file or "<text>",
        result.summary.errors,
        result.summary.warnings,
    )
    result.raise_for_errors()

    return run_generator(generator_class(lower_program(program)))
