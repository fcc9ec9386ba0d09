from pathlib import Path

from . import ast
from .parser_impl import parse_dsl


def parse_file(path: Path) -> ast.Program:
    """
    Read and parse one MDSL file.

    Imports are recorded in the returned Program, never followed.

    Args:
        path: .mdsl file to parse

    Returns:
        Parsed Program

    Raises:
        LexerError: On the first lexical error
        ParseError: On the first syntax error
    """
    text = path.read_text(encoding="utf-8")
    return parse_dsl(text, path)

