"""
MDSL - compiler for the MediaLanguage DSL.

Parses media-outlet descriptions (families, outlets, lifecycles, market
data and the links between outlets), validates them and emits SQL or
Cypher scripts.
"""

from ._version import __version__
from .compiler import compile_source
from .core import ast, ir
from .core.errors import CodeGenError, LexerError, MdslError, ParseError, SemanticError
from .core.lowering import lower_program
from .core.parser_impl import parse_dsl
from .core.validator import validate_program

__all__ = [
    "__version__",
    "ast",
    "ir",
    "MdslError",
    "LexerError",
    "ParseError",
    "SemanticError",
    "CodeGenError",
    "compile_source",
    "lower_program",
    "parse_dsl",
    "validate_program",
]
