"""
MDSL emitters.

Each emitter turns a lowered IRProgram into one text artifact.
"""

from ..core.errors import make_invalid_target
from .base import Generator, GeneratorResult, run_generator
from .cypher import CypherGenerator, generate_cypher
from .sql import SqlGenerator, generate_sql
from .sql_anmi import AnmiSqlGenerator, generate_sql_anmi

# target name -> generator class
GENERATORS: dict[str, type[Generator]] = {
    SqlGenerator.name: SqlGenerator,
    AnmiSqlGenerator.name: AnmiSqlGenerator,
    CypherGenerator.name: CypherGenerator,
}


def get_generator(target: str) -> type[Generator]:
    """
    Look up a generator class by target name.

    Raises:
        CodeGenError: If no generator is registered for ``target``
    """
    try:
        return GENERATORS[target]
    except KeyError:
        available = ", ".join(sorted(GENERATORS))
        raise make_invalid_target(target, f"available targets: {available}") from None


__all__ = [
    "AnmiSqlGenerator",
    "CypherGenerator",
    "GENERATORS",
    "Generator",
    "GeneratorResult",
    "SqlGenerator",
    "generate_cypher",
    "generate_sql",
    "generate_sql_anmi",
    "get_generator",
    "run_generator",
]
