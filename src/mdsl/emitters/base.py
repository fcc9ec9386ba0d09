"""
Base generator classes for MDSL emitters.

Each emitter turns one IRProgram into a single text artifact:
- SqlGenerator: generic relational schema and data
- AnmiSqlGenerator: the legacy ANMI relational shape
- CypherGenerator: graph creation script

Emitters never validate; run them on a program whose validation passed.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path

from ..core.errors import CodeGenError, make_generation_failure
from ..core.ir import IRProgram, StringValue

logger = logging.getLogger(__name__)

# Stand-in the parser records for an object-valued characteristic.
PLACEHOLDER_VALUE = "complex_object"


@dataclass
class GeneratorResult:
    """
    Result from a generator execution.

    Attributes:
        content: Generated text, empty when generation failed
        files_created: Files written by ``Generator.write``
        errors: Fatal problems; any error means no usable content
        warnings: Problems that did not stop generation
    """

    content: str = ""
    files_created: list[Path] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """Whether generation succeeded (no errors)."""
        return len(self.errors) == 0

    def add_file(self, path: Path) -> None:
        self.files_created.append(path)

    def add_error(self, error: str) -> None:
        self.errors.append(error)

    def add_warning(self, warning: str) -> None:
        self.warnings.append(warning)


class Generator(ABC):
    """
    Base class for all emitters.

    Example:
        class CsvGenerator(Generator):
            name = "csv"
            extension = ".csv"

            def build(self) -> str:
                return "\\n".join(o.name for _, o in self.program.outlets())
    """

    name: str = ""
    extension: str = ".txt"

    def __init__(self, program: IRProgram):
        self.program = program
        self.warnings: list[str] = []

    @abstractmethod
    def build(self) -> str:
        """
        Produce the artifact text.

        Raises:
            CodeGenError: If the program holds something this target cannot express
        """

    def generate(self) -> GeneratorResult:
        """Run ``build`` and capture failures as result errors."""
        result = GeneratorResult()
        self.warnings = self.placeholder_warnings()
        try:
            result.content = self.build()
        except CodeGenError as e:
            logger.debug("%s generation failed: %s", self.name, e.message)
            result.add_error(e.message)
        for warning in self.warnings:
            result.add_warning(warning)
        return result

    def placeholder_warnings(self) -> list[str]:
        """Characteristics whose object value was replaced by a placeholder string."""
        owners = [(f"Template '{t.name}'", t.characteristics()) for t in self.program.templates]
        owners += [
            (f"Outlet '{o.name}'", o.characteristics()) for _, o in self.program.outlets()
        ]
        return [
            f"{owner}: characteristic '{field.name}' is emitted as '{PLACEHOLDER_VALUE}'"
            for owner, fields in owners
            for field in fields
            if isinstance(field.value, StringValue) and field.value.value == PLACEHOLDER_VALUE
        ]

    def write(self, path: Path) -> GeneratorResult:
        """Generate and write the artifact, creating parent directories."""
        result = self.generate()
        if result.success:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(result.content, encoding="utf-8")
            result.add_file(path)
        return result


def run_generator(generator: Generator) -> str:
    """
    Generate and return content, raising on failure.

    Raises:
        CodeGenError: With the first error the generator reported
    """
    result = generator.generate()
    if not result.success:
        raise make_generation_failure(result.errors[0])
    return result.content


# =============================================================================
# SQL literal helpers shared by both relational emitters
# =============================================================================


def sql_escape(text: str) -> str:
    return text.replace("'", "''")


def sql_string(text: str) -> str:
    return f"'{sql_escape(text)}'"


def sql_optional(text: str | None) -> str:
    """Quoted literal, or NULL for a missing value."""
    return "NULL" if text is None else sql_string(text)
