"""
Top-level declarations: imports, variables, units and vocabularies.
"""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import Field

from .common import Expression, Node


class ImportStatement(Node):
    """``IMPORT "path"``. Recorded, never resolved."""

    kind: Literal["import"] = "import"
    path: str


class VariableDeclaration(Node):
    """``LET name = expr``."""

    kind: Literal["variable"] = "variable"
    name: str
    value: Expression


class FieldTypeKind(str, Enum):
    """Column types a UNIT field may declare."""

    ID = "ID"
    TEXT = "TEXT"
    NUMBER = "NUMBER"
    BOOLEAN = "BOOLEAN"
    CATEGORY = "CATEGORY"


class FieldType(Node):
    """
    A unit field type.

    Examples:
        - ID: FieldType(kind=ID)
        - TEXT(120): FieldType(kind=TEXT, length=120)
        - CATEGORY("a", "b"): FieldType(kind=CATEGORY, values=["a", "b"])
    """

    kind: FieldTypeKind
    length: int | None = None  # for TEXT
    values: list[str] = Field(default_factory=list)  # for CATEGORY


class FieldDeclaration(Node):
    name: str
    field_type: FieldType
    is_primary_key: bool = False


class UnitDeclaration(Node):
    """``UNIT name { field: TYPE [PRIMARY KEY], ... }``."""

    kind: Literal["unit"] = "unit"
    name: str
    fields: list[FieldDeclaration] = Field(default_factory=list)


class VocabularyEntry(Node):
    """
    ``key: "value"``. Keys keep their lexical kind: a float for numeric keys,
    a str for quoted keys.
    """

    key: float | str
    value: str

    @property
    def key_is_number(self) -> bool:
        return isinstance(self.key, float)


class VocabularyBody(Node):
    name: str
    entries: list[VocabularyEntry] = Field(default_factory=list)


class VocabularyDeclaration(Node):
    """``VOCABULARY name { BODY { ... } ... }`` or the bare ``name { ... }`` form."""

    kind: Literal["vocabulary"] = "vocabulary"
    name: str
    bodies: list[VocabularyBody] = Field(default_factory=list)
