"""
IR types for imports, variables, units and vocabularies.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from ..ast.declarations import FieldTypeKind
from .expressions import IRExpression


class IRImport(BaseModel):
    path: str

    model_config = ConfigDict(frozen=True)


class IRVariable(BaseModel):
    name: str
    value: IRExpression

    model_config = ConfigDict(frozen=True)


class IRFieldType(BaseModel):
    """
    Column type of a unit field.

    Examples:
        - ID: IRFieldType(kind=ID)
        - TEXT(120): IRFieldType(kind=TEXT, length=120)
        - CATEGORY("a", "b"): IRFieldType(kind=CATEGORY, values=["a", "b"])
    """

    kind: FieldTypeKind
    length: int | None = None  # for TEXT
    values: list[str] = Field(default_factory=list)  # for CATEGORY

    model_config = ConfigDict(frozen=True)


class IRField(BaseModel):
    name: str
    field_type: IRFieldType
    is_primary_key: bool = False

    model_config = ConfigDict(frozen=True)


class IRUnit(BaseModel):
    name: str
    fields: list[IRField] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class IRVocabularyEntry(BaseModel):
    """A vocabulary entry; ``key`` is a float for numeric keys, a str otherwise."""

    key: float | str
    value: str

    model_config = ConfigDict(frozen=True)


class IRVocabulary(BaseModel):
    """
    A vocabulary with all of its bodies merged.

    ``body_name`` is the name of the first body, or the vocabulary's own
    name when it has none.
    """

    name: str
    body_name: str
    entries: list[IRVocabularyEntry] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)
