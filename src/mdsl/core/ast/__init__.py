"""
MDSL Abstract Syntax Tree (AST) types.

The AST mirrors source structure closely and keeps a position on every node
so the validator can report precise locations. All types are re-exported
from this package.
"""

from __future__ import annotations

from typing import cast

from pydantic import Field

from .common import (
    Annotation,
    Assignment,
    BooleanExpr,
    Comment,
    DateExpr,
    DateRange,
    Expression,
    NestedAssignment,
    Node,
    NumberExpr,
    ObjectAssignment,
    ObjectExpr,
    ObjectPeriod,
    StringExpr,
    VariableExpr,
    walk_expression,
)
from .data import (
    AggregationDeclaration,
    AggregationField,
    DataDeclaration,
    MetricField,
    MetricsBlock,
    YearComment,
    YearDeclaration,
)
from .declarations import (
    FieldDeclaration,
    FieldType,
    FieldTypeKind,
    ImportStatement,
    UnitDeclaration,
    VariableDeclaration,
    VocabularyBody,
    VocabularyDeclaration,
    VocabularyEntry,
)
from .events import CatalogDeclaration, EventDeclaration, EventEntity, SourceDeclaration
from .outlets import (
    ArrayAssignment,
    BasedOn,
    CharacteristicsBlock,
    ExtendsTemplate,
    FamilyDeclaration,
    FamilyMember,
    IdentityBlock,
    Inheritance,
    LifecycleBlock,
    LifecycleEntry,
    MetadataBlock,
    OutletBlock,
    OutletDeclaration,
    OutletReference,
    TemplateDeclaration,
)
from .relationships import DiachronicLink, OutletSpec, Relationship, SynchronousLink

Statement = (
    ImportStatement
    | VariableDeclaration
    | UnitDeclaration
    | VocabularyDeclaration
    | TemplateDeclaration
    | FamilyDeclaration
    | DataDeclaration
    | DiachronicLink
    | SynchronousLink
    | EventDeclaration
    | CatalogDeclaration
    | Comment
)


class Program(Node):
    """A parsed MDSL document: top-level statements in source order."""

    statements: list[Statement] = Field(default_factory=list)

    def of_kind(self, kind: str) -> list[Statement]:
        return [s for s in self.statements if s.kind == kind]

    def families(self) -> list[FamilyDeclaration]:
        return cast(list[FamilyDeclaration], self.of_kind("family"))


__all__ = [
    "AggregationDeclaration",
    "AggregationField",
    "Annotation",
    "ArrayAssignment",
    "Assignment",
    "BasedOn",
    "BooleanExpr",
    "CatalogDeclaration",
    "CharacteristicsBlock",
    "Comment",
    "DataDeclaration",
    "DateExpr",
    "DateRange",
    "DiachronicLink",
    "EventDeclaration",
    "EventEntity",
    "Expression",
    "ExtendsTemplate",
    "FamilyDeclaration",
    "FamilyMember",
    "FieldDeclaration",
    "FieldType",
    "FieldTypeKind",
    "IdentityBlock",
    "ImportStatement",
    "Inheritance",
    "LifecycleBlock",
    "LifecycleEntry",
    "MetadataBlock",
    "MetricField",
    "MetricsBlock",
    "NestedAssignment",
    "Node",
    "NumberExpr",
    "ObjectAssignment",
    "ObjectExpr",
    "ObjectPeriod",
    "OutletBlock",
    "OutletDeclaration",
    "OutletReference",
    "OutletSpec",
    "Program",
    "Relationship",
    "SourceDeclaration",
    "Statement",
    "StringExpr",
    "SynchronousLink",
    "TemplateDeclaration",
    "UnitDeclaration",
    "VariableDeclaration",
    "VariableExpr",
    "VocabularyBody",
    "VocabularyDeclaration",
    "VocabularyEntry",
    "YearComment",
    "YearDeclaration",
    "walk_expression",
]
