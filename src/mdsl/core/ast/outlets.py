"""
Outlet, template and family AST nodes.

DSL Syntax:
    FAMILY "Kronen Zeitung Family" {
        OUTLET "Kronen Zeitung" EXTENDS TEMPLATE "AustrianNewspaper" {
            identity {
                id = 200001;
                title = "Kronen Zeitung";
            };
            lifecycle {
                status "active" FROM "1959-01-01" TO CURRENT {
                    precision_start = "known";
                };
            };
            characteristics { language = "de"; };
            metadata { verified = true; };
        };
    }
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from .common import Assignment, Comment, DateExpr, Node, ObjectExpr
from .data import DataDeclaration
from .relationships import DiachronicLink, SynchronousLink


class ArrayAssignment(Node):
    """``name = [ {obj}, {obj} ]`` inside an identity block."""

    kind: Literal["array"] = "array"
    name: str
    values: list[ObjectExpr] = Field(default_factory=list)


class IdentityBlock(Node):
    kind: Literal["identity"] = "identity"
    fields: list[Assignment | ArrayAssignment | Comment] = Field(default_factory=list)

    def assignment(self, name: str) -> Assignment | None:
        for field in self.fields:
            if isinstance(field, Assignment) and field.name.lower() == name:
                return field
        return None


class LifecycleEntry(Node):
    """``STATUS "s" FROM D [TO D] { attrs }``."""

    status: str
    start: DateExpr
    end: DateExpr | None = None
    attributes: list[Assignment | Comment] = Field(default_factory=list)


class LifecycleBlock(Node):
    kind: Literal["lifecycle"] = "lifecycle"
    entries: list[LifecycleEntry] = Field(default_factory=list)


class CharacteristicsBlock(Node):
    kind: Literal["characteristics"] = "characteristics"
    fields: list[Assignment | Comment] = Field(default_factory=list)


class MetadataBlock(Node):
    kind: Literal["metadata"] = "metadata"
    fields: list[Assignment | Comment] = Field(default_factory=list)


OutletBlock = IdentityBlock | LifecycleBlock | CharacteristicsBlock | MetadataBlock | Comment


class ExtendsTemplate(Node):
    kind: Literal["extends_template"] = "extends_template"
    template: str


class BasedOn(Node):
    kind: Literal["based_on"] = "based_on"
    outlet_id: float


Inheritance = ExtendsTemplate | BasedOn


class OutletDeclaration(Node):
    kind: Literal["outlet"] = "outlet"
    name: str
    inheritance: Inheritance | None = None
    blocks: list[OutletBlock] = Field(default_factory=list)

    def identity_blocks(self) -> list[IdentityBlock]:
        return [b for b in self.blocks if isinstance(b, IdentityBlock)]

    def declared_id(self) -> int | None:
        """First numeric ``id`` assignment across identity blocks."""
        for block in self.identity_blocks():
            field = block.assignment("id")
            if field is not None and field.value.kind == "number":
                return int(field.value.value)
        return None


class TemplateDeclaration(Node):
    """``TEMPLATE [OUTLET] "name" { blocks }``."""

    kind: Literal["template"] = "template"
    name: str
    template_type: str = "OUTLET"
    blocks: list[OutletBlock] = Field(default_factory=list)


class OutletReference(Node):
    """``OUTLET_REF id "name"``: an outlet declared elsewhere."""

    kind: Literal["outlet_ref"] = "outlet_ref"
    outlet_id: float
    name: str


FamilyMember = (
    OutletDeclaration
    | OutletReference
    | DataDeclaration
    | DiachronicLink
    | SynchronousLink
    | Comment
)


class FamilyDeclaration(Node):
    """``FAMILY "name" { member* }`` (``GROUP`` is accepted as a synonym)."""

    kind: Literal["family"] = "family"
    name: str
    members: list[FamilyMember] = Field(default_factory=list)

    def outlets(self) -> list[OutletDeclaration]:
        return [m for m in self.members if isinstance(m, OutletDeclaration)]

