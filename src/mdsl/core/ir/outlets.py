"""
IR types for templates, outlets and families.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from .data import IRDataBlock
from .expressions import IRAssignment, IRExpression
from .relationships import IRRelationship


class IRIdentityBlock(BaseModel):
    kind: Literal["identity"] = "identity"
    fields: list[IRAssignment] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class IRLifecycleStatus(BaseModel):
    """
    One lifecycle status period.

    Dates are verbatim literals; an open end is the string ``CURRENT``.
    """

    status: str
    start_date: str | None = None
    end_date: str | None = None
    precision_start: str | None = None
    precision_end: str | None = None
    comment: str | None = None

    model_config = ConfigDict(frozen=True)


class IRLifecycleBlock(BaseModel):
    kind: Literal["lifecycle"] = "lifecycle"
    statuses: list[IRLifecycleStatus] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class IRCharacteristicsBlock(BaseModel):
    kind: Literal["characteristics"] = "characteristics"
    fields: list[IRAssignment] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class IRMetadataBlock(BaseModel):
    kind: Literal["metadata"] = "metadata"
    fields: list[IRAssignment] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


IROutletBlock = IRIdentityBlock | IRLifecycleBlock | IRCharacteristicsBlock | IRMetadataBlock
IRTemplateBlock = IRCharacteristicsBlock | IRMetadataBlock


class IRTemplate(BaseModel):
    name: str
    template_type: str = "OUTLET"
    blocks: list[IRTemplateBlock] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def characteristics(self) -> list[IRAssignment]:
        return [f for b in self.blocks if isinstance(b, IRCharacteristicsBlock) for f in b.fields]


class IROutlet(BaseModel):
    """
    A media outlet.

    Inheritance is recorded, not materialized: ``template_ref`` names an
    ``EXTENDS TEMPLATE`` target and ``base_ref`` a ``BASED_ON`` outlet ID.
    """

    name: str
    id: int | None = None
    template_ref: str | None = None
    base_ref: int | None = None
    blocks: list[IROutletBlock] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def identity(self) -> list[IRAssignment]:
        return [f for b in self.blocks if isinstance(b, IRIdentityBlock) for f in b.fields]

    def identity_value(self, name: str) -> IRExpression | None:
        for field in self.identity():
            if field.name.lower() == name:
                return field.value
        return None

    def lifecycle(self) -> list[IRLifecycleStatus]:
        return [s for b in self.blocks if isinstance(b, IRLifecycleBlock) for s in b.statuses]

    def characteristics(self) -> list[IRAssignment]:
        return [f for b in self.blocks if isinstance(b, IRCharacteristicsBlock) for f in b.fields]

    def metadata(self) -> list[IRAssignment]:
        return [f for b in self.blocks if isinstance(b, IRMetadataBlock) for f in b.fields]


class IRFamily(BaseModel):
    name: str
    comment: str | None = None
    outlets: list[IROutlet] = Field(default_factory=list)
    relationships: list[IRRelationship] = Field(default_factory=list)
    data_blocks: list[IRDataBlock] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)
