"""
The root IR node.
"""

from __future__ import annotations

from collections.abc import Iterator

from pydantic import BaseModel, ConfigDict, Field

from .data import IRDataBlock
from .declarations import IRImport, IRUnit, IRVariable, IRVocabulary
from .events import IREvent
from .outlets import IRFamily, IROutlet, IRTemplate
from .relationships import IRDiachronicLink, IRRelationship, IRSynchronousLink


class IRProgram(BaseModel):
    """
    A lowered MDSL program.

    Built once by lowering and read by every emitter.
    """

    imports: list[IRImport] = Field(default_factory=list)
    variables: list[IRVariable] = Field(default_factory=list)
    templates: list[IRTemplate] = Field(default_factory=list)
    units: list[IRUnit] = Field(default_factory=list)
    vocabularies: list[IRVocabulary] = Field(default_factory=list)
    families: list[IRFamily] = Field(default_factory=list)
    events: list[IREvent] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def outlets(self) -> Iterator[tuple[IRFamily, IROutlet]]:
        for family in self.families:
            for outlet in family.outlets:
                yield family, outlet

    def relationships(self) -> Iterator[IRRelationship]:
        for family in self.families:
            yield from family.relationships

    def diachronic_links(self) -> list[IRDiachronicLink]:
        return [r for r in self.relationships() if isinstance(r, IRDiachronicLink)]

    def synchronous_links(self) -> list[IRSynchronousLink]:
        return [r for r in self.relationships() if isinstance(r, IRSynchronousLink)]

    def data_blocks(self) -> list[IRDataBlock]:
        return [block for family in self.families for block in family.data_blocks]

    def vocabulary(self, name: str) -> IRVocabulary | None:
        for vocabulary in self.vocabularies:
            if vocabulary.name == name:
                return vocabulary
        return None
