"""
IR types for events.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .expressions import IRAssignment


class IREventEntity(BaseModel):
    name: str
    id: int = 0
    role: str = ""
    stake_before: float | None = None
    stake_after: float | None = None

    model_config = ConfigDict(frozen=True)


class IREvent(BaseModel):
    name: str
    event_type: str = ""
    date: str | None = None
    entities: list[IREventEntity] = Field(default_factory=list)
    impact: list[IRAssignment] = Field(default_factory=list)
    metadata: list[IRAssignment] = Field(default_factory=list)
    status: str | None = None

    model_config = ConfigDict(frozen=True)
