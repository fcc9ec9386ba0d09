"""
IR types for relationships between outlets.

Diachronic links connect a predecessor to a successor over time;
synchronous links connect two outlets that coexist.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict


class IRDiachronicLink(BaseModel):
    kind: Literal["diachronic"] = "diachronic"
    name: str
    predecessor: int = 0
    successor: int = 0
    event_start_date: str | None = None
    event_end_date: str | None = None
    relationship_type: str = ""
    comment: str | None = None
    maps_to: str | None = None

    model_config = ConfigDict(frozen=True)


class IRSyncOutlet(BaseModel):
    id: int = 0
    role: str = ""

    model_config = ConfigDict(frozen=True)


class IRSynchronousLink(BaseModel):
    kind: Literal["synchronous"] = "synchronous"
    name: str
    outlet_1: IRSyncOutlet = IRSyncOutlet()
    outlet_2: IRSyncOutlet = IRSyncOutlet()
    relationship_type: str = ""
    period_start: str | None = None
    period_end: str | None = None
    details: str | None = None
    maps_to: str | None = None

    model_config = ConfigDict(frozen=True)


IRRelationship = IRDiachronicLink | IRSynchronousLink
