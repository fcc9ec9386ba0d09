"""
IR types for market data.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class IRDataAggregation(BaseModel):
    name: str
    value: str

    model_config = ConfigDict(frozen=True)


class IRDataMetric(BaseModel):
    """A yearly figure: ``value`` in ``unit`` as reported by ``source``."""

    name: str
    value: float = 0.0
    unit: str = ""
    source: str = ""
    comment: str | None = None

    model_config = ConfigDict(frozen=True)


class IRDataYear(BaseModel):
    year: int
    metrics: list[IRDataMetric] = Field(default_factory=list)
    comment: str | None = None

    model_config = ConfigDict(frozen=True)


class IRDataBlock(BaseModel):
    outlet_id: int
    aggregation: list[IRDataAggregation] = Field(default_factory=list)
    years: list[IRDataYear] = Field(default_factory=list)
    maps_to: str | None = None

    model_config = ConfigDict(frozen=True)
