"""
Market data AST nodes.

DSL Syntax:
    DATA FOR 200001 {
        @maps_to "MarketData";
        AGGREGATION = { circulation = "national"; };
        YEAR 2023 {
            METRICS {
                circulation = { value = 500000; UNIT = "copies"; source = "official"; };
            };
            comment = "Annual data";
        };
    };
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from .common import Annotation, Assignment, Comment, Node


class AggregationField(Node):
    name: str
    value: str


class AggregationDeclaration(Node):
    kind: Literal["aggregation"] = "aggregation"
    fields: list[AggregationField] = Field(default_factory=list)


class MetricField(Node):
    """``name = { value = n; unit = "u"; source = "s"; comment = "c"; }``."""

    name: str
    attributes: list[Assignment] = Field(default_factory=list)


class MetricsBlock(Node):
    kind: Literal["metrics"] = "metrics"
    fields: list[MetricField] = Field(default_factory=list)


class YearComment(Node):
    """``comment = "..."`` directly inside a YEAR block."""

    kind: Literal["year_comment"] = "year_comment"
    value: str


class YearDeclaration(Node):
    kind: Literal["year"] = "year"
    year: float
    blocks: list[MetricsBlock | YearComment | Comment] = Field(default_factory=list)


class DataDeclaration(Node):
    """``DATA FOR <outlet id> { ... }``."""

    kind: Literal["data"] = "data"
    target_id: float
    blocks: list[Annotation | AggregationDeclaration | YearDeclaration | Comment] = Field(
        default_factory=list
    )
