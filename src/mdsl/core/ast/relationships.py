"""
Relationship AST nodes.

DSL Syntax:
    DIACHRONIC_LINK succession_1971 {
        predecessor = 200001;
        successor = 200002;
        event_date = "1971-01-01" TO "1971-12-31";
        relationship_type = "succession";
        @maps_to "11_succession";
    };

    SYNCHRONOUS_LINK umbrella {
        outlet_1 = { id = 200001; role = "main"; };
        outlet_2 = { id = 200003; role = "sub"; };
        relationship_type = "umbrella";
        period = "1990-01-01" TO CURRENT;
    };
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from .common import Annotation, Comment, DateExpr, DateRange, Node


class OutletSpec(Node):
    """``{ id = n; role = "r"; }`` naming one side of a synchronous link."""

    outlet_id: float = 0.0
    role: str | None = None


class DiachronicLink(Node):
    kind: Literal["diachronic_link"] = "diachronic_link"
    name: str
    predecessor: float | None = None
    successor: float | None = None
    relationship_type: str | None = None
    event_date: DateRange | None = None
    triggered_by_event: str | None = None
    annotations: list[Annotation] = Field(default_factory=list)
    comments: list[Comment] = Field(default_factory=list)


class SynchronousLink(Node):
    kind: Literal["synchronous_link"] = "synchronous_link"
    name: str
    outlet_1: OutletSpec | None = None
    outlet_2: OutletSpec | None = None
    relationship_type: str | None = None
    period_start: DateExpr | None = None
    period_end: DateExpr | None = None
    details: str | None = None
    created_by_event: str | None = None
    annotations: list[Annotation] = Field(default_factory=list)
    comments: list[Comment] = Field(default_factory=list)


Relationship = DiachronicLink | SynchronousLink
