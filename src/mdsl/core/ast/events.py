"""
Event and catalog AST nodes.

DSL Syntax:
    EVENT krone_merger {
        type = "merger";
        date = "1971-06-01";
        status = "completed";
        entities = {
            krone = { id = 200001; role = "acquirer"; stake_before = 50; stake_after = 100; };
        };
        impact = { circulation_change = 15000; };
    };

    CATALOG sources {
        SOURCE "Media Analyse" {
            url = "https://www.media-analyse.at";
            config { type_code = 1; active = true; };
        };
    };
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from .common import Annotation, Assignment, Comment, DateExpr, NestedAssignment, Node


class EventEntity(Node):
    name: str
    outlet_id: float | None = None
    role: str | None = None
    stake_before: float | None = None
    stake_after: float | None = None


class EventDeclaration(Node):
    kind: Literal["event"] = "event"
    name: str
    event_type: str | None = None
    date: DateExpr | None = None
    status: str | None = None
    entities: list[EventEntity] = Field(default_factory=list)
    impact: list[Assignment] = Field(default_factory=list)
    metadata: list[Assignment] = Field(default_factory=list)
    annotations: list[Annotation] = Field(default_factory=list)
    comments: list[Comment] = Field(default_factory=list)


class SourceDeclaration(Node):
    """``SOURCE "name" { ... }`` inside a catalog."""

    name: str
    fields: list[Assignment | NestedAssignment | Annotation | Comment] = Field(
        default_factory=list
    )


class CatalogDeclaration(Node):
    kind: Literal["catalog"] = "catalog"
    name: str
    sources: list[SourceDeclaration] = Field(default_factory=list)
