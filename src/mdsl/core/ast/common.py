"""
Shared AST node types: expressions, dates, comments and annotations.

Every node carries the position of its first token.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from ..position import SourcePosition


class Node(BaseModel):
    """Base for all AST nodes."""

    position: SourcePosition = Field(default_factory=SourcePosition.start)

    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Trivia
# ---------------------------------------------------------------------------


class Comment(Node):
    """A recorded line or block comment."""

    kind: Literal["comment"] = "comment"
    text: str
    is_multiline: bool = False


class Annotation(Node):
    """
    An ``@name`` annotation with an optional string payload.

    Examples:
        - @maps_to "MarketData"
        - @comment = "Merged in 1971"
    """

    kind: Literal["annotation"] = "annotation"
    name: str
    value: str | None = None


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------


class DateExpr(Node):
    """A date literal or the ``CURRENT`` sentinel."""

    value: str = ""
    is_current: bool = False

    @classmethod
    def current(cls, position: SourcePosition | None = None) -> DateExpr:
        return cls(is_current=True, position=position or SourcePosition.start())

    def lowered(self) -> str:
        """The IR form of this date: ``CURRENT`` or the literal verbatim."""
        return "CURRENT" if self.is_current else self.value


class DateRange(Node):
    """``from`` date with an optional ``to`` date."""

    start: DateExpr
    end: DateExpr | None = None


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------


class StringExpr(Node):
    kind: Literal["string"] = "string"
    value: str


class NumberExpr(Node):
    kind: Literal["number"] = "number"
    value: float


class BooleanExpr(Node):
    kind: Literal["boolean"] = "boolean"
    value: bool


class VariableExpr(Node):
    """A ``$name`` reference to a ``LET`` declaration."""

    kind: Literal["variable"] = "variable"
    name: str


class ObjectAssignment(Node):
    kind: Literal["assignment"] = "assignment"
    name: str
    value: Expression


class ObjectPeriod(Node):
    """An object field whose value is ``"D" TO (CURRENT | "D")``."""

    kind: Literal["period"] = "period"
    name: str
    value: DateRange


class ObjectExpr(Node):
    """Object literal ``{ name = expr; ... }``."""

    kind: Literal["object"] = "object"
    fields: list[ObjectAssignment | ObjectPeriod] = Field(default_factory=list)


Expression = StringExpr | NumberExpr | BooleanExpr | VariableExpr | ObjectExpr


class Assignment(Node):
    """``name = expr`` inside a block."""

    kind: Literal["assignment"] = "assignment"
    name: str
    value: Expression


class NestedAssignment(Node):
    """``name { a = expr; ... }`` or ``name = { ... }`` kept with its fields."""

    kind: Literal["nested"] = "nested"
    name: str
    fields: list[Assignment | Comment] = Field(default_factory=list)


def walk_expression(expr: Expression):
    """Yield ``expr`` and every expression nested inside it."""
    yield expr
    if isinstance(expr, ObjectExpr):
        for field in expr.fields:
            if isinstance(field, ObjectAssignment):
                yield from walk_expression(field.value)


ObjectAssignment.model_rebuild()
ObjectExpr.model_rebuild()
Assignment.model_rebuild()
