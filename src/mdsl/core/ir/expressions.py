"""
IR expression values.

Expressions are flattened out of their AST wrappers; positions are dropped.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class StringValue(BaseModel):
    kind: Literal["string"] = "string"
    value: str

    model_config = ConfigDict(frozen=True)


class NumberValue(BaseModel):
    kind: Literal["number"] = "number"
    value: float

    model_config = ConfigDict(frozen=True)


class BooleanValue(BaseModel):
    kind: Literal["boolean"] = "boolean"
    value: bool

    model_config = ConfigDict(frozen=True)


class VariableRef(BaseModel):
    """Reference to a ``LET`` variable, kept unresolved."""

    kind: Literal["variable"] = "variable"
    name: str

    model_config = ConfigDict(frozen=True)


class ObjectField(BaseModel):
    name: str
    value: IRExpression

    model_config = ConfigDict(frozen=True)


class ObjectValue(BaseModel):
    kind: Literal["object"] = "object"
    fields: list[ObjectField] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def get(self, name: str) -> IRExpression | None:
        for field in self.fields:
            if field.name.lower() == name:
                return field.value
        return None


class ArrayValue(BaseModel):
    kind: Literal["array"] = "array"
    items: list[IRExpression] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


IRExpression = StringValue | NumberValue | BooleanValue | VariableRef | ObjectValue | ArrayValue


class IRAssignment(BaseModel):
    """A ``name = value`` pair from an identity, characteristics, metadata or event block."""

    name: str
    value: IRExpression

    model_config = ConfigDict(frozen=True)


def format_number(value: float) -> str:
    """Shortest decimal text for a number; integral values drop the fraction."""
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


def expression_text(expr: IRExpression) -> str:
    """
    Plain text of an expression.

    Strings are unquoted, variables keep their ``$``, objects and arrays
    render as ``{a: x, b: y}`` and ``[x, y]``.
    """
    if isinstance(expr, StringValue):
        return expr.value
    if isinstance(expr, NumberValue):
        return format_number(expr.value)
    if isinstance(expr, BooleanValue):
        return "true" if expr.value else "false"
    if isinstance(expr, VariableRef):
        return f"${expr.name}"
    if isinstance(expr, ObjectValue):
        inner = ", ".join(f"{f.name}: {expression_text(f.value)}" for f in expr.fields)
        return "{" + inner + "}"
    return "[" + ", ".join(expression_text(item) for item in expr.items) + "]"


ObjectField.model_rebuild()
ObjectValue.model_rebuild()
ArrayValue.model_rebuild()
IRAssignment.model_rebuild()
