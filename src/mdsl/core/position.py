"""
Source positions attached to tokens, AST nodes and diagnostics.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class SourcePosition(BaseModel):
    """
    A location in MDSL source text.

    Attributes:
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        offset: Byte offset from the start of the source (0-indexed)
    """

    line: int = 1
    column: int = 1
    offset: int = 0

    model_config = ConfigDict(frozen=True)

    @classmethod
    def start(cls) -> SourcePosition:
        return cls(line=1, column=1, offset=0)

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"
