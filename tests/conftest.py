"""Shared pytest fixtures for mdsl tests."""

from collections.abc import Callable
from pathlib import Path

import pytest

from mdsl.core import ast, ir
from mdsl.core.lowering import lower_program
from mdsl.core.parser_impl import parse_dsl
from mdsl.samples import FAMILY_SAMPLE

UNIT_SOURCE = """\
UNIT MediaOutlet { id: ID PRIMARY KEY, name: TEXT(120), sector: NUMBER }
"""

TWO_OUTLETS_SOURCE = """\
FAMILY "Kronen Zeitung Family" {
    OUTLET "Kronen Zeitung" {
        identity { id = 100; title = "Kronen Zeitung"; };
        lifecycle {
            status "active" from "1959-01-01" to current {
                precision_start = "known";
            };
        };
        characteristics { language = "de"; sector = 1; };
    };
    OUTLET "Krone Bunt" {
        identity { id = 200; title = "Krone Bunt"; };
        characteristics { language = "de"; };
    };
};
"""


@pytest.fixture
def unit_source() -> str:
    """Return the single-unit program."""
    return UNIT_SOURCE


@pytest.fixture
def family_source() -> str:
    """Return a program using most of the language."""
    return FAMILY_SAMPLE


@pytest.fixture
def two_outlets_source() -> str:
    """Return a family with outlets 100 and 200."""
    return TWO_OUTLETS_SOURCE


@pytest.fixture
def family_program(family_source: str) -> ast.Program:
    return parse_dsl(family_source)


@pytest.fixture
def family_ir(family_program: ast.Program) -> ir.IRProgram:
    return lower_program(family_program)


@pytest.fixture
def write_mdsl(tmp_path: Path) -> Callable[[str, str], Path]:
    """Return a factory writing MDSL text to a file under tmp_path."""

    def _write(source: str, name: str = "model.mdsl") -> Path:
        path = tmp_path / name
        path.write_text(source, encoding="utf-8")
        return path

    return _write
