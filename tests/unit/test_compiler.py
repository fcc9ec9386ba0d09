"""Tests for one-call compilation."""

import pytest

from mdsl import compile_source
from mdsl.core.errors import CodeGenError, ParseError, SemanticError
from mdsl.core.validator import semantic_kind
from mdsl.samples import FAMILY_SAMPLE


class TestCompileSource:
    def test_default_target_is_sql(self, unit_source: str):
        assert "CREATE TABLE mediaoutlet (" in compile_source(unit_source)

    def test_cypher(self):
        assert "CREATE (o:Outlet {id: 200001" in compile_source(FAMILY_SAMPLE, "cypher")

    def test_warnings_do_not_stop(self):
        # UNIT_NO_PRIMARY_KEY is a warning
        assert "CREATE TABLE t (" in compile_source("UNIT T { a: TEXT }")

    def test_syntax_error(self):
        with pytest.raises(ParseError):
            compile_source("UNIT { }")

    def test_first_validation_error_raised(self):
        with pytest.raises(SemanticError) as exc_info:
            compile_source('TEMPLATE "T" { characteristics { lang = $missing; }; }')
        error = exc_info.value
        assert error.kind == "undefined_variable"
        assert error.message.startswith("Variable 'missing' not found at 1:")
        assert str(error).startswith("Semantic error: ")

    def test_unknown_target_checked_first(self):
        with pytest.raises(CodeGenError) as exc_info:
            compile_source("UNIT {", "xml")
        assert exc_info.value.kind == "invalid_target"


class TestSemanticKind:
    @pytest.mark.parametrize(
        "code,kind",
        [
            ("VARIABLE_NOT_FOUND", "undefined_variable"),
            ("IMPORT_REDECLARED", "import_error"),
            ("TEMPLATE_REDECLARED", "duplicate_definition"),
            ("OUTLET_ID_DUPLICATE", "duplicate_definition"),
            ("FIELD_TEXT_ZERO_LENGTH", "type_mismatch"),
            ("TEMPLATE_NOT_FOUND", "invalid_field"),
        ],
    )
    def test_mapping(self, code: str, kind: str):
        assert semantic_kind(code) == kind
