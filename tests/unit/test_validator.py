"""Tests for semantic validation."""

import pytest

from mdsl.core.parser_impl import parse_dsl
from mdsl.core.validator import ValidationResult, ValidationSeverity, validate_program
from mdsl.samples import SAMPLES


def check(source: str) -> ValidationResult:
    return validate_program(parse_dsl(source))


def error_codes(result: ValidationResult) -> list[str]:
    return [issue.code for issue in result.errors]


class TestScenarios:
    def test_minimal_unit_passes(self, unit_source: str):
        result = check(unit_source)
        assert result.passed
        assert result.summary.errors == 0

    def test_missing_id(self):
        result = check('FAMILY "F" { OUTLET "O" { identity { title = "X"; } } }')
        assert error_codes(result) == ["IDENTITY_NO_ID"]
        assert not result.passed

    def test_duplicate_outlet_id(self):
        result = check(
            'FAMILY "F" {\n'
            '  OUTLET "A" { identity { id = 200001; title = "A"; }; };\n'
            '  OUTLET "B" { identity { id = 200001; title = "B"; }; };\n'
            "}"
        )
        assert error_codes(result) == ["OUTLET_ID_DUPLICATE"]
        issue = result.errors[0]
        assert str(issue.position) == "3:3"
        assert issue.suggestion == "Previous outlet at 2:3"

    def test_link_to_missing_successor(self, two_outlets_source: str):
        source = two_outlets_source.replace(
            "};\n};\n",
            "};\n    DIACHRONIC_LINK x { predecessor = 100; successor = 300; };\n};\n",
        )
        result = check(source)
        assert error_codes(result) == ["RELATIONSHIP_SUCCESSOR_NOT_FOUND"]

    @pytest.mark.parametrize("name", sorted(SAMPLES))
    def test_bundled_samples_pass(self, name: str):
        assert check(SAMPLES[name]).passed


class TestResult:
    def test_warnings_do_not_fail(self):
        result = check("UNIT T { notes: TEXT }")
        assert result.passed
        assert [w.code for w in result.warnings] == ["UNIT_NO_PRIMARY_KEY"]

    @pytest.mark.parametrize(
        "source",
        [
            "UNIT T { }",
            'FAMILY "F" { }',
            'VOCABULARY V { A { 1: "x", 1: "y" } }',
            'IMPORT "../x";',
        ],
    )
    def test_passed_iff_no_errors(self, source: str):
        result = check(source)
        assert result.passed == (result.summary.errors == 0)

    def test_summary_counts(self):
        result = check('IMPORT "../shared";')
        assert result.summary.warnings == 1
        assert result.summary.info == 1
        assert {i.severity for i in result.issues} == {
            ValidationSeverity.WARNING,
            ValidationSeverity.INFO,
        }

    def test_context_path(self):
        result = check('FAMILY "Krone" { OUTLET "KZ" { identity { title = "X"; }; }; }')
        issue = result.by_code("IDENTITY_NO_ID")[0]
        assert issue.context_path == "Program > Family(Krone) > Outlet(KZ) > Identity"


class TestDeclarations:
    def test_redeclared_template(self):
        template = 'TEMPLATE "T" { metadata { a = 1; }; }'
        result = check(f"{template}\n{template}")
        assert error_codes(result) == ["TEMPLATE_REDECLARED"]
        assert result.errors[0].suggestion == "Previous declaration at 1:1"

    def test_duplicate_unit_field(self):
        result = check("UNIT T { id: ID PRIMARY KEY, id: TEXT }")
        assert error_codes(result) == ["UNIT_FIELD_DUPLICATE"]

    def test_zero_length_text(self):
        result = check("UNIT T { id: ID PRIMARY KEY, name: TEXT(0) }")
        assert error_codes(result) == ["FIELD_TEXT_ZERO_LENGTH"]

    def test_category_duplicate_value(self):
        result = check('UNIT T { id: ID PRIMARY KEY, k: CATEGORY("a", "a") }')
        assert error_codes(result) == ["FIELD_CATEGORY_DUPLICATE"]

    def test_vocabulary_duplicate_numeric_key(self):
        result = check('VOCABULARY V { A { 1: "x", 1.0: "y" } }')
        assert error_codes(result) == ["VOCAB_DUPLICATE_KEY"]

    def test_same_key_in_different_bodies_is_fine(self):
        result = check('VOCABULARY V { A { 1: "x" } B { 1: "y" } }')
        assert result.passed


class TestReferences:
    def test_template_not_found(self):
        result = check(
            'FAMILY "F" { OUTLET "O" EXTENDS TEMPLATE "Nope" '
            '{ identity { id = 1; title = "O"; }; }; }'
        )
        assert error_codes(result) == ["TEMPLATE_NOT_FOUND"]

    def test_based_on_unknown_outlet(self):
        result = check(
            'FAMILY "F" { OUTLET "O" BASED_ON 9 { identity { id = 1; title = "O"; }; }; }'
        )
        assert error_codes(result) == ["OUTLET_NOT_FOUND"]

    def test_based_on_later_outlet(self):
        result = check(
            'FAMILY "F" {\n'
            '  OUTLET "A" BASED_ON 2 { identity { id = 1; title = "A"; }; };\n'
            '  OUTLET "B" { identity { id = 2; title = "B"; }; };\n'
            "}"
        )
        assert result.passed

    def test_variable_not_found(self):
        result = check('TEMPLATE "T" { characteristics { lang = $missing; }; }')
        assert error_codes(result) == ["VARIABLE_NOT_FOUND"]

    def test_data_for_unknown_outlet(self):
        result = check("DATA FOR 42 { YEAR 2020 { }; }")
        assert error_codes(result) == ["DATA_OUTLET_NOT_FOUND"]

    def test_synchronous_outlets(self, two_outlets_source: str):
        source = two_outlets_source + (
            "SYNCHRONOUS_LINK s { outlet_1 = { id = 100; }; outlet_2 = { id = 7; }; }\n"
        )
        result = check(source)
        assert error_codes(result) == ["RELATIONSHIP_OUTLET2_NOT_FOUND"]


OUTLET_ONE = 'OUTLET "A" { identity { id = 1; title = "A"; }; }'

ERROR = ValidationSeverity.ERROR
WARNING = ValidationSeverity.WARNING


class TestIssueCodes:
    """Each source triggers one issue code with a fixed severity."""

    @pytest.mark.parametrize(
        ("code", "severity", "source"),
        [
            ("UNIT_EMPTY", ERROR, "UNIT T { }"),
            ("FIELD_TEXT_LARGE", WARNING, "UNIT T { id: ID PRIMARY KEY, body: TEXT(70000) }"),
            ("FIELD_CATEGORY_EMPTY", ERROR, "UNIT T { id: ID PRIMARY KEY, kind: CATEGORY() }"),
            ("VOCAB_EMPTY", ERROR, "VOCABULARY V { }"),
            ("FAMILY_EMPTY", WARNING, 'FAMILY "F" { }'),
            ("FAMILY_NO_OUTLETS", WARNING, 'FAMILY "F" {\n  // nothing yet\n}'),
            (
                "OUTLET_NO_IDENTITY",
                ERROR,
                'FAMILY "F" { OUTLET "O" { characteristics { lang = "de"; }; }; }',
            ),
            ("IDENTITY_NO_TITLE", WARNING, 'FAMILY "F" { OUTLET "O" { identity { id = 1; }; }; }'),
            (
                "LIFECYCLE_EMPTY",
                WARNING,
                'FAMILY "F" { OUTLET "O" { identity { id = 1; title = "O"; }; lifecycle { }; }; }',
            ),
            (
                "LIFECYCLE_DUPLICATE_STATUS",
                WARNING,
                'FAMILY "F" { OUTLET "O" { identity { id = 1; title = "O"; }; lifecycle {\n'
                '  status "active" FROM "1950-01-01" TO "1960-01-01" { };\n'
                '  status "active" FROM "1970-01-01" TO CURRENT { };\n'
                "}; }; }",
            ),
            (
                "CHARACTERISTICS_DUPLICATE",
                WARNING,
                'FAMILY "F" { OUTLET "O" { identity { id = 1; title = "O"; }; '
                'characteristics { lang = "de"; lang = "en"; }; }; }',
            ),
            ("DATA_EMPTY", WARNING, f'FAMILY "F" {{ {OUTLET_ONE}; DATA FOR 1 {{ }}; }}'),
            (
                "RELATIONSHIP_PREDECESSOR_NOT_FOUND",
                ERROR,
                f'FAMILY "F" {{ {OUTLET_ONE}; '
                "DIACHRONIC_LINK x { predecessor = 9; successor = 1; }; }",
            ),
            (
                "RELATIONSHIP_SELF_REFERENCE",
                WARNING,
                f'FAMILY "F" {{ {OUTLET_ONE}; '
                "DIACHRONIC_LINK x { predecessor = 1; successor = 1; }; }",
            ),
            ("IMPORT_NO_EXTENSION", WARNING, 'IMPORT "shared/base";'),
            ("VAR_REDECLARED", ERROR, 'LET region = "AT";\nLET region = "DE";'),
        ],
    )
    def test_code_and_severity(self, code: str, severity: ValidationSeverity, source: str):
        issues = check(source).by_code(code)
        assert issues, f"{code} not reported"
        assert {issue.severity for issue in issues} == {severity}


class TestFieldNameCase:
    def test_uppercase_identity_names_are_recognized(self):
        result = check('FAMILY "F" { OUTLET "O" { identity { ID = 5; Title = "x"; }; }; }')
        assert result.by_code("IDENTITY_NO_ID") == []
        assert result.by_code("IDENTITY_NO_TITLE") == []
        assert result.passed
