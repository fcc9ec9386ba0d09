"""Tests for validation report formatting."""

import csv
import io
import json

import pytest
from rich.console import Console

from mdsl.core.parser_impl import parse_dsl
from mdsl.core.position import SourcePosition
from mdsl.core.reporter import CSV_HEADER, ValidationReporter
from mdsl.core.validator import (
    ValidationIssue,
    ValidationResult,
    ValidationSeverity,
    validate_program,
)

MISSING_ID = 'FAMILY "F" { OUTLET "O" { identity { title = "Say \\"hi\\""; }; }; }'


@pytest.fixture
def failing_result() -> ValidationResult:
    return validate_program(parse_dsl(MISSING_ID))


@pytest.fixture
def clean_result(unit_source: str) -> ValidationResult:
    return validate_program(parse_dsl(unit_source))


class TestTextReport:
    def test_header_and_status(self, failing_result: ValidationResult):
        report = ValidationReporter.format_report(failing_result, "model.mdsl")
        lines = report.splitlines()
        assert lines[0] == "Validation Report for: model.mdsl"
        assert lines[1] == "=" * 50
        assert "Status: FAILED" in lines
        assert "Errors: 1" in lines

    def test_issue_lines(self, failing_result: ValidationResult):
        report = ValidationReporter.format_report(failing_result)
        assert "[ERROR] IDENTITY_NO_ID (1:27): Identity block missing required 'id' field" in report
        assert "   Suggestion: Add 'id = <number>' to identity block" in report
        assert "   Context: Program > Family(F) > Outlet(O) > Identity" in report

    def test_clean_report(self, clean_result: ValidationResult):
        report = ValidationReporter.format_report(clean_result)
        assert report.startswith("Validation Report\n")
        assert "Status: PASSED" in report
        assert report.endswith("No issues found!\n")


class TestJsonReport:
    def test_structure(self, failing_result: ValidationResult):
        data = json.loads(ValidationReporter.format_json(failing_result))
        assert data["passed"] is False
        assert data["summary"]["errors"] == 1
        first = next(i for i in data["issues"] if i["code"] == "IDENTITY_NO_ID")
        assert first["severity"] == "Error"
        assert first["code"] == "IDENTITY_NO_ID"
        assert first["position"] == {"line": 1, "column": 27}

    def test_suggestion_omitted_when_absent(self):
        result = ValidationResult(
            issues=[
                ValidationIssue(
                    severity=ValidationSeverity.INFO,
                    code="X",
                    message="m",
                    position=SourcePosition.start(),
                )
            ]
        )
        issue = ValidationReporter.to_dict(result)["issues"][0]
        assert "suggestion" not in issue


class TestCsvReport:
    def test_header(self, clean_result: ValidationResult):
        assert ValidationReporter.format_csv(clean_result) == CSV_HEADER + "\n"

    def test_rows_parse_back(self, failing_result: ValidationResult):
        rows = list(csv.reader(io.StringIO(ValidationReporter.format_csv(failing_result))))
        assert rows[0] == CSV_HEADER.split(",")
        error_row = next(row for row in rows[1:] if row[1] == "IDENTITY_NO_ID")
        assert error_row[:4] == ["Error", "IDENTITY_NO_ID", "1", "27"]
        assert error_row[6] == "Program > Family(F) > Outlet(O) > Identity"

    def test_quotes_are_doubled(self):
        result = validate_program(parse_dsl('FAMILY "say \\"x\\"" { }'))
        text = ValidationReporter.format_csv(result)
        assert '""x""' in text


class TestColoredReport:
    def test_renders_same_content(self, failing_result: ValidationResult):
        console = Console(file=io.StringIO(), color_system=None, width=200)
        ValidationReporter.print_colored_report(failing_result, "model.mdsl", console)
        output = console.file.getvalue()
        assert "Validation Report for: model.mdsl" in output
        assert "[ERROR] IDENTITY_NO_ID" in output
