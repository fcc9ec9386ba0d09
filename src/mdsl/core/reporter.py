"""
Report generation for validation results.

Formats a ValidationResult as plain text, JSON, CSV or a colored rich
rendering. All formatters are pure functions of the result.
"""

from __future__ import annotations

import json
from typing import Any

from rich.console import Console
from rich.style import Style
from rich.text import Text

from .validator import ValidationIssue, ValidationResult, ValidationSeverity

CSV_HEADER = "Severity,Code,Line,Column,Message,Suggestion,Context"

SEVERITY_STYLES = {
    ValidationSeverity.ERROR: Style(color="red", bold=True),
    ValidationSeverity.WARNING: Style(color="yellow", bold=True),
    ValidationSeverity.INFO: Style(color="cyan", bold=True),
}


def _csv_quote(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


class ValidationReporter:
    """Formats validation results for humans and tools."""

    @staticmethod
    def format_issue(issue: ValidationIssue) -> str:
        """
        Format one issue as ``[ERROR] CODE (line:col): message``.

        Suggestion and context follow on indented lines when present.
        """
        text = (
            f"[{issue.severity.value.upper()}] {issue.code} "
            f"({issue.position.line}:{issue.position.column}): {issue.message}"
        )
        if issue.suggestion:
            text += f"\n   Suggestion: {issue.suggestion}"
        if issue.context_path:
            text += f"\n   Context: {issue.context_path}"
        return text

    @classmethod
    def format_report(cls, result: ValidationResult, file_name: str | None = None) -> str:
        """
        Generate the plain text report.

        Args:
            result: Validation result to format
            file_name: Optional source name for the header

        Returns:
            Report text: header, summary counts and a numbered issue list
        """
        lines: list[str] = []
        if file_name:
            lines.append(f"Validation Report for: {file_name}")
        else:
            lines.append("Validation Report")
        lines.append("=" * 50)

        summary = result.summary
        lines.append(f"Status: {'PASSED' if result.passed else 'FAILED'}")
        lines.append(f"Total Constructs: {summary.total_constructs}")
        lines.append(f"Errors: {summary.errors}")
        lines.append(f"Warnings: {summary.warnings}")
        lines.append(f"Info: {summary.info}")
        lines.append("")

        if result.issues:
            lines.append("Issues Found:")
            lines.append("-" * 30)
            for i, issue in enumerate(result.issues, 1):
                lines.append(f"{i}. {cls.format_issue(issue)}")
        else:
            lines.append("No issues found!")

        return "\n".join(lines) + "\n"

    @staticmethod
    def to_dict(result: ValidationResult) -> dict[str, Any]:
        issues: list[dict[str, Any]] = []
        for issue in result.issues:
            entry: dict[str, Any] = {
                "severity": issue.severity.value,
                "code": issue.code,
                "message": issue.message,
                "position": {"line": issue.position.line, "column": issue.position.column},
            }
            if issue.suggestion is not None:
                entry["suggestion"] = issue.suggestion
            issues.append(entry)

        return {
            "passed": result.passed,
            "summary": {
                "errors": result.summary.errors,
                "warnings": result.summary.warnings,
                "info": result.summary.info,
                "total_constructs": result.summary.total_constructs,
            },
            "issues": issues,
        }

    @classmethod
    def format_json(cls, result: ValidationResult) -> str:
        return json.dumps(cls.to_dict(result), indent=2)

    @staticmethod
    def format_csv(result: ValidationResult) -> str:
        """One header line plus one row per issue; text columns are always quoted."""
        rows = [CSV_HEADER]
        for issue in result.issues:
            rows.append(
                ",".join(
                    [
                        issue.severity.value,
                        issue.code,
                        str(issue.position.line),
                        str(issue.position.column),
                        _csv_quote(issue.message),
                        _csv_quote(issue.suggestion or ""),
                        _csv_quote(issue.context_path),
                    ]
                )
            )
        return "\n".join(rows) + "\n"

    @staticmethod
    def render_colored(result: ValidationResult, file_name: str | None = None) -> Text:
        """Build the colored report as rich Text."""
        text = Text()
        header = f"Validation Report for: {file_name}" if file_name else "Validation Report"
        text.append(header + "\n", style="bold")
        text.append("=" * 50 + "\n")

        text.append("Status: ")
        if result.passed:
            text.append("PASSED\n", style=Style(color="green", bold=True))
        else:
            text.append("FAILED\n", style=Style(color="red", bold=True))

        summary = result.summary
        text.append(f"Total Constructs: {summary.total_constructs}\n")
        text.append(f"Errors: {summary.errors}\n", style=SEVERITY_STYLES[ValidationSeverity.ERROR])
        text.append(
            f"Warnings: {summary.warnings}\n", style=SEVERITY_STYLES[ValidationSeverity.WARNING]
        )
        text.append(f"Info: {summary.info}\n\n", style=SEVERITY_STYLES[ValidationSeverity.INFO])

        if not result.issues:
            text.append("No issues found!\n", style=Style(color="green", bold=True))
            return text

        text.append("Issues Found:\n", style="bold")
        text.append("-" * 30 + "\n")
        for i, issue in enumerate(result.issues, 1):
            text.append(f"{i}. ")
            text.append(
                f"[{issue.severity.value.upper()}]", style=SEVERITY_STYLES[issue.severity]
            )
            text.append(f" {issue.code}", style="bold")
            text.append(f" ({issue.position.line}:{issue.position.column}): {issue.message}\n")
            if issue.suggestion:
                text.append("   Suggestion: ", style="green")
                text.append(issue.suggestion + "\n")
            if issue.context_path:
                text.append(f"   Context: {issue.context_path}\n", style="bright_black")
        return text

    @classmethod
    def print_colored_report(
        cls,
        result: ValidationResult,
        file_name: str | None = None,
        console: Console | None = None,
    ) -> None:
        (console or Console()).print(cls.render_colored(result, file_name), end="")
