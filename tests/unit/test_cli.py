"""Tests for CLI commands."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from mdsl.cli import app
from mdsl.samples import FAMILY_SAMPLE

MISSING_ID = 'FAMILY "F" { OUTLET "O" { identity { title = "X"; } } }'

OBJECT_CHARACTERISTIC = """\
FAMILY "F" {
    OUTLET "Krone" {
        identity { id = 1; title = "Krone"; };
        characteristics { distribution = { primary_area = "national"; }; };
    };
};
"""


@pytest.fixture
def cli_runner():
    """Return a CLI test runner."""
    return CliRunner()


@pytest.fixture
def family_file(write_mdsl) -> Path:
    return write_mdsl(FAMILY_SAMPLE, "krone.mdsl")


@pytest.fixture
def test_project(tmp_path: Path):
    """Create a project with two sources and a manifest."""
    models = tmp_path / "models"
    models.mkdir()
    (models / "krone.mdsl").write_text(FAMILY_SAMPLE, encoding="utf-8")
    (models / "units.mdsl").write_text(
        "UNIT MediaOutlet { id: ID PRIMARY KEY, name: TEXT(120) }\n", encoding="utf-8"
    )

    manifest = tmp_path / "mdsl.toml"
    manifest.write_text(
        """
[project]
name = "austria"

[sources]
paths = ["models/krone.mdsl", "models/units.mdsl"]

[output]
directory = "out"
sql_anmi = true
""",
        encoding="utf-8",
    )
    return tmp_path


class TestInspection:
    def test_version(self, cli_runner: CliRunner):
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert result.stdout.startswith("mdsl version ")
        assert "sql, sql_anmi, cypher" in result.stdout

    def test_lex(self, cli_runner: CliRunner, write_mdsl):
        path = write_mdsl("UNIT T { }")
        result = cli_runner.invoke(app, ["lex", str(path)])
        assert result.exit_code == 0
        assert result.stdout.splitlines()[0] == "Token(UNIT, 'UNIT', 1:1)"
        assert result.stdout.splitlines()[-1].startswith("Token(EOF")

    def test_lex_error(self, cli_runner: CliRunner, write_mdsl):
        path = write_mdsl("UNIT % { }")
        result = cli_runner.invoke(app, ["lex", str(path)])
        assert result.exit_code == 1
        assert "Unexpected character '%' at 1:6" in result.output

    def test_parse_summary(self, cli_runner: CliRunner, family_file: Path):
        result = cli_runner.invoke(app, ["parse", str(family_file)])
        assert result.exit_code == 0
        assert "4 top-level statement(s)" in result.stdout

    def test_parse_json(self, cli_runner: CliRunner, write_mdsl):
        path = write_mdsl('IMPORT "a.mdsl";')
        result = cli_runner.invoke(app, ["parse", str(path), "--json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["statements"][0]["kind"] == "import"
        assert data["statements"][0]["path"] == "a.mdsl"

    def test_parse_error(self, cli_runner: CliRunner, write_mdsl):
        path = write_mdsl("UNIT { }")
        result = cli_runner.invoke(app, ["parse", str(path)])
        assert result.exit_code == 1
        assert "Unexpected token '{' at 1:6, expected identifier" in result.output

    def test_missing_file(self, cli_runner: CliRunner, tmp_path: Path):
        result = cli_runner.invoke(app, ["parse", str(tmp_path / "nope.mdsl")])
        assert result.exit_code == 1
        assert "File not found" in result.output


class TestValidate:
    def test_valid_file(self, cli_runner: CliRunner, family_file: Path):
        result = cli_runner.invoke(app, ["validate", str(family_file), "--no-color"])
        assert result.exit_code == 0
        assert "Status: PASSED" in result.stdout

    def test_errors_exit_one(self, cli_runner: CliRunner, write_mdsl):
        path = write_mdsl(MISSING_ID)
        result = cli_runner.invoke(app, ["validate", str(path), "--no-color"])
        assert result.exit_code == 1
        assert "IDENTITY_NO_ID" in result.stdout

    def test_json_format(self, cli_runner: CliRunner, write_mdsl):
        path = write_mdsl(MISSING_ID)
        result = cli_runner.invoke(app, ["validate", str(path), "--format", "json"])
        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert data["passed"] is False
        assert data["summary"]["errors"] == 1

    def test_csv_format(self, cli_runner: CliRunner, family_file: Path):
        result = cli_runner.invoke(app, ["validate", str(family_file), "-f", "csv"])
        assert result.exit_code == 0
        header = result.stdout.splitlines()[0]
        assert header == "Severity,Code,Line,Column,Message,Suggestion,Context"

    def test_colored_report(self, cli_runner: CliRunner, family_file: Path):
        result = cli_runner.invoke(app, ["validate", str(family_file)])
        assert result.exit_code == 0
        assert "Validation Report for: krone.mdsl" in result.stdout

    def test_unknown_format(self, cli_runner: CliRunner, family_file: Path):
        result = cli_runner.invoke(app, ["validate", str(family_file), "--format", "xml"])
        assert result.exit_code == 1
        assert "Unknown format 'xml'" in result.output


class TestGeneration:
    def test_sql_to_stdout(self, cli_runner: CliRunner, family_file: Path):
        result = cli_runner.invoke(app, ["sql", str(family_file)])
        assert result.exit_code == 0
        assert result.stdout.startswith("-- Generated SQL from MediaLanguage DSL")

    def test_generation_warnings_are_reported(self, cli_runner: CliRunner, write_mdsl):
        path = write_mdsl(OBJECT_CHARACTERISTIC)
        result = cli_runner.invoke(app, ["sql", str(path)])
        assert result.exit_code == 0
        assert "characteristic 'distribution' is emitted as 'complex_object'" in result.output
        assert "-- Generated SQL from MediaLanguage DSL" in result.stdout

    def test_cypher_to_file(self, cli_runner: CliRunner, family_file: Path, tmp_path: Path):
        output = tmp_path / "graph" / "krone.cypher"
        result = cli_runner.invoke(app, ["cypher", str(family_file), "-o", str(output)])
        assert result.exit_code == 0
        assert "CREATE (o:Outlet {id: 200001" in output.read_text(encoding="utf-8")

    def test_sql_anmi(self, cli_runner: CliRunner, family_file: Path):
        result = cli_runner.invoke(app, ["sql-anmi", str(family_file)])
        assert result.exit_code == 0
        assert "graphv3.mo_constant" in result.stdout

    def test_invalid_program_generates_nothing(
        self, cli_runner: CliRunner, write_mdsl, tmp_path: Path
    ):
        path = write_mdsl(MISSING_ID)
        output = tmp_path / "out.sql"
        result = cli_runner.invoke(app, ["sql", str(path), "--output", str(output)])
        assert result.exit_code == 1
        assert "Validation failed with 1 error(s); nothing generated" in result.output
        assert not output.exists()


class TestBuild:
    def test_build_project(self, cli_runner: CliRunner, test_project: Path):
        manifest = test_project / "mdsl.toml"
        result = cli_runner.invoke(app, ["build", "--config", str(manifest)])
        assert result.exit_code == 0, result.output
        out = test_project / "out"
        assert sorted(p.name for p in out.iterdir()) == [
            "krone.anmi.sql",
            "krone.cypher",
            "krone.sql",
            "units.anmi.sql",
            "units.cypher",
            "units.sql",
        ]
        assert "Built 2 source(s) for 3 target(s)" in result.stdout

    def test_build_fails_on_warnings(self, cli_runner: CliRunner, test_project: Path):
        manifest = test_project / "mdsl.toml"
        manifest.write_text(
            manifest.read_text(encoding="utf-8") + "\n[validation]\nfail_on_warnings = true\n",
            encoding="utf-8",
        )
        (test_project / "models" / "units.mdsl").write_text("UNIT T { a: TEXT }\n")
        result = cli_runner.invoke(app, ["build", "-c", str(manifest)])
        assert result.exit_code == 1
        assert "fail_on_warnings is set" in result.output

    def test_build_without_sources(self, cli_runner: CliRunner, tmp_path: Path):
        manifest = tmp_path / "mdsl.toml"
        manifest.write_text('[project]\nname = "empty"\n', encoding="utf-8")
        result = cli_runner.invoke(app, ["build", "--config", str(manifest)])
        assert result.exit_code == 1
        assert "No sources configured" in result.output


class TestSelfCheck:
    def test_samples_pass(self, cli_runner: CliRunner):
        result = cli_runner.invoke(app, ["test"])
        assert result.exit_code == 0
        assert "All 4 samples passed" in result.stdout
        assert "family: 4 statement(s), 0 errors" in result.stdout
