"""
mdsl CLI.

Commands:
- lex / parse: inspect the front end
- validate: semantic checks with text, JSON or CSV reports
- sql / sql-anmi / cypher: emit one artifact for one file
- build: run every configured emitter over every configured source
- test: self-check against the bundled sample programs
"""

import logging
import platform
import sys
from pathlib import Path

import typer

from mdsl._version import get_version
from mdsl.cli_ui import (
    console,
    print_error,
    print_info,
    print_step,
    print_success,
    print_warning,
    statement_table,
)
from mdsl.core import ast
from mdsl.core.config import DEFAULT_CONFIG_NAME, load_config
from mdsl.core.errors import MdslError
from mdsl.core.ir import IRProgram, format_number
from mdsl.core.lexer import tokenize
from mdsl.core.lowering import lower_program
from mdsl.core.parser import parse_file
from mdsl.core.parser_impl import parse_dsl
from mdsl.core.reporter import ValidationReporter
from mdsl.core.validator import ValidationResult, validate_program
from mdsl.emitters import GENERATORS, get_generator
from mdsl.samples import SAMPLES

REPORT_FORMATS = ("text", "json", "csv")


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"mdsl version {get_version()}")
        typer.echo(f"  Python:    {platform.python_implementation()} {platform.python_version()}")
        typer.echo(f"  Targets:   {', '.join(GENERATORS)}")
        raise typer.Exit()


# =============================================================================
# Main Application
# =============================================================================

app = typer.Typer(
    help="""mdsl – compiler for the MediaLanguage DSL

Command Types:
  • Inspection: lex, parse, validate
    → Operate on a single .mdsl file

  • Generation: sql, sql-anmi, cypher, build
    → Validate first, then emit SQL or graph scripts
""",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and environment information",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """mdsl CLI main callback for global options."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# =============================================================================
# Shared helpers
# =============================================================================


def _fail(message: str) -> typer.Exit:
    typer.echo(f"Error: {message}", err=True)
    return typer.Exit(code=1)


def _read_source(file: Path) -> str:
    if not file.is_file():
        raise _fail(f"File not found: {file}")
    return file.read_text(encoding="utf-8")


def _load_program(file: Path) -> ast.Program:
    """Parse ``file``; lexer and parser errors end the command."""
    if not file.is_file():
        raise _fail(f"File not found: {file}")
    try:
        return parse_file(file)
    except MdslError as e:
        raise _fail(str(e)) from e


def _compile(file: Path) -> tuple[IRProgram, ValidationResult]:
    program = _load_program(file)
    return lower_program(program), validate_program(program)


def _statement_name(statement: ast.Statement) -> str:
    if isinstance(statement, ast.ImportStatement):
        return statement.path
    if isinstance(statement, ast.DataDeclaration):
        return f"FOR {format_number(statement.target_id)}"
    if isinstance(statement, ast.Comment):
        text = statement.text.strip()
        return text if len(text) <= 40 else text[:37] + "..."
    return statement.name


def _emit(file: Path, target: str, output: Path | None) -> None:
    """Validate ``file`` and run one generator over it."""
    ir_program, result = _compile(file)
    if not result.passed:
        typer.echo(ValidationReporter.format_report(result, file.name), nl=False)
        raise _fail(f"Validation failed with {result.summary.errors} error(s); nothing generated")

    generator = get_generator(target)(ir_program)
    if output is None:
        gen_result = generator.generate()
    else:
        gen_result = generator.write(output)

    for warning in gen_result.warnings:
        print_warning(warning)
    if not gen_result.success:
        raise _fail(gen_result.errors[0])

    if output is None:
        typer.echo(gen_result.content, nl=False)
    else:
        print_success(f"Wrote {output}")


# =============================================================================
# Inspection commands
# =============================================================================


@app.command()
def lex(file: Path = typer.Argument(..., help="MDSL source file")) -> None:
    """Print the token stream, one token per line."""
    text = _read_source(file)
    try:
        tokens = tokenize(text, file)
    except MdslError as e:
        raise _fail(str(e)) from e

    for token in tokens:
        typer.echo(repr(token))


@app.command()
def parse(
    file: Path = typer.Argument(..., help="MDSL source file"),
    json_output: bool = typer.Option(False, "--json", help="Dump the AST as JSON"),
) -> None:
    """Parse a file and summarize its top-level statements."""
    program = _load_program(file)

    if json_output:
        typer.echo(program.model_dump_json(indent=2))
        return

    rows = [
        (statement.kind, _statement_name(statement), str(statement.position))
        for statement in program.statements
    ]
    console.print(statement_table(rows, title=file.name))
    print_info(f"{len(rows)} top-level statement(s)")


@app.command()
def validate(
    file: Path = typer.Argument(..., help="MDSL source file"),
    format: str = typer.Option("text", "--format", "-f", help="Report format: text, json or csv"),
    no_color: bool = typer.Option(False, "--no-color", help="Plain text report"),
) -> None:
    """
    Run semantic validation and print a report.

    Exits 1 when the report contains at least one error.
    """
    if format not in REPORT_FORMATS:
        raise _fail(f"Unknown format '{format}'; expected one of {', '.join(REPORT_FORMATS)}")

    program = _load_program(file)
    result = validate_program(program)

    if format == "json":
        typer.echo(ValidationReporter.format_json(result))
    elif format == "csv":
        typer.echo(ValidationReporter.format_csv(result), nl=False)
    elif no_color:
        typer.echo(ValidationReporter.format_report(result, file.name), nl=False)
    else:
        ValidationReporter.print_colored_report(result, file.name, console)

    if not result.passed:
        raise typer.Exit(code=1)


# =============================================================================
# Generation commands
# =============================================================================


@app.command()
def sql(
    file: Path = typer.Argument(..., help="MDSL source file"),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Write to file instead of stdout"
    ),
) -> None:
    """Generate the generic relational schema and data."""
    _emit(file, "sql", output)


@app.command(name="sql-anmi")
def sql_anmi(
    file: Path = typer.Argument(..., help="MDSL source file"),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Write to file instead of stdout"
    ),
) -> None:
    """Generate SQL in the ANMI graphv3 shape."""
    _emit(file, "sql_anmi", output)


@app.command()
def cypher(
    file: Path = typer.Argument(..., help="MDSL source file"),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Write to file instead of stdout"
    ),
) -> None:
    """Generate a Cypher graph script."""
    _emit(file, "cypher", output)


@app.command()
def build(
    config: Path = typer.Option(
        Path(DEFAULT_CONFIG_NAME), "--config", "-c", help="Path to mdsl.toml"
    ),
) -> None:
    """
    Run every enabled emitter over every configured source.

    Outputs land in the configured directory as ``<stem><extension>``.
    """
    try:
        cfg = load_config(config.resolve())
    except MdslError as e:
        raise _fail(e.message) from e

    sources = cfg.source_files()
    if not sources:
        raise _fail(f"No sources configured in {config}")
    targets = cfg.output.enabled_targets()
    out_dir = cfg.output_directory()

    for index, source in enumerate(sources, 1):
        print_step(index, len(sources), f"Compiling {source.name}")
        ir_program, result = _compile(source)

        if not result.passed:
            typer.echo(ValidationReporter.format_report(result, source.name), nl=False)
            raise _fail(f"Validation failed for {source}")
        if cfg.validation.fail_on_warnings and result.summary.warnings:
            typer.echo(ValidationReporter.format_report(result, source.name), nl=False)
            raise _fail(
                f"{result.summary.warnings} warning(s) in {source} and fail_on_warnings is set"
            )

        for target in targets:
            generator = get_generator(target)(ir_program)
            gen_result = generator.write(out_dir / f"{source.stem}{generator.extension}")
            if not gen_result.success:
                raise _fail(f"{target}: {gen_result.errors[0]}")
            for path in gen_result.files_created:
                print_success(f"{target}: {path}")

    print_info(f"Built {len(sources)} source(s) for {len(targets)} target(s)")


@app.command()
def test() -> None:
    """Lex, parse, lower and validate the bundled sample programs."""
    failures = 0
    for name, source in SAMPLES.items():
        try:
            program = parse_dsl(source)
            lower_program(program)
        except MdslError as e:
            print_error(f"{name}: {e.message}")
            failures += 1
            continue

        result = validate_program(program)
        if result.passed:
            print_success(f"{name}: {len(program.statements)} statement(s), 0 errors")
        else:
            print_error(f"{name}: {result.summary.errors} validation error(s)")
            for issue in result.errors:
                typer.echo(f"    {ValidationReporter.format_issue(issue)}")
            failures += 1

    if failures:
        raise _fail(f"{failures} of {len(SAMPLES)} sample(s) failed")
    print_success(f"All {len(SAMPLES)} samples passed")


# =============================================================================
# Main Entry Point
# =============================================================================


def main(argv: list[str] | None = None) -> None:
    app(args=argv, standalone_mode=True)


if __name__ == "__main__":
    main(sys.argv[1:])
