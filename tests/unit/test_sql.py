"""Tests for the generic SQL emitter."""

from pathlib import Path

import pytest

from mdsl.core import ir
from mdsl.core.errors import CodeGenError, make_unsupported_feature
from mdsl.core.lowering import lower_program
from mdsl.core.parser_impl import parse_dsl
from mdsl.emitters import Generator, SqlGenerator, generate_sql, get_generator, run_generator
from mdsl.samples import EVENT_SAMPLE


def sql_for(source: str) -> str:
    return generate_sql(lower_program(parse_dsl(source)))


def lines_starting(text: str, prefix: str) -> list[str]:
    return [line for line in text.splitlines() if line.startswith(prefix)]


class TestSchema:
    def test_unit_table(self, unit_source: str):
        sql = sql_for(unit_source)
        assert (
            "CREATE TABLE mediaoutlet (\n"
            "    id INTEGER PRIMARY KEY NOT NULL,\n"
            "    name VARCHAR(120),\n"
            "    sector DECIMAL(15,2)\n"
            ");"
        ) in sql

    def test_field_types(self):
        sql = sql_for('UNIT T { a: TEXT, b: BOOLEAN, c: CATEGORY("x") }')
        assert "    a TEXT,\n    b BOOLEAN,\n    c VARCHAR(100)\n" in sql

    def test_core_tables_present(self, unit_source: str):
        sql = sql_for(unit_source)
        for table in ("media_outlets", "families", "market_data", "event_entities"):
            assert f"CREATE TABLE {table} (" in sql

    def test_inline_column_comment_follows_separator(self, unit_source: str):
        sql = sql_for(unit_source)
        assert "    relationship_type VARCHAR(50) NOT NULL, -- 'diachronic' or 'synchronous'" in sql


class TestRows:
    def test_one_outlet_insert_per_outlet(self, family_ir: ir.IRProgram):
        sql = generate_sql(family_ir)
        inserts = lines_starting(sql, "INSERT INTO media_outlets")
        assert len(inserts) == len(list(family_ir.outlets()))

    def test_one_market_data_insert_per_metric(self, family_ir: ir.IRProgram):
        sql = generate_sql(family_ir)
        metrics = [m for b in family_ir.data_blocks() for y in b.years for m in y.metrics]
        assert len(lines_starting(sql, "INSERT INTO market_data")) == len(metrics)

    def test_inheritance_columns(self, family_ir: ir.IRProgram):
        first, second = lines_starting(generate_sql(family_ir), "INSERT INTO media_outlets")
        assert "(SELECT id FROM templates WHERE name = 'AustrianNewspaper'), NULL);" in first
        assert second.endswith("NULL, 200001);")

    def test_lifecycle_keeps_current(self, two_outlets_source: str):
        sql = sql_for(two_outlets_source)
        (row,) = lines_starting(sql, "INSERT INTO outlet_lifecycle")
        assert "VALUES (100, 'active', '1959-01-01', 'CURRENT', 'known', NULL, NULL);" in row

    def test_vocabulary_keys_are_strings(self):
        sql = sql_for('VOCABULARY Kinds { BODY { 1: "A", "x": "B" } }')
        rows = lines_starting(sql, "INSERT INTO kinds")
        assert rows == [
            "INSERT INTO kinds (id, code, description) VALUES (1, '1', 'A');",
            "INSERT INTO kinds (id, code, description) VALUES (2, 'x', 'B');",
        ]

    def test_quotes_are_escaped(self):
        sql = sql_for('FAMILY "O\'Brien" { OUTLET "It\'s" { id = 7; }; }')
        assert "VALUES (7, 'It''s', (SELECT id FROM families WHERE name = 'O''Brien')" in sql

    def test_relationship_to_unknown_outlet_still_emitted(self, two_outlets_source: str):
        source = two_outlets_source + "DIACHRONIC_LINK x { predecessor = 100; successor = 300; }\n"
        sql = sql_for(source)
        (row,) = lines_starting(sql, "INSERT INTO diachronic_relationships")
        assert ", 100, 300, " in row

    def test_events(self):
        sql = sql_for(EVENT_SAMPLE)
        assert (
            "INSERT INTO events (id, name, event_type, event_date, status) "
            "VALUES (1, 'mediaprint_founding', 'joint_venture', '1988-01-01', 'completed');"
        ) in sql
        assert "VALUES (1, 'kurier', 300001, 'partner', 100, 50);" in sql
        assert "VALUES (1, 'shared_printing', 'true');" in sql


class TestGenerator:
    def test_deterministic(self, family_ir: ir.IRProgram):
        assert generate_sql(family_ir) == generate_sql(family_ir)

    def test_write_creates_directories(self, family_ir: ir.IRProgram, tmp_path: Path):
        target = tmp_path / "out" / "model.sql"
        result = SqlGenerator(family_ir).write(target)
        assert result.success
        assert result.files_created == [target]
        assert target.read_text(encoding="utf-8") == generate_sql(family_ir)

    def test_lookup(self):
        assert get_generator("sql") is SqlGenerator

    def test_unknown_target(self):
        with pytest.raises(CodeGenError) as exc_info:
            get_generator("xml")
        assert exc_info.value.kind == "invalid_target"
        assert "cypher, sql, sql_anmi" in exc_info.value.message


class TestWarnings:
    def test_object_characteristic_is_reported(self):
        program = lower_program(
            parse_dsl(
                'FAMILY "F" { OUTLET "Krone" { identity { id = 1; title = "Krone"; }; '
                'characteristics { distribution = { area = "national"; }; language = "de"; }; }; }'
            )
        )
        result = SqlGenerator(program).generate()
        assert result.success
        assert result.warnings == [
            "Outlet 'Krone': characteristic 'distribution' is emitted as 'complex_object'"
        ]
        assert "'complex_object'" in result.content

    def test_template_placeholder_is_reported(self):
        program = lower_program(
            parse_dsl('TEMPLATE "Daily" { characteristics { layout = { columns = 5; }; }; }')
        )
        assert SqlGenerator(program).generate().warnings == [
            "Template 'Daily': characteristic 'layout' is emitted as 'complex_object'"
        ]

    def test_warnings_do_not_accumulate(self, family_ir: ir.IRProgram):
        generator = SqlGenerator(family_ir)
        assert generator.generate().warnings == []
        assert generator.generate().warnings == []


class UnsupportedGenerator(Generator):
    name = "broken"

    def build(self) -> str:
        raise make_unsupported_feature("field type BLOB", self.name)


class TestFailures:
    def test_generate_captures_error(self, family_ir: ir.IRProgram):
        result = UnsupportedGenerator(family_ir).generate()
        assert not result.success
        assert result.content == ""
        assert result.errors == ["Unsupported feature 'field type BLOB' for target 'broken' at 1:1"]

    def test_write_skips_file_on_error(self, family_ir: ir.IRProgram, tmp_path: Path):
        result = UnsupportedGenerator(family_ir).write(tmp_path / "out.txt")
        assert result.files_created == []
        assert not (tmp_path / "out.txt").exists()

    def test_run_generator_raises(self, family_ir: ir.IRProgram):
        with pytest.raises(CodeGenError) as exc_info:
            run_generator(UnsupportedGenerator(family_ir))
        assert exc_info.value.kind == "generation_failure"
        assert exc_info.value.message.startswith("Generation failure at 1:1: Unsupported feature")
