"""Tests for the MDSL parser."""

from pathlib import Path

import pytest

from mdsl.core import ast
from mdsl.core.errors import ParseError
from mdsl.core.lexer import tokenize
from mdsl.core.parser import parse_file
from mdsl.core.parser_impl import Parser, parse_dsl


def only(source: str):
    program = parse_dsl(source)
    statements = [s for s in program.statements if not isinstance(s, ast.Comment)]
    assert len(statements) == 1
    return statements[0]


def walk_nodes(node):
    """Yield every pydantic AST node below ``node``."""
    yield node
    for name in type(node).model_fields:
        value = getattr(node, name)
        children = value if isinstance(value, list) else [value]
        for child in children:
            if isinstance(child, ast.Node):
                yield from walk_nodes(child)


class TestUnits:
    def test_minimal_unit(self, unit_source: str):
        unit = only(unit_source)
        assert isinstance(unit, ast.UnitDeclaration)
        assert unit.name == "MediaOutlet"
        assert [f.name for f in unit.fields] == ["id", "name", "sector"]
        assert unit.fields[0].is_primary_key
        assert unit.fields[0].field_type.kind == ast.FieldTypeKind.ID
        assert unit.fields[1].field_type.length == 120
        assert unit.fields[2].field_type.kind == ast.FieldTypeKind.NUMBER

    def test_trailing_comma_and_category(self):
        unit = only('UNIT T { kind: CATEGORY("Daily", "Weekly"), flag: BOOLEAN, }')
        assert unit.fields[0].field_type.values == ["Daily", "Weekly"]
        assert unit.fields[1].field_type.kind == ast.FieldTypeKind.BOOLEAN
        assert not unit.fields[1].is_primary_key

    def test_text_without_length(self):
        unit = only("UNIT T { notes: TEXT }")
        assert unit.fields[0].field_type.length is None


class TestVocabularies:
    def test_keys_keep_their_kind(self):
        vocab = only('VOCABULARY V { BODY { 1: "A", "x": "B" } }')
        entries = vocab.bodies[0].entries
        assert entries[0].key == 1.0
        assert entries[1].key == "x"

    def test_bare_form(self):
        vocab = only('SECTOR { 1: "Daily" }')
        assert isinstance(vocab, ast.VocabularyDeclaration)
        assert vocab.name == "SECTOR"
        assert vocab.bodies[0].name == "SECTOR"


class TestFamilies:
    def test_family_members(self, family_program: ast.Program):
        family = family_program.of_kind("family")[0]
        kinds = [m.kind for m in family.members]
        assert kinds == [
            "comment",
            "outlet",
            "outlet",
            "data",
            "diachronic_link",
            "synchronous_link",
        ]
        assert family.members[0].text == "@comment: Austria's largest daily"

    def test_group_synonym(self):
        family = only('GROUP "G" { }')
        assert isinstance(family, ast.FamilyDeclaration)
        assert family.name == "G"

    def test_inheritance_clauses(self, family_program: ast.Program):
        first, second = family_program.of_kind("family")[0].outlets()
        assert isinstance(first.inheritance, ast.ExtendsTemplate)
        assert first.inheritance.template == "AustrianNewspaper"
        assert isinstance(second.inheritance, ast.BasedOn)
        assert second.inheritance.outlet_id == 200001

    def test_bare_id_promoted_to_identity(self):
        family = only('FAMILY "F" { OUTLET "O" { id = 5; }; }')
        outlet = family.outlets()[0]
        assert isinstance(outlet.blocks[0], ast.IdentityBlock)
        assert outlet.declared_id() == 5

    def test_outlet_reference(self):
        family = only('FAMILY "F" { OUTLET_REF 300001 ["Heute"] { anything = 1; }; }')
        reference = family.members[0]
        assert isinstance(reference, ast.OutletReference)
        assert reference.outlet_id == 300001
        assert reference.name == "Heute"


class TestBlocks:
    def test_lifecycle_with_current(self, two_outlets_source: str):
        outlet = only(two_outlets_source).outlets()[0]
        lifecycle = next(b for b in outlet.blocks if isinstance(b, ast.LifecycleBlock))
        entry = lifecycle.entries[0]
        assert entry.status == "active"
        assert entry.start.value == "1959-01-01"
        assert entry.end.is_current
        assert entry.attributes[0].name == "precision_start"

    def test_object_characteristic_is_placeholder(self):
        family = only(
            'FAMILY "F" { OUTLET "O" { characteristics { distribution = { area = "n"; }; }; }; }'
        )
        block = family.outlets()[0].blocks[0]
        assert block.fields[0].value.value == "complex_object"

    def test_string_characteristic_with_body_keeps_string(self):
        family = only('FAMILY "F" { OUTLET "O" { characteristics { lang = "de" { x = 1; }; }; }; }')
        assert family.outlets()[0].blocks[0].fields[0].value.value == "de"

    def test_identity_array(self):
        family = only(
            'FAMILY "F" { OUTLET "O" { identity { id = 1; titles = [ { t = "a"; }, '
            '{ t = "b"; period = "1900" TO "1944"; } ]; }; }; }'
        )
        field = family.outlets()[0].blocks[0].fields[1]
        assert isinstance(field, ast.ArrayAssignment)
        assert len(field.values) == 2
        assert isinstance(field.values[1].fields[1], ast.ObjectPeriod)


class TestAnnotations:
    """Annotations are accepted inside every block."""

    def test_identity_records_annotation(self):
        family = only(
            'FAMILY "F" { OUTLET "O" { identity { @note "x"; id = 1; title = "T"; }; }; }'
        )
        outlet = family.outlets()[0]
        fields = outlet.blocks[0].fields
        assert isinstance(fields[0], ast.Comment)
        assert fields[0].text == "@note: x"
        assert outlet.declared_id() == 1

    def test_outlet_body_records_annotation(self):
        family = only('FAMILY "F" { OUTLET "A" { @note "x"; identity { id = 1; }; }; }')
        blocks = family.outlets()[0].blocks
        assert [b.kind for b in blocks] == ["comment", "identity"]
        assert blocks[0].text == "@note: x"

    @pytest.mark.parametrize("block", ["characteristics", "metadata"])
    def test_keyed_blocks_record_annotation(self, block: str):
        family = only(f'FAMILY "F" {{ OUTLET "O" {{ {block} {{ @note "x"; lang = "de"; }}; }}; }}')
        fields = family.outlets()[0].blocks[0].fields
        assert fields[0].text == "@note: x"
        assert fields[1].name == "lang"

    def test_lifecycle_drops_annotation(self):
        family = only(
            'FAMILY "F" { OUTLET "O" { lifecycle { @note "x"; '
            'status "active" FROM "1959-01-01" TO CURRENT { }; }; }; }'
        )
        assert family.outlets()[0].blocks[0].entries[0].status == "active"

    def test_unit_drops_annotation(self):
        unit = only('UNIT U { @note "x"; id: ID PRIMARY KEY, name: TEXT }')
        assert [f.name for f in unit.fields] == ["id", "name"]

    def test_vocabulary_drops_annotation(self):
        vocab = only('VOCABULARY V { @note "x"; BODY { @note "y"; 1: "A" } }')
        assert vocab.bodies[0].entries[0].value == "A"

    def test_year_and_metrics(self):
        data = only(
            'DATA FOR 1 { YEAR 2023 { @note "x"; METRICS { @note "y"; '
            'reach = { @note "z"; value = 1; }; }; }; }'
        )
        year = data.blocks[0]
        assert year.blocks[0].text == "@note: x"
        metric = year.blocks[1].fields[0]
        assert metric.name == "reach"
        assert [a.name for a in metric.attributes] == ["value"]

    def test_aggregation_drops_annotation(self):
        data = only('DATA FOR 1 { AGGREGATION = { @note "x"; reach = "national"; }; }')
        assert [f.name for f in data.blocks[0].fields] == ["reach"]


class TestFieldNames:
    def test_keyword_names_keep_source_spelling(self):
        family = only('FAMILY "F" { OUTLET "O" { identity { ID = 5; Title = "x"; }; }; }')
        outlet = family.outlets()[0]
        assert [f.name for f in outlet.blocks[0].fields] == ["ID", "Title"]
        assert outlet.declared_id() == 5

    def test_families_helper(self, family_program: ast.Program):
        assert family_program.families() == family_program.of_kind("family")
        assert family_program.families()[0].name == "Kronen Zeitung Family"


class TestDataAndLinks:
    def test_data_block(self, family_program: ast.Program):
        data = family_program.of_kind("family")[0].members[3]
        assert isinstance(data, ast.DataDeclaration)
        assert data.target_id == 200001
        year = next(b for b in data.blocks if isinstance(b, ast.YearDeclaration))
        assert year.year == 2023
        metrics = year.blocks[0]
        assert [m.name for m in metrics.fields] == ["circulation", "reach_national"]

    def test_diachronic_link(self, family_program: ast.Program):
        link = family_program.of_kind("family")[0].members[4]
        assert link.predecessor == 200001
        assert link.successor == 200002
        assert link.event_date.end.value == "1972-12-31"
        assert link.annotations[0].value == "18_offshoot"

    def test_synchronous_link(self, family_program: ast.Program):
        link = family_program.of_kind("family")[0].members[5]
        assert link.outlet_1.outlet_id == 200001
        assert link.outlet_2.role == "supplement"
        assert link.period_end.is_current

    def test_synchronous_period_range(self):
        link = only(
            'SYNCHRONOUS_LINKS s { outlet_1 = { id = 1; role = "a"; }; '
            'period = "2000-01-01" TO CURRENT; }'
        )
        assert link.period_start.value == "2000-01-01"
        assert link.period_end.is_current


class TestTopLevel:
    def test_import_and_let(self):
        program = parse_dsl('IMPORT "a.mdsl"; LET x = 5;')
        imp, var = program.statements
        assert imp.path == "a.mdsl"
        assert var.name == "x"
        assert var.value.value == 5.0

    def test_event(self):
        event = only(
            'EVENT e { type = "merger"; date = CURRENT; entities = '
            '{ a = { id = 1; role = "x"; stake_before = 10; }; }; impact = { n = 1; }; }'
        )
        assert event.event_type == "merger"
        assert event.date.is_current
        assert event.entities[0].outlet_id == 1
        assert event.entities[0].stake_before == 10
        assert event.impact[0].name == "n"

    def test_every_node_has_a_position(self, family_program: ast.Program):
        for node in walk_nodes(family_program):
            assert node.position.line >= 1
            assert node.position.column >= 1


class TestErrors:
    def test_unexpected_token(self):
        with pytest.raises(ParseError) as exc_info:
            parse_dsl("UNIT { }")
        error = exc_info.value
        assert error.kind == "unexpected_token"
        assert error.message == "Unexpected token '{' at 1:6, expected identifier"

    def test_first_error_is_raised_after_recovery(self):
        parser = Parser(tokenize('UNIT { }\nFAMILY 5 { }\nIMPORT "ok.mdsl";'))
        with pytest.raises(ParseError) as exc_info:
            parser.parse()
        assert len(parser.errors) == 2
        assert exc_info.value is parser.errors[0]

    def test_unexpected_eof(self):
        with pytest.raises(ParseError) as exc_info:
            parse_dsl("IMPORT")
        assert exc_info.value.kind == "unexpected_eof"
        assert exc_info.value.message.startswith("Unexpected end of input at 1:7")

    def test_missing_closing_brace(self):
        with pytest.raises(ParseError) as exc_info:
            parse_dsl('FAMILY "F" {')
        assert exc_info.value.kind == "missing_closing_delimiter"
        assert exc_info.value.message.startswith("Missing closing '}'")

    def test_unknown_link_field(self):
        with pytest.raises(ParseError) as exc_info:
            parse_dsl("DIACHRONIC_LINK x { bogus = 1; }")
        assert exc_info.value.kind == "invalid_syntax"
        assert exc_info.value.message == (
            "Invalid syntax at 1:21: unknown diachronic field 'bogus'"
        )

    def test_error_context_with_file(self, write_mdsl):
        path = write_mdsl("UNIT T {\n  x TEXT\n}\n")
        with pytest.raises(ParseError) as exc_info:
            parse_file(path)
        assert exc_info.value.context is not None
        assert exc_info.value.context.file == Path(path)
        assert exc_info.value.context.line == 2
