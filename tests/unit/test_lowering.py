"""Tests for AST to IR lowering."""

from mdsl.core import ir
from mdsl.core.lowering import GLOBAL_FAMILY_NAME, lower_program
from mdsl.core.parser_impl import parse_dsl
from mdsl.samples import EVENT_SAMPLE


def lower(source: str) -> ir.IRProgram:
    return lower_program(parse_dsl(source))


class TestOutlets:
    def test_outlet_ids_from_identity(self, two_outlets_source: str):
        program = lower(two_outlets_source)
        assert [(o.name, o.id) for _, o in program.outlets()] == [
            ("Kronen Zeitung", 100),
            ("Krone Bunt", 200),
        ]

    def test_open_lifecycle_ends_at_current(self, two_outlets_source: str):
        outlet = lower(two_outlets_source).families[0].outlets[0]
        status = outlet.lifecycle()[0]
        assert status.start_date == "1959-01-01"
        assert status.end_date == "CURRENT"
        assert status.precision_start == "known"
        assert status.precision_end is None

    def test_non_string_lifecycle_attribute_dropped(self):
        program = lower(
            'FAMILY "F" { OUTLET "O" { id = 1; lifecycle { status "a" FROM "2000" '
            "{ precision_start = 5; }; }; }; }"
        )
        assert program.families[0].outlets[0].lifecycle()[0].precision_start is None

    def test_inheritance_recorded(self, family_ir: ir.IRProgram):
        first, second = family_ir.families[0].outlets
        assert first.template_ref == "AustrianNewspaper"
        assert first.base_ref is None
        assert second.base_ref == 200001
        # Nothing is copied from the template
        assert [f.name for f in first.characteristics()] == ["distribution"]

    def test_missing_id_stays_none(self):
        program = lower('FAMILY "F" { OUTLET "O" { identity { title = "x"; }; }; }')
        assert program.families[0].outlets[0].id is None

    def test_period_becomes_from_to_object(self):
        program = lower(
            'FAMILY "F" { OUTLET "O" { identity { id = 1; titles = '
            '[ { t = "a"; period = "1900" TO CURRENT; } ]; }; }; }'
        )
        titles = program.families[0].outlets[0].identity_value("titles")
        period = titles.items[0].get("period")
        assert ir.expression_text(period) == "{from: 1900, to: CURRENT}"


class TestFamilies:
    def test_first_comment_becomes_family_comment(self, family_ir: ir.IRProgram):
        assert family_ir.families[0].comment == "@comment: Austria's largest daily"

    def test_loose_relationships_join_first_family(self):
        program = lower(
            'FAMILY "A" { }\nFAMILY "B" { }\n'
            "DIACHRONIC_LINK x { predecessor = 1; successor = 2; }\n"
            "DATA FOR 1 { YEAR 2020 { }; }"
        )
        first, second = program.families
        assert [r.name for r in first.relationships] == ["x"]
        assert [d.outlet_id for d in first.data_blocks] == [1]
        assert second.relationships == []

    def test_global_family_without_families(self):
        program = lower("SYNCHRONOUS_LINK s { outlet_1 = { id = 1; role = \"a\"; }; }")
        assert [f.name for f in program.families] == [GLOBAL_FAMILY_NAME]
        assert program.synchronous_links()[0].outlet_1.id == 1

    def test_no_global_family_when_nothing_loose(self, unit_source: str):
        assert lower(unit_source).families == []


class TestDeclarations:
    def test_vocabulary_bodies_merge(self):
        program = lower('VOCABULARY V { A { 1: "x" } B { "k": "y" } }')
        vocabulary = program.vocabulary("V")
        assert vocabulary.body_name == "A"
        assert [e.key for e in vocabulary.entries] == [1.0, "k"]
        assert isinstance(vocabulary.entries[0].key, float)
        assert isinstance(vocabulary.entries[1].key, str)

    def test_template_keeps_characteristics_and_metadata(self):
        program = lower(
            'TEMPLATE "T" { identity { id = 1; }; characteristics { a = 1; }; '
            "metadata { b = true; }; }"
        )
        template = program.templates[0]
        assert [b.kind for b in template.blocks] == ["characteristics", "metadata"]

    def test_variable_reference_stays_unresolved(self, family_ir: ir.IRProgram):
        language = family_ir.templates[0].characteristics()[0]
        assert language.value == ir.VariableRef(name="default_language")
        assert family_ir.variables[0].value == ir.StringValue(value="de")

    def test_imports_recorded(self, family_ir: ir.IRProgram):
        assert [i.path for i in family_ir.imports] == ["shared/units.mdsl"]


class TestDataAndLinks:
    def test_metrics(self, family_ir: ir.IRProgram):
        block = family_ir.data_blocks()[0]
        assert block.outlet_id == 200001
        assert block.maps_to == "MarketData"
        circulation, reach = block.years[0].metrics
        assert (circulation.value, circulation.unit, circulation.source) == (
            500000.0,
            "copies",
            "official",
        )
        assert reach.value == 15.5

    def test_diachronic_dates(self, family_ir: ir.IRProgram):
        link = family_ir.diachronic_links()[0]
        assert (link.predecessor, link.successor) == (200001, 200002)
        assert (link.event_start_date, link.event_end_date) == ("1972-01-01", "1972-12-31")
        assert link.maps_to == "18_offshoot"

    def test_synchronous_current_end(self, family_ir: ir.IRProgram):
        link = family_ir.synchronous_links()[0]
        assert link.period_start == "1972-01-01"
        assert link.period_end == "CURRENT"

    def test_event(self):
        event = lower(EVENT_SAMPLE).events[0]
        assert event.event_type == "joint_venture"
        assert event.entities[0].id == 300001
        assert event.entities[0].stake_after == 50
        assert event.impact[0].value == ir.BooleanValue(value=True)
