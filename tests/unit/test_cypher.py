"""Tests for the Cypher graph emitter."""

from mdsl.core import ir
from mdsl.core.lowering import lower_program
from mdsl.core.parser_impl import parse_dsl
from mdsl.emitters import CypherGenerator, generate_cypher
from mdsl.emitters.cypher import cypher_date, quote
from mdsl.samples import EVENT_SAMPLE


def cypher_for(source: str) -> str:
    return generate_cypher(lower_program(parse_dsl(source)))


class TestLiterals:
    def test_quote_escapes(self):
        assert quote("It's") == "'It\\'s'"
        assert quote("a\\b") == "'a\\\\b'"

    def test_dates(self):
        assert cypher_date("1959-01-01") == "date('1959-01-01')"
        assert cypher_date("CURRENT") == "date('9999-01-01')"
        assert cypher_date(None) == "null"


class TestOutlets:
    def test_one_create_per_outlet(self, family_ir: ir.IRProgram):
        cypher = generate_cypher(family_ir)
        creates = [line for line in cypher.splitlines() if line.startswith("CREATE (o:Outlet ")]
        assert len(creates) == len(list(family_ir.outlets()))
        assert creates[0] == (
            "CREATE (o:Outlet {id: 200001, name: 'Kronen Zeitung', "
            "template_ref: 'AustrianNewspaper', base_ref: null});"
        )

    def test_lifecycle_current_becomes_sentinel(self, two_outlets_source: str):
        cypher = cypher_for(two_outlets_source)
        assert (
            "CREATE (l:Lifecycle {outlet_id: 100, status: 'active', "
            "start_date: date('1959-01-01'), end_date: date('9999-01-01'), "
            "precision_start: 'known', precision_end: null, comment: null});"
        ) in cypher
        assert "'CURRENT'" not in cypher

    def test_family_edge(self, two_outlets_source: str):
        cypher = cypher_for(two_outlets_source)
        assert (
            "MATCH (f:Family {name: 'Kronen Zeitung Family'}), (o:Outlet {id: 200}) "
            "CREATE (f)-[:HAS_OUTLET]->(o);"
        ) in cypher

    def test_characteristics(self, two_outlets_source: str):
        cypher = cypher_for(two_outlets_source)
        assert "CREATE (c:Characteristic {outlet_id: 100, name: 'sector', value: '1'});" in cypher

    def test_names_escaped(self):
        cypher = cypher_for('FAMILY "F" { OUTLET "It\'s" { id = 7; }; }')
        assert "name: 'It\\'s'" in cypher

    def test_inheritance_edges(self, family_ir: ir.IRProgram):
        cypher = generate_cypher(family_ir)
        assert (
            "MATCH (o:Outlet {id: 200001}), (t:Template {name: 'AustrianNewspaper'}) "
            "CREATE (o)-[:EXTENDS_TEMPLATE]->(t);"
        ) in cypher
        assert (
            "MATCH (o:Outlet {id: 200002}), (base:Outlet {id: 200001}) "
            "CREATE (o)-[:BASED_ON]->(base);"
        ) in cypher
        # Edges come after every outlet node
        assert cypher.index("// INHERITANCE") > cypher.index("CREATE (o:Outlet {id: 200002")


class TestVocabularies:
    def test_entries_with_string_keys(self):
        cypher = cypher_for('VOCABULARY V { BODY { 1: "A", "x": "B" } }')
        entries = [
            line for line in cypher.splitlines() if line.startswith("CREATE (e:VocabularyEntry")
        ]
        assert entries == [
            "CREATE (e:VocabularyEntry {key: '1', value: 'A', vocab_name: 'V'});",
            "CREATE (e:VocabularyEntry {key: 'x', value: 'B', vocab_name: 'V'});",
        ]


class TestRelationshipsAndData:
    def test_diachronic(self, family_ir: ir.IRProgram):
        cypher = generate_cypher(family_ir)
        assert "// Diachronic relationship: offshoot_1972" in cypher
        assert (
            "MATCH (pred:Outlet {id: 200001}), (succ:Outlet {id: 200002}) "
            "CREATE (pred)-[:DIACHRONIC_LINK {name: 'offshoot_1972', "
            "relationship_type: 'offshoot', event_start_date: date('1972-01-01'), "
            "event_end_date: date('1972-12-31'), comment: null, maps_to: '18_offshoot'}]->(succ);"
        ) in cypher

    def test_synchronous_open_period(self, family_ir: ir.IRProgram):
        cypher = generate_cypher(family_ir)
        assert "period_end: date('9999-01-01')" in cypher
        assert "outlet_2_role: 'supplement'" in cypher

    def test_metrics(self, family_ir: ir.IRProgram):
        cypher = generate_cypher(family_ir)
        assert (
            "CREATE (m:Metric {name: 'circulation', value: 500000, unit: 'copies', "
            "source: 'official', comment: null, year: 2023, outlet_id: 200001});"
        ) in cypher

    def test_events(self):
        cypher = cypher_for(EVENT_SAMPLE)
        assert (
            "CREATE (e:Event {name: 'mediaprint_founding', type: 'joint_venture', "
            "date: date('1988-01-01'), status: 'completed', created_at: datetime()});"
        ) in cypher
        assert "CREATE (ee)-[:INVOLVES]->(o);" in cypher
        assert "CREATE (ei:EventImpact {name: 'shared_printing', " in cypher


class TestGenerator:
    def test_deterministic(self, family_ir: ir.IRProgram):
        assert generate_cypher(family_ir) == generate_cypher(family_ir)

    def test_statements_end_with_semicolon(self, family_ir: ir.IRProgram):
        for line in generate_cypher(family_ir).splitlines():
            if line and not line.startswith("//"):
                assert line.endswith(";"), line

    def test_extension(self, family_ir: ir.IRProgram):
        assert CypherGenerator(family_ir).extension == ".cypher"
