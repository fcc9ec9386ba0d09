"""
Cypher graph emitter.

Produces a property-graph creation script:

1. Constraints and indexes
2. Vocabulary and VocabularyEntry nodes (HAS_ENTRY)
3. Template nodes with Characteristic and Metadata children
4. Family and Outlet nodes (HAS_OUTLET) with Identity, Lifecycle,
   Characteristic and Metadata children
5. EXTENDS_TEMPLATE and BASED_ON inheritance edges
6. DIACHRONIC_LINK and SYNCHRONOUS_LINK edges between outlets
7. MarketData and Metric nodes
8. Event nodes with EventEntity (INVOLVES), EventImpact and EventMetadata

Every statement ends with a semicolon and newline.
"""

import logging

from ..core.ir import (
    ArrayValue,
    IRAssignment,
    IRDiachronicLink,
    IREvent,
    IRExpression,
    IRFamily,
    IROutlet,
    IRProgram,
    IRTemplate,
    IRVocabulary,
    ObjectValue,
    StringValue,
    expression_text,
    format_number,
)
from .base import Generator, run_generator

logger = logging.getLogger(__name__)

OPEN_END_DATE = "9999-01-01"

HEADER = (
    "// Generated Cypher from MediaLanguage DSL\n"
    "// This file contains CREATE statements for a property graph database\n"
    "// Represents media outlets, families, and relationships as a graph\n\n"
)

CONSTRAINTS = (
    "// CONSTRAINTS AND INDEXES\n"
    "// Create constraints for unique identifiers\n\n"
    "CREATE CONSTRAINT outlet_id_unique IF NOT EXISTS "
    "FOR (o:Outlet) REQUIRE o.id IS UNIQUE;\n"
    "CREATE CONSTRAINT family_name_unique IF NOT EXISTS "
    "FOR (f:Family) REQUIRE f.name IS UNIQUE;\n"
    "CREATE CONSTRAINT template_name_unique IF NOT EXISTS "
    "FOR (t:Template) REQUIRE t.name IS UNIQUE;\n"
    "CREATE CONSTRAINT vocab_name_unique IF NOT EXISTS "
    "FOR (v:Vocabulary) REQUIRE v.name IS UNIQUE;\n\n"
    "CREATE INDEX outlet_name_index IF NOT EXISTS FOR (o:Outlet) ON (o.name);\n"
    "CREATE INDEX family_name_index IF NOT EXISTS FOR (f:Family) ON (f.name);\n"
    "CREATE INDEX data_year_index IF NOT EXISTS FOR (d:MarketData) ON (d.year);\n"
    "CREATE INDEX metric_name_index IF NOT EXISTS FOR (m:Metric) ON (m.name);\n\n"
)

# block kind -> (node label, variable, edge type)
OUTLET_CHILDREN = {
    "identity": ("Identity", "i", "HAS_IDENTITY"),
    "characteristics": ("Characteristic", "c", "HAS_CHARACTERISTIC"),
    "metadata": ("Metadata", "m", "HAS_METADATA"),
}


# =============================================================================
# Literal helpers
# =============================================================================


def escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace("'", "\\'")


def quote(text: str) -> str:
    return f"'{escape(text)}'"


def optional(text: str | None) -> str:
    return "null" if text is None else quote(text)


def cypher_date(value: str | None) -> str:
    """``date('...')`` for a literal; ``CURRENT`` maps to the open-end sentinel."""
    if value is None:
        return "null"
    if value.upper() == "CURRENT":
        return f"date('{OPEN_END_DATE}')"
    return f"date({quote(value)})"


def comment_value(expr: IRExpression) -> str:
    if isinstance(expr, StringValue):
        return f'"{expr.value}"'
    if isinstance(expr, ObjectValue):
        return "object"
    if isinstance(expr, ArrayValue):
        return "array"
    return expression_text(expr)


def value_literal(expr: IRExpression) -> str:
    return quote(expression_text(expr))


class CypherGenerator(Generator):
    """Property-graph script for an IRProgram."""

    name = "cypher"
    extension = ".cypher"

    def build(self) -> str:
        program = self.program
        parts = [HEADER]

        if program.imports:
            parts.append("// IMPORTS\n")
            parts.extend(f'// IMPORT "{imp.path}"\n' for imp in program.imports)
            parts.append("\n")

        if program.variables:
            parts.append("// VARIABLES\n")
            parts.extend(
                f"// LET {var.name} = {comment_value(var.value)}\n" for var in program.variables
            )
            parts.append("\n")

        parts.append(CONSTRAINTS)
        parts.extend(self.vocabulary_nodes(vocab) + "\n" for vocab in program.vocabularies)
        parts.extend(self.template_nodes(template) + "\n" for template in program.templates)
        parts.extend(self.family_graph(family) + "\n" for family in program.families)
        parts.append(self.inheritance_edges(program))
        parts.append(self.relationship_edges(program))
        parts.append(self.data_nodes(program))
        parts.append(self.event_nodes(program))

        cypher = "".join(parts)
        logger.debug("Generated %d Cypher statements", cypher.count(";\n"))
        return cypher

    # =========================================================================
    # Vocabularies and templates
    # =========================================================================

    def vocabulary_nodes(self, vocab: IRVocabulary) -> str:
        name = quote(vocab.name)
        lines = [
            f"// Vocabulary: {vocab.name}",
            f"CREATE (v:Vocabulary {{name: {name}, body_name: {quote(vocab.body_name)}, "
            "created_at: datetime()});",
        ]
        for entry in vocab.entries:
            key = quote(format_number(entry.key) if isinstance(entry.key, float) else entry.key)
            lines.append(
                f"CREATE (e:VocabularyEntry {{key: {key}, value: {quote(entry.value)}, "
                f"vocab_name: {name}}});"
            )
            lines.append(
                f"MATCH (v:Vocabulary {{name: {name}}}), "
                f"(e:VocabularyEntry {{key: {key}, vocab_name: {name}}}) "
                "CREATE (v)-[:HAS_ENTRY]->(e);"
            )
        return "\n".join(lines) + "\n"

    def template_nodes(self, template: IRTemplate) -> str:
        name = quote(template.name)
        lines = [
            f"// Template: {template.name}",
            f"CREATE (t:Template {{name: {name}, type: {quote(template.template_type)}, "
            "created_at: datetime()});",
        ]
        for block in template.blocks:
            label, var, edge = OUTLET_CHILDREN[block.kind]
            for f in block.fields:
                lines.append(
                    f"CREATE ({var}:{label} {{name: {quote(f.name)}, "
                    f"value: {value_literal(f.value)}, template_name: {name}}});"
                )
                lines.append(
                    f"MATCH (t:Template {{name: {name}}}), "
                    f"({var}:{label} {{name: {quote(f.name)}, template_name: {name}}}) "
                    f"CREATE (t)-[:{edge}]->({var});"
                )
        return "\n".join(lines) + "\n"

    # =========================================================================
    # Families and outlets
    # =========================================================================

    def family_graph(self, family: IRFamily) -> str:
        lines = [
            f"// Family: {family.name}",
            f"CREATE (f:Family {{name: {quote(family.name)}, comment: {optional(family.comment)}, "
            "created_at: datetime()});",
        ]
        for outlet in family.outlets:
            lines.extend(self.outlet_node(outlet, family.name))
        return "\n".join(lines) + "\n"

    def outlet_node(self, outlet: IROutlet, family_name: str) -> list[str]:
        outlet_id = outlet.id if outlet.id is not None else 0
        match_outlet = f"MATCH (o:Outlet {{id: {outlet_id}}})"
        base_ref = "null" if outlet.base_ref is None else str(outlet.base_ref)
        lines = [
            f"// Outlet: {outlet.name}",
            f"CREATE (o:Outlet {{id: {outlet_id}, name: {quote(outlet.name)}, "
            f"template_ref: {optional(outlet.template_ref)}, base_ref: {base_ref}}});",
            f"MATCH (f:Family {{name: {quote(family_name)}}}), (o:Outlet {{id: {outlet_id}}}) "
            "CREATE (f)-[:HAS_OUTLET]->(o);",
        ]

        for block in outlet.blocks:
            if block.kind == "lifecycle":
                for status in block.statuses:
                    key = f"outlet_id: {outlet_id}, status: {quote(status.status)}"
                    lines.append(
                        f"CREATE (l:Lifecycle {{{key}, "
                        f"start_date: {cypher_date(status.start_date)}, "
                        f"end_date: {cypher_date(status.end_date)}, "
                        f"precision_start: {optional(status.precision_start)}, "
                        f"precision_end: {optional(status.precision_end)}, "
                        f"comment: {optional(status.comment)}}});"
                    )
                    lines.append(
                        f"{match_outlet}, (l:Lifecycle {{{key}}}) CREATE (o)-[:HAS_LIFECYCLE]->(l);"
                    )
                continue

            label, var, edge = OUTLET_CHILDREN[block.kind]
            lines.extend(self.child_nodes(match_outlet, outlet_id, label, var, edge, block.fields))
        return lines

    @staticmethod
    def child_nodes(
        match_outlet: str,
        outlet_id: int,
        label: str,
        var: str,
        edge: str,
        fields: list[IRAssignment],
    ) -> list[str]:
        lines = []
        for f in fields:
            key = f"outlet_id: {outlet_id}, name: {quote(f.name)}"
            lines.append(f"CREATE ({var}:{label} {{{key}, value: {value_literal(f.value)}}});")
            lines.append(
                f"{match_outlet}, ({var}:{label} {{{key}}}) CREATE (o)-[:{edge}]->({var});"
            )
        return lines

    @staticmethod
    def inheritance_edges(program: IRProgram) -> str:
        lines = ["// INHERITANCE"]
        for _, outlet in program.outlets():
            outlet_id = outlet.id if outlet.id is not None else 0
            if outlet.template_ref is not None:
                lines.append(
                    f"MATCH (o:Outlet {{id: {outlet_id}}}), "
                    f"(t:Template {{name: {quote(outlet.template_ref)}}}) "
                    "CREATE (o)-[:EXTENDS_TEMPLATE]->(t);"
                )
            if outlet.base_ref is not None:
                lines.append(
                    f"MATCH (o:Outlet {{id: {outlet_id}}}), "
                    f"(base:Outlet {{id: {outlet.base_ref}}}) "
                    "CREATE (o)-[:BASED_ON]->(base);"
                )
        return "\n".join(lines) + "\n\n"

    # =========================================================================
    # Relationships
    # =========================================================================

    @staticmethod
    def relationship_edges(program: IRProgram) -> str:
        lines = ["// RELATIONSHIPS"]
        for link in program.relationships():
            if isinstance(link, IRDiachronicLink):
                properties = ", ".join(
                    [
                        f"name: {quote(link.name)}",
                        f"relationship_type: {quote(link.relationship_type)}",
                        f"event_start_date: {cypher_date(link.event_start_date)}",
                        f"event_end_date: {cypher_date(link.event_end_date)}",
                        f"comment: {optional(link.comment)}",
                        f"maps_to: {optional(link.maps_to)}",
                    ]
                )
                lines.append(f"// Diachronic relationship: {link.name}")
                lines.append(
                    f"MATCH (pred:Outlet {{id: {link.predecessor}}}), "
                    f"(succ:Outlet {{id: {link.successor}}}) "
                    f"CREATE (pred)-[:DIACHRONIC_LINK {{{properties}}}]->(succ);"
                )
            else:
                properties = ", ".join(
                    [
                        f"name: {quote(link.name)}",
                        f"relationship_type: {quote(link.relationship_type)}",
                        f"outlet_1_role: {quote(link.outlet_1.role)}",
                        f"outlet_2_role: {quote(link.outlet_2.role)}",
                        f"period_start: {cypher_date(link.period_start)}",
                        f"period_end: {cypher_date(link.period_end)}",
                        f"details: {optional(link.details)}",
                        f"maps_to: {optional(link.maps_to)}",
                    ]
                )
                lines.append(f"// Synchronous relationship: {link.name}")
                lines.append(
                    f"MATCH (o1:Outlet {{id: {link.outlet_1.id}}}), "
                    f"(o2:Outlet {{id: {link.outlet_2.id}}}) "
                    f"CREATE (o1)-[:SYNCHRONOUS_LINK {{{properties}}}]->(o2);"
                )
        return "\n".join(lines) + "\n"

    # =========================================================================
    # Market data and events
    # =========================================================================

    @staticmethod
    def data_nodes(program: IRProgram) -> str:
        lines = ["// MARKET DATA"]
        for block in program.data_blocks():
            oid = block.outlet_id
            for agg in block.aggregation:
                lines.append(
                    f"CREATE (a:DataAggregation {{name: {quote(agg.name)}, "
                    f"value: {quote(agg.value)}, outlet_id: {oid}}});"
                )
                lines.append(
                    f"MATCH (o:Outlet {{id: {oid}}}), "
                    f"(a:DataAggregation {{name: {quote(agg.name)}, outlet_id: {oid}}}) "
                    "CREATE (o)-[:HAS_AGGREGATION]->(a);"
                )
            for year in block.years:
                year_key = f"year: {year.year}, outlet_id: {oid}"
                lines.append(
                    f"CREATE (d:MarketData {{{year_key}, comment: {optional(year.comment)}, "
                    f"maps_to: {optional(block.maps_to)}}});"
                )
                lines.append(
                    f"MATCH (o:Outlet {{id: {oid}}}), (d:MarketData {{{year_key}}}) "
                    "CREATE (o)-[:HAS_DATA]->(d);"
                )
                for metric in year.metrics:
                    lines.append(
                        f"CREATE (m:Metric {{name: {quote(metric.name)}, "
                        f"value: {format_number(metric.value)}, unit: {quote(metric.unit)}, "
                        f"source: {quote(metric.source)}, comment: {optional(metric.comment)}, "
                        f"{year_key}}});"
                    )
                    lines.append(
                        f"MATCH (d:MarketData {{{year_key}}}), "
                        f"(m:Metric {{name: {quote(metric.name)}, {year_key}}}) "
                        "CREATE (d)-[:HAS_METRIC]->(m);"
                    )
        return "\n".join(lines) + "\n"

    def event_nodes(self, program: IRProgram) -> str:
        if not program.events:
            return ""
        lines = ["// EVENTS"]
        for event in program.events:
            lines.extend(self.event_node(event))
        return "\n".join(lines) + "\n\n"

    @staticmethod
    def event_node(event: IREvent) -> list[str]:
        name = quote(event.name)
        match_event = f"MATCH (e:Event {{name: {name}}})"
        lines = [
            f"CREATE (e:Event {{name: {name}, type: {quote(event.event_type)}, "
            f"date: {cypher_date(event.date)}, status: {optional(event.status)}, "
            "created_at: datetime()});"
        ]

        for entity in event.entities:
            stake_before = "null" if entity.stake_before is None else format_number(
                entity.stake_before
            )
            stake_after = "null" if entity.stake_after is None else format_number(
                entity.stake_after
            )
            lines.append(
                f"CREATE (ee:EventEntity {{name: {quote(entity.name)}, entity_id: {entity.id}, "
                f"role: {quote(entity.role)}, stake_before: {stake_before}, "
                f"stake_after: {stake_after}, event_name: {name}}});"
            )
            lines.append(
                f"{match_event}, "
                f"(ee:EventEntity {{name: {quote(entity.name)}, event_name: {name}}}) "
                "CREATE (e)-[:HAS_ENTITY]->(ee);"
            )
            lines.append(
                f"MATCH (o:Outlet {{id: {entity.id}}}), "
                f"(ee:EventEntity {{entity_id: {entity.id}, event_name: {name}}}) "
                "CREATE (ee)-[:INVOLVES]->(o);"
            )

        for label, var, edge, fields in (
            ("EventImpact", "ei", "HAS_IMPACT", event.impact),
            ("EventMetadata", "em", "HAS_METADATA", event.metadata),
        ):
            for f in fields:
                key = f"name: {quote(f.name)}, event_name: {name}"
                lines.append(f"CREATE ({var}:{label} {{{key}, value: {value_literal(f.value)}}});")
                lines.append(
                    f"{match_event}, ({var}:{label} {{{key}}}) CREATE (e)-[:{edge}]->({var});"
                )
        return lines


def generate_cypher(program: IRProgram) -> str:
    """
    Generate a Cypher script for a program.

    Raises:
        CodeGenError: If the program cannot be expressed as a graph script
    """
    return run_generator(CypherGenerator(program))
