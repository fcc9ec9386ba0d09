"""
Generic relational SQL emitter.

Writes a closed, self-describing schema (outlets, families, templates,
per-block outlet tables, relationships, market data and events) followed
by one table per UNIT and VOCABULARY and INSERT statements for every IR
entity. Output order follows IR order.
"""

import logging

from ..core.ast import FieldTypeKind
from ..core.errors import make_unsupported_feature
from ..core.ir import (
    ArrayValue,
    IRDiachronicLink,
    IRExpression,
    IRFamily,
    IRField,
    IRProgram,
    IRTemplate,
    IRUnit,
    IRVocabulary,
    ObjectValue,
    StringValue,
    expression_text,
    format_number,
)
from .base import Generator, run_generator, sql_optional, sql_string

logger = logging.getLogger(__name__)

HEADER = (
    "-- Generated SQL from MediaLanguage DSL\n"
    "-- This file contains CREATE TABLE statements, INSERT statements, and constraints\n"
    "-- Generated for comprehensive media outlet and relationship management\n\n"
)

# (table, columns) in creation order
CORE_TABLES: list[tuple[str, list[str]]] = [
    (
        "media_outlets",
        [
            "id INTEGER PRIMARY KEY",
            "name VARCHAR(255) NOT NULL",
            "family_id INTEGER",
            "template_id INTEGER",
            "base_outlet_id INTEGER",
            "created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP",
            "updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP",
            "FOREIGN KEY (family_id) REFERENCES families(id)",
            "FOREIGN KEY (template_id) REFERENCES templates(id)",
            "FOREIGN KEY (base_outlet_id) REFERENCES media_outlets(id)",
        ],
    ),
    (
        "families",
        [
            "id INTEGER PRIMARY KEY",
            "name VARCHAR(255) NOT NULL",
            "comment TEXT",
            "created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP",
        ],
    ),
    (
        "templates",
        [
            "id INTEGER PRIMARY KEY",
            "name VARCHAR(255) NOT NULL",
            "template_type VARCHAR(100) NOT NULL",
            "created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP",
        ],
    ),
    (
        "outlet_identity",
        [
            "id INTEGER PRIMARY KEY",
            "outlet_id INTEGER NOT NULL",
            "field_name VARCHAR(100) NOT NULL",
            "field_value TEXT",
            "field_type VARCHAR(50) DEFAULT 'string'",
            "FOREIGN KEY (outlet_id) REFERENCES media_outlets(id)",
        ],
    ),
    (
        "outlet_lifecycle",
        [
            "id INTEGER PRIMARY KEY",
            "outlet_id INTEGER NOT NULL",
            "status VARCHAR(100) NOT NULL",
            "start_date DATE",
            "end_date DATE",
            "precision_start VARCHAR(50)",
            "precision_end VARCHAR(50)",
            "comment TEXT",
            "FOREIGN KEY (outlet_id) REFERENCES media_outlets(id)",
        ],
    ),
    (
        "outlet_characteristics",
        [
            "id INTEGER PRIMARY KEY",
            "outlet_id INTEGER NOT NULL",
            "characteristic_name VARCHAR(100) NOT NULL",
            "characteristic_value TEXT",
            "characteristic_type VARCHAR(50) DEFAULT 'string'",
            "FOREIGN KEY (outlet_id) REFERENCES media_outlets(id)",
        ],
    ),
    (
        "outlet_metadata",
        [
            "id INTEGER PRIMARY KEY",
            "outlet_id INTEGER NOT NULL",
            "metadata_name VARCHAR(100) NOT NULL",
            "metadata_value TEXT",
            "metadata_type VARCHAR(50) DEFAULT 'string'",
            "FOREIGN KEY (outlet_id) REFERENCES media_outlets(id)",
        ],
    ),
    (
        "relationships",
        [
            "id INTEGER PRIMARY KEY",
            "relationship_name VARCHAR(255) NOT NULL",
            "relationship_type VARCHAR(50) NOT NULL -- 'diachronic' or 'synchronous'",
            "family_id INTEGER",
            "created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP",
            "FOREIGN KEY (family_id) REFERENCES families(id)",
        ],
    ),
    (
        "diachronic_relationships",
        [
            "id INTEGER PRIMARY KEY",
            "relationship_id INTEGER NOT NULL",
            "predecessor_id INTEGER NOT NULL",
            "successor_id INTEGER NOT NULL",
            "event_start_date DATE",
            "event_end_date DATE",
            "relationship_subtype VARCHAR(100)",
            "comment TEXT",
            "maps_to VARCHAR(255)",
            "FOREIGN KEY (relationship_id) REFERENCES relationships(id)",
            "FOREIGN KEY (predecessor_id) REFERENCES media_outlets(id)",
            "FOREIGN KEY (successor_id) REFERENCES media_outlets(id)",
        ],
    ),
    (
        "synchronous_relationships",
        [
            "id INTEGER PRIMARY KEY",
            "relationship_id INTEGER NOT NULL",
            "outlet_1_id INTEGER NOT NULL",
            "outlet_1_role VARCHAR(100)",
            "outlet_2_id INTEGER NOT NULL",
            "outlet_2_role VARCHAR(100)",
            "relationship_subtype VARCHAR(100)",
            "period_start DATE",
            "period_end DATE",
            "details TEXT",
            "maps_to VARCHAR(255)",
            "FOREIGN KEY (relationship_id) REFERENCES relationships(id)",
            "FOREIGN KEY (outlet_1_id) REFERENCES media_outlets(id)",
            "FOREIGN KEY (outlet_2_id) REFERENCES media_outlets(id)",
        ],
    ),
    (
        "market_data",
        [
            "id INTEGER PRIMARY KEY",
            "outlet_id INTEGER NOT NULL",
            "data_year INTEGER NOT NULL",
            "metric_name VARCHAR(100) NOT NULL",
            "metric_value DECIMAL(15,2)",
            "metric_unit VARCHAR(50)",
            "data_source VARCHAR(100)",
            "comment TEXT",
            "maps_to VARCHAR(255)",
            "created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP",
            "FOREIGN KEY (outlet_id) REFERENCES media_outlets(id)",
        ],
    ),
    (
        "data_aggregation",
        [
            "id INTEGER PRIMARY KEY",
            "outlet_id INTEGER NOT NULL",
            "aggregation_name VARCHAR(100) NOT NULL",
            "aggregation_value VARCHAR(100) NOT NULL",
            "FOREIGN KEY (outlet_id) REFERENCES media_outlets(id)",
        ],
    ),
    (
        "events",
        [
            "id INTEGER PRIMARY KEY",
            "name VARCHAR(255) NOT NULL",
            "event_type VARCHAR(100) NOT NULL",
            "event_date DATE",
            "status VARCHAR(100)",
            "created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP",
        ],
    ),
    (
        "event_entities",
        [
            "id INTEGER PRIMARY KEY",
            "event_id INTEGER NOT NULL",
            "entity_name VARCHAR(255) NOT NULL",
            "entity_id INTEGER NOT NULL",
            "entity_role VARCHAR(100)",
            "stake_before DECIMAL(10,2)",
            "stake_after DECIMAL(10,2)",
            "FOREIGN KEY (event_id) REFERENCES events(id)",
            "FOREIGN KEY (entity_id) REFERENCES media_outlets(id)",
        ],
    ),
    (
        "event_impact",
        [
            "id INTEGER PRIMARY KEY",
            "event_id INTEGER NOT NULL",
            "impact_name VARCHAR(100) NOT NULL",
            "impact_value TEXT",
            "impact_type VARCHAR(50) DEFAULT 'string'",
            "FOREIGN KEY (event_id) REFERENCES events(id)",
        ],
    ),
    (
        "event_metadata",
        [
            "id INTEGER PRIMARY KEY",
            "event_id INTEGER NOT NULL",
            "metadata_name VARCHAR(100) NOT NULL",
            "metadata_value TEXT",
            "metadata_type VARCHAR(50) DEFAULT 'string'",
            "FOREIGN KEY (event_id) REFERENCES events(id)",
        ],
    ),
]

COLUMN_TYPES = {
    FieldTypeKind.ID: "INTEGER",
    FieldTypeKind.NUMBER: "DECIMAL(15,2)",
    FieldTypeKind.BOOLEAN: "BOOLEAN",
    FieldTypeKind.CATEGORY: "VARCHAR(100)",
}


def comment_value(expr: IRExpression) -> str:
    """Expression as shown in a ``--`` comment: strings quoted, containers by kind."""
    if isinstance(expr, StringValue):
        return f'"{expr.value}"'
    if isinstance(expr, ObjectValue):
        return "object"
    if isinstance(expr, ArrayValue):
        return "array"
    return expression_text(expr)


def value_literal(expr: IRExpression) -> str:
    return sql_string(expression_text(expr))


def column_block(columns: list[str]) -> str:
    """Indented column list; a trailing '--' comment stays after the separator."""
    lines = []
    for i, column in enumerate(columns):
        definition, _, comment = column.partition(" -- ")
        separator = "," if i < len(columns) - 1 else ""
        line = f"    {definition}{separator}"
        lines.append(f"{line} -- {comment}" if comment else line)
    return "\n".join(lines)


class SqlGenerator(Generator):
    """Generic relational schema and data for an IRProgram."""

    name = "sql"
    extension = ".sql"

    def build(self) -> str:
        program = self.program
        parts = [HEADER]

        if program.imports:
            parts.append("-- IMPORTS\n")
            parts.extend(f'-- IMPORT "{imp.path}"\n' for imp in program.imports)
            parts.append("\n")

        if program.variables:
            parts.append("-- VARIABLES\n")
            parts.extend(
                f"-- LET {var.name} = {comment_value(var.value)}\n" for var in program.variables
            )
            parts.append("\n")

        parts.append(self.core_schema())
        parts.extend(self.unit_table(unit) + "\n" for unit in program.units)
        parts.extend(self.vocabulary_table(vocab) + "\n" for vocab in program.vocabularies)
        parts.extend(self.template_rows(template) + "\n" for template in program.templates)
        parts.extend(self.family_rows(family) + "\n" for family in program.families)
        parts.append(self.relationship_rows(program))
        parts.append(self.market_data_rows(program))
        parts.append(self.event_rows(program))

        sql = "".join(parts)
        logger.debug("Generated %d lines of SQL", sql.count("\n"))
        return sql

    # =========================================================================
    # Schema
    # =========================================================================

    def core_schema(self) -> str:
        parts = [
            "-- CORE SCHEMA TABLES\n",
            "-- These tables support the MediaLanguage DSL structure\n\n",
        ]
        for table, columns in CORE_TABLES:
            parts.append(f"CREATE TABLE {table} (\n{column_block(columns)}\n);\n\n")
        return "".join(parts)

    def unit_table(self, unit: IRUnit) -> str:
        columns = ",\n".join(self.column_definition(field) for field in unit.fields)
        return (
            f"-- Table for unit: {unit.name}\n"
            f"CREATE TABLE {unit.name.lower()} (\n{columns}\n);\n"
        )

    @staticmethod
    def column_definition(field: IRField) -> str:
        field_type = field.field_type
        if field_type.kind == FieldTypeKind.TEXT:
            sql_type = "TEXT" if field_type.length is None else f"VARCHAR({field_type.length})"
        elif field_type.kind in COLUMN_TYPES:
            sql_type = COLUMN_TYPES[field_type.kind]
        else:
            raise make_unsupported_feature(f"field type {field_type.kind.value}", "sql")

        definition = f"    {field.name} {sql_type}"
        if field.is_primary_key:
            definition += " PRIMARY KEY NOT NULL"
        return definition

    def vocabulary_table(self, vocab: IRVocabulary) -> str:
        table = vocab.name.lower()
        lines = [
            f"-- Vocabulary table: {vocab.name}",
            f"CREATE TABLE {table} (",
            "    id INTEGER PRIMARY KEY,",
            "    code VARCHAR(50) NOT NULL,",
            "    description TEXT NOT NULL,",
            "    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP",
            ");",
            "",
            f"-- Insert vocabulary data for {vocab.name}",
        ]
        for index, entry in enumerate(vocab.entries, 1):
            key = format_number(entry.key) if isinstance(entry.key, float) else entry.key
            lines.append(
                f"INSERT INTO {table} (id, code, description) "
                f"VALUES ({index}, {sql_string(key)}, {sql_string(entry.value)});"
            )
        return "\n".join(lines) + "\n"

    # =========================================================================
    # Templates, families and outlets
    # =========================================================================

    def template_rows(self, template: IRTemplate) -> str:
        lines = [
            f"-- Template: {template.name}",
            "INSERT INTO templates (name, template_type) "
            f"VALUES ({sql_string(template.name)}, {sql_string(template.template_type)});",
        ]
        for block in template.blocks:
            lines.append(f"-- Template {template.name} {block.kind}:")
            lines.extend(f"--   {f.name}: {comment_value(f.value)}" for f in block.fields)
        return "\n".join(lines) + "\n"

    def family_rows(self, family: IRFamily) -> str:
        family_ref = f"(SELECT id FROM families WHERE name = {sql_string(family.name)})"
        lines = [
            f"-- Family: {family.name}",
            "INSERT INTO families (name, comment) "
            f"VALUES ({sql_string(family.name)}, {sql_optional(family.comment)});",
        ]

        for outlet in family.outlets:
            outlet_id = outlet.id if outlet.id is not None else 0
            lines.append(f"-- Outlet: {outlet.name}")
            template_ref = (
                "NULL"
                if outlet.template_ref is None
                else f"(SELECT id FROM templates WHERE name = {sql_string(outlet.template_ref)})"
            )
            base_ref = "NULL" if outlet.base_ref is None else str(outlet.base_ref)
            lines.append(
                "INSERT INTO media_outlets (id, name, family_id, template_id, base_outlet_id) "
                f"VALUES ({outlet_id}, {sql_string(outlet.name)}, {family_ref}, "
                f"{template_ref}, {base_ref});"
            )
            for block in outlet.blocks:
                if block.kind == "lifecycle":
                    for status in block.statuses:
                        values = ", ".join(
                            [
                                str(outlet_id),
                                sql_string(status.status),
                                sql_optional(status.start_date),
                                sql_optional(status.end_date),
                                sql_optional(status.precision_start),
                                sql_optional(status.precision_end),
                                sql_optional(status.comment),
                            ]
                        )
                        lines.append(
                            "INSERT INTO outlet_lifecycle (outlet_id, status, start_date, "
                            "end_date, precision_start, precision_end, comment) "
                            f"VALUES ({values});"
                        )
                    continue

                table, column = {
                    "identity": ("outlet_identity", "field"),
                    "characteristics": ("outlet_characteristics", "characteristic"),
                    "metadata": ("outlet_metadata", "metadata"),
                }[block.kind]
                for f in block.fields:
                    lines.append(
                        f"INSERT INTO {table} (outlet_id, {column}_name, {column}_value) "
                        f"VALUES ({outlet_id}, {sql_string(f.name)}, {value_literal(f.value)});"
                    )

        return "\n".join(lines) + "\n"

    # =========================================================================
    # Relationships, market data and events
    # =========================================================================

    def relationship_rows(self, program: IRProgram) -> str:
        lines = ["-- RELATIONSHIPS"]
        for family in program.families:
            family_ref = f"(SELECT id FROM families WHERE name = {sql_string(family.name)})"
            for link in family.relationships:
                link_ref = (
                    "(SELECT id FROM relationships WHERE relationship_name = "
                    f"{sql_string(link.name)})"
                )
                lines.append(
                    "INSERT INTO relationships (relationship_name, relationship_type, family_id) "
                    f"VALUES ({sql_string(link.name)}, '{link.kind}', {family_ref});"
                )
                if isinstance(link, IRDiachronicLink):
                    values = [
                        link_ref,
                        str(link.predecessor),
                        str(link.successor),
                        sql_optional(link.event_start_date),
                        sql_optional(link.event_end_date),
                        sql_string(link.relationship_type),
                        sql_optional(link.comment),
                        sql_optional(link.maps_to),
                    ]
                    lines.append(
                        "INSERT INTO diachronic_relationships (relationship_id, predecessor_id, "
                        "successor_id, event_start_date, event_end_date, relationship_subtype, "
                        f"comment, maps_to) VALUES ({', '.join(values)});"
                    )
                else:
                    values = [
                        link_ref,
                        str(link.outlet_1.id),
                        sql_string(link.outlet_1.role),
                        str(link.outlet_2.id),
                        sql_string(link.outlet_2.role),
                        sql_string(link.relationship_type),
                        sql_optional(link.period_start),
                        sql_optional(link.period_end),
                        sql_optional(link.details),
                        sql_optional(link.maps_to),
                    ]
                    lines.append(
                        "INSERT INTO synchronous_relationships (relationship_id, outlet_1_id, "
                        "outlet_1_role, outlet_2_id, outlet_2_role, relationship_subtype, "
                        f"period_start, period_end, details, maps_to) VALUES ({', '.join(values)});"
                    )
        return "\n".join(lines) + "\n"

    def market_data_rows(self, program: IRProgram) -> str:
        lines = ["-- MARKET DATA"]
        for block in program.data_blocks():
            for agg in block.aggregation:
                lines.append(
                    "INSERT INTO data_aggregation (outlet_id, aggregation_name, aggregation_value) "
                    f"VALUES ({block.outlet_id}, {sql_string(agg.name)}, {sql_string(agg.value)});"
                )
            for year in block.years:
                for metric in year.metrics:
                    values = [
                        str(block.outlet_id),
                        str(year.year),
                        sql_string(metric.name),
                        format_number(metric.value),
                        sql_string(metric.unit),
                        sql_string(metric.source),
                        sql_optional(metric.comment),
                        sql_optional(block.maps_to),
                    ]
                    lines.append(
                        "INSERT INTO market_data (outlet_id, data_year, metric_name, "
                        "metric_value, metric_unit, data_source, comment, maps_to) "
                        f"VALUES ({', '.join(values)});"
                    )
        return "\n".join(lines) + "\n"

    def event_rows(self, program: IRProgram) -> str:
        if not program.events:
            return ""

        lines = ["-- EVENTS"]
        for event_id, event in enumerate(program.events, 1):
            values = [
                str(event_id),
                sql_string(event.name),
                sql_string(event.event_type),
                sql_optional(event.date),
                sql_optional(event.status),
            ]
            lines.append(
                "INSERT INTO events (id, name, event_type, event_date, status) "
                f"VALUES ({', '.join(values)});"
            )
            for entity in event.entities:
                values = [
                    str(event_id),
                    sql_string(entity.name),
                    str(entity.id),
                    sql_string(entity.role),
                    "NULL" if entity.stake_before is None else format_number(entity.stake_before),
                    "NULL" if entity.stake_after is None else format_number(entity.stake_after),
                ]
                lines.append(
                    "INSERT INTO event_entities (event_id, entity_name, entity_id, entity_role, "
                    f"stake_before, stake_after) VALUES ({', '.join(values)});"
                )
            for impact in event.impact:
                lines.append(
                    "INSERT INTO event_impact (event_id, impact_name, impact_value) "
                    f"VALUES ({event_id}, {sql_string(impact.name)}, "
                    f"{value_literal(impact.value)});"
                )
            for meta in event.metadata:
                lines.append(
                    "INSERT INTO event_metadata (event_id, metadata_name, metadata_value) "
                    f"VALUES ({event_id}, {sql_string(meta.name)}, {value_literal(meta.value)});"
                )
        return "\n".join(lines) + "\n\n"


def generate_sql(program: IRProgram) -> str:
    """
    Generate generic SQL for a program.

    Raises:
        CodeGenError: If the program cannot be expressed in SQL
    """
    return run_generator(SqlGenerator(program))
