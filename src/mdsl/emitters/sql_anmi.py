"""
ANMI-compatible SQL emitter.

Recreates the legacy ANMI database shape under the ``graphv3`` schema:
one ``mo_constant`` row per outlet, ``mo_year`` upserts per metric and
numbered relationship tables. Statements are idempotent
(``IF NOT EXISTS`` / ``ON CONFLICT``).
"""

import logging
from dataclasses import dataclass

from ..core.ir import (
    IRDataMetric,
    IRDiachronicLink,
    IRExpression,
    IROutlet,
    IRProgram,
    NumberValue,
    StringValue,
    format_number,
)
from .base import Generator, run_generator, sql_optional, sql_string

logger = logging.getLogger(__name__)

SCHEMA = "graphv3"

HEADER = (
    "-- Generated ANMI-compatible SQL from MediaLanguage DSL\n"
    "-- This file recreates the original ANMI database schema\n"
    "-- Compatible with graphv3 schema structure\n\n"
    "-- Create schema if not exists\n"
    f"CREATE SCHEMA IF NOT EXISTS {SCHEMA};\n\n"
)

ANMI_TABLES = """\
-- ANMI Core Tables

CREATE TABLE IF NOT EXISTS graphv3.mo_constant (
    id_mo INTEGER PRIMARY KEY,
    mo_title VARCHAR(120),
    id_sector INTEGER,
    mandate INTEGER,
    location VARCHAR(25),
    primary_distr_area INTEGER,
    local INTEGER,
    language VARCHAR(5),
    start_date DATE,
    end_date DATE,
    editorial_line_s TEXT,
    comments TEXT
);

CREATE TABLE IF NOT EXISTS graphv3.mo_year (
    id_mo INTEGER,
    year INTEGER,
    mo_year INTEGER,
    calc INTEGER,
    circulation INTEGER,
    circulation_source INTEGER,
    unique_users INTEGER,
    unique_users_source INTEGER,
    reach_nat DECIMAL(5,2),
    reach_nat_source INTEGER,
    reach_reg DECIMAL(5,2),
    reach_reg_source INTEGER,
    market_share DECIMAL(5,2),
    market_share_source INTEGER,
    comments TEXT,
    PRIMARY KEY (id_mo, year, mo_year),
    FOREIGN KEY (id_mo) REFERENCES graphv3.mo_constant(id_mo)
);

CREATE TABLE IF NOT EXISTS graphv3.sources_names (
    id_source INTEGER PRIMARY KEY,
    source_name VARCHAR(100)
);

CREATE TABLE IF NOT EXISTS graphv3.sectors (
    id_sector INTEGER PRIMARY KEY,
    sector_name VARCHAR(100)
);

CREATE TABLE IF NOT EXISTS graphv3.distribution_areas (
    id_area INTEGER PRIMARY KEY,
    area_name VARCHAR(100)
);

"""

# relationship_type -> numbered table; 1x tables are diachronic, 2x synchronous
DIACHRONIC_TABLES = {
    "succession": ("11_succession", "Succession relationships"),
    "amalgamation": ("12_amalgamation", "Amalgamation relationships"),
    "new_distribution_area": (
        "13_new_distribution_area",
        "New distribution area relationships",
    ),
    "new_sector": ("14_new_sector", "New sector relationships"),
    "interruption": ("15_interruption", "Interruption relationships"),
    "split_off": ("16_split_off", "Split-off relationships"),
    "merger": ("17_merger", "Merger relationships"),
    "offshoot": ("18_offshoot", "Offshoot relationships"),
}

SYNCHRONOUS_TABLES = {
    "main_media_outlet": ("21_main_media_outlet", "Main media outlet relationships"),
    "umbrella": ("22_umbrella", "Umbrella relationships"),
    "collaboration": ("23_collaboration", "Collaboration relationships"),
}

# metric name -> (mo_year column, integer column)
METRIC_COLUMNS = {
    "circulation": ("circulation", True),
    "unique_users": ("unique_users", True),
    "reach_national": ("reach_nat", False),
    "reach_regional": ("reach_reg", False),
    "market_share": ("market_share", False),
}

VOCABULARY_TABLES = {
    "SECTOR": ("sectors", "id_sector", "sector_name", "Populate sectors"),
    "DISTRIBUTION_AREA": (
        "distribution_areas",
        "id_area",
        "area_name",
        "Populate distribution areas",
    ),
}


@dataclass
class MoConstantRow:
    """Columns of one ``graphv3.mo_constant`` row harvested from an outlet."""

    id_mo: int
    mo_title: str
    id_sector: int | None = None
    mandate: int | None = None
    location: str | None = None
    primary_distr_area: int | None = None
    local: int | None = None
    language: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    editorial_line_s: str | None = None
    comments: str | None = None

    @classmethod
    def from_outlet(cls, outlet: IROutlet) -> "MoConstantRow":
        row = cls(id_mo=outlet.id if outlet.id is not None else 0, mo_title=outlet.name)

        for block in outlet.blocks:
            if block.kind == "identity":
                for f in block.fields:
                    if f.name.lower() == "id" and isinstance(f.value, NumberValue):
                        row.id_mo = int(f.value.value)
                    elif f.name.lower() == "name" and isinstance(f.value, StringValue):
                        row.mo_title = f.value.value
            elif block.kind == "characteristics":
                for f in block.fields:
                    row.harvest_characteristic(f.name.lower(), f.value)
            elif block.kind == "lifecycle":
                if block.statuses:
                    row.start_date = block.statuses[0].start_date
                    row.end_date = block.statuses[0].end_date
            else:
                for f in block.fields:
                    if not isinstance(f.value, StringValue):
                        continue
                    if f.name.lower() == "editorial_line":
                        row.editorial_line_s = f.value.value
                    elif f.name.lower() == "comments":
                        row.comments = f.value.value
        return row

    def harvest_characteristic(self, name: str, value: IRExpression) -> None:
        if isinstance(value, NumberValue):
            number = int(value.value)
            if name == "sector":
                self.id_sector = number
            elif name == "mandate":
                self.mandate = number
            elif name == "primary_distribution_area":
                self.primary_distr_area = number
            elif name == "local":
                self.local = number
        elif isinstance(value, StringValue):
            if name == "location":
                self.location = value.value
            elif name == "language":
                self.language = value.value

    def values(self) -> list[str]:
        def number(v: int | None) -> str:
            return "NULL" if v is None else str(v)

        return [
            str(self.id_mo),
            sql_string(self.mo_title),
            number(self.id_sector),
            number(self.mandate),
            sql_optional(self.location),
            number(self.primary_distr_area),
            number(self.local),
            sql_optional(self.language),
            sql_optional(self.start_date),
            sql_optional(self.end_date),
            sql_optional(self.editorial_line_s),
            sql_optional(self.comments),
        ]


class AnmiSqlGenerator(Generator):
    """ANMI-shaped SQL for an IRProgram."""

    name = "sql_anmi"
    extension = ".anmi.sql"

    def __init__(self, program: IRProgram):
        super().__init__(program)
        self.sources = self.intern_sources()

    def intern_sources(self) -> dict[str, int]:
        """Number metric sources from 1 in first-seen order; blank sources are not interned."""
        sources: dict[str, int] = {}
        for block in self.program.data_blocks():
            for year in block.years:
                for metric in year.metrics:
                    if metric.source and metric.source not in sources:
                        sources[metric.source] = len(sources) + 1
        return sources

    def build(self) -> str:
        sql = "".join(
            [
                HEADER,
                ANMI_TABLES,
                self.relationship_tables(),
                self.outlet_rows(),
                self.market_data_rows(),
                self.relationship_rows(),
            ]
        )
        logger.debug("Generated ANMI SQL with %d sources", len(self.sources))
        return sql

    @staticmethod
    def relationship_tables() -> str:
        parts = ["-- Relationship Tables\n\n"]
        for tables, left, right, start, end in (
            (DIACHRONIC_TABLES, "id_pred", "id_succ", "e_s", "e_e"),
            (SYNCHRONOUS_TABLES, "id_mo_1", "id_mo_2", "p_s", "p_e"),
        ):
            for table, description in tables.values():
                parts.append(
                    f"-- {description}\n"
                    f"CREATE TABLE IF NOT EXISTS {SCHEMA}.{table} (\n"
                    f"    {left} INTEGER,\n"
                    f"    {right} INTEGER,\n"
                    f"    {start} DATE,\n"
                    f"    {end} DATE,\n"
                    f"    PRIMARY KEY ({left}, {right}),\n"
                    f"    FOREIGN KEY ({left}) REFERENCES {SCHEMA}.mo_constant(id_mo),\n"
                    f"    FOREIGN KEY ({right}) REFERENCES {SCHEMA}.mo_constant(id_mo)\n"
                    ");\n\n"
                )
        return "".join(parts)

    def outlet_rows(self) -> str:
        parts = ["-- Media Outlet Data\n\n"]

        for vocab in self.program.vocabularies:
            if vocab.name not in VOCABULARY_TABLES:
                continue
            table, id_column, name_column, title = VOCABULARY_TABLES[vocab.name]
            parts.append(f"-- {title}\n")
            for entry in vocab.entries:
                if isinstance(entry.key, float):
                    parts.append(
                        f"INSERT INTO {SCHEMA}.{table} ({id_column}, {name_column}) "
                        f"VALUES ({format_number(entry.key)}, {sql_string(entry.value)}) "
                        "ON CONFLICT DO NOTHING;\n"
                    )
            parts.append("\n")

        if self.sources:
            parts.append("-- Populate sources\n")
            for name, source_id in self.sources.items():
                parts.append(
                    f"INSERT INTO {SCHEMA}.sources_names (id_source, source_name) "
                    f"VALUES ({source_id}, {sql_string(name)}) ON CONFLICT DO NOTHING;\n"
                )
            parts.append("\n")

        parts.append("-- Insert media outlets\n")
        for _, outlet in self.program.outlets():
            row = MoConstantRow.from_outlet(outlet)
            parts.append(
                f"INSERT INTO {SCHEMA}.mo_constant (id_mo, mo_title, id_sector, mandate, "
                "location, primary_distr_area, local, language, start_date, end_date, "
                f"editorial_line_s, comments) VALUES ({', '.join(row.values())});\n"
            )
        return "".join(parts)

    def market_data_rows(self) -> str:
        blocks = self.program.data_blocks()
        parts = [
            "\n-- Market Data\n\n",
            f"-- Debug: Found {len(blocks)} data blocks "
            f"across {len(self.program.families)} families\n",
        ]
        for block in blocks:
            for year in block.years:
                for metric in year.metrics:
                    parts.append(self.metric_row(block.outlet_id, year.year, metric))
        return "".join(parts)

    def metric_row(self, outlet_id: int, year: int, metric: IRDataMetric) -> str:
        if metric.name not in METRIC_COLUMNS:
            return (
                f"-- Metric '{metric.name}' = {format_number(metric.value)} "
                f"{metric.unit} (source: {metric.source})\n"
            )

        column, is_integer = METRIC_COLUMNS[metric.name]
        value = str(int(metric.value)) if is_integer else format_number(metric.value)
        source_id = self.sources.get(metric.source)
        source = "NULL" if source_id is None else str(source_id)
        mo_year = outlet_id * 10000 + year
        return (
            f"INSERT INTO {SCHEMA}.mo_year (id_mo, year, mo_year, calc, {column}, "
            f"{column}_source) VALUES ({outlet_id}, {year}, {mo_year}, 0, {value}, {source}) "
            f"ON CONFLICT (id_mo, year, mo_year) DO UPDATE SET {column} = {value}, "
            f"{column}_source = {source};\n"
        )

    def relationship_rows(self) -> str:
        parts = ["\n-- Relationships\n\n"]
        for link in self.program.relationships():
            if isinstance(link, IRDiachronicLink):
                if link.relationship_type not in DIACHRONIC_TABLES:
                    logger.debug(
                        "Skipping diachronic link %s of type %r", link.name, link.relationship_type
                    )
                    continue
                table = DIACHRONIC_TABLES[link.relationship_type][0]
                values = [
                    str(link.predecessor),
                    str(link.successor),
                    sql_optional(link.event_start_date),
                    sql_optional(link.event_end_date),
                ]
                columns = "id_pred, id_succ, e_s, e_e"
            else:
                if link.relationship_type not in SYNCHRONOUS_TABLES:
                    logger.debug(
                        "Skipping synchronous link %s of type %r", link.name, link.relationship_type
                    )
                    continue
                table = SYNCHRONOUS_TABLES[link.relationship_type][0]
                values = [
                    str(link.outlet_1.id),
                    str(link.outlet_2.id),
                    sql_optional(link.period_start),
                    sql_optional(link.period_end),
                ]
                columns = "id_mo_1, id_mo_2, p_s, p_e"
            parts.append(
                f"INSERT INTO {SCHEMA}.{table} ({columns}) VALUES ({', '.join(values)});\n"
            )
        return "".join(parts)


def generate_sql_anmi(program: IRProgram) -> str:
    """
    Generate ANMI-compatible SQL for a program.

    Raises:
        CodeGenError: If the program cannot be expressed in the ANMI shape
    """
    return run_generator(AnmiSqlGenerator(program))
