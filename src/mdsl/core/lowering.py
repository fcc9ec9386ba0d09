"""
AST to IR lowering for MDSL.

A single walk over the parsed Program that:
- flattens expression wrappers into IR values
- pulls well-known keys (outlet id, lifecycle precision, metric value/unit/source,
  relationship endpoints) out of free-form blocks
- records EXTENDS TEMPLATE / BASED_ON as references without materializing them
- hoists top-level relationships and data blocks into the first family, or into
  a synthetic "Global Relationships" family when the program declares none

Lowering never fails on unknown keys; they are dropped. The validator is the
sole reporter of semantic problems.
"""

from __future__ import annotations

import logging

from . import ast, ir

logger = logging.getLogger(__name__)

GLOBAL_FAMILY_NAME = "Global Relationships"
GLOBAL_FAMILY_COMMENT = "Auto-generated family for top-level relationships"


def lower_program(program: ast.Program) -> ir.IRProgram:
    """
    Lower a parsed program to IR.

    Args:
        program: Parsed Program

    Returns:
        Immutable IRProgram
    """
    imports: list[ir.IRImport] = []
    variables: list[ir.IRVariable] = []
    templates: list[ir.IRTemplate] = []
    units: list[ir.IRUnit] = []
    vocabularies: list[ir.IRVocabulary] = []
    families: list[ir.IRFamily] = []
    events: list[ir.IREvent] = []
    loose_relationships: list[ir.IRRelationship] = []
    loose_data: list[ir.IRDataBlock] = []

    for statement in program.statements:
        if isinstance(statement, ast.ImportStatement):
            imports.append(ir.IRImport(path=statement.path))
        elif isinstance(statement, ast.VariableDeclaration):
            variables.append(
                ir.IRVariable(name=statement.name, value=lower_expression(statement.value))
            )
        elif isinstance(statement, ast.TemplateDeclaration):
            templates.append(lower_template(statement))
        elif isinstance(statement, ast.UnitDeclaration):
            units.append(lower_unit(statement))
        elif isinstance(statement, ast.VocabularyDeclaration):
            vocabularies.append(lower_vocabulary(statement))
        elif isinstance(statement, ast.FamilyDeclaration):
            families.append(lower_family(statement))
        elif isinstance(statement, ast.DiachronicLink | ast.SynchronousLink):
            loose_relationships.append(lower_relationship(statement))
        elif isinstance(statement, ast.DataDeclaration):
            loose_data.append(lower_data(statement))
        elif isinstance(statement, ast.EventDeclaration):
            events.append(lower_event(statement))

    if loose_relationships or loose_data:
        if families:
            first = families[0]
            families[0] = first.model_copy(
                update={
                    "relationships": first.relationships + loose_relationships,
                    "data_blocks": first.data_blocks + loose_data,
                }
            )
        else:
            families.append(
                ir.IRFamily(
                    name=GLOBAL_FAMILY_NAME,
                    comment=GLOBAL_FAMILY_COMMENT,
                    relationships=loose_relationships,
                    data_blocks=loose_data,
                )
            )
        logger.debug(
            "Hoisted %d relationships and %d data blocks into family %r",
            len(loose_relationships),
            len(loose_data),
            families[0].name,
        )

    result = ir.IRProgram(
        imports=imports,
        variables=variables,
        templates=templates,
        units=units,
        vocabularies=vocabularies,
        families=families,
        events=events,
    )
    logger.debug(
        "Lowered %d families, %d templates, %d units, %d vocabularies, %d events",
        len(families),
        len(templates),
        len(units),
        len(vocabularies),
        len(events),
    )
    return result


# =============================================================================
# Expressions
# =============================================================================


def lower_expression(expr: ast.Expression) -> ir.IRExpression:
    if isinstance(expr, ast.StringExpr):
        return ir.StringValue(value=expr.value)
    if isinstance(expr, ast.NumberExpr):
        return ir.NumberValue(value=expr.value)
    if isinstance(expr, ast.BooleanExpr):
        return ir.BooleanValue(value=expr.value)
    if isinstance(expr, ast.VariableExpr):
        return ir.VariableRef(name=expr.name)
    return lower_object(expr)


def lower_object(obj: ast.ObjectExpr) -> ir.ObjectValue:
    """Periods become ``{from, to}`` objects; ``to`` is omitted when open."""
    fields: list[ir.ObjectField] = []
    for field in obj.fields:
        if isinstance(field, ast.ObjectAssignment):
            fields.append(ir.ObjectField(name=field.name, value=lower_expression(field.value)))
        else:
            period = field.value
            bounds = [
                ir.ObjectField(name="from", value=ir.StringValue(value=period.start.lowered()))
            ]
            if period.end is not None:
                bounds.append(
                    ir.ObjectField(name="to", value=ir.StringValue(value=period.end.lowered()))
                )
            fields.append(ir.ObjectField(name=field.name, value=ir.ObjectValue(fields=bounds)))
    return ir.ObjectValue(fields=fields)


def _assignments(fields: list) -> list[ir.IRAssignment]:
    return [
        ir.IRAssignment(name=f.name, value=lower_expression(f.value))
        for f in fields
        if isinstance(f, ast.Assignment)
    ]


def _string_value(expr: ast.Expression) -> str | None:
    return expr.value if isinstance(expr, ast.StringExpr) else None


# =============================================================================
# Declarations
# =============================================================================


def lower_unit(unit: ast.UnitDeclaration) -> ir.IRUnit:
    return ir.IRUnit(
        name=unit.name,
        fields=[
            ir.IRField(
                name=field.name,
                field_type=ir.IRFieldType(
                    kind=field.field_type.kind,
                    length=field.field_type.length,
                    values=list(field.field_type.values),
                ),
                is_primary_key=field.is_primary_key,
            )
            for field in unit.fields
        ],
    )


def lower_vocabulary(vocabulary: ast.VocabularyDeclaration) -> ir.IRVocabulary:
    """Merge every body's entries; the first body names the result."""
    body_name = vocabulary.bodies[0].name if vocabulary.bodies else vocabulary.name
    entries = [
        ir.IRVocabularyEntry(key=entry.key, value=entry.value)
        for body in vocabulary.bodies
        for entry in body.entries
    ]
    return ir.IRVocabulary(name=vocabulary.name, body_name=body_name, entries=entries)


def lower_template(template: ast.TemplateDeclaration) -> ir.IRTemplate:
    """Templates keep only their characteristics and metadata."""
    blocks: list[ir.IRTemplateBlock] = []
    for block in template.blocks:
        if isinstance(block, ast.CharacteristicsBlock):
            blocks.append(ir.IRCharacteristicsBlock(fields=_assignments(block.fields)))
        elif isinstance(block, ast.MetadataBlock):
            blocks.append(ir.IRMetadataBlock(fields=_assignments(block.fields)))
    return ir.IRTemplate(name=template.name, template_type=template.template_type, blocks=blocks)


# =============================================================================
# Families and outlets
# =============================================================================


def lower_family(family: ast.FamilyDeclaration) -> ir.IRFamily:
    comment = None
    outlets: list[ir.IROutlet] = []
    relationships: list[ir.IRRelationship] = []
    data_blocks: list[ir.IRDataBlock] = []

    for member in family.members:
        if isinstance(member, ast.OutletDeclaration):
            outlets.append(lower_outlet(member))
        elif isinstance(member, ast.DiachronicLink | ast.SynchronousLink):
            relationships.append(lower_relationship(member))
        elif isinstance(member, ast.DataDeclaration):
            data_blocks.append(lower_data(member))
        elif isinstance(member, ast.Comment) and comment is None:
            comment = member.text

    return ir.IRFamily(
        name=family.name,
        comment=comment,
        outlets=outlets,
        relationships=relationships,
        data_blocks=data_blocks,
    )


def lower_outlet(outlet: ast.OutletDeclaration) -> ir.IROutlet:
    template_ref = None
    base_ref = None
    if isinstance(outlet.inheritance, ast.ExtendsTemplate):
        template_ref = outlet.inheritance.template
    elif isinstance(outlet.inheritance, ast.BasedOn):
        base_ref = int(outlet.inheritance.outlet_id)

    blocks: list[ir.IROutletBlock] = []
    for block in outlet.blocks:
        if isinstance(block, ast.IdentityBlock):
            blocks.append(ir.IRIdentityBlock(fields=_identity_fields(block)))
        elif isinstance(block, ast.LifecycleBlock):
            blocks.append(
                ir.IRLifecycleBlock(statuses=[_lifecycle_status(e) for e in block.entries])
            )
        elif isinstance(block, ast.CharacteristicsBlock):
            blocks.append(ir.IRCharacteristicsBlock(fields=_assignments(block.fields)))
        elif isinstance(block, ast.MetadataBlock):
            blocks.append(ir.IRMetadataBlock(fields=_assignments(block.fields)))

    return ir.IROutlet(
        name=outlet.name,
        id=outlet.declared_id(),
        template_ref=template_ref,
        base_ref=base_ref,
        blocks=blocks,
    )


def _identity_fields(block: ast.IdentityBlock) -> list[ir.IRAssignment]:
    fields: list[ir.IRAssignment] = []
    for field in block.fields:
        if isinstance(field, ast.Assignment):
            fields.append(ir.IRAssignment(name=field.name, value=lower_expression(field.value)))
        elif isinstance(field, ast.ArrayAssignment):
            items: list[ir.IRExpression] = [lower_object(v) for v in field.values]
            fields.append(ir.IRAssignment(name=field.name, value=ir.ArrayValue(items=items)))
    return fields


def _lifecycle_status(entry: ast.LifecycleEntry) -> ir.IRLifecycleStatus:
    attributes = {
        a.name.lower(): _string_value(a.value)
        for a in entry.attributes
        if isinstance(a, ast.Assignment)
    }
    return ir.IRLifecycleStatus(
        status=entry.status,
        start_date=entry.start.lowered(),
        end_date=entry.end.lowered() if entry.end is not None else None,
        precision_start=attributes.get("precision_start"),
        precision_end=attributes.get("precision_end"),
        comment=attributes.get("comment"),
    )


# =============================================================================
# Market data
# =============================================================================


def lower_data(data: ast.DataDeclaration) -> ir.IRDataBlock:
    aggregation: list[ir.IRDataAggregation] = []
    years: list[ir.IRDataYear] = []
    maps_to = None

    for block in data.blocks:
        if isinstance(block, ast.Annotation):
            if block.name == "maps_to":
                maps_to = block.value
        elif isinstance(block, ast.AggregationDeclaration):
            aggregation.extend(
                ir.IRDataAggregation(name=f.name, value=f.value) for f in block.fields
            )
        elif isinstance(block, ast.YearDeclaration):
            years.append(_data_year(block))

    return ir.IRDataBlock(
        outlet_id=int(data.target_id), aggregation=aggregation, years=years, maps_to=maps_to
    )


def _data_year(year: ast.YearDeclaration) -> ir.IRDataYear:
    metrics: list[ir.IRDataMetric] = []
    comment = None
    for block in year.blocks:
        if isinstance(block, ast.MetricsBlock):
            metrics.extend(_metric(field) for field in block.fields)
        elif isinstance(block, ast.YearComment):
            comment = block.value
    return ir.IRDataYear(year=int(year.year), metrics=metrics, comment=comment)


def _metric(field: ast.MetricField) -> ir.IRDataMetric:
    values: dict = {}
    for attribute in field.attributes:
        key = attribute.name.lower()
        expr = attribute.value
        if key == "value" and isinstance(expr, ast.NumberExpr):
            values["value"] = expr.value
        elif key in ("unit", "source", "comment") and isinstance(expr, ast.StringExpr):
            values[key] = expr.value
    return ir.IRDataMetric(name=field.name, **values)


# =============================================================================
# Relationships and events
# =============================================================================


def _annotation(annotations: list[ast.Annotation], name: str) -> str | None:
    for annotation in annotations:
        if annotation.name == name:
            return annotation.value
    return None


def lower_relationship(link: ast.Relationship) -> ir.IRRelationship:
    if isinstance(link, ast.DiachronicLink):
        return ir.IRDiachronicLink(
            name=link.name,
            predecessor=int(link.predecessor or 0),
            successor=int(link.successor or 0),
            event_start_date=link.event_date.start.lowered() if link.event_date else None,
            event_end_date=(
                link.event_date.end.lowered()
                if link.event_date and link.event_date.end is not None
                else None
            ),
            relationship_type=link.relationship_type or "",
            comment=_annotation(link.annotations, "comment"),
            maps_to=_annotation(link.annotations, "maps_to"),
        )

    return ir.IRSynchronousLink(
        name=link.name,
        outlet_1=_sync_outlet(link.outlet_1),
        outlet_2=_sync_outlet(link.outlet_2),
        relationship_type=link.relationship_type or "",
        period_start=link.period_start.lowered() if link.period_start else None,
        period_end=link.period_end.lowered() if link.period_end else None,
        details=link.details,
        maps_to=_annotation(link.annotations, "maps_to"),
    )


def _sync_outlet(spec: ast.OutletSpec | None) -> ir.IRSyncOutlet:
    if spec is None:
        return ir.IRSyncOutlet()
    return ir.IRSyncOutlet(id=int(spec.outlet_id), role=spec.role or "")


def lower_event(event: ast.EventDeclaration) -> ir.IREvent:
    return ir.IREvent(
        name=event.name,
        event_type=event.event_type or "",
        date=event.date.lowered() if event.date else None,
        entities=[
            ir.IREventEntity(
                name=entity.name,
                id=int(entity.outlet_id or 0),
                role=entity.role or "",
                stake_before=entity.stake_before,
                stake_after=entity.stake_after,
            )
            for entity in event.entities
        ],
        impact=_assignments(event.impact),
        metadata=_assignments(event.metadata),
        status=event.status,
    )
