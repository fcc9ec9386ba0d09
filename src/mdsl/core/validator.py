"""
Semantic validation for MDSL programs.

Runs four ordered phases over the AST so every issue can point at a source
position:

1. Declaration collection: symbol tables for variables, templates, units,
   vocabularies, families and outlet IDs; redeclarations are errors.
2. Per-construct checks: local invariants of every statement.
3. Cross-references: inheritance targets and ``$variable`` uses.
4. Business rules: reserved, no rules fire yet.

The validator never raises. Issues accumulate into a ValidationResult.
"""

from __future__ import annotations

import logging
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from . import ast
from .errors import make_semantic_error
from .ir import format_number
from .position import SourcePosition

logger = logging.getLogger(__name__)

# =============================================================================
# Validation Constants
# =============================================================================

TEXT_LENGTH_WARN_THRESHOLD = 65535
IMPORT_EXTENSION = ".mdsl"


# =============================================================================
# Result Types
# =============================================================================


class ValidationSeverity(str, Enum):
    ERROR = "Error"
    WARNING = "Warning"
    INFO = "Info"


class ValidationIssue(BaseModel):
    """
    One validation finding.

    ``code`` is a stable identifier such as ``IDENTITY_NO_ID``;
    ``context_path`` locates the construct, e.g.
    ``Program > Family(Krone) > Outlet(Kronen Zeitung) > Identity``.
    """

    severity: ValidationSeverity
    code: str
    message: str
    position: SourcePosition
    suggestion: str | None = None
    context_path: str = ""

    model_config = ConfigDict(frozen=True)


class ValidationSummary(BaseModel):
    errors: int = 0
    warnings: int = 0
    info: int = 0
    total_constructs: int = 0

    model_config = ConfigDict(frozen=True)


class ValidationResult(BaseModel):
    """All issues of one validation run; ``passed`` is true iff there are no errors."""

    issues: list[ValidationIssue] = Field(default_factory=list)
    passed: bool = True
    summary: ValidationSummary = Field(default_factory=ValidationSummary)

    model_config = ConfigDict(frozen=True)

    def by_code(self, code: str) -> list[ValidationIssue]:
        return [issue for issue in self.issues if issue.code == code]

    @property
    def errors(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == ValidationSeverity.ERROR]

    @property
    def warnings(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == ValidationSeverity.WARNING]

    def raise_for_errors(self) -> None:
        """
        Raise the first error as a SemanticError.

        Raises:
            SemanticError: If the result holds at least one error
        """
        if self.passed:
            return
        issue = self.errors[0]
        raise make_semantic_error(semantic_kind(issue.code), issue.message, issue.position)


def semantic_kind(code: str) -> str:
    """Map an issue code onto a SemanticError kind."""
    if code == "VARIABLE_NOT_FOUND":
        return "undefined_variable"
    if code.startswith("IMPORT_"):
        return "import_error"
    if "DUPLICATE" in code or code.endswith("_REDECLARED"):
        return "duplicate_definition"
    if code.startswith("FIELD_"):
        return "type_mismatch"
    return "invalid_field"


# =============================================================================
# Validator
# =============================================================================


class Validator:
    """Multi-phase semantic validator. Use once per program."""

    def __init__(self) -> None:
        self.imports: dict[str, SourcePosition] = {}
        self.variables: dict[str, SourcePosition] = {}
        self.templates: dict[str, SourcePosition] = {}
        self.units: dict[str, SourcePosition] = {}
        self.vocabularies: dict[str, SourcePosition] = {}
        self.families: dict[str, SourcePosition] = {}
        self.outlets: dict[int, SourcePosition] = {}
        self.issues: list[ValidationIssue] = []
        self.context: list[str] = []

    def validate(self, program: ast.Program) -> ValidationResult:
        self.push_context("Program")
        self.collect_declarations(program)
        self.validate_statements(program.statements)
        self.validate_references(program)
        self.validate_business_rules(program)
        self.pop_context()

        summary = self.summary()
        logger.debug(
            "Validation finished: %d errors, %d warnings, %d info",
            summary.errors,
            summary.warnings,
            summary.info,
        )
        return ValidationResult(
            issues=list(self.issues), passed=summary.errors == 0, summary=summary
        )

    # -------------------------------------------------------------------------
    # Issue bookkeeping
    # -------------------------------------------------------------------------

    def push_context(self, name: str) -> None:
        self.context.append(name)

    def pop_context(self) -> None:
        self.context.pop()

    def add_issue(
        self,
        severity: ValidationSeverity,
        code: str,
        message: str,
        position: SourcePosition,
        suggestion: str | None = None,
    ) -> None:
        self.issues.append(
            ValidationIssue(
                severity=severity,
                code=code,
                message=message,
                position=position,
                suggestion=suggestion,
                context_path=" > ".join(self.context),
            )
        )

    def add_error(
        self, code: str, message: str, position: SourcePosition, suggestion: str | None = None
    ) -> None:
        self.add_issue(ValidationSeverity.ERROR, code, message, position, suggestion)

    def add_warning(
        self, code: str, message: str, position: SourcePosition, suggestion: str | None = None
    ) -> None:
        self.add_issue(ValidationSeverity.WARNING, code, message, position, suggestion)

    def add_info(
        self, code: str, message: str, position: SourcePosition, suggestion: str | None = None
    ) -> None:
        self.add_issue(ValidationSeverity.INFO, code, message, position, suggestion)

    def summary(self) -> ValidationSummary:
        severities = [issue.severity for issue in self.issues]
        return ValidationSummary(
            errors=severities.count(ValidationSeverity.ERROR),
            warnings=severities.count(ValidationSeverity.WARNING),
            info=severities.count(ValidationSeverity.INFO),
            total_constructs=len(self.templates)
            + len(self.units)
            + len(self.vocabularies)
            + len(self.families),
        )

    # =========================================================================
    # Phase 1: declaration collection
    # =========================================================================

    def collect_declarations(self, program: ast.Program) -> None:
        for statement in program.statements:
            if isinstance(statement, ast.ImportStatement):
                self._declare(self.imports, statement.path, statement.position, "Import", "IMPORT")
            elif isinstance(statement, ast.VariableDeclaration):
                self._declare(self.variables, statement.name, statement.position, "Variable", "VAR")
            elif isinstance(statement, ast.TemplateDeclaration):
                self._declare(
                    self.templates, statement.name, statement.position, "Template", "TEMPLATE"
                )
            elif isinstance(statement, ast.UnitDeclaration):
                self._declare(self.units, statement.name, statement.position, "Unit", "UNIT")
            elif isinstance(statement, ast.VocabularyDeclaration):
                self._declare(
                    self.vocabularies, statement.name, statement.position, "Vocabulary", "VOCAB"
                )
            elif isinstance(statement, ast.FamilyDeclaration):
                self._declare(
                    self.families, statement.name, statement.position, "Family", "FAMILY"
                )
                for outlet in statement.outlets():
                    self._declare_outlet(outlet)

    def _declare(
        self,
        table: dict[str, SourcePosition],
        name: str,
        position: SourcePosition,
        label: str,
        code_prefix: str,
    ) -> None:
        existing = table.get(name)
        table[name] = position
        if existing is not None:
            self.add_error(
                f"{code_prefix}_REDECLARED",
                f"{label} '{name}' is already declared",
                position,
                f"Previous declaration at {existing}",
            )

    def _declare_outlet(self, outlet: ast.OutletDeclaration) -> None:
        outlet_id = outlet.declared_id()
        if outlet_id is None:
            return
        existing = self.outlets.get(outlet_id)
        self.outlets[outlet_id] = outlet.position
        if existing is not None:
            self.add_error(
                "OUTLET_ID_DUPLICATE",
                f"Outlet ID {outlet_id} is already used",
                outlet.position,
                f"Previous outlet at {existing}",
            )

    # =========================================================================
    # Phase 2: per-construct validation
    # =========================================================================

    def validate_statements(self, statements: list[ast.Statement]) -> None:
        for statement in statements:
            if isinstance(statement, ast.ImportStatement):
                self.validate_import(statement)
            elif isinstance(statement, ast.VariableDeclaration):
                self.validate_variable(statement)
            elif isinstance(statement, ast.TemplateDeclaration):
                self.validate_template(statement)
            elif isinstance(statement, ast.UnitDeclaration):
                self.validate_unit(statement)
            elif isinstance(statement, ast.VocabularyDeclaration):
                self.validate_vocabulary(statement)
            elif isinstance(statement, ast.FamilyDeclaration):
                self.validate_family(statement)
            elif isinstance(statement, ast.DataDeclaration):
                self.validate_data(statement)
            elif isinstance(statement, ast.DiachronicLink | ast.SynchronousLink):
                self.validate_relationship(statement)

    def validate_import(self, statement: ast.ImportStatement) -> None:
        self.push_context(f"Import({statement.path})")
        if not statement.path.endswith(IMPORT_EXTENSION):
            self.add_warning(
                "IMPORT_NO_EXTENSION",
                f"Import path '{statement.path}' should end with '{IMPORT_EXTENSION}'",
                statement.position,
                f"Add '{IMPORT_EXTENSION}' extension to import path",
            )
        if ".." in statement.path:
            self.add_info(
                "IMPORT_RELATIVE_PATH",
                f"Import uses relative path: '{statement.path}'",
                statement.position,
                "Consider using absolute paths for better maintainability",
            )
        self.pop_context()

    def validate_variable(self, statement: ast.VariableDeclaration) -> None:
        self.push_context(f"Variable({statement.name})")
        if not all(ch.isalnum() or ch == "_" for ch in statement.name):
            self.add_warning(
                "VAR_NAMING",
                f"Variable name '{statement.name}' contains non-alphanumeric characters",
                statement.position,
                "Use only letters, numbers, and underscores in variable names",
            )
        self.pop_context()

    def validate_template(self, template: ast.TemplateDeclaration) -> None:
        self.push_context(f"Template({template.name})")
        if not template.blocks:
            self.add_warning(
                "TEMPLATE_EMPTY",
                f"Template '{template.name}' has no blocks",
                template.position,
                "Add characteristics or metadata blocks to make template useful",
            )
        self.validate_blocks(template.blocks)
        self.pop_context()

    # -------------------------------------------------------------------------
    # Units
    # -------------------------------------------------------------------------

    def validate_unit(self, unit: ast.UnitDeclaration) -> None:
        self.push_context(f"Unit({unit.name})")

        if not unit.fields:
            self.add_error(
                "UNIT_EMPTY",
                f"Unit '{unit.name}' has no fields",
                unit.position,
                "Add field declarations to unit",
            )
        if not any(field.is_primary_key for field in unit.fields):
            self.add_warning(
                "UNIT_NO_PRIMARY_KEY",
                f"Unit '{unit.name}' has no primary key",
                unit.position,
                "Consider adding a PRIMARY KEY field",
            )

        seen: set[str] = set()
        for field in unit.fields:
            if field.name in seen:
                self.add_error(
                    "UNIT_FIELD_DUPLICATE",
                    f"Field '{field.name}' is declared multiple times in unit '{unit.name}'",
                    field.position,
                    "Remove duplicate field declaration",
                )
            seen.add(field.name)
            self.validate_field(field)

        self.pop_context()

    def validate_field(self, field: ast.FieldDeclaration) -> None:
        self.push_context(f"Field({field.name})")
        field_type = field.field_type

        if field_type.kind == ast.FieldTypeKind.TEXT and field_type.length is not None:
            if field_type.length == 0:
                self.add_error(
                    "FIELD_TEXT_ZERO_LENGTH",
                    f"TEXT field '{field.name}' has zero length",
                    field.position,
                    "Specify a positive length for TEXT fields",
                )
            if field_type.length > TEXT_LENGTH_WARN_THRESHOLD:
                self.add_warning(
                    "FIELD_TEXT_LARGE",
                    f"TEXT field '{field.name}' has very large length ({field_type.length})",
                    field.position,
                    "Consider using a smaller length or different field type",
                )

        elif field_type.kind == ast.FieldTypeKind.CATEGORY:
            if not field_type.values:
                self.add_error(
                    "FIELD_CATEGORY_EMPTY",
                    f"CATEGORY field '{field.name}' has no values",
                    field.position,
                    "Add at least one value to CATEGORY field",
                )
            seen: set[str] = set()
            for value in field_type.values:
                if value in seen:
                    self.add_error(
                        "FIELD_CATEGORY_DUPLICATE",
                        f"CATEGORY field '{field.name}' has duplicate value '{value}'",
                        field.position,
                        "Remove duplicate values from CATEGORY field",
                    )
                seen.add(value)

        self.pop_context()

    # -------------------------------------------------------------------------
    # Vocabularies
    # -------------------------------------------------------------------------

    def validate_vocabulary(self, vocabulary: ast.VocabularyDeclaration) -> None:
        self.push_context(f"Vocabulary({vocabulary.name})")
        if not vocabulary.bodies:
            self.add_error(
                "VOCAB_EMPTY",
                f"Vocabulary '{vocabulary.name}' has no bodies",
                vocabulary.position,
                "Add at least one vocabulary body",
            )
        for body in vocabulary.bodies:
            self.validate_vocabulary_body(body)
        self.pop_context()

    def validate_vocabulary_body(self, body: ast.VocabularyBody) -> None:
        self.push_context(f"VocabBody({body.name})")
        if not body.entries:
            self.add_warning(
                "VOCAB_BODY_EMPTY",
                f"Vocabulary body '{body.name}' has no entries",
                body.position,
                "Add vocabulary entries",
            )

        seen: set[str] = set()
        for entry in body.entries:
            key = format_number(entry.key) if entry.key_is_number else entry.key
            if key in seen:
                self.add_error(
                    "VOCAB_DUPLICATE_KEY",
                    f"Vocabulary body '{body.name}' has duplicate key '{key}'",
                    entry.position,
                    "Remove duplicate key or use different key",
                )
            seen.add(key)
        self.pop_context()

    # -------------------------------------------------------------------------
    # Families and outlets
    # -------------------------------------------------------------------------

    def validate_family(self, family: ast.FamilyDeclaration) -> None:
        self.push_context(f"Family({family.name})")

        if not family.members:
            self.add_warning(
                "FAMILY_EMPTY",
                f"Family '{family.name}' has no members",
                family.position,
                "Add outlets, relationships, or data declarations",
            )

        outlet_count = 0
        relationship_count = 0
        for member in family.members:
            if isinstance(member, ast.OutletDeclaration):
                outlet_count += 1
                self.validate_outlet(member)
            elif isinstance(member, ast.DiachronicLink | ast.SynchronousLink):
                relationship_count += 1
                self.validate_relationship(member)
            elif isinstance(member, ast.DataDeclaration):
                self.validate_data(member)

        if outlet_count == 0:
            self.add_warning(
                "FAMILY_NO_OUTLETS",
                f"Family '{family.name}' has no outlets",
                family.position,
                "Add outlet declarations to family",
            )
        if outlet_count <= 1 and relationship_count > 0:
            self.add_warning(
                "FAMILY_SINGLE_OUTLET_RELATIONSHIPS",
                f"Family '{family.name}' has only {outlet_count} outlet(s) "
                f"but {relationship_count} relationships",
                family.position,
                "Relationships typically require multiple outlets",
            )

        self.pop_context()

    def validate_outlet(self, outlet: ast.OutletDeclaration) -> None:
        self.push_context(f"Outlet({outlet.name})")

        if not outlet.identity_blocks():
            self.add_error(
                "OUTLET_NO_IDENTITY",
                f"Outlet '{outlet.name}' has no identity block",
                outlet.position,
                "Add an identity block with required fields",
            )
        if not any(isinstance(b, ast.CharacteristicsBlock) for b in outlet.blocks):
            self.add_warning(
                "OUTLET_NO_CHARACTERISTICS",
                f"Outlet '{outlet.name}' has no characteristics block",
                outlet.position,
                "Consider adding characteristics to describe the outlet",
            )

        self.validate_blocks(outlet.blocks)
        self.pop_context()

    def validate_blocks(self, blocks: list[ast.OutletBlock]) -> None:
        """Identity requirements are checked once across all identity blocks."""
        identity_blocks = [b for b in blocks if isinstance(b, ast.IdentityBlock)]
        if identity_blocks:
            self.validate_identity(identity_blocks)

        for block in blocks:
            if isinstance(block, ast.LifecycleBlock):
                self.validate_lifecycle_block(block)
            elif isinstance(block, ast.CharacteristicsBlock):
                self.validate_characteristics_block(block)
            elif isinstance(block, ast.MetadataBlock):
                self.validate_metadata_block(block)

    def validate_identity(self, blocks: list[ast.IdentityBlock]) -> None:
        self.push_context("Identity")
        names = {
            field.name.lower()
            for block in blocks
            for field in block.fields
            if isinstance(field, ast.Assignment | ast.ArrayAssignment)
        }
        position = blocks[0].position

        if "id" not in names:
            self.add_error(
                "IDENTITY_NO_ID",
                "Identity block missing required 'id' field",
                position,
                "Add 'id = <number>' to identity block",
            )
        if "title" not in names:
            self.add_warning(
                "IDENTITY_NO_TITLE",
                "Identity block missing 'title' field",
                position,
                "Add 'title = \"<name>\"' to identity block",
            )
        self.pop_context()

    def validate_lifecycle_block(self, block: ast.LifecycleBlock) -> None:
        self.push_context("Lifecycle")
        if not block.entries:
            self.add_warning(
                "LIFECYCLE_EMPTY",
                "Lifecycle block has no entries",
                block.position,
                "Add lifecycle status entries",
            )

        seen: set[str] = set()
        for entry in block.entries:
            if entry.status in seen:
                self.add_warning(
                    "LIFECYCLE_DUPLICATE_STATUS",
                    f"Duplicate lifecycle status '{entry.status}'",
                    entry.position,
                    "Each status should appear only once",
                )
            seen.add(entry.status)
        self.pop_context()

    def validate_characteristics_block(self, block: ast.CharacteristicsBlock) -> None:
        self.push_context("Characteristics")
        assignments = [f for f in block.fields if isinstance(f, ast.Assignment)]
        if not assignments:
            self.add_warning(
                "CHARACTERISTICS_EMPTY",
                "Characteristics block has no fields",
                block.position,
                "Add characteristic assignments",
            )

        seen: set[str] = set()
        for field in assignments:
            if field.name in seen:
                self.add_warning(
                    "CHARACTERISTICS_DUPLICATE",
                    f"Duplicate characteristic '{field.name}'",
                    field.position,
                    "Remove duplicate characteristic",
                )
            seen.add(field.name)
        self.pop_context()

    def validate_metadata_block(self, block: ast.MetadataBlock) -> None:
        self.push_context("Metadata")
        if not any(isinstance(f, ast.Assignment) for f in block.fields):
            self.add_info(
                "METADATA_EMPTY",
                "Metadata block has no fields",
                block.position,
                "Add metadata assignments",
            )
        self.pop_context()

    # -------------------------------------------------------------------------
    # Data and relationships
    # -------------------------------------------------------------------------

    def validate_data(self, data: ast.DataDeclaration) -> None:
        target = format_number(data.target_id)
        self.push_context(f"Data({target})")
        if int(data.target_id) not in self.outlets:
            self.add_error(
                "DATA_OUTLET_NOT_FOUND",
                f"Data declaration references non-existent outlet ID {target}",
                data.position,
                "Declare the outlet before adding data",
            )
        if not [b for b in data.blocks if not isinstance(b, ast.Comment)]:
            self.add_warning(
                "DATA_EMPTY",
                f"Data declaration for outlet {target} has no blocks",
                data.position,
                "Add data blocks (aggregation, years, etc.)",
            )
        self.pop_context()

    def validate_relationship(self, link: ast.Relationship) -> None:
        if isinstance(link, ast.DiachronicLink):
            self.validate_diachronic_link(link)
        else:
            self.validate_synchronous_link(link)

    def validate_diachronic_link(self, link: ast.DiachronicLink) -> None:
        self.push_context(f"DiachronicRel({link.name})")
        predecessor = int(link.predecessor) if link.predecessor is not None else None
        successor = int(link.successor) if link.successor is not None else None

        if predecessor is not None and predecessor not in self.outlets:
            self.add_error(
                "RELATIONSHIP_PREDECESSOR_NOT_FOUND",
                f"Predecessor outlet {predecessor} not found",
                link.position,
                "Declare the predecessor outlet before referencing it",
            )
        if successor is not None and successor not in self.outlets:
            self.add_error(
                "RELATIONSHIP_SUCCESSOR_NOT_FOUND",
                f"Successor outlet {successor} not found",
                link.position,
                "Declare the successor outlet before referencing it",
            )
        if predecessor is not None and predecessor == successor:
            self.add_warning(
                "RELATIONSHIP_SELF_REFERENCE",
                "Diachronic relationship references the same outlet "
                "as both predecessor and successor",
                link.position,
                "Verify this self-relationship is intentional",
            )
        self.pop_context()

    def validate_synchronous_link(self, link: ast.SynchronousLink) -> None:
        self.push_context(f"SynchronousRel({link.name})")
        first = int(link.outlet_1.outlet_id) if link.outlet_1 is not None else None
        second = int(link.outlet_2.outlet_id) if link.outlet_2 is not None else None

        for index, outlet_id in ((1, first), (2, second)):
            if outlet_id is not None and outlet_id not in self.outlets:
                self.add_error(
                    f"RELATIONSHIP_OUTLET{index}_NOT_FOUND",
                    f"Outlet {index} with ID {outlet_id} not found",
                    link.position,
                    "Declare the outlet before referencing it",
                )
        if first is not None and first == second:
            self.add_warning(
                "RELATIONSHIP_SELF_REFERENCE",
                "Synchronous relationship references the same outlet twice",
                link.position,
                "Verify this self-relationship is intentional",
            )
        self.pop_context()

    # =========================================================================
    # Phase 3: cross-references
    # =========================================================================

    def validate_references(self, program: ast.Program) -> None:
        self.push_context("References")
        for family in program.families():
            self.push_context(f"Family({family.name})")
            for outlet in family.outlets():
                self.validate_inheritance(outlet)
            self.pop_context()

        for variable in _variable_uses(program):
            if variable.name not in self.variables:
                self.add_error(
                    "VARIABLE_NOT_FOUND",
                    f"Variable '{variable.name}' not found",
                    variable.position,
                    "Declare the variable before using it",
                )
        self.pop_context()

    def validate_inheritance(self, outlet: ast.OutletDeclaration) -> None:
        clause = outlet.inheritance
        if clause is None:
            return

        self.push_context(f"Outlet({outlet.name})")
        if isinstance(clause, ast.ExtendsTemplate):
            if clause.template not in self.templates:
                self.add_error(
                    "TEMPLATE_NOT_FOUND",
                    f"Template '{clause.template}' not found",
                    clause.position,
                    "Declare the template before using it",
                )
        elif int(clause.outlet_id) not in self.outlets:
            self.add_error(
                "OUTLET_NOT_FOUND",
                f"Outlet with ID {format_number(clause.outlet_id)} not found",
                clause.position,
                "Declare the base outlet before referencing it",
            )
        self.pop_context()

    # =========================================================================
    # Phase 4: business rules
    # =========================================================================

    def validate_business_rules(self, program: ast.Program) -> None:
        self.push_context("BusinessRules")
        self.pop_context()


def _variable_uses(program: ast.Program):
    """Yield every ``$name`` expression in the program, in source order."""
    for expr in _expressions(program):
        for node in ast.walk_expression(expr):
            if isinstance(node, ast.VariableExpr):
                yield node


def _expressions(program: ast.Program):
    for statement in program.statements:
        if isinstance(statement, ast.VariableDeclaration):
            yield statement.value
        elif isinstance(statement, ast.TemplateDeclaration):
            yield from _block_expressions(statement.blocks)
        elif isinstance(statement, ast.FamilyDeclaration):
            for outlet in statement.outlets():
                yield from _block_expressions(outlet.blocks)
            for member in statement.members:
                if isinstance(member, ast.DataDeclaration):
                    yield from _data_expressions(member)
        elif isinstance(statement, ast.DataDeclaration):
            yield from _data_expressions(statement)
        elif isinstance(statement, ast.EventDeclaration):
            for field in statement.impact + statement.metadata:
                yield field.value
        elif isinstance(statement, ast.CatalogDeclaration):
            for source in statement.sources:
                for field in source.fields:
                    if isinstance(field, ast.Assignment):
                        yield field.value
                    elif isinstance(field, ast.NestedAssignment):
                        yield from (f.value for f in field.fields if isinstance(f, ast.Assignment))


def _block_expressions(blocks: list[ast.OutletBlock]):
    for block in blocks:
        if isinstance(block, ast.IdentityBlock):
            for field in block.fields:
                if isinstance(field, ast.Assignment):
                    yield field.value
                elif isinstance(field, ast.ArrayAssignment):
                    yield from field.values
        elif isinstance(block, ast.LifecycleBlock):
            for entry in block.entries:
                yield from (a.value for a in entry.attributes if isinstance(a, ast.Assignment))
        elif isinstance(block, ast.CharacteristicsBlock | ast.MetadataBlock):
            yield from (f.value for f in block.fields if isinstance(f, ast.Assignment))


def _data_expressions(data: ast.DataDeclaration):
    for block in data.blocks:
        if isinstance(block, ast.YearDeclaration):
            for year_block in block.blocks:
                if isinstance(year_block, ast.MetricsBlock):
                    for metric in year_block.fields:
                        yield from (a.value for a in metric.attributes)


def validate_program(program: ast.Program) -> ValidationResult:
    """
    Validate a parsed program.

    Args:
        program: Parsed Program

    Returns:
        ValidationResult with every issue found
    """
    return Validator().validate(program)
