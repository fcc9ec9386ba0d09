"""
MDSL Intermediate Representation (IR) types.

The IR is a flatter, typed mirror of the AST that emitters consume.
All types are re-exported from this package.
"""

from .data import IRDataAggregation, IRDataBlock, IRDataMetric, IRDataYear
from .declarations import (
    IRField,
    IRFieldType,
    IRImport,
    IRUnit,
    IRVariable,
    IRVocabulary,
    IRVocabularyEntry,
)
from .events import IREvent, IREventEntity
from .expressions import (
    ArrayValue,
    BooleanValue,
    IRAssignment,
    IRExpression,
    NumberValue,
    ObjectField,
    ObjectValue,
    StringValue,
    VariableRef,
    expression_text,
    format_number,
)
from .outlets import (
    IRCharacteristicsBlock,
    IRFamily,
    IRIdentityBlock,
    IRLifecycleBlock,
    IRLifecycleStatus,
    IRMetadataBlock,
    IROutlet,
    IROutletBlock,
    IRTemplate,
    IRTemplateBlock,
)
from .program import IRProgram
from .relationships import IRDiachronicLink, IRRelationship, IRSynchronousLink, IRSyncOutlet

__all__ = [
    "ArrayValue",
    "BooleanValue",
    "IRAssignment",
    "IRCharacteristicsBlock",
    "IRDataAggregation",
    "IRDataBlock",
    "IRDataMetric",
    "IRDataYear",
    "IRDiachronicLink",
    "IREvent",
    "IREventEntity",
    "IRExpression",
    "IRFamily",
    "IRField",
    "IRFieldType",
    "IRIdentityBlock",
    "IRImport",
    "IRLifecycleBlock",
    "IRLifecycleStatus",
    "IRMetadataBlock",
    "IROutlet",
    "IROutletBlock",
    "IRProgram",
    "IRRelationship",
    "IRSyncOutlet",
    "IRSynchronousLink",
    "IRTemplate",
    "IRTemplateBlock",
    "IRUnit",
    "IRVariable",
    "IRVocabulary",
    "IRVocabularyEntry",
    "NumberValue",
    "ObjectField",
    "ObjectValue",
    "StringValue",
    "VariableRef",
    "expression_text",
    "format_number",
]
