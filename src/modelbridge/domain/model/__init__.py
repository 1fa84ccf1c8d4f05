"""Domain data model: schemas, models and bridges."""

from __future__ import annotations

from .bridge import (
    FIELD_RULE_TYPES,
    Bridge,
    BridgeMetadata,
    BridgeUsage,
    ConstantRule,
    CopyRule,
    FieldRule,
    TransformRule,
)
from .schema import (
    Compatibility,
    CompatibilityDirection,
    EntitySchema,
    FieldPath,
    FieldSpec,
    FieldType,
    GraphSchema,
    Model,
    RelationshipSchema,
)

__all__ = [
    "FIELD_RULE_TYPES",
    "Bridge",
    "BridgeMetadata",
    "BridgeUsage",
    "Compatibility",
    "CompatibilityDirection",
    "ConstantRule",
    "CopyRule",
    "EntitySchema",
    "FieldPath",
    "FieldRule",
    "FieldSpec",
    "FieldType",
    "GraphSchema",
    "Model",
    "RelationshipSchema",
    "TransformRule",
]
