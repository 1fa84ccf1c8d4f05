"""Translate between persisted bridge records and domain bridges."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from modelbridge.domain.model import (
    Bridge,
    BridgeMetadata,
    ConstantRule,
    CopyRule,
    FieldRule,
    TransformRule,
)

from .schema import ConstantRuleRecord, CopyRuleRecord

if TYPE_CHECKING:
    from .schema import BridgeRecord, RuleRecord


def translate_record(record: BridgeRecord) -> Bridge:
    last_updated = record.metadata.last_updated or datetime.now(UTC)
    if last_updated.tzinfo is None:
        last_updated = last_updated.replace(tzinfo=UTC)
    return Bridge(
        id=record.id,
        version=record.version,
        source=record.source,
        target=record.target,
        mappings=translate_mappings(record.mappings),
        transformations=dict(record.transformations),
        metadata=BridgeMetadata(
            efficiency=record.metadata.efficiency,
            confidence=record.metadata.confidence,
            last_updated=last_updated,
        ),
    )


def translate_mappings(mappings: dict[str, RuleRecord]) -> dict[str, FieldRule]:
    return {target: _translate_rule(rule) for target, rule in mappings.items()}


def _translate_rule(rule: RuleRecord) -> FieldRule:
    if isinstance(rule, str):
        return CopyRule(source_path=rule)
    if isinstance(rule, ConstantRuleRecord):
        return ConstantRule(value=rule.const)
    if isinstance(rule, CopyRuleRecord):
        if rule.transform:
            return TransformRule(
                source_path=rule.source, transform_id=rule.transform, required=rule.required
            )
        return CopyRule(source_path=rule.source, required=rule.required)
    raise TypeError(f"Unsupported rule record: {rule!r}")


def bridge_to_record(bridge: Bridge) -> dict[str, Any]:
    """Plain JSON-ready representation in the persisted record layout."""

    return {
        "id": bridge.id,
        "version": bridge.version,
        "source": bridge.source,
        "target": bridge.target,
        "mappings": {target: _rule_to_record(rule) for target, rule in bridge.mappings.items()},
        "transformations": dict(bridge.transformations),
        "metadata": {
            "efficiency": bridge.metadata.efficiency,
            "confidence": bridge.metadata.confidence,
            "lastUpdated": bridge.metadata.last_updated.isoformat(),
        },
    }


def _rule_to_record(rule: FieldRule) -> Any:
    match rule:
        case ConstantRule(value=value):
            return {"const": value}
        case CopyRule(source_path=source_path, required=True):
            return source_path
        case CopyRule(source_path=source_path, required=required):
            return {"from": source_path, "required": required}
        case TransformRule(source_path=source_path, transform_id=transform_id, required=required):
            record: dict[str, Any] = {"from": source_path, "transform": transform_id}
            if not required:
                record["required"] = False
            return record
