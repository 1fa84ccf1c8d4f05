"""Pydantic models for persisted bridge records."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class BridgeStoreModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class CopyRuleRecord(BridgeStoreModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    source: str = Field(alias="from", min_length=1)
    transform: str | None = None
    required: bool = True


class ConstantRuleRecord(BridgeStoreModel):
    model_config = ConfigDict(extra="forbid")

    const: Any


type RuleRecord = str | CopyRuleRecord | ConstantRuleRecord


class BridgeMetadataRecord(BridgeStoreModel):
    efficiency: float = 1.0
    confidence: float = 1.0
    last_updated: datetime | None = Field(default=None, alias="lastUpdated")


class BridgeRecord(BridgeStoreModel):
    id: str
    version: str
    source: str
    target: str
    mappings: dict[str, RuleRecord] = Field(default_factory=dict)
    transformations: dict[str, str] = Field(default_factory=dict)
    metadata: BridgeMetadataRecord = Field(default_factory=BridgeMetadataRecord)


BRIDGE_RECORDS = TypeAdapter(list[BridgeRecord])
MAPPINGS = TypeAdapter(dict[str, RuleRecord])
TRANSFORMATIONS = TypeAdapter(dict[str, str])
