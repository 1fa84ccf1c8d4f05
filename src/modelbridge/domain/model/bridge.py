"""Directional translation recipes between two named models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True)
class CopyRule:
    """Copy the value found at ``source_path`` of the input record."""

    source_path: str
    required: bool = True


@dataclass(frozen=True, slots=True)
class TransformRule:
    """Copy the value at ``source_path`` and pass it through a named transform."""

    source_path: str
    transform_id: str
    required: bool = True


@dataclass(frozen=True, slots=True)
class ConstantRule:
    value: Any


type FieldRule = CopyRule | TransformRule | ConstantRule

FIELD_RULE_TYPES: tuple[type, ...] = (CopyRule, TransformRule, ConstantRule)


@dataclass(frozen=True, slots=True)
class BridgeMetadata:
    """Informational quality scores; the engine never enforces them."""

    efficiency: float = 1.0
    confidence: float = 1.0
    last_updated: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True, slots=True)
class BridgeUsage:
    """How often a bridge ran and how well, as observed by the registry.

    ``average_efficiency`` is the mean success ratio (succeeded / processed)
    over every recorded run.
    """

    count: int
    last_used: datetime
    average_efficiency: float

    def record(self, efficiency: float, used_at: datetime) -> BridgeUsage:
        count = self.count + 1
        return BridgeUsage(
            count=count,
            last_used=used_at,
            average_efficiency=self.average_efficiency
            + (efficiency - self.average_efficiency) / count,
        )


@dataclass(frozen=True, slots=True)
class Bridge:
    """Translation from ``source`` to ``target``; never the reverse.

    ``mappings`` is keyed by dotted target path. ``transformations`` maps a
    target field to the id of a transform applied after its mapping resolves.
    """

    id: str
    version: str
    source: str
    target: str
    mappings: Mapping[str, FieldRule] = field(default_factory=dict[str, "FieldRule"])
    transformations: Mapping[str, str] = field(default_factory=dict[str, str])
    metadata: BridgeMetadata = field(default_factory=BridgeMetadata)

    def __post_init__(self) -> None:
        # leave non-mapping values alone so structural validation can report them
        if isinstance(self.mappings, dict):
            object.__setattr__(self, "mappings", MappingProxyType(dict(self.mappings)))
        if isinstance(self.transformations, dict):
            object.__setattr__(
                self, "transformations", MappingProxyType(dict(self.transformations))
            )

    @property
    def pair(self) -> tuple[str, str]:
        return (self.source, self.target)
