"""Graph schemas and the named models that carry them."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

type FieldPath = str


class FieldType(StrEnum):
    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "array"
    ANY = "any"


def _freeze[K, V](values: Mapping[K, V] | None) -> Mapping[K, V]:
    return MappingProxyType(dict(values or {}))


@dataclass(frozen=True, slots=True)
class FieldSpec:
    type: FieldType = FieldType.ANY
    required: bool = True


@dataclass(frozen=True, slots=True, weakref_slot=True)
class EntitySchema:
    fields: Mapping[str, FieldSpec] = field(default_factory=dict[str, FieldSpec])

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", _freeze(self.fields))


@dataclass(frozen=True, slots=True)
class RelationshipSchema:
    source: str
    target: str
    fields: Mapping[str, FieldSpec] = field(default_factory=dict[str, FieldSpec])

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", _freeze(self.fields))


@dataclass(frozen=True, slots=True)
class GraphSchema:
    """Entities, relationships between them and named field constraints.

    Constraints are tuples of ``"<entity-or-relationship>.<field>"`` paths.
    Instances are not checked on construction; ``problems()`` reports every
    structural violation so registries can reject malformed schemas in one go.
    """

    version: str
    entities: Mapping[str, EntitySchema] = field(default_factory=dict[str, EntitySchema])
    relationships: Mapping[str, RelationshipSchema] = field(
        default_factory=dict[str, RelationshipSchema]
    )
    constraints: Mapping[str, tuple[FieldPath, ...]] = field(
        default_factory=dict[str, tuple[FieldPath, ...]]
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "entities", _freeze(self.entities))
        object.__setattr__(self, "relationships", _freeze(self.relationships))
        object.__setattr__(
            self,
            "constraints",
            _freeze({name: tuple(paths) for name, paths in self.constraints.items()}),
        )

    def problems(self) -> list[str]:
        return list(self._iter_problems())

    def _iter_problems(self) -> Iterator[str]:
        for name, relationship in self.relationships.items():
            if relationship.source not in self.entities:
                yield f"relationship '{name}' references unknown entity '{relationship.source}'"
            if relationship.target not in self.entities:
                yield f"relationship '{name}' references unknown entity '{relationship.target}'"

        for name, paths in self.constraints.items():
            for path in paths:
                owner, sep, field_name = path.partition(".")
                if not sep or not owner or not field_name:
                    yield f"constraint '{name}' has malformed field path '{path}'"
                    continue
                fields = self.fields_of(owner)
                if fields is None:
                    yield f"constraint '{name}' references unknown entity '{owner}'"
                elif field_name not in fields:
                    yield f"constraint '{name}' references undeclared field '{path}'"

    def fields_of(self, owner: str) -> Mapping[str, FieldSpec] | None:
        """Return the fields of an entity or relationship named ``owner``."""

        entity = self.entities.get(owner)
        if entity is not None:
            return entity.fields
        relationship = self.relationships.get(owner)
        if relationship is not None:
            return relationship.fields
        return None


@dataclass(frozen=True, slots=True)
class Compatibility:
    direct_compatible: tuple[str, ...] = ()
    translatable_from: tuple[str, ...] = ()
    translatable_to: tuple[str, ...] = ()


class CompatibilityDirection(StrEnum):
    FROM = "from"
    TO = "to"
    EITHER = "either"


@dataclass(frozen=True, slots=True)
class Model:
    """A named, versioned business-data shape."""

    name: str
    version: str
    schema: GraphSchema
    compatibility: Compatibility = field(default_factory=Compatibility)
    metadata: Mapping[str, Any] = field(default_factory=dict[str, Any])

    def __post_init__(self) -> None:
        object.__setattr__(self, "metadata", _freeze(self.metadata))
