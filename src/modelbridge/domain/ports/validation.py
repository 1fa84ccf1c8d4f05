"""Pluggable structural validation of records against entity schemas."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from modelbridge.domain.model import EntitySchema


@dataclass(frozen=True, slots=True)
class ValidationIssue:
    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}" if self.path else self.message


@dataclass(frozen=True, slots=True)
class ValidationOutcome[T]:
    """Either a validated value or the issues that prevented it."""

    value: T | None = None
    issues: tuple[ValidationIssue, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.issues


class SchemaValidator(Protocol):
    """Validates one record against one entity schema."""

    def validate(self, schema: EntitySchema, data: Any) -> ValidationOutcome[dict[str, Any]]: ...
