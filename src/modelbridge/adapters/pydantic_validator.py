"""Schema validator backed by dynamically generated Pydantic models."""

from __future__ import annotations

import threading
import weakref
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, ValidationError, create_model

from modelbridge.domain.model import FieldType
from modelbridge.domain.ports.validation import ValidationIssue, ValidationOutcome

if TYPE_CHECKING:
    from modelbridge.domain.model import EntitySchema

_PYTHON_TYPES: dict[FieldType, Any] = {
    FieldType.STRING: str,
    FieldType.INTEGER: int,
    FieldType.NUMBER: float,
    FieldType.BOOLEAN: bool,
    FieldType.OBJECT: dict[str, Any],
    FieldType.ARRAY: list[Any],
    FieldType.ANY: Any,
}


class _EntityBase(BaseModel):
    model_config = ConfigDict(extra="ignore", strict=True)


class PydanticSchemaValidator:
    """Validates records by compiling each entity schema into a Pydantic model.

    Compiled models are cached per schema instance; schemas are immutable so
    the cache never goes stale. An entry is dropped once its schema is
    garbage collected.
    """

    def __init__(self) -> None:
        self._compiled: dict[int, type[BaseModel]] = {}
        self._lock = threading.Lock()

    def validate(self, schema: EntitySchema, data: Any) -> ValidationOutcome[dict[str, Any]]:
        model = self._model_for(schema)
        try:
            instance = model.model_validate(data)
        except ValidationError as exc:
            return ValidationOutcome(issues=tuple(_issues(exc)))
        return ValidationOutcome(value=instance.model_dump(exclude_unset=True))

    def _model_for(self, schema: EntitySchema) -> type[BaseModel]:
        key = id(schema)
        with self._lock:
            cached = self._compiled.get(key)
            if cached is not None:
                return cached
            model = _compile(schema)
            self._compiled[key] = model
            # runs before the id can be handed to a new object
            weakref.finalize(schema, self._compiled.pop, key, None)
            return model


def _compile(schema: EntitySchema) -> type[BaseModel]:
    definitions: dict[str, Any] = {}
    for name, spec in schema.fields.items():
        python_type = _PYTHON_TYPES[spec.type]
        if spec.required:
            definitions[name] = (python_type, ...)
        else:
            definitions[name] = (python_type | None, None)
    return create_model("EntityRecord", __base__=_EntityBase, **definitions)


def _issues(exc: ValidationError) -> list[ValidationIssue]:
    return [
        ValidationIssue(
            path=".".join(str(part) for part in error["loc"]),
            message=error["msg"],
        )
        for error in exc.errors()
    ]
