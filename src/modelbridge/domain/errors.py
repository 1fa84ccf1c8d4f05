"""Error taxonomy for the translation engine.

Every error carries the identifier it is about (model name, bridge id,
component id or field path) as an attribute so callers can act on it without
parsing messages.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence


class ModelBridgeError(Exception):
    """Base class for all engine errors."""


class SchemaError(ModelBridgeError):
    """Raised when a model schema is structurally malformed."""

    def __init__(self, model_name: str, problems: Sequence[str]) -> None:
        self.model_name = model_name
        self.problems = tuple(problems)
        super().__init__(f"Invalid schema for model '{model_name}': " + "; ".join(self.problems))


class DuplicateModelError(ModelBridgeError):
    def __init__(self, model_name: str) -> None:
        self.model_name = model_name
        super().__init__(f"Model '{model_name}' is already registered")


class ModelNotFoundError(ModelBridgeError):
    def __init__(self, model_name: str) -> None:
        self.model_name = model_name
        super().__init__(f"Model '{model_name}' not found")


class BridgeValidationError(ModelBridgeError):
    """Raised when a bridge definition fails structural validation."""

    def __init__(self, bridge_id: str | None, problems: Sequence[str]) -> None:
        self.bridge_id = bridge_id
        self.problems = tuple(problems)
        label = bridge_id or "<no id>"
        super().__init__(f"Invalid bridge '{label}': " + "; ".join(self.problems))


class MappingError(ModelBridgeError):
    """A single field rule failed while translating one record.

    Contained by the bridge component: it fails the record, not the batch.
    """

    def __init__(
        self,
        message: str,
        *,
        bridge_id: str | None = None,
        field_path: str | None = None,
        record_index: int | None = None,
    ) -> None:
        self.bridge_id = bridge_id
        self.field_path = field_path
        self.record_index = record_index
        super().__init__(message)

    def bind(self, *, bridge_id: str, record_index: int) -> MappingError:
        """Attach batch coordinates once the failing record is known."""

        self.bridge_id = bridge_id
        self.record_index = record_index
        return self

    def __str__(self) -> str:
        base = super().__str__()
        location: list[str] = []
        if self.record_index is not None:
            location.append(f"record {self.record_index}")
        if self.field_path is not None:
            location.append(f"field '{self.field_path}'")
        if not location:
            return base
        return f"{base} ({', '.join(location)})"


class UnknownTransformError(MappingError):
    def __init__(self, transform_id: str, *, field_path: str | None = None) -> None:
        self.transform_id = transform_id
        super().__init__(f"Unknown transform '{transform_id}'", field_path=field_path)


class TranslationFailedError(ModelBridgeError):
    """Every record of a non-empty batch failed."""

    def __init__(self, bridge_id: str, errors: Sequence[MappingError]) -> None:
        self.bridge_id = bridge_id
        self.errors = tuple(errors)
        super().__init__(
            f"Bridge '{bridge_id}' failed to translate all {len(self.errors)} record(s)"
        )


class ComponentValidationError(ModelBridgeError):
    def __init__(self, pipeline_id: str, component_id: str) -> None:
        self.pipeline_id = pipeline_id
        self.component_id = component_id
        super().__init__(
            f"Component '{component_id}' rejected the context in pipeline '{pipeline_id}'"
        )


class PipelineExecutionError(ModelBridgeError):
    """A pipeline stage raised; wraps the underlying cause."""

    def __init__(self, pipeline_id: str, component_id: str, cause: BaseException) -> None:
        self.pipeline_id = pipeline_id
        self.component_id = component_id
        self.cause = cause
        super().__init__(
            f"Pipeline '{pipeline_id}' failed at component '{component_id}': {cause}"
        )


class PipelineCancelledError(PipelineExecutionError):
    def __init__(self, pipeline_id: str, component_id: str) -> None:
        super().__init__(pipeline_id, component_id, RuntimeError("cancelled"))
