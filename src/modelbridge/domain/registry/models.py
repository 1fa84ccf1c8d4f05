"""In-memory registry of named models and their compatibility edges."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any

from modelbridge.domain.errors import DuplicateModelError, ModelNotFoundError, SchemaError
from modelbridge.domain.model import CompatibilityDirection

if TYPE_CHECKING:
    from modelbridge.domain.model import Model
    from modelbridge.domain.ports.validation import SchemaValidator, ValidationOutcome

log = logging.getLogger(__name__)


class ModelRegistry:
    """Holds models by unique name.

    Construct one per application (or per test) and pass it to consumers.
    Models are immutable once registered; re-registration needs ``replace=True``.
    """

    def __init__(self, *, validator: SchemaValidator | None = None) -> None:
        self._models: dict[str, Model] = {}
        self._validator = validator
        self._lock = threading.RLock()

    def register_model(self, model: Model, *, replace: bool = False) -> None:
        problems = model.schema.problems()
        if problems:
            raise SchemaError(model.name, problems)
        with self._lock:
            if model.name in self._models and not replace:
                raise DuplicateModelError(model.name)
            self._models[model.name] = model
        log.debug("Registered model %s (version %s)", model.name, model.version)

    def unregister_model(self, name: str) -> None:
        with self._lock:
            if self._models.pop(name, None) is None:
                raise ModelNotFoundError(name)

    def get_model(self, name: str) -> Model:
        with self._lock:
            model = self._models.get(name)
        if model is None:
            raise ModelNotFoundError(name)
        return model

    def has_model(self, name: str) -> bool:
        with self._lock:
            return name in self._models

    def models(self) -> list[Model]:
        with self._lock:
            return list(self._models.values())

    def list_compatible_models(
        self,
        name: str,
        direction: CompatibilityDirection | str = CompatibilityDirection.EITHER,
    ) -> set[str]:
        """Return the direct neighbours of ``name``; edges are never followed further."""

        compatibility = self.get_model(name).compatibility
        resolved = CompatibilityDirection(direction)
        neighbours = set(compatibility.direct_compatible)
        if resolved in (CompatibilityDirection.TO, CompatibilityDirection.EITHER):
            neighbours.update(compatibility.translatable_to)
        if resolved in (CompatibilityDirection.FROM, CompatibilityDirection.EITHER):
            neighbours.update(compatibility.translatable_from)
        neighbours.discard(name)
        return neighbours

    def validate_entity(
        self, model_name: str, entity_name: str, data: Any
    ) -> ValidationOutcome[dict[str, Any]]:
        """Validate ``data`` against one entity of a registered model."""

        model = self.get_model(model_name)
        entity = model.schema.entities.get(entity_name)
        if entity is None:
            raise SchemaError(model_name, [f"unknown entity '{entity_name}'"])
        if self._validator is None:
            raise SchemaError(model_name, ["no schema validator configured"])
        return self._validator.validate(entity, data)
