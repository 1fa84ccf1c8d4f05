"""Pipeline stage that filters records through a model's entity schema."""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from modelbridge.domain.errors import MappingError, ModelNotFoundError, TranslationFailedError
from modelbridge.domain.etl.context import ETLMetadata, ETLResult, ETLStats, elapsed_ms, utcnow

if TYPE_CHECKING:
    from modelbridge.domain.etl.context import ETLContext
    from modelbridge.domain.registry.models import ModelRegistry

log = logging.getLogger(__name__)


class SchemaValidationComponent:
    """Keep records that satisfy ``entity_name`` of ``model_name``.

    Invalid records are dropped and reported like failed bridge records, so a
    validation stage after a bridge contributes to the same statistics.
    """

    def __init__(
        self,
        models: ModelRegistry,
        model_name: str,
        entity_name: str,
        *,
        component_id: str | None = None,
        version: str = "1",
    ) -> None:
        self._models = models
        self.model_name = model_name
        self.entity_name = entity_name
        self._id = component_id or f"validate:{model_name}.{entity_name}"
        self._version = version

    @property
    def id(self) -> str:
        return self._id

    @property
    def version(self) -> str:
        return self._version

    def validate(self, context: ETLContext) -> bool:
        if context.target != self.model_name:
            return False
        try:
            model = self._models.get_model(self.model_name)
        except ModelNotFoundError:
            return False
        return self.entity_name in model.schema.entities

    def execute(self, context: ETLContext) -> ETLResult[Any]:
        started = time.perf_counter()
        single = isinstance(context.data, Mapping)
        if single:
            records: Sequence[Any] = [context.data]
        elif context.data is None:
            records = []
        else:
            records = list(context.data)

        accepted: list[dict[str, Any]] = []
        errors: list[MappingError] = []
        for index, record in enumerate(records):
            outcome = self._models.validate_entity(self.model_name, self.entity_name, record)
            if outcome.ok and outcome.value is not None:
                accepted.append(outcome.value)
                continue
            first = outcome.issues[0] if outcome.issues else None
            errors.append(
                MappingError(
                    "; ".join(str(issue) for issue in outcome.issues) or "invalid record",
                    bridge_id=self.id,
                    field_path=first.path if first else None,
                    record_index=index,
                )
            )

        stats = ETLStats(processed=len(records), succeeded=len(accepted), failed=len(errors))
        if stats.processed and not stats.succeeded:
            raise TranslationFailedError(self.id, errors)
        if errors:
            log.info("%s dropped %s invalid record(s)", self.id, len(errors))

        return ETLResult(
            data=accepted[0] if single else accepted,
            metadata=ETLMetadata(
                timestamp=utcnow(),
                duration_ms=elapsed_ms(started, time.perf_counter()),
                source=context.source,
                target=context.target,
                stats=stats,
            ),
            errors=tuple(errors),
        )
