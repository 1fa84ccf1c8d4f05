"""Fail-fast, stats-accumulating composition of ETL components."""

from __future__ import annotations

import logging
import time
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from modelbridge.domain.errors import (
    ComponentValidationError,
    PipelineCancelledError,
    PipelineExecutionError,
)
from modelbridge.domain.etl.context import (
    ETLMetadata,
    ETLResult,
    ETLStats,
    StageReport,
    elapsed_ms,
    utcnow,
)
from modelbridge.domain.etl.events import PipelineEvent, PipelineEventType

if TYPE_CHECKING:
    from collections.abc import Iterable

    from modelbridge.domain.errors import MappingError
    from modelbridge.domain.etl.context import ETLComponent, ETLContext
    from modelbridge.domain.etl.events import PipelineListener

log = logging.getLogger(__name__)


class PipelineState(StrEnum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class Pipeline:
    """Run components in insertion order against one evolving context.

    Each stage receives the previous stage's output as ``context.data``. A
    component that rejects its context, or raises, aborts the whole run; there
    is no skipping and no partial continuation. Statistics are summed over
    every stage that ran. The component list survives runs, so a pipeline can
    be executed again.

    Listeners registered with ``on`` are notified around the whole run and
    around each stage. A failing listener is logged and never aborts the run.
    """

    def __init__(self, pipeline_id: str, components: Iterable[ETLComponent] = ()) -> None:
        self.id = pipeline_id
        self._components: list[ETLComponent] = list(components)
        self.state = PipelineState.IDLE
        self._listeners: dict[PipelineEventType, list[PipelineListener]] = {}

    @property
    def components(self) -> tuple[ETLComponent, ...]:
        return tuple(self._components)

    def add_component(self, component: ETLComponent) -> Pipeline:
        self._components.append(component)
        return self

    def remove_component(self, component_id: str) -> None:
        self._components = [c for c in self._components if c.id != component_id]

    def on(self, event_type: PipelineEventType | str, listener: PipelineListener) -> Pipeline:
        self._listeners.setdefault(PipelineEventType(event_type), []).append(listener)
        return self

    def off(self, event_type: PipelineEventType | str, listener: PipelineListener) -> None:
        listeners = self._listeners.get(PipelineEventType(event_type), [])
        if listener in listeners:
            listeners.remove(listener)

    def execute(self, context: ETLContext) -> ETLResult[Any]:
        self.state = PipelineState.RUNNING
        self._emit(PipelineEventType.PIPELINE_START, context)
        try:
            result = self._run(context)
        except Exception as exc:
            self.state = PipelineState.FAILED
            self._emit(PipelineEventType.PIPELINE_ERROR, context, error=exc)
            raise
        self.state = PipelineState.COMPLETED
        self._emit(PipelineEventType.PIPELINE_COMPLETE, context, result=result)
        return result

    def _emit(
        self,
        event_type: PipelineEventType,
        context: ETLContext,
        *,
        component_id: str | None = None,
        result: ETLResult[Any] | None = None,
        error: BaseException | None = None,
    ) -> None:
        listeners = tuple(self._listeners.get(event_type, ()))
        if not listeners:
            return
        event = PipelineEvent(
            type=event_type,
            pipeline_id=self.id,
            context=context,
            component_id=component_id,
            result=result,
            error=error,
        )
        for listener in listeners:
            try:
                listener(event)
            except Exception:
                log.exception("Pipeline %s: listener failed on %s", self.id, event_type)

    def _run(self, context: ETLContext) -> ETLResult[Any]:
        started = time.perf_counter()
        current_data: Any = context.data
        totals = ETLStats()
        stages: list[StageReport] = []
        errors: list[MappingError] = []

        log.info("Pipeline %s starting with %s component(s)", self.id, len(self._components))
        for component in tuple(self._components):
            stage_context = context.with_data(current_data)
            if stage_context.cancelled:
                raise PipelineCancelledError(self.id, component.id)
            self._emit(PipelineEventType.STEP_START, stage_context, component_id=component.id)
            if not component.validate(stage_context):
                log.warning("Pipeline %s: component %s rejected context", self.id, component.id)
                rejected = ComponentValidationError(self.id, component.id)
                self._emit(
                    PipelineEventType.STEP_ERROR,
                    stage_context,
                    component_id=component.id,
                    error=rejected,
                )
                raise rejected

            stage_started = time.perf_counter()
            try:
                result = component.execute(stage_context)
            except Exception as exc:
                log.warning(
                    "Pipeline %s failed at %s after totals %s", self.id, component.id, totals
                )
                self._emit(
                    PipelineEventType.STEP_ERROR, stage_context, component_id=component.id, error=exc
                )
                raise PipelineExecutionError(self.id, component.id, exc) from exc

            self._emit(
                PipelineEventType.STEP_COMPLETE,
                stage_context,
                component_id=component.id,
                result=result,
            )

            totals += result.metadata.stats
            stages.append(
                StageReport(
                    component_id=component.id,
                    stats=result.metadata.stats,
                    duration_ms=elapsed_ms(stage_started, time.perf_counter()),
                )
            )
            errors.extend(result.errors)
            current_data = result.data

        log.info(
            "Pipeline %s completed: processed=%s, succeeded=%s, failed=%s",
            self.id,
            totals.processed,
            totals.succeeded,
            totals.failed,
        )
        return ETLResult(
            data=current_data,
            metadata=ETLMetadata(
                timestamp=utcnow(),
                duration_ms=elapsed_ms(started, time.perf_counter()),
                source=context.source,
                target=context.target,
                stats=totals,
            ),
            errors=tuple(errors),
            stages=tuple(stages),
        )
