"""Lifecycle events emitted by a pipeline run."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

    from modelbridge.domain.etl.context import ETLContext, ETLResult


class PipelineEventType(StrEnum):
    PIPELINE_START = "pipeline:start"
    PIPELINE_COMPLETE = "pipeline:complete"
    PIPELINE_ERROR = "pipeline:error"
    STEP_START = "step:start"
    STEP_COMPLETE = "step:complete"
    STEP_ERROR = "step:error"


@dataclass(frozen=True, slots=True)
class PipelineEvent:
    """One lifecycle notification.

    ``component_id`` is set for step events only. ``result`` accompanies the
    complete events, ``error`` the error events.
    """

    type: PipelineEventType
    pipeline_id: str
    context: ETLContext
    component_id: str | None = None
    result: ETLResult[Any] | None = None
    error: BaseException | None = None


type PipelineListener = Callable[[PipelineEvent], None]
