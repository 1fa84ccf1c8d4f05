"""ETL envelope, component contract and the pipeline that chains components."""

from __future__ import annotations

from .context import ETLComponent, ETLContext, ETLMetadata, ETLResult, ETLStats, StageReport
from .events import PipelineEvent, PipelineEventType, PipelineListener
from .pipeline import Pipeline, PipelineState
from .validation import SchemaValidationComponent

__all__ = [
    "ETLComponent",
    "ETLContext",
    "ETLMetadata",
    "ETLResult",
    "ETLStats",
    "Pipeline",
    "PipelineEvent",
    "PipelineEventType",
    "PipelineListener",
    "PipelineState",
    "SchemaValidationComponent",
    "StageReport",
]
