"""Envelope, result and component contract shared by every pipeline stage."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    import threading
    from collections.abc import Mapping

    from modelbridge.domain.errors import MappingError


@dataclass(frozen=True, slots=True)
class ETLContext:
    """Data flowing through one translation or pipeline run.

    ``cancel_event`` lets a caller stop a pipeline between stages; components
    doing long work may poll it too.
    """

    source: str
    target: str
    data: Any = None
    options: Mapping[str, Any] = field(default_factory=dict[str, Any])
    metadata: Mapping[str, Any] = field(default_factory=dict[str, Any])
    cancel_event: threading.Event | None = None

    def with_data(self, data: Any) -> ETLContext:
        return replace(self, data=data)

    @property
    def cancelled(self) -> bool:
        return self.cancel_event is not None and self.cancel_event.is_set()


@dataclass(frozen=True, slots=True)
class ETLStats:
    processed: int = 0
    succeeded: int = 0
    failed: int = 0

    def __add__(self, other: ETLStats) -> ETLStats:
        return ETLStats(
            processed=self.processed + other.processed,
            succeeded=self.succeeded + other.succeeded,
            failed=self.failed + other.failed,
        )


@dataclass(frozen=True, slots=True)
class ETLMetadata:
    timestamp: datetime
    duration_ms: float
    source: str
    target: str
    stats: ETLStats


@dataclass(frozen=True, slots=True)
class StageReport:
    component_id: str
    stats: ETLStats
    duration_ms: float


@dataclass(frozen=True, slots=True)
class ETLResult[T]:
    """Output of one component execution, or of a whole pipeline run."""

    data: T
    metadata: ETLMetadata
    errors: tuple[MappingError, ...] = ()
    stages: tuple[StageReport, ...] = ()

    @property
    def stats(self) -> ETLStats:
        return self.metadata.stats


class ETLComponent(Protocol):
    """Contract implemented by every pipeline stage."""

    @property
    def id(self) -> str: ...

    @property
    def version(self) -> str: ...

    def validate(self, context: ETLContext) -> bool: ...

    def execute(self, context: ETLContext) -> ETLResult[Any]: ...


def utcnow() -> datetime:
    return datetime.now(UTC)


def elapsed_ms(started: float, finished: float) -> float:
    """Convert two ``time.perf_counter`` readings into milliseconds."""

    return (finished - started) * 1000.0
