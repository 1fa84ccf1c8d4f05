"""Execute one registered bridge against a record or a batch of records."""

from __future__ import annotations

import copy
import logging
import time
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from modelbridge.domain.errors import MappingError, TranslationFailedError
from modelbridge.domain.etl.context import (
    ETLMetadata,
    ETLResult,
    ETLStats,
    elapsed_ms,
    utcnow,
)
from modelbridge.domain.model import ConstantRule, CopyRule, TransformRule
from modelbridge.domain.translation.paths import MISSING, get_path, set_path
from modelbridge.domain.translation.transforms import default_transforms

if TYPE_CHECKING:
    from modelbridge.domain.etl.context import ETLContext
    from modelbridge.domain.model import Bridge, FieldRule
    from modelbridge.domain.registry.bridges import BridgeRegistry
    from modelbridge.domain.translation.transforms import TransformRegistry

log = logging.getLogger(__name__)


class BridgeComponent:
    """Pipeline stage that translates records with a single bridge.

    The registry is consulted only to pick up a newer definition of the same
    bridge id between calls. A record either translates completely or fails as
    a whole; one failed record never stops the rest of a batch.
    """

    def __init__(
        self,
        bridge: Bridge,
        registry: BridgeRegistry,
        *,
        transforms: TransformRegistry | None = None,
    ) -> None:
        self._bridge = bridge
        self._registry = registry
        self._transforms = transforms or default_transforms()

    @property
    def bridge(self) -> Bridge:
        current = self._registry.get(self._bridge.id)
        return current if current is not None else self._bridge

    @property
    def id(self) -> str:
        return self._bridge.id

    @property
    def version(self) -> str:
        return self.bridge.version

    def validate(self, context: ETLContext) -> bool:
        bridge = self.bridge
        return context.source == bridge.source and context.target == bridge.target

    def execute(self, context: ETLContext) -> ETLResult[Any]:
        bridge = self.bridge
        started = time.perf_counter()
        single = isinstance(context.data, Mapping)
        records: Sequence[Any] = [context.data] if single else _as_batch(context.data)

        translated: list[dict[str, Any]] = []
        errors: list[MappingError] = []
        for index, record in enumerate(records):
            try:
                translated.append(self.translate_record(record, bridge=bridge))
            except MappingError as exc:
                errors.append(exc.bind(bridge_id=bridge.id, record_index=index))
                log.debug("Bridge %s rejected record %s: %s", bridge.id, index, exc)

        stats = ETLStats(processed=len(records), succeeded=len(translated), failed=len(errors))
        if stats.processed:
            self._registry.record_usage(bridge.id, stats.succeeded / stats.processed)
        if stats.processed and not stats.succeeded:
            raise TranslationFailedError(bridge.id, errors)

        log.info(
            "Bridge %s translated %s -> %s: processed=%s, succeeded=%s, failed=%s",
            bridge.id,
            bridge.source,
            bridge.target,
            stats.processed,
            stats.succeeded,
            stats.failed,
        )
        data: Any = translated[0] if single else translated
        return ETLResult(
            data=data,
            metadata=ETLMetadata(
                timestamp=utcnow(),
                duration_ms=elapsed_ms(started, time.perf_counter()),
                source=bridge.source,
                target=bridge.target,
                stats=stats,
            ),
            errors=tuple(errors),
        )

    def translate_record(self, record: Any, *, bridge: Bridge | None = None) -> dict[str, Any]:
        """Translate one record or raise ``MappingError`` for the first failing rule."""

        active = bridge or self.bridge
        if not isinstance(record, Mapping):
            raise MappingError(f"record must be an object, got {type(record).__name__}")

        output: dict[str, Any] = {}
        for target_path, rule in active.mappings.items():
            value = self._resolve(record, target_path, rule)
            transform_id = active.transformations.get(target_path)
            if value is not MISSING and transform_id is not None:
                value = self._apply(transform_id, value, target_path)
            if value is not MISSING:
                self._assign(output, target_path, value)

        for target_path, transform_id in active.transformations.items():
            if target_path in active.mappings:
                continue
            value = get_path(record, target_path)
            if value is MISSING:
                continue
            self._assign(output, target_path, self._apply(transform_id, value, target_path))

        return output

    def _resolve(self, record: Mapping[str, Any], target_path: str, rule: FieldRule) -> Any:
        match rule:
            case ConstantRule(value=value):
                # each record owns its copy; later rules may write below it
                return copy.deepcopy(value)
            case CopyRule(source_path=source_path, required=required):
                return _read(record, source_path, target_path, required=required)
            case TransformRule(
                source_path=source_path, transform_id=transform_id, required=required
            ):
                value = _read(record, source_path, target_path, required=required)
                if value is MISSING:
                    return MISSING
                return self._apply(transform_id, value, target_path)
            case _:
                raise MappingError(f"unsupported rule {rule!r}", field_path=target_path)

    def _apply(self, transform_id: str, value: Any, target_path: str) -> Any:
        try:
            transform = self._transforms.get(transform_id)
        except MappingError as exc:
            exc.field_path = target_path
            raise
        try:
            return transform(value)
        except Exception as exc:
            raise MappingError(
                f"transform '{transform_id}' failed: {exc}", field_path=target_path
            ) from exc

    @staticmethod
    def _assign(output: dict[str, Any], target_path: str, value: Any) -> None:
        try:
            set_path(output, target_path, value)
        except TypeError as exc:
            raise MappingError(str(exc), field_path=target_path) from exc


def _read(record: Mapping[str, Any], source_path: str, target_path: str, *, required: bool) -> Any:
    value = get_path(record, source_path)
    if value is MISSING and required:
        raise MappingError(f"missing source value '{source_path}'", field_path=target_path)
    return value


def _as_batch(data: Any) -> Sequence[Any]:
    if data is None:
        return []
    if isinstance(data, (str, bytes)) or not isinstance(data, Sequence):
        # a lone scalar is one record that is bound to fail
        return [data]
    return data
