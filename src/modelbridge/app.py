"""Application entry points wiring stores, registries and components."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, cast

from pydantic import ValidationError

from modelbridge.adapters.bridge_store import (
    BridgeStoreError,
    JsonFileBridgeStore,
    SqlAlchemyBridgeStore,
    translate_mappings,
)
from modelbridge.adapters.bridge_store.schema import MAPPINGS, TRANSFORMATIONS
from modelbridge.config import get_store_config
from modelbridge.domain.errors import BridgeValidationError, ModelBridgeError
from modelbridge.domain.etl import ETLContext
from modelbridge.domain.model import Bridge, BridgeMetadata
from modelbridge.domain.registry import BridgeRegistry
from modelbridge.domain.translation import BridgeComponent

if TYPE_CHECKING:
    from modelbridge.config import StoreConfig
    from modelbridge.domain.etl import ETLResult
    from modelbridge.domain.ports import BridgeStore
    from modelbridge.domain.translation import TransformRegistry

log = logging.getLogger(__name__)


class BridgeNotFoundError(ModelBridgeError):
    def __init__(
        self, *, bridge_id: str | None = None, pair: tuple[str, str] | None = None
    ) -> None:
        self.bridge_id = bridge_id
        self.pair = pair
        if bridge_id is not None:
            message = f"Bridge '{bridge_id}' not found"
        elif pair is not None:
            message = f"No bridge found from '{pair[0]}' to '{pair[1]}'"
        else:
            message = "Bridge not found"
        super().__init__(message)


@dataclass(frozen=True, slots=True)
class BridgeSummary:
    id: str
    version: str
    source: str
    target: str
    efficiency: float
    confidence: float


def build_bridge_store(config: StoreConfig | None = None) -> BridgeStore:
    """Return the configured store: a database when a URI is set, else a JSON file."""

    active = config or get_store_config()
    if active.uses_database:
        return SqlAlchemyBridgeStore.from_uri(cast("str", active.store_uri))
    return JsonFileBridgeStore(active.bridge_store_path())


def open_bridge_registry(store: BridgeStore) -> BridgeRegistry:
    registry = BridgeRegistry()
    for bridge in store.load():
        registry.register(bridge)
    log.debug("Loaded %s bridge(s)", len(registry))
    return registry


def summarize_bridges(registry: BridgeRegistry) -> list[BridgeSummary]:
    return [
        BridgeSummary(
            id=bridge.id,
            version=bridge.version,
            source=bridge.source,
            target=bridge.target,
            efficiency=bridge.metadata.efficiency,
            confidence=bridge.metadata.confidence,
        )
        for bridge in registry.get_bridges()
    ]


def require_bridge(registry: BridgeRegistry, bridge_id: str) -> Bridge:
    bridge = registry.get(bridge_id)
    if bridge is None:
        raise BridgeNotFoundError(bridge_id=bridge_id)
    return bridge


def build_bridge(
    *,
    bridge_id: str,
    version: str,
    source: str,
    target: str,
    mappings: Any,
    transformations: Any,
    efficiency: float = 1.0,
    confidence: float = 1.0,
) -> Bridge:
    """Build a bridge from loosely-typed mapping and transformation data."""

    try:
        parsed_mappings = translate_mappings(MAPPINGS.validate_python(mappings))
        parsed_transformations = TRANSFORMATIONS.validate_python(transformations)
    except ValidationError as exc:
        raise BridgeValidationError(bridge_id, [str(exc)]) from exc
    return Bridge(
        id=bridge_id,
        version=version,
        source=source,
        target=target,
        mappings=parsed_mappings,
        transformations=parsed_transformations,
        metadata=BridgeMetadata(
            efficiency=efficiency,
            confidence=confidence,
            last_updated=datetime.now(UTC),
        ),
    )


def create_bridge(registry: BridgeRegistry, store: BridgeStore, bridge: Bridge) -> Bridge:
    """Validate, register and persist ``bridge``."""

    registry.register(bridge)
    try:
        store.save(registry.get_bridges())
    except BridgeStoreError:
        log.exception("Bridge %s registered but could not be persisted", bridge.id)
        raise
    log.info("Created bridge %s (%s -> %s)", bridge.id, bridge.source, bridge.target)
    return bridge


def run_bridge(
    registry: BridgeRegistry,
    bridge: Bridge,
    data: Any,
    *,
    transforms: TransformRegistry | None = None,
) -> ETLResult[Any]:
    component = BridgeComponent(bridge, registry, transforms=transforms)
    return component.execute(ETLContext(source=bridge.source, target=bridge.target, data=data))


def translate(
    registry: BridgeRegistry,
    source: str,
    target: str,
    data: Any,
    *,
    transforms: TransformRegistry | None = None,
) -> ETLResult[Any]:
    """Translate ``data`` with the single bridge registered for ``source -> target``."""

    bridge = registry.get_bridge(source, target)
    if bridge is None:
        raise BridgeNotFoundError(pair=(source, target))
    log.debug("Translating %s -> %s with bridge %s", source, target, bridge.id)
    return run_bridge(registry, bridge, data, transforms=transforms)
