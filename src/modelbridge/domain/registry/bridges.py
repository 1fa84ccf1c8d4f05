"""In-memory registry of directional bridges, keyed by bridge id."""

from __future__ import annotations

import logging
import numbers
import threading
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from modelbridge.domain.errors import BridgeValidationError
from modelbridge.domain.model import FIELD_RULE_TYPES, BridgeUsage

if TYPE_CHECKING:
    from collections.abc import Iterator

    from modelbridge.domain.model import Bridge
    from modelbridge.domain.registry.models import ModelRegistry

log = logging.getLogger(__name__)


def _non_empty_string(value: object) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _score_problem(name: str, value: object) -> str | None:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return f"metadata.{name} must be a number"
    if not 0 <= value <= 1:
        return f"metadata.{name} must be between 0 and 1"
    return None


def structural_problems(bridge: Bridge) -> list[str]:
    """Presence and type checks only; mappings are not compared to model schemas."""

    return list(_iter_structural_problems(bridge))


def _iter_structural_problems(bridge: Bridge) -> Iterator[str]:
    for name in ("id", "version", "source", "target"):
        if not _non_empty_string(getattr(bridge, name, None)):
            yield f"{name} must be a non-empty string"

    mappings = getattr(bridge, "mappings", None)
    if not isinstance(mappings, Mapping):
        yield "mappings must be a key-value map"
    else:
        for target_path, rule in mappings.items():
            if not _non_empty_string(target_path):
                yield "mapping keys must be non-empty strings"
            elif not isinstance(rule, FIELD_RULE_TYPES):
                yield f"mapping '{target_path}' is not a field rule"

    transformations = getattr(bridge, "transformations", None)
    if not isinstance(transformations, Mapping):
        yield "transformations must be a key-value map"
    else:
        for field_name, transform_id in transformations.items():
            if not _non_empty_string(field_name) or not _non_empty_string(transform_id):
                yield f"transformation '{field_name}' must name a transform"

    metadata = getattr(bridge, "metadata", None)
    if metadata is None:
        yield "metadata is required"
        return
    for name in ("efficiency", "confidence"):
        problem = _score_problem(name, getattr(metadata, name, None))
        if problem:
            yield problem


def check_against_models(bridge: Bridge, models: ModelRegistry) -> list[str]:
    """Stronger, opt-in validation of a bridge against registered model schemas.

    Reports unknown source/target models and mapping targets whose first path
    segment is neither an entity of the target model nor a field of one.
    """

    problems: list[str] = []
    for role, name in (("source", bridge.source), ("target", bridge.target)):
        if not models.has_model(name):
            problems.append(f"{role} model '{name}' is not registered")
    if problems:
        return problems

    schema = models.get_model(bridge.target).schema
    known_fields = {
        field_name for entity in schema.entities.values() for field_name in entity.fields
    }
    for target_path in bridge.mappings:
        head, _, tail = target_path.partition(".")
        if head in schema.entities:
            entity_fields = schema.entities[head].fields
            if tail and tail.split(".", 1)[0] not in entity_fields:
                problems.append(f"mapping '{target_path}' targets an undeclared field")
        elif head not in known_fields:
            problems.append(f"mapping '{target_path}' is unknown to model '{bridge.target}'")
    return problems


class BridgeRegistry:
    """Bridges by id, in insertion order.

    ``register`` is an upsert: a second registration with the same id replaces
    the earlier definition in place. Lookups by model pair are exact and
    directional; A->B never answers a B->A request.
    """

    def __init__(self) -> None:
        self._bridges: dict[str, Bridge] = {}
        self._usage: dict[str, BridgeUsage] = {}
        self._lock = threading.RLock()

    def register(self, bridge: Bridge) -> None:
        problems = structural_problems(bridge)
        if problems:
            raise BridgeValidationError(getattr(bridge, "id", None) or None, problems)
        with self._lock:
            replaced = bridge.id in self._bridges
            self._bridges[bridge.id] = bridge
        log.debug(
            "%s bridge %s (%s -> %s)",
            "Replaced" if replaced else "Registered",
            bridge.id,
            bridge.source,
            bridge.target,
        )

    def validate(self, bridge: Bridge) -> bool:
        return not structural_problems(bridge)

    def problems(self, bridge: Bridge) -> list[str]:
        return structural_problems(bridge)

    def get(self, bridge_id: str) -> Bridge | None:
        with self._lock:
            return self._bridges.get(bridge_id)

    def get_bridge(self, source: str, target: str) -> Bridge | None:
        for bridge in self.get_bridges():
            if bridge.source == source and bridge.target == target:
                return bridge
        return None

    def get_bridges(self) -> list[Bridge]:
        with self._lock:
            return list(self._bridges.values())

    def bridges_from(self, source: str) -> list[Bridge]:
        return [bridge for bridge in self.get_bridges() if bridge.source == source]

    def bridges_to(self, target: str) -> list[Bridge]:
        return [bridge for bridge in self.get_bridges() if bridge.target == target]

    def most_efficient_bridge(self, source: str, target: str) -> Bridge | None:
        candidates = [
            bridge
            for bridge in self.get_bridges()
            if bridge.source == source and bridge.target == target
        ]
        if not candidates:
            return None
        # max() keeps the first of equal keys, so insertion order breaks ties
        return max(
            candidates,
            key=lambda bridge: (bridge.metadata.efficiency, bridge.metadata.confidence),
        )

    def discover(self, model: str | None = None) -> set[str]:
        """Models one bridge away from ``model``, or every model any bridge mentions."""

        found: set[str] = set()
        for bridge in self.get_bridges():
            if model is None:
                found.update(bridge.pair)
            elif bridge.source == model:
                found.add(bridge.target)
            elif bridge.target == model:
                found.add(bridge.source)
        if model is not None:
            found.discard(model)
        return found

    def record_usage(
        self, bridge_id: str, efficiency: float, *, used_at: datetime | None = None
    ) -> BridgeUsage:
        """Fold one run into the usage statistics of ``bridge_id``.

        Statistics are keyed by id and survive re-registration of the bridge.
        """

        if not 0 <= efficiency <= 1:
            raise ValueError(f"efficiency must be between 0 and 1, got {efficiency!r}")
        when = used_at or datetime.now(UTC)
        with self._lock:
            previous = self._usage.get(bridge_id)
            if previous is None:
                usage = BridgeUsage(count=1, last_used=when, average_efficiency=efficiency)
            else:
                usage = previous.record(efficiency, when)
            self._usage[bridge_id] = usage
        return usage

    def usage(self, bridge_id: str) -> BridgeUsage | None:
        with self._lock:
            return self._usage.get(bridge_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._bridges)

    def __contains__(self, bridge_id: object) -> bool:
        with self._lock:
            return bridge_id in self._bridges
