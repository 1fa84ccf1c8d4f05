"""Bridge store persisting a flat JSON array of bridge records."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from pydantic import ValidationError

from .errors import BridgeStoreError
from .schema import BRIDGE_RECORDS
from .translator import bridge_to_record, translate_record

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from modelbridge.domain.model import Bridge

log = logging.getLogger(__name__)


class JsonFileBridgeStore:
    """Reads and writes ``[{id, version, source, target, ...}, ...]`` at ``path``."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> list[Bridge]:
        if not self.path.exists():
            log.debug("No bridge store at %s; starting empty", self.path)
            return []
        try:
            raw = self.path.read_bytes()
            records = BRIDGE_RECORDS.validate_json(raw)
        except OSError as exc:
            raise BridgeStoreError(f"Cannot read bridge store {self.path}: {exc}") from exc
        except ValidationError as exc:
            raise BridgeStoreError(f"Malformed bridge store {self.path}: {exc}") from exc
        return [translate_record(record) for record in records]

    def save(self, bridges: Iterable[Bridge]) -> None:
        payload = [bridge_to_record(bridge) for bridge in bridges]
        try:
            text = json.dumps(payload, indent=2)
        except TypeError as exc:
            raise BridgeStoreError(f"Bridge records are not JSON serialisable: {exc}") from exc
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(text + "\n", encoding="utf-8")
        except OSError as exc:
            raise BridgeStoreError(f"Cannot write bridge store {self.path}: {exc}") from exc
        log.debug("Saved %s bridge(s) to %s", len(payload), self.path)
