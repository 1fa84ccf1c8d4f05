"""Port for durable storage of bridge definitions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Iterable

    from modelbridge.domain.model import Bridge


class BridgeStore(Protocol):
    """Loads and saves the full set of bridge definitions.

    The engine never calls a store itself; application code loads records at
    startup, registers them, and saves after each mutation.
    """

    def load(self) -> list[Bridge]:
        """Return stored bridges in their saved order; empty when nothing is stored."""
        ...

    def save(self, bridges: Iterable[Bridge]) -> None:
        """Replace the stored set with ``bridges``."""
        ...
