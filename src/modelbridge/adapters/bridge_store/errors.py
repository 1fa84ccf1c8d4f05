"""Bridge store error definitions."""

from __future__ import annotations

from modelbridge.domain.errors import ModelBridgeError


class BridgeStoreError(ModelBridgeError):
    """Raised when stored bridge records cannot be read or written."""
