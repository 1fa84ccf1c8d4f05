"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import BridgeStore
from .validation import SchemaValidator, ValidationIssue, ValidationOutcome

__all__ = [
    "BridgeStore",
    "SchemaValidator",
    "ValidationIssue",
    "ValidationOutcome",
]
