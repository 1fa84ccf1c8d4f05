"""Bridge store adapters: JSON file and SQLAlchemy."""

from __future__ import annotations

from .errors import BridgeStoreError
from .json_file import JsonFileBridgeStore
from .schema import BridgeRecord
from .sqlalchemy import SqlAlchemyBridgeStore
from .translator import bridge_to_record, translate_mappings, translate_record

__all__ = [
    "BridgeRecord",
    "BridgeStoreError",
    "JsonFileBridgeStore",
    "SqlAlchemyBridgeStore",
    "bridge_to_record",
    "translate_mappings",
    "translate_record",
]
