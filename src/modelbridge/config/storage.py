"""Bridge store location configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

APP_DIR_NAME: Final[str] = "modelbridge"
BRIDGE_STORE_FILENAME: Final[str] = "bridges.json"
DATA_DIR_ENV: Final[str] = "MODELBRIDGE_DATA_DIR"
STORE_URI_ENV: Final[str] = "MODELBRIDGE_STORE_URI"


@dataclass(frozen=True, slots=True)
class StoreConfig:
    data_dir: Path
    store_uri: str | None = None
    bridge_store_filename: str = BRIDGE_STORE_FILENAME

    def resolve_data_dir(self) -> Path:
        return self.data_dir.expanduser().resolve()

    def bridge_store_path(self) -> Path:
        return self.resolve_data_dir() / self.bridge_store_filename

    @property
    def uses_database(self) -> bool:
        return bool(self.store_uri)


def _default_data_dir() -> Path:
    if os.name == "nt":
        base = os.getenv("LOCALAPPDATA")
        base_path = Path(base) if base else (Path.home() / "AppData" / "Local")
    else:
        base = os.getenv("XDG_DATA_HOME")
        base_path = Path(base) if base else (Path.home() / ".local" / "share")
    return (base_path / APP_DIR_NAME).expanduser().resolve()


def get_store_config() -> StoreConfig:
    env_dir = os.getenv(DATA_DIR_ENV)
    data_dir = Path(env_dir) if env_dir else _default_data_dir()
    store_uri = os.getenv(STORE_URI_ENV) or None
    return StoreConfig(data_dir=data_dir, store_uri=store_uri)
