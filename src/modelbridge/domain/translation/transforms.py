"""Named, pure value transforms referenced by bridge rules."""

from __future__ import annotations

import threading
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from modelbridge.domain.errors import UnknownTransformError

if TYPE_CHECKING:
    from collections.abc import Callable

type Transform = Callable[[Any], Any]


class TransformRegistry:
    """Maps transform ids to plain functions.

    Bridges only ever name a transform; nothing is evaluated from the bridge
    definition itself.
    """

    def __init__(self, transforms: dict[str, Transform] | None = None) -> None:
        self._transforms: dict[str, Transform] = dict(transforms or {})
        self._lock = threading.Lock()

    def register(self, name: str, transform: Transform, *, replace: bool = False) -> None:
        with self._lock:
            if name in self._transforms and not replace:
                raise ValueError(f"Transform '{name}' is already registered")
            self._transforms[name] = transform

    def get(self, name: str) -> Transform:
        with self._lock:
            transform = self._transforms.get(name)
        if transform is None:
            raise UnknownTransformError(name)
        return transform

    def names(self) -> list[str]:
        with self._lock:
            return sorted(self._transforms)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._transforms


def _require_str(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError(f"expected a string, got {type(value).__name__}")
    return value


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    text = _require_str(value).strip().lower()
    if text in {"true", "yes", "y", "1", "on"}:
        return True
    if text in {"false", "no", "n", "0", "off", ""}:
        return False
    raise ValueError(f"cannot interpret {value!r} as a boolean")


def _to_int(value: Any) -> int:
    if isinstance(value, bool):
        raise TypeError("booleans are not integers")
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"{value!r} is not a whole number")
    return int(value)


def _split_csv(value: Any) -> list[str]:
    return [part.strip() for part in _require_str(value).split(",") if part.strip()]


def _join_csv(value: Any) -> str:
    if not isinstance(value, (list, tuple)):
        raise TypeError(f"expected a list, got {type(value).__name__}")
    return ",".join(str(item) for item in value)


def _iso_datetime(value: Any) -> str:
    """Normalise timestamps (ISO strings or epoch seconds) to UTC ISO-8601."""

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        parsed = datetime.fromtimestamp(value, tz=UTC)
    else:
        normalized = _require_str(value).strip()
        if normalized.endswith("Z"):
            normalized = normalized[:-1] + "+00:00"
        parsed = datetime.fromisoformat(normalized)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC).isoformat()


def default_transforms() -> TransformRegistry:
    return TransformRegistry(
        {
            "lowercase": lambda value: _require_str(value).lower(),
            "uppercase": lambda value: _require_str(value).upper(),
            "strip": lambda value: _require_str(value).strip(),
            "to_string": str,
            "to_int": _to_int,
            "to_float": float,
            "to_bool": _to_bool,
            "split_csv": _split_csv,
            "join_csv": _join_csv,
            "iso_datetime": _iso_datetime,
        }
    )
