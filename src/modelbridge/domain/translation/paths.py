"""Dotted-path access into nested mappings."""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from typing import Any, Final


class _Missing:
    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Final = _Missing()


def get_path(record: Any, path: str) -> Any:
    """Return the value at ``path`` or ``MISSING`` when any segment is absent."""

    current = record
    for segment in path.split("."):
        if not isinstance(current, Mapping) or segment not in current:
            return MISSING
        current = current[segment]
    return current


def set_path(record: MutableMapping[str, Any], path: str, value: Any) -> None:
    """Assign ``value`` at ``path``, creating intermediate objects as needed."""

    *parents, leaf = path.split(".")
    current = record
    for segment in parents:
        child = current.get(segment)
        if child is None:
            child = {}
            current[segment] = child
        elif not isinstance(child, MutableMapping):
            raise TypeError(f"cannot assign below non-object value at '{segment}'")
        current = child
    current[leaf] = value
