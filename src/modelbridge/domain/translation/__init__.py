"""Bridge execution: field rules, transforms and the bridge pipeline stage."""

from __future__ import annotations

from .component import BridgeComponent
from .paths import MISSING, get_path, set_path
from .transforms import Transform, TransformRegistry, default_transforms

__all__ = [
    "MISSING",
    "BridgeComponent",
    "Transform",
    "TransformRegistry",
    "default_transforms",
    "get_path",
    "set_path",
]
