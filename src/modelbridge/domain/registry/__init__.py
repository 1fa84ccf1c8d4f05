"""Explicit, injectable registries for models and bridges."""

from __future__ import annotations

from .bridges import BridgeRegistry, check_against_models, structural_problems
from .models import ModelRegistry

__all__ = [
    "BridgeRegistry",
    "ModelRegistry",
    "check_against_models",
    "structural_problems",
]
