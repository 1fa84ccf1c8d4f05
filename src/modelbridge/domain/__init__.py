"""Adapter-free translation engine: models, bridges, translation and pipelines."""

from __future__ import annotations
