"""Adapters implementing domain ports."""

from __future__ import annotations
