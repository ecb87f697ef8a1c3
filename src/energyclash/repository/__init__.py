"""Persistence adapters for Energy Clash."""

from .json_store import JsonViewportRepository

__all__ = ["JsonViewportRepository"]
