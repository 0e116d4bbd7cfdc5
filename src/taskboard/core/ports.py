# src/taskboard/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The task store depends on Protocols instead of concrete implementations.
This keeps storage swappable and makes testing easier.
"""

from collections.abc import Callable
from datetime import datetime
from typing import Protocol


class KeyValueStorage(Protocol):
    """
    Local durable key-value storage (string keys, string values).

    Writes replace the whole value for a key; there is no partial update.
    """

    def get_item(self, key: str) -> str | None: ...
    def set_item(self, key: str, value: str) -> None: ...
    def remove_item(self, key: str) -> None: ...


Clock = Callable[[], datetime]
# Source of "now". The store expects timezone-aware datetimes.
