from __future__ import annotations

from typing import Any

from .document import check_entry
from .interfaces import Locator, Storage


class MemoryStorage(Storage):
    """Storage that never touches disk; flush() is a no-op."""

    def __init__(self, source: Locator | None = None):
        self.source = source
        self._data: dict[str, str] = {}

    @classmethod
    def open(cls, source: Locator, **options: Any) -> "MemoryStorage":
        return cls(source)

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        check_entry(key, value)
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def flush(self) -> None:
        return None

    def close(self) -> None:
        return None

    def __repr__(self) -> str:
        return f"MemoryStorage(source={self.source!r}, keys={len(self._data)})"
