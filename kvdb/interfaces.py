from __future__ import annotations

import os
from typing import Any, Protocol, TypeVar, Union

Locator = Union[str, os.PathLike]

S = TypeVar("S", bound="Storage")


class StorageIOError(OSError):
    """Raised by a storage backend when the backing resource cannot be read or written."""


class Storage(Protocol):
    """
    Minimal persistence contract: an in-memory string mapping plus a backing resource.

    Mutations only touch memory; the backing resource is rewritten as a whole
    snapshot on flush().
    """

    @classmethod
    def open(cls: type[S], source: Locator, **options: Any) -> S:
        """Bind to `source`, creating it if absent. Unreadable content starts empty."""
        ...

    def get(self, key: str) -> str | None:
        ...

    def set(self, key: str, value: str) -> None:
        """Raises TypeError or ValueError for entries the backend cannot persist; the mapping is unchanged."""
        ...

    def delete(self, key: str) -> None:
        """Remove `key`; absent keys are a no-op."""
        ...

    def flush(self) -> None:
        """Overwrite the backing resource with the full mapping."""
        ...

    def close(self) -> None:
        """Release the backing resource without flushing."""
        ...
