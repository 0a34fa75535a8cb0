from __future__ import annotations

import logging
from types import TracebackType
from typing import Any, Generic, TypeVar

from .interfaces import Locator, Storage, StorageIOError
from .json_storage import JSONStorage
from .memory_storage import MemoryStorage
from .settings import Settings

logger = logging.getLogger(__name__)

S = TypeVar("S", bound=Storage)

STORAGE_BACKENDS: dict[str, type[Storage]] = {
    "json": JSONStorage,
    "memory": MemoryStorage,
}


class Database(Generic[S]):
    """
    Caller-facing handle that owns exactly one storage backend.

    All operations forward to the backend. The handle's lifetime ends through
    close(), leaving a `with` block, or garbage collection; whichever comes
    first flushes the backend exactly once and then closes it.
    """

    def __init__(self, storage: S):
        self._storage = storage
        self._closed = False

    @property
    def storage(self) -> S:
        return self._storage

    @property
    def closed(self) -> bool:
        return self._closed

    def _check_open(self) -> None:
        if self._closed:
            raise ValueError("operation on closed database")

    def get(self, key: str) -> str | None:
        self._check_open()
        return self._storage.get(key)

    def set(self, key: str, value: str) -> None:
        self._check_open()
        self._storage.set(key, value)

    def delete(self, key: str) -> None:
        self._check_open()
        self._storage.delete(key)

    def flush(self) -> None:
        self._check_open()
        self._storage.flush()

    def close(self) -> None:
        """Flush and release the backend. Raises StorageIOError if the final flush fails."""
        if self._closed:
            return
        # Marked first so a failing flush is never retried by __del__.
        self._closed = True
        try:
            self._storage.flush()
        finally:
            self._storage.close()

    def __enter__(self) -> "Database[S]":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def __del__(self) -> None:
        if getattr(self, "_closed", True):
            return
        try:
            self.close()
        except StorageIOError:
            # No caller is left to receive the error; the interpreter reports it via sys.unraisablehook.
            logger.critical("KVDB CLOSE: final flush failed for %r; unsaved changes are lost", self._storage)
            raise

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"<Database {state} storage={self._storage!r}>"


def open_database(source: Locator, storage: type[S] = JSONStorage, **options: Any) -> Database[S]:  # type: ignore[assignment]
    """Open `storage` bound to `source` and wrap it in a Database handle."""
    backend = storage.open(source, **options)
    logger.info("KVDB OPEN: %r", backend)
    return Database(backend)


def open_configured_database(settings: Settings) -> Database[Storage]:
    storage = STORAGE_BACKENDS.get(settings.backend)
    if storage is None:
        raise ValueError(
            f"Unknown KVDB_BACKEND {settings.backend!r}; expected one of {sorted(STORAGE_BACKENDS)}"
        )
    options: dict[str, Any] = {}
    if storage is JSONStorage:
        options = {"fsync": settings.fsync, "indent": settings.json_indent}
    return open_database(settings.db_path, storage, **options)
