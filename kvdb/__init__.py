from __future__ import annotations

from .database import STORAGE_BACKENDS, Database, open_configured_database, open_database
from .interfaces import Storage, StorageIOError
from .json_storage import JSONStorage
from .memory_storage import MemoryStorage

__all__ = [
    "Database",
    "open_database",
    "open_configured_database",
    "STORAGE_BACKENDS",
    "Storage",
    "StorageIOError",
    "JSONStorage",
    "MemoryStorage",
]
