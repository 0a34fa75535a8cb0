from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import BinaryIO

from .document import StoreDocument, check_entry
from .interfaces import Locator, Storage, StorageIOError
from .paths import ensure_dir, resolve_locator

logger = logging.getLogger(__name__)


def _io_error(exc: OSError, path: Path) -> StorageIOError:
    return StorageIOError(exc.errno, exc.strerror or str(exc), str(path))


class JSONStorage(Storage):
    """
    Keeps the whole mapping in memory and a single JSON file as its durable copy.

    - The file is opened once, read/write, and created if missing.
    - Missing, empty or unparsable content loads as an empty mapping.
    - flush() rewrites the file from offset zero and truncates leftovers.
    """

    def __init__(
        self,
        path: Path,
        handle: BinaryIO,
        data: dict[str, str],
        *,
        fsync: bool = True,
        indent: int | None = None,
        recovered_from_corrupt: bool = False,
    ):
        self._path = path
        self._handle = handle
        self._data = data
        self._fsync = fsync
        self._indent = indent
        self.recovered_from_corrupt = recovered_from_corrupt

    @classmethod
    def open(cls, source: Locator, *, fsync: bool = True, indent: int | None = None) -> "JSONStorage":
        path = resolve_locator(source)
        try:
            ensure_dir(path.parent)
            fd = os.open(path, os.O_RDWR | os.O_CREAT, 0o644)
            handle = os.fdopen(fd, "r+b")
        except OSError as e:
            raise _io_error(e, path) from e

        try:
            raw = handle.read()
        except OSError as e:
            handle.close()
            raise _io_error(e, path) from e

        doc = StoreDocument.from_disk_bytes(raw)
        corrupt = doc is None and bool(raw.strip())
        if corrupt:
            # Load semantics stay the same: the next flush overwrites the bad content.
            logger.warning("KVDB OPEN: %s is not a string-to-string JSON object; starting empty", path)

        return cls(
            path,
            handle,
            dict(doc.root) if doc is not None else {},
            fsync=fsync,
            indent=indent,
            recovered_from_corrupt=corrupt,
        )

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        check_entry(key, value)
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def flush(self) -> None:
        content = StoreDocument.from_mapping(self._data).to_disk_bytes(indent=self._indent)
        try:
            self._handle.seek(0)
            self._handle.write(content)
            self._handle.truncate()
            self._handle.flush()
            if self._fsync:
                os.fsync(self._handle.fileno())
        except ValueError as e:
            # file object already closed
            raise StorageIOError(f"{self._path}: {e}") from e
        except OSError as e:
            raise _io_error(e, self._path) from e
        logger.debug("KVDB FLUSH: wrote %d bytes (%d keys) to %s", len(content), len(self._data), self._path)

    def close(self) -> None:
        self._handle.close()

    def __repr__(self) -> str:
        return f"JSONStorage(path={str(self._path)!r}, keys={len(self._data)})"
