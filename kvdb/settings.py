from __future__ import annotations

import os
from dataclasses import dataclass


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str) -> int | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


@dataclass(frozen=True)
class Settings:
    # Storage
    db_path: str
    backend: str
    fsync: bool
    json_indent: int | None

    # Debug / logging
    debug_log_requests: bool
    log_level: str


def get_settings() -> Settings:
    db_path = os.getenv("KVDB_PATH", "data/kvdb.json")
    backend = os.getenv("KVDB_BACKEND", "json").strip().lower()

    # fsync on every flush unless explicitly disabled (e.g. tmpfs test runs).
    fsync = _env_bool("KVDB_FSYNC", True)
    json_indent = _env_int("KVDB_JSON_INDENT")

    debug_log_requests = _env_bool("DEBUG_LOG_REQUESTS", False)
    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()

    return Settings(
        db_path=db_path,
        backend=backend,
        fsync=fsync,
        json_indent=json_indent,
        debug_log_requests=debug_log_requests,
        log_level=log_level,
    )
