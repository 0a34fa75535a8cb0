from __future__ import annotations

from kvdb import Database

_DATABASE: Database | None = None


def bind_database(db: Database) -> None:
    """Make `db` the process-wide handle used by the HTTP and MCP endpoints."""
    global _DATABASE
    if _DATABASE is not None and _DATABASE is not db:
        raise RuntimeError("A database is already bound; unbind it first")
    _DATABASE = db


def unbind_database() -> None:
    global _DATABASE
    _DATABASE = None


def get_database() -> Database:
    if _DATABASE is None:
        raise RuntimeError("No database bound; is the app lifespan running?")
    return _DATABASE
