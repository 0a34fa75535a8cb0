from __future__ import annotations

import importlib
from pathlib import Path
import sys


import pytest


# Ensure the repository root (parent of ./tests) is importable during pytest collection.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "kv.json"


@pytest.fixture
def kv_env(monkeypatch: pytest.MonkeyPatch, db_path: Path) -> Path:
    """
    Point the configured database at a temp file so tests never touch real ./data.
    """
    monkeypatch.setenv("KVDB_PATH", str(db_path))
    monkeypatch.setenv("KVDB_BACKEND", "json")
    monkeypatch.setenv("KVDB_FSYNC", "false")
    monkeypatch.delenv("KVDB_JSON_INDENT", raising=False)
    return db_path


@pytest.fixture
def reload_endpoints(kv_env: Path) -> None:
    """
    Endpoints read settings and build the MCP server at import time; reload after sandboxing env.
    """
    import endpoints.kv_endpoints as kv_endpoints
    import endpoints.mcp_endpoints as mcp_endpoints

    importlib.reload(kv_endpoints)
    importlib.reload(mcp_endpoints)


@pytest.fixture
def bound_database(reload_endpoints, kv_env: Path):
    from endpoints.state import bind_database, unbind_database
    from kvdb import open_database

    db = open_database(kv_env, fsync=False)
    bind_database(db)
    try:
        yield db
    finally:
        unbind_database()
        db.close()
