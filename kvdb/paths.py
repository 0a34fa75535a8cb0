from __future__ import annotations

import os
from pathlib import Path


def ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def resolve_locator(source: str | os.PathLike[str]) -> Path:
    # "~/data/kv.json" style locators come straight from env vars
    return Path(source).expanduser()
