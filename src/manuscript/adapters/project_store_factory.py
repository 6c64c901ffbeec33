"""Factory for selecting the project snapshot persistence adapter."""

from __future__ import annotations

import os
from pathlib import Path

from manuscript.adapters.json_file_project_store import JsonFileProjectStore
from manuscript.adapters.sqlite_project_store import SQLiteProjectStore
from manuscript.domain.ports import ProjectRepository

DEFAULT_DB_PATH = Path("work/local/manuscript.db")


def resolve_db_path(db_path: Path | None) -> Path:
    """Resolve store path from explicit arg, env var, then default path."""
    if db_path is not None:
        return db_path
    env_value = os.environ.get("MANUSCRIPT_DB_PATH", "").strip()
    if env_value:
        return Path(env_value)
    return DEFAULT_DB_PATH


def create_project_store(*, db_path: Path | None = None) -> ProjectRepository:
    """Build the configured snapshot store backend."""
    effective_path = resolve_db_path(db_path)
    backend = os.environ.get("MANUSCRIPT_STORE_BACKEND", "sqlite").strip().lower()
    if backend in {"", "sqlite"}:
        return SQLiteProjectStore(db_path=effective_path)
    if backend == "json-file":
        return JsonFileProjectStore(path=effective_path.with_suffix(".json"))
    raise RuntimeError(
        "Unsupported MANUSCRIPT_STORE_BACKEND value. Expected sqlite or json-file."
    )
