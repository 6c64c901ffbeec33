from __future__ import annotations

import logging
from pathlib import Path

import pytest

from manuscript.adapters import observability
from manuscript.adapters.json_file_project_store import JsonFileProjectStore
from manuscript.adapters.project_store_factory import (
    DEFAULT_DB_PATH,
    create_project_store,
    resolve_db_path,
)
from manuscript.adapters.sqlite_project_store import SQLiteProjectStore


def test_factory_defaults_to_sqlite_backend(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.delenv("MANUSCRIPT_STORE_BACKEND", raising=False)
    store = create_project_store(db_path=tmp_path / "manuscript.db")
    assert isinstance(store, SQLiteProjectStore)


def test_factory_builds_json_file_backend(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MANUSCRIPT_STORE_BACKEND", "json-file")
    store = create_project_store(db_path=tmp_path / "manuscript.db")
    assert isinstance(store, JsonFileProjectStore)
    assert store.path == tmp_path / "manuscript.json"


def test_factory_rejects_unknown_backend(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MANUSCRIPT_STORE_BACKEND", "redis")
    with pytest.raises(RuntimeError, match="MANUSCRIPT_STORE_BACKEND"):
        create_project_store(db_path=tmp_path / "manuscript.db")


def test_resolve_db_path_prefers_argument_then_env(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.delenv("MANUSCRIPT_DB_PATH", raising=False)
    assert resolve_db_path(None) == DEFAULT_DB_PATH
    monkeypatch.setenv("MANUSCRIPT_DB_PATH", str(tmp_path / "env.db"))
    assert resolve_db_path(None) == tmp_path / "env.db"
    assert resolve_db_path(tmp_path / "arg.db") == tmp_path / "arg.db"


def test_int_env_clamps_and_ignores_invalid_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MANUSCRIPT_LOG_BACKUP_COUNT", "500")
    assert observability.int_env("MANUSCRIPT_LOG_BACKUP_COUNT", 10, minimum=1, maximum=120) == 120
    monkeypatch.setenv("MANUSCRIPT_LOG_BACKUP_COUNT", "many")
    assert observability.int_env("MANUSCRIPT_LOG_BACKUP_COUNT", 10, minimum=1, maximum=120) == 10


def test_configure_runtime_logging_writes_to_configured_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    log_path = tmp_path / "logs" / "manuscript.log"
    monkeypatch.setenv("MANUSCRIPT_LOG_PATH", str(log_path))
    monkeypatch.setenv("MANUSCRIPT_LOG_LEVEL", "debug")
    monkeypatch.setattr(observability, "_CONFIGURED", False)
    root = logging.getLogger()
    previous_handlers = list(root.handlers)
    previous_level = root.level
    try:
        observability.configure_runtime_logging(force=True)
        logging.getLogger("manuscript.test").debug("editor.probe value=%s", 1)
        for handler in root.handlers:
            handler.flush()
        assert root.level == logging.DEBUG
        assert "editor.probe value=1" in log_path.read_text(encoding="utf-8")
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers[:] = previous_handlers
        root.setLevel(previous_level)


def test_logging_settings_read_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MANUSCRIPT_LOG_PATH", str(tmp_path / "editor.log"))
    monkeypatch.setenv("MANUSCRIPT_LOG_LEVEL", "warning")
    monkeypatch.setenv("MANUSCRIPT_ACCESS_LOG_LEVEL", "chatty")
    monkeypatch.setenv("MANUSCRIPT_LOG_MAX_BYTES", "1")

    settings = observability.LoggingSettings.from_env()

    assert settings.log_path == tmp_path / "editor.log"
    assert settings.level == logging.WARNING
    assert settings.access_level == logging.WARNING
    assert settings.max_bytes == 64 * 1024
    assert settings.backup_count == 10
