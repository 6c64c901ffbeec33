"""SQLite-backed key/value persistence for project snapshots."""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from manuscript.adapters.project_snapshot import decode_project, encode_project
from manuscript.domain.models import Project
from manuscript.domain.ports import PROJECT_SNAPSHOT_KEY, PersistenceError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredSnapshot:
    """Raw stored snapshot row."""

    snapshot_key: str
    payload_json: str
    updated_at_utc: str


class SQLiteProjectStore:
    """Persist the full project snapshot as one row under a fixed key."""

    def __init__(self, db_path: Path, *, snapshot_key: str = PROJECT_SNAPSHOT_KEY) -> None:
        self._db_path = db_path
        self._snapshot_key = snapshot_key
        self._schema_ready = False

    @property
    def snapshot_key(self) -> str:
        return self._snapshot_key

    def _connect(self) -> sqlite3.Connection:
        connection = sqlite3.connect(str(self._db_path))
        connection.row_factory = sqlite3.Row
        return connection

    def _initialize_schema(self) -> None:
        with self._connect() as connection:
            connection.execute(
                """
                CREATE TABLE IF NOT EXISTS snapshots (
                    snapshot_key TEXT PRIMARY KEY,
                    payload_json TEXT NOT NULL,
                    updated_at_utc TEXT NOT NULL
                )
                """
            )

    def _ensure_schema(self) -> None:
        """Create the table on first use so a damaged file surfaces through load/commit."""
        if self._schema_ready:
            return
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            self._initialize_schema()
        except (OSError, sqlite3.Error) as exc:
            raise PersistenceError(
                f"Snapshot store unavailable at {self._db_path}: {exc}"
            ) from exc
        self._schema_ready = True

    def get_snapshot(self) -> StoredSnapshot | None:
        """Load the raw snapshot row for this store's key."""
        self._ensure_schema()
        try:
            with self._connect() as connection:
                row = connection.execute(
                    """
                    SELECT snapshot_key, payload_json, updated_at_utc
                    FROM snapshots
                    WHERE snapshot_key = ?
                    """,
                    (self._snapshot_key,),
                ).fetchone()
        except sqlite3.Error as exc:
            raise PersistenceError(f"Could not read project snapshot: {exc}") from exc
        if row is None:
            return None
        return StoredSnapshot(
            snapshot_key=str(row["snapshot_key"]),
            payload_json=str(row["payload_json"]),
            updated_at_utc=str(row["updated_at_utc"]),
        )

    def load(self) -> Project | None:
        snapshot = self.get_snapshot()
        if snapshot is None:
            return None
        return decode_project(snapshot.payload_json)

    def commit(self, project: Project) -> None:
        """Replace the stored snapshot with ``project``."""
        self._ensure_schema()
        payload = encode_project(project)
        now = datetime.now(UTC).isoformat()
        try:
            with self._connect() as connection:
                connection.execute(
                    """
                    INSERT INTO snapshots (snapshot_key, payload_json, updated_at_utc)
                    VALUES (?, ?, ?)
                    ON CONFLICT(snapshot_key) DO UPDATE SET
                        payload_json = excluded.payload_json,
                        updated_at_utc = excluded.updated_at_utc
                    """,
                    (self._snapshot_key, payload, now),
                )
        except sqlite3.Error as exc:
            raise PersistenceError(f"Could not write project snapshot: {exc}") from exc
        logger.debug(
            "snapshot.commit backend=sqlite key=%s bytes=%s", self._snapshot_key, len(payload)
        )
