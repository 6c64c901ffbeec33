"""Document-style key/value persistence for project snapshots in one JSON file."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from manuscript.adapters.project_snapshot import (
    ProjectSnapshot,
    project_from_snapshot,
    snapshot_from_project,
)
from manuscript.domain.models import Project
from manuscript.domain.ports import PROJECT_SNAPSHOT_KEY, PersistenceError

logger = logging.getLogger(__name__)


class JsonFileProjectStore:
    """Keep snapshots as ``{key: snapshot}`` in one JSON document, rewritten whole."""

    def __init__(self, path: Path, *, snapshot_key: str = PROJECT_SNAPSHOT_KEY) -> None:
        self._path = path
        self._snapshot_key = snapshot_key

    @property
    def path(self) -> Path:
        return self._path

    def _read_document(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise PersistenceError(f"Could not read snapshot file {self._path}: {exc}") from exc
        if not isinstance(payload, dict):
            raise PersistenceError(
                f"Invalid snapshot file {self._path}: expected a JSON object."
            )
        return payload

    def load(self) -> Project | None:
        document = self._read_document()
        raw = document.get(self._snapshot_key)
        if raw is None:
            return None
        try:
            snapshot = ProjectSnapshot.model_validate(raw)
        except ValidationError as exc:
            raise PersistenceError(f"Stored project snapshot is invalid: {exc}") from exc
        return project_from_snapshot(snapshot)

    def commit(self, project: Project) -> None:
        """Replace this key's snapshot, keeping any other keys in a readable file."""
        try:
            document = self._read_document()
        except PersistenceError as exc:
            logger.warning("snapshot.commit replacing unreadable document error=%s", exc)
            document = {}
        document[self._snapshot_key] = snapshot_from_project(project).model_dump(mode="json")
        temp_path = self._path.with_name(f"{self._path.name}.tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            temp_path.write_text(json.dumps(document, ensure_ascii=False), encoding="utf-8")
            os.replace(temp_path, self._path)
        except OSError as exc:
            raise PersistenceError(f"Could not write snapshot file {self._path}: {exc}") from exc
        logger.debug("snapshot.commit backend=json-file key=%s", self._snapshot_key)
