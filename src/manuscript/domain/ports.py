"""Ports for project persistence."""

from __future__ import annotations

from typing import Protocol

from manuscript.domain.models import Project

PROJECT_SNAPSHOT_KEY = "project"


class PersistenceError(RuntimeError):
    """Raised when a project snapshot cannot be read from or written to its store."""


class ProjectRepository(Protocol):
    """Loads and commits full project snapshots under one fixed key."""

    def load(self) -> Project | None:
        ...

    def commit(self, project: Project) -> None:
        ...
