"""Domain models and ports for manuscript editing."""

from manuscript.domain.models import (
    Chapter,
    Project,
    Scene,
    default_chapter,
    default_project,
    next_title,
)
from manuscript.domain.ports import PROJECT_SNAPSHOT_KEY, PersistenceError, ProjectRepository

__all__ = [
    "PROJECT_SNAPSHOT_KEY",
    "Chapter",
    "PersistenceError",
    "Project",
    "ProjectRepository",
    "Scene",
    "default_chapter",
    "default_project",
    "next_title",
]
