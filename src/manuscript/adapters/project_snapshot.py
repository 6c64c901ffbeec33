"""Serialized snapshot format for a full project tree."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from manuscript.domain.models import Chapter, Project, Scene
from manuscript.domain.ports import PersistenceError


class SnapshotModel(BaseModel):
    """Base config for snapshot records; text is stored exactly as written."""

    model_config = ConfigDict(extra="forbid")


class SceneSnapshot(SnapshotModel):
    title: str
    content: str = ""


class ChapterSnapshot(SnapshotModel):
    title: str
    scenes: list[SceneSnapshot] = Field(default_factory=list)


class ProjectSnapshot(SnapshotModel):
    """Unversioned project record: ``{title, chapters: [{title, scenes: [...]}]}``."""

    title: str
    chapters: list[ChapterSnapshot] = Field(default_factory=list)


def snapshot_from_project(project: Project) -> ProjectSnapshot:
    return ProjectSnapshot(
        title=project.title,
        chapters=[
            ChapterSnapshot(
                title=chapter.title,
                scenes=[
                    SceneSnapshot(title=scene.title, content=scene.content)
                    for scene in chapter.scenes
                ],
            )
            for chapter in project.chapters
        ],
    )


def project_from_snapshot(snapshot: ProjectSnapshot) -> Project:
    """Build a domain project; node ids are assigned fresh on every load."""
    return Project(
        title=snapshot.title,
        chapters=tuple(
            Chapter(
                title=chapter.title,
                scenes=tuple(
                    Scene(title=scene.title, content=scene.content) for scene in chapter.scenes
                ),
            )
            for chapter in snapshot.chapters
        ),
    )


def encode_project(project: Project) -> str:
    return snapshot_from_project(project).model_dump_json()


def decode_project(payload: str) -> Project:
    """Parse a JSON snapshot, raising PersistenceError when it is unreadable."""
    try:
        snapshot = ProjectSnapshot.model_validate_json(payload)
    except ValidationError as exc:
        raise PersistenceError(f"Stored project snapshot is invalid: {exc}") from exc
    return project_from_snapshot(snapshot)


def load_project_json(path: Path) -> Project:
    """Read a project snapshot file; missing files raise OSError."""
    try:
        payload = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise PersistenceError(f"Project file {path} is not valid UTF-8: {exc}") from exc
    return decode_project(payload)


def save_project_json(path: Path, project: Project) -> None:
    """Write a project snapshot file in indented form."""
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = snapshot_from_project(project).model_dump_json(indent=2)
    path.write_text(payload + "\n", encoding="utf-8")
