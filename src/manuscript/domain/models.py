"""Core manuscript domain models."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from uuid import uuid4

DEFAULT_PROJECT_TITLE = "New Project"
CHAPTER_TITLE_PREFIX = "Chapter"
SCENE_TITLE_PREFIX = "Scene"


def new_node_id() -> str:
    return uuid4().hex


@dataclass(frozen=True)
class Scene:
    """A leaf unit of editable text inside a chapter."""

    title: str
    content: str = ""
    node_id: str = field(default_factory=new_node_id, compare=False)

    def with_content(self, content: str) -> Scene:
        return replace(self, content=content)


@dataclass(frozen=True)
class Chapter:
    """An ordered container of scenes."""

    title: str
    scenes: tuple[Scene, ...] = ()
    node_id: str = field(default_factory=new_node_id, compare=False)

    def find_scene(self, scene_id: str) -> Scene | None:
        for scene in self.scenes:
            if scene.node_id == scene_id:
                return scene
        return None

    def first_scene(self) -> Scene | None:
        return self.scenes[0] if self.scenes else None

    def with_scenes(self, scenes: Iterable[Scene]) -> Chapter:
        return replace(self, scenes=tuple(scenes))

    def replace_scene(self, scene: Scene) -> Chapter:
        return self.with_scenes(
            scene if existing.node_id == scene.node_id else existing for existing in self.scenes
        )

    def without_scene(self, scene_id: str) -> Chapter:
        return self.with_scenes(scene for scene in self.scenes if scene.node_id != scene_id)


@dataclass(frozen=True)
class Project:
    """Root document: an ordered list of chapters.

    Node ids do not take part in equality, so two projects compare equal when
    their titles, contents and ordering match.
    """

    title: str
    chapters: tuple[Chapter, ...] = ()

    def find_chapter(self, chapter_id: str) -> Chapter | None:
        for chapter in self.chapters:
            if chapter.node_id == chapter_id:
                return chapter
        return None

    def first_chapter(self) -> Chapter | None:
        return self.chapters[0] if self.chapters else None

    def with_chapters(self, chapters: Iterable[Chapter]) -> Project:
        return replace(self, chapters=tuple(chapters))

    def replace_chapter(self, chapter: Chapter) -> Project:
        return self.with_chapters(
            chapter if existing.node_id == chapter.node_id else existing
            for existing in self.chapters
        )

    def without_chapter(self, chapter_id: str) -> Project:
        return self.with_chapters(
            chapter for chapter in self.chapters if chapter.node_id != chapter_id
        )


def next_title(prefix: str, existing_titles: Iterable[str]) -> str:
    """Return ``"<prefix> <n>"`` for the sibling count plus one, skipping taken titles."""
    titles = list(existing_titles)
    taken = set(titles)
    number = len(titles) + 1
    candidate = f"{prefix} {number}"
    while candidate in taken:
        number += 1
        candidate = f"{prefix} {number}"
    return candidate


def default_chapter(title: str = f"{CHAPTER_TITLE_PREFIX} 1") -> Chapter:
    return Chapter(title=title, scenes=(Scene(title=f"{SCENE_TITLE_PREFIX} 1"),))


def default_project() -> Project:
    return Project(
        title=DEFAULT_PROJECT_TITLE,
        chapters=(
            Chapter(
                title=f"{CHAPTER_TITLE_PREFIX} 1",
                scenes=(
                    Scene(title=f"{SCENE_TITLE_PREFIX} 1"),
                    Scene(title=f"{SCENE_TITLE_PREFIX} 2"),
                ),
            ),
        ),
    )
