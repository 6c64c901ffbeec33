"""Document model controller that owns the project tree and the active selection."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass

from manuscript.domain.models import (
    CHAPTER_TITLE_PREFIX,
    SCENE_TITLE_PREFIX,
    Chapter,
    Project,
    Scene,
    default_chapter,
    default_project,
    next_title,
)
from manuscript.domain.ports import PersistenceError, ProjectRepository

logger = logging.getLogger(__name__)


class UnknownNodeError(LookupError):
    """Raised when a select operation names a chapter or scene that is not present."""


@dataclass(frozen=True)
class Selection:
    """Non-owning pointers to the active chapter and scene, by node id."""

    chapter_id: str
    scene_id: str | None = None


@dataclass(frozen=True)
class EditorState:
    """One consistent (project, selection) pair."""

    project: Project
    selection: Selection

    @property
    def active_chapter(self) -> Chapter:
        chapter = self.project.find_chapter(self.selection.chapter_id)
        if chapter is None:
            raise RuntimeError("Active chapter is missing from the project tree.")
        return chapter

    @property
    def active_scene(self) -> Scene | None:
        if self.selection.scene_id is None:
            return None
        return self.active_chapter.find_scene(self.selection.scene_id)


@dataclass(frozen=True)
class EditOutcome:
    """Result of one editor operation and its commit."""

    state: EditorState
    commit_error: PersistenceError | None = None

    @property
    def persisted(self) -> bool:
        return self.commit_error is None


Transform = Callable[[EditorState], tuple[Project, Selection]]


def _selection_for(chapter: Chapter) -> Selection:
    first = chapter.first_scene()
    return Selection(chapter_id=chapter.node_id, scene_id=first.node_id if first else None)


def reconcile(project: Project, selection: Selection | None) -> EditorState:
    """Return a state whose selection points at nodes present in ``project``.

    A project without chapters gets a default chapter reinstated. A missing
    chapter falls back to the first chapter; a missing scene falls back to the
    active chapter's first scene, or none when the chapter is empty.
    """
    if not project.chapters:
        project = project.with_chapters((default_chapter(),))
    chapter = project.find_chapter(selection.chapter_id) if selection is not None else None
    if chapter is None:
        return EditorState(project=project, selection=_selection_for(project.chapters[0]))
    scene = None
    if selection is not None and selection.scene_id is not None:
        scene = chapter.find_scene(selection.scene_id)
    if scene is None:
        return EditorState(project=project, selection=_selection_for(chapter))
    return EditorState(
        project=project,
        selection=Selection(chapter_id=chapter.node_id, scene_id=scene.node_id),
    )


class DocumentEditor:
    """Owns the single authoritative project tree for an editing session.

    Every operation builds a new immutable tree from the current one, swaps the
    re-derived (project, selection) pair in under one lock, then commits the
    full snapshot through the repository. Commit failures are reported on the
    returned outcome; the in-memory tree stays authoritative either way.
    """

    def __init__(
        self,
        repository: ProjectRepository,
        project: Project,
        *,
        startup_error: PersistenceError | None = None,
    ) -> None:
        self._repository = repository
        self._lock = threading.RLock()
        self._state = reconcile(project, None)
        self._last_commit_error: PersistenceError | None = None
        self._startup_error = startup_error

    @classmethod
    def open(cls, repository: ProjectRepository) -> DocumentEditor:
        """Start a session from the stored snapshot, or from the default project."""
        try:
            loaded = repository.load()
        except PersistenceError as exc:
            logger.warning("editor.open load failed error=%s; using default project", exc)
            return cls(repository, default_project(), startup_error=exc)

        if loaded is None:
            logger.info("editor.open source=default")
            editor = cls(repository, default_project())
            editor._commit("open")
            return editor

        editor = cls(repository, loaded)
        logger.info("editor.open source=store chapters=%s", len(loaded.chapters))
        if not loaded.chapters:
            logger.info("editor.open reinstated default chapter")
            editor._commit("open")
        return editor

    @property
    def state(self) -> EditorState:
        return self._state

    @property
    def project(self) -> Project:
        return self._state.project

    @property
    def active_chapter(self) -> Chapter:
        return self._state.active_chapter

    @property
    def active_scene(self) -> Scene | None:
        return self._state.active_scene

    @property
    def last_commit_error(self) -> PersistenceError | None:
        return self._last_commit_error

    @property
    def startup_error(self) -> PersistenceError | None:
        return self._startup_error

    def select_chapter(self, chapter_id: str) -> EditOutcome:
        """Activate a chapter and its first scene."""

        def transform(state: EditorState) -> tuple[Project, Selection]:
            chapter = state.project.find_chapter(chapter_id)
            if chapter is None:
                raise UnknownNodeError(f"Chapter '{chapter_id}' is not in the project.")
            return state.project, _selection_for(chapter)

        return self._apply("select_chapter", transform)

    def select_scene(self, scene_id: str) -> EditOutcome:
        """Activate a scene of the active chapter."""

        def transform(state: EditorState) -> tuple[Project, Selection]:
            chapter = state.active_chapter
            if chapter.find_scene(scene_id) is None:
                raise UnknownNodeError(
                    f"Scene '{scene_id}' is not in chapter '{chapter.title}'."
                )
            return state.project, Selection(chapter_id=chapter.node_id, scene_id=scene_id)

        return self._apply("select_scene", transform)

    def edit_scene_content(self, content: str) -> EditOutcome:
        """Replace the active scene's content; a no-op when no scene is active."""

        def transform(state: EditorState) -> tuple[Project, Selection]:
            scene = state.active_scene
            if scene is None:
                logger.debug("editor.edit_scene_content skipped reason=no-active-scene")
                return state.project, state.selection
            chapter = state.active_chapter.replace_scene(scene.with_content(content))
            return state.project.replace_chapter(chapter), state.selection

        return self._apply("edit_scene_content", transform)

    def add_scene(self) -> EditOutcome:
        def transform(state: EditorState) -> tuple[Project, Selection]:
            chapter = state.active_chapter
            titles = (existing.title for existing in chapter.scenes)
            scene = Scene(title=next_title(SCENE_TITLE_PREFIX, titles))
            updated = chapter.with_scenes((*chapter.scenes, scene))
            return (
                state.project.replace_chapter(updated),
                Selection(chapter_id=updated.node_id, scene_id=scene.node_id),
            )

        return self._apply("add_scene", transform)

    def delete_scene(self) -> EditOutcome:
        def transform(state: EditorState) -> tuple[Project, Selection]:
            scene = state.active_scene
            if scene is None:
                return state.project, state.selection
            updated = state.active_chapter.without_scene(scene.node_id)
            return state.project.replace_chapter(updated), _selection_for(updated)

        return self._apply("delete_scene", transform)

    def add_chapter(self) -> EditOutcome:
        def transform(state: EditorState) -> tuple[Project, Selection]:
            titles = (chapter.title for chapter in state.project.chapters)
            chapter = default_chapter(next_title(CHAPTER_TITLE_PREFIX, titles))
            project = state.project.with_chapters((*state.project.chapters, chapter))
            return project, _selection_for(chapter)

        return self._apply("add_chapter", transform)

    def delete_chapter(self) -> EditOutcome:
        """Remove the active chapter; removing the last one reinstates a default chapter."""

        def transform(state: EditorState) -> tuple[Project, Selection]:
            project = state.project.without_chapter(state.selection.chapter_id)
            if not project.chapters:
                project = project.with_chapters((default_chapter(),))
            return project, _selection_for(project.chapters[0])

        return self._apply("delete_chapter", transform)

    def _apply(self, operation: str, transform: Transform) -> EditOutcome:
        with self._lock:
            project, selection = transform(self._state)
            self._state = reconcile(project, selection)
            logger.debug(
                "editor.%s chapter=%s scene=%s",
                operation,
                self._state.selection.chapter_id,
                self._state.selection.scene_id,
            )
            return self._commit(operation)

    def _commit(self, operation: str) -> EditOutcome:
        with self._lock:
            state = self._state
            try:
                self._repository.commit(state.project)
            except PersistenceError as exc:
                logger.warning("editor.commit failed operation=%s error=%s", operation, exc)
                self._last_commit_error = exc
                return EditOutcome(state=state, commit_error=exc)
            self._last_commit_error = None
            return EditOutcome(state=state)
