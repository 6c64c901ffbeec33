"""Read-only inspector readout for the active selection."""

from __future__ import annotations

from dataclasses import dataclass

from manuscript.application.editor import EditorState


def word_count(content: str) -> int:
    """Count fragments of ``content`` split on single spaces.

    Splitting keeps empty fragments, so ``""`` counts as 1 and two spaces
    count as 3.
    """
    return len(content.split(" "))


@dataclass(frozen=True)
class InspectorReadout:
    chapter_title: str
    scene_title: str | None
    word_count: int


def read_inspector(state: EditorState) -> InspectorReadout:
    scene = state.active_scene
    if scene is None:
        return InspectorReadout(
            chapter_title=state.active_chapter.title,
            scene_title=None,
            word_count=0,
        )
    return InspectorReadout(
        chapter_title=state.active_chapter.title,
        scene_title=scene.title,
        word_count=word_count(scene.content),
    )
