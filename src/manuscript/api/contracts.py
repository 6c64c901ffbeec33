"""Typed contracts shared by API handlers and Python interfaces."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from manuscript.application.editor import EditOutcome, EditorState
from manuscript.application.inspector import InspectorReadout, read_inspector
from manuscript.application.panels import PanelVisibility
from manuscript.domain.models import Chapter, Scene


class ContractModel(BaseModel):
    """Base model config used by all API contracts."""

    model_config = ConfigDict(extra="forbid")


class SceneResponse(ContractModel):
    scene_id: str
    title: str
    content: str


class ChapterResponse(ContractModel):
    chapter_id: str
    title: str
    scenes: list[SceneResponse] = Field(default_factory=list)


class ProjectResponse(ContractModel):
    title: str
    chapters: list[ChapterResponse] = Field(default_factory=list)


class InspectorResponse(ContractModel):
    """Derived readout for the active chapter and scene."""

    chapter_title: str
    scene_title: str | None = None
    word_count: int = Field(ge=0)


class PanelsResponse(ContractModel):
    binder_open: bool
    inspector_open: bool


class EditorStateResponse(ContractModel):
    """Full editor view after an operation, including whether it was persisted."""

    project: ProjectResponse
    active_chapter_id: str
    active_scene_id: str | None = None
    inspector: InspectorResponse
    panels: PanelsResponse
    persisted: bool = True
    commit_error: str | None = None


class SceneContentUpdateRequest(ContractModel):
    content: str = Field(max_length=2_000_000)


def scene_response(scene: Scene) -> SceneResponse:
    return SceneResponse(scene_id=scene.node_id, title=scene.title, content=scene.content)


def chapter_response(chapter: Chapter) -> ChapterResponse:
    return ChapterResponse(
        chapter_id=chapter.node_id,
        title=chapter.title,
        scenes=[scene_response(scene) for scene in chapter.scenes],
    )


def inspector_response(readout: InspectorReadout) -> InspectorResponse:
    return InspectorResponse(
        chapter_title=readout.chapter_title,
        scene_title=readout.scene_title,
        word_count=readout.word_count,
    )


def panels_response(panels: PanelVisibility) -> PanelsResponse:
    return PanelsResponse(binder_open=panels.binder_open, inspector_open=panels.inspector_open)


def editor_state_response(
    state: EditorState,
    *,
    panels: PanelVisibility,
    commit_error: Exception | None = None,
) -> EditorStateResponse:
    return EditorStateResponse(
        project=ProjectResponse(
            title=state.project.title,
            chapters=[chapter_response(chapter) for chapter in state.project.chapters],
        ),
        active_chapter_id=state.selection.chapter_id,
        active_scene_id=state.selection.scene_id,
        inspector=inspector_response(read_inspector(state)),
        panels=panels_response(panels),
        persisted=commit_error is None,
        commit_error=str(commit_error) if commit_error is not None else None,
    )


def outcome_response(outcome: EditOutcome, *, panels: PanelVisibility) -> EditorStateResponse:
    return editor_state_response(outcome.state, panels=panels, commit_error=outcome.commit_error)
