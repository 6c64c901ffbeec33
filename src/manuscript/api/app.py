"""FastAPI local application exposing the manuscript editing operations."""

from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Literal

from fastapi import FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from manuscript.adapters.project_store_factory import create_project_store
from manuscript.api.contracts import (
    EditorStateResponse,
    InspectorResponse,
    PanelsResponse,
    SceneContentUpdateRequest,
    editor_state_response,
    inspector_response,
    outcome_response,
    panels_response,
)
from manuscript.application.editor import DocumentEditor, EditOutcome, UnknownNodeError
from manuscript.application.inspector import read_inspector
from manuscript.application.panels import PanelVisibility
from manuscript.domain.ports import ProjectRepository

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Simple health payload used by probes."""

    status: Literal["ok"] = "ok"
    service: str = "manuscript"


class ApiRootResponse(BaseModel):
    """Describes currently available API capabilities."""

    name: str = "manuscript"
    persistence: Literal["snapshot"] = "snapshot"
    endpoints: list[str] = Field(
        default_factory=lambda: [
            "/healthz",
            "/api/v1",
            "/api/v1/editor",
            "/api/v1/editor/inspector",
            "/api/v1/editor/chapters",
            "/api/v1/editor/chapters/active",
            "/api/v1/editor/chapters/{chapter_id}/select",
            "/api/v1/editor/scenes",
            "/api/v1/editor/scenes/active",
            "/api/v1/editor/scenes/{scene_id}/select",
            "/api/v1/editor/scene/content",
            "/api/v1/editor/panels/binder/toggle",
            "/api/v1/editor/panels/inspector/toggle",
        ]
    )


def _cors_origins() -> list[str]:
    raw = os.environ.get("MANUSCRIPT_CORS_ORIGINS", "").strip()
    if raw:
        return [origin.strip() for origin in raw.split(",") if origin.strip()]
    return [
        "http://127.0.0.1:5173",
        "http://localhost:5173",
    ]


def create_app(
    db_path: Path | None = None,
    *,
    repository: ProjectRepository | None = None,
) -> FastAPI:
    """Create the API application around one editing session."""
    store = repository if repository is not None else create_project_store(db_path=db_path)
    editor = DocumentEditor.open(store)
    panels = PanelVisibility()

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        chapters = len(editor.project.chapters)
        logger.info("editor.session start chapters=%s", chapters)
        if editor.startup_error is not None:
            logger.warning(
                "editor.session started from default project error=%s", editor.startup_error
            )
        yield

    app = FastAPI(
        title="manuscript API",
        version="0.1.0",
        description="Local API for chapter and scene editing with snapshot persistence.",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "system", "description": "Service health and runtime metadata."},
            {"name": "api", "description": "API discovery and root-level capability listing."},
            {"name": "editor", "description": "Project tree, selection and content editing."},
            {"name": "panels", "description": "Binder and inspector panel visibility."},
        ],
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins(),
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.editor = editor
    app.state.panels = panels

    def respond(outcome: EditOutcome) -> EditorStateResponse:
        return outcome_response(outcome, panels=panels)

    @app.get("/healthz", response_model=HealthResponse, tags=["system"])
    def healthz() -> HealthResponse:
        return HealthResponse()

    @app.get("/api/v1", response_model=ApiRootResponse, tags=["api"])
    def api_root() -> ApiRootResponse:
        return ApiRootResponse()

    @app.get("/api/v1/editor", response_model=EditorStateResponse, tags=["editor"])
    def get_editor_state() -> EditorStateResponse:
        return editor_state_response(
            editor.state, panels=panels, commit_error=editor.last_commit_error
        )

    @app.get("/api/v1/editor/inspector", response_model=InspectorResponse, tags=["editor"])
    def get_inspector() -> InspectorResponse:
        return inspector_response(read_inspector(editor.state))

    @app.post(
        "/api/v1/editor/chapters",
        response_model=EditorStateResponse,
        status_code=status.HTTP_201_CREATED,
        tags=["editor"],
    )
    def add_chapter() -> EditorStateResponse:
        return respond(editor.add_chapter())

    @app.delete(
        "/api/v1/editor/chapters/active", response_model=EditorStateResponse, tags=["editor"]
    )
    def delete_chapter() -> EditorStateResponse:
        return respond(editor.delete_chapter())

    @app.post(
        "/api/v1/editor/chapters/{chapter_id}/select",
        response_model=EditorStateResponse,
        tags=["editor"],
    )
    def select_chapter(chapter_id: str) -> EditorStateResponse:
        try:
            outcome = editor.select_chapter(chapter_id)
        except UnknownNodeError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
        return respond(outcome)

    @app.post(
        "/api/v1/editor/scenes",
        response_model=EditorStateResponse,
        status_code=status.HTTP_201_CREATED,
        tags=["editor"],
    )
    def add_scene() -> EditorStateResponse:
        return respond(editor.add_scene())

    @app.delete(
        "/api/v1/editor/scenes/active", response_model=EditorStateResponse, tags=["editor"]
    )
    def delete_scene() -> EditorStateResponse:
        return respond(editor.delete_scene())

    @app.post(
        "/api/v1/editor/scenes/{scene_id}/select",
        response_model=EditorStateResponse,
        tags=["editor"],
    )
    def select_scene(scene_id: str) -> EditorStateResponse:
        try:
            outcome = editor.select_scene(scene_id)
        except UnknownNodeError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
        return respond(outcome)

    @app.put("/api/v1/editor/scene/content", response_model=EditorStateResponse, tags=["editor"])
    def edit_scene_content(payload: SceneContentUpdateRequest) -> EditorStateResponse:
        if editor.active_scene is None:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="No active scene to edit.",
            )
        return respond(editor.edit_scene_content(payload.content))

    @app.post(
        "/api/v1/editor/panels/binder/toggle", response_model=PanelsResponse, tags=["panels"]
    )
    def toggle_binder() -> PanelsResponse:
        panels.toggle_binder()
        return panels_response(panels)

    @app.post(
        "/api/v1/editor/panels/inspector/toggle", response_model=PanelsResponse, tags=["panels"]
    )
    def toggle_inspector() -> PanelsResponse:
        panels.toggle_inspector()
        return panels_response(panels)

    return app
