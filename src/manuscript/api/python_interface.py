"""Python-first client for the manuscript editing API."""

from __future__ import annotations

from typing import Any

import httpx

from manuscript.api.contracts import (
    EditorStateResponse,
    InspectorResponse,
    PanelsResponse,
    SceneContentUpdateRequest,
)


class EditorApiClient:
    """Tiny typed API client for Python users."""

    def __init__(
        self, api_base_url: str = "http://127.0.0.1:8000", *, timeout: float = 30.0
    ) -> None:
        """Initialize client with an API base URL."""
        self._api_base_url = api_base_url.rstrip("/")
        self._timeout = timeout

    @property
    def api_base_url(self) -> str:
        """Return normalized API base URL."""
        return self._api_base_url

    def _send(self, method: str, path: str, *, json: dict[str, Any] | None = None) -> Any:
        response = httpx.request(
            method,
            f"{self._api_base_url}{path}",
            json=json,
            timeout=self._timeout,
        )
        response.raise_for_status()
        return response.json()

    def get_state(self) -> EditorStateResponse:
        """Return the full project tree, selection and inspector readout."""
        return EditorStateResponse.model_validate(self._send("GET", "/api/v1/editor"))

    def get_inspector(self) -> InspectorResponse:
        return InspectorResponse.model_validate(self._send("GET", "/api/v1/editor/inspector"))

    def select_chapter(self, chapter_id: str) -> EditorStateResponse:
        payload = self._send("POST", f"/api/v1/editor/chapters/{chapter_id}/select")
        return EditorStateResponse.model_validate(payload)

    def select_scene(self, scene_id: str) -> EditorStateResponse:
        payload = self._send("POST", f"/api/v1/editor/scenes/{scene_id}/select")
        return EditorStateResponse.model_validate(payload)

    def edit_scene_content(self, content: str) -> EditorStateResponse:
        """Replace the active scene's content."""
        request = SceneContentUpdateRequest(content=content)
        payload = self._send(
            "PUT", "/api/v1/editor/scene/content", json=request.model_dump(mode="json")
        )
        return EditorStateResponse.model_validate(payload)

    def add_scene(self) -> EditorStateResponse:
        return EditorStateResponse.model_validate(self._send("POST", "/api/v1/editor/scenes"))

    def delete_scene(self) -> EditorStateResponse:
        payload = self._send("DELETE", "/api/v1/editor/scenes/active")
        return EditorStateResponse.model_validate(payload)

    def add_chapter(self) -> EditorStateResponse:
        return EditorStateResponse.model_validate(self._send("POST", "/api/v1/editor/chapters"))

    def delete_chapter(self) -> EditorStateResponse:
        payload = self._send("DELETE", "/api/v1/editor/chapters/active")
        return EditorStateResponse.model_validate(payload)

    def toggle_binder(self) -> PanelsResponse:
        payload = self._send("POST", "/api/v1/editor/panels/binder/toggle")
        return PanelsResponse.model_validate(payload)

    def toggle_inspector(self) -> PanelsResponse:
        payload = self._send("POST", "/api/v1/editor/panels/inspector/toggle")
        return PanelsResponse.model_validate(payload)
