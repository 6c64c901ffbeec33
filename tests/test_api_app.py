from __future__ import annotations

from pathlib import Path
from typing import Any

from conftest import MemoryRepository
from fastapi.testclient import TestClient

from manuscript.api.app import create_app


def _client(repository: MemoryRepository) -> TestClient:
    return TestClient(create_app(repository=repository))


def _chapter_titles(payload: dict[str, Any]) -> list[str]:
    return [chapter["title"] for chapter in payload["project"]["chapters"]]


def test_health_endpoint_returns_ok_payload(memory_repository: MemoryRepository) -> None:
    client = _client(memory_repository)
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "manuscript"}


def test_api_root_lists_editor_endpoints(memory_repository: MemoryRepository) -> None:
    client = _client(memory_repository)
    payload = client.get("/api/v1").json()
    assert "/api/v1/editor" in payload["endpoints"]
    openapi = client.get("/openapi.json").json()
    assert openapi["info"]["title"] == "manuscript API"


def test_editor_state_starts_from_default_project(memory_repository: MemoryRepository) -> None:
    client = _client(memory_repository)
    payload = client.get("/api/v1/editor").json()

    assert payload["project"]["title"] == "New Project"
    assert _chapter_titles(payload) == ["Chapter 1"]
    chapter = payload["project"]["chapters"][0]
    assert payload["active_chapter_id"] == chapter["chapter_id"]
    assert payload["active_scene_id"] == chapter["scenes"][0]["scene_id"]
    assert payload["inspector"] == {
        "chapter_title": "Chapter 1",
        "scene_title": "Scene 1",
        "word_count": 1,
    }
    assert payload["panels"] == {"binder_open": True, "inspector_open": False}
    assert payload["persisted"] is True


def test_chapter_and_scene_operations_round_trip(memory_repository: MemoryRepository) -> None:
    client = _client(memory_repository)

    added = client.post("/api/v1/editor/chapters")
    assert added.status_code == 201
    assert _chapter_titles(added.json()) == ["Chapter 1", "Chapter 2"]

    first_id = added.json()["project"]["chapters"][0]["chapter_id"]
    selected = client.post(f"/api/v1/editor/chapters/{first_id}/select")
    assert selected.status_code == 200
    assert selected.json()["inspector"]["chapter_title"] == "Chapter 1"

    scene = client.post("/api/v1/editor/scenes")
    assert scene.status_code == 201
    assert scene.json()["inspector"]["scene_title"] == "Scene 3"

    second_scene_id = scene.json()["project"]["chapters"][0]["scenes"][1]["scene_id"]
    client.post(f"/api/v1/editor/scenes/{second_scene_id}/select")
    edited = client.put("/api/v1/editor/scene/content", json={"content": "one two three"})
    assert edited.status_code == 200
    body = edited.json()
    assert body["inspector"]["word_count"] == 3
    assert body["project"]["chapters"][0]["scenes"][1]["content"] == "one two three"

    deleted_scene = client.delete("/api/v1/editor/scenes/active")
    titles = [s["title"] for s in deleted_scene.json()["project"]["chapters"][0]["scenes"]]
    assert titles == ["Scene 1", "Scene 3"]
    assert deleted_scene.json()["inspector"]["scene_title"] == "Scene 1"

    deleted_chapter = client.delete("/api/v1/editor/chapters/active")
    assert _chapter_titles(deleted_chapter.json()) == ["Chapter 2"]
    assert memory_repository.stored is not None
    assert [c.title for c in memory_repository.stored.chapters] == ["Chapter 2"]


def test_unknown_ids_return_404(memory_repository: MemoryRepository) -> None:
    client = _client(memory_repository)
    assert client.post("/api/v1/editor/chapters/missing/select").status_code == 404
    response = client.post("/api/v1/editor/scenes/missing/select")
    assert response.status_code == 404
    assert "missing" in response.json()["detail"]


def test_editing_without_active_scene_is_rejected(memory_repository: MemoryRepository) -> None:
    client = _client(memory_repository)
    client.post("/api/v1/editor/chapters")
    emptied = client.delete("/api/v1/editor/scenes/active").json()
    assert emptied["active_scene_id"] is None
    assert emptied["inspector"]["word_count"] == 0

    response = client.put("/api/v1/editor/scene/content", json={"content": "lost"})
    assert response.status_code == 409


def test_deleting_last_chapter_reinstates_default(memory_repository: MemoryRepository) -> None:
    client = _client(memory_repository)
    payload = client.delete("/api/v1/editor/chapters/active").json()
    assert _chapter_titles(payload) == ["Chapter 1"]
    assert [s["title"] for s in payload["project"]["chapters"][0]["scenes"]] == ["Scene 1"]


def test_commit_failures_are_reported(memory_repository: MemoryRepository) -> None:
    client = _client(memory_repository)
    memory_repository.fail_commits = True

    payload = client.post("/api/v1/editor/chapters").json()

    assert payload["persisted"] is False
    assert "offline" in payload["commit_error"]
    assert _chapter_titles(payload) == ["Chapter 1", "Chapter 2"]
    state = client.get("/api/v1/editor").json()
    assert state["persisted"] is False


def test_panel_toggles_are_not_persisted(memory_repository: MemoryRepository) -> None:
    client = _client(memory_repository)
    commits = memory_repository.commits

    inspector = client.post("/api/v1/editor/panels/inspector/toggle").json()
    binder = client.post("/api/v1/editor/panels/binder/toggle").json()

    assert inspector == {"binder_open": True, "inspector_open": True}
    assert binder == {"binder_open": False, "inspector_open": True}
    assert memory_repository.commits == commits
    assert client.get("/api/v1/editor").json()["panels"] == binder


def test_inspector_endpoint(memory_repository: MemoryRepository) -> None:
    client = _client(memory_repository)
    client.put("/api/v1/editor/scene/content", json={"content": "  "})
    assert client.get("/api/v1/editor/inspector").json() == {
        "chapter_title": "Chapter 1",
        "scene_title": "Scene 1",
        "word_count": 3,
    }


def test_app_persists_to_sqlite_store_by_path(tmp_path: Path) -> None:
    db_path = tmp_path / "manuscript.db"
    client = TestClient(create_app(db_path=db_path))
    client.put("/api/v1/editor/scene/content", json={"content": "saved"})

    reopened = TestClient(create_app(db_path=db_path)).get("/api/v1/editor").json()
    assert reopened["project"]["chapters"][0]["scenes"][0]["content"] == "saved"


def test_app_starts_from_default_project_when_store_is_damaged(tmp_path: Path) -> None:
    db_path = tmp_path / "manuscript.db"
    db_path.write_bytes(b"garbage" * 200)
    app = create_app(db_path=db_path)
    assert app.state.editor.startup_error is not None

    client = TestClient(app)
    payload = client.get("/api/v1/editor").json()
    assert payload["project"]["title"] == "New Project"
    added = client.post("/api/v1/editor/chapters").json()
    assert added["persisted"] is False
    assert "unavailable" in added["commit_error"]
