"""
Name: HTTP Endpoint Tests

Responsibilities:
  - Upload, list, detail and delete of projects
  - Outline generation (JSON and SSE) and episode scripts
  - RFC7807 error mapping (404/409/422/503) and request id propagation

Notes:
  - FAKE_LLM=1 (conftest): no network, deterministic responses.
  - Composition-root caches are cleared around every test.
"""

from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from shortdrama.api.main import app
from shortdrama.application.outline_builder import OutlineBuilder
from shortdrama.application.script_builder import ScriptBuilder
from shortdrama.application.usecases import (
    GenerateEpisodeScriptUseCase,
    GenerateOutlineUseCase,
    MSG_SCRIPT_FAILED,
)
from shortdrama.container import (
    get_generate_episode_script_use_case,
    get_generate_outline_use_case,
    get_project_repository,
)
from shortdrama.crosscutting.exceptions import LLMError
from shortdrama.infrastructure.text import NovelChunker

pytestmark = pytest.mark.unit

NOVEL = "第一章 少年上山拜师。\n第二章 师父传授剑法。\n第三章 少年下山历练。"


@pytest.fixture
def client(reset_container):
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _upload(client, *, name="剑心.txt", content=NOVEL.encode("utf-8"), episode_count=3):
    return client.post(
        "/v1/projects",
        files={"file": (name, content, "text/plain")},
        data={"episode_count": str(episode_count)},
    )


def _failing_llm() -> MagicMock:
    llm = MagicMock()
    llm.generate = AsyncMock(side_effect=LLMError("upstream down"))
    return llm


class TestHealth:
    def test_healthz(self, client):
        response = client.get("/healthz")

        assert response.status_code == 200
        assert response.json()["ok"] is True
        assert response.headers["X-Request-Id"]

    def test_request_id_is_echoed(self, client):
        response = client.get("/healthz", headers={"X-Request-Id": "req-123"})

        assert response.headers["X-Request-Id"] == "req-123"
        assert response.json()["request_id"] == "req-123"


class TestProjects:
    def test_upload_creates_project(self, client):
        response = _upload(client)

        assert response.status_code == 201
        body = response.json()
        assert body["title"] == "剑心"
        assert body["episode_count"] == 3
        assert body["novel_chars"] == len(NOVEL)
        assert body["has_outline"] is False

    def test_upload_rejects_non_txt(self, client):
        response = _upload(client, name="novel.docx")

        assert response.status_code == 422
        assert response.headers["content-type"].startswith("application/problem+json")
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_upload_rejects_empty_file(self, client):
        response = _upload(client, content=b"   ")

        assert response.status_code == 422

    def test_upload_rejects_episode_count_out_of_range(self, client):
        response = _upload(client, episode_count=0)

        assert response.status_code == 422

    def test_list_get_and_delete(self, client):
        project_id = _upload(client).json()["id"]

        listed = client.get("/v1/projects").json()["projects"]
        assert [p["id"] for p in listed] == [project_id]

        detail = client.get(f"/v1/projects/{project_id}")
        assert detail.status_code == 200
        assert detail.json()["outline"] == []

        assert client.delete(f"/v1/projects/{project_id}").status_code == 204
        assert client.get(f"/v1/projects/{project_id}").status_code == 404
        assert client.delete(f"/v1/projects/{project_id}").status_code == 404

    def test_unknown_project_is_problem_json(self, client):
        response = client.get(f"/v1/projects/{uuid4()}")

        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"


class TestOutline:
    def test_generate_outline(self, client):
        project_id = _upload(client).json()["id"]

        response = client.post(f"/v1/projects/{project_id}/outline")

        assert response.status_code == 200
        outline = response.json()["outline"]
        assert [e["episode_number"] for e in outline] == [1, 2, 3]
        detail = client.get(f"/v1/projects/{project_id}").json()
        assert detail["has_outline"] is True
        assert len(detail["outline"]) == 3

    def test_outline_for_unknown_project(self, client):
        response = client.post(f"/v1/projects/{uuid4()}/outline")

        assert response.status_code == 404

    def test_outline_stream(self, client):
        project_id = _upload(client).json()["id"]

        response = client.get(f"/v1/projects/{project_id}/outline/stream")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")
        assert "event: status" in response.text
        assert "event: done" in response.text
        assert '"episode_number": 3' in response.text

    def test_outline_upstream_failure_is_503(self, client, summary_prompt, outline_prompt):
        project_id = _upload(client).json()["id"]
        builder = OutlineBuilder(
            _failing_llm(),
            summary_prompt=summary_prompt,
            outline_prompt=outline_prompt,
            chunker=NovelChunker(),
        )
        app.dependency_overrides[get_generate_outline_use_case] = (
            lambda: GenerateOutlineUseCase(get_project_repository(), builder)
        )

        response = client.post(f"/v1/projects/{project_id}/outline")

        assert response.status_code == 503
        assert response.json()["code"] == "SERVICE_UNAVAILABLE"


class TestScripts:
    def test_script_requires_outline(self, client):
        project_id = _upload(client).json()["id"]

        response = client.post(f"/v1/projects/{project_id}/episodes/1/script")

        assert response.status_code == 409
        assert response.json()["code"] == "CONFLICT"

    def test_generate_and_fetch_script(self, client):
        project_id = _upload(client).json()["id"]
        client.post(f"/v1/projects/{project_id}/outline")

        created = client.post(f"/v1/projects/{project_id}/episodes/2/script")
        fetched = client.get(f"/v1/projects/{project_id}/episodes/2/script")

        assert created.status_code == 200
        assert created.json()["status"] == "ready"
        assert fetched.json()["content"] == created.json()["content"]

    def test_unknown_episode(self, client):
        project_id = _upload(client).json()["id"]
        client.post(f"/v1/projects/{project_id}/outline")

        assert client.post(f"/v1/projects/{project_id}/episodes/99/script").status_code == 404
        assert client.post(f"/v1/projects/{project_id}/episodes/0/script").status_code == 422

    def test_script_not_generated_yet(self, client):
        project_id = _upload(client).json()["id"]

        response = client.get(f"/v1/projects/{project_id}/episodes/1/script")

        assert response.status_code == 404

    def test_upstream_failure_returns_failed_script(self, client, script_prompt):
        project_id = _upload(client).json()["id"]
        client.post(f"/v1/projects/{project_id}/outline")
        builder = ScriptBuilder(_failing_llm(), prompt=script_prompt)
        app.dependency_overrides[get_generate_episode_script_use_case] = (
            lambda: GenerateEpisodeScriptUseCase(get_project_repository(), builder)
        )

        response = client.post(f"/v1/projects/{project_id}/episodes/1/script")

        assert response.status_code == 200
        assert response.json()["status"] == "failed"
        assert response.json()["content"] == MSG_SCRIPT_FAILED
