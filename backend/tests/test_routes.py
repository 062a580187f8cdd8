import pytest
from fastapi.testclient import TestClient

from main import app
from services.artifact_diff import ArtifactDiffService, get_artifact_service


@pytest.fixture
def service(cache):
    return ArtifactDiffService(cache)


@pytest.fixture
def client(service):
    app.dependency_overrides[get_artifact_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_view_flow(client):
    first = client.post("/api/artifacts/s1/diff", json={"file_path": "docs/prd.md", "content": "a\nb"})
    assert first.status_code == 200
    assert first.json()["has_snapshot"] is False

    viewed = client.post("/api/artifacts/s1/viewed", json={"file_path": "docs/prd.md", "content": "a\nb"})
    assert viewed.json() == {"success": True}

    second = client.post(
        "/api/artifacts/s1/diff",
        json={"file_path": "docs/prd.md", "content": "a\nc", "context_lines": 0},
    )
    body = second.json()
    assert body["has_snapshot"] is True
    assert body["identical"] is False
    assert body["summary"] == {"additions": 1, "deletions": 1, "unchanged": 1}
    assert len(body["blocks"]) == 1
    assert [c["kind"] for c in body["blocks"][0]["changes"]] == ["delete", "add"]


def test_diff_rejects_negative_context(client):
    response = client.post(
        "/api/artifacts/s1/diff",
        json={"file_path": "docs/prd.md", "content": "a", "context_lines": -1},
    )
    assert response.status_code == 422


def test_compare(client):
    response = client.post(
        "/api/artifacts/compare",
        json={"old_content": "Line 1\nLine 2", "new_content": "Line 1\nLine 2\nLine 3"},
    )
    body = response.json()

    assert body["identical"] is False
    assert body["summary"] == {"additions": 1, "deletions": 0, "unchanged": 2}
    assert body["blocks"][0]["start_line"] == 1
    assert body["blocks"][0]["end_line"] == 3
    assert body["hidden_lines"] == [0]


def test_compare_identical(client):
    response = client.post("/api/artifacts/compare", json={"old_content": "x", "new_content": "x"})
    body = response.json()

    assert body["identical"] is True
    assert body["blocks"] == []
    assert body["summary"]["unchanged"] == 1


def test_cache_entry_and_clear(client, service):
    service.mark_viewed("s1", "docs/a.md", "v1")

    found = client.get("/api/cache/s1/entry", params={"file_path": "docs/a.md"})
    assert found.status_code == 200
    assert found.json()["content"] == "v1"

    cleared = client.delete("/api/cache/s1", params={"file_path": "docs/a.md"})
    assert cleared.status_code == 200

    missing = client.get("/api/cache/s1/entry", params={"file_path": "docs/a.md"})
    assert missing.status_code == 404


def test_cache_stats_and_clear_all(client, service):
    service.mark_viewed("s1", "a.md", "1")
    service.mark_viewed("s1", "b.md", "1")
    service.mark_viewed("s2", "a.md", "2")

    stats = client.get("/api/cache/s1/stats").json()
    assert stats["total_entries"] == 3
    assert stats["session_entries"] == 2
    assert stats["estimated_bytes"] > 0

    client.delete("/api/cache/s1")
    assert client.get("/api/cache/s1/stats").json()["total_entries"] == 1

    client.delete("/api/cache")
    assert client.get("/api/cache/s2/stats").json()["total_entries"] == 0
