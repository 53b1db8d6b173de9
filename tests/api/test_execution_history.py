"""
Tests for the /execution-history endpoints.
"""

from __future__ import annotations

import pytest

from tests.support import make_entry

URL = "/api/execution-history"


@pytest.fixture
def seeded(runtime):
    history = runtime.history
    history.add_execution(make_entry("a", workflow_id="wf-1", workflow_name="Triage", duration=1000))
    history.add_execution(
        make_entry("b", workflow_id="wf-2", project_path="/p/other", status="failed", duration=3000)
    )
    history.add_execution(make_entry("c", workflow_id="wf-1", workflow_name="Triage"))
    return history


class TestList:
    def test_all(self, client, seeded):
        assert [e["id"] for e in client.get(URL).json()["history"]] == ["c", "b", "a"]

    def test_by_workflow(self, client, seeded):
        history = client.get(URL, params={"workflowId": "wf-1"}).json()["history"]
        assert [e["id"] for e in history] == ["c", "a"]

    def test_by_project(self, client, seeded):
        history = client.get(URL, params={"projectPath": "/p/other"}).json()["history"]
        assert [e["id"] for e in history] == ["b"]

    def test_limit(self, client, seeded):
        history = client.get(URL, params={"limit": 1}).json()["history"]
        assert [e["id"] for e in history] == ["c"]

    def test_empty(self, client):
        assert client.get(URL).json() == {"history": []}


class TestStatistics:
    def test_statistics(self, client, seeded):
        statistics = client.get(f"{URL}/statistics").json()["statistics"]
        assert statistics == {
            "totalExecutions": 3,
            "successfulExecutions": 2,
            "failedExecutions": 1,
            "averageDuration": 2000,
            "mostUsedWorkflow": "Triage",
        }


class TestMutations:
    def test_add(self, client):
        entry = make_entry("exec-1").to_wire()

        response = client.post(URL, json=entry)

        assert response.status_code == 201
        assert response.json()["entry"]["id"] == "exec-1"
        assert [e["id"] for e in client.get(URL).json()["history"]] == ["exec-1"]

    def test_add_invalid(self, client):
        response = client.post(URL, json={"id": "exec-1"})
        assert response.status_code == 400

    def test_patch(self, client, seeded):
        response = client.patch(URL, params={"id": "c"}, json={"status": "failed", "error": "boom"})

        assert response.json() == {"success": True}
        entry = client.get(URL, params={"limit": 1}).json()["history"][0]
        assert entry["status"] == "failed"
        assert entry["error"] == "boom"

    def test_patch_unknown(self, client, seeded):
        response = client.patch(URL, params={"id": "missing"}, json={"status": "failed"})
        assert response.status_code == 404

    def test_patch_requires_id(self, client):
        assert client.patch(URL, json={"status": "failed"}).status_code == 400

    def test_delete_one(self, client, seeded):
        response = client.delete(URL, params={"id": "b"})
        assert response.json() == {"message": "Execution deleted successfully"}
        assert [e["id"] for e in client.get(URL).json()["history"]] == ["c", "a"]

    def test_clear(self, client, seeded):
        response = client.delete(URL)
        assert response.json() == {"message": "All history cleared successfully"}
        assert client.get(URL).json() == {"history": []}

    def test_write_failure_is_500(self, client, runtime, tmp_path):
        blocked = tmp_path / "blocked.json"
        blocked.mkdir()
        runtime.history.store.path = blocked

        response = client.delete(URL)

        assert response.status_code == 500
        assert "Failed to write" in response.json()["error"]
