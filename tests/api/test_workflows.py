"""
Tests for POST /workflows/validate.
"""

from __future__ import annotations

URL = "/api/workflows/validate"


class TestValidateEndpoint:
    def test_valid_graph(self, client):
        body = {
            "nodes": [
                {"id": "start", "type": "startNode", "position": {"x": 0, "y": 0}},
                {"id": "a", "type": "agentNode", "data": {"agent": {"name": "Planner"}}},
                {"id": "orphan", "data": {"serviceName": "Slack"}},
            ],
            "edges": [{"id": "e1", "source": "start", "target": "a"}],
        }

        payload = client.post(URL, json=body).json()

        assert payload["validation"]["valid"] is True
        assert payload["validation"]["errors"] == []
        assert {
            "type": "warning",
            "message": 'Node "Slack" is not connected to any other nodes.',
            "nodeId": "orphan",
        } in payload["validation"]["warnings"]
        assert payload["reachable"] == ["a", "start"]
        assert payload["unreachable"] == ["orphan"]

    def test_empty_graph(self, client):
        payload = client.post(URL, json={"nodes": [], "edges": []}).json()
        assert payload["validation"] == {
            "valid": False,
            "errors": [
                {"type": "error", "message": "Workflow is empty. Add at least one agent or service."}
            ],
            "warnings": [],
        }

    def test_malformed_edge(self, client):
        response = client.post(URL, json={"nodes": [{"id": "start"}], "edges": [{"source": "start"}]})
        assert response.status_code == 400
