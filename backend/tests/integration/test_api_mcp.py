"""
Integration tests for the MCP HTTP endpoint.

These tests go through the FastAPI app with the vision service mocked.
"""

import json

import pytest

from food_analyzer.errors import ExternalServiceError


class TestCORS:
    """Tests for preflight and CORS headers."""

    @pytest.mark.integration
    def test_options_preflight(self, client, mock_vision):
        """OPTIONS should return an empty body with CORS headers."""
        response = client.options("/")

        assert response.status_code == 204
        assert response.content == b""
        assert response.headers["Access-Control-Allow-Origin"] == "*"
        assert response.headers["Access-Control-Allow-Methods"] == "POST, GET, OPTIONS"
        assert response.headers["Access-Control-Allow-Headers"] == "Content-Type"
        mock_vision.analyze.assert_not_awaited()

    @pytest.mark.integration
    def test_options_any_path(self, client):
        response = client.options("/mcp", headers={"Origin": "https://agent.example"})

        assert response.status_code == 204
        assert response.headers["Access-Control-Allow-Origin"] == "*"

    @pytest.mark.integration
    def test_post_has_cors_and_json(self, client, jsonrpc):
        response = client.post("/", json=jsonrpc("initialize"))

        assert response.headers["Access-Control-Allow-Origin"] == "*"
        assert response.headers["Content-Type"].startswith("application/json")


class TestMCPOverHTTP:
    """Tests for JSON-RPC requests."""

    @pytest.mark.integration
    def test_initialize(self, client, jsonrpc):
        response = client.post("/", json=jsonrpc("initialize", {"capabilities": {}}))

        assert response.status_code == 200
        data = response.json()
        assert data["jsonrpc"] == "2.0"
        assert data["id"] == 1
        assert data["result"]["protocolVersion"] == "2024-11-05"
        assert data["result"]["capabilities"] == {"tools": {}}

    @pytest.mark.integration
    def test_any_path_accepted(self, client, jsonrpc):
        response = client.post("/mcp", json=jsonrpc("tools/list"))

        assert response.status_code == 200
        assert response.json()["result"]["tools"][0]["name"] == "analyze_food_image"

    @pytest.mark.integration
    def test_post_to_health_path_is_mcp(self, client, jsonrpc):
        response = client.post("/health", json=jsonrpc("tools/list"))

        assert response.status_code == 200
        assert len(response.json()["result"]["tools"]) == 1

    @pytest.mark.integration
    @pytest.mark.parametrize("method", ["PUT", "PATCH", "DELETE"])
    def test_other_methods_accepted(self, client, jsonrpc, method):
        response = client.request(method, "/", json=jsonrpc("tools/list"))

        assert response.status_code == 200
        assert len(response.json()["result"]["tools"]) == 1
        assert response.headers["Access-Control-Allow-Origin"] == "*"

    @pytest.mark.integration
    def test_get_without_body(self, client):
        """A bodyless GET off the info routes fails the JSON read, not method routing."""
        response = client.get("/mcp")

        assert response.status_code == 500
        assert response.json()["error"] == "Internal server error"

    @pytest.mark.integration
    def test_get_root_still_info(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert "analyze_food_image" in response.json()["tools"]

    @pytest.mark.integration
    def test_wrong_version(self, client):
        response = client.post("/", json={"jsonrpc": "1.0", "id": 3, "method": "tools/list"})

        assert response.status_code == 200
        assert response.json()["error"]["code"] == -32600

    @pytest.mark.integration
    def test_tool_call_success(self, client, jsonrpc, sample_nutrition_record, sample_image_url):
        response = client.post("/", json=jsonrpc("tools/call", {
            "name": "analyze_food_image",
            "arguments": {"imageUrl": sample_image_url},
        }, id="req-9"))

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == "req-9"
        assert data["result"]["isError"] is False
        assert json.loads(data["result"]["content"][0]["text"]) == sample_nutrition_record

    @pytest.mark.integration
    def test_tool_call_failure_is_200(self, client, jsonrpc, mock_vision):
        mock_vision.analyze.side_effect = ExternalServiceError("No content in OpenAI response")

        response = client.post("/", json=jsonrpc("tools/call", {
            "name": "analyze_food_image",
            "arguments": {"imageUrl": "https://example.com/a.jpg"},
        }))

        assert response.status_code == 200
        data = response.json()
        assert "error" not in data
        assert data["result"]["isError"] is True
        assert data["result"]["content"][0]["text"] == "Error analyzing food: No content in OpenAI response"

    @pytest.mark.integration
    def test_missing_image_url_is_200(self, client, jsonrpc):
        response = client.post("/", json=jsonrpc("tools/call", {"name": "analyze_food_image", "arguments": {}}))

        assert response.status_code == 200
        assert response.json()["error"] == {
            "code": -32602,
            "message": "Invalid params: imageUrl is required",
        }

    @pytest.mark.integration
    def test_unknown_method(self, client, jsonrpc):
        response = client.post("/", json=jsonrpc("foo/bar"))

        assert response.status_code == 200
        assert response.json()["error"]["code"] == -32601
        assert "foo/bar" in response.json()["error"]["message"]


class TestLegacyRequests:
    """Tests for {"image": ...} requests without a JSON-RPC envelope."""

    @pytest.mark.integration
    def test_legacy_image(self, client, mock_vision, sample_nutrition_record, sample_image_url):
        response = client.post("/", json={"image": sample_image_url})

        assert response.status_code == 200
        assert response.json() == sample_nutrition_record
        mock_vision.analyze.assert_awaited_once_with(sample_image_url)

    @pytest.mark.integration
    @pytest.mark.parametrize("extra", [{"method": "analyze"}, {"jsonrpc": "1.0"}, {"id": 3}])
    def test_legacy_image_with_extra_keys(self, client, mock_vision, sample_nutrition_record, sample_image_url, extra):
        """Only a 2.0 envelope takes priority over an image field."""
        response = client.post("/", json={"image": sample_image_url, **extra})

        assert response.status_code == 200
        assert response.json() == sample_nutrition_record
        mock_vision.analyze.assert_awaited_once_with(sample_image_url)

    @pytest.mark.integration
    def test_jsonrpc_2_with_image_is_mcp(self, client, mock_vision, sample_image_url):
        response = client.post("/", json={"jsonrpc": "2.0", "id": 1, "method": "tools/list", "image": sample_image_url})

        assert response.status_code == 200
        assert response.json()["result"]["tools"][0]["name"] == "analyze_food_image"
        mock_vision.analyze.assert_not_awaited()

    @pytest.mark.integration
    def test_legacy_failure_is_500(self, client, mock_vision):
        mock_vision.analyze.side_effect = ExternalServiceError("OpenAI API error: 401")

        response = client.post("/", json={"image": "https://example.com/a.jpg"})

        assert response.status_code == 500
        assert response.json() == {
            "error": "Internal server error",
            "message": "OpenAI API error: 401",
        }
        assert response.headers["Access-Control-Allow-Origin"] == "*"

    @pytest.mark.integration
    @pytest.mark.parametrize("body", [{}, {"image": ""}, {"picture": "x"}, [1, 2], "text", 42])
    def test_invalid_format(self, client, mock_vision, body):
        response = client.post("/", json=body)

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid request format"}
        mock_vision.analyze.assert_not_awaited()


class TestMalformedBodies:
    """Tests for bodies that are not JSON."""

    @pytest.mark.integration
    def test_invalid_json(self, client):
        response = client.post(
            "/",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 500
        data = response.json()
        assert data["error"] == "Internal server error"
        assert data["message"]

    @pytest.mark.integration
    def test_empty_body(self, client):
        response = client.post("/")

        assert response.status_code == 500
        assert response.json()["error"] == "Internal server error"
