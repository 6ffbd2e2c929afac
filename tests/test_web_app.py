"""Tests for the command server."""

import inspect
import threading
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from src.config.connection_service import ConnectionTester
from src.config.settings import RuntimeSettings
from src.models.endpoint_config import EndpointConfiguration
from src.models.enums import ErrorKind, ServiceType
from src.models.results import ConnectionResult, EndpointError, Model, ModelListResult
from src.web.app import WebApp


@pytest.fixture
def model_lister():
    lister = AsyncMock()
    lister.get_models.return_value = ModelListResult.success([
        Model(id="llava:13b", object="model"),
        Model(id="qwen2.5vl:7b", object="model"),
    ])
    return lister


@pytest.fixture
def web_app(tmp_path, config_service, model_lister):
    settings = RuntimeSettings(data_dir=str(tmp_path / "data"), log_level="WARNING")
    return WebApp(
        settings=settings,
        config_service=config_service,
        connection_tester=ConnectionTester(timeout=2.0),
        model_lister=model_lister
    )


@pytest.fixture
def client(web_app):
    return TestClient(web_app.app, raise_server_exceptions=False)


class TestConfigRoutes:
    """Reading and writing the stored configuration."""

    def test_get_default_config(self, client):
        response = client.get("/api/config")

        assert response.status_code == 200
        data = response.json()
        assert data["api_base_url"] == "http://127.0.0.1:11434/v1"
        assert data["has_api_key"] is False
        assert data["api_key"] == ""

    def test_update_masks_key(self, client, config_service):
        """The stored key is never sent back in clear."""
        response = client.put("/api/config", json={
            "api_base_url": "https://api.openai.com/v1",
            "api_key": "sk-abcdefghijklmnop",
            "service_type": "openai"
        })

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Configuration saved successfully."
        assert data["config"]["api_key"] != "sk-abcdefghijklmnop"
        assert data["config"]["has_api_key"] is True
        assert config_service.get_config().api_key == "sk-abcdefghijklmnop"

        assert "sk-abcdefghijklmnop" not in client.get("/api/config").text

    def test_update_without_key_keeps_stored_key(self, client, config_service):
        client.put("/api/config", json={"api_key": "sk-abcdefghijklmnop"})

        response = client.put("/api/config", json={"prompt": "Only the formula."})

        assert response.status_code == 200
        assert config_service.get_config().api_key == "sk-abcdefghijklmnop"
        assert config_service.get_config().prompt == "Only the formula."

    def test_invalid_update_is_rejected(self, client, config_service):
        """Validation failures come back per field and nothing is stored."""
        response = client.put("/api/config", json={"api_base_url": "localhost:11434"})

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "validation_failed"
        assert "api_base_url" in error["fields"]
        assert not config_service.config_path.exists()

    def test_wrong_body_type_is_rejected(self, client):
        response = client.put("/api/config", json={"sound_enabled": "maybe"})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "invalid_request"
        assert "sound_enabled" in response.json()["error"]["fields"]


class TestConnectionRoute:
    """Connection tests through the command server."""

    def test_override_with_invalid_url(self, client):
        """Unsaved values are tested without touching the stored ones."""
        response = client.post("/api/test-connection", json={"base_url": "not a url"})

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is False
        assert data["error"]["kind"] == "invalid_configuration"
        assert data["status_code"] is None

    def test_stored_endpoint_without_body(self, client, web_app):
        """Without a body the stored configuration is tested."""
        tester = AsyncMock()
        tester.test_connection.return_value = ConnectionResult.create_ok("Connection successful (HTTP 200).", 200, 12)
        web_app.connection_tester = tester

        response = client.post("/api/test-connection")

        assert response.status_code == 200
        assert response.json()["success"] is True
        config = tester.test_connection.call_args.args[0]
        assert isinstance(config, EndpointConfiguration)
        assert config.base_url == "http://127.0.0.1:11434/v1"


class TestModelRoutes:
    """Model listing and selection."""

    def test_list_models_of_stored_endpoint(self, client, model_lister):
        response = client.get("/api/models")

        assert response.status_code == 200
        data = response.json()
        assert data["ok"] is True
        assert [model["id"] for model in data["models"]] == ["llava:13b", "qwen2.5vl:7b"]
        assert data["error"] is None

    def test_list_models_with_override(self, client, model_lister):
        response = client.post("/api/models", json={
            "base_url": "https://openrouter.ai/api/v1",
            "api_key": "sk-or-123",
            "service_type": "openrouter"
        })

        assert response.status_code == 200
        config = model_lister.get_models.call_args.args[0]
        assert config.base_url == "https://openrouter.ai/api/v1"
        assert config.api_key == "sk-or-123"
        assert config.service_type == ServiceType.OPENROUTER

    def test_list_models_failure(self, client, model_lister):
        model_lister.get_models.return_value = ModelListResult.failure(
            EndpointError(kind=ErrorKind.AUTHENTICATION_ERROR, message="Authentication failed", status_code=401)
        )

        data = client.get("/api/models").json()

        assert data["ok"] is False
        assert data["models"] == []
        assert data["error"] == {
            "kind": "authentication_error",
            "message": "Authentication failed",
            "status_code": 401
        }

    def test_select_model(self, client, config_service):
        response = client.post("/api/models/select", json={"model_id": "qwen2.5vl:7b"})

        assert response.status_code == 200
        assert response.json()["config"]["model"] == "qwen2.5vl:7b"
        assert config_service.get_config().model == "qwen2.5vl:7b"

    def test_select_empty_model_is_rejected(self, client):
        response = client.post("/api/models/select", json={"model_id": ""})

        assert response.status_code == 400

    def test_select_blank_model_keeps_stored_model(self, client, config_service):
        """Whitespace is not a model id and leaves the stored choice alone."""
        client.post("/api/models/select", json={"model_id": "llava:13b"})

        response = client.post("/api/models/select", json={"model_id": "   "})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "invalid_request"
        assert config_service.get_config().model == "llava:13b"


class TestBlockingIO:
    """File access stays off the event loop."""

    @pytest.mark.parametrize("path", ["/api/config", "/api/models/select"])
    def test_store_routes_are_sync(self, web_app, path):
        endpoints = [route.endpoint for route in web_app.app.routes if getattr(route, "path", None) == path]

        assert endpoints
        assert not any(inspect.iscoroutinefunction(endpoint) for endpoint in endpoints)

    def test_stored_endpoint_is_read_in_worker_thread(self, client, web_app, model_lister):
        threads = {}
        load_config = web_app.config_service.load_config

        def recording_load_config():
            threads["load_config"] = threading.get_ident()
            return load_config()

        async def recording_get_models(config):
            threads["event_loop"] = threading.get_ident()
            return ModelListResult.success([])

        web_app.config_service.load_config = recording_load_config
        model_lister.get_models.side_effect = recording_get_models

        response = client.get("/api/models")

        assert response.status_code == 200
        assert threads["load_config"] != threads["event_loop"]


class TestServerErrors:
    """Fallback handlers."""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "alive"

    def test_unknown_route(self, client):
        response = client.get("/api/unknown")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "http_error"
        assert response.json()["error"]["timestamp"].endswith("+00:00")

    def test_unexpected_exception(self, client, model_lister):
        model_lister.get_models.side_effect = RuntimeError("boom")

        response = client.get("/api/models")

        assert response.status_code == 500
        error = response.json()["error"]
        assert error["code"] == "internal_error"
        assert error["error_id"]
        assert "boom" not in response.text
