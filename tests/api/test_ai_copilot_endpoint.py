"""
Test suite for the AI copilot endpoint.

Tests POST /api/ai/copilot with FastAPI TestClient and a stubbed model
factory: success, missing keys, timeout and processing errors.

System role: Verification of the copilot HTTP API
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from langchain_core.language_models.fake_chat_models import FakeListChatModel

from afribac_ai.api.deps import get_model_factory
from afribac_ai.main import create_app
from conftest import RecordingChatModel, StubModelFactory, make_provider_settings


class FailingChatModel(FakeListChatModel):
    """Chat model whose calls always fail."""

    def _call(self, messages, stop=None, run_manager=None, **kwargs):
        raise RuntimeError("provider unavailable")


@pytest.fixture
def app() -> FastAPI:
    """Create FastAPI application with the real routers."""
    return create_app()


def _client(app: FastAPI, factory: StubModelFactory) -> TestClient:
    app.dependency_overrides[get_model_factory] = lambda: factory
    return TestClient(app)


class TestAICopilotEndpoint:
    """Test suite for POST /api/ai/copilot."""

    def test_copilot_should_return_completion(self, app: FastAPI, gemini_settings) -> None:
        """Test a successful completion returns text, provider and model."""
        # Arrange
        client = _client(app, StubModelFactory(gemini_settings, RecordingChatModel(responses=[" est long."])))

        # Act
        response = client.post("/api/ai/copilot", json={"prompt": "Le Niger"})

        # Assert
        assert response.status_code == 200
        assert response.json() == {"text": " est long.", "provider": "gemini", "model": "gemini-2.0-flash"}

    def test_copilot_without_keys_should_return_401(self, app: FastAPI, no_key_settings) -> None:
        """Test no provider key answers 401 with an error message."""
        # Arrange
        client = _client(app, StubModelFactory(no_key_settings, RecordingChatModel(responses=["x"])))

        # Act
        response = client.post("/api/ai/copilot", json={"prompt": "Le Niger"})

        # Assert
        assert response.status_code == 401
        assert "error" in response.json()

    def test_copilot_timeout_should_return_408(self, app: FastAPI) -> None:
        """Test a completion slower than the timeout answers 408."""
        # Arrange
        settings = make_provider_settings(copilot_timeout_seconds=0.05)
        model = RecordingChatModel(responses=["lent"], sleep=0.5)
        client = _client(app, StubModelFactory(settings, model))

        # Act
        response = client.post("/api/ai/copilot", json={"prompt": "Le Niger"})

        # Assert
        assert response.status_code == 408

    def test_copilot_model_failure_should_return_500(self, app: FastAPI, gemini_settings) -> None:
        """Test a model error answers 500 without leaking details."""
        # Arrange
        client = _client(app, StubModelFactory(gemini_settings, FailingChatModel(responses=["x"])))

        # Act
        response = client.post("/api/ai/copilot", json={"prompt": "Le Niger"})

        # Assert
        assert response.status_code == 500
        assert response.json() == {"error": "Failed to process AI request"}

    def test_copilot_should_reject_missing_prompt(self, app: FastAPI, gemini_settings) -> None:
        """Test request validation rejects a body without prompt."""
        # Arrange
        client = _client(app, StubModelFactory(gemini_settings, RecordingChatModel(responses=["x"])))

        # Act
        response = client.post("/api/ai/copilot", json={"system": "Complète."})

        # Assert
        assert response.status_code == 422
