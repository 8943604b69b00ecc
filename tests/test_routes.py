from __future__ import annotations

import httpx
import pytest
from fastapi.testclient import TestClient

from settlesmart.agent.normalizer import DEGRADED_NOTE
from settlesmart.api.main import app
from settlesmart.api.routes import completion_client
from settlesmart.config import get_completion_config, get_settings
from settlesmart.llm import client as client_module
from settlesmart.llm.errors import ConfigurationError, TransportError, UpstreamError

from conftest import FakeCompletionClient


BODY = {
    "phase": "after",
    "origin": "India",
    "destination": "United States",
    "visaType": "work",
    "anchorDate": "2026-09-01",
}


def _client_with(fake) -> TestClient:
    app.dependency_overrides[completion_client] = lambda: fake
    return TestClient(app)


def teardown_function() -> None:
    app.dependency_overrides.clear()


def test_health() -> None:
    response = TestClient(app).get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_plan_success_returns_camel_case_plan(sample_plan_json: str) -> None:
    client = _client_with(FakeCompletionClient(sample_plan_json))

    response = client.post("/api/plan", json=BODY)

    assert response.status_code == 200
    data = response.json()
    assert set(data) == {"weeks", "countryNotes"}
    first = data["weeks"][0]["items"][0]
    assert first["id"] == "w1-t1"
    assert first["daysOffset"] == 0


def test_plan_degrades_instead_of_failing() -> None:
    client = _client_with(FakeCompletionClient("not json"))

    response = client.post("/api/plan", json=BODY)

    assert response.status_code == 200
    assert response.json() == {"weeks": [], "countryNotes": DEGRADED_NOTE}


def test_plan_accepts_empty_body() -> None:
    fake = FakeCompletionClient('{"weeks": [], "countryNotes": ""}')
    client = _client_with(fake)

    response = client.post("/api/plan", json={})

    assert response.status_code == 200
    assert "Phase: after" in fake.calls[0].user


def test_missing_credentials_is_reported_without_network() -> None:
    def missing_key():
        raise ConfigurationError("OpenAI API key not configured")

    app.dependency_overrides[completion_client] = missing_key
    response = TestClient(app).post("/api/plan", json=BODY)

    assert response.status_code == 500
    assert response.json() == {"error": "Server is missing OpenAI API key."}


def test_upstream_error_is_generic() -> None:
    fake = FakeCompletionClient(error=UpstreamError(401, "invalid api key sk-live-123"))
    response = _client_with(fake).post("/api/plan", json=BODY)

    assert response.status_code == 500
    assert response.json() == {"error": "OpenAI error from backend."}
    assert "sk-live" not in response.text


def test_transport_error_is_generic() -> None:
    fake = FakeCompletionClient(error=TransportError("timed out"))
    response = _client_with(fake).post("/api/plan", json=BODY)

    assert response.status_code == 500
    assert set(response.json()) == {"error"}


def test_checklist_progress_endpoint() -> None:
    plan = {
        "weeks": [
            {"title": "Week 1", "items": [
                {"id": "w1-t1", "label": "a", "daysOffset": 0},
                {"id": "w1-t2", "label": "b", "daysOffset": 1},
                {"id": "w1-t3", "label": "c", "daysOffset": 2},
            ]},
        ],
        "countryNotes": "",
    }
    response = TestClient(app).post(
        "/api/checklist/progress",
        json={"plan": plan, "completed": {"w1-t1": True, "w1-t3": True}},
    )
    assert response.status_code == 200
    assert response.json() == {"doneCount": 2, "totalCount": 3, "percent": 67}


def test_checklist_progress_empty_plan() -> None:
    response = TestClient(app).post("/api/checklist/progress", json={"plan": {"weeks": []}})
    assert response.json() == {"doneCount": 0, "totalCount": 0, "percent": 0}


def test_unexpected_error_keeps_error_body_shape() -> None:
    fake = FakeCompletionClient(error=RuntimeError("adapter bug"))
    app.dependency_overrides[completion_client] = lambda: fake
    # Starlette re-raises after running the catch-all handler unless told not to
    client = TestClient(app, raise_server_exceptions=False)

    response = client.post("/api/plan", json=BODY)

    assert response.status_code == 500
    assert response.json() == {"error": "Unexpected server error."}
    assert "adapter bug" not in response.text


def test_unexpected_error_in_dependency_keeps_error_body_shape() -> None:
    def broken_client():
        raise ValueError("invalid base url")

    app.dependency_overrides[completion_client] = broken_client
    response = TestClient(app, raise_server_exceptions=False).post("/api/plan", json=BODY)

    assert response.status_code == 500
    assert response.json() == {"error": "Unexpected server error."}


@pytest.fixture
def missing_key(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "")
    monkeypatch.setattr(client_module, "_client", None)
    get_settings.cache_clear()
    get_completion_config.cache_clear()
    yield
    get_settings.cache_clear()
    get_completion_config.cache_clear()


def test_missing_key_through_real_dependency(missing_key, monkeypatch) -> None:
    sent = []

    async def record(self, request, **kwargs):
        sent.append(request)
        raise AssertionError("no request expected")

    monkeypatch.setattr(httpx.AsyncClient, "send", record)
    client = TestClient(app)

    for _ in range(2):
        response = client.post("/api/plan", json=BODY)
        assert response.status_code == 500
        assert response.json() == {"error": "Server is missing OpenAI API key."}

    assert sent == []
    assert client_module._client is None
