from types import SimpleNamespace

from fastapi.testclient import TestClient

from app.api.routes import health as health_routes
from app.generation.errors import ModelCallError
from app.main import app


def _settings(*, google_api_key: str = "test-key") -> SimpleNamespace:
    return SimpleNamespace(
        google_api_key=google_api_key,
        gemini_model="gemini-1.5-flash",
        generation_timeout_seconds=300.0,
    )


class _PingModel:
    def __init__(self, *, text: str = "Hello!", error: Exception | None = None) -> None:
        self._text = text
        self._error = error

    async def ping(self) -> str:
        if self._error is not None:
            raise self._error
        return self._text


def test_live_ok() -> None:
    client = TestClient(app)
    response = client.get("/live")
    assert response.status_code == 200
    assert response.json() == {"status": "live"}


def test_health_ok_when_model_configured(monkeypatch) -> None:
    monkeypatch.setattr(health_routes, "get_settings", lambda: _settings())

    client = TestClient(app)
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {
        "status": "ok",
        "checks": {"model": {"status": "ok", "model": "gemini-1.5-flash"}},
    }


def test_health_returns_503_without_api_key(monkeypatch) -> None:
    monkeypatch.setattr(health_routes, "get_settings", lambda: _settings(google_api_key=""))

    client = TestClient(app)
    response = client.get("/health")

    assert response.status_code == 503
    payload = response.json()
    assert payload["status"] == "degraded"
    assert payload["checks"]["model"] == {"status": "failed", "error": "model_api_key_missing"}


def test_model_health_returns_ping_text(monkeypatch) -> None:
    monkeypatch.setattr(health_routes, "get_settings", lambda: _settings())
    monkeypatch.setattr(health_routes, "GeminiQuizModel", lambda **kwargs: _PingModel())

    client = TestClient(app)
    response = client.get("/health/model")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "text": "Hello!"}


def test_model_health_sanitizes_exception(monkeypatch) -> None:
    monkeypatch.setattr(health_routes, "get_settings", lambda: _settings())
    monkeypatch.setattr(
        health_routes,
        "GeminiQuizModel",
        lambda **kwargs: _PingModel(error=ModelCallError("API key AIza-secret is invalid")),
    )

    client = TestClient(app)
    response = client.get("/health/model")

    assert response.status_code == 503
    assert response.json() == {"status": "failed", "error": "model_unavailable"}


def test_model_health_without_api_key(monkeypatch) -> None:
    monkeypatch.setattr(health_routes, "get_settings", lambda: _settings(google_api_key=""))

    client = TestClient(app)
    response = client.get("/health/model")

    assert response.status_code == 503
    assert response.json()["error"] == "model_unavailable"
