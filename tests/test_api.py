"""Tests for the service-level endpoints of the FastAPI application.

Covers the root banner, health checks, metrics and request tracing headers.
"""

from fastapi.testclient import TestClient
from pymongo.errors import ConfigurationError

from src.api.main import ROOT_MESSAGE, create_app
from src.store.session import StoreSession


def test_root_returns_static_text(client):
    """Test that / returns the plain text banner."""
    response = client.get("/")

    assert response.status_code == 200
    assert response.text == ROOT_MESSAGE


def test_ping_endpoint(client):
    """Test that the /ping endpoint returns correct status and JSON."""
    response = client.get("/ping")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_status_endpoint_reports_reachable_store(client, settings):
    """Test that /status reports the connected store."""
    response = client.get("/status")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["store_reachable"] is True
    assert data["database"] == settings.db_name


def test_status_endpoint_reports_degraded_without_client(settings):
    """Test that /status degrades instead of failing when the store is gone."""
    store = StoreSession(settings)
    app = create_app(settings=settings, store=store)
    # No lifespan: the session is never connected
    client = TestClient(app)

    response = client.get("/status")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "degraded"
    assert data["store_reachable"] is False


def test_app_starts_degraded_when_client_cannot_be_built(monkeypatch, settings):
    """Test that startup survives a store URI the driver rejects."""

    def unresolvable(*args, **kwargs):
        raise ConfigurationError("The DNS query name does not exist")

    monkeypatch.setattr("src.store.session.MongoClient", unresolvable)
    store = StoreSession(settings.model_copy(update={"mongodb_uri": "mongodb+srv://nonexistent-host.invalid/"}))

    with TestClient(create_app(settings=settings, store=store)) as client:
        response = client.get("/status")
        assert client.get("/ping").status_code == 200

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "degraded"
    assert data["store_reachable"] is False


def test_request_id_header_is_set(client):
    """Test that every response carries an X-Request-ID header."""
    response = client.get("/ping")

    assert "X-Request-ID" in response.headers
    assert len(response.headers["X-Request-ID"]) == 36


def test_metrics_count_requests(client):
    """Test that /metrics counts the requests handled before it."""
    client.get("/ping")
    client.get("/ping")

    response = client.get("/metrics")

    assert response.status_code == 200
    data = response.json()
    assert data["request_count"] == 2
    assert data["server_error_count"] == 0
    assert data["average_latency_ms"] >= 0
    assert data["max_latency_ms"] >= data["min_latency_ms"]


def test_metrics_separate_client_errors(client):
    """Test that 4xx responses are counted apart from server errors."""
    client.get("/ping")
    client.get("/recipes/12345")

    data = client.get("/metrics").json()

    assert data["request_count"] == 2
    assert data["client_error_count"] == 1
    assert data["server_error_count"] == 0
