"""Tests for error handling in the Local Food Lovers Network API.

Tests store failures, malformed identifiers and validation errors, and the
consistent structure of every error response.
"""

import logging

import mongomock
import pytest
from bson import ObjectId
from pymongo.errors import ServerSelectionTimeoutError

# Configure logging for tests
logging.basicConfig(level=logging.WARNING)


@pytest.fixture
def failing_store(monkeypatch):
    """Make every read and write on the in-memory store time out."""

    def fail(*args, **kwargs):
        raise ServerSelectionTimeoutError("No servers found yet")

    for method in ("find", "find_one", "insert_one", "update_one", "delete_one", "find_one_and_update"):
        monkeypatch.setattr(mongomock.collection.Collection, method, fail)


def test_store_failure_returns_500_without_details(client, failing_store):
    """Test that a store error maps to 500 and does not leak the cause."""
    response = client.get("/all-recipes")

    assert response.status_code == 500
    data = response.json()
    assert data["error"] == "StoreError"
    assert data["message"] == "Failed to fetch recipes"
    assert "No servers found" not in response.text


@pytest.mark.parametrize(
    "method, url, body",
    [
        ("post", "/recipes", {"name": "Pho"}),
        ("get", f"/reviews/{ObjectId()}", None),
        ("patch", f"/reviews-likes/{ObjectId()}", {"userEmail": "a@example.com"}),
        ("patch", f"/reviews/{ObjectId()}/bookmark", {"userEmail": "a@example.com"}),
        ("delete", f"/favorites/{ObjectId()}", None),
    ],
)
def test_store_failures_are_reported_per_operation(client, failing_store, method, url, body):
    kwargs = {"json": body} if body is not None else {}

    response = getattr(client, method)(url, **kwargs)

    assert response.status_code == 500
    assert response.json()["error"] == "StoreError"


def test_store_failure_is_logged(client, failing_store, caplog):
    with caplog.at_level(logging.ERROR, logger="src.store.documents"):
        client.get("/favorites")

    assert any("fetch favorites" in record.getMessage() for record in caplog.records)


def test_store_failures_count_as_server_errors(client, failing_store):
    client.get("/all-recipes")

    assert client.get("/metrics").json()["server_error_count"] == 1


@pytest.mark.parametrize(
    "url",
    ["/recipes/bad-id", "/reviews/bad-id", "/recipes/64b7f0c2a1b2c3d4e5f6071Z"],
)
def test_malformed_identifier_is_400_not_500(client, url):
    response = client.get(url)

    assert response.status_code == 400
    assert response.json()["details"]["id"] in url


def test_malformed_json_body_is_400(client):
    response = client.post(
        "/recipes",
        content="{not json",
        headers={"content-type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["error"] == "ValidationError"


def test_error_response_structure(client):
    """Test that error responses have consistent structure."""
    for response in (
        client.get(f"/recipes/{ObjectId()}"),
        client.get("/recipes/bad"),
        client.post("/reviews", json={}),
    ):
        data = response.json()
        assert set(data) == {"error", "message", "details"}


def test_health_check_not_affected_by_store_errors(client, failing_store):
    """Test that /ping works even if the store is failing."""
    response = client.get("/ping")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
