"""Shared fixtures: an in-memory store session and a client bound to it."""

from typing import Generator

import mongomock
import pytest
from fastapi.testclient import TestClient

from src.api.main import create_app
from src.api.metrics import metrics_service
from src.config import Settings
from src.store.session import StoreSession


@pytest.fixture
def settings() -> Settings:
    return Settings(db_name="localFoodDB_test", log_level="WARNING")


@pytest.fixture
def store(settings) -> StoreSession:
    """Store session around a fresh mongomock client (not yet connected)."""
    return StoreSession(settings, client=mongomock.MongoClient())


@pytest.fixture
def client(settings, store) -> Generator[TestClient, None, None]:
    """Test client with the application lifespan running."""
    metrics_service.reset()
    app = create_app(settings=settings, store=store)
    with TestClient(app) as test_client:
        yield test_client
