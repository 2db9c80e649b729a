"""
Shared pytest fixtures for the study cards tests.

The app is built with injected Settings pointing at an in-memory SQLite
database and a MagicMock object storage, so no real database or bucket
is needed.
"""

import os
import sys
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

# Ensure the project root is on sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from config import Settings  # noqa: E402
from main import create_app  # noqa: E402

TEST_API_KEY = "test-president-key"


def make_settings(**overrides):
    """Settings for tests: in-memory DB, known API key, fake bucket."""
    values = {
        "database_url": "sqlite://",
        "reporting_api_key": TEST_API_KEY,
        "s3_bucket": "test-bucket",
        "s3_root_folder": "vlholdings",
    }
    values.update(overrides)
    return Settings(**values)


def make_mock_storage():
    """Object storage double that records calls and returns predictable keys/URLs."""
    storage = MagicMock()
    storage.put.side_effect = lambda key, body, content_type=None: f"vlholdings/{key}"
    storage.public_url.side_effect = lambda key: f"https://test-bucket.example.com/{key}"
    storage.presign.side_effect = (
        lambda key, expires_in=3600: f"https://signed.example.com/{key}?expires={expires_in}"
    )
    return storage


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def storage():
    return make_mock_storage()


@pytest.fixture
def app(settings, storage):
    """Create application for testing."""
    return create_app(settings, storage=storage)


@pytest.fixture
def client(app):
    """Test client; entering it runs the lifespan, which creates the tables."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db_session(client, app):
    """Session on the same in-memory database the app uses."""
    session = app.state.session_factory()
    yield session
    session.close()


@pytest.fixture
def add_cards(db_session):
    """Insert StudyCard objects and return them refreshed (with ids)."""
    def _add(*cards):
        db_session.add_all(cards)
        db_session.commit()
        for card in cards:
            db_session.refresh(card)
        return list(cards)
    return _add


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {TEST_API_KEY}"}
