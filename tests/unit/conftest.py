"""
Shared fixtures for unit tests.
"""

import pytest
from fastapi.testclient import TestClient

from media_player.config.settings import Settings
from media_player.main import create_app

from .fakes import RecordingStore


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        bucket_name="media",
        access_key="test-access",
        secret_key="test-secret",
        storage_endpoint="http://localhost:9000",
        static_dir=str(tmp_path),
    )


@pytest.fixture
def store() -> RecordingStore:
    return RecordingStore(keys=["a.mp3", "b.mp3", "c.mp3"])


@pytest.fixture
def client(settings, store) -> TestClient:
    app = create_app(settings=settings, storage_client=store)
    return TestClient(app)
