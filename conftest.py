"""Shared fixtures for the upload service tests."""

import pytest
from fastapi.testclient import TestClient

from filedrop.main import create_app
from filedrop.services.storage_service import StorageService


@pytest.fixture
def upload_dir(tmp_path):
    """Storage directory path that does not exist yet."""
    return tmp_path / "uploads"


@pytest.fixture
def storage(upload_dir):
    return StorageService(upload_dir=upload_dir)


@pytest.fixture
def app(upload_dir):
    return create_app(upload_dir=upload_dir)


@pytest.fixture
def client(app):
    """Test client with the app lifespan running.

    Yields:
        TestClient bound to an app storing into a temporary directory.
    """
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def upload(client):
    """Upload helper returning the response."""

    def _upload(filename, content, mimetype="application/octet-stream"):
        return client.post("/upload", files={"file": (filename, content, mimetype)})

    return _upload
