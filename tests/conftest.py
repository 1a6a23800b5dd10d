"""Pytest configuration and fixtures for chunkflow tests."""

import io
import pytest
from fastapi.testclient import TestClient

from chunkflow.models.schemas import UploadDescriptor
from chunkflow.services.storage.root_check import StorageRootValidator
from chunkflow.services.uploads import ChunkUploadService, get_upload_service


@pytest.fixture
def upload_root(tmp_path):
    """Empty, writable upload root."""
    root = tmp_path / "uploads"
    root.mkdir()
    return root


@pytest.fixture
def validator(upload_root):
    return StorageRootValidator(upload_root)


@pytest.fixture
def make_descriptor():
    """Factory for descriptors of the 9-byte, 3 x 3-byte abc123 upload."""
    def _make(chunk_number=1, **overrides):
        fields = dict(
            chunk_number=chunk_number,
            total_chunks=3,
            chunk_size=3,
            total_size=9,
            identifier="abc123",
            filename="report.bin",
            relative_path="report.bin",
        )
        fields.update(overrides)
        return UploadDescriptor(**fields)
    return _make


@pytest.fixture
def payload():
    """Wrap bytes in the readable stream the storage layer expects."""
    return io.BytesIO


@pytest.fixture
def service(upload_root):
    return ChunkUploadService(upload_root)


@pytest.fixture
def client(service):
    from chunkflow.main import app

    app.dependency_overrides[get_upload_service] = lambda: service
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
