"""Tests for persisting single chunks."""

import io
import stat

import pytest

from chunkflow.core.errors import ChunkWriteError, FailureKind
from chunkflow.services.storage.chunk_store import store_chunk
from chunkflow.services.storage.paths import build_chunk_paths


class _BrokenStream:
    def read(self, *args):
        raise OSError("connection reset")


def test_stores_chunk_under_identifier(upload_root, make_descriptor, payload):
    d = make_descriptor(2)
    upload_dir, chunk_path = build_chunk_paths(upload_root, d)

    written = store_chunk(upload_dir, chunk_path, d, payload(b"def"))

    assert written == 3
    assert chunk_path == upload_root / "abc123" / "2"
    assert chunk_path.read_bytes() == b"def"
    assert [p.name for p in upload_dir.iterdir()] == ["2"]


def test_resend_replaces_chunk(upload_root, make_descriptor, payload):
    d = make_descriptor(1)
    upload_dir, chunk_path = build_chunk_paths(upload_root, d)

    store_chunk(upload_dir, chunk_path, d, payload(b"xx"))
    store_chunk(upload_dir, chunk_path, d, payload(b"abc"))

    assert chunk_path.read_bytes() == b"abc"


def test_file_mode_applied(upload_root, make_descriptor, payload):
    d = make_descriptor(1)
    upload_dir, chunk_path = build_chunk_paths(upload_root, d)

    store_chunk(upload_dir, chunk_path, d, payload(b"abc"), file_mode=0o640)

    assert stat.S_IMODE(chunk_path.stat().st_mode) == 0o640


def test_unreadable_payload(upload_root, make_descriptor):
    d = make_descriptor(1)
    upload_dir, chunk_path = build_chunk_paths(upload_root, d)

    with pytest.raises(ChunkWriteError) as exc:
        store_chunk(upload_dir, chunk_path, d, _BrokenStream())

    assert exc.value.kind is FailureKind.cannot_write_file
    assert isinstance(exc.value.__cause__, OSError)
    assert not chunk_path.exists()


def test_cannot_create_upload_dir(tmp_path, make_descriptor):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    d = make_descriptor(1)
    upload_dir, chunk_path = build_chunk_paths(blocker, d)

    with pytest.raises(ChunkWriteError) as exc:
        store_chunk(upload_dir, chunk_path, d, io.BytesIO(b"abc"))

    assert exc.value.kind is FailureKind.cannot_write_file
