"""Tests for answering flow.js testChunks probes."""

from chunkflow.services.storage.paths import build_chunk_paths
from chunkflow.services.storage.root_check import StorageRootValidator
from chunkflow.services.storage.status import CHUNK_BROKEN, CHUNK_NOT_STARTED, CHUNK_OK, chunk_status


def _put(upload_root, descriptor, data):
    upload_dir, chunk_path = build_chunk_paths(upload_root, descriptor)
    upload_dir.mkdir(parents=True, exist_ok=True)
    chunk_path.write_bytes(data)
    return chunk_path


def test_not_started(upload_root, validator, make_descriptor):
    d = make_descriptor(2)
    _, chunk_path = build_chunk_paths(upload_root, d)

    message, code = chunk_status(validator, chunk_path, d)

    assert code == CHUNK_NOT_STARTED
    assert code not in {200, 201, 202, 404, 415, 500, 501}
    assert message == "The chunk abc123:2 isn't started yet!"
    assert list(upload_root.iterdir()) == []


def test_correct_size(upload_root, validator, make_descriptor):
    d = make_descriptor(1)
    chunk_path = _put(upload_root, d, b"abc")

    assert chunk_status(validator, chunk_path, d) == ("The chunk abc123:1 looks great!", CHUNK_OK)


def test_wrong_size(upload_root, validator, make_descriptor):
    d = make_descriptor(2)
    chunk_path = _put(upload_root, d, b"de")

    message, code = chunk_status(validator, chunk_path, d)

    assert code == CHUNK_BROKEN
    assert "wrong size" in message


def test_final_chunk_may_differ(upload_root, validator, make_descriptor):
    d = make_descriptor(3, total_size=11)
    chunk_path = _put(upload_root, d, b"ghijk")

    assert chunk_status(validator, chunk_path, d)[1] == CHUNK_OK


def test_broken_root(tmp_path, make_descriptor):
    validator = StorageRootValidator(tmp_path / "missing")
    d = make_descriptor(1)
    _, chunk_path = build_chunk_paths(tmp_path / "missing", d)

    message, code = chunk_status(validator, chunk_path, d)

    assert code == CHUNK_BROKEN
    assert message.startswith("Directory is broken:")
