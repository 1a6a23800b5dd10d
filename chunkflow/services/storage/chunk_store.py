# chunkflow/services/storage/chunk_store.py
from __future__ import annotations
from pathlib import Path
import logging, os, tempfile
from typing import BinaryIO

from chunkflow.core.errors import ChunkWriteError, FailureKind
from chunkflow.models.schemas import UploadDescriptor

logger = logging.getLogger(__name__)

def store_chunk(
    upload_dir: Path,
    chunk_path: Path,
    descriptor: UploadDescriptor,
    payload: BinaryIO,
    dir_mode: int = 0o777,
    file_mode: int = 0o600,
) -> int:
    """Persist one chunk payload at chunk_path. Returns the number of bytes written."""
    try:
        upload_dir.mkdir(parents=True, exist_ok=True, mode=dir_mode)
    except OSError as e:
        raise ChunkWriteError(FailureKind.cannot_write_file, f"Bad directory {upload_dir}: {e}") from e

    try:
        data = payload.read()
    except OSError as e:
        raise ChunkWriteError(FailureKind.cannot_write_file, f"Can't read chunk payload: {e}") from e

    # atomic write; a failed write never leaves a half chunk behind
    tmp_path = None
    try:
        with tempfile.NamedTemporaryFile("wb", delete=False, dir=str(upload_dir), prefix=".chunk-") as tmp:
            tmp_path = tmp.name
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.chmod(tmp_path, file_mode)
        os.replace(tmp_path, chunk_path)
    except OSError as e:
        if tmp_path and os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise ChunkWriteError(FailureKind.cannot_write_file, f"Can't write file {chunk_path}: {e}") from e

    logger.debug(
        "Stored chunk %d/%d of %s (%d bytes)",
        descriptor.chunk_number, descriptor.total_chunks, descriptor.identifier, len(data),
    )
    return len(data)
