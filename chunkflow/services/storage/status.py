# chunkflow/services/storage/status.py
from __future__ import annotations
from pathlib import Path
from typing import Tuple

from chunkflow.core.errors import RootValidationError
from chunkflow.models.schemas import UploadDescriptor
from chunkflow.services.storage.root_check import StorageRootValidator

CHUNK_OK = 200
# Anything but 200, 201, 202, 404, 415, 500, 501: flow.js keeps sending on it
CHUNK_NOT_STARTED = 406
CHUNK_BROKEN = 500

def chunk_status(
    validator: StorageRootValidator,
    chunk_path: Path,
    descriptor: UploadDescriptor,
) -> Tuple[str, int]:
    """Answer a flow.js testChunks probe. Read-only."""
    try:
        validator.validate()
    except RootValidationError as e:
        return f"Directory is broken: {e}", CHUNK_BROKEN

    label = f"{descriptor.identifier}:{descriptor.chunk_number}"
    try:
        size = chunk_path.stat().st_size
    except OSError:
        return f"The chunk {label} isn't started yet!", CHUNK_NOT_STARTED

    # the final chunk may be anything up to 2x chunk_size
    if not descriptor.is_final_chunk and size != descriptor.chunk_size:
        return f"The chunk {label} is the wrong size!", CHUNK_BROKEN

    return f"The chunk {label} looks great!", CHUNK_OK
