# chunkflow/services/uploads.py
from __future__ import annotations
from contextlib import contextmanager
from datetime import timedelta
from functools import lru_cache
from pathlib import Path
import logging, threading
from typing import BinaryIO, Dict, Iterator, List, Optional, Tuple

from chunkflow.core.config import settings
from chunkflow.models.schemas import UploadDescriptor
from chunkflow.services.storage.chunk_store import store_chunk
from chunkflow.services.storage.completion import is_complete
from chunkflow.services.storage.paths import build_chunk_paths
from chunkflow.services.storage.reassembler import combine_chunks
from chunkflow.services.storage.root_check import StorageRootValidator
from chunkflow.services.storage.status import chunk_status
from chunkflow.services.storage.sweeper import sweep

logger = logging.getLogger(__name__)


class UploadLocks:
    """One lock per upload identifier, dropped once nobody holds or waits on it."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[str, Tuple[threading.Lock, int]] = {}

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    @contextmanager
    def hold(self, identifier: str) -> Iterator[None]:
        with self._guard:
            lock, users = self._locks.get(identifier, (None, 0))
            if lock is None:
                lock = threading.Lock()
            self._locks[identifier] = (lock, users + 1)
        lock.acquire()
        try:
            yield
        finally:
            lock.release()
            with self._guard:
                _, users = self._locks[identifier]
                if users == 1:
                    del self._locks[identifier]
                else:
                    self._locks[identifier] = (lock, users - 1)


class ChunkUploadService:
    """
    Entry point for the flow.js chunk protocol against one upload root.

    Store, completion check and combine for a given identifier run as one
    critical section, so concurrent chunks of the same upload cannot race the
    reassembly. Nothing coordinates separate processes sharing a root.
    """

    def __init__(
        self,
        root: str | Path,
        dir_mode: int = 0o777,
        file_mode: int = 0o600,
        retention: Optional[timedelta] = None,
    ):
        self.root = Path(root)
        self.dir_mode = dir_mode
        self.file_mode = file_mode
        self.retention = settings.chunk_retention if retention is None else retention
        self.validator = StorageRootValidator(self.root, dir_mode=dir_mode, file_mode=file_mode)
        self.locks = UploadLocks()

    def chunk_upload(self, descriptor: UploadDescriptor, payload: BinaryIO) -> Optional[str]:
        """
        Store one chunk. Returns None while the upload is incomplete and the
        absolute path of the combined file once the last byte has arrived.
        """
        self.validator.validate()
        upload_dir, chunk_path = build_chunk_paths(self.root, descriptor)
        with self.locks.hold(descriptor.identifier):
            store_chunk(upload_dir, chunk_path, descriptor, payload, self.dir_mode, self.file_mode)
            if not is_complete(upload_dir, descriptor.total_size):
                return None
            return combine_chunks(upload_dir, descriptor, self.file_mode)

    def chunk_status(self, descriptor: UploadDescriptor) -> Tuple[str, int]:
        _, chunk_path = build_chunk_paths(self.root, descriptor)
        return chunk_status(self.validator, chunk_path, descriptor)

    def cleanup(self, max_age: Optional[timedelta] = None) -> List[str]:
        """Delete uploads idle for longer than max_age (default: configured retention)."""
        self.validator.validate()
        max_age = self.retention if max_age is None else max_age
        removed = sweep(self.root, max_age)
        logger.info("Cleanup of %s removed %d upload(s)", self.root, len(removed))
        return removed


@lru_cache(maxsize=1)
def get_upload_service() -> ChunkUploadService:
    # For FastAPI DI
    return ChunkUploadService(
        settings.UPLOAD_ROOT,
        dir_mode=settings.DIR_MODE,
        file_mode=settings.FILE_MODE,
        retention=settings.chunk_retention,
    )
