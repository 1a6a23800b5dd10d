# chunkflow/core/errors.py
from __future__ import annotations
import enum


class FailureKind(str, enum.Enum):
    no_root_directory = "no_root_directory"
    cannot_create_directory = "cannot_create_directory"
    cannot_write_file = "cannot_write_file"
    cannot_read_file = "cannot_read_file"
    cannot_delete = "cannot_delete"


_DEFAULT_MESSAGES = {
    FailureKind.no_root_directory: "the upload root directory doesn't exist",
    FailureKind.cannot_create_directory: "can't create a directory under the upload root",
    FailureKind.cannot_write_file: "can't write to a file under the upload root",
    FailureKind.cannot_read_file: "can't read a file under the upload root (or got back bad data)",
    FailureKind.cannot_delete: "can't delete a file/directory under the upload root",
}


class UploadStorageError(Exception):
    """Base for every failure raised by the chunk storage engine."""

    def __init__(self, kind: FailureKind, message: str | None = None):
        self.kind = kind
        super().__init__(message or _DEFAULT_MESSAGES[kind])


class RootValidationError(UploadStorageError):
    """The upload root failed its one-time health check. Fatal until restart."""


class ChunkWriteError(UploadStorageError):
    """A single chunk could not be persisted. The client may resend it."""


class CombineError(UploadStorageError):
    """Reassembly failed; the upload directory may be partially combined."""


class DescriptorError(ValueError):
    """Upload metadata from the client is missing or malformed."""
