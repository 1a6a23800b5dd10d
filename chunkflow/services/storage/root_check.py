# chunkflow/services/storage/root_check.py
from __future__ import annotations
from pathlib import Path
import logging, shutil, tempfile, threading, uuid
from typing import Optional

from chunkflow.core.errors import FailureKind, RootValidationError

logger = logging.getLogger(__name__)

_PROBE_CHUNK = "42"
_PROBE_FILE = "probe"
_PROBE_CONTENT = (
    "For instance, on the planet Earth, man had always assumed that he was more "
    "intelligent than dolphins because he had achieved so much - the wheel, New York, "
    "wars and so on - whilst all the dolphins had ever done was muck about in the water "
    "having a good time. But conversely, the dolphins had always believed that they "
    "were far more intelligent than man - for precisely the same reasons."
).encode("utf-8")


class StorageRootValidator:
    """
    One-shot health check of an upload root: exists, and a nested directory
    can be created, written, read back and deleted under it.

    The probe runs on the first call only; every later call returns (or
    re-raises) the memoized outcome without touching the filesystem. The
    root may stop being writable afterwards and this object will not notice
    until a new validator is built.
    """

    def __init__(self, root: str | Path, dir_mode: int = 0o777, file_mode: int = 0o600):
        self.root = Path(root)
        self.dir_mode = dir_mode
        self.file_mode = file_mode
        self._lock = threading.Lock()
        self._validated = False
        self._error: Optional[RootValidationError] = None

    @property
    def validated(self) -> bool:
        return self._validated

    @property
    def error(self) -> Optional[RootValidationError]:
        return self._error

    def validate(self) -> None:
        """Raise RootValidationError if the root is unusable."""
        if not self._validated:
            with self._lock:
                if not self._validated:
                    self._error = self._probe()
                    self._validated = True
        if self._error is not None:
            raise self._error

    def _probe(self) -> Optional[RootValidationError]:
        if not self.root.is_dir():
            logger.error("Upload root %s does not exist or is not a directory", self.root)
            return RootValidationError(FailureKind.no_root_directory)

        probe_root = self.root / uuid.uuid4().hex
        probe_dir = probe_root / _PROBE_CHUNK
        try:
            probe_dir.mkdir(parents=True, mode=self.dir_mode)
        except OSError as e:
            logger.error("Upload root %s: cannot create %s: %s", self.root, probe_dir, e)
            return RootValidationError(FailureKind.cannot_create_directory)

        probe_file = probe_dir / _PROBE_FILE
        try:
            probe_file.write_bytes(_PROBE_CONTENT)
            probe_file.chmod(self.file_mode)
        except OSError as e:
            logger.error("Upload root %s: cannot write %s: %s", self.root, probe_file, e)
            return RootValidationError(FailureKind.cannot_write_file)

        try:
            readback = probe_file.read_bytes()
        except OSError as e:
            logger.error("Upload root %s: cannot read %s: %s", self.root, probe_file, e)
            return RootValidationError(FailureKind.cannot_read_file)
        if readback != _PROBE_CONTENT:
            logger.error("Upload root %s: probe file came back altered", self.root)
            return RootValidationError(
                FailureKind.cannot_read_file,
                "read back different bytes than were written under the upload root",
            )

        try:
            shutil.rmtree(probe_root)
        except OSError as e:
            logger.error("Upload root %s: cannot delete %s: %s", self.root, probe_root, e)
            return RootValidationError(FailureKind.cannot_delete)

        if self.root.resolve() == Path(tempfile.gettempdir()).resolve():
            logger.warning(
                "Upload root %s is the shared system temp directory; "
                "consider a dedicated subdirectory for upload chunks",
                self.root,
            )
        logger.info("Upload root %s validated", self.root)
        return None
