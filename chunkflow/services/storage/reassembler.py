# chunkflow/services/storage/reassembler.py
from __future__ import annotations
from pathlib import Path
import logging, os
from typing import List, Tuple

from chunkflow.core.errors import CombineError, FailureKind
from chunkflow.models.schemas import UploadDescriptor

logger = logging.getLogger(__name__)

def _chunk_order(entry: Path) -> Tuple[int, int, str]:
    # "10" must come after "2"; anything non-numeric goes last, by name
    name = entry.name
    if name.isascii() and name.isdigit():
        return (0, int(name), name)
    return (1, 0, name)

def staging_path(upload_dir: Path, filename: str) -> Path:
    return upload_dir / f".{filename}.partial"

def _discard(staging: Path) -> None:
    try:
        staging.unlink(missing_ok=True)
    except OSError as e:
        logger.warning("Can't remove staging file %s: %s", staging, e)

def list_chunks(upload_dir: Path, descriptor: UploadDescriptor) -> List[Path]:
    """Chunk files in byte order, excluding the combined file and its staging file."""
    skip = {descriptor.filename, staging_path(upload_dir, descriptor.filename).name}
    return sorted((p for p in upload_dir.iterdir() if p.name not in skip), key=_chunk_order)

def combine_chunks(upload_dir: Path, descriptor: UploadDescriptor, file_mode: int = 0o600) -> str:
    """
    Concatenate every chunk in upload_dir into upload_dir/<filename>.

    Two phases: chunks are appended to a hidden staging file which is then
    renamed onto the final name, and only after that rename are the chunk
    files deleted. A failure before the rename leaves the chunks untouched
    and removes the staging file; that includes a staged total that differs
    from descriptor.total_size. A failure while deleting chunks leaves the
    final file in place next to whatever chunks were not yet removed; that
    state is not rolled back.
    """
    combined = upload_dir / descriptor.filename
    staging = staging_path(upload_dir, descriptor.filename)

    try:
        chunks = list_chunks(upload_dir, descriptor)
    except OSError as e:
        raise CombineError(FailureKind.cannot_read_file, f"Can't list {upload_dir}: {e}") from e

    written = 0
    try:
        with open(staging, "wb") as out:
            for chunk in chunks:
                try:
                    data = chunk.read_bytes()
                except OSError as e:
                    raise CombineError(FailureKind.cannot_read_file, f"Can't read chunk {chunk}: {e}") from e
                out.write(data)
                written += len(data)
            if written != descriptor.total_size:
                # a chunk went missing from the inputs, e.g. one shadowed by the filename
                raise CombineError(
                    FailureKind.cannot_read_file,
                    f"Combined {written} bytes for {descriptor.identifier}, expected {descriptor.total_size}",
                )
            out.flush()
            os.fsync(out.fileno())
        os.chmod(staging, file_mode)
        os.replace(staging, combined)
    except CombineError:
        _discard(staging)
        raise
    except OSError as e:
        _discard(staging)
        raise CombineError(FailureKind.cannot_write_file, f"Can't write {combined}: {e}") from e

    for chunk in chunks:
        try:
            chunk.unlink()
        except OSError as e:
            raise CombineError(FailureKind.cannot_delete, f"Can't delete chunk {chunk}: {e}") from e

    logger.info(
        "Combined %d chunks of %s into %s (%d bytes)",
        len(chunks), descriptor.identifier, combined, written,
    )
    return str(combined.resolve())
