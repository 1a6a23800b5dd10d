# chunkflow/services/storage/paths.py
from __future__ import annotations
from pathlib import Path
from typing import Tuple

from chunkflow.models.schemas import UploadDescriptor

def build_chunk_paths(root: Path, descriptor: UploadDescriptor) -> Tuple[Path, Path]:
    """root/<identifier> and root/<identifier>/<chunk_number>."""
    upload_dir = Path(root) / descriptor.identifier
    return upload_dir, upload_dir / str(descriptor.chunk_number)
