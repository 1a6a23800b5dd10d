# chunkflow/services/storage/completion.py
from __future__ import annotations
from pathlib import Path
import logging

logger = logging.getLogger(__name__)

def uploaded_bytes(upload_dir: Path) -> int:
    """
    Total size of every entry directly under upload_dir.

    Best effort: an unreadable directory or entry contributes 0 and is
    logged, so callers may briefly see an under-reported total.
    """
    try:
        entries = list(upload_dir.iterdir())
    except OSError as e:
        logger.warning("Can't list %s: %s", upload_dir, e)
        return 0

    total = 0
    for entry in entries:
        try:
            total += entry.stat().st_size
        except OSError as e:
            logger.warning("Can't stat %s: %s", entry, e)
    return total

def is_complete(upload_dir: Path, total_size: int) -> bool:
    # size based, not count based: chunks may arrive in any order
    return uploaded_bytes(upload_dir) == total_size
