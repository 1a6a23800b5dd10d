# chunkflow/services/storage/sweeper.py
from __future__ import annotations
from datetime import timedelta
from pathlib import Path
import logging, shutil, time
from typing import List

logger = logging.getLogger(__name__)

def sweep(root: Path, max_age: timedelta) -> List[str]:
    """
    Remove every direct child of root last modified more than max_age ago.

    Stops at the first filesystem error, leaving later entries for the next
    run. Returns the names that were removed.
    """
    removed: List[str] = []
    now = time.time()
    limit = max_age.total_seconds()
    for entry in Path(root).iterdir():
        age = now - entry.stat().st_mtime
        logger.debug("Sweep candidate %s, age %.0fs", entry.name, age)
        if age <= limit:
            continue
        if entry.is_dir() and not entry.is_symlink():
            shutil.rmtree(entry)
        else:
            entry.unlink()
        logger.info("Removed abandoned upload %s (age %.0fs)", entry.name, age)
        removed.append(entry.name)
    return removed
