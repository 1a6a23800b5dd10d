import logging, os, sys
from typing import Optional

# python-multipart logs every form part at DEBUG; one line per chunk field is noise
_NOISY_LOGGERS = ("multipart", "python_multipart")

def setup_logging(level: Optional[str] = None) -> int:
    """Configure stdout logging from LOG_LEVEL (or `level`) and return the level used."""
    name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    resolved = getattr(logging, name, logging.INFO)
    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=resolved,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            stream=sys.stdout,
        )
    # uvicorn installs its own root handlers first; still honour the level for our package
    logging.getLogger("chunkflow").setLevel(resolved)
    for noisy in _NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(max(resolved, logging.WARNING))
    return resolved
