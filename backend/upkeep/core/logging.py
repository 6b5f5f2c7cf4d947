# backend/upkeep/core/logging.py
import logging

from .config import LOG_LEVEL

_configured = False


def setup_logging(level: str = LOG_LEVEL) -> None:
    global _configured
    if _configured:
        return
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    _configured = True
