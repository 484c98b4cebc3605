from __future__ import annotations

import logging
import os
from typing import Optional

_CONFIGURED = False


def setup_logging(level: Optional[str] = None, verbose: bool = False) -> None:
    """Configure root logging once.

    Args:
        level: Optional log level name (e.g. "INFO", "DEBUG"). If omitted,
               reads RUSH_LOG_LEVEL env or defaults to INFO.
        verbose: Force DEBUG regardless of *level*.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    if verbose:
        log_level = logging.DEBUG
    else:
        log_level_name = (level or os.getenv("RUSH_LOG_LEVEL") or "INFO").upper()
        log_level = getattr(logging, log_level_name, logging.INFO)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    _CONFIGURED = True
