"""
Logging setup shared by scripts and embedding applications.
"""

import logging
from typing import Optional

from core.config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure root logging with the standard backend format.

    Args:
        level: Level name (e.g. "DEBUG"); defaults to LOG_LEVEL from the environment
    """
    logging.basicConfig(
        level=getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler()],
    )
