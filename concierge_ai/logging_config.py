"""
Logging setup for the concierge pipeline.
All modules log through loguru; this only swaps the default sink.
"""

import sys
from typing import Optional

from loguru import logger

from .config import settings

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function} - {message}"


def configure_logging(level: Optional[str] = None) -> None:
    """
    Replace loguru's default handler with a single stderr sink.
    
    Args:
        level: Minimum level name; defaults to settings.LOG_LEVEL
    """
    logger.remove()
    logger.add(sys.stderr, level=(level or settings.LOG_LEVEL).upper(), format=LOG_FORMAT)
