"""
Logging configuration.

Uses loguru with a single stderr sink. stdout carries JSON-RPC frames on the
server side and the operator menu on the client side, so nothing is logged
there.
"""

import os
import sys
from typing import Optional

from loguru import logger


LOG_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)


def setup_logging(level: Optional[str] = None) -> None:
    """
    Replace loguru's default handler with a stderr sink.

    Args:
        level: Minimum level; defaults to USER_DIRECTORY_LOG_LEVEL or INFO
    """
    level = (level or os.getenv("USER_DIRECTORY_LOG_LEVEL", "INFO")).upper()
    logger.remove()
    logger.add(sys.stderr, level=level, format=LOG_FORMAT, colorize=True)
