"""
Logging setup using Loguru.
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger


def setup_loguru(level: str = "INFO", log_file: Optional[Path] = None) -> None:
    """
    Configure loguru for console output and optional rotating file output.

    Args:
        level: Minimum level (DEBUG, INFO, WARNING, ERROR)
        log_file: Path to log file, or None for console only
    """
    # Remove default handler
    logger.remove()

    logger.add(
        sys.stderr,
        level=level,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
    )

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            rotation="10 MB",
            retention=5,  # Keep 5 backup files
            level=level,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} | {message}",
            enqueue=False,
        )

    logger.info(f"Loguru initialized (level={level}, file={log_file})")
