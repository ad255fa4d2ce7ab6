"""Logging setup.

stdout carries the MCP stdio protocol, so every sink writes to stderr or to
the log file under the storage directory.
"""

import logging
import sys
from pathlib import Path

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[component]}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {extra[component]} | {name}:{function}:{line} - {message}"


def configure_logging(log_file: Path | None, level: str = "INFO"):
    """Replace loguru's default stdout sink and return the root logger to pass around."""
    logger.remove()
    logger.configure(extra={"component": "server"})
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level, colorize=False)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(log_file),
            format=FILE_FORMAT,
            level=level,
            rotation="10 MB",
            retention=5,
            encoding="utf-8",
        )

    # The mcp SDK logs through the standard library.
    logging.basicConfig(
        stream=sys.stderr,
        level=logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    return logger
