"""Loguru sink configuration shared by the CLI and the API."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from wordwise.config import Settings


def configure_logging(settings: Settings, level: str | None = None) -> None:
    """Replace default loguru sinks with stderr and an optional rotating file."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level or settings.log_level,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {name}:{line} - <level>{message}</level>",
    )
    if settings.log_file:
        Path(settings.log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            settings.log_file,
            level="DEBUG",
            rotation="10 MB",
            retention=5,
            enqueue=True,
        )
