"""
Logging configuration using Loguru
"""

import sys
from pathlib import Path
from typing import Optional
from loguru import logger

from aqvision_core.config import Settings, get_settings


def setup_logging(settings: Optional[Settings] = None):
    """Configure logging for the application"""
    settings = settings or get_settings()

    # Remove default handler
    logger.remove()

    # Console handler with color
    logger.add(
        sys.stdout,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        level=settings.log_level,
        colorize=True,
    )

    if not settings.log_to_file:
        return

    logs_dir = Path(settings.logs_dir)
    logs_dir.mkdir(parents=True, exist_ok=True)

    # File handler for all logs
    logger.add(
        logs_dir / "app.log",
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
        level="DEBUG",
        rotation="10 MB",
        retention="7 days",
        compression="zip",
    )

    # Separate file for errors
    logger.add(
        logs_dir / "errors.log",
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
        level="ERROR",
        rotation="10 MB",
        retention="30 days",
        compression="zip",
    )

    # Outbound calls to third-party providers
    logger.add(
        logs_dir / "upstream.log",
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[provider]} | {message}",
        level="INFO",
        rotation="50 MB",
        retention="30 days",
        filter=lambda record: record["extra"].get("context") == "upstream",
    )

    logger.debug("Logging configured successfully")


# Setup logging on module import
setup_logging()

# Export logger for use in other modules
__all__ = ["logger", "setup_logging"]
