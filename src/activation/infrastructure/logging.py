"""Loguru configuration for the activation engine."""

import sys

from loguru import logger

from src.config import LoggingConfig

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)


def configure_logging(config: LoggingConfig | None = None) -> None:
    """
    Configure loguru sinks.

    This should be called once at application startup.
    """
    config = config or LoggingConfig()

    # Remove default handler
    logger.remove()

    logger.add(sink=sys.stderr, format=LOG_FORMAT, level=config.level.upper(), colorize=True)

    if config.file:
        logger.add(
            sink=config.file,
            format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {name}:{function}:{line} | {message}",
            level=config.level.upper(),
            rotation=config.rotation,
            retention=config.retention,
            enqueue=True,
        )
