import sys

from loguru import logger

from .config import LoggingSettings


def configure_logging(settings: LoggingSettings) -> None:
    """Send loguru output to stderr at the configured level."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.level.upper(),
        format=settings.format,
        colorize=True,
    )
    logger.debug("Logger configured with level: {}", settings.level.upper())
