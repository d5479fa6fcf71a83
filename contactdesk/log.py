"""Logging setup built on loguru.

Standard library loggers (uvicorn, SQLAlchemy) are routed into loguru so
the whole process writes through the same sinks.
"""

import logging
import sys
from pathlib import Path

from loguru import logger

from .core import Settings

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


class InterceptHandler(logging.Handler):
    """Redirect standard ``logging`` records to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        logger.opt(depth=2, exception=record.exc_info).log(
            level, record.getMessage()
        )


def configure_logging(settings: Settings) -> None:
    """Reset loguru sinks according to ``settings``.

    Args:
        settings (Settings): Application settings providing ``LOG_LEVEL``,
            ``LOG_FILE`` and ``ENVIRONMENT``.
    """
    verbose = settings.ENVIRONMENT != "production"

    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.LOG_LEVEL,
        format=LOG_FORMAT,
        backtrace=verbose,
        diagnose=verbose,
    )

    if settings.LOG_FILE:
        path = Path(settings.LOG_FILE)
        path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(path),
            level=settings.LOG_LEVEL,
            format=LOG_FORMAT,
            rotation="10 MB",
            retention=5,
            compression="zip",
            backtrace=verbose,
            diagnose=False,
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.pool").setLevel(logging.WARNING)
    # request logs are out of scope
    logging.getLogger("uvicorn.access").setLevel(logging.CRITICAL)

    logger.debug("Logging configured at level {}", settings.LOG_LEVEL)
