"""
Structured logging configuration using structlog.

JSON output for production log aggregation, colored console output
for local development.
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog
from structlog.types import Processor

from bidflow.core.config import get_settings


def setup_logging() -> None:
    """
    Configure structured logging for the application.

    Uses JSON format in production and colored console output in
    development, driven by ``LOG_FORMAT`` and ``LOG_LEVEL``.
    """
    settings = get_settings()

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.log_format == "json":
        processors: list[Processor] = [
            *shared_processors,
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=True),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, settings.log_level)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Standard library loggers (SQLAlchemy, uvicorn) share the level
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level),
    )

    # SQL echo is controlled by DATABASE_ECHO, not the log level
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)


def get_logger(name: str | None = None, **initial_context: Any) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__ of the calling module)
        **initial_context: Initial context values to bind to the logger

    Returns:
        BoundLogger: Configured structured logger

    Example:
        >>> logger = get_logger(__name__, action="archive")
        >>> logger.info("Bulk transition completed", success_count=3)
    """
    logger = structlog.get_logger(name)
    if initial_context:
        logger = logger.bind(**initial_context)
    return logger


@contextmanager
def bound_context(**values: Any) -> Iterator[None]:
    """
    Bind values to every log event emitted inside the block.

    Uses structlog contextvars, so concurrent tasks spawned inside the
    block inherit the values.
    """
    tokens = structlog.contextvars.bind_contextvars(**values)
    try:
        yield
    finally:
        structlog.contextvars.reset_contextvars(**tokens)


class LoggerMixin:
    """
    Mixin class that provides a logger property to any class.

    Example:
        >>> class ProjectStore(LoggerMixin):
        ...     async def update_project(self, project_id, patch):
        ...         self.logger.debug("Updating project", project_id=project_id)
    """

    @property
    def logger(self) -> structlog.stdlib.BoundLogger:
        """Get logger bound with class name."""
        return get_logger(self.__class__.__name__)
