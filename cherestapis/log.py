"""Logging configuration using loguru.

Intercepts stdlib logging so that uvicorn, the kubernetes client and urllib3
all flow through loguru with a unified format.  Every record carries the id of
the workspace this process serves (``extra["workspace_id"]``).
"""

from __future__ import annotations

import logging
import sys

from loguru import logger

NO_WORKSPACE = "-"

# The kubernetes client logs every request body at DEBUG.
QUIET_LOGGERS = ("uvicorn.access", "kubernetes.client.rest", "urllib3")

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<magenta>{extra[workspace_id]}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


class _InterceptHandler(logging.Handler):
    """Bridge stdlib logging records into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        # Map stdlib level name -> loguru level
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Walk the call stack so loguru reports the real call-site
        frame = logging.currentframe()
        depth = 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(level: str = "INFO", workspace_id: str | None = None) -> None:
    """Configure loguru as the sole logging sink.

    Call this once at process startup (before uvicorn starts).  ``workspace_id``
    may still be unknown at that point; records then show ``-``.
    """
    level = level.upper()

    logger.remove()
    logger.configure(extra={"workspace_id": workspace_id or NO_WORKSPACE})
    logger.add(sys.stderr, level=level, format=LOG_FORMAT)

    logging.basicConfig(handlers=[_InterceptHandler()], level=0, force=True)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger.info("Logging initialised (level={}, workspace={})", level, workspace_id or NO_WORKSPACE)
