"""Logging setup for activity-sync, built on loguru.

Provides:
- Level selection from Settings, overridable by --verbose/--quiet
- Routing of stdlib loggers (httpx, SQLAlchemy) into loguru
- Resource/scope binding so each sync's lines can be told apart
- Optional rotating file sink
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from loguru import logger

if TYPE_CHECKING:
    from loguru import Logger, Record

LogLevel = Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

_CONSOLE_FORMAT = (
    "<dim>{time:HH:mm:ss}</dim> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan>{extra[resource_tag]} - "
    "<level>{message}</level>"
)

_FILE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | "
    "{extra[name]}:{function}:{line} | {extra} | {message}"
)


class InterceptHandler(logging.Handler):
    """Forward stdlib log records (httpx, sqlalchemy, alembic) to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame = logging.currentframe()
        depth = 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def _patch_record(record: Record) -> None:
    extra = record["extra"]
    extra.setdefault("name", record["name"])
    resource = extra.get("resource")
    if resource is None:
        extra["resource_tag"] = ""
    elif extra.get("scope"):
        extra["resource_tag"] = f" [{resource} {extra['scope']}]"
    else:
        extra["resource_tag"] = f" [{resource}]"


def setup_logging(
    level: LogLevel = "INFO",
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_file: Path | None = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
    serialize: bool = False,
) -> Logger:
    """Configure loguru sinks for the process.

    Args:
        level: Base log level from config
        verbose: Force DEBUG (wins over quiet)
        quiet: Force WARNING
        log_file: Optional file sink, always at DEBUG
        rotation: Rotation policy for the file sink
        retention: Retention policy for rotated files
        serialize: Write the file sink as JSON lines

    Returns:
        The configured logger
    """
    effective_level: LogLevel = "DEBUG" if verbose else "WARNING" if quiet else level

    logger.remove()
    logger.configure(patcher=_patch_record)
    logger.add(
        sys.stderr,
        level=effective_level,
        format=_CONSOLE_FORMAT,
        colorize=True,
        backtrace=True,
        diagnose=False,
    )

    if log_file:
        logger.add(
            log_file,
            level="DEBUG",
            format=_FILE_FORMAT,
            rotation=rotation,
            retention=retention,
            compression="gz",
            serialize=serialize,
        )

    _route_stdlib_logging(effective_level)

    return logger


def _route_stdlib_logging(level: LogLevel) -> None:
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    debug = level in ("TRACE", "DEBUG")
    logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO if debug else logging.WARNING)
    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.DEBUG if debug else logging.WARNING)


def get_logger(name: str) -> Logger:
    """Return the shared logger with ``name`` bound.

    Usage:
        from activity_sync.logging import get_logger
        logger = get_logger(__name__)
        logger.info("Starting")
    """
    return logger.bind(name=name)


def bind_resource(resource: str, scope: str | None = None) -> Logger:
    """Return a logger tagged with the resource being synced.

    Args:
        resource: Resource name, e.g. ``pull`` or ``search-issues``
        scope: Optional scope, e.g. ``owner/repo`` or a Jira project key

    Returns:
        Logger with ``resource`` (and ``scope``) bound
    """
    return logger.bind(name="sync", resource=resource, scope=scope)


def reset_logging() -> None:
    """Drop every sink (tests)."""
    logger.remove()
