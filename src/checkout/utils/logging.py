"""Logging for the checkout service.

Everything goes through structlog on top of the stdlib root logger:
console output plus rotating ``checkout.log`` / ``checkout_error.log``
files under the configured log directory. Production and staging render
JSON lines; every other environment gets the colored console renderer.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Any

import structlog

from checkout.config import Settings, get_settings

LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5

_LEVEL_BY_ENVIRONMENT = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}

_JSON_ENVIRONMENTS = ("production", "staging")

# Libraries that are chatty at DEBUG
_QUIET_LOGGERS = ("protean", "uvicorn.access", "httpx")


def resolve_log_level(settings: Settings) -> str:
    """``LOG_LEVEL`` wins; otherwise the level follows the environment."""
    if settings.log_level:
        return settings.log_level.upper()
    return _LEVEL_BY_ENVIRONMENT.get(settings.environment, "INFO")


def _rotating_file(path: Path, level) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path,
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUPS,
        encoding="utf-8",
    )
    handler.setLevel(level)
    return handler


def setup_stdlib_logging(settings: Settings) -> None:
    level = resolve_log_level(settings)
    settings.log_dir.mkdir(parents=True, exist_ok=True)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = [
        console,
        _rotating_file(settings.log_dir / "checkout.log", level),
        _rotating_file(settings.log_dir / "checkout_error.log", logging.ERROR),
    ]

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def _renderer(environment: str):
    if environment in _JSON_ENVIRONMENTS:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=True,
        exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=False, max_frames=2),
    )


def setup_structlog(settings: Settings) -> None:
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            _renderer(settings.environment),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging(settings: Settings | None = None) -> None:
    """Configure stdlib and structlog logging for the whole process."""
    settings = settings or get_settings()
    setup_stdlib_logging(settings)
    setup_structlog(settings)


def add_context(**kwargs: Any) -> None:
    """Bind values to every log line emitted by the current request."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
