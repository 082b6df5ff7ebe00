"""Logging setup for the academy service.

structlog renders everything. Records emitted through the standard library
(Protean, uvicorn, httpx) pass through the same processor chain via
``ProcessorFormatter`` so that one request produces one consistent stream.
"""

import logging
import os
import sys
from typing import Any

import structlog

from academy.config import get_settings

_LEVELS_BY_ENV = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}

_QUIET_LOGGERS = ("protean", "httpx", "httpcore")


def _environment() -> str:
    return (os.getenv("PROTEAN_ENV") or "development").lower()


def get_log_level() -> str:
    """LOG_LEVEL wins; otherwise the level follows PROTEAN_ENV."""
    return os.getenv("LOG_LEVEL", _LEVELS_BY_ENV.get(_environment(), "INFO")).upper()


def get_log_format() -> str:
    log_format = get_settings().log_format
    if log_format:
        return log_format.lower()
    return "json" if _environment() in ("production", "staging") else "console"


def _shared_processors() -> list:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]


def _renderer(log_format: str):
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=False)


def setup_stdlib_logging(log_format: str) -> None:
    """Send stdlib records to stdout, rendered by structlog."""
    log_level = get_log_level()

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_shared_processors(),
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            _renderer(log_format),
        ],
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(log_level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def setup_structlog() -> None:
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_shared_processors(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging() -> None:
    """Configure stdlib and structlog logging for the process."""
    setup_stdlib_logging(get_log_format())
    setup_structlog()


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def add_context(**kwargs: Any) -> None:
    """Bind values (e.g. user_id) onto every log line of the current request."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
