"""Structured logging configuration.

Every event carries the application name, version and environment so logs
from several playground instances can share one sink.
"""

import logging
import sys
from typing import Any, cast

import structlog
from structlog.types import EventDict, WrappedLogger

from mcp_playground import __version__
from mcp_playground.config import get_settings

APP_NAME = "mcp-playground"

# Upstream clients log every request at INFO
QUIET_LOGGERS = ("uvicorn", "uvicorn.access", "httpx", "httpcore", "openai")


def add_app_context(_: WrappedLogger, __: str, event_dict: EventDict) -> EventDict:
    """Stamp events with app, version and env (explicit values win)."""
    settings = get_settings()
    event_dict.setdefault("app", APP_NAME)
    event_dict.setdefault("version", __version__)
    event_dict.setdefault("env", settings.app_env)
    return event_dict


def build_processors(development: bool) -> list[Any]:
    """Processor chain: console rendering in development, JSON otherwise."""
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_app_context,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if development:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors.extend(
            [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
        )
    return processors


def setup_logging() -> None:
    """Configure structured logging for the application."""
    settings = get_settings()

    structlog.configure(
        processors=build_processors(settings.is_development),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=logging.DEBUG if settings.app_debug else logging.INFO,
    )

    for logger_name in QUIET_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a logger instance."""
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))
