from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from src.core.config import get_settings

_CONFIGURED = False

# Third-party loggers that are chatty at INFO
_QUIET_LOGGERS = ("passlib", "sqlalchemy.engine", "aiosqlite", "multipart")


def _add_service_context(
    _: Any, __: str, event_dict: structlog.typing.EventDict
) -> structlog.typing.EventDict:
    settings = get_settings()
    event_dict.setdefault("service", settings.app_name)
    event_dict.setdefault("environment", settings.environment)
    return event_dict


def setup_logging(level: int | str | None = None) -> None:
    """Configure structlog to emit JSON logs with contextvars support.

    ``level`` defaults to ``LOG_LEVEL`` from settings.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    if level is None:
        level = get_settings().log_level
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(message)s",
        stream=sys.stdout,
    )
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        _add_service_context,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", key="timestamp"),
        structlog.processors.dict_tracebacks,
        # Names are Cyrillic; keep them readable in the log stream
        structlog.processors.JSONRenderer(ensure_ascii=False),
    ]

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )

    _CONFIGURED = True
