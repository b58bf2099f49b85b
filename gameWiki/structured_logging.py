"""Structured logging configuration for gameWiki.

structlog renders every record, including Django's own stdlib loggers, through
`structlog.stdlib.ProcessorFormatter`. Console output is human-readable by
default; `json` produces one JSON object per line.
"""

from __future__ import annotations

import logging
from typing import Any

import structlog

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
VALID_LOG_FORMATS = {"console", "json"}


def _shared_processors() -> list[Any]:
    """Return processors applied to both structlog and stdlib records."""

    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]


def build_logging_config(*, level: str, log_format: str) -> dict[str, Any]:
    """Build a `LOGGING` dict for Django settings.

    Args:
        level: Root log level name (e.g. "INFO").
        log_format: Either "console" or "json".

    Returns:
        A `logging.config.dictConfig` compatible mapping.

    Raises:
        ValueError: When the level or format is unknown.
    """

    level = level.strip().upper()
    log_format = log_format.strip().lower()
    if level not in VALID_LOG_LEVELS:
        raise ValueError(f"log level must be one of {sorted(VALID_LOG_LEVELS)}")
    if log_format not in VALID_LOG_FORMATS:
        raise ValueError(f"log format must be one of {sorted(VALID_LOG_FORMATS)}")

    renderer: Any
    if log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "structured": {
                "()": structlog.stdlib.ProcessorFormatter,
                "processors": [
                    structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                    structlog.processors.format_exc_info,
                    renderer,
                ],
                "foreign_pre_chain": _shared_processors(),
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "structured",
            },
        },
        "root": {"handlers": ["console"], "level": level},
        "loggers": {
            "django": {"handlers": ["console"], "level": level, "propagate": False},
        },
    }


def configure_structlog(*, level: str) -> None:
    """Route structlog through stdlib logging at the given level."""

    structlog.configure(
        processors=[
            *_shared_processors(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level.strip().upper())),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
