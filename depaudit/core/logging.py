"""Logging for depaudit: structlog events rendered through stdlib handlers."""

from __future__ import annotations

import logging
import logging.config
import os

import structlog

DEFAULT_LEVEL = "WARNING"
_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def resolve_level(level: str | None = None) -> str:
    """Pick the effective level name.

    An explicit *level* (the CLI passes ``"DEBUG"`` for ``-v``) wins over
    ``DEPAUDIT_LOG_LEVEL``; WARNING is the fallback so report output is not
    interleaved with progress events.
    """
    name = (level or os.environ.get("DEPAUDIT_LOG_LEVEL") or DEFAULT_LEVEL).upper()
    if name not in _LEVELS:
        raise ValueError(f"unknown log level {name!r}, expected one of {', '.join(_LEVELS)}")
    return name


def _renderer(log_format: str) -> structlog.types.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=False)


def setup_logging(level: str | None = None) -> None:
    """Route structlog and stdlib logging to stderr.

    Environment:
        DEPAUDIT_LOG_LEVEL  level name, overridden by *level*
        DEPAUDIT_LOG_FORMAT console | json (default: console)

    stdout is left to the CLI so ``depaudit analyze --json`` stays parseable.
    """
    log_level = resolve_level(level)
    renderer = _renderer(os.environ.get("DEPAUDIT_LOG_FORMAT", "console").lower())

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=shared_processors
        + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "depaudit": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "foreign_pre_chain": shared_processors,
                    "processors": [
                        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                        renderer,
                    ],
                },
            },
            "handlers": {
                "stderr": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stderr",
                    "formatter": "depaudit",
                },
            },
            "loggers": {
                "depaudit": {"handlers": ["stderr"], "level": log_level, "propagate": False},
            },
            "root": {"level": "WARNING"},
        }
    )
