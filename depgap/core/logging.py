"""Structured logging for the CLI and editor adapter: structlog over stdlib logging."""

from __future__ import annotations

import logging
import logging.config
import os

import structlog


def _renderers(log_format: str) -> list[structlog.types.Processor]:
    if log_format == "json":
        return [structlog.processors.TimeStamper(fmt="iso", utc=True), structlog.processors.JSONRenderer()]
    return [structlog.dev.ConsoleRenderer()]


def setup_logging(level: str | None = None) -> None:
    """Route structlog and stdlib records for ``depgap.*`` to stderr.

    Reads from environment variables:
        DEPGAP_LOG_LEVEL  - log level (default: INFO)
        DEPGAP_LOG_FORMAT - console | json (default: console)

    An explicit *level* wins over ``DEPGAP_LOG_LEVEL``. Only json output is
    timestamped; console output is read by a person at a terminal.
    """
    log_level = (level or os.environ.get("DEPGAP_LOG_LEVEL", "INFO")).upper()
    log_format = os.environ.get("DEPGAP_LOG_FORMAT", "console").lower()

    pre_chain: list[structlog.types.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=pre_chain + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # stdout carries command output (--json), so logs never go there.
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "depgap": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "foreign_pre_chain": pre_chain,
                    "processors": [
                        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                        *_renderers(log_format),
                    ],
                },
            },
            "handlers": {
                "stderr": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stderr",
                    "formatter": "depgap",
                },
            },
            "root": {"handlers": ["stderr"], "level": "WARNING"},
            "loggers": {"depgap": {"level": log_level}},
        }
    )
