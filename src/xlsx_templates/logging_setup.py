"""
xlsx-templates - Logging

structlog configuration shared by the web app and the CLI.
"""

from __future__ import annotations

import logging
from typing import Optional

import structlog

from .config import LogConfig, LogFormat


def configure_logging(config: Optional[LogConfig] = None) -> None:
    """Configure structlog processors and level filtering."""
    config = config or LogConfig()
    level = logging.getLevelName(config.level)
    if not isinstance(level, int):
        level = logging.INFO

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if config.format == LogFormat.JSON:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=False,
    )
