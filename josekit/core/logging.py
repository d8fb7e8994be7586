"""Structured logging configuration."""

import logging

import structlog
from structlog.types import Processor

from josekit.core.settings import JoseSettings


def configure_logging(settings: JoseSettings | None = None) -> None:
    """Install structlog processors and a level filter for the host process."""
    settings = settings or JoseSettings()
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    renderer: Processor = (
        structlog.processors.JSONRenderer()
        if settings.log_json
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=False,
    )
