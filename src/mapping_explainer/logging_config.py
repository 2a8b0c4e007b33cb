"""Structured logging setup."""
import logging

import structlog


def configure_logging(log_format: str = "json", log_level: str = "INFO") -> None:
    """Configure structlog with ISO timestamps and log levels."""
    level = getattr(logging, log_level.upper(), logging.INFO)
    renderer = (
        structlog.dev.ConsoleRenderer()
        if log_format == "console"
        else structlog.processors.JSONRenderer()
    )
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )
