"""Structured logging setup."""

from logging import getLevelNamesMapping
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from loco_agent.models import AgentSettings


def configure_logging(settings: 'AgentSettings') -> None:
    """Configure structlog processors from agent settings.

    Args:
        settings: Resolved agent settings.
    """
    renderer = (
        structlog.processors.JSONRenderer()
        if settings.log_json
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt='iso'),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getLevelNamesMapping()[settings.log_level],
        ),
        cache_logger_on_first_use=False,
    )
