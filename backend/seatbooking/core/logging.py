"""
Structured logging configuration using structlog.
Outputs JSON in production, pretty-printed in development.

Every event carries the cinema and movie being served, so logs from several
patron API instances can be told apart. Inventory client traffic has its own
level (INVENTORY_LOG_LEVEL) to allow tracing service calls without turning on
DEBUG everywhere.
"""

import logging
import sys
from typing import Optional

import structlog

from seatbooking.core.config import Settings, get_settings

INVENTORY_CLIENT_LOGGER = "seatbooking.infrastructure.inventory_client"


def _level(name: str) -> int:
    return getattr(logging, name.upper(), logging.INFO)


def _add_screening(settings: Settings):
    def processor(logger, method_name, event_dict):
        event_dict.setdefault("cinema", settings.CINEMA_NAME)
        event_dict.setdefault("movie", settings.MOVIE_TITLE)
        return event_dict
    return processor


def setup_logging(settings: Optional[Settings] = None) -> None:
    settings = settings or get_settings()

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        _add_screening(settings),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if settings.ENVIRONMENT == "production":
        shared_processors.append(structlog.processors.format_exc_info)
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=settings.DEBUG)

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ]
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(_level(settings.LOG_LEVEL))

    logging.getLogger(INVENTORY_CLIENT_LOGGER).setLevel(_level(settings.INVENTORY_LOG_LEVEL))

    # httpx logs every inventory request at INFO; the client logs its own events
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
