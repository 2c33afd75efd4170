"""
structlog setup for the booking service.

JSON lines at INFO and above for the log pipeline, coloured console output
at DEBUG. Every event carries ``service`` plus whatever the request
middleware bound (``request_id``).
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Callable, MutableMapping, Optional, cast

import structlog

from villa_booking.config import LOG_LEVEL

Processor = Callable[[Any, str, MutableMapping[str, Any]], Any]

SERVICE_NAME = "villa-booking"

# Driver, pool and token libraries log per query/request at INFO or DEBUG
NOISY_LOGGERS = (
    "urllib3",
    "requests",
    "sqlalchemy.engine",
    "sqlalchemy.pool",
    "psycopg2",
    "jose",
    "alembic.runtime.migration",
    "uvicorn.access",
)


def add_service_name(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def _renderer(level: str) -> Processor:
    if level == "DEBUG":
        return cast(Processor, structlog.dev.ConsoleRenderer(colors=True))
    return cast(Processor, structlog.processors.JSONRenderer())


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure stdlib logging and structlog for the process.

    Args:
        level: Log level name, defaults to ``LOG_LEVEL`` from the environment
    """
    level = (level or LOG_LEVEL).upper()

    logging.basicConfig(
        format="[%(asctime)s] %(levelname)s in %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        level=level,
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            add_service_name,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            _renderer(level),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
