import logging

import structlog


def configure_logging(level: int | str = logging.INFO) -> None:
    """Configure structlog on top of standard logging, JSON lines to stderr."""

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    if isinstance(level, str):
        level = level.upper()
    logging.basicConfig(level=level, format="%(message)s")


def get_logger(service: str) -> structlog.stdlib.BoundLogger:
    # Lazy proxy; configuration is resolved on first use, not at import.
    return structlog.get_logger(service=service)
