"""
logging_config.py — Centralized Logging Configuration

Sets up Loguru as the single logging backend. Intercepts Python's stdlib
logging module so uvicorn, SQLAlchemy and httpx records route through
Loguru with the same format and request context.

Business Rules:
- All logs go through Loguru (no direct print() or stdlib handlers)
- JSON format in production for machine parsing
- Human-readable format in development
- Request ID from middleware is included when available
- Log rotation: 50MB files, 7-day retention

Called by: app/main.py (on import, before the app is built)
Depends on: LOG_LEVEL, APP_URL, LOG_FILE environment variables
"""

import logging
import os
import sys

from loguru import logger

_DEV_HOSTS = ("localhost", "127.0.0.1", "0.0.0.0")


def _is_production(app_url: str) -> bool:
    return bool(app_url) and not any(host in app_url for host in _DEV_HOSTS)


def setup_logging() -> None:
    """Configure Loguru and intercept stdlib logging.

    Call once at app startup, before any other imports that log.
    """
    # Remove Loguru's default stderr handler so we control format
    logger.remove()

    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    is_production = _is_production(os.getenv("APP_URL", ""))

    if is_production:
        # Production: JSON lines to stdout (Docker captures these)
        logger.add(
            sys.stdout,
            level=log_level,
            format="{message}",
            serialize=True,
        )
        logger.add(
            os.getenv("LOG_FILE", "/var/log/general/general.log"),
            level=log_level,
            rotation="50 MB",
            retention="7 days",
            compression="gz",
            serialize=True,
        )
    else:
        logger.add(
            sys.stdout,
            level=log_level,
            format=(
                "<green>{time:HH:mm:ss}</green> | "
                "<level>{level: <8}</level> | "
                "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
                "{extra[request_id]} {message}"
            ),
            colorize=True,
        )

    # Records logged outside a request still need the field for the format
    logger.configure(extra={"request_id": "-"})

    # Intercept stdlib logging → route through Loguru
    logging.basicConfig(handlers=[_InterceptHandler()], level=0, force=True)

    # Quiet noisy third-party loggers
    for noisy in ("httpx", "httpcore", "uvicorn.access", "sqlalchemy.engine"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    logger.info("Logging configured (level={}, production={})", log_level, is_production)


class _InterceptHandler(logging.Handler):
    """Route stdlib logging records to Loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find the caller (skip frames from stdlib logging internals)
        frame, depth = logging.currentframe(), 0
        while frame and (depth == 0 or frame.f_code.co_filename == logging.__file__):
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )
