# slotbook/utils/my_logging.py
"""Logging configuration for the API process and the Celery worker"""
import logging
import sys
from slotbook.config.settings import get_settings

# Chatty at INFO on every request or every task
LIBRARY_LOGGERS = {
    "sqlalchemy.engine": logging.WARNING,
    "sqlalchemy.pool": logging.WARNING,
    "redis": logging.WARNING,
    "kombu": logging.WARNING,
    "amqp": logging.WARNING,
    "celery.beat": logging.INFO,
    "uvicorn.access": logging.WARNING,
}

# The booking engine; kept at the configured level even when quiet
APP_LOGGER = "slotbook"


def setup_logging(verbose=True):
    """Configure application logging"""
    settings = get_settings()

    if verbose:
        level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)]
    )

    # SQL echo only when debugging
    for name, library_level in LIBRARY_LOGGERS.items():
        if settings.DEBUG and name.startswith("sqlalchemy"):
            continue
        logging.getLogger(name).setLevel(max(level, library_level))

    if not verbose:
        for name in ("alembic", "celery", "uvicorn", "uvicorn.error"):
            logging.getLogger(name).setLevel(logging.ERROR)
        logging.getLogger(APP_LOGGER).setLevel(
            getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
        )
