"""
Logging setup for the admin backend.

JSON lines by default so container log collectors can index them;
``LOG_FORMAT=plain`` switches to a human-readable format for local runs.
"""

import logging.config
import sys

from .config import LOG_FORMAT, LOG_LEVEL


def get_logging_config(level: str = LOG_LEVEL, fmt: str = LOG_FORMAT) -> dict:
    """
    Build a ``dictConfig`` mapping.

    Args:
        level: Level for the application loggers
        fmt: ``json`` or ``plain``

    Returns:
        Logging configuration dictionary
    """
    formatter = "json" if fmt == "json" else "plain"
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": "pythonjsonlogger.jsonlogger.JsonFormatter",
                "format": "%(asctime)s %(name)s %(levelname)s %(message)s",
            },
            "plain": {
                "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": formatter,
                "stream": sys.stdout,
            },
        },
        "root": {
            "handlers": ["console"],
            "level": "WARNING",
        },
        "loggers": {
            "storeadmin": {
                "handlers": ["console"],
                "level": level,
                "propagate": False,
            },
            "uvicorn.error": {
                "handlers": ["console"],
                "level": "INFO",
                "propagate": False,
            },
            "sqlalchemy.engine": {
                "handlers": ["console"],
                "level": "WARNING",
                "propagate": False,
            },
        },
    }


def setup_logging() -> None:
    logging.config.dictConfig(get_logging_config())
