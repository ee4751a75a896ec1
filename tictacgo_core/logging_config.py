from __future__ import annotations

import logging
import logging.config
import sys
from typing import Optional


def configure_logging(level: Optional[str] = None) -> None:
    """Installs the console logging setup used by the CLI and the Flask app."""
    if level is None:
        from .config import DEBUG
        level = "DEBUG" if DEBUG else "INFO"
    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "console": {
                "level": level,
                "class": "logging.StreamHandler",
                "formatter": "standard",
                "stream": sys.stderr,
            },
        },
        "loggers": {
            "tictacgo_core": {
                "handlers": ["console"],
                "level": level,
                "propagate": False,
            },
            "werkzeug": {
                "handlers": ["console"],
                "level": "WARNING",
                "propagate": False,
            },
        },
    }
    logging.config.dictConfig(logging_config)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
