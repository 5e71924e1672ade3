from __future__ import annotations

import logging
import sys
from logging.config import dictConfig

_configured = False


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger once per process.

    Streamlit re-executes the entry script on every interaction, so repeated
    calls only adjust the level.
    """
    global _configured
    if _configured:
        logging.getLogger().setLevel(level)
        return

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "stream": sys.stdout,
                    "formatter": "default",
                },
            },
            "loggers": {
                # Streamlit's own loggers are chatty at DEBUG.
                "streamlit": {"level": "WARNING"},
            },
            "root": {
                "level": level,
                "handlers": ["console"],
            },
        }
    )
    _configured = True
