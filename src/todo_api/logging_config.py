"""
Logging setup for the todo backend.

All modules log through ``logging.getLogger(__name__)``; this module only
builds a dictConfig mapping and applies it. Call ``setup_logging`` once at
process start, before the app is built.

SQL statements are shown by raising the ``sqlalchemy.engine`` logger to INFO,
never through ``create_engine(echo=True)``, so each statement is written once.
"""
from __future__ import annotations

import logging
import logging.config
from typing import Any, Dict

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _resolve_level(level: str) -> str:
    name = level.strip().upper()
    # getLevelName returns a "Level X" string for unknown names
    return name if isinstance(logging.getLevelName(name), int) else "INFO"


def make_dict_config(level: str = "INFO", sql_echo: bool = False) -> Dict[str, Any]:
    """Build the dictConfig mapping: one stdout handler shared by every logger."""
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {"format": LOG_FORMAT},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "standard",
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            "": {
                "handlers": ["console"],
                "level": _resolve_level(level),
            },
            "uvicorn.access": {
                "level": "WARNING",
                "handlers": ["console"],
                "propagate": False,
            },
            "sqlalchemy.engine": {
                "level": "INFO" if sql_echo else "WARNING",
                "handlers": ["console"],
                "propagate": False,
            },
        },
    }


# PUBLIC_INTERFACE
def setup_logging(level: str = "INFO", sql_echo: bool = False) -> None:
    """Apply the logging configuration to the running process."""
    logging.config.dictConfig(make_dict_config(level, sql_echo))
