"""
Process entry point.

Usage:
    todo-backend
    python -m todo_api.server

Reads ``.env`` if present, refuses to start without ``DATABASE_URL`` and
serves the app with uvicorn on ``HOST``:``PORT`` (default port 4000).
"""
from __future__ import annotations

import logging
import sys

import uvicorn
from dotenv import load_dotenv

from .logging_config import setup_logging
from .main import create_app
from .settings import ConfigurationError, get_settings

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
def main() -> int:
    """Load configuration and run the server until it is stopped."""
    load_dotenv()
    try:
        settings = get_settings()
    except ConfigurationError as exc:
        setup_logging()
        logger.error("Refusing to start: %s", exc)
        return 1

    setup_logging(settings.log_level, sql_echo=settings.sql_echo)
    app = create_app(settings)
    logger.info("Starting server on %s:%d", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)
    return 0


if __name__ == "__main__":
    sys.exit(main())
