from __future__ import annotations

import logging
import os
from typing import Any, Dict, Generator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .models import Base

logger = logging.getLogger(__name__)


def _engine_kwargs(database_url: str) -> Dict[str, Any]:
    url = make_url(database_url)
    kwargs: Dict[str, Any] = {"pool_pre_ping": True}
    if url.get_backend_name() == "sqlite":
        # Sessions are used from FastAPI's threadpool
        kwargs["connect_args"] = {"check_same_thread": False}
        if url.database in (None, "", ":memory:"):
            # In-memory databases live and die with their single connection
            kwargs["poolclass"] = StaticPool
        else:
            os.makedirs(os.path.dirname(url.database) or ".", exist_ok=True)
    return kwargs


# PUBLIC_INTERFACE
class Database:
    """
    Owns the SQLAlchemy engine and session factory for the process.

    The engine is created eagerly but connects lazily; ``create_all`` is run
    before the app starts serving and ``dispose`` when it shuts down.
    """

    def __init__(self, database_url: str) -> None:
        self._engine: Engine = create_engine(database_url, **_engine_kwargs(database_url))
        self._session_factory = sessionmaker(
            bind=self._engine, autoflush=False, expire_on_commit=False
        )

    @property
    def engine(self) -> Engine:
        return self._engine

    def create_all(self) -> None:
        Base.metadata.create_all(bind=self._engine)
        logger.info("Database schema ready (%s)", self._engine.url.render_as_string(hide_password=True))

    def session(self) -> Session:
        return self._session_factory()

    def dispose(self) -> None:
        self._engine.dispose()
        logger.info("Database connections released")


# PUBLIC_INTERFACE
def get_session(request: Request) -> Generator[Session, None, None]:
    """
    FastAPI dependency yielding a session bound to the app's Database.
    The session is closed once the response has been produced.
    """
    database: Database = request.app.state.database
    session = database.session()
    try:
        yield session
    finally:
        session.close()
