from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List

from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .db import get_session
from .errors import AppError, ConflictError, InternalError, NotFoundError
from .models import Todo

logger = logging.getLogger(__name__)

TODO_NOT_FOUND = "Todo Not Found"

# Largest value a 64-bit INTEGER primary key can hold
MAX_TODO_ID = 2**63 - 1

UPDATABLE_FIELDS = ("title", "completed")


@contextmanager
def translate_errors(session: Session, failure_message: str, conflict_message: str | None = None) -> Iterator[None]:
    """
    Turn persistence failures raised inside the block into AppErrors.

    The session is rolled back first. IntegrityError becomes CONFLICT when a
    ``conflict_message`` is given; anything else becomes INTERNAL_ERROR with
    ``failure_message``. AppErrors raised inside the block pass through.
    """
    try:
        yield
    except AppError:
        raise
    except IntegrityError as exc:
        session.rollback()
        if conflict_message is None:
            logger.exception("Integrity error: %s", failure_message)
            raise InternalError(failure_message) from exc
        logger.info("Integrity error: %s (%s)", conflict_message, exc.orig)
        raise ConflictError(conflict_message) from exc
    except Exception as exc:
        session.rollback()
        logger.exception("Database operation failed: %s", failure_message)
        raise InternalError(failure_message) from exc


# PUBLIC_INTERFACE
class TodoService:
    """
    CRUD operations on the todos table.

    Every operation addressing a specific id reads the row first, so a
    missing row is always reported as NOT_FOUND before any write happens.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def create_todo(self, title: str) -> Todo:
        with translate_errors(
            self.session,
            "Failed to Create Todo",
            conflict_message="Unable to create todo due to a data conflict",
        ):
            todo = Todo(title=title, completed=False)
            self.session.add(todo)
            self.session.commit()
            self.session.refresh(todo)
            logger.info("Created todo id=%s", todo.id)
            return todo

    def get_todos(self) -> List[Todo]:
        with translate_errors(
            self.session,
            "Failed to fetch todos",
            conflict_message="Unable to fetch todos due to a data conflict",
        ):
            stmt = select(Todo).order_by(Todo.created_at.desc(), Todo.id.desc())
            return list(self.session.scalars(stmt).all())

    def get_todo_by_id(self, todo_id: int) -> Todo:
        if not 0 <= todo_id <= MAX_TODO_ID:
            raise NotFoundError(TODO_NOT_FOUND)
        todo = self.session.get(Todo, todo_id)
        if todo is None:
            raise NotFoundError(TODO_NOT_FOUND)
        return todo

    def update_todo(self, todo_id: int, data: Dict[str, Any]) -> Todo:
        todo = self.get_todo_by_id(todo_id)

        changes = {
            k: v for k, v in data.items()
            if k in UPDATABLE_FIELDS and getattr(todo, k) != v
        }
        if not changes:
            return todo

        with translate_errors(self.session, "Failed to update todo"):
            for field, value in changes.items():
                setattr(todo, field, value)
            self.session.commit()
            self.session.refresh(todo)
            logger.info("Updated todo id=%s fields=%s", todo_id, sorted(changes))
            return todo

    def delete_todo(self, todo_id: int) -> None:
        todo = self.get_todo_by_id(todo_id)

        with translate_errors(self.session, "Failed to delete todo"):
            self.session.delete(todo)
            self.session.commit()
            logger.info("Deleted todo id=%s", todo_id)


# PUBLIC_INTERFACE
def get_todo_service(session: Session = Depends(get_session)) -> TodoService:
    """FastAPI dependency returning a TodoService bound to the request's session."""
    return TodoService(session)
