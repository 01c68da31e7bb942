from __future__ import annotations

import json
from typing import Annotated, Any, Dict, Type, TypeVar

from fastapi import APIRouter, Depends, Path, Request, Response, status
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError

from ..schemas import (
    TODO_ID_PATTERN,
    ErrorResponse,
    TodoCreate,
    TodoEnvelope,
    TodoListEnvelope,
    TodoOut,
    TodoUpdate,
)
from ..services import TodoService, get_todo_service

router = APIRouter(
    prefix="/api/todos",
    tags=["todos"],
)

_ERRORS = {
    400: {"model": ErrorResponse, "description": "Validation error"},
    500: {"model": ErrorResponse, "description": "Persistence failure"},
}
_ERRORS_WITH_404 = {**_ERRORS, 404: {"model": ErrorResponse, "description": "Todo not found"}}

TodoId = Annotated[str, Path(pattern=TODO_ID_PATTERN, description="Numeric identifier of the todo item")]

_FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")
# Form fields arrive as text; only the completion flag is read as a boolean
_FORM_BOOLEANS = {"true": True, "false": False}

ModelT = TypeVar("ModelT", bound=BaseModel)


def _request_body(model: Type[BaseModel], required: bool) -> Dict[str, Any]:
    """OpenAPI requestBody for routes that read JSON or form-encoded bodies."""
    schema = model.model_json_schema()
    return {
        "requestBody": {
            "required": required,
            "content": {
                "application/json": {"schema": schema},
                "application/x-www-form-urlencoded": {"schema": schema},
            },
        }
    }


async def _read_body(request: Request) -> Any:
    """
    Parse a JSON or form-encoded request body.
    An absent body reads as an empty object.
    """
    content_type = request.headers.get("content-type", "").lower()
    if content_type.startswith(_FORM_CONTENT_TYPES):
        form = await request.form()
        data = dict(form.items())
        if isinstance(data.get("completed"), str):
            data["completed"] = _FORM_BOOLEANS.get(data["completed"].strip().lower(), data["completed"])
        return data

    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        return json.loads(raw)
    except ValueError as exc:
        raise RequestValidationError(
            [{"type": "json_invalid", "loc": ("body",), "msg": "JSON decode error", "input": {}}]
        ) from exc


def _validate(model: Type[ModelT], data: Any) -> ModelT:
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise RequestValidationError(
            [{**err, "loc": ("body", *err["loc"])} for err in exc.errors(include_url=False)]
        ) from exc


async def create_payload(request: Request) -> TodoCreate:
    return _validate(TodoCreate, await _read_body(request))


async def update_payload(request: Request) -> TodoUpdate:
    return _validate(TodoUpdate, await _read_body(request))


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=TodoEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create Todo",
    description="Create a new Todo item from a JSON or form-encoded body and return the created resource.",
    responses={**_ERRORS, 409: {"model": ErrorResponse, "description": "Data conflict"}},
    openapi_extra=_request_body(TodoCreate, required=True),
)
@router.post("/", response_model=TodoEnvelope, status_code=status.HTTP_201_CREATED, include_in_schema=False)
def create_todo(
    payload: TodoCreate = Depends(create_payload),
    service: TodoService = Depends(get_todo_service),
) -> TodoEnvelope:
    """
    Create a new Todo.
    """
    created = service.create_todo(payload.title)
    return TodoEnvelope(data=TodoOut.model_validate(created))


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=TodoListEnvelope,
    summary="List Todos",
    description="List all todos, most recently created first.",
    responses=_ERRORS,
)
@router.get("/", response_model=TodoListEnvelope, include_in_schema=False)
def list_todos(service: TodoService = Depends(get_todo_service)) -> TodoListEnvelope:
    """
    List every Todo, newest first.
    """
    todos = service.get_todos()
    return TodoListEnvelope(data=[TodoOut.model_validate(t) for t in todos])


# PUBLIC_INTERFACE
@router.get(
    "/{todo_id}",
    response_model=TodoEnvelope,
    summary="Get Todo",
    description="Get a single Todo item by ID.",
    responses=_ERRORS_WITH_404,
)
def get_todo(todo_id: TodoId, service: TodoService = Depends(get_todo_service)) -> TodoEnvelope:
    """
    Retrieve a single Todo item by its ID.
    """
    todo = service.get_todo_by_id(int(todo_id))
    return TodoEnvelope(data=TodoOut.model_validate(todo))


# PUBLIC_INTERFACE
@router.patch(
    "/{todo_id}",
    response_model=TodoEnvelope,
    summary="Update Todo",
    description=(
        "Partially update the title and/or completion flag of a Todo item. "
        "A missing body is treated as an empty object."
    ),
    responses=_ERRORS_WITH_404,
    openapi_extra=_request_body(TodoUpdate, required=False),
)
def update_todo(
    todo_id: TodoId,
    payload: TodoUpdate = Depends(update_payload),
    service: TodoService = Depends(get_todo_service),
) -> TodoEnvelope:
    """
    Partial update of a Todo item.
    """
    updated = service.update_todo(int(todo_id), payload.changes())
    return TodoEnvelope(data=TodoOut.model_validate(updated))


# PUBLIC_INTERFACE
@router.delete(
    "/{todo_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete Todo",
    description="Delete a Todo item by ID.",
    responses=_ERRORS_WITH_404,
)
def delete_todo(todo_id: TodoId, service: TodoService = Depends(get_todo_service)) -> Response:
    """
    Delete a Todo. Returns 204 on success, 404 if not found.
    """
    service.delete_todo(int(todo_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
