from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Literal, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictStr,
    field_serializer,
    field_validator,
)

# Path parameters are validated as ASCII digit strings before conversion to int
TODO_ID_PATTERN = r"^[0-9]+$"


def _clean_title(value: str) -> str:
    s = value.strip()
    if not s:
        raise ValueError("title must not be empty")
    return s


# PUBLIC_INTERFACE
class TodoCreate(BaseModel):
    """
    Schema for creating a new Todo item.
    """

    model_config = ConfigDict(json_schema_extra={"example": {"title": "Buy milk"}})

    title: StrictStr = Field(..., description="Short title for the todo item", min_length=1)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """
        Strip whitespace and reject titles that are blank afterwards.
        """
        return _clean_title(v)


# PUBLIC_INTERFACE
class TodoUpdate(BaseModel):
    """
    Schema for updating an existing Todo item.
    Both fields are optional and an empty object is valid; only provided
    fields will be updated. Explicit nulls are rejected.
    """

    model_config = ConfigDict(
        json_schema_extra={"example": {"title": "Buy oat milk", "completed": True}}
    )

    title: Optional[StrictStr] = Field(default=None, description="Short title for the todo item", min_length=1)
    completed: Optional[StrictBool] = Field(default=None, description="Completion status flag")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("title must not be null")
        return _clean_title(v)

    @field_validator("completed")
    @classmethod
    def validate_completed(cls, v: Optional[bool]) -> bool:
        if v is None:
            raise ValueError("completed must not be null")
        return v

    def changes(self) -> dict:
        """Return only the fields the client actually sent."""
        return self.model_dump(exclude_unset=True)


# PUBLIC_INTERFACE
class TodoOut(BaseModel):
    """
    Schema returned by the API for a Todo item.
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "title": "Buy milk",
                "completed": False,
                "createdAt": "2025-01-25T10:15:30.123456+00:00",
            }
        },
    )

    id: int = Field(..., description="Unique identifier of the todo item")
    title: str = Field(..., description="Short title for the todo item")
    completed: bool = Field(..., description="Completion status flag")
    created_at: datetime = Field(..., alias="createdAt", description="Creation timestamp (UTC)")

    @field_serializer("created_at")
    def serialize_created_at(self, value: datetime) -> str:
        """Always emit an explicit UTC offset."""
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).isoformat()


class TodoEnvelope(BaseModel):
    """Success envelope for a single Todo."""

    success: Literal[True] = True
    data: TodoOut


class TodoListEnvelope(BaseModel):
    """Success envelope for a list of Todos."""

    success: Literal[True] = True
    data: List[TodoOut]


class ErrorResponse(BaseModel):
    """Body of every non-2xx response."""

    status: Literal["error"] = "error"
    message: str
