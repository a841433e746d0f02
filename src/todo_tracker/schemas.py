from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel

from .models import Priority, TodoEntity
from .utils import DATETIME_FORMAT, format_datetime, parse_datetime

_WIRE_CONFIG = dict(alias_generator=to_camel, populate_by_name=True)


def _parse_due_date(value: Any) -> Optional[datetime]:
    """
    Normalize dueDate input into a naive datetime.
    - None stays None.
    - A datetime is returned as-is.
    - A string must match the wire format exactly (e.g. '2025-08-30T17:00:00').
    """
    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            return parse_datetime(value.strip())
        except ValueError as e:
            raise ValueError(
                f"Invalid dueDate format. Use {DATETIME_FORMAT!r} (e.g., '2025-08-30T17:00:00')."
            ) from e
    raise ValueError("Invalid type for dueDate; expected a date-time string.")


# PUBLIC_INTERFACE
class TodoIn(BaseModel):
    """
    Schema for creating or replacing a Todo item.

    Server-managed fields sent by the client (id, userId, createdAt, updatedAt)
    are ignored.
    """

    model_config = ConfigDict(
        **_WIRE_CONFIG,
        json_schema_extra={
            "example": {
                "title": "Complete REST training",
                "description": "Finish all exercises and tests",
                "completed": False,
                "priority": "HIGH",
                "dueDate": "2025-08-30T17:00:00",
            }
        },
    )

    title: str = Field(..., description="Short title for the todo item", min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, description="Optional detailed description", max_length=1000)
    completed: bool = Field(default=False, description="Completion status flag")
    priority: Priority = Field(default=Priority.MEDIUM, description="HIGH, MEDIUM or LOW")
    due_date: Optional[datetime] = Field(
        default=None,
        description="Due date/time in the form yyyy-MM-ddTHH:mm:ss, no offset",
    )

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """
        Strip whitespace and enforce 1..200 length.
        """
        s = v.strip()
        if not (1 <= len(s) <= 200):
            raise ValueError("title length must be between 1 and 200 characters")
        return s

    @field_validator("priority", mode="before")
    @classmethod
    def unwrap_priority(cls, v: Any) -> Any:
        """
        Accept the serialized {"value": ...} object as well as a bare name.
        """
        if isinstance(v, dict):
            return v.get("value")
        return v

    @field_validator("due_date", mode="before")
    @classmethod
    def parse_due_date(cls, v: Any) -> Optional[datetime]:
        return _parse_due_date(v)


# PUBLIC_INTERFACE
class PriorityOut(BaseModel):
    """
    Wire shape of a priority: {"value": "HIGH", "level": 3, "color": "#FF0000"}.
    """

    value: str
    level: int
    color: str

    @classmethod
    def from_priority(cls, priority: Priority) -> "PriorityOut":
        return cls(value=priority.value, level=priority.level, color=priority.color)


# PUBLIC_INTERFACE
class TodoSummary(BaseModel):
    """
    Compact projection returned by the list endpoint. It has no description,
    due date, owner or timestamps.
    """

    model_config = ConfigDict(**_WIRE_CONFIG)

    id: int = Field(..., description="Unique identifier of the todo item")
    title: str = Field(..., description="Short title for the todo item")
    completed: bool = Field(..., description="Completion status flag")
    priority: PriorityOut = Field(..., description="Priority with level and display color")

    @classmethod
    def from_entity(cls, todo: TodoEntity) -> "TodoSummary":
        return cls(
            id=todo["id"],
            title=todo["title"],
            completed=todo["completed"],
            priority=PriorityOut.from_priority(todo["priority"]),
        )


# PUBLIC_INTERFACE
class TodoDetail(TodoSummary):
    """
    Full projection returned for single items and for the admin listing.
    """

    model_config = ConfigDict(
        **_WIRE_CONFIG,
        json_schema_extra={
            "example": {
                "id": 1,
                "title": "Complete REST training",
                "description": "Finish all exercises and tests",
                "completed": False,
                "priority": {"value": "HIGH", "level": 3, "color": "#FF0000"},
                "dueDate": "2025-08-30T17:00:00",
                "createdAt": "2025-08-01T10:15:30",
                "updatedAt": "2025-08-01T10:15:30",
                "userId": "alice",
            }
        },
    )

    description: Optional[str] = Field(default=None, description="Optional detailed description")
    due_date: Optional[datetime] = Field(default=None, description="Due date/time")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")
    user_id: str = Field(..., description="Identity of the owner")

    @field_serializer("due_date", "created_at", "updated_at", when_used="json-unless-none")
    def serialize_datetime(self, value: datetime) -> str:
        return format_datetime(value)

    @classmethod
    def from_entity(cls, todo: TodoEntity) -> "TodoDetail":
        return cls(
            id=todo["id"],
            title=todo["title"],
            completed=todo["completed"],
            priority=PriorityOut.from_priority(todo["priority"]),
            description=todo["description"],
            due_date=todo["due_date"],
            created_at=todo["created_at"],
            updated_at=todo["updated_at"],
            user_id=todo["owner_id"],
        )


# PUBLIC_INTERFACE
class TodoStatsOut(BaseModel):
    """
    Aggregate statistics over all todos.
    """

    model_config = ConfigDict(**_WIRE_CONFIG)

    total_todos: int
    completed_todos: int
    pending_todos: int
    by_priority: Dict[str, int] = Field(default_factory=dict, description="Count per priority name")
    by_user: Dict[str, int] = Field(default_factory=dict, description="Count per owner")
    overdue_todos: int
