from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional, TypedDict


# PUBLIC_INTERFACE
class Priority(str, Enum):
    """
    Priority of a todo item.

    Members are declared HIGH, MEDIUM, LOW; sorting by priority follows this
    declaration order, not the numeric level.
    """

    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"

    @property
    def level(self) -> int:
        return _LEVELS[self]

    @property
    def color(self) -> str:
        return _COLORS[self]

    @property
    def ordinal(self) -> int:
        return list(Priority).index(self)


_LEVELS = {Priority.HIGH: 3, Priority.MEDIUM: 2, Priority.LOW: 1}
_COLORS = {Priority.HIGH: "#FF0000", Priority.MEDIUM: "#FFA500", Priority.LOW: "#00FF00"}


# PUBLIC_INTERFACE
class TodoEntity(TypedDict):
    """
    A lightweight domain model representing a Todo item held by the record store.

    Fields:
    - id: Unique integer identifier, assigned by the store
    - owner_id: Identity of the user who created the item, never changes
    - title: Short title (1..200 chars, trimmed on input via schemas)
    - description: Optional detailed description (<= 1000 chars)
    - completed: Boolean completion flag
    - priority: HIGH, MEDIUM or LOW
    - due_date: Optional naive due datetime
    - created_at: Local creation timestamp, never changes
    - updated_at: Local last update timestamp
    """

    id: int
    owner_id: str
    title: str
    description: Optional[str]
    completed: bool
    priority: Priority
    due_date: Optional[datetime]
    created_at: datetime
    updated_at: datetime
