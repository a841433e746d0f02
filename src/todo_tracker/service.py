from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, Dict, Generic, List, Optional, TypeVar

from .access import Caller, can_view, owns
from .models import Priority, TodoEntity
from .query import SortSpec, TodoFilter, apply_query
from .repositories import RecordNotFound, Repository
from .schemas import TodoIn

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Outcome(str, Enum):
    OK = "ok"
    CREATED = "created"
    NO_CONTENT = "no_content"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of a service operation plus its value, if any."""
    outcome: Outcome
    value: Optional[T] = None

    @property
    def ok(self) -> bool:
        return self.outcome in (Outcome.OK, Outcome.CREATED, Outcome.NO_CONTENT)


_NOT_FOUND: Result = Result(Outcome.NOT_FOUND)
_FORBIDDEN: Result = Result(Outcome.FORBIDDEN)


@dataclass(frozen=True)
class TodoStats:
    total: int
    completed: int
    pending: int
    by_priority: Dict[Priority, int] = field(default_factory=dict)
    by_owner: Dict[str, int] = field(default_factory=dict)
    overdue: int = 0


# PUBLIC_INTERFACE
class TodoService:
    """
    Todo operations on behalf of an authenticated caller.

    Get, update, delete and toggle act only on the caller's own records, for
    admins too, and answer NOT_FOUND both for missing records and for records
    owned by someone else. Admin operations answer FORBIDDEN to callers
    without the admin role before reading anything.

    Update, delete and toggle read the record, check access, then write. Two
    writers racing on the same id can lose an update; a write racing a delete
    answers NOT_FOUND since the store never recreates a removed id.
    """

    def __init__(self, repository: Repository, clock: Callable[[], datetime] = datetime.now) -> None:
        self._repo = repository
        self._clock = clock

    def _owned(self, caller: Caller, todo_id: int) -> Optional[TodoEntity]:
        todo = self._repo.get(todo_id)
        if todo is None or not owns(caller.identity, todo):
            logger.debug("Todo %s not found for %s", todo_id, caller.identity)
            return None
        return todo

    def _store(self, todo_id: int, todo: TodoEntity) -> Result[TodoEntity]:
        try:
            self._repo.put(todo_id, todo)
        except RecordNotFound:
            logger.info("Todo %s removed concurrently", todo_id)
            return _NOT_FOUND
        return Result(Outcome.OK, todo)

    # PUBLIC_INTERFACE
    def list(
        self,
        caller: Caller,
        todo_filter: Optional[TodoFilter] = None,
        sort: Optional[SortSpec] = None,
    ) -> Result[List[TodoEntity]]:
        """Return the caller's own todos, filtered and sorted."""
        own = [t for t in self._repo.list_all() if owns(caller.identity, t)]
        return Result(Outcome.OK, apply_query(own, todo_filter, sort))

    # PUBLIC_INTERFACE
    def get(self, caller: Caller, todo_id: int) -> Result[TodoEntity]:
        todo = self._owned(caller, todo_id)
        if todo is None:
            return _NOT_FOUND
        return Result(Outcome.OK, todo)

    # PUBLIC_INTERFACE
    def create(self, caller: Caller, payload: TodoIn) -> Result[TodoEntity]:
        """
        Store a new todo owned by the caller. The id and timestamps are always
        assigned here, whatever the payload carried.
        """
        now = self._clock()
        todo: TodoEntity = {
            "id": 0,
            "owner_id": caller.identity,
            "title": payload.title,
            "description": payload.description,
            "completed": payload.completed,
            "priority": payload.priority,
            "due_date": payload.due_date,
            "created_at": now,
            "updated_at": now,
        }
        todo["id"] = self._repo.create(todo)
        logger.info("Created todo %s for %s", todo["id"], caller.identity)
        return Result(Outcome.CREATED, todo)

    # PUBLIC_INTERFACE
    def update(self, caller: Caller, todo_id: int, payload: TodoIn) -> Result[TodoEntity]:
        """Replace every caller-supplied field; id, owner and created_at carry over."""
        existing = self._owned(caller, todo_id)
        if existing is None:
            return _NOT_FOUND
        todo: TodoEntity = {
            "id": todo_id,
            "owner_id": existing["owner_id"],
            "title": payload.title,
            "description": payload.description,
            "completed": payload.completed,
            "priority": payload.priority,
            "due_date": payload.due_date,
            "created_at": existing["created_at"],
            "updated_at": self._clock(),
        }
        result = self._store(todo_id, todo)
        if result.ok:
            logger.info("Updated todo %s", todo_id)
        return result

    # PUBLIC_INTERFACE
    def delete(self, caller: Caller, todo_id: int) -> Result[None]:
        if self._owned(caller, todo_id) is None:
            return _NOT_FOUND
        if not self._repo.delete(todo_id):
            return _NOT_FOUND
        logger.info("Deleted todo %s", todo_id)
        return Result(Outcome.NO_CONTENT)

    # PUBLIC_INTERFACE
    def toggle_complete(self, caller: Caller, todo_id: int) -> Result[TodoEntity]:
        todo = self._owned(caller, todo_id)
        if todo is None:
            return _NOT_FOUND
        todo["completed"] = not todo["completed"]
        todo["updated_at"] = self._clock()
        result = self._store(todo_id, todo)
        if result.ok:
            logger.info("Todo %s completed=%s", todo_id, todo["completed"])
        return result

    # PUBLIC_INTERFACE
    def admin_list(self, caller: Caller) -> Result[List[TodoEntity]]:
        """Every stored todo, unfiltered and in no particular order. Admin only."""
        if not caller.is_admin:
            logger.warning("Non-admin %s requested all todos", caller.identity)
            return _FORBIDDEN
        todos = [t for t in self._repo.list_all() if can_view(caller.identity, caller.roles, t)]
        return Result(Outcome.OK, todos)

    # PUBLIC_INTERFACE
    def admin_stats(self, caller: Caller) -> Result[TodoStats]:
        """
        Aggregate counts over every stored todo. Admin only.

        A todo is overdue when it is not completed and its due date lies
        strictly before now.
        """
        if not caller.is_admin:
            logger.warning("Non-admin %s requested todo statistics", caller.identity)
            return _FORBIDDEN
        todos = self._repo.list_all()
        now = self._clock()
        completed = sum(1 for t in todos if t["completed"])
        overdue = sum(
            1
            for t in todos
            if not t["completed"] and t["due_date"] is not None and t["due_date"] < now
        )
        stats = TodoStats(
            total=len(todos),
            completed=completed,
            pending=len(todos) - completed,
            by_priority=dict(Counter(t["priority"] for t in todos)),
            by_owner=dict(Counter(t["owner_id"] for t in todos)),
            overdue=overdue,
        )
        return Result(Outcome.OK, stats)
