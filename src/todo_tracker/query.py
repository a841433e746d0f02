from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from .models import Priority, TodoEntity
from .utils import parse_datetime_or_none


@dataclass(frozen=True)
class TodoFilter:
    """
    Filter constraints for listing todos. Unset fields do not constrain;
    set fields are AND-ed together.
    """
    completed: Optional[bool] = None
    priority: Optional[Priority] = None
    due_before: Optional[datetime] = None
    due_after: Optional[datetime] = None
    search: Optional[str] = None

    # PUBLIC_INTERFACE
    @classmethod
    def from_params(
        cls,
        completed: Optional[bool] = None,
        priority: Optional[Priority] = None,
        due_before: Optional[str] = None,
        due_after: Optional[str] = None,
        search: Optional[str] = None,
    ) -> "TodoFilter":
        """
        Build a filter from raw query values. Date bounds that do not match the
        wire format are dropped rather than reported.
        """
        return cls(
            completed=completed,
            priority=priority,
            due_before=parse_datetime_or_none(due_before),
            due_after=parse_datetime_or_none(due_after),
            search=search,
        )

    def matches(self, todo: TodoEntity) -> bool:
        if self.completed is not None and todo["completed"] != self.completed:
            return False
        if self.priority is not None and todo["priority"] != self.priority:
            return False
        due = todo.get("due_date")
        if self.due_before is not None and (due is None or not due < self.due_before):
            return False
        if self.due_after is not None and (due is None or not due > self.due_after):
            return False
        if self.search:
            s = self.search.lower()
            title_ok = s in (todo.get("title") or "").lower()
            desc_ok = s in (todo.get("description") or "").lower()
            if not (title_ok or desc_ok):
                return False
        return True


def _nulls_last(value: Any) -> Tuple[bool, Any]:
    return (value is None, value if value is not None else 0)


def _title_key(todo: TodoEntity) -> Tuple[bool, Any]:
    title = todo.get("title")
    return _nulls_last(title.casefold() if title is not None else None)


def _priority_key(todo: TodoEntity) -> int:
    return todo["priority"].ordinal


def _due_date_key(todo: TodoEntity) -> Tuple[bool, Any]:
    return _nulls_last(todo.get("due_date"))


def _created_at_key(todo: TodoEntity) -> Tuple[bool, Any]:
    return _nulls_last(todo.get("created_at"))


SORT_KEYS: Dict[str, Callable[[TodoEntity], Any]] = {
    "title": _title_key,
    "priority": _priority_key,
    "duedate": _due_date_key,
    "createdat": _created_at_key,
}

DEFAULT_SORT_FIELD = "createdat"
DEFAULT_SORT_ORDER = "desc"


@dataclass(frozen=True)
class SortSpec:
    """
    Sort field and direction for listing todos.

    field is matched case-insensitively against title, priority, duedate and
    createdat; anything else sorts by createdat. Only order 'desc' reverses.
    """
    field: str = DEFAULT_SORT_FIELD
    order: str = DEFAULT_SORT_ORDER

    @property
    def key(self) -> Callable[[TodoEntity], Any]:
        return SORT_KEYS.get((self.field or "").lower(), SORT_KEYS[DEFAULT_SORT_FIELD])

    @property
    def descending(self) -> bool:
        return (self.order or "").lower() == "desc"


# PUBLIC_INTERFACE
def apply_query(
    todos: Iterable[TodoEntity],
    todo_filter: Optional[TodoFilter] = None,
    sort: Optional[SortSpec] = None,
) -> List[TodoEntity]:
    """
    Filter and order a collection of todos.

    Descending order reverses the whole ordering, so records without a title
    or due date come first instead of last. The input is left untouched; a
    new list is returned.
    """
    f = todo_filter or TodoFilter()
    s = sort or SortSpec()
    items = [t for t in todos if f.matches(t)]
    return sorted(items, key=s.key, reverse=s.descending)
