from __future__ import annotations

import itertools
import logging
from abc import ABC, abstractmethod
from threading import Lock
from typing import Dict, List, Optional

from .models import TodoEntity

logger = logging.getLogger(__name__)


class RecordNotFound(LookupError):
    """Raised by Repository.put when no record exists at the given id."""

    def __init__(self, todo_id: int) -> None:
        super().__init__(f"Todo {todo_id} not found")
        self.todo_id = todo_id


# PUBLIC_INTERFACE
class Repository(ABC):
    """Abstract repository contract for todo storage backends."""

    @abstractmethod
    def create(self, record: TodoEntity) -> int:
        """Assign the next id to record, store it and return the id."""

    @abstractmethod
    def get(self, todo_id: int) -> Optional[TodoEntity]:
        """Return a TodoEntity by id, or None if not found."""

    @abstractmethod
    def put(self, todo_id: int, record: TodoEntity) -> None:
        """Replace the record stored at todo_id. Raise RecordNotFound if absent."""

    @abstractmethod
    def delete(self, todo_id: int) -> bool:
        """Delete a TodoEntity by id. Return True if deleted, False if not found."""

    @abstractmethod
    def list_all(self) -> List[TodoEntity]:
        """Return an unordered snapshot of every stored TodoEntity."""

    @abstractmethod
    def reset(self) -> None:
        """Remove every record and restart id assignment at 1."""


class InMemoryTodoStore(Repository):
    """
    Thread-safe in-memory record store.

    Id allocation is guarded by its own lock. Replacing and deleting a record
    take a striped per-key lock, so writers to different ids do not wait on
    each other. Reads go straight to the dict and always see a whole record.
    """

    STRIPES = 16

    def __init__(self) -> None:
        self._id_lock = Lock()
        self._key_locks = [Lock() for _ in range(self.STRIPES)]
        self._items: Dict[int, TodoEntity] = {}
        self._ids = itertools.count(1)

    def _lock_for(self, todo_id: int) -> Lock:
        return self._key_locks[hash(todo_id) % self.STRIPES]

    def _allocate_id(self) -> int:
        with self._id_lock:
            return next(self._ids)

    def create(self, record: TodoEntity) -> int:
        todo_id = self._allocate_id()
        entity = record.copy()
        entity["id"] = todo_id
        with self._lock_for(todo_id):
            self._items[todo_id] = entity
        logger.debug("Stored todo %s", todo_id)
        return todo_id

    def get(self, todo_id: int) -> Optional[TodoEntity]:
        item = self._items.get(todo_id)
        return None if item is None else item.copy()

    def put(self, todo_id: int, record: TodoEntity) -> None:
        with self._lock_for(todo_id):
            if todo_id not in self._items:
                raise RecordNotFound(todo_id)
            entity = record.copy()
            entity["id"] = todo_id
            self._items[todo_id] = entity

    def delete(self, todo_id: int) -> bool:
        with self._lock_for(todo_id):
            return self._items.pop(todo_id, None) is not None

    def list_all(self) -> List[TodoEntity]:
        # dict.copy() is a single atomic step, iteration then runs on the copy
        snapshot = self._items.copy()
        return [t.copy() for t in snapshot.values()]

    def reset(self) -> None:
        with self._id_lock:
            for lock in self._key_locks:
                lock.acquire()
            try:
                self._items.clear()
                self._ids = itertools.count(1)
            finally:
                for lock in self._key_locks:
                    lock.release()
        logger.info("Record store reset")
