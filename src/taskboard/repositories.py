from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from threading import RLock
from typing import Any, Dict, List, Mapping, Optional

from .errors import ConflictError
from .models import CategoryEntity, TaskEntity
from .schemas import TaskCreate
from .settings import Settings, get_settings


def new_task_id() -> str:
    """Return a fresh opaque task identifier."""
    return uuid.uuid4().hex


# PUBLIC_INTERFACE
class TaskRepository(ABC):
    """Abstract repository contract for the tasks collection."""

    @abstractmethod
    def create(self, data: TaskCreate) -> TaskEntity:
        """Persist a new TaskEntity with a store-assigned id and created_at, and return it."""

    @abstractmethod
    def get(self, task_id: str) -> Optional[TaskEntity]:
        """Return a TaskEntity by id, or None if not found."""

    @abstractmethod
    def update(self, task_id: str, changes: Mapping[str, Any]) -> Optional[TaskEntity]:
        """
        Apply `changes` (entity field name -> value) to an existing task.
        Return the updated entity or None if not found. id and created_at are never changed.
        """

    @abstractmethod
    def delete(self, task_id: str) -> bool:
        """Delete a TaskEntity by id. Return True if deleted, False if not found."""

    @abstractmethod
    def list(self) -> List[TaskEntity]:
        """Return every task in natural (insertion) order."""


# PUBLIC_INTERFACE
class CategoryRepository(ABC):
    """Abstract repository contract for the categories collection."""

    @abstractmethod
    def create(self, name: str) -> CategoryEntity:
        """
        Persist a category with an already-normalized name.
        Raise ConflictError if the name is taken.
        """

    @abstractmethod
    def get(self, name: str) -> Optional[CategoryEntity]:
        """Return the category with exactly this (normalized) name, or None."""

    @abstractmethod
    def delete(self, name: str) -> bool:
        """Delete a category by normalized name. Return True if deleted, False if not found."""

    @abstractmethod
    def list(self) -> List[CategoryEntity]:
        """Return every category sorted by name."""


# Fields a task update may touch; id and created_at never change.
MUTABLE_TASK_FIELDS = frozenset({"title", "description", "completed", "priority", "due_date", "category"})


class InMemoryTaskRepository(TaskRepository):
    """
    Thread-safe in-memory tasks collection suitable for testing and default runtime.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        # dicts keep insertion order, which is the natural listing order
        self._items: Dict[str, TaskEntity] = {}

    def _now(self) -> datetime:
        return datetime.now()

    def create(self, data: TaskCreate) -> TaskEntity:
        entity: TaskEntity = {
            "id": new_task_id(),
            "title": data.title,
            "description": data.description,
            "completed": data.completed,
            "priority": data.priority,
            "due_date": data.due_date,
            "category": data.category,
            "created_at": self._now(),
        }
        with self._lock:
            self._items[entity["id"]] = entity
            return entity.copy()

    def get(self, task_id: str) -> Optional[TaskEntity]:
        with self._lock:
            item = self._items.get(task_id)
            return None if item is None else item.copy()

    def update(self, task_id: str, changes: Mapping[str, Any]) -> Optional[TaskEntity]:
        with self._lock:
            existing = self._items.get(task_id)
            if existing is None:
                return None

            updated = existing.copy()
            for field, value in changes.items():
                if field in MUTABLE_TASK_FIELDS:
                    updated[field] = value  # type: ignore[literal-required]

            self._items[task_id] = updated
            return updated.copy()

    def delete(self, task_id: str) -> bool:
        with self._lock:
            return self._items.pop(task_id, None) is not None

    def list(self) -> List[TaskEntity]:
        with self._lock:
            # Return copies to avoid external mutation
            return [t.copy() for t in self._items.values()]


class InMemoryCategoryRepository(CategoryRepository):
    """
    Thread-safe in-memory categories collection keyed by lowercase name.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._items: Dict[str, CategoryEntity] = {}

    def create(self, name: str) -> CategoryEntity:
        with self._lock:
            if name in self._items:
                raise ConflictError("Category already exists")
            entity: CategoryEntity = {"name": name, "created_at": datetime.now()}
            self._items[name] = entity
            return entity.copy()

    def get(self, name: str) -> Optional[CategoryEntity]:
        with self._lock:
            item = self._items.get(name)
            return None if item is None else item.copy()

    def delete(self, name: str) -> bool:
        with self._lock:
            return self._items.pop(name, None) is not None

    def list(self) -> List[CategoryEntity]:
        with self._lock:
            return [c.copy() for c in sorted(self._items.values(), key=lambda c: c["name"])]


# PUBLIC_INTERFACE
@dataclass
class Store:
    """
    The document store: one repository per collection, sharing a backend.
    """

    backend: str
    tasks: TaskRepository
    categories: CategoryRepository


# PUBLIC_INTERFACE
def get_store(settings: Optional[Settings] = None) -> Store:
    """
    Factory to return the configured document store based on settings.
    - memory: in-memory repositories (state lives as long as the process)
    - sqlite: SQLite-backed repositories sharing one database file
    """
    settings = settings or get_settings()
    if settings.persistence_backend == "sqlite":
        from .db import SQLiteCategoryRepository, SQLiteTaskRepository

        return Store(
            backend="sqlite",
            tasks=SQLiteTaskRepository(settings.sqlite_db_path),
            categories=SQLiteCategoryRepository(settings.sqlite_db_path),
        )
    return Store(
        backend="memory",
        tasks=InMemoryTaskRepository(),
        categories=InMemoryCategoryRepository(),
    )
