from __future__ import annotations

import logging
from typing import List

from .errors import ConflictError, NotFoundError, ValidationError
from .models import TaskEntity
from .repositories import CategoryRepository, TaskRepository
from .schemas import TaskCreate, TaskUpdate

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
class TaskService:
    """
    Create/read/update/delete operations over the tasks collection.

    Raises:
        ValidationError: empty title on create or update
        NotFoundError: the task id does not exist
        StoreError: propagated from the repository
    """

    def __init__(self, repo: TaskRepository) -> None:
        self._repo = repo

    def list(self) -> List[TaskEntity]:
        return self._repo.list()

    def get(self, task_id: str) -> TaskEntity:
        task = self._repo.get(task_id)
        if task is None:
            raise NotFoundError("Task not found")
        return task

    def create(self, data: TaskCreate) -> TaskEntity:
        if not data.title:
            raise ValidationError("Task title cannot be empty")
        task = self._repo.create(data)
        logger.info("Created task %s (category=%s)", task["id"], task["category"])
        return task

    def update(self, task_id: str, data: TaskUpdate) -> TaskEntity:
        changes = data.changes()
        if "title" in changes and not changes["title"]:
            raise ValidationError("Task title cannot be empty")
        updated = self._repo.update(task_id, changes)
        if updated is None:
            raise NotFoundError("Task not found")
        logger.debug("Updated task %s fields=%s", task_id, sorted(changes))
        return updated

    def delete(self, task_id: str) -> None:
        if not self._repo.delete(task_id):
            raise NotFoundError("Task not found")
        logger.info("Deleted task %s", task_id)


def normalize_category_name(name: str) -> str:
    """Categories are stored trimmed and lowercase."""
    return name.strip().lower()


# PUBLIC_INTERFACE
class CategoryService:
    """
    Create/list/delete operations over the categories collection.

    Deleting a category leaves tasks that reference it untouched.
    """

    def __init__(self, repo: CategoryRepository) -> None:
        self._repo = repo

    def list(self) -> List[str]:
        return sorted(c["name"] for c in self._repo.list())

    def create(self, name: str) -> str:
        normalized = normalize_category_name(name)
        if not normalized:
            raise ValidationError("Category name cannot be empty")
        if self._repo.get(normalized) is not None:
            raise ConflictError("Category already exists")
        created = self._repo.create(normalized)
        logger.info("Created category %s", created["name"])
        return created["name"]

    def delete(self, name: str) -> None:
        normalized = normalize_category_name(name)
        if not self._repo.delete(normalized):
            raise NotFoundError("Category not found")
        logger.info("Deleted category %s", normalized)
