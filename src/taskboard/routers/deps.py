from __future__ import annotations

from fastapi import Request

from ..repositories import Store
from ..services import CategoryService, TaskService


def get_store(request: Request) -> Store:
    """
    Return the document store created once at application start-up.
    """
    return request.app.state.store


def get_task_service(request: Request) -> TaskService:
    return TaskService(get_store(request).tasks)


def get_category_service(request: Request) -> CategoryService:
    return CategoryService(get_store(request).categories)
