from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status

from ..schemas import ErrorOut, MessageOut, TaskCreate, TaskOut, TaskUpdate
from ..services import TaskService
from .deps import get_task_service

router = APIRouter(
    prefix="/api/tasks",
    tags=["tasks"],
)


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[TaskOut],
    summary="List Tasks",
    description="Return every task in natural store order. Filtering happens client-side.",
    responses={
        200: {"description": "Tasks retrieved successfully"},
        500: {"model": ErrorOut, "description": "Store error"},
    },
)
def list_tasks(service: TaskService = Depends(get_task_service)) -> List[TaskOut]:
    return [TaskOut(**t) for t in service.list()]  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=TaskOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Task",
    description="Create a new task and return the created resource with its id and createdAt.",
    responses={
        201: {"description": "Task created successfully"},
        400: {"model": ErrorOut, "description": "Validation error"},
    },
)
def create_task(payload: TaskCreate, service: TaskService = Depends(get_task_service)) -> TaskOut:
    """
    Create a new Task. Missing fields take their defaults (priority=medium, category=personal).
    """
    created = service.create(payload)
    return TaskOut(**created)  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.get(
    "/{task_id}",
    response_model=TaskOut,
    summary="Get Task",
    description="Get a single task by id.",
    responses={
        200: {"description": "Task found"},
        404: {"model": ErrorOut, "description": "Task not found"},
    },
)
def get_task(task_id: str, service: TaskService = Depends(get_task_service)) -> TaskOut:
    return TaskOut(**service.get(task_id))  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.patch(
    "/{task_id}",
    response_model=TaskOut,
    summary="Update Task",
    description="Partially update fields of a task. id and createdAt cannot be changed.",
    responses={
        200: {"description": "Task updated"},
        400: {"model": ErrorOut, "description": "Validation error"},
        404: {"model": ErrorOut, "description": "Task not found"},
    },
)
def patch_task(task_id: str, payload: TaskUpdate, service: TaskService = Depends(get_task_service)) -> TaskOut:
    """
    Partial update of a Task. Only fields present in the body are applied.
    """
    updated = service.update(task_id, payload)
    return TaskOut(**updated)  # type: ignore[arg-type]


# PUBLIC_INTERFACE
@router.delete(
    "/{task_id}",
    response_model=MessageOut,
    summary="Delete Task",
    description="Delete a task by id.",
    responses={
        200: {"description": "Task deleted"},
        404: {"model": ErrorOut, "description": "Task not found"},
        500: {"model": ErrorOut, "description": "Store error"},
    },
)
def delete_task(task_id: str, service: TaskService = Depends(get_task_service)) -> MessageOut:
    service.delete(task_id)
    return MessageOut(message="Task deleted")
