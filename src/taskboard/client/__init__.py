"""
Client side of Taskboard: an HTTP client for the API, the pure view-state
layer that filters tasks for display, and a terminal front end.
"""

from .api import ApiError, TaskboardClient
from .models import Task
from .view import ViewState, due_date_status, filter_tasks, reduce

__all__ = [
    "ApiError",
    "Task",
    "TaskboardClient",
    "ViewState",
    "due_date_status",
    "filter_tasks",
    "reduce",
]
