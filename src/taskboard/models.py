from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional, TypedDict

Priority = Literal["low", "medium", "high"]

PRIORITIES = ("low", "medium", "high")
DEFAULT_PRIORITY: Priority = "medium"
DEFAULT_CATEGORY = "personal"


# PUBLIC_INTERFACE
class TaskEntity(TypedDict):
    """
    A stored Task document.

    Fields:
    - id: Opaque unique string identifier assigned by the store
    - title: Non-empty title (trimmed)
    - description: Free text, possibly empty (trimmed)
    - completed: Completion flag
    - priority: One of low/medium/high
    - due_date: Optional due datetime; only the calendar day is meaningful
    - category: Category name; not checked against the categories collection
    - created_at: Creation timestamp, never changes
    """

    id: str
    title: str
    description: str
    completed: bool
    priority: Priority
    due_date: Optional[datetime]
    category: str
    created_at: datetime


# PUBLIC_INTERFACE
class CategoryEntity(TypedDict):
    """A stored Category document. `name` is lowercase and unique."""

    name: str
    created_at: datetime
