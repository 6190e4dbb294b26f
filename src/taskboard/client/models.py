from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..models import DEFAULT_CATEGORY, DEFAULT_PRIORITY, Priority


class Task(BaseModel):
    """A task as received from the API. Instances are immutable."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    title: str
    description: str = ""
    completed: bool = False
    priority: Priority = DEFAULT_PRIORITY
    due_date: Optional[datetime] = None
    category: str = DEFAULT_CATEGORY
    created_at: Optional[datetime] = Field(default=None)


__all__ = ["Task"]
