from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .models import DEFAULT_CATEGORY, DEFAULT_PRIORITY, Priority

# Shared type for incoming due dates which can be a date, datetime, or ISO8601 string
DueDateInput = Union[date, datetime, str]


def _parse_due_date(value: Optional[DueDateInput]) -> Optional[datetime]:
    """
    Internal helper to normalize due date input into a datetime.
    - If value is a string, attempt to parse via datetime.fromisoformat; if time is missing, set to 00:00.
    - If value is a date (not datetime), convert to datetime at 00:00.
    - If value is a datetime, return as-is.
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        return value

    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, 0, 0, 0)

    if isinstance(value, str):
        s = value.strip()
        if not s:
            return None
        # JavaScript clients send a trailing 'Z' for UTC
        if s.endswith("Z"):
            s = s[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(s)
        except ValueError:
            try:
                d = date.fromisoformat(s)
                return datetime(d.year, d.month, d.day, 0, 0, 0)
            except ValueError as e:
                raise ValueError(
                    "Invalid dueDate format. Use ISO8601 date or datetime string (e.g., '2025-01-31' or '2025-01-31T13:45:00')."
                ) from e

    raise ValueError("Invalid type for dueDate; expected date, datetime, or ISO8601 string.")


def _strip(value: Optional[str]) -> Optional[str]:
    return value.strip() if isinstance(value, str) else value


# Wire format uses camelCase keys; Python attributes stay snake_case.
_WIRE_CONFIG = dict(alias_generator=to_camel, populate_by_name=True)


# PUBLIC_INTERFACE
class TaskCreate(BaseModel):
    """
    Schema for creating a new Task.

    Title emptiness is checked by the task service so that direct callers and
    HTTP callers get the same ValidationError.
    """

    model_config = ConfigDict(
        **_WIRE_CONFIG,
        json_schema_extra={
            "example": {
                "title": "Buy groceries",
                "description": "Milk, eggs, bread",
                "completed": False,
                "priority": "high",
                "dueDate": "2025-02-01",
                "category": "shopping",
            }
        },
    )

    title: str = Field(..., description="Short title for the task; trimmed, must not be empty")
    description: str = Field(default="", description="Optional detailed description")
    completed: bool = Field(default=False, description="Completion status flag")
    priority: Priority = Field(default=DEFAULT_PRIORITY, description="One of low, medium, high")
    due_date: Optional[datetime] = Field(
        default=None,
        description="Due date of the task. Accepts ISO8601 date or datetime; dates are set to 00:00",
    )
    category: str = Field(default=DEFAULT_CATEGORY, description="Name of the category the task belongs to")

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        return v.strip()

    @field_validator("description", mode="before")
    @classmethod
    def normalize_description(cls, v: Optional[str]) -> str:
        """
        Treat a missing/null description as empty and strip whitespace.
        """
        return "" if v is None else _strip(v)

    @field_validator("category", mode="before")
    @classmethod
    def normalize_category(cls, v: Optional[str]) -> str:
        """
        A missing, null or blank category falls back to the default.
        """
        v = _strip(v)
        return v or DEFAULT_CATEGORY

    @field_validator("due_date", mode="before")
    @classmethod
    def parse_due_date(cls, v: Optional[DueDateInput]) -> Optional[datetime]:
        return _parse_due_date(v)


# PUBLIC_INTERFACE
class TaskUpdate(BaseModel):
    """
    Schema for partially updating an existing Task.
    All fields are optional; only provided fields will be updated.
    `id` and `createdAt` are not part of the schema and are ignored if sent.
    """

    model_config = ConfigDict(
        **_WIRE_CONFIG,
        json_schema_extra={
            "example": {
                "title": "Buy groceries and supplies",
                "completed": True,
                "dueDate": "2025-02-02T09:30:00",
            }
        },
    )

    title: Optional[str] = Field(default=None, description="Short title for the task")
    description: Optional[str] = Field(default=None, description="Detailed description")
    completed: Optional[bool] = Field(default=None, description="Completion status flag")
    priority: Optional[Priority] = Field(default=None, description="One of low, medium, high")
    due_date: Optional[datetime] = Field(
        default=None,
        description="Due date of the task; send null to clear it",
    )
    category: Optional[str] = Field(default=None, description="Name of the category the task belongs to")

    @field_validator("title", "description")
    @classmethod
    def strip_text(cls, v: Optional[str]) -> Optional[str]:
        return _strip(v)

    @field_validator("category")
    @classmethod
    def strip_category(cls, v: Optional[str]) -> Optional[str]:
        # Blank means "leave unchanged", like null
        return _strip(v) or None

    @field_validator("due_date", mode="before")
    @classmethod
    def parse_due_date(cls, v: Optional[DueDateInput]) -> Optional[datetime]:
        return _parse_due_date(v)

    def changes(self) -> Dict[str, Any]:
        """
        Return the fields to apply, keyed by entity field name.

        Only fields the caller actually supplied are included. An explicit null
        clears due_date; for every other field null means "leave unchanged".
        """
        out: Dict[str, Any] = {}
        for field in self.model_fields_set:
            value = getattr(self, field)
            if value is None and field != "due_date":
                continue
            out[field] = value
        return out


# PUBLIC_INTERFACE
class TaskOut(BaseModel):
    """
    Schema returned by the API for a Task.
    """

    model_config = ConfigDict(
        **_WIRE_CONFIG,
        json_schema_extra={
            "example": {
                "id": "3f2b8c0e9a4d4c47b1b5f0d6a7e8c912",
                "title": "Buy groceries",
                "description": "Milk, eggs, bread",
                "completed": False,
                "priority": "medium",
                "dueDate": "2025-02-01T00:00:00",
                "category": "personal",
                "createdAt": "2025-01-25T10:15:30.123456",
            }
        },
    )

    id: str = Field(..., description="Unique identifier of the task")
    title: str = Field(..., description="Short title for the task")
    description: str = Field(default="", description="Detailed description")
    completed: bool = Field(..., description="Completion status flag")
    priority: Priority = Field(..., description="One of low, medium, high")
    due_date: Optional[datetime] = Field(default=None, description="Due date as an ISO8601 datetime")
    category: str = Field(..., description="Name of the category the task belongs to")
    created_at: datetime = Field(..., description="Creation timestamp")


# PUBLIC_INTERFACE
class CategoryCreate(BaseModel):
    """Schema for creating a Category. The name is trimmed and lowercased by the service."""

    model_config = ConfigDict(json_schema_extra={"example": {"name": "Work"}})

    name: str = Field(..., description="Category name; unique regardless of case")


# PUBLIC_INTERFACE
class CategoryOut(BaseModel):
    """Schema returned when a Category is created."""

    name: str = Field(..., description="Stored (lowercase) category name")


# PUBLIC_INTERFACE
class MessageOut(BaseModel):
    """Confirmation message returned by delete endpoints."""

    message: str = Field(..., description="Human readable confirmation")


# PUBLIC_INTERFACE
class ErrorOut(BaseModel):
    """
    Error body returned for every failed request.
    """

    error: str = Field(..., description="Error category, e.g. NotFoundError")
    message: str = Field(..., description="Human readable error message")
    detail: Optional[List[Any]] = Field(default=None, description="Field level details for malformed requests")
