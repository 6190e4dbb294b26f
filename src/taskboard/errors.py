from __future__ import annotations


class TaskboardError(Exception):
    """
    Base class for domain errors raised by services and repositories.

    Each subclass carries the HTTP status it maps to at the API boundary.
    """

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    @property
    def name(self) -> str:
        return type(self).__name__


class ValidationError(TaskboardError):
    """Missing or malformed required input (empty title, empty category name)."""

    status_code = 400


class ConflictError(TaskboardError):
    """A category with the same lowercased name already exists."""

    # The API contract reports duplicates as a plain bad request.
    status_code = 400


class NotFoundError(TaskboardError):
    """The targeted task id or category name does not exist."""

    status_code = 404


class StoreError(TaskboardError):
    """The underlying persistence layer failed."""

    status_code = 500
