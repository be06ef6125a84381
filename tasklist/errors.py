from __future__ import annotations

from typing import Optional


class TaskListError(Exception):
    """Base for every failure the service reports to its callers."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(TaskListError):
    """Bad input shape or length; `field` names the offending input."""

    status_code = 400

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field


class NotFoundError(TaskListError):
    status_code = 404

    def __init__(self, task_id: Optional[int] = None, message: str = "Task not found") -> None:
        super().__init__(message)
        self.task_id = task_id


class StorageError(TaskListError):
    """The database rejected an operation; the transaction was rolled back."""

    status_code = 500
