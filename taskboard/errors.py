from typing import List

from pydantic import BaseModel


class FieldError(BaseModel):
    """One violated constraint: dotted field path plus a readable message."""
    path: str
    message: str


class TaskNotFoundError(LookupError):
    def __init__(self, task_id: str):
        super().__init__(f"Task not found: {task_id}")
        self.task_id = task_id


class TaskValidationError(ValueError):
    """Raised at the API boundary when a payload fails validation."""

    def __init__(self, errors: List[FieldError]):
        super().__init__("Validation failed")
        self.errors = errors
