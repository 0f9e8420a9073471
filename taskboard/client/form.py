from datetime import date
from typing import Any, Dict, Optional

from ..models import Task, TaskPriority, TaskStatus
from ..schemas.task import TaskBase, ValidationResult, validate_payload


class TaskForm(TaskBase):
    """Create/edit form for a task.

    Same field rules as the API, with the form defaults filled in. The
    due date must not be earlier than today; see ``validate_form``.
    """
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM

    def to_payload(self, *, include_cleared: bool = False) -> Dict[str, Any]:
        """Request body for the API.

        With ``include_cleared`` empty optional fields are sent as ``null``
        so that an edit clears them on the server.
        """
        return self.model_dump(mode="json", by_alias=True, exclude_none=not include_cleared)


def form_defaults(task: Optional[Task] = None) -> Dict[str, Any]:
    """Initial form values: those of ``task``, or a blank new task."""
    if task is not None:
        values = task.model_dump(by_alias=True, exclude={"id"})
        for name in ("description", "assignee"):
            if values.get(name) is None:
                values[name] = ""
        return values
    return {
        "title": "",
        "description": "",
        "status": TaskStatus.TODO,
        "priority": TaskPriority.MEDIUM,
        "dueDate": None,
        "assignee": "",
    }


def validate_form(data: Any, *, today: Optional[date] = None) -> ValidationResult:
    """Validate form input, rejecting due dates before ``today``."""
    return validate_payload(TaskForm, data, today=today or date.today())
