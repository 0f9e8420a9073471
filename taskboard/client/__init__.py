from .form import TaskForm, form_defaults, validate_form
from .service import TaskService, TaskServiceError
from .state import TaskBoardState

__all__ = [
    "TaskBoardState",
    "TaskForm",
    "TaskService",
    "TaskServiceError",
    "form_defaults",
    "validate_form",
]
