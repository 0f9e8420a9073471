from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Annotated, Any, Dict, List, Optional, Tuple, Type

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    StringConstraints,
    ValidationError,
    ValidationInfo,
    field_validator,
)
from pydantic_core import PydanticCustomError

from ..config import STRICT_DUE_DATES
from ..errors import FieldError
from ..models import TaskPriority, TaskStatus


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value == "":
        return None
    return value


def _title_present(value: Any) -> Any:
    if value == "":
        raise PydanticCustomError("title_required", "Title is required")
    return value


def _title_not_empty(value: str) -> str:
    if not value:
        raise PydanticCustomError("title_empty", "Title cannot be empty")
    return value


def _empty_date_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _calendar_date(value: datetime) -> date:
    if value.tzinfo is not None:
        return value.astimezone().date()
    return value.date()


def _due_date_not_past(value: Optional[datetime], info: ValidationInfo) -> Optional[datetime]:
    """Reject dates before ``today`` when the caller passes one in the context."""
    today = (info.context or {}).get("today")
    if value is None or today is None:
        return value
    if _calendar_date(value) < today:
        raise PydanticCustomError("due_date_past", "Due date cannot be in the past")
    return value


Title = Annotated[
    str,
    StringConstraints(strip_whitespace=True, max_length=100),
    AfterValidator(_title_not_empty),
    BeforeValidator(_title_present),
]
Description = Annotated[
    str,
    StringConstraints(strip_whitespace=True, max_length=500),
    AfterValidator(_blank_to_none),
]
Assignee = Annotated[
    str,
    StringConstraints(strip_whitespace=True, max_length=50),
    AfterValidator(_blank_to_none),
]
DueDate = Annotated[
    Optional[datetime],
    BeforeValidator(_empty_date_to_none),
    AfterValidator(_due_date_not_past),
]

# Messages shown to the user, by (field, pydantic error type).
_MESSAGES: Dict[Tuple[str, str], str] = {
    ("title", "missing"): "Title is required",
    ("title", "null_value"): "Title is required",
    ("title", "string_too_long"): "Title must be less than 100 characters",
    ("description", "string_too_long"): "Description must be less than 500 characters",
    ("assignee", "string_too_long"): "Assignee name must be less than 50 characters",
}

# Fields whose every violation collapses into a single message.
_FIELD_MESSAGES: Dict[str, str] = {
    "status": "Please select a valid status",
    "priority": "Please select a valid priority",
    "dueDate": "Please enter a valid date",
}

# Error types that keep their own message regardless of the field.
_OWN_MESSAGE_TYPES = ("title_required", "title_empty", "due_date_past")


class TaskBase(BaseModel):
    """Base task schema with common fields."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: Title
    description: Optional[Description] = None
    status: TaskStatus
    priority: TaskPriority
    due_date: DueDate = Field(default=None, alias="dueDate")
    assignee: Optional[Assignee] = None


class TaskCreate(TaskBase):
    """Schema for creating new tasks."""
    pass


class TaskUpdate(BaseModel):
    """Schema for updating existing tasks.

    Every field is optional; only fields present in the payload end up in
    ``model_fields_set`` and therefore in the merge. ``null`` clears an
    optional field but is rejected for title, status and priority.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: Optional[Title] = None
    description: Optional[Description] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    due_date: DueDate = Field(default=None, alias="dueDate")
    assignee: Optional[Assignee] = None

    @field_validator("title", "status", "priority", mode="before")
    @classmethod
    def _reject_null(cls, value: Any) -> Any:
        if value is None:
            raise PydanticCustomError("null_value", "Field cannot be null")
        return value


def _message_for(path: str, error: Dict[str, Any]) -> str:
    error_type = error["type"]
    if error_type in _OWN_MESSAGE_TYPES:
        return error["msg"]
    top = path.split(".", 1)[0]
    if top in _FIELD_MESSAGES:
        return _FIELD_MESSAGES[top]
    return _MESSAGES.get((top, error_type), error["msg"])


def field_errors(exc: ValidationError) -> List[FieldError]:
    """Flatten a pydantic ValidationError into ordered FieldErrors."""
    errors = []
    for error in exc.errors():
        path = ".".join(str(part) for part in error["loc"])
        errors.append(FieldError(path=path, message=_message_for(path, error)))
    return errors


@dataclass
class ValidationResult:
    """Outcome of a validator: normalized ``data`` or a list of ``errors``."""
    data: Optional[BaseModel] = None
    errors: List[FieldError] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors


def validate_payload(
    schema: Type[BaseModel], data: Any, *, today: Optional[date] = None
) -> ValidationResult:
    """Validate ``data`` against ``schema``; never raises for bad input.

    When ``today`` is given, due dates earlier than that day are rejected.
    """
    context = {"today": today} if today is not None else None
    try:
        payload = schema.model_validate(data, context=context)
    except ValidationError as exc:
        return ValidationResult(errors=field_errors(exc))
    return ValidationResult(data=payload)


def _rule_day(strict: Optional[bool], today: Optional[date]) -> Optional[date]:
    if strict is None:
        strict = STRICT_DUE_DATES
    if not strict:
        return None
    return today or date.today()


def validate_create(
    data: Any, *, strict_due_dates: Optional[bool] = None, today: Optional[date] = None
) -> ValidationResult:
    """Validate a create payload (title, status and priority required)."""
    return validate_payload(TaskCreate, data, today=_rule_day(strict_due_dates, today))


def validate_update(
    data: Any, *, strict_due_dates: Optional[bool] = None, today: Optional[date] = None
) -> ValidationResult:
    """Validate a partial update payload."""
    return validate_payload(TaskUpdate, data, today=_rule_day(strict_due_dates, today))
