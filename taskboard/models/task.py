from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Any, Dict, Optional
import enum


class TaskStatus(str, enum.Enum):
    """Board column of a task."""
    TODO = "To Do"
    IN_PROGRESS = "In Progress"
    DONE = "Done"


class TaskPriority(str, enum.Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class Task(BaseModel):
    """A task as held by the store and returned by the API.

    Field rules (lengths, trimming) are enforced by the validators in
    ``taskboard.schemas.task``; this record only checks shape so that
    snapshot data is taken back as it was written.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    description: Optional[str] = None
    status: TaskStatus
    priority: TaskPriority
    due_date: Optional[datetime] = Field(default=None, alias="dueDate")
    assignee: Optional[str] = None

    def to_record(self) -> Dict[str, Any]:
        """JSON-ready dict using wire names; absent fields are omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
