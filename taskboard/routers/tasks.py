from typing import Any, Optional, Type, TypeVar
import enum
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from ..errors import TaskValidationError
from ..models import TaskPriority, TaskStatus
from ..schemas.task import validate_create, validate_update
from ..store import TaskStore

logger = logging.getLogger(__name__)

# Endpoints stay async: store mutations and snapshot writes then run one at a time on the event loop.
router = APIRouter()

E = TypeVar("E", bound=enum.Enum)

ALL = "All"


def get_task_store(request: Request) -> TaskStore:
    """Dependency returning the store constructed at startup."""
    return request.app.state.task_store


def _require_id(task_id: Optional[str]) -> str:
    if not task_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Task ID is required")
    return task_id


def _parse_filter(value: str, enum_cls: Type[E], label: str) -> Optional[E]:
    if value.lower() == ALL.lower():
        return None
    try:
        return enum_cls(value)
    except ValueError:
        raise HTTPException(status_code=422, detail=f"Invalid {label} filter")


async def _read_json(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid JSON body")


@router.get("/tasks")
async def get_tasks(
    task_id: Optional[str] = Query(None, alias="id"),
    status_filter: str = Query(ALL, alias="status"),
    priority_filter: str = Query(ALL, alias="priority"),
    store: TaskStore = Depends(get_task_store),
):
    """Get all tasks, or a single task when ``id`` is given.

    ``status`` and ``priority`` narrow the list; ``All`` disables a filter.
    """
    if task_id:
        task = store.get(task_id)
        if task is None:
            raise HTTPException(status_code=404, detail="Task not found")
        return task.to_record()

    wanted_status = _parse_filter(status_filter, TaskStatus, "status")
    wanted_priority = _parse_filter(priority_filter, TaskPriority, "priority")

    tasks = store.list()
    if wanted_status is not None:
        tasks = [task for task in tasks if task.status == wanted_status]
    if wanted_priority is not None:
        tasks = [task for task in tasks if task.priority == wanted_priority]
    return [task.to_record() for task in tasks]


@router.post("/tasks", status_code=status.HTTP_201_CREATED)
async def create_task(
    request: Request,
    store: TaskStore = Depends(get_task_store),
):
    """Create a new task."""
    body = await _read_json(request)

    validation = validate_create(body)
    if not validation.valid:
        logger.debug("Rejected create payload: %d error(s)", len(validation.errors))
        raise TaskValidationError(validation.errors)

    task = store.create(validation.data)
    return task.to_record()


@router.put("/tasks")
async def update_task(
    request: Request,
    task_id: Optional[str] = Query(None, alias="id"),
    store: TaskStore = Depends(get_task_store),
):
    """Update a task with a partial payload; unsupplied fields are kept."""
    task_id = _require_id(task_id)
    body = await _read_json(request)

    if store.get(task_id) is None:
        raise HTTPException(status_code=404, detail="Task not found")

    validation = validate_update(body)
    if not validation.valid:
        logger.debug("Rejected update payload id=%s: %d error(s)", task_id, len(validation.errors))
        raise TaskValidationError(validation.errors)

    task = store.update(task_id, validation.data)
    return task.to_record()


@router.delete("/tasks")
async def delete_task(
    task_id: Optional[str] = Query(None, alias="id"),
    store: TaskStore = Depends(get_task_store),
):
    """Delete a task."""
    task_id = _require_id(task_id)
    store.delete(task_id)
    return {"success": True}
