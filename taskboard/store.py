from __future__ import annotations

import json
import logging
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

from pydantic import ValidationError

from .database import KeyValueStorage
from .errors import TaskNotFoundError
from .models import Task, TaskPriority, TaskStatus
from .schemas.task import TaskCreate, TaskUpdate

logger = logging.getLogger(__name__)

# Fields a validated patch may overwrite; ``id`` is deliberately absent.
MERGEABLE_FIELDS = ("title", "description", "status", "priority", "due_date", "assignee")


def seed_tasks(now: Optional[datetime] = None) -> List[Task]:
    """The three example tasks a fresh board starts with."""
    now = now or datetime.now(timezone.utc)
    return [
        Task(
            id="1",
            title="Complete project setup",
            description="Initialize the project and set up the basic structure",
            status=TaskStatus.DONE,
            priority=TaskPriority.HIGH,
            due_date=now + timedelta(days=2),
            assignee="John Doe",
        ),
        Task(
            id="2",
            title="Implement task board",
            description="Create the drag and drop task board with columns for different statuses",
            status=TaskStatus.IN_PROGRESS,
            priority=TaskPriority.MEDIUM,
            due_date=now + timedelta(days=5),
            assignee="Jane Smith",
        ),
        Task(
            id="3",
            title="Add filter functionality",
            description="Implement filters for task status and priority",
            status=TaskStatus.TODO,
            priority=TaskPriority.LOW,
            due_date=now + timedelta(days=7),
            assignee="Alex Johnson",
        ),
    ]


def merge_patch(task: Task, patch: TaskUpdate) -> Task:
    """Copy the fields supplied in ``patch`` onto ``task``.

    Only recognised fields that were present in the validated payload are
    copied; everything else on ``task`` is kept as is.
    """
    changes = {
        name: getattr(patch, name)
        for name in MERGEABLE_FIELDS
        if name in patch.model_fields_set
    }
    if not changes:
        return task
    return task.model_copy(update=changes)


class TaskStore:
    """
    Ordered in-memory task collection mirrored to a storage slot.

    - tasks keep insertion order; updates keep their position
    - the whole collection is written to ``storage_key`` after each mutation;
      a mutation whose snapshot write fails is not applied
    - a missing or unparseable snapshot means a fresh board, seeded with
      example tasks
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        storage_key: str = "tasks",
        *,
        seed: Callable[[], List[Task]] = seed_tasks,
        id_factory: Callable[[], str] = lambda: str(uuid4()),
    ) -> None:
        self._storage = storage
        self._storage_key = storage_key
        self._seed = seed
        self._id_factory = id_factory
        self._tasks: Dict[str, Task] = {}
        # Snapshot records that could not be read as tasks; written back unchanged.
        self._unreadable: List[Any] = []
        self._load()
        logger.info("TaskStore ready key=%s total=%s", storage_key, len(self._tasks))

    # ---- persistence ----

    def _load(self) -> None:
        raw = self._storage.get_item(self._storage_key)

        records = None
        if raw is not None:
            try:
                records = json.loads(raw)
            except ValueError:
                logger.exception("Unparseable tasks snapshot key=%s; using seed data", self._storage_key)
            else:
                if not isinstance(records, list):
                    logger.error("Tasks snapshot key=%s is not a list; using seed data", self._storage_key)
                    records = None

        if records is None:
            self._tasks = {task.id: task for task in self._seed()}
            return

        tasks: Dict[str, Task] = {}
        for record in records:
            try:
                task = Task.model_validate(record)
            except ValidationError as exc:
                logger.warning(
                    "Skipping unreadable task record key=%s: %s", self._storage_key, exc.errors()
                )
                self._unreadable.append(record)
                continue
            tasks[task.id] = task
        self._tasks = tasks

    def _commit(self, tasks: Dict[str, Task], *, keep_unreadable: bool = True) -> None:
        """Write ``tasks`` to the storage slot, then make them current."""
        unreadable = self._unreadable if keep_unreadable else []
        records = [task.to_record() for task in tasks.values()] + unreadable
        self._storage.set_item(self._storage_key, json.dumps(records))
        self._tasks = tasks
        self._unreadable = unreadable

    def _new_id(self) -> str:
        task_id = self._id_factory()
        while task_id in self._tasks:
            task_id = self._id_factory()
        return task_id

    # ---- operations ----

    def list(self) -> List[Task]:
        return list(self._tasks.values())

    def count(self) -> int:
        return len(self._tasks)

    def get(self, task_id: str) -> Optional[Task]:
        return self._tasks.get(task_id)

    def create(self, fields: TaskCreate) -> Task:
        task = Task(id=self._new_id(), **fields.model_dump())
        self._commit({**self._tasks, task.id: task})
        logger.info("Created task id=%s", task.id)
        return task

    def update(self, task_id: str, patch: TaskUpdate) -> Task:
        existing = self._tasks.get(task_id)
        if existing is None:
            raise TaskNotFoundError(task_id)

        task = merge_patch(existing, patch)
        self._commit({**self._tasks, task_id: task})
        logger.info("Updated task id=%s fields=%s", task_id, sorted(patch.model_fields_set))
        return task

    def delete(self, task_id: str) -> None:
        if task_id not in self._tasks:
            raise TaskNotFoundError(task_id)

        remaining = {key: task for key, task in self._tasks.items() if key != task_id}
        self._commit(remaining)
        logger.info("Deleted task id=%s", task_id)

    def reset(self) -> None:
        """Drop every task, unreadable records included, and start over from the seed data."""
        self._commit({task.id: task for task in self._seed()}, keep_unreadable=False)
        logger.info("Reset tasks to seed data total=%s", len(self._tasks))
