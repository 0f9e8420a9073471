from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import date
from typing import Any, Dict, List, Optional

from ..models import Task, TaskPriority, TaskStatus
from ..schemas.task import ValidationResult
from .form import validate_form
from .service import Payload, TaskService, TaskServiceError

logger = logging.getLogger(__name__)

ALL = "All"


class TaskBoardState:
    """
    Client-side mirror of the task list.

    - ``tasks`` holds the list from the last successful fetch plus the
      results of later successful calls
    - ``is_loading`` is set while a call is in flight
    - ``error`` holds the last failure message; a new call clears it

    Calls are not cancelled or ordered: whichever completes last wins.
    """

    def __init__(self, service: TaskService) -> None:
        self._service = service
        self.tasks: List[Task] = []
        self.is_loading = False
        self.error: Optional[str] = None

    def _begin(self) -> None:
        self.is_loading = True
        self.error = None

    def _fail(self, exc: TaskServiceError) -> None:
        self.is_loading = False
        self.error = str(exc)
        logger.info("Task call failed: %s", self.error)

    def _index_of(self, task_id: str) -> int:
        for i, task in enumerate(self.tasks):
            if task.id == task_id:
                return i
        return -1

    async def fetch_tasks(self) -> bool:
        self._begin()
        try:
            tasks = await self._service.fetch_tasks()
        except TaskServiceError as exc:
            self._fail(exc)
            return False
        self.is_loading = False
        self.tasks = tasks
        return True

    async def add_task(self, payload: Payload) -> Optional[Task]:
        self._begin()
        try:
            task = await self._service.add_task(payload)
        except TaskServiceError as exc:
            self._fail(exc)
            return None
        self.is_loading = False
        self.tasks.append(task)
        return task

    async def update_task(self, task_id: str, changes: Payload) -> Optional[Task]:
        self._begin()
        try:
            task = await self._service.update_task(task_id, changes)
        except TaskServiceError as exc:
            self._fail(exc)
            return None
        self.is_loading = False
        index = self._index_of(task.id)
        if index != -1:
            self.tasks[index] = task
        return task

    async def change_status(self, task_id: str, status: TaskStatus) -> Optional[Task]:
        """Drag-and-drop or inline status change: an update of ``status`` only."""
        return await self.update_task(task_id, {"status": TaskStatus(status).value})

    async def delete_task(self, task_id: str) -> bool:
        self._begin()
        try:
            await self._service.delete_task(task_id)
        except TaskServiceError as exc:
            self._fail(exc)
            return False
        self.is_loading = False
        self.tasks = [task for task in self.tasks if task.id != task_id]
        return True

    async def submit_form(
        self,
        data: Mapping[str, Any],
        task_id: Optional[str] = None,
        *,
        today: Optional[date] = None,
    ) -> ValidationResult:
        """Validate form input, then create (or update ``task_id``).

        Form errors come back in the result without a remote call. On success
        ``result.data`` is the saved task, or ``None`` if the call failed (see
        ``error``).
        """
        form = validate_form(data, today=today)
        if not form.valid:
            return form

        if task_id is None:
            task = await self.add_task(form.data.to_payload())
        else:
            task = await self.update_task(task_id, form.data.to_payload(include_cleared=True))
        return ValidationResult(data=task)

    def filtered(self, status: str = ALL, priority: str = ALL) -> List[Task]:
        """Tasks matching the board filters; ``All`` matches everything."""
        return [
            task
            for task in self.tasks
            if (status == ALL or task.status == TaskStatus(status))
            and (priority == ALL or task.priority == TaskPriority(priority))
        ]

    def columns(self, status: str = ALL, priority: str = ALL) -> Dict[TaskStatus, List[Task]]:
        """Filtered tasks grouped into board columns, in column order."""
        board: Dict[TaskStatus, List[Task]] = {column: [] for column in TaskStatus}
        for task in self.filtered(status, priority):
            board[task.status].append(task)
        return board
