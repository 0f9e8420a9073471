from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, List, Optional, Union

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError
from pydantic_core import to_jsonable_python

from ..config import API_URL
from ..errors import FieldError
from ..models import Task

logger = logging.getLogger(__name__)

Payload = Union[Mapping[str, Any], BaseModel]

_task_adapter = TypeAdapter(Task)
_task_list_adapter = TypeAdapter(List[Task])


class TaskServiceError(Exception):
    """A rejected facade call; ``str(exc)`` is the message to show the user."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        details: Optional[List[FieldError]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details or []


def _to_json(payload: Payload) -> Any:
    if isinstance(payload, BaseModel):
        return payload.model_dump(mode="json", by_alias=True, exclude_unset=True)
    return to_jsonable_python(dict(payload))


def _error_from(response: httpx.Response, fallback: str) -> TaskServiceError:
    message = fallback
    details: List[FieldError] = []
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        message = body.get("error") or fallback
        for item in body.get("details") or []:
            if isinstance(item, dict):
                details.append(FieldError(path=str(item.get("path", "")), message=str(item.get("message", ""))))
    return TaskServiceError(message, status_code=response.status_code, details=details)


class TaskService:
    """
    HTTP client for the ``/tasks`` resource.

    The only path from client code to the store. Every call returns the
    entity (``None`` for delete) or raises TaskServiceError; failed calls are
    not retried.
    """

    def __init__(
        self,
        base_url: str = API_URL,
        *,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)
        self._path = "/tasks"

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> TaskService:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def _request(
        self,
        method: str,
        fallback: str,
        *,
        params: Optional[dict[str, str]] = None,
        json: Any = None,
        expect: Optional[TypeAdapter] = None,
    ) -> Any:
        """Send one request; return the body parsed with ``expect``, if given.

        Transport failures, error statuses and bodies that do not parse all
        surface as TaskServiceError.
        """
        try:
            response = await self._client.request(method, self._path, params=params, json=json)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, self._path, exc)
            raise TaskServiceError(fallback) from exc

        if response.is_error:
            error = _error_from(response, fallback)
            logger.debug("%s %s -> %s %s", method, self._path, response.status_code, error.message)
            raise error

        if expect is None:
            return None
        try:
            return expect.validate_json(response.content)
        except ValidationError as exc:
            logger.warning("%s %s returned an unreadable body: %s", method, self._path, exc)
            raise TaskServiceError(fallback, status_code=response.status_code) from exc

    async def fetch_tasks(
        self, *, status: Optional[str] = None, priority: Optional[str] = None
    ) -> List[Task]:
        params = {}
        if status:
            params["status"] = status
        if priority:
            params["priority"] = priority
        return await self._request(
            "GET", "Failed to fetch tasks", params=params or None, expect=_task_list_adapter
        )

    async def fetch_task(self, task_id: str) -> Task:
        return await self._request(
            "GET", "Failed to fetch task", params={"id": task_id}, expect=_task_adapter
        )

    async def add_task(self, payload: Payload) -> Task:
        return await self._request(
            "POST", "Failed to add task", json=_to_json(payload), expect=_task_adapter
        )

    async def update_task(self, task_id: str, changes: Payload) -> Task:
        return await self._request(
            "PUT",
            "Failed to update task",
            params={"id": task_id},
            json=_to_json(changes),
            expect=_task_adapter,
        )

    async def delete_task(self, task_id: str) -> None:
        await self._request("DELETE", "Failed to delete task", params={"id": task_id})
