# tests/conftest.py

from __future__ import annotations

from datetime import datetime, timezone

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from taskboard.client import TaskBoardState, TaskService
from taskboard.database import KeyValueStorage, create_db_engine
from taskboard.main import create_app
from taskboard.store import TaskStore, seed_tasks

# Fixed clock for seed data so snapshots are deterministic.
SEED_NOW = datetime(2030, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture()
def storage() -> KeyValueStorage:
    """Fresh in-memory SQLite storage slot per test."""
    return KeyValueStorage(create_db_engine("sqlite://"))


@pytest.fixture()
def store(storage: KeyValueStorage) -> TaskStore:
    return TaskStore(storage, "tasks", seed=lambda: seed_tasks(SEED_NOW))


@pytest.fixture()
def app(store: TaskStore) -> FastAPI:
    return create_app(task_store=store)


@pytest.fixture()
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


@pytest.fixture()
def service(app: FastAPI) -> TaskService:
    """TaskService talking to the app in-process over ASGI."""
    http = httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://testserver/api",
    )
    return TaskService(client=http)


@pytest.fixture()
def board(service: TaskService) -> TaskBoardState:
    return TaskBoardState(service)
