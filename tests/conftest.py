from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from tasklist.app import create_app
from tasklist.config import Settings
from tasklist.service import TaskService
from tasklist.store import TaskStore

from .fakes import MemoryTaskStore


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'tasks.sqlite3'}",
        front_dir=tmp_path / "no-frontend",
    )


@pytest.fixture()
def store(settings: Settings) -> TaskStore:
    """Real SQLite store; its transactional behaviour is part of what we test."""
    s = TaskStore(settings.database_url)
    yield s
    s.close()


@pytest.fixture()
def memory_store() -> MemoryTaskStore:
    return MemoryTaskStore()


@pytest.fixture()
def service(store: TaskStore) -> TaskService:
    return TaskService(store)


@pytest.fixture()
def client(settings: Settings, store: TaskStore) -> TestClient:
    with TestClient(create_app(settings, store=store)) as c:
        yield c
