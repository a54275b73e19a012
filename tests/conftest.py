"""Pytest fixtures for taskapi tests.

A file-backed SQLite database (aiosqlite) stands in for Postgres; the
repository issues the same SQLAlchemy statements against both.
"""

import pytest
from fastapi.testclient import TestClient

from taskapi.core.config import Settings
from taskapi.core.database import create_engine, init_db
from taskapi.main import create_app
from taskapi.repositories.tasks import TaskRepository


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'tasks.db'}",
        _env_file=None,
    )


@pytest.fixture
async def engine(settings):
    engine = create_engine(settings)
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def repository(engine) -> TaskRepository:
    return TaskRepository(engine)


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as client:
        yield client


@pytest.fixture
def create_task(client):
    """POST a task and return the decoded body."""

    def _create(**fields):
        body = {"title": "Untitled", **fields}
        response = client.post("/tasks", json=body)
        assert response.status_code == 201, response.text
        return response.json()

    return _create
