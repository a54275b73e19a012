"""Tests for TaskRepository against a throwaway SQLite database."""

import pytest
from sqlalchemy import inspect
from sqlalchemy.pool import NullPool

from taskapi.core.config import Settings
from taskapi.core.database import create_engine, init_db
from taskapi.core.exceptions import DataAccessError, TaskNotFoundError
from taskapi.repositories.tasks import TaskRepository


async def test_engine_does_not_pool_connections(engine):
    assert isinstance(engine.sync_engine.pool, NullPool)


async def test_init_db_is_idempotent(engine):
    await init_db(engine)
    await init_db(engine)

    async with engine.connect() as conn:
        columns = await conn.run_sync(
            lambda sync_conn: [c["name"] for c in inspect(sync_conn).get_columns("tasks")]
        )
    assert columns == ["id", "title", "description", "status", "created_at", "priority"]


async def test_create_applies_defaults(repository):
    task = await repository.create_task("Write spec")
    assert task["id"] is not None
    assert task["title"] == "Write spec"
    assert task["description"] is None
    assert task["status"] == "pending"
    assert task["priority"] == "low"
    assert task["created_at"] is not None


async def test_create_assigns_increasing_ids(repository):
    ids = [(await repository.create_task(f"task {i}"))["id"] for i in range(5)]
    assert ids == sorted(set(ids))


async def test_get_returns_created_row(repository):
    created = await repository.create_task("Buy milk", "2 litres", "in_progress", "high")
    fetched = await repository.get_task(created["id"])
    assert fetched == created


async def test_get_missing_raises_not_found(repository):
    with pytest.raises(TaskNotFoundError):
        await repository.get_task(12345)


async def test_update_overwrites_every_field(repository):
    created = await repository.create_task("Old", "old description", "pending", "low")
    updated = await repository.update_task(created["id"], "New", None, "done", None)

    assert updated["title"] == "New"
    assert updated["description"] is None
    assert updated["status"] == "done"
    assert updated["priority"] is None
    assert updated["created_at"] == created["created_at"]
    assert await repository.get_task(created["id"]) == updated


async def test_update_missing_raises_not_found(repository):
    with pytest.raises(TaskNotFoundError):
        await repository.update_task(999, "title", None, None, None)


async def test_delete_is_terminal(repository):
    created = await repository.create_task("Temporary")
    assert await repository.delete_task(created["id"]) is True

    with pytest.raises(TaskNotFoundError):
        await repository.get_task(created["id"])
    with pytest.raises(TaskNotFoundError):
        await repository.delete_task(created["id"])


async def test_search_is_case_insensitive_on_title_only(repository):
    milk = await repository.create_task("Buy Milk")
    await repository.create_task("Walk dog", "then buy milk")

    for query in ("milk", "MILK", "Buy m"):
        results = await repository.list_tasks(query)
        assert [t["id"] for t in results] == [milk["id"]]


async def test_list_is_newest_first_and_paginated(repository):
    ids = [(await repository.create_task(f"task {i}"))["id"] for i in range(25)]
    newest_first = list(reversed(ids))

    assert [t["id"] for t in await repository.list_tasks()] == newest_first[:20]
    page = await repository.list_tasks(limit=10, offset=10)
    assert [t["id"] for t in page] == newest_first[10:20]
    assert await repository.list_tasks(limit=10, offset=30) == []


async def test_list_no_match_is_empty(repository):
    await repository.create_task("Something")
    assert await repository.list_tasks("nothing like it") == []


async def test_missing_title_is_a_data_access_error(repository):
    with pytest.raises(DataAccessError):
        await repository.create_task(None)


async def test_missing_table_is_a_data_access_error(tmp_path, settings):
    empty = settings.model_copy(
        update={"DATABASE_URL": f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}"}
    )
    engine = create_engine(empty)
    try:
        with pytest.raises(DataAccessError) as excinfo:
            await TaskRepository(engine).list_tasks()
        assert excinfo.value.__cause__ is not None
    finally:
        await engine.dispose()


async def test_unreachable_postgres_is_a_data_access_error():
    settings = Settings(
        DATABASE_URL="postgresql://u:p@127.0.0.1:1/db?connect_timeout=5&application_name=tests",
        DB_SSL=False,
        _env_file=None,
    )
    engine = create_engine(settings)
    try:
        with pytest.raises(DataAccessError):
            await TaskRepository(engine).list_tasks()
    finally:
        await engine.dispose()
