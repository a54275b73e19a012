import asyncio
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import select, insert, update, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.sql.base import Executable

from taskapi.core.database import get_connection
from taskapi.core.exceptions import DataAccessError, TaskNotFoundError
from taskapi.models.task import Task

logger = logging.getLogger(__name__)

tasks = Task.__table__


class TaskRepository:
    """Single-statement operations on the ``tasks`` table.

    Each call opens its own connection through :func:`get_connection` and
    releases it before returning, on success and on failure alike.
    """

    def __init__(self, engine: AsyncEngine):
        self.engine = engine

    async def _fetch(self, statement: Executable, action: str) -> List[Dict[str, Any]]:
        try:
            async with get_connection(self.engine) as conn:
                result = await conn.execute(statement)
                return [dict(row) for row in result.mappings().all()]
        except (SQLAlchemyError, OSError, asyncio.TimeoutError) as e:
            logger.exception("%s error: %s", action, e)
            raise DataAccessError(action) from e

    async def list_tasks(self, query: str = "", limit: int = 20, offset: int = 0) -> List[Dict[str, Any]]:
        """Case-insensitive title search, newest first."""
        statement = (
            select(tasks)
            .where(tasks.c.title.ilike(f"%{query}%"))
            .order_by(tasks.c.created_at.desc(), tasks.c.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return await self._fetch(statement, "list tasks")

    async def get_task(self, task_id: int) -> Dict[str, Any]:
        rows = await self._fetch(select(tasks).where(tasks.c.id == task_id), "get task")
        if not rows:
            raise TaskNotFoundError(task_id)
        return rows[0]

    async def create_task(
        self,
        title: str,
        description: Optional[str] = None,
        status: Optional[str] = "pending",
        priority: Optional[str] = "low",
    ) -> Dict[str, Any]:
        statement = (
            insert(tasks)
            .values(title=title, description=description, status=status, priority=priority)
            .returning(*tasks.c)
        )
        rows = await self._fetch(statement, "create task")
        return rows[0]

    async def update_task(
        self,
        task_id: int,
        title: Optional[str],
        description: Optional[str],
        status: Optional[str],
        priority: Optional[str],
    ) -> Dict[str, Any]:
        """Overwrite all four mutable columns; there is no partial update."""
        statement = (
            update(tasks)
            .where(tasks.c.id == task_id)
            .values(title=title, description=description, status=status, priority=priority)
            .returning(*tasks.c)
        )
        rows = await self._fetch(statement, "update task")
        if not rows:
            raise TaskNotFoundError(task_id)
        return rows[0]

    async def delete_task(self, task_id: int) -> bool:
        statement = delete(tasks).where(tasks.c.id == task_id).returning(tasks.c.id)
        rows = await self._fetch(statement, "delete task")
        if not rows:
            raise TaskNotFoundError(task_id)
        return True
