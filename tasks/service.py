"""
Task operations performed on behalf of an authenticated owner.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from auth.models import SessionClaims
from database.helpers import get_users_by_ids
from database.models import Task
from tasks.queries import OwnedTaskQueries
from utils.errors import NotFoundError, StoreError, ValidationError
from utils.schemas import TaskOut, TaskOwner

logger = logging.getLogger(__name__)


class TaskService:
    """All reads and writes go through an ``OwnedTaskQueries`` for the caller."""

    def __init__(self, session: AsyncSession, claims: SessionClaims) -> None:
        self._session = session
        self._claims = claims
        self._queries = OwnedTaskQueries(claims.user_id)

    async def _fetch_all(self, stmt) -> List[Task]:
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError:
            logger.exception("Task query failed for user %s", self._claims.user_id)
            raise StoreError()
        return list(result.scalars().all())

    async def create(self, title: Optional[str], description: Optional[str] = None) -> int:
        if not title or not title.strip():
            raise ValidationError("Title is required")
        try:
            task = self._queries.new_task(title, description)
            self._session.add(task)
            await self._session.flush()
            await self._session.commit()
        except SQLAlchemyError:
            await self._session.rollback()
            logger.exception("Task insert failed for user %s", self._claims.user_id)
            raise StoreError()
        logger.info("User %s created task %s", self._claims.user_id, task.id)
        return task.id

    async def list_tasks(self) -> List[Task]:
        return await self._fetch_all(self._queries.list_all())

    async def get(self, task_id: int) -> Task:
        tasks = await self._fetch_all(self._queries.by_id(task_id))
        if not tasks:
            raise NotFoundError("Task not found")
        return tasks[0]

    async def search(self, term: str) -> List[Task]:
        return await self._fetch_all(self._queries.search_title(term))

    async def list_with_details(self) -> List[Dict[str, Any]]:
        """
        The caller's tasks, each with its owner attached.

        Owners are fetched in one batched lookup over the distinct owner ids,
        so the number of queries does not grow with the number of tasks.
        """
        tasks = await self.list_tasks()
        owners = await get_users_by_ids(self._session, {task.user_id for task in tasks})

        details = []
        for task in tasks:
            row = TaskOut.model_validate(task).model_dump()
            owner = owners.get(task.user_id)
            row["user"] = TaskOwner.model_validate(owner).model_dump() if owner else None
            details.append(row)
        return details
