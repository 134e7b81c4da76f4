"""
Ownership-scoped task statements.

Every statement built here filters on ``Task.user_id`` for the owner the
builder was created for, and new rows are stamped with that owner.  Every
user-supplied value (owner id, task id, search term) travels as a bound
parameter.  Route code never composes task SQL itself; it asks an
``OwnedTaskQueries`` for the statement.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import Select, select

from database.models import Task


class OwnedTaskQueries:
    """Statement builder bound to a single owner id."""

    def __init__(self, owner_id: int) -> None:
        if not isinstance(owner_id, int) or isinstance(owner_id, bool):
            raise TypeError("owner_id must be an int")
        self.owner_id = owner_id

    def _scoped(self) -> Select:
        return select(Task).where(Task.user_id == self.owner_id)

    def list_all(self) -> Select:
        return self._scoped().order_by(Task.id)

    def by_id(self, task_id: int) -> Select:
        return self._scoped().where(Task.id == task_id)

    def search_title(self, term: str) -> Select:
        """
        Case-insensitive on every backend.  ``%`` and ``_`` in ``term`` are
        escaped so they match themselves.
        """
        return (
            self._scoped()
            .where(Task.title.icontains(term, autoescape=True))
            .order_by(Task.id)
        )

    def new_task(self, title: str, description: Optional[str] = None) -> Task:
        """A pending row stamped with the owner; callers add and flush it."""
        return Task(title=title, description=description, user_id=self.owner_id)
