"""
Credential store helpers — insert and look up user identities.

Uniqueness of ``username`` is enforced by the database constraint, so two
concurrent registrations for the same name resolve to one row and one
``ConflictError`` without any application-level locking.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import User
from utils.errors import ConflictError, StoreError

logger = logging.getLogger(__name__)


async def create_user(
    session: AsyncSession,
    username: str,
    password_hash: str,
    email: Optional[str] = None,
) -> User:
    """Insert a ``User`` row and commit it; returns the row with its id."""
    user = User(username=username, password_hash=password_hash, email=email)
    session.add(user)
    try:
        await session.flush()
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise ConflictError()
    except SQLAlchemyError:
        await session.rollback()
        logger.exception("Failed to insert user %s", username)
        raise StoreError()
    return user


async def get_user_by_username(session: AsyncSession, username: str) -> Optional[User]:
    try:
        result = await session.execute(select(User).where(User.username == username))
    except SQLAlchemyError:
        logger.exception("User lookup failed")
        raise StoreError()
    return result.scalar_one_or_none()


async def get_users_by_ids(session: AsyncSession, user_ids: Iterable[int]) -> Dict[int, User]:
    """Fetch every user in ``user_ids`` with a single query."""
    ids = set(user_ids)
    if not ids:
        return {}
    try:
        result = await session.execute(select(User).where(User.id.in_(ids)))
    except SQLAlchemyError:
        logger.exception("Batched user lookup failed for %d ids", len(ids))
        raise StoreError()
    return {user.id: user for user in result.scalars().all()}
