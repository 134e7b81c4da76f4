"""
Registration and login built on the password hasher and token service.
"""

from __future__ import annotations

import asyncio
import functools
import logging
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from auth.jwt import TokenService
from auth.models import SessionClaims
from auth.password import hash_password, hash_password_async, verify_password_async
from database.helpers import create_user, get_user_by_username
from utils.errors import AuthenticationError

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


@functools.lru_cache(maxsize=None)
def _dummy_hash(rounds: int) -> str:
    # Checked against when the username is unknown so both failure paths
    # cost one bcrypt verification.
    return hash_password("dummy-password", rounds)


class AuthService:
    def __init__(
        self,
        session: AsyncSession,
        token_service: TokenService,
        bcrypt_rounds: int,
    ) -> None:
        self._session = session
        self._tokens = token_service
        self._rounds = bcrypt_rounds

    async def register(self, username: str, password: str, email: Optional[str] = None) -> int:
        """Create an identity and return its id; ``ConflictError`` on a taken name."""
        password_hash = await hash_password_async(password, self._rounds)
        user = await create_user(self._session, username, password_hash, email)
        logger.info("Registered user %s (%s)", user.username, user.id)
        return user.id

    async def login(self, username: str, password: str) -> Dict[str, Any]:
        """
        Check credentials and issue a token.

        Unknown username and wrong password raise the same
        ``AuthenticationError`` so callers cannot probe for accounts.
        """
        user = await get_user_by_username(self._session, username)
        if user is not None:
            stored_hash = user.password_hash
        else:
            stored_hash = await asyncio.to_thread(_dummy_hash, self._rounds)
        valid = await verify_password_async(password, stored_hash)

        if user is None or not valid:
            logger.warning("Failed login for %r", username)
            raise AuthenticationError(INVALID_CREDENTIALS)

        token = self._tokens.issue(SessionClaims(user_id=user.id, username=user.username))
        logger.info("Login: %s (%s)", user.username, user.id)
        return {
            "token": token,
            "user": {"id": user.id, "username": user.username},
        }
