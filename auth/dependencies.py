"""
FastAPI dependencies for authentication.

Provides ``db_session`` and ``get_current_claims`` dependencies that
are used across all protected routes.  ``get_current_claims`` is the
per-request authorization gate: no bearer token is a 401, a token that
fails verification is a 403, and a verified token's claims are attached
to ``request.state.claims`` before the handler runs.
"""

from __future__ import annotations

from typing import AsyncGenerator, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from auth.jwt import TokenService
from auth.models import SessionClaims
from auth.service import AuthService
from database.session import get_db_session
from utils.errors import AuthenticationError

# auto_error=False so a missing header reaches us and gets our own message.
_bearer_scheme = HTTPBearer(auto_error=False)


async def db_session(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[AsyncSession, None]:
    """Yield a DB session for route handlers."""
    yield session


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_auth_service(
    request: Request,
    session: AsyncSession = Depends(db_session),
    tokens: TokenService = Depends(get_token_service),
) -> AuthService:
    return AuthService(session, tokens, request.app.state.settings.bcrypt_rounds)


async def get_current_claims(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    tokens: TokenService = Depends(get_token_service),
) -> SessionClaims:
    """
    Extract and verify the Bearer token, returning the authenticated
    ``SessionClaims``.
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Access token required")

    # InvalidTokenError (403) propagates to the exception handlers.
    claims = tokens.verify(credentials.credentials)
    request.state.claims = claims
    return claims
