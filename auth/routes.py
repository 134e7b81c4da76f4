"""
Auth API routes — register, login.

Route prefix: config.api_prefix (``/api``)
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from auth.dependencies import get_auth_service
from auth.service import AuthService
from utils.schemas import LoginRequest, LoginResponse, RegisterRequest, RegisterResponse

router = APIRouter(tags=["auth"])


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    req: RegisterRequest,
    auth: AuthService = Depends(get_auth_service),
) -> Dict[str, Any]:
    """Register a new user."""
    user_id = await auth.register(req.username, req.password, req.email)
    return {"message": "User created successfully", "user_id": user_id}


@router.post("/login", response_model=LoginResponse)
async def login(
    req: LoginRequest,
    auth: AuthService = Depends(get_auth_service),
) -> Dict[str, Any]:
    """Login with username + password."""
    return await auth.login(req.username, req.password)
