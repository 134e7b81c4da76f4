"""
Pydantic schemas for the task tracker API.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

# bcrypt ignores everything past this many bytes of input.
MAX_PASSWORD_BYTES = 72


# ═══════════════════════════════════════════════════════════════════════════════
# Auth — Requests / Responses
# ═══════════════════════════════════════════════════════════════════════════════


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=1)
    email: Optional[str] = Field(default=None, max_length=255)

    @field_validator("username")
    @classmethod
    def username_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("username must not be blank")
        return value

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")
        return value


class LoginRequest(BaseModel):
    username: str
    password: str


class RegisterResponse(BaseModel):
    message: str
    user_id: int = Field(serialization_alias="userId")


class PublicUser(BaseModel):
    """The only user fields ever returned by login."""

    id: int
    username: str


class LoginResponse(BaseModel):
    token: str
    user: PublicUser


# ═══════════════════════════════════════════════════════════════════════════════
# Tasks
# ═══════════════════════════════════════════════════════════════════════════════


class TaskCreateRequest(BaseModel):
    # Optional here so a missing title yields "Title is required" from the
    # service rather than a generic body error.
    title: Optional[str] = None
    description: Optional[str] = None


class TaskCreatedResponse(BaseModel):
    message: str
    task_id: int = Field(serialization_alias="taskId")


class TaskOut(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    title: str
    description: Optional[str] = None
    status: str
    user_id: int
    created_at: Optional[datetime] = None


class TaskOwner(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    username: str
    email: Optional[str] = None


class TaskWithUser(TaskOut):
    user: Optional[TaskOwner] = None
