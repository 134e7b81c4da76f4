"""
Task API routes. Every route requires a valid bearer token and only ever
sees the caller's own tasks.
"""

from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from auth.dependencies import db_session, get_current_claims
from auth.models import SessionClaims
from tasks.service import TaskService
from utils.schemas import TaskCreatedResponse, TaskCreateRequest, TaskOut, TaskWithUser

router = APIRouter(tags=["tasks"])


def get_task_service(
    session: AsyncSession = Depends(db_session),
    claims: SessionClaims = Depends(get_current_claims),
) -> TaskService:
    return TaskService(session, claims)


@router.get("/tasks", response_model=List[TaskOut])
async def list_tasks(tasks: TaskService = Depends(get_task_service)):
    return await tasks.list_tasks()


@router.post(
    "/tasks",
    response_model=TaskCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_task(
    request: TaskCreateRequest,
    tasks: TaskService = Depends(get_task_service),
) -> Dict[str, Any]:
    task_id = await tasks.create(request.title, request.description)
    return {"message": "Task created successfully", "task_id": task_id}


@router.get("/tasks/{task_id}", response_model=TaskOut)
async def get_task(task_id: int, tasks: TaskService = Depends(get_task_service)):
    return await tasks.get(task_id)


@router.get("/search", response_model=List[TaskOut])
async def search_tasks(
    q: str = Query(default="", max_length=200),
    tasks: TaskService = Depends(get_task_service),
):
    """Title substring search over the caller's tasks."""
    return await tasks.search(q)


@router.get("/tasks-with-details", response_model=List[TaskWithUser])
async def list_tasks_with_details(tasks: TaskService = Depends(get_task_service)):
    return await tasks.list_with_details()
