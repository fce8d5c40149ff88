from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from tasktracker.database import get_db
from tasktracker.schemas.task import TaskCreated, TaskMessage, TaskRead, TaskWrite
from tasktracker.services.task_service import TaskService


router = APIRouter(prefix="/tasks", tags=["tasks"])


def get_task_service(request: Request) -> TaskService:
    return request.app.state.task_service


@router.get("", response_model=list[TaskRead])
async def list_tasks_endpoint(
    session: AsyncSession = Depends(get_db),
    service: TaskService = Depends(get_task_service),
) -> list[TaskRead]:
    return await service.list_tasks(session)


@router.post("", response_model=TaskCreated, status_code=status.HTTP_201_CREATED)
async def create_task_endpoint(
    payload: TaskWrite,
    session: AsyncSession = Depends(get_db),
    service: TaskService = Depends(get_task_service),
) -> TaskCreated:
    task_id = await service.create_task(
        session,
        title=payload.title,
        category=payload.category,
        description=payload.description,
        deadline=payload.deadline,
        status=payload.status,
        user_name=payload.user_name,
    )
    return TaskCreated(message="Task created", task_id=task_id)


@router.put("/{task_id}", response_model=TaskMessage)
async def update_task_endpoint(
    task_id: str,
    payload: TaskWrite,
    session: AsyncSession = Depends(get_db),
    service: TaskService = Depends(get_task_service),
) -> TaskMessage:
    await service.update_task(
        session,
        task_id,
        title=payload.title,
        category=payload.category,
        description=payload.description,
        deadline=payload.deadline,
        status=payload.status,
        user_name=payload.user_name,
    )
    return TaskMessage(message="Task updated")


@router.delete("/{task_id}", response_model=TaskMessage)
async def delete_task_endpoint(
    task_id: str,
    session: AsyncSession = Depends(get_db),
    service: TaskService = Depends(get_task_service),
) -> TaskMessage:
    await service.delete_task(session, task_id)
    return TaskMessage(message="Task deleted")
