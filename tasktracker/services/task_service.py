from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tasktracker.crud.lookup import LookupKind, resolve
from tasktracker.errors import NotFoundError, PersistenceError, ValidationError
from tasktracker.models import Category, Status, Task, User
from tasktracker.schemas.task import TaskRead, as_utc

logger = logging.getLogger("tasktracker.services.tasks")

# Failures we translate to PersistenceError. asyncpg can surface a refused
# connection as a plain OSError rather than a wrapped DBAPI error.
STORAGE_ERRORS: tuple[type[BaseException], ...] = (SQLAlchemyError, OSError)


def parse_task_id(raw: str | int) -> int:
    """Path ids that are not integers can never match a row."""

    try:
        return int(raw)
    except (TypeError, ValueError):
        raise NotFoundError("Task not found") from None


class TaskService:
    """Task CRUD on top of the lookup tables.

    Every method takes the request's session; the service never holds a
    connection between calls.
    """

    async def list_tasks(self, session: AsyncSession) -> list[TaskRead]:
        stmt = (
            select(
                Task.id,
                Task.title,
                Task.description,
                Task.deadline,
                User.name.label("user_name"),
                Category.name.label("category"),
                Status.name.label("status"),
            )
            .outerjoin(User, Task.user_id == User.id)
            .outerjoin(Category, Task.category_id == Category.id)
            .outerjoin(Status, Task.status_id == Status.id)
            .order_by(Task.id.asc())
        )

        try:
            rows = (await session.execute(stmt)).all()
        except STORAGE_ERRORS as e:
            logger.exception("list_tasks failed")
            raise PersistenceError("Failed to fetch tasks") from e

        return [
            TaskRead(
                task_id=row.id,
                title=row.title,
                description=row.description,
                # SQLite hands back naive values; they were written as UTC.
                deadline=as_utc(row.deadline),
                user_name=row.user_name,
                category=row.category,
                status=row.status,
            )
            for row in rows
        ]

    async def create_task(
        self,
        session: AsyncSession,
        *,
        title: str | None,
        category: str | None = None,
        description: str | None = None,
        deadline: datetime | None = None,
        status: str | None = None,
        user_name: str | None = None,
    ) -> int:
        _require_title(title)

        try:
            async with session.begin():
                user_id, category_id, status_id = await _resolve_lookups(
                    session, user_name=user_name, category=category, status=status
                )

                task = Task(
                    user_id=user_id,
                    category_id=category_id,
                    status_id=status_id,
                    title=title,
                    description=description or "",
                    deadline=as_utc(deadline),
                )
                session.add(task)
                await session.flush()  # ensure task.id is available
                task_id = task.id
        except STORAGE_ERRORS as e:
            logger.exception("create_task failed title=%r", title)
            raise PersistenceError("Failed to create task") from e

        logger.info("task_created task_id=%s", task_id)
        return task_id

    async def update_task(
        self,
        session: AsyncSession,
        task_id: str | int,
        *,
        title: str | None,
        category: str | None = None,
        description: str | None = None,
        deadline: datetime | None = None,
        status: str | None = None,
        user_name: str | None = None,
    ) -> None:
        _require_title(title)
        task_id = parse_task_id(task_id)

        # Lookup rows are committed even when no task matches; the 404 is
        # raised only after the transaction has closed.
        try:
            async with session.begin():
                user_id, category_id, status_id = await _resolve_lookups(
                    session, user_name=user_name, category=category, status=status
                )

                stmt = (
                    update(Task)
                    .where(Task.id == task_id)
                    .values(
                        user_id=user_id,
                        category_id=category_id,
                        status_id=status_id,
                        title=title,
                        description=description or "",
                        deadline=as_utc(deadline),
                    )
                    .execution_options(synchronize_session=False)
                )
                result = await session.execute(stmt)
                matched = result.rowcount
        except STORAGE_ERRORS as e:
            logger.exception("update_task failed task_id=%s", task_id)
            raise PersistenceError("Failed to update task") from e

        if matched == 0:
            raise NotFoundError("Task not found")

        logger.info("task_updated task_id=%s", task_id)

    async def delete_task(self, session: AsyncSession, task_id: str | int) -> None:
        task_id = parse_task_id(task_id)

        try:
            async with session.begin():
                stmt = delete(Task).where(Task.id == task_id).execution_options(synchronize_session=False)
                result = await session.execute(stmt)
                deleted = result.rowcount
        except STORAGE_ERRORS as e:
            logger.exception("delete_task failed task_id=%s", task_id)
            raise PersistenceError("Failed to delete task") from e

        if deleted == 0:
            raise NotFoundError("Task not found")

        logger.info("task_deleted task_id=%s", task_id)


def _require_title(title: str | None) -> None:
    if not title:
        raise ValidationError("Title is required")


async def _resolve_lookups(
    session: AsyncSession,
    *,
    user_name: str | None,
    category: str | None,
    status: str | None,
) -> tuple[int, int, int]:
    user_id = await resolve(session, LookupKind.user, user_name)
    category_id = await resolve(session, LookupKind.category, category)
    status_id = await resolve(session, LookupKind.status, status)
    return user_id, category_id, status_id
