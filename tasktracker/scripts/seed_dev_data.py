from __future__ import annotations

import asyncio
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tasktracker.config import settings
from tasktracker.crud.lookup import LookupKind, for_kind, resolve
from tasktracker.database import create_engine_from_settings, create_session_maker, init_db
from tasktracker.models import Task


@dataclass(frozen=True)
class SeedTaskSpec:
    title: str
    description: str
    category: str
    status: str
    user_name: str


@dataclass(frozen=True)
class SeedResult:
    default_user_id: int
    default_category_id: int
    default_status_id: int
    created_task_ids: tuple[int, ...]


DEMO_TASKS: tuple[SeedTaskSpec, ...] = (
    SeedTaskSpec(
        title="Write onboarding notes",
        description="Short guide for new contributors.",
        category="Work",
        status="In Progress",
        user_name="demo",
    ),
    SeedTaskSpec(
        title="Buy groceries",
        description="",
        category="Personal",
        status="Pending",
        user_name="demo",
    ),
)


async def _ensure_task(session: AsyncSession, *, spec: SeedTaskSpec) -> int | None:
    """Insert the demo task unless one with the same title already exists."""

    res = await session.execute(select(Task.id).where(Task.title == spec.title).limit(1))
    if res.scalar_one_or_none() is not None:
        return None

    task = Task(
        user_id=await resolve(session, LookupKind.user, spec.user_name),
        category_id=await resolve(session, LookupKind.category, spec.category),
        status_id=await resolve(session, LookupKind.status, spec.status),
        title=spec.title,
        description=spec.description,
        deadline=None,
    )
    session.add(task)
    await session.flush()
    return task.id


async def seed_dev_data_async(database_url: str | None = None) -> SeedResult:
    engine = create_engine_from_settings(
        settings.model_copy(update={"database_url": database_url}) if database_url else settings
    )
    session_maker = create_session_maker(engine)

    try:
        await init_db(engine)

        async with session_maker() as session:
            async with session.begin():
                # Resolving the defaults with no name creates the fallback rows.
                default_ids = [await for_kind(kind).get_or_create_id(session, name=None) for kind in LookupKind]

                created: list[int] = []
                for spec in DEMO_TASKS:
                    task_id = await _ensure_task(session, spec=spec)
                    if task_id is not None:
                        created.append(task_id)
    finally:
        await engine.dispose()

    return SeedResult(
        default_user_id=default_ids[0],
        default_category_id=default_ids[1],
        default_status_id=default_ids[2],
        created_task_ids=tuple(created),
    )


def seed_dev_data(database_url: str | None = None) -> SeedResult:
    return asyncio.run(seed_dev_data_async(database_url))


def main() -> None:
    result = seed_dev_data()
    print(f"seeded demo tasks: {list(result.created_task_ids) or 'none (already present)'}")


if __name__ == "__main__":
    main()
