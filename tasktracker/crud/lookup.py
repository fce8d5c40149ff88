from __future__ import annotations

import enum
from typing import Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tasktracker.models import Category, Status, User


TModel = TypeVar("TModel", User, Category, Status)


class LookupKind(str, enum.Enum):
    user = "user"
    category = "category"
    status = "status"


class LookupCRUD(Generic[TModel]):
    """Get-or-create helper for name-keyed lookup tables (async).

    Notes:
    - Methods never commit. Callers own the transaction, so rows created here
      roll back with the enclosing operation.
    - find_id + create is a check-then-insert, not an upsert. Two sessions
      resolving the same unseen name at once can both insert; the second one
      fails on the unique index of ``name``.
    """

    def __init__(self, model: type[TModel], *, default_name: str) -> None:
        self.model = model
        self.default_name = default_name

    def normalize(self, name: str | None) -> str:
        if name is None or not name.strip():
            return self.default_name
        return name

    async def find_id(self, session: AsyncSession, *, name: str) -> int | None:
        q = select(self.model.id).where(self.model.name == name)
        r = await session.execute(q)
        return r.scalar_one_or_none()

    async def create(self, session: AsyncSession, *, name: str) -> int:
        db_obj = self.model(name=name)
        session.add(db_obj)
        await session.flush()  # ensure db_obj.id is available
        return db_obj.id

    async def get_or_create_id(self, session: AsyncSession, *, name: str | None) -> int:
        name = self.normalize(name)

        existing = await self.find_id(session, name=name)
        if existing is not None:
            return existing

        return await self.create(session, name=name)


users = LookupCRUD(User, default_name="Unknown")
categories = LookupCRUD(Category, default_name="Default")
statuses = LookupCRUD(Status, default_name="Pending")

_BY_KIND: dict[LookupKind, LookupCRUD] = {
    LookupKind.user: users,
    LookupKind.category: categories,
    LookupKind.status: statuses,
}


def for_kind(kind: LookupKind) -> LookupCRUD:
    return _BY_KIND[LookupKind(kind)]


async def resolve(session: AsyncSession, kind: LookupKind, name: str | None) -> int:
    """Map a free-form name to the id of its lookup row, creating it on a miss."""

    return await for_kind(kind).get_or_create_id(session, name=name)
