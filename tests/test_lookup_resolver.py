import pytest

from tasktracker.crud import lookup
from tasktracker.crud.lookup import LookupKind, resolve


@pytest.mark.anyio
async def test_find_id_returns_none_until_created(session_maker):
    async with session_maker() as session:
        async with session.begin():
            assert await lookup.categories.find_id(session, name="Work") is None

            created = await lookup.categories.create(session, name="Work")
            assert await lookup.categories.find_id(session, name="Work") == created


@pytest.mark.anyio
async def test_resolve_same_name_twice_returns_same_id(session_maker, query):
    async with session_maker() as session:
        async with session.begin():
            first = await resolve(session, LookupKind.user, "alice")

    async with session_maker() as session:
        async with session.begin():
            second = await resolve(session, LookupKind.user, "alice")

    assert first == second
    assert query("SELECT COUNT(*) FROM users WHERE name = ?", ("alice",)) == [(1,)]


@pytest.mark.parametrize(
    ("kind", "default_name", "table"),
    [
        (LookupKind.user, "Unknown", "users"),
        (LookupKind.category, "Default", "categories"),
        (LookupKind.status, "Pending", "statuses"),
    ],
)
@pytest.mark.anyio
async def test_blank_names_resolve_to_kind_default(session_maker, query, kind, default_name, table):
    async with session_maker() as session:
        async with session.begin():
            ids = {
                await resolve(session, kind, None),
                await resolve(session, kind, ""),
                await resolve(session, kind, "   "),
                await resolve(session, kind, default_name),
            }

    assert len(ids) == 1
    assert query(f"SELECT name FROM {table}") == [(default_name,)]


@pytest.mark.anyio
async def test_lookup_rows_roll_back_with_caller_transaction(session_maker, query):
    async with session_maker() as session:
        await session.begin()
        await resolve(session, LookupKind.status, "Blocked")
        await session.rollback()

    assert query("SELECT COUNT(*) FROM statuses") == [(0,)]


def test_names_are_not_trimmed():
    assert lookup.users.normalize(" alice ") == " alice "
    assert lookup.users.normalize(None) == "Unknown"
    assert lookup.for_kind("status") is lookup.statuses
