import asyncio
import sqlite3
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool

from tasktracker.config import Settings
from tasktracker.database import create_session_maker, init_db
from tasktracker.main import create_app


# TestClient runs each request through its own event loop, so pooled aiosqlite
# connections must not be shared between requests.
def _test_engine(db_path: Path) -> AsyncEngine:
    return create_async_engine(f"sqlite+aiosqlite:///{db_path}", poolclass=NullPool)


@pytest.fixture()
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture()
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "tasks.db"


@pytest.fixture()
def engine(db_path: Path):
    eng = _test_engine(db_path)
    asyncio.run(init_db(eng))
    yield eng
    asyncio.run(eng.dispose())


@pytest.fixture()
def session_maker(engine: AsyncEngine):
    return create_session_maker(engine)


@pytest.fixture()
def app(engine: AsyncEngine, db_path: Path):
    settings = Settings(database_url=f"sqlite+aiosqlite:///{db_path}", create_schema_on_startup=False)
    return create_app(settings, engine=engine)


@pytest.fixture()
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture()
def query(db_path: Path):
    """Run a read-only SQL statement straight against the test database file."""

    def _query(sql: str, params: tuple = ()) -> list[tuple]:
        with sqlite3.connect(db_path) as conn:
            return conn.execute(sql, params).fetchall()

    return _query
