"""
Shared fixtures: in-memory stay store, async SQLite session, HTTP client
"""
import asyncio
import dataclasses
import os
from datetime import datetime
from typing import List, Optional, Tuple

os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("DB_URL", "sqlite+aiosqlite://")
os.environ.setdefault("LOG_FORMAT", "text")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from travel_history.config.settings import Settings, SecuritySettings, get_settings
from travel_history.core.db import Base, get_db
from travel_history.main import app
from travel_history.models import history  # noqa: F401  registers the history table
from travel_history.models.internal_models import BlogPost, Stay
from travel_history.services.stay_store import StayStore

TEST_WRITE_KEY = "test-write-key"


class InMemoryStayStore(StayStore):
    """
    Stay store over a dict, recording every write as (operation, stay_id).

    With ``yield_on_fetch`` each read gives the event loop a turn, so
    concurrent callers can interleave the way they would against a database.
    """

    def __init__(self, stays=(), yield_on_fetch: bool = False):
        self.stays = {stay.id: stay for stay in stays}
        self.writes: List[Tuple[str, int]] = []
        self.fetch_all_calls = 0
        self.yield_on_fetch = yield_on_fetch
        self._next_id = max(self.stays, default=0) + 1

    async def fetch_all(self) -> List[Stay]:
        self.fetch_all_calls += 1
        snapshot = list(self.stays.values())
        if self.yield_on_fetch:
            await asyncio.sleep(0)
        return snapshot

    async def fetch_by_id(self, stay_id: int) -> Optional[Stay]:
        return self.stays.get(stay_id)

    async def insert(self, start, end, group, name, country, timezone_offset) -> Stay:
        stay = Stay(
            id=self._next_id,
            start=start,
            end=end,
            group=group,
            name=name,
            country=country,
            timezone_offset=timezone_offset,
        )
        self._next_id += 1
        self.stays[stay.id] = stay
        self.writes.append(("insert", stay.id))
        return stay

    async def update_start(self, stay_id, value):
        self._replace("update_start", stay_id, start=value)

    async def update_end(self, stay_id, value):
        self._replace("update_end", stay_id, end=value)

    async def update_group(self, stay_id, value):
        self._replace("update_group", stay_id, group=value)

    async def update_name(self, stay_id, value):
        self._replace("update_name", stay_id, name=value)

    async def update_country(self, stay_id, value):
        self._replace("update_country", stay_id, country=value)

    async def update_timezone(self, stay_id, value):
        self._replace("update_timezone", stay_id, timezone_offset=value)

    async def set_blog_post(self, stay_id, url, name):
        self._replace("set_blog_post", stay_id, blog_post=BlogPost(url=url, name=name))

    async def clear_blog_post(self, stay_id):
        self._replace("clear_blog_post", stay_id, blog_post=None)

    async def set_map_url(self, stay_id, url):
        self._replace("set_map_url", stay_id, map_url=url)

    def _replace(self, operation: str, stay_id: int, **changes):
        self.writes.append((operation, stay_id))
        if stay_id in self.stays:
            self.stays[stay_id] = dataclasses.replace(self.stays[stay_id], **changes)


@pytest.fixture
def make_stay():
    """Build a Stay with sensible defaults for everything but id and start"""
    def _make(
        stay_id: int,
        start: datetime,
        end: Optional[datetime] = None,
        **fields,
    ) -> Stay:
        values = {
            "group": "holiday",
            "name": f"Place {stay_id}",
            "country": "France",
            "timezone_offset": 1,
        }
        values.update(fields)
        return Stay(id=stay_id, start=start, end=end, **values)

    return _make


@pytest.fixture
def memory_store():
    """Factory for in-memory stores seeded with the given stays"""
    def _store(stays=(), **kwargs) -> InMemoryStayStore:
        return InMemoryStayStore(stays, **kwargs)

    return _store


@pytest_asyncio.fixture
async def db_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine):
    session_factory = async_sessionmaker(db_engine, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
def test_settings():
    return Settings(
        environment="testing",
        security=SecuritySettings(auth_key=TEST_WRITE_KEY),
    )


@pytest_asyncio.fixture
async def async_client(db_engine, test_settings):
    session_factory = async_sessionmaker(db_engine, expire_on_commit=False)

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: test_settings

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def authenticated_headers():
    return {"X-API-Key": TEST_WRITE_KEY}
