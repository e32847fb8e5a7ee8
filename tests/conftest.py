"""
Pytest fixtures: in-memory database, fake Redis and an HTTP client bound to the app
"""

from unittest.mock import AsyncMock, patch

import pytest
import pytest_asyncio
from fakeredis import FakeAsyncRedis
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from userauth.core.redis import get_redis_client
from userauth.db.database import get_session
from userauth.main import app


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db(engine):
    async with AsyncSession(engine, expire_on_commit=False) as session:
        yield session


@pytest_asyncio.fixture
async def redis_client():
    client = FakeAsyncRedis(decode_responses=True)
    yield client
    await client.flushall()
    await client.aclose()


@pytest_asyncio.fixture
async def client(engine, redis_client):
    """HTTP client talking to the app with database and Redis swapped out"""

    async def override_get_session():
        async with AsyncSession(engine, expire_on_commit=False) as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_redis_client] = lambda: redis_client

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def new_client():
    """Factory for extra clients with their own cookie jar"""

    def _new_client():
        return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")

    return _new_client


@pytest.fixture
def sent_emails():
    with patch("userauth.graphql.resolvers.send_email", new_callable=AsyncMock) as mock_send:
        yield mock_send


@pytest.fixture
def gql():
    """Posts a GraphQL operation and returns the decoded body"""

    async def _gql(http_client, query, variables=None):
        response = await http_client.post(
            "/graphql",
            json={"query": query, "variables": variables or {}},
        )
        assert response.status_code == 200, response.text
        return response.json()

    return _gql
