"""
Shared fixtures: a throwaway SQLite database and an ASGI test client.
"""
import os
import tempfile

# Must be set before src.config is imported anywhere
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{tempfile.mkdtemp()}/trip_route_test.db"
os.environ["GOOGLE_MAPS_API_KEY"] = ""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from src.auth.jwt import create_access_token
from src.infrastructure.database import AsyncSessionLocal, Base, engine, init_db
from src.main import app


@pytest_asyncio.fixture
async def database():
    """Fresh tables for one test."""
    await init_db()
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(database):
    async with AsyncSessionLocal() as session:
        yield session


@pytest_asyncio.fixture
async def client(database):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http_client:
        yield http_client
    app.dependency_overrides.clear()


@pytest.fixture
def user_id():
    return "user-1"


@pytest.fixture
def auth_headers(user_id):
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


@pytest.fixture
def other_auth_headers():
    return {"Authorization": f"Bearer {create_access_token('user-2')}"}
