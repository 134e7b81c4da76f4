"""
Shared fixtures: an app wired to an in-memory SQLite database and an httpx
client that drives it in-process.
"""

from typing import List

import httpx
import pytest
import pytest_asyncio
from sqlalchemy import event

from config.settings import Settings
from database.session import init_models
from main import create_app

TEST_SECRET = "test-secret-key"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        database_url="sqlite+aiosqlite://",
        jwt_secret=TEST_SECRET,
        jwt_key_id="test",
        bcrypt_rounds=4,
        api_prefix="/api",
    )


@pytest_asyncio.fixture
async def app(settings):
    application = create_app(settings)
    await init_models(application.state.engine)
    yield application
    await application.state.engine.dispose()


@pytest_asyncio.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def statements(app) -> List[str]:
    """Every SQL statement the app sends to the database, in order."""
    executed: List[str] = []

    def _record(conn, cursor, statement, parameters, context, executemany):
        executed.append(statement)

    event.listen(app.state.engine.sync_engine, "before_cursor_execute", _record)
    yield executed
    event.remove(app.state.engine.sync_engine, "before_cursor_execute", _record)


async def register_and_login(client: httpx.AsyncClient, username: str, password: str) -> str:
    """Register ``username`` and return a bearer token for it."""
    resp = await client.post(
        "/api/register",
        json={"username": username, "password": password, "email": f"{username}@example.com"},
    )
    assert resp.status_code == 201, resp.text
    resp = await client.post("/api/login", json={"username": username, "password": password})
    assert resp.status_code == 200, resp.text
    return resp.json()["token"]


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
