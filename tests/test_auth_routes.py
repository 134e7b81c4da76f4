"""
HTTP tests for registration and login.
"""

import asyncio

import httpx
import pytest
from sqlalchemy import func, select

from auth.models import SessionClaims
from conftest import register_and_login
from database.models import User
from database.session import init_models
from main import create_app


async def _user_count(app, username: str) -> int:
    async with app.state.session_factory() as session:
        result = await session.execute(
            select(func.count()).select_from(User).where(User.username == username)
        )
        return result.scalar_one()


class TestRegister:
    @pytest.mark.asyncio
    async def test_register_returns_user_id(self, client):
        resp = await client.post(
            "/api/register",
            json={"username": "alice", "password": "pw1", "email": "alice@example.com"},
        )
        assert resp.status_code == 201
        body = resp.json()
        assert body["message"] == "User created successfully"
        assert isinstance(body["userId"], int)

    @pytest.mark.asyncio
    async def test_duplicate_username_conflicts(self, app, client):
        payload = {"username": "alice", "password": "pw1", "email": "a@example.com"}
        first = await client.post("/api/register", json=payload)
        second = await client.post("/api/register", json={**payload, "password": "other"})

        assert first.status_code == 201
        assert second.status_code == 400
        assert second.json() == {"error": "Username already exists"}
        assert await _user_count(app, "alice") == 1

    @pytest.mark.asyncio
    async def test_password_is_stored_hashed(self, app, client):
        await client.post("/api/register", json={"username": "alice", "password": "pw1"})
        async with app.state.session_factory() as session:
            user = (await session.execute(select(User))).scalar_one()
        assert user.password_hash != "pw1"
        assert user.password_hash.startswith("$2b$04$")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {"password": "pw1"},
            {"username": "alice"},
            {"username": "", "password": "pw1"},
            {"username": "   ", "password": "pw1"},
            {"username": "alice", "password": "x" * 73},
        ],
    )
    async def test_invalid_body_is_400(self, client, payload):
        resp = await client.post("/api/register", json=payload)
        assert resp.status_code == 400
        assert set(resp.json()) == {"error"}

    @pytest.mark.asyncio
    async def test_simultaneous_registrations_yield_one_user(self, settings, tmp_path):
        # A file database gives each session its own connection, so the
        # inserts really race on the unique constraint.
        db_url = f"sqlite+aiosqlite:///{tmp_path / 'users.db'}"
        app = create_app(settings.model_copy(update={"database_url": db_url}))
        await init_models(app.state.engine)
        try:
            transport = httpx.ASGITransport(app=app)
            async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
                responses = await asyncio.gather(*[
                    client.post("/api/register", json={"username": "dup", "password": f"pw{i}"})
                    for i in range(5)
                ])

            statuses = sorted(resp.status_code for resp in responses)
            assert statuses == [201, 400, 400, 400, 400]
            for resp in responses:
                if resp.status_code == 400:
                    assert resp.json() == {"error": "Username already exists"}
            assert await _user_count(app, "dup") == 1
        finally:
            await app.state.engine.dispose()


class TestLogin:
    @pytest.mark.asyncio
    async def test_login_returns_token_and_public_profile(self, app, client):
        reg = await client.post(
            "/api/register",
            json={"username": "alice", "password": "pw1", "email": "alice@example.com"},
        )
        user_id = reg.json()["userId"]

        resp = await client.post("/api/login", json={"username": "alice", "password": "pw1"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["user"] == {"id": user_id, "username": "alice"}
        assert set(body) == {"token", "user"}
        assert "$2b$" not in resp.text

        claims = app.state.token_service.verify(body["token"])
        assert claims == SessionClaims(user_id=user_id, username="alice")

    @pytest.mark.asyncio
    async def test_wrong_password_and_unknown_user_look_the_same(self, client):
        await register_and_login(client, "alice", "pw1")

        wrong_pw = await client.post("/api/login", json={"username": "alice", "password": "nope"})
        unknown = await client.post("/api/login", json={"username": "mallory", "password": "pw1"})

        assert wrong_pw.status_code == unknown.status_code == 401
        assert wrong_pw.json() == unknown.json() == {"error": "Invalid credentials"}

    @pytest.mark.asyncio
    async def test_missing_fields_is_400(self, client):
        resp = await client.post("/api/login", json={"username": "alice"})
        assert resp.status_code == 400
        assert "error" in resp.json()
