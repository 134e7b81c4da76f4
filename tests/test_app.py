"""
Tests for application wiring: request timing header and startup checks.
"""

import logging

import pytest

from config.settings import DEFAULT_JWT_SECRET
from main import create_app


class TestRequestTimer:
    @pytest.mark.asyncio
    async def test_process_time_header_is_set(self, client):
        resp = await client.post("/api/login", json={"username": "nobody", "password": "pw"})
        assert resp.status_code == 401
        assert float(resp.headers["X-Process-Time"]) >= 0


class TestStartup:
    @pytest.mark.asyncio
    async def test_placeholder_secret_is_warned_about(self, settings, caplog):
        app = create_app(settings.model_copy(update={"jwt_secret": DEFAULT_JWT_SECRET}))
        with caplog.at_level(logging.WARNING, logger="main"):
            await app.router.startup()
        await app.router.shutdown()

        assert any("JWT_SECRET is not set" in rec.getMessage() for rec in caplog.records)

    @pytest.mark.asyncio
    async def test_configured_secret_is_not_warned_about(self, settings, caplog):
        app = create_app(settings)
        with caplog.at_level(logging.WARNING, logger="main"):
            await app.router.startup()
        await app.router.shutdown()

        assert not any("JWT_SECRET" in rec.getMessage() for rec in caplog.records)
