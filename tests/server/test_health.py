from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient

from simwire.main import create_app


@pytest.mark.asyncio
async def test_health_reports_protocol_version(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        resp = await ac.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "protocol_version": 2}


def test_health_with_sync_client(client):
    assert client.get("/health").json()["status"] == "ok"


def test_create_app_requires_host():
    with pytest.raises(TypeError, match="does not implement SimulationHost"):
        create_app(object())


def test_app_state(app, host, test_settings):
    assert app.state.host is host
    assert app.state.settings is test_settings
