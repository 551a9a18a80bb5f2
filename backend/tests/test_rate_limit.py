import pytest
from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport
from birthday_api.core.limiter import RATE_LIMIT_MESSAGE, build_limiter, install_rate_limit, limiter
from birthday_api.main import app as service_app


def limited_app(rate: str) -> FastAPI:
    app = FastAPI()
    install_rate_limit(app, build_limiter(rate))

    @app.get("/ping")
    async def ping():
        return {"ok": True}

    @app.get("/pong")
    async def pong():
        return {"ok": True}

    return app


@pytest.mark.asyncio
async def test_requests_over_limit_get_429_envelope():
    app = limited_app("2 per minute")
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        assert (await client.get("/ping")).status_code == 200
        assert (await client.get("/ping")).status_code == 200
        r = await client.get("/ping")
    assert r.status_code == 429
    assert r.json() == {"success": False, "message": RATE_LIMIT_MESSAGE}


@pytest.mark.asyncio
async def test_limit_is_shared_across_routes():
    app = limited_app("2 per minute")
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        assert (await client.get("/ping")).status_code == 200
        assert (await client.get("/pong")).status_code == 200
        assert (await client.get("/ping")).status_code == 429


@pytest.mark.asyncio
async def test_disabled_limiter_lets_everything_through():
    app = FastAPI()
    install_rate_limit(app, build_limiter("1 per minute", enabled=False))

    @app.get("/ping")
    async def ping():
        return {"ok": True}

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        for _ in range(3):
            assert (await client.get("/ping")).status_code == 200


def test_service_uses_configured_limiter():
    assert service_app.state.limiter is limiter
    assert limiter.enabled
