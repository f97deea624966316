import os

# Must be set before any crossorigin imports, since crossorigin/core/config.py
# reads them at module level via pydantic-settings.
os.environ.setdefault("CORS_ORIGINS", "")
os.environ.setdefault("DEV_MODE", "true")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from httpx import ASGITransport, AsyncClient

from crossorigin import CrossOriginMiddleware

DOWNSTREAM_HEADERS = {
    "X-Custom": "1",
    "X-Request-Id": "abc123",
    "Cache-Control": "no-cache",
}


def build_downstream() -> FastAPI:
    """App whose single route counts invocations and sets a few headers."""
    app = FastAPI()
    app.state.calls = 0

    @app.api_route("/resource", methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"])
    async def resource(request: Request):
        request.app.state.calls += 1
        return PlainTextResponse("payload", headers=DOWNSTREAM_HEADERS)

    return app


@pytest.fixture
def downstream():
    """Factory for the bare application, without CORS handling."""
    return build_downstream


@pytest.fixture
def make_app():
    """Factory: downstream app wrapped in CrossOriginMiddleware with the given options."""

    def _make(**options) -> FastAPI:
        app = build_downstream()
        app.add_middleware(CrossOriginMiddleware, **options)
        return app

    return _make


@pytest.fixture
def send():
    """Send one request through an ASGI app and return the httpx response."""

    async def _send(app, method: str, path: str = "/resource", headers=None):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            return await client.request(method, path, headers=headers)

    return _send
