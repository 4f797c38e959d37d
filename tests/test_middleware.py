"""Tests for request middleware and the problem-details error handlers."""
import asyncio

import pytest
from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport

from app.exceptions import register_exception_handlers, NotFoundError
from app.middleware.correlation import CorrelationIdMiddleware, get_request_id
from app.middleware.timeout import RequestTimeoutMiddleware


def _app(timeout_seconds: float = 5.0) -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)
    app.add_middleware(RequestTimeoutMiddleware, timeout_seconds=timeout_seconds)
    app.add_middleware(CorrelationIdMiddleware)

    @app.get("/slow")
    async def slow():
        await asyncio.sleep(2)
        return {"ok": True}

    @app.get("/request-id")
    async def request_id():
        return {"requestId": get_request_id()}

    @app.get("/missing")
    async def missing():
        raise NotFoundError("Widget")

    @app.get("/boom")
    async def boom():
        raise RuntimeError("password=hunter2")

    return app


def _client(app: FastAPI) -> AsyncClient:
    return AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    )


@pytest.mark.asyncio
async def test_slow_request_times_out():
    async with _client(_app(timeout_seconds=0.05)) as client:
        response = await client.get("/slow")

    assert response.status_code == 504
    assert response.headers["Retry-After"] == "5"
    assert response.headers["content-type"].startswith("application/problem+json")
    assert response.json()["retryable"] is True


@pytest.mark.asyncio
async def test_correlation_headers_echoed():
    async with _client(_app()) as client:
        response = await client.get(
            "/request-id", headers={"X-Correlation-ID": "session-7", "X-Request-ID": "req-42"}
        )

    assert response.headers["X-Correlation-ID"] == "session-7"
    assert response.headers["X-Request-ID"] == "req-42"
    assert response.json() == {"requestId": "req-42"}


@pytest.mark.asyncio
async def test_ids_generated_when_absent():
    async with _client(_app()) as client:
        response = await client.get("/request-id")

    assert len(response.headers["X-Request-ID"]) == 12
    assert response.headers["X-Correlation-ID"]


@pytest.mark.asyncio
async def test_app_exception_is_problem_document():
    async with _client(_app()) as client:
        response = await client.get("/missing", headers={"X-Request-ID": "req-9"})

    body = response.json()
    assert response.status_code == 404
    assert body["detail"] == "Widget not found"
    assert body["instance"] == "/missing"
    assert body["code"] == "RES_001"
    assert body["trace_id"] == "req-9"


@pytest.mark.asyncio
async def test_unexpected_error_hides_detail():
    async with _client(_app()) as client:
        response = await client.get("/boom")

    assert response.status_code == 500
    assert response.json()["detail"] == "An unexpected error occurred"
    assert "hunter2" not in response.text
