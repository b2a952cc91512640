"""
Name: Middleware Tests

Responsibilities:
  - BodyLimitMiddleware rejects oversized bodies with problem+json 413
  - RequestContextMiddleware generates X-Request-Id when absent
"""

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from shortdrama.crosscutting.middleware import BodyLimitMiddleware, RequestContextMiddleware

pytestmark = pytest.mark.unit


def _make_app(max_bytes: int) -> FastAPI:
    app = FastAPI()
    app.add_middleware(BodyLimitMiddleware, max_bytes=max_bytes)
    app.add_middleware(RequestContextMiddleware)

    @app.post("/echo")
    async def echo(request: Request):
        body = await request.body()
        return {"size": len(body), "request_id": request.state.request_id}

    return app


class TestBodyLimitMiddleware:
    def test_small_body_passes(self):
        client = TestClient(_make_app(max_bytes=16))

        response = client.post("/echo", content=b"12345")

        assert response.status_code == 200
        assert response.json()["size"] == 5

    def test_oversized_body_is_rejected(self):
        client = TestClient(_make_app(max_bytes=16))

        response = client.post("/echo", content=b"x" * 64)

        assert response.status_code == 413
        assert response.headers["content-type"].startswith("application/problem+json")
        assert response.json()["code"] == "PAYLOAD_TOO_LARGE"


class TestRequestContextMiddleware:
    def test_generates_request_id(self):
        client = TestClient(_make_app(max_bytes=16))

        response = client.post("/echo", content=b"")

        request_id = response.headers["X-Request-Id"]
        assert request_id
        assert response.json()["request_id"] == request_id
