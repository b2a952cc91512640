"""
Name: FastAPI Application Entry Point

Responsibilities:
  - Initialize FastAPI application with metadata (title, version)
  - Configure middleware (body limit, request context, CORS)
  - Mount router with novel/outline/script endpoints under /v1 prefix
  - Expose health check endpoint

Collaborators:
  - FastAPI: ASGI web framework
  - CORSMiddleware: Cross-Origin Resource Sharing handler
  - RequestContextMiddleware: Request ID and logging context
  - BodyLimitMiddleware: rejects oversized uploads early
  - interfaces.api.http.router: business endpoints

Constraints:
  - CORS configurable via ALLOWED_ORIGINS env var (comma-separated)
  - No authentication (single-user tool)
  - Health check does not call Gemini

Notes:
  - /healthz follows Kubernetes health check convention
  - Env validation enforced at startup (via lifespan, not import time)
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..container import get_llm_service
from ..crosscutting.config import get_settings
from ..crosscutting.logger import logger
from ..crosscutting.middleware import BodyLimitMiddleware, RequestContextMiddleware
from ..interfaces.api.http.router import router
from .exception_handlers import register_exception_handlers


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle. Validates settings and builds the LLM adapter."""
    settings = get_settings()
    llm = get_llm_service()

    logger.info(
        "Short Drama API starting up",
        extra={
            "app_env": settings.app_env,
            "model_id": llm.model_id,
            "outline_chunk_size": settings.outline_chunk_size,
            "outline_max_chunks": settings.outline_max_chunks,
            "outline_concurrency": settings.outline_concurrency,
            "prompt_version": settings.prompt_version,
        },
    )
    try:
        yield
    finally:
        logger.info("Short Drama API shutting down")


def _get_allowed_origins() -> list[str]:
    """CORS origins from settings, with fallback for import-time errors."""
    try:
        return get_settings().get_allowed_origins_list()
    except Exception:
        return ["http://localhost:3000"]


def create_app() -> FastAPI:
    app = FastAPI(
        title="Short Drama API",
        version=__version__,
        lifespan=lifespan,
        openapi_tags=[
            {"name": "projects", "description": "Novel upload and projects"},
            {"name": "outline", "description": "Episode outline generation"},
            {"name": "scripts", "description": "Per-episode shooting scripts"},
        ],
    )

    # R: Middleware order (bottom = first to execute):
    # 1. CORSMiddleware - handles preflight
    # 2. RequestContextMiddleware - sets request_id
    # 3. BodyLimitMiddleware - rejects oversized bodies
    app.add_middleware(BodyLimitMiddleware)
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_get_allowed_origins(),
        allow_credentials=False,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "X-Request-Id"],
        expose_headers=["X-Request-Id"],
    )

    app.include_router(router, prefix="/v1")
    register_exception_handlers(app)

    @app.get("/healthz")
    def healthz(request: Request):
        """Liveness: el proceso responde (no verifica Gemini)."""
        return {
            "ok": True,
            "version": __version__,
            "request_id": getattr(request.state, "request_id", None),
        }

    return app


app = create_app()
