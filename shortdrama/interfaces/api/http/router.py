"""
===============================================================================
TARJETA CRC - router.py (Router raíz / Composición)
===============================================================================

Responsabilidades:
  - Definir el APIRouter raíz que se incluye en FastAPI (prefix="/v1").
  - Centralizar responses RFC7807 para OpenAPI.
  - Componer routers por feature (projects/outline/scripts).
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter

from shortdrama.crosscutting.error_responses import OPENAPI_ERROR_RESPONSES

from .routers.outline import router as outline_router
from .routers.projects import router as projects_router
from .routers.scripts import router as scripts_router


def build_router() -> APIRouter:
    """Construye el router raíz v1 (sin side-effects al importar módulos)."""
    api_router = APIRouter(responses=OPENAPI_ERROR_RESPONSES)

    api_router.include_router(projects_router)
    api_router.include_router(outline_router)
    api_router.include_router(scripts_router)

    return api_router


router = build_router()

__all__ = ["router", "build_router"]
