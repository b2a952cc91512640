"""
===============================================================================
TARJETA CRC - routers/outline.py (Outline de episodios)
===============================================================================

Responsabilidades:
  - POST /projects/{id}/outline          genera y devuelve el outline
  - GET  /projects/{id}/outline/stream   mismo flujo con progreso por SSE

Colaboradores:
  - GenerateOutlineUseCase (execute / stream)
  - crosscutting.streaming.stream_outline_events
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Request

from shortdrama.application.usecases import GenerateOutlineUseCase
from shortdrama.container import get_generate_outline_use_case
from shortdrama.crosscutting.streaming import stream_outline_events

from ..error_mapping import raise_drama_error
from ..schemas import EpisodeOutlineRes, OutlineRes

router = APIRouter(tags=["outline"])


@router.post("/projects/{project_id}/outline", response_model=OutlineRes)
async def generate_outline(
    project_id: UUID,
    use_case: GenerateOutlineUseCase = Depends(get_generate_outline_use_case),
):
    result = await use_case.execute(project_id)
    if result.error is not None:
        raise_drama_error(result.error, resource_id=project_id)

    return OutlineRes(
        project_id=project_id,
        outline=[EpisodeOutlineRes.from_entity(e) for e in result.outline or []],
        warnings=result.warnings or [],
    )


@router.get("/projects/{project_id}/outline/stream")
async def stream_outline(
    project_id: UUID,
    request: Request,
    use_case: GenerateOutlineUseCase = Depends(get_generate_outline_use_case),
):
    """SSE: status / progress / warning / done | error."""
    return stream_outline_events(use_case.stream(project_id), request)
