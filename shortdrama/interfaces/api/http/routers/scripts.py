"""
===============================================================================
TARJETA CRC - routers/scripts.py (Guiones por episodio)
===============================================================================

Responsabilidades:
  - POST /projects/{id}/episodes/{n}/script   genera (o regenera) el guion
  - GET  /projects/{id}/episodes/{n}/script   devuelve el guion guardado

Notas:
  - Una falla del proveedor NO es error HTTP: el guion vuelve con
    status="failed" y el mensaje para el usuario.
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Path

from shortdrama.application.usecases import (
    GenerateEpisodeScriptUseCase,
    GetProjectUseCase,
)
from shortdrama.container import (
    get_generate_episode_script_use_case,
    get_get_project_use_case,
)
from shortdrama.crosscutting.error_responses import not_found

from ..error_mapping import raise_drama_error
from ..schemas import ScriptRes

router = APIRouter(tags=["scripts"])


@router.post(
    "/projects/{project_id}/episodes/{episode_number}/script",
    response_model=ScriptRes,
)
async def generate_script(
    project_id: UUID,
    episode_number: int = Path(..., ge=1),
    use_case: GenerateEpisodeScriptUseCase = Depends(
        get_generate_episode_script_use_case
    ),
):
    result = await use_case.execute(project_id, episode_number)
    if result.error is not None:
        resource_id = episode_number if result.error.resource == "Episode" else project_id
        raise_drama_error(result.error, resource_id=resource_id)
    return ScriptRes.from_entity(result.script)


@router.get(
    "/projects/{project_id}/episodes/{episode_number}/script",
    response_model=ScriptRes,
)
def get_script(
    project_id: UUID,
    episode_number: int = Path(..., ge=1),
    use_case: GetProjectUseCase = Depends(get_get_project_use_case),
):
    result = use_case.execute(project_id)
    if result.error is not None:
        raise_drama_error(result.error, resource_id=project_id)

    script = result.project.scripts.get(episode_number)
    if script is None:
        raise not_found("Script", str(episode_number))
    return ScriptRes.from_entity(script)
