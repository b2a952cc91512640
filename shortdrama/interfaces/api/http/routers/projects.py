"""
===============================================================================
TARJETA CRC - routers/projects.py (Novelas subidas / proyectos)
===============================================================================

Responsabilidades:
  - POST   /projects            subir novela (.txt) + episode_count
  - GET    /projects            listar proyectos en memoria
  - GET    /projects/{id}       detalle con outline y guiones
  - DELETE /projects/{id}       descartar proyecto

Colaboradores:
  - container (factories de casos de uso)
  - dependencies (lectura de upload con límite)
  - error_mapping.raise_drama_error
===============================================================================
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile

from shortdrama.application.usecases import (
    DeleteProjectUseCase,
    GetProjectUseCase,
    ListProjectsUseCase,
    UploadNovelInput,
    UploadNovelUseCase,
)
from shortdrama.container import (
    get_delete_project_use_case,
    get_get_project_use_case,
    get_list_projects_use_case,
    get_upload_novel_use_case,
)
from shortdrama.crosscutting.config import get_settings

from ..dependencies import read_upload_bytes, validate_file_name
from ..error_mapping import raise_drama_error
from ..schemas import ProjectDetailRes, ProjectsListRes, ProjectSummaryRes

router = APIRouter(tags=["projects"])


@router.post("/projects", response_model=ProjectSummaryRes, status_code=201)
async def upload_novel(
    file: UploadFile = File(...),
    episode_count: Optional[int] = Form(None),
    use_case: UploadNovelUseCase = Depends(get_upload_novel_use_case),
):
    file_name = validate_file_name(file.filename)
    content = await read_upload_bytes(file)

    result = use_case.execute(
        UploadNovelInput(
            file_name=file_name,
            content=content,
            episode_count=(
                episode_count
                if episode_count is not None
                else get_settings().default_episode_count
            ),
        )
    )
    if result.error is not None:
        raise_drama_error(result.error)

    return ProjectSummaryRes.from_entity(result.project)


@router.get("/projects", response_model=ProjectsListRes)
def list_projects(
    use_case: ListProjectsUseCase = Depends(get_list_projects_use_case),
):
    return ProjectsListRes(
        projects=[ProjectSummaryRes.from_entity(p) for p in use_case.execute()]
    )


@router.get("/projects/{project_id}", response_model=ProjectDetailRes)
def get_project(
    project_id: UUID,
    use_case: GetProjectUseCase = Depends(get_get_project_use_case),
):
    result = use_case.execute(project_id)
    if result.error is not None:
        raise_drama_error(result.error, resource_id=project_id)
    return ProjectDetailRes.from_entity(result.project)


@router.delete("/projects/{project_id}", status_code=204)
def delete_project(
    project_id: UUID,
    use_case: DeleteProjectUseCase = Depends(get_delete_project_use_case),
):
    error = use_case.execute(project_id)
    if error is not None:
        raise_drama_error(error, resource_id=project_id)
    return Response(status_code=204)
