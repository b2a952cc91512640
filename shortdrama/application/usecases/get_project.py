"""
USE CASE: Get Project (outline + scripts de una novela subida).
"""

from __future__ import annotations

from uuid import UUID

from ...domain.repositories import ProjectRepository
from .results import GetProjectResult, project_not_found


class GetProjectUseCase:
    def __init__(self, repository: ProjectRepository) -> None:
        self._repository = repository

    def execute(self, project_id: UUID) -> GetProjectResult:
        project = self._repository.get_project(project_id)
        if project is None:
            return GetProjectResult(error=project_not_found(project_id))
        return GetProjectResult(project=project)
