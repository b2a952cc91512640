"""
USE CASES: List / Delete Projects (gestión de la sesión en memoria).
"""

from __future__ import annotations

from typing import List
from uuid import UUID

from ...crosscutting.logger import logger
from ...domain.entities import NovelProject
from ...domain.repositories import ProjectRepository
from .results import DramaUseCaseError, project_not_found


class ListProjectsUseCase:
    def __init__(self, repository: ProjectRepository) -> None:
        self._repository = repository

    def execute(self) -> List[NovelProject]:
        return self._repository.list_projects()


class DeleteProjectUseCase:
    def __init__(self, repository: ProjectRepository) -> None:
        self._repository = repository

    def execute(self, project_id: UUID) -> DramaUseCaseError | None:
        if not self._repository.delete_project(project_id):
            return project_not_found(project_id)
        logger.info("Project deleted", extra={"project_id": str(project_id)})
        return None
