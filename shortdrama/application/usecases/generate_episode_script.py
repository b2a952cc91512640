"""
===============================================================================
USE CASE: Generate Episode Script
===============================================================================

Business Goal:
    Escribir el guion de rodaje de un episodio del outline.

Responsibilities:
    - Precondiciones: proyecto existe (NOT_FOUND), outline generado (CONFLICT),
      episodio existe en el outline (NOT_FOUND).
    - Pasar la sinopsis del episodio anterior como "前情提要".
    - Outline regenerado durante la generación → CONFLICT (no se guarda).
    - La ventana de contexto usa el episode_count del proyecto como total.
    - Falla del proveedor → guion FAILED con mensaje para el usuario
      (resultado degradado, no error).

Collaborators:
    - ProjectRepository
    - application.script_builder.ScriptBuilder
===============================================================================
"""

from __future__ import annotations

from typing import Final
from uuid import UUID

from ...crosscutting.exceptions import LLMError
from ...crosscutting.logger import logger
from ...domain.entities import GeneratedScript, ScriptStatus
from ...domain.repositories import ProjectRepository
from ..script_builder import EMPTY_SCRIPT_MESSAGE, ScriptBuilder
from .results import (
    DramaErrorCode,
    DramaUseCaseError,
    GenerateScriptResult,
    project_not_found,
)

MSG_SCRIPT_FAILED: Final[str] = "错误：无法生成剧本，请稍后重试。"
_MSG_OUTLINE_REQUIRED: Final[str] = "Generate the outline before writing episode scripts."
_MSG_OUTLINE_CHANGED: Final[str] = (
    "The outline was regenerated while this script was being written."
)


class GenerateEpisodeScriptUseCase:
    def __init__(self, repository: ProjectRepository, builder: ScriptBuilder) -> None:
        self._repository = repository
        self._builder = builder

    async def execute(self, project_id: UUID, episode_number: int) -> GenerateScriptResult:
        project = self._repository.get_project(project_id)
        if project is None:
            return GenerateScriptResult(error=project_not_found(project_id))

        if not project.has_outline:
            return GenerateScriptResult(
                error=DramaUseCaseError(
                    code=DramaErrorCode.CONFLICT,
                    message=_MSG_OUTLINE_REQUIRED,
                    resource="Outline",
                )
            )

        episode = project.find_episode(episode_number)
        if episode is None:
            return GenerateScriptResult(
                error=DramaUseCaseError(
                    code=DramaErrorCode.NOT_FOUND,
                    message=f"Episode {episode_number} not found in outline.",
                    resource="Episode",
                )
            )

        try:
            content = await self._builder.build(
                project.novel_text,
                episode,
                project.episode_count,
                previous_synopsis=project.previous_synopsis(episode_number),
            )
            status = (
                ScriptStatus.FAILED if content == EMPTY_SCRIPT_MESSAGE else ScriptStatus.READY
            )
        except LLMError as exc:
            logger.error(
                "Episode script generation failed",
                exc_info=True,
                extra={
                    "project_id": str(project_id),
                    "episode_number": episode_number,
                    "error_id": exc.error_id,
                },
            )
            content, status = MSG_SCRIPT_FAILED, ScriptStatus.FAILED

        # El outline pudo regenerarse (o el proyecto borrarse) durante la
        # llamada al LLM: un guion del outline viejo no se guarda.
        project = self._repository.get_project(project_id)
        if project is None:
            return GenerateScriptResult(error=project_not_found(project_id))
        if project.find_episode(episode_number) is not episode:
            logger.warning(
                "Episode script discarded: outline changed during generation",
                extra={"project_id": str(project_id), "episode_number": episode_number},
            )
            return GenerateScriptResult(
                error=DramaUseCaseError(
                    code=DramaErrorCode.CONFLICT,
                    message=_MSG_OUTLINE_CHANGED,
                    resource="Outline",
                )
            )

        script = GeneratedScript(
            episode_number=episode_number, content=content, status=status
        )
        project.store_script(script)
        self._repository.save_project(project)
        return GenerateScriptResult(script=script)
