"""
===============================================================================
USE CASE: Generate Outline (novela → N episodios)
===============================================================================

Business Goal:
    Convertir la novela del proyecto en un outline de `episode_count` episodios,
    informando progreso mientras se analizan los chunks.

Responsibilities:
    - Resolver el proyecto (NOT_FOUND).
    - Delegar en OutlineBuilder y reenviar sus eventos.
    - Guardar el outline en el proyecto (invalida guiones anteriores).
    - Traducir fallas del proveedor a un evento/resultado SERVICE_UNAVAILABLE
      con el mensaje para el usuario.

STREAMING PROTOCOL
    OutlineEvent(kind="status" | "progress" | "warning", message=...)
    OutlineEvent(kind="done", outline=[...])            # último evento
    OutlineEvent(kind="error", message=..., code=...)   # si falla; termina

Collaborators:
    - ProjectRepository
    - application.outline_builder.OutlineBuilder
===============================================================================
"""

from __future__ import annotations

from typing import AsyncIterator, Final, List
from uuid import UUID

from ...crosscutting.exceptions import LLMError
from ...crosscutting.logger import logger
from ...domain.repositories import ProjectRepository
from ..outline_builder import OutlineBuilder, OutlineEvent
from .results import (
    DramaErrorCode,
    DramaUseCaseError,
    GenerateOutlineResult,
    project_not_found,
)

MSG_OUTLINE_FAILED: Final[str] = (
    "生成大纲失败。小说篇幅可能过长，或者网络繁忙，请稍后再试。"
)


class GenerateOutlineUseCase:
    def __init__(self, repository: ProjectRepository, builder: OutlineBuilder) -> None:
        self._repository = repository
        self._builder = builder

    async def stream(self, project_id: UUID) -> AsyncIterator[OutlineEvent]:
        """
        Eventos de progreso del outline; termina en `done` o `error`.

        Cerrar el stream cancela el trabajo en curso (no se guarda nada).
        """
        project = self._repository.get_project(project_id)
        if project is None:
            error = project_not_found(project_id)
            yield OutlineEvent(kind="error", message=error.message, code=error.code.value)
            return

        events = self._builder.stream(project.novel_text, project.episode_count)
        try:
            async for event in events:
                if event.kind == "done":
                    project.replace_outline(event.outline)
                    self._repository.save_project(project)
                yield event
        except LLMError as exc:
            logger.error(
                "Outline generation failed",
                exc_info=True,
                extra={
                    "project_id": str(project_id),
                    "error_id": exc.error_id,
                    "error_code": exc.error_code,
                },
            )
            yield OutlineEvent(
                kind="error",
                message=MSG_OUTLINE_FAILED,
                code=DramaErrorCode.SERVICE_UNAVAILABLE.value,
            )
        finally:
            await events.aclose()

    async def execute(self, project_id: UUID) -> GenerateOutlineResult:
        warnings: List[str] = []
        events = self.stream(project_id)
        try:
            async for event in events:
                if event.kind == "warning":
                    warnings.append(event.message)
                elif event.kind == "error":
                    return GenerateOutlineResult(
                        error=DramaUseCaseError(
                            code=DramaErrorCode(event.code),
                            message=event.message,
                            resource="Outline",
                        )
                    )
                elif event.kind == "done":
                    return GenerateOutlineResult(outline=event.outline, warnings=warnings)
        finally:
            await events.aclose()

        # El stream siempre termina en done/error; esto cubre un builder vacío.
        return GenerateOutlineResult(
            error=DramaUseCaseError(
                code=DramaErrorCode.SERVICE_UNAVAILABLE,
                message=MSG_OUTLINE_FAILED,
                resource="Outline",
            )
        )
