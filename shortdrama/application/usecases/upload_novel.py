"""
===============================================================================
USE CASE: Upload Novel
===============================================================================

Business Goal:
    Recibir el archivo .txt de la novela y abrir un proyecto de trabajo.

Responsibilities:
    - Decodificar bytes (UTF-8 con BOM, fallback GB18030) y normalizar.
    - Validar texto no vacío, tamaño y episode_count dentro de [1, max].
    - Crear y guardar el NovelProject.

Collaborators:
    - infrastructure.text (decode_text, normalize_text)
    - ProjectRepository
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final
from uuid import uuid4

from ...crosscutting.logger import logger
from ...domain.entities import NovelProject
from ...domain.repositories import ProjectRepository
from ...infrastructure.text import decode_text, normalize_text
from .results import DramaErrorCode, DramaUseCaseError, UploadNovelResult

_MSG_EMPTY_FILE: Final[str] = "请上传有效的小说文件（.txt），文件内容不能为空。"


@dataclass(frozen=True)
class UploadNovelInput:
    file_name: str
    content: bytes
    episode_count: int


class UploadNovelUseCase:
    def __init__(
        self,
        repository: ProjectRepository,
        *,
        max_episode_count: int,
        max_upload_bytes: int,
    ) -> None:
        self._repository = repository
        self._max_episode_count = max_episode_count
        self._max_upload_bytes = max_upload_bytes

    def execute(self, input_data: UploadNovelInput) -> UploadNovelResult:
        if not 1 <= input_data.episode_count <= self._max_episode_count:
            return self._validation_error(
                f"episode_count must be between 1 and {self._max_episode_count}."
            )
        if len(input_data.content) > self._max_upload_bytes:
            return self._validation_error(
                f"File exceeds {self._max_upload_bytes} bytes."
            )

        text, encoding = decode_text(input_data.content)
        text = normalize_text(text)
        if not text:
            return self._validation_error(_MSG_EMPTY_FILE)

        project = NovelProject(
            id=uuid4(),
            file_name=(input_data.file_name or "").strip(),
            novel_text=text,
            episode_count=input_data.episode_count,
        )
        self._repository.save_project(project)

        logger.info(
            "Novel uploaded",
            extra={
                "project_id": str(project.id),
                "encoding": encoding,
                "novel_chars": len(text),
                "episode_count": project.episode_count,
            },
        )
        return UploadNovelResult(project=project)

    @staticmethod
    def _validation_error(message: str) -> UploadNovelResult:
        return UploadNovelResult(
            error=DramaUseCaseError(
                code=DramaErrorCode.VALIDATION_ERROR,
                message=message,
                resource="Novel",
            )
        )
