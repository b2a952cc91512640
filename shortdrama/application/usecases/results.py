"""
===============================================================================
NOVEL PROJECT USE CASE RESULTS (Shared Result / Error Models)
===============================================================================

Business Goal:
    Tipos consistentes de resultados y errores para los casos de uso
    (upload, consulta, outline, guion).

Why (Context / Intención):
    - Los use cases devuelven resultados tipados en lugar de propagar excepciones.
    - La capa HTTP mapea `DramaErrorCode` → status code de forma uniforme.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List

from ...domain.entities import EpisodeOutline, GeneratedScript, NovelProject


class DramaErrorCode(str, Enum):
    """
    Categorías de error de los casos de uso.

      - VALIDATION_ERROR: input inválido (archivo vacío, episode_count fuera de rango).
      - NOT_FOUND: proyecto o episodio inexistente.
      - CONFLICT: estado inválido (p. ej. guion sin outline).
      - SERVICE_UNAVAILABLE: el proveedor de generación falló.
    """

    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"


@dataclass(frozen=True)
class DramaUseCaseError:
    """Error de caso de uso: categoría estable + mensaje humano + recurso."""

    code: DramaErrorCode
    message: str
    resource: str | None = None


@dataclass
class UploadNovelResult:
    project: NovelProject | None = None
    error: DramaUseCaseError | None = None


@dataclass
class GetProjectResult:
    project: NovelProject | None = None
    error: DramaUseCaseError | None = None


@dataclass
class GenerateOutlineResult:
    """
    Contrato:
      - Éxito: outline no vacío, error == None.
      - `warnings` incluye avisos no fatales (contenido descartado).
    """

    outline: List[EpisodeOutline] | None = None
    warnings: List[str] | None = None
    error: DramaUseCaseError | None = None


@dataclass
class GenerateScriptResult:
    """
    Contrato:
      - Éxito: script != None (puede tener status FAILED: degradado, no error).
      - Error: solo para precondiciones (proyecto/episodio/outline).
    """

    script: GeneratedScript | None = None
    error: DramaUseCaseError | None = None


def project_not_found(project_id: object) -> DramaUseCaseError:
    return DramaUseCaseError(
        code=DramaErrorCode.NOT_FOUND,
        message=f"Project {project_id} not found.",
        resource="Project",
    )
