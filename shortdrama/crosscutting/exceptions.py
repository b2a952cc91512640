# shortdrama/crosscutting/exceptions.py
"""
===============================================================================
MÓDULO: Excepciones tipadas del servicio
===============================================================================

Objetivo
--------
Excepciones internas coherentes, con:
- error_code estable
- error_id para correlación con logs
- message "humana" (sin filtrar secretos ni texto de la novela)

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  DramaError + subclases

Responsabilidades:
  - Estandarizar fallas del proveedor de generación (UpstreamServiceFailure)
  - Generar error_id para rastreo

Colaboradores:
  - api/exception_handlers.py (mapea a AppHTTPException)
  - infrastructure/services/llm/* (lanzan LLMError)
  - application/outline_builder.py (lanza OutlineParseError)
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import uuid4


@dataclass(frozen=True)
class ErrorResponse:
    """Estructura mínima para serializar un DramaError."""

    error_code: str
    message: str
    error_id: str

    def to_dict(self) -> dict:
        return {
            "error_code": self.error_code,
            "message": self.message,
            "error_id": self.error_id,
        }


class DramaError(Exception):
    """Base para errores internos del sistema."""

    error_code: str = "DRAMA_ERROR"

    def __init__(
        self,
        message: str,
        error_id: str | None = None,
        original_error: Exception | None = None,
    ):
        self.message = message
        self.error_id = error_id or str(uuid4())
        self.original_error = original_error
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(
            error_code=self.error_code, message=self.message, error_id=self.error_id
        )


class LLMError(DramaError):
    """Errores del LLM (provider externo / quota / request inválido)."""

    error_code: str = "LLM_ERROR"


class OutlineParseError(LLMError):
    """El modelo respondió algo que no es un array de episodios válido."""

    error_code: str = "OUTLINE_PARSE_ERROR"
