"""
===============================================================================
TARJETA CRC - domain/services.py
===============================================================================

Módulo:
    Puertos de Servicios Externos (Protocols)

Responsabilidades:
    - Definir el contrato del servicio de generación de texto/JSON.
    - Proteger a application de detalles del proveedor (Gemini u otro).

Colaboradores:
    - infrastructure/services/llm/*: implementaciones concretas.
    - application/outline_builder.py, application/script_builder.py.

Reglas:
    - SOLO interfaces: nada de implementación.
    - Firma provider-agnostic: (prompt, schema opcional) -> texto.
===============================================================================
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol


class LLMService(Protocol):
    """Contrato para generación con modelo de lenguaje (asíncrono)."""

    @property
    def model_id(self) -> str:
        """Identificador del modelo (logs/observabilidad)."""
        ...

    async def generate(
        self,
        prompt: str,
        *,
        response_schema: Optional[Mapping[str, Any]] = None,
        system_instruction: Optional[str] = None,
        temperature: Optional[float] = None,
    ) -> str:
        """
        Envía `prompt` y devuelve el texto de la respuesta.

        - Con `response_schema` el proveedor debe responder JSON que cumpla el schema.
        - Errores del proveedor se propagan como LLMError.
        """
        ...
