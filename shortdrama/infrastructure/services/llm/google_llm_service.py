"""
Name: Google Gemini LLM Service Implementation (Adapter)

Qué hace
--------
Implementación concreta de `domain.services.LLMService` usando Google GenAI (Gemini).
  - Llamadas asíncronas (`client.aio.models.generate_content`)
  - Instrucción de sistema, temperatura y salida JSON con schema (outline)
  - Reintentos de errores transitorios con exponential backoff + jitter (tenacity)

Arquitectura
------------
- Capa: Infrastructure
- Rol: Adapter hacia un proveedor externo (Google GenAI)

CRC (Class-Responsibility-Collaboration)
----------------------------------------
Class: GoogleLLMService
Responsibilities:
  - Traducir (prompt, schema, system, temperature) al request del SDK
  - Reintentar errores transitorios y loguear observabilidad básica
  - Envolver cualquier falla del SDK como LLMError
Collaborators:
  - google.genai.Client (inyectado; se construye en el composition root)
  - retry.create_retry_decorator
Constraints:
  - Sin cliente global: cada instancia recibe su cliente o su api_key
  - La cancelación (CancelledError) se propaga sin envolver
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from google import genai
from google.genai import types

from ....crosscutting.exceptions import LLMError
from ....crosscutting.logger import logger
from ..retry import create_retry_decorator


class GoogleLLMService:
    """
    R: Google Gemini implementation of LLMService.

    Implementa el contrato del dominio usando Gemini (por defecto gemini-2.5-flash).
    """

    DEFAULT_MODEL_ID = "gemini-2.5-flash"

    def __init__(
        self,
        api_key: str | None = None,
        *,
        client: genai.Client | None = None,
        model_id: str | None = None,
        retry_decorator=None,
    ) -> None:
        """
        R: Inicializa el servicio (vía DI).

        Args:
            api_key: API key (desde Settings)
            client: Cliente genai preconstruido (útil para tests)
            model_id: Override del modelo
            retry_decorator: Decorator tenacity (inyectable para tests)

        Raises:
            LLMError: si no hay API key y no se inyectó `client`.
        """
        resolved_key = (api_key or "").strip()
        if not resolved_key and client is None:
            logger.error("GoogleLLMService: GOOGLE_API_KEY not configured")
            raise LLMError("GOOGLE_API_KEY not configured")

        self._client = client or genai.Client(api_key=resolved_key)
        self._model_id = (model_id or self.DEFAULT_MODEL_ID).strip()

        # R: Wrapper con retry construido una vez (tenacity soporta coroutines).
        decorator = retry_decorator or create_retry_decorator()
        self._generate_content = decorator(self._client.aio.models.generate_content)

        logger.info(
            "GoogleLLMService initialized", extra={"model_id": self._model_id}
        )

    @property
    def model_id(self) -> str:
        """R: Identificador del modelo (para logs/debug)."""
        return self._model_id

    @staticmethod
    def _build_config(
        *,
        response_schema: Optional[Mapping[str, Any]],
        system_instruction: Optional[str],
        temperature: Optional[float],
    ) -> Optional[types.GenerateContentConfig]:
        """R: Arma GenerateContentConfig solo con los campos provistos."""
        params: dict[str, Any] = {}
        if system_instruction:
            params["system_instruction"] = system_instruction
        if temperature is not None:
            params["temperature"] = temperature
        if response_schema is not None:
            params["response_mime_type"] = "application/json"
            params["response_schema"] = dict(response_schema)
        return types.GenerateContentConfig(**params) if params else None

    async def generate(
        self,
        prompt: str,
        *,
        response_schema: Optional[Mapping[str, Any]] = None,
        system_instruction: Optional[str] = None,
        temperature: Optional[float] = None,
    ) -> str:
        """
        R: Genera texto (o JSON si hay `response_schema`) para `prompt`.

        Raises:
            LLMError: prompt vacío o falla del proveedor (luego de reintentos).
        """
        if not (prompt or "").strip():
            raise LLMError("Prompt must not be empty")

        config = self._build_config(
            response_schema=response_schema,
            system_instruction=system_instruction,
            temperature=temperature,
        )

        try:
            response = await self._generate_content(
                model=self._model_id, contents=prompt, config=config
            )
        except LLMError:
            raise
        except Exception as exc:
            logger.error(
                "GoogleLLMService: Generation failed",
                exc_info=True,
                extra={
                    "model_id": self._model_id,
                    "structured": response_schema is not None,
                    "error_type": type(exc).__name__,
                },
            )
            raise LLMError("Failed to generate content", original_error=exc) from exc

        text = (getattr(response, "text", "") or "").strip()
        logger.info(
            "GoogleLLMService: Content generated",
            extra={
                "model_id": self._model_id,
                "structured": response_schema is not None,
                "prompt_chars": len(prompt),
                "text_chars": len(text),
            },
        )
        return text
