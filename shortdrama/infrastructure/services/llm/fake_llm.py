"""
Name: Fake LLM Service (Deterministic Test Double)

Qué es
------
Implementación determinista de `domain.services.LLMService` para tests/CI
y demos sin credenciales (FAKE_LLM=1). No realiza IO.

Comportamiento
--------------
  - Sin schema: texto derivado de sha256(system|prompt), estable para asserts.
  - Con schema de array (outline): JSON con exactamente `min_items` episodios
    numerados 1..N, títulos/sinopsis derivados del digest.

CRC (Class-Responsibility-Collaboration)
----------------------------------------
Class: FakeLLMService
Responsibilities:
  - Generar respuestas deterministas
  - Registrar los prompts recibidos (inspección en tests)
Collaborators:
  - domain.services.LLMService
Constraints:
  - Determinismo total: mismas entradas → misma salida
"""

from __future__ import annotations

import hashlib
import json
from typing import Any, List, Mapping, Optional

from ....crosscutting.exceptions import LLMError
from ....crosscutting.logger import logger

_DEFAULT_ARRAY_ITEMS = 3


def _digest(*parts: str) -> str:
    joined = "|".join((p or "").strip() for p in parts)
    return hashlib.sha256(joined.encode("utf-8")).hexdigest()[:16]


def _fake_outline(count: int, digest: str) -> str:
    """R: Array JSON de `count` episodios con la forma del schema del outline."""
    episodes = [
        {
            "episode_number": n,
            "title": f"第{n}集",
            "synopsis": f"模拟剧情梗概 {n} ({digest})",
        }
        for n in range(1, count + 1)
    ]
    return json.dumps(episodes, ensure_ascii=False)


class FakeLLMService:
    """R: Deterministic LLMService for tests/CI."""

    MODEL_ID = "fake-llm-v1"

    def __init__(self) -> None:
        self.prompts: List[str] = []
        logger.debug("FakeLLMService initialized", extra={"model_id": self.MODEL_ID})

    @property
    def model_id(self) -> str:
        """R: Identificador estable del modelo fake (útil para logs)."""
        return self.MODEL_ID

    async def generate(
        self,
        prompt: str,
        *,
        response_schema: Optional[Mapping[str, Any]] = None,
        system_instruction: Optional[str] = None,
        temperature: Optional[float] = None,
    ) -> str:
        if not (prompt or "").strip():
            raise LLMError("Prompt must not be empty")

        self.prompts.append(prompt)
        digest = _digest(system_instruction or "", prompt)

        if response_schema is not None and response_schema.get("type") == "ARRAY":
            count = int(response_schema.get("min_items") or _DEFAULT_ARRAY_ITEMS)
            return _fake_outline(count, digest)

        return f"模拟生成内容 ({digest})"
