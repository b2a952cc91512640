"""
===============================================================================
TARJETA CRC - application/script_builder.py
===============================================================================

Componente:
  ScriptBuilder (episodio del outline → guion de rodaje)

Responsabilidades:
  - Calcular la ventana de contexto: W = max(mínimo, L/5), centrada en
    episode_number / total_episodes.
  - Armar el prompt con sinopsis, "前情提要" opcional y el recorte de la novela.
  - Pedir el guion en modo texto (temperatura configurada).
  - Respuesta vacía → mensaje de fallback para el usuario.

Colaboradores:
  - application.context_window
  - domain.services.LLMService
  - infrastructure.prompts.PromptLoader (episode_script)

Errores:
  - LLMError del proveedor se propaga (el caso de uso decide cómo degradar).
===============================================================================
"""

from __future__ import annotations

from typing import Optional

from ..crosscutting.logger import logger
from ..domain.entities import EpisodeOutline
from ..domain.services import LLMService
from ..infrastructure.prompts import PromptLoader
from .context_window import compute_window_size, select_context_window, slice_window

DEFAULT_MIN_WINDOW_CHARS = 150_000
DEFAULT_TEMPERATURE = 0.7

EMPTY_SCRIPT_MESSAGE = "生成剧本失败，请重试。"


def render_previous_summary(previous_synopsis: Optional[str]) -> str:
    if not previous_synopsis:
        return ""
    return f"**前情提要：** {previous_synopsis}"


class ScriptBuilder:
    def __init__(
        self,
        llm: LLMService,
        *,
        prompt: PromptLoader,
        min_window_chars: int = DEFAULT_MIN_WINDOW_CHARS,
        temperature: float = DEFAULT_TEMPERATURE,
    ):
        if min_window_chars <= 0:
            raise ValueError("min_window_chars must be > 0")
        self._llm = llm
        self._prompt = prompt
        self._min_window_chars = min_window_chars
        self._temperature = temperature

    def select_context(
        self, text: str, episode_number: int, total_episodes: int
    ) -> str:
        """Recorte de la novela que "debería" contener este episodio."""
        window = select_context_window(
            len(text),
            episode_number,
            total_episodes,
            compute_window_size(len(text), self._min_window_chars),
        )
        return slice_window(text, window)

    async def build(
        self,
        text: str,
        episode: EpisodeOutline,
        total_episodes: int,
        previous_synopsis: Optional[str] = None,
    ) -> str:
        context_text = self.select_context(text, episode.episode_number, total_episodes)

        prompt = self._prompt.format(
            episode_number=episode.episode_number,
            title=episode.title,
            synopsis=episode.synopsis,
            previous_summary=render_previous_summary(previous_synopsis),
            context_text=context_text,
        )
        content = await self._llm.generate(
            prompt,
            system_instruction=self._prompt.system_instruction,
            temperature=self._temperature,
        )

        logger.info(
            "Episode script generated",
            extra={
                "episode_number": episode.episode_number,
                "total_episodes": total_episodes,
                "context_chars": len(context_text),
                "script_chars": len(content or ""),
            },
        )
        return content or EMPTY_SCRIPT_MESSAGE
