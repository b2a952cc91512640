"""
===============================================================================
TARJETA CRC - application/outline_builder.py
===============================================================================

Componente:
  OutlineBuilder (novela → outline de N episodios)

Responsabilidades:
  - Decidir el contexto de la novela para el outline:
      * texto corto (<= chunk_size): la novela completa
      * texto largo: resúmenes por chunk en paralelo (lotes de K)
  - Resumir cada chunk de forma resiliente: si un chunk falla queda
    "[第 N 部分分析跳过]" y el resto sigue.
  - Pedir el outline en modo JSON con schema (exactamente N episodios).
  - Parsear la respuesta (pydantic) y fallar con OutlineParseError si no sirve.
  - Exponer el progreso como stream de OutlineEvent (status/progress/warning/done).

Colaboradores:
  - domain.services.LLMService
  - infrastructure.prompts.PromptLoader (chunk_summary, outline)
  - infrastructure.text.NovelChunker
  - application.batching.iter_batch_progress
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Callable, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, Field, TypeAdapter, ValidationError

from ..crosscutting.exceptions import OutlineParseError
from ..crosscutting.logger import logger
from ..domain.entities import EpisodeOutline
from ..domain.services import LLMService
from ..infrastructure.prompts import PromptLoader
from ..infrastructure.text import NovelChunker, TextChunk
from .batching import iter_batch_progress

DEFAULT_CONCURRENCY = 3
DEFAULT_EXCERPT_CHARS = 40_000

# Mensajes de estado que ve el usuario.
STATUS_READING = "正在读取小说内容..."
STATUS_FULL_TEXT = "正在分析小说全篇内容..."
STATUS_BUILDING = "正在构建剧集结构，生成分集大纲..."


def status_parallel(parts: int) -> str:
    return f"正在并行分析小说内容 (共 {parts} 部分)..."


def status_progress(completed: int, total: int) -> str:
    return f"正在分析小说剧情... ({completed}/{total})"


def warning_truncated(dropped_chars: int) -> str:
    return f"小说篇幅超出分析上限，末尾约 {dropped_chars} 字未纳入大纲分析。"


def chunk_summary_label(part_number: int, summary: str) -> str:
    return f"[第 {part_number} 部分摘要]: {summary}"


def chunk_skipped_label(part_number: int) -> str:
    return f"[第 {part_number} 部分分析跳过]"


# ---------------------------------------------------------------------------
# Eventos de progreso
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class OutlineEvent:
    """
    Evento del stream de outline.

    kind:
      - "status":   cambio de fase (message)
      - "progress": un chunk terminó (message, completed, total)
      - "warning":  contenido descartado por el tope de chunks (message)
      - "done":     outline final (outline)
      - "error":    falla (message, code); lo emite el caso de uso, no el builder
    """

    kind: str
    message: str = ""
    completed: Optional[int] = None
    total: Optional[int] = None
    outline: List[EpisodeOutline] = field(default_factory=list)
    code: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"message": self.message}
        if self.completed is not None:
            payload["completed"] = self.completed
            payload["total"] = self.total
        if self.code is not None:
            payload["code"] = self.code
        if self.kind == "done":
            payload["outline"] = [
                {
                    "episode_number": e.episode_number,
                    "title": e.title,
                    "synopsis": e.synopsis,
                }
                for e in self.outline
            ]
        return payload


# ---------------------------------------------------------------------------
# Schema + parsing de la respuesta del outline
# ---------------------------------------------------------------------------


def outline_response_schema(episode_count: int) -> Dict[str, Any]:
    """Schema JSON (formato Gemini) para un array de exactamente N episodios."""
    return {
        "type": "ARRAY",
        "min_items": episode_count,
        "max_items": episode_count,
        "items": {
            "type": "OBJECT",
            "properties": {
                "episode_number": {"type": "INTEGER"},
                "title": {"type": "STRING"},
                "synopsis": {"type": "STRING"},
            },
            "required": ["episode_number", "title", "synopsis"],
        },
    }


class _EpisodePayload(BaseModel):
    episode_number: int = Field(
        ge=1, validation_alias=AliasChoices("episode_number", "episodeNumber")
    )
    title: str
    synopsis: str


_OUTLINE_ADAPTER = TypeAdapter(List[_EpisodePayload])


def _strip_code_fence(raw: str) -> str:
    text = (raw or "").strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else ""
        if text.rstrip().endswith("```"):
            text = text.rstrip()[:-3]
    return text.strip()


def parse_outline(raw: str) -> List[EpisodeOutline]:
    """
    Convierte la respuesta JSON del modelo en EpisodeOutline.

    Raises:
        OutlineParseError: respuesta vacía, JSON inválido o lista sin episodios.
    """
    text = _strip_code_fence(raw)
    if not text:
        raise OutlineParseError("Empty outline response")

    try:
        payload = _OUTLINE_ADAPTER.validate_json(text)
    except ValidationError as exc:
        raise OutlineParseError(
            "Outline response is not a valid episode list", original_error=exc
        ) from exc

    if not payload:
        raise OutlineParseError("Outline response contained no episodes")

    return [
        EpisodeOutline(
            episode_number=item.episode_number,
            title=item.title.strip(),
            synopsis=item.synopsis.strip(),
        )
        for item in payload
    ]


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------


class OutlineBuilder:
    """Arma el outline de episodios para una novela."""

    def __init__(
        self,
        llm: LLMService,
        *,
        summary_prompt: PromptLoader,
        outline_prompt: PromptLoader,
        chunker: NovelChunker,
        concurrency: int = DEFAULT_CONCURRENCY,
        excerpt_chars: int = DEFAULT_EXCERPT_CHARS,
    ):
        if concurrency <= 0:
            raise ValueError("concurrency must be > 0")
        if excerpt_chars <= 0:
            raise ValueError("excerpt_chars must be > 0")
        self._llm = llm
        self._summary_prompt = summary_prompt
        self._outline_prompt = outline_prompt
        self._chunker = chunker
        self._concurrency = concurrency
        self._excerpt_chars = excerpt_chars

    async def _summarize_chunk(self, chunk: TextChunk, index: int) -> str:
        part_number = index + 1
        prompt = self._summary_prompt.format(
            part_number=part_number,
            excerpt_chars=self._excerpt_chars,
            excerpt=chunk.content[: self._excerpt_chars],
        )
        summary = await self._llm.generate(
            prompt, system_instruction=self._summary_prompt.system_instruction
        )
        return chunk_summary_label(part_number, summary)

    async def _summarize_chunk_safe(self, chunk: TextChunk, index: int) -> str:
        """Un chunk fallido no aborta el outline: queda marcado como saltado."""
        try:
            return await self._summarize_chunk(chunk, index)
        except Exception as exc:
            logger.error(
                "Chunk summary failed",
                exc_info=True,
                extra={
                    "chunk_index": index,
                    "chunk_chars": len(chunk),
                    "error_type": type(exc).__name__,
                },
            )
            return chunk_skipped_label(index + 1)

    async def _request_outline(
        self, story_context: str, episode_count: int
    ) -> List[EpisodeOutline]:
        prompt = self._outline_prompt.format(
            episode_count=episode_count, story_context=story_context
        )
        raw = await self._llm.generate(
            prompt,
            response_schema=outline_response_schema(episode_count),
            system_instruction=self._outline_prompt.system_instruction,
        )
        outline = parse_outline(raw)

        if len(outline) != episode_count:
            logger.warning(
                "Outline episode count mismatch",
                extra={"requested": episode_count, "received": len(outline)},
            )
        return outline

    async def stream(
        self, text: str, episode_count: int
    ) -> AsyncIterator[OutlineEvent]:
        """
        Stream de eventos; el último es `done` con el outline.

        Cerrar el stream (aclose) cancela los resúmenes en vuelo.
        """
        if episode_count <= 0:
            raise ValueError(f"episode_count must be > 0, got {episode_count}")

        yield OutlineEvent(kind="status", message=STATUS_READING)

        if self._chunker.needs_chunking(text):
            plan = self._chunker.plan(text)
            if plan.truncated:
                logger.warning(
                    "Novel truncated for outline analysis",
                    extra={
                        "total_chars": plan.total_chars,
                        "dropped_chars": plan.dropped_chars,
                        "chunks": len(plan.chunks),
                    },
                )
                yield OutlineEvent(
                    kind="warning", message=warning_truncated(plan.dropped_chars)
                )

            yield OutlineEvent(kind="status", message=status_parallel(len(plan.chunks)))

            summaries: List[str] = [""] * len(plan.chunks)
            progress = iter_batch_progress(
                plan.chunks, self._concurrency, self._summarize_chunk_safe
            )
            try:
                async for event in progress:
                    summaries[event.index] = event.result
                    yield OutlineEvent(
                        kind="progress",
                        message=status_progress(event.completed, event.total),
                        completed=event.completed,
                        total=event.total,
                    )
            finally:
                await progress.aclose()

            story_context = "\n\n".join(summaries)
        else:
            yield OutlineEvent(kind="status", message=STATUS_FULL_TEXT)
            story_context = text

        yield OutlineEvent(kind="status", message=STATUS_BUILDING)

        outline = await self._request_outline(story_context, episode_count)
        logger.info(
            "Outline generated",
            extra={
                "episodes": len(outline),
                "novel_chars": len(text),
                "context_chars": len(story_context),
            },
        )
        yield OutlineEvent(kind="done", outline=outline)

    async def build(
        self,
        text: str,
        episode_count: int,
        on_status: Optional[Callable[[str], None]] = None,
    ) -> List[EpisodeOutline]:
        """Consume el stream completo; `on_status` recibe cada mensaje visible."""
        events = self.stream(text, episode_count)
        try:
            async for event in events:
                if event.kind == "done":
                    return event.outline
                if on_status is not None and event.message:
                    on_status(event.message)
        finally:
            await events.aclose()
        raise OutlineParseError("Outline stream ended without a result")
