"""
===============================================================================
CRC CARD - infrastructure/text/chunker.py
===============================================================================

Componente:
  Chunking de novelas para resúmenes (tamaño fijo + tope de piezas)

Responsabilidades:
  - Partir el texto en piezas secuenciales de `chunk_size` caracteres
    (la última puede ser más corta).
  - Aplicar un tope `max_chunks`: lo que queda después se descarta.
  - Informar cuánto se descartó (ChunkPlan.dropped_chars) para que el
    llamador avise al usuario en lugar de perder contenido en silencio.
  - Exponer:
      * split_text_into_chunks(...) -> list[str]
      * plan_chunks(...) -> ChunkPlan (salida rica)
      * NovelChunker (servicio configurado una vez)

Colaboradores:
  - infrastructure/text/models.py (TextChunk, ChunkPlan)

Decisiones:
  - Cortes exactos por caracteres (sin buscar separadores): el modelo recibe
    piezas enormes y el corte de una frase no afecta el resumen.
  - Sin overlap: concatenar todas las piezas (sin tope) reproduce el texto.
  - Funciones puras: mismas entradas → mismas salidas.
===============================================================================
"""

from __future__ import annotations

from typing import Final

from .models import ChunkPlan, TextChunk

# Defaults del pipeline de outline: piezas grandes = menos requests.
DEFAULT_CHUNK_SIZE: Final[int] = 100_000
DEFAULT_MAX_CHUNKS: Final[int] = 20


def _validate(chunk_size: int, max_chunks: int | None) -> None:
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be > 0, got {chunk_size}")
    if max_chunks is not None and max_chunks <= 0:
        raise ValueError(f"max_chunks must be > 0, got {max_chunks}")


def plan_chunks(
    text: str,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    max_chunks: int | None = DEFAULT_MAX_CHUNKS,
) -> ChunkPlan:
    """
    Parte `text` en chunks de `chunk_size` y aplica el tope `max_chunks`.

    `max_chunks=None` desactiva el tope.
    """
    _validate(chunk_size, max_chunks)

    text = text or ""
    total = len(text)
    if total == 0:
        return ChunkPlan()

    limit = total
    if max_chunks is not None:
        limit = min(total, chunk_size * max_chunks)

    chunks = [
        TextChunk(
            index=idx,
            content=text[start : min(start + chunk_size, limit)],
            start=start,
            end=min(start + chunk_size, limit),
        )
        for idx, start in enumerate(range(0, limit, chunk_size))
    ]

    return ChunkPlan(chunks=chunks, total_chars=total, dropped_chars=total - limit)


def split_text_into_chunks(
    text: str,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    max_chunks: int | None = DEFAULT_MAX_CHUNKS,
) -> list[str]:
    """Wrapper simple: devuelve solo el contenido de cada chunk."""
    return plan_chunks(text, chunk_size=chunk_size, max_chunks=max_chunks).contents


class NovelChunker:
    """
    Servicio de chunking configurado por Settings.

    Diseño:
      - Valida parámetros al construir (fail-fast).
      - `plan()` / `chunk()` delegan a las funciones puras.
    """

    def __init__(
        self,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        max_chunks: int | None = DEFAULT_MAX_CHUNKS,
    ):
        _validate(chunk_size, max_chunks)
        self.chunk_size = chunk_size
        self.max_chunks = max_chunks

    def needs_chunking(self, text: str) -> bool:
        """Textos de hasta `chunk_size` caracteres se envían enteros."""
        return len(text or "") > self.chunk_size

    def plan(self, text: str) -> ChunkPlan:
        return plan_chunks(text, chunk_size=self.chunk_size, max_chunks=self.max_chunks)

    def chunk(self, text: str) -> list[str]:
        return self.plan(text).contents
