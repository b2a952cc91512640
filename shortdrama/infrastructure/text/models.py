"""
===============================================================================
CRC CARD - infrastructure/text/models.py
===============================================================================

Modelos:
  TextChunk (pieza de la novela) y ChunkPlan (salida rica del chunker)

Responsabilidades:
  - Representar un chunk con su índice y offsets sobre el texto original.
  - Exponer cuánto contenido descartó el límite de chunks.

Colaboradores:
  - infrastructure/text/chunker.py
  - application/outline_builder.py
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class TextChunk:
    """
    Pieza contigua de la novela.

    Notas:
      - start/end son offsets en caracteres sobre el texto original.
      - index es 0-based y secuencial (izquierda → derecha, sin overlap).
    """

    index: int
    content: str
    start: int
    end: int

    def __len__(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class ChunkPlan:
    """Chunks retenidos + contabilidad del contenido descartado por el tope."""

    chunks: list[TextChunk] = field(default_factory=list)
    total_chars: int = 0
    dropped_chars: int = 0

    @property
    def truncated(self) -> bool:
        return self.dropped_chars > 0

    @property
    def contents(self) -> list[str]:
        return [c.content for c in self.chunks]
