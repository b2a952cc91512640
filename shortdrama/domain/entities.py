"""
===============================================================================
TARJETA CRC - domain/entities.py
===============================================================================

Módulo:
    Entidades del Dominio (EpisodeOutline, GeneratedScript, NovelProject)

Responsabilidades:
    - Definir las estructuras centrales (sin infraestructura).
    - Helpers mínimos para mantener invariantes simples
      (episodios 1-based, lookup del episodio previo).

Colaboradores:
    - domain.repositories: persiste/recupera NovelProject.
    - application: construye outlines y scripts.
    - interfaces/api: serializa DTOs basados en estas entidades.

Principios:
    - Sin dependencias a FastAPI/SDKs.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional
from uuid import UUID


def _utcnow() -> datetime:
    """Fecha/hora UTC (helper interno)."""
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Outline
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class EpisodeOutline:
    """Un registro del outline: número de episodio (1-based), título y sinopsis."""

    episode_number: int
    title: str
    synopsis: str


# ---------------------------------------------------------------------------
# Script
# ---------------------------------------------------------------------------


class ScriptStatus(str, Enum):
    """Estado del guion generado."""

    READY = "ready"
    FAILED = "failed"


@dataclass
class GeneratedScript:
    """
    Guion de rodaje de un episodio (markdown: escenas, planos, acciones, diálogos).

    Nota:
      - status=FAILED significa que `content` es el mensaje de fallback
        para el usuario, no un guion.
    """

    episode_number: int
    content: str
    status: ScriptStatus = ScriptStatus.READY
    created_at: datetime = field(default_factory=_utcnow)

    @property
    def is_failed(self) -> bool:
        return self.status == ScriptStatus.FAILED


# ---------------------------------------------------------------------------
# Project (sesión de trabajo sobre una novela)
# ---------------------------------------------------------------------------


@dataclass
class NovelProject:
    """
    Novela subida + resultados generados sobre ella.

    Importante:
      - `novel_text` es la fuente única para chunking y ventanas de contexto.
      - `episode_count` es el total pedido por el usuario; la ventana de
        cada guion se calcula contra este total (no contra len(outline)).
    """

    id: UUID
    file_name: str
    novel_text: str
    episode_count: int
    outline: List[EpisodeOutline] = field(default_factory=list)
    scripts: Dict[int, GeneratedScript] = field(default_factory=dict)
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    @property
    def title(self) -> str:
        """Nombre de la novela derivado del archivo (sin extensión .txt)."""
        name = self.file_name or ""
        if name.lower().endswith(".txt"):
            name = name[:-4]
        return name or "小说"

    @property
    def has_outline(self) -> bool:
        return bool(self.outline)

    def find_episode(self, episode_number: int) -> Optional[EpisodeOutline]:
        for episode in self.outline:
            if episode.episode_number == episode_number:
                return episode
        return None

    def previous_synopsis(self, episode_number: int) -> Optional[str]:
        """Sinopsis del episodio anterior (contexto "前情提要"), si existe."""
        previous = self.find_episode(episode_number - 1)
        return previous.synopsis if previous else None

    def replace_outline(self, outline: List[EpisodeOutline]) -> None:
        """Nuevo outline invalida los guiones previos (pueden no corresponder)."""
        self.outline = list(outline)
        self.scripts = {}
        self.touch()

    def store_script(self, script: GeneratedScript) -> None:
        self.scripts[script.episode_number] = script
        self.touch()

    def touch(self) -> None:
        self.updated_at = _utcnow()
