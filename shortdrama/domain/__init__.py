"""Capa de dominio: entidades y puertos (sin dependencias de infraestructura)."""

from .entities import EpisodeOutline, GeneratedScript, NovelProject, ScriptStatus
from .repositories import ProjectRepository
from .services import LLMService

__all__ = [
    "EpisodeOutline",
    "GeneratedScript",
    "NovelProject",
    "ScriptStatus",
    "ProjectRepository",
    "LLMService",
]
