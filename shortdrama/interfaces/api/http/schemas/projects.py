"""
===============================================================================
TARJETA CRC - schemas/projects.py (DTOs HTTP de proyectos, outline y guiones)
===============================================================================

Responsabilidades:
  - Definir los modelos de respuesta (pydantic) de la API.
  - Convertir entidades de dominio → DTOs (from_entity).

Colaboradores:
  - domain.entities (NovelProject, EpisodeOutline, GeneratedScript)
===============================================================================
"""

from __future__ import annotations

from datetime import datetime
from typing import List
from uuid import UUID

from pydantic import BaseModel, Field

from shortdrama.domain.entities import EpisodeOutline, GeneratedScript, NovelProject


class EpisodeOutlineRes(BaseModel):
    episode_number: int
    title: str
    synopsis: str

    @classmethod
    def from_entity(cls, episode: EpisodeOutline) -> "EpisodeOutlineRes":
        return cls(
            episode_number=episode.episode_number,
            title=episode.title,
            synopsis=episode.synopsis,
        )


class ScriptRes(BaseModel):
    episode_number: int
    content: str
    status: str
    created_at: datetime

    @classmethod
    def from_entity(cls, script: GeneratedScript) -> "ScriptRes":
        return cls(
            episode_number=script.episode_number,
            content=script.content,
            status=script.status.value,
            created_at=script.created_at,
        )


class ProjectSummaryRes(BaseModel):
    id: UUID
    title: str
    file_name: str
    novel_chars: int = Field(..., description="Longitud de la novela en caracteres")
    episode_count: int
    has_outline: bool
    scripts_count: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, project: NovelProject) -> "ProjectSummaryRes":
        return cls(
            id=project.id,
            title=project.title,
            file_name=project.file_name,
            novel_chars=len(project.novel_text),
            episode_count=project.episode_count,
            has_outline=project.has_outline,
            scripts_count=len(project.scripts),
            created_at=project.created_at,
            updated_at=project.updated_at,
        )


class ProjectDetailRes(ProjectSummaryRes):
    outline: List[EpisodeOutlineRes] = Field(default_factory=list)
    scripts: List[ScriptRes] = Field(default_factory=list)

    @classmethod
    def from_entity(cls, project: NovelProject) -> "ProjectDetailRes":
        summary = ProjectSummaryRes.from_entity(project)
        return cls(
            **summary.model_dump(),
            outline=[EpisodeOutlineRes.from_entity(e) for e in project.outline],
            scripts=[
                ScriptRes.from_entity(project.scripts[n])
                for n in sorted(project.scripts)
            ],
        )


class ProjectsListRes(BaseModel):
    projects: List[ProjectSummaryRes]


class OutlineRes(BaseModel):
    project_id: UUID
    outline: List[EpisodeOutlineRes]
    warnings: List[str] = Field(default_factory=list)
