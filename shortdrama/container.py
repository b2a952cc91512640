"""
===============================================================================
TARJETA CRC - shortdrama/container.py (Composition Root / DI manual)
===============================================================================

Responsabilidades:
  - Componer dependencias (repositorio, LLM, prompts, chunker, builders).
  - Exponer factories para FastAPI (Depends).
  - Mantener singletons con caching (lru_cache) para recursos pesados.
  - Centralizar decisiones runtime basadas en Settings (FAKE_LLM, tamaños).

Colaboradores:
  - shortdrama.crosscutting.config.get_settings
  - shortdrama.infrastructure.* (implementaciones)
  - shortdrama.application.* (builders + casos de uso)

Notas:
  - Este archivo NO contiene lógica de negocio.
  - Este archivo NO depende de FastAPI (solo expone factories).
  - El cliente de Gemini se crea aquí y se inyecta (sin singleton global
    en el adapter).
===============================================================================
"""

from __future__ import annotations

from functools import lru_cache

from .application.outline_builder import OutlineBuilder
from .application.script_builder import ScriptBuilder
from .application.usecases import (
    DeleteProjectUseCase,
    GenerateEpisodeScriptUseCase,
    GenerateOutlineUseCase,
    GetProjectUseCase,
    ListProjectsUseCase,
    UploadNovelUseCase,
)
from .crosscutting.config import get_settings
from .domain.repositories import ProjectRepository
from .domain.services import LLMService
from .infrastructure.prompts import (
    CHUNK_SUMMARY,
    EPISODE_SCRIPT,
    OUTLINE,
    get_prompt_loader,
)
from .infrastructure.repositories import InMemoryProjectRepository
from .infrastructure.services.llm import FakeLLMService, GoogleLLMService
from .infrastructure.text import NovelChunker


# =============================================================================
# Repositorios (singletons)
# =============================================================================


@lru_cache(maxsize=1)
def get_project_repository() -> ProjectRepository:
    """Store de proyectos en memoria, acotado por MAX_PROJECTS."""
    return InMemoryProjectRepository(max_projects=get_settings().max_projects)


# =============================================================================
# Servicios externos (singletons)
# =============================================================================


@lru_cache(maxsize=1)
def get_llm_service() -> LLMService:
    """Servicio LLM (fake si FAKE_LLM=1)."""
    settings = get_settings()
    if settings.fake_llm:
        return FakeLLMService()
    return GoogleLLMService(
        api_key=settings.google_api_key, model_id=settings.gemini_model
    )


@lru_cache(maxsize=1)
def get_novel_chunker() -> NovelChunker:
    settings = get_settings()
    return NovelChunker(
        chunk_size=settings.outline_chunk_size,
        max_chunks=settings.outline_max_chunks,
    )


# =============================================================================
# Builders
# =============================================================================


@lru_cache(maxsize=1)
def get_outline_builder() -> OutlineBuilder:
    settings = get_settings()
    return OutlineBuilder(
        get_llm_service(),
        summary_prompt=get_prompt_loader(CHUNK_SUMMARY),
        outline_prompt=get_prompt_loader(OUTLINE),
        chunker=get_novel_chunker(),
        concurrency=settings.outline_concurrency,
        excerpt_chars=settings.chunk_summary_excerpt_chars,
    )


@lru_cache(maxsize=1)
def get_script_builder() -> ScriptBuilder:
    settings = get_settings()
    return ScriptBuilder(
        get_llm_service(),
        prompt=get_prompt_loader(EPISODE_SCRIPT),
        min_window_chars=settings.script_min_window_chars,
        temperature=settings.script_temperature,
    )


# =============================================================================
# Casos de uso (baratos: se crean por request)
# =============================================================================


def get_upload_novel_use_case() -> UploadNovelUseCase:
    settings = get_settings()
    return UploadNovelUseCase(
        get_project_repository(),
        max_episode_count=settings.max_episode_count,
        max_upload_bytes=settings.max_upload_bytes,
    )


def get_get_project_use_case() -> GetProjectUseCase:
    return GetProjectUseCase(get_project_repository())


def get_list_projects_use_case() -> ListProjectsUseCase:
    return ListProjectsUseCase(get_project_repository())


def get_delete_project_use_case() -> DeleteProjectUseCase:
    return DeleteProjectUseCase(get_project_repository())


def get_generate_outline_use_case() -> GenerateOutlineUseCase:
    return GenerateOutlineUseCase(get_project_repository(), get_outline_builder())


def get_generate_episode_script_use_case() -> GenerateEpisodeScriptUseCase:
    return GenerateEpisodeScriptUseCase(get_project_repository(), get_script_builder())


def clear_caches() -> None:
    """Resetea singletons (tests / recarga de Settings)."""
    for factory in (
        get_project_repository,
        get_llm_service,
        get_novel_chunker,
        get_outline_builder,
        get_script_builder,
        get_prompt_loader,
        get_settings,
    ):
        factory.cache_clear()
