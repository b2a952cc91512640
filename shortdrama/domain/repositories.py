"""
===============================================================================
TARJETA CRC - domain/repositories.py
===============================================================================

Módulo:
    Puertos de persistencia (Protocols)

Responsabilidades:
    - Contrato para guardar/recuperar proyectos de novela.

Colaboradores:
    - infrastructure/repositories/in_memory_project_repo.py
    - application/usecases/*
===============================================================================
"""

from __future__ import annotations

from typing import List, Optional, Protocol
from uuid import UUID

from .entities import NovelProject


class ProjectRepository(Protocol):
    """Contrato del store de proyectos."""

    def save_project(self, project: NovelProject) -> None: ...

    def get_project(self, project_id: UUID) -> Optional[NovelProject]: ...

    def list_projects(self) -> List[NovelProject]: ...

    def delete_project(self, project_id: UUID) -> bool: ...
