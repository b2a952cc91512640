"""
============================================================
TARJETA CRC - infrastructure/repositories/in_memory_project_repo.py
============================================================
Class: InMemoryProjectRepository

Responsibilities:
  - Guardar proyectos de novela en memoria del proceso.
  - Acotar la memoria: como máximo `max_projects`; al superar el tope se
    descarta el proyecto menos recientemente guardado.
  - Listar proyectos del más reciente al más antiguo.

Collaborators:
  - domain.repositories.ProjectRepository (contrato)

Constraints / Notes:
  - Thread-safe: Lock protege el OrderedDict interno.
  - Sin persistencia: reiniciar el proceso pierde los proyectos.
============================================================
"""

from __future__ import annotations

from collections import OrderedDict
from threading import Lock
from typing import List, Optional
from uuid import UUID

from ...crosscutting.logger import logger
from ...domain.entities import NovelProject


class InMemoryProjectRepository:
    """R: Thread-safe in-memory project store with LRU eviction."""

    def __init__(self, max_projects: int = 50):
        if max_projects <= 0:
            raise ValueError("max_projects must be > 0")
        self._max_projects = max_projects
        self._lock = Lock()
        self._projects: "OrderedDict[UUID, NovelProject]" = OrderedDict()

    def save_project(self, project: NovelProject) -> None:
        evicted: List[UUID] = []
        with self._lock:
            self._projects[project.id] = project
            self._projects.move_to_end(project.id)
            while len(self._projects) > self._max_projects:
                old_id, _ = self._projects.popitem(last=False)
                evicted.append(old_id)

        for old_id in evicted:
            logger.info("Project evicted", extra={"project_id": str(old_id)})

    def get_project(self, project_id: UUID) -> Optional[NovelProject]:
        with self._lock:
            return self._projects.get(project_id)

    def list_projects(self) -> List[NovelProject]:
        with self._lock:
            return list(reversed(self._projects.values()))

    def delete_project(self, project_id: UUID) -> bool:
        with self._lock:
            return self._projects.pop(project_id, None) is not None
