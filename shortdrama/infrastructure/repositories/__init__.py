from .in_memory_project_repo import InMemoryProjectRepository

__all__ = ["InMemoryProjectRepository"]
