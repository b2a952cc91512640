from .projects import (
    EpisodeOutlineRes,
    OutlineRes,
    ProjectDetailRes,
    ProjectsListRes,
    ProjectSummaryRes,
    ScriptRes,
)

__all__ = [
    "EpisodeOutlineRes",
    "OutlineRes",
    "ProjectDetailRes",
    "ProjectSummaryRes",
    "ProjectsListRes",
    "ScriptRes",
]
