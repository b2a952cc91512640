from .generate_episode_script import GenerateEpisodeScriptUseCase, MSG_SCRIPT_FAILED
from .generate_outline import GenerateOutlineUseCase, MSG_OUTLINE_FAILED
from .get_project import GetProjectUseCase
from .list_projects import DeleteProjectUseCase, ListProjectsUseCase
from .results import (
    DramaErrorCode,
    DramaUseCaseError,
    GenerateOutlineResult,
    GenerateScriptResult,
    GetProjectResult,
    UploadNovelResult,
)
from .upload_novel import UploadNovelInput, UploadNovelUseCase

__all__ = [
    "DeleteProjectUseCase",
    "DramaErrorCode",
    "DramaUseCaseError",
    "GenerateEpisodeScriptUseCase",
    "GenerateOutlineResult",
    "GenerateOutlineUseCase",
    "GenerateScriptResult",
    "GetProjectResult",
    "GetProjectUseCase",
    "ListProjectsUseCase",
    "MSG_OUTLINE_FAILED",
    "MSG_SCRIPT_FAILED",
    "UploadNovelInput",
    "UploadNovelResult",
    "UploadNovelUseCase",
]
