"""
Name: Pytest Configuration and Shared Fixtures

Responsibilities:
  - Configure test environment (FAKE_LLM, no .env file)
  - Provide reusable fixtures (prompt loaders, repository, projects)
  - Reset composition-root singletons between API tests

Notes:
  - Env vars are set BEFORE importing shortdrama so Settings validates.
"""

import os
import sys
from pathlib import Path
from uuid import uuid4

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("FAKE_LLM", "1")
os.environ.setdefault("LOG_JSON", "0")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from shortdrama.crosscutting import config as app_config  # noqa: E402

app_config.Settings.model_config["env_file"] = None

from shortdrama.domain.entities import EpisodeOutline, NovelProject  # noqa: E402
from shortdrama.infrastructure.prompts import (  # noqa: E402
    CHUNK_SUMMARY,
    EPISODE_SCRIPT,
    OUTLINE,
    PromptLoader,
)
from shortdrama.infrastructure.repositories import (  # noqa: E402
    InMemoryProjectRepository,
)


def pytest_configure(config) -> None:
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )


# ============================================================================
# Prompt Fixtures
# ============================================================================


@pytest.fixture
def summary_prompt() -> PromptLoader:
    return PromptLoader(CHUNK_SUMMARY)


@pytest.fixture
def outline_prompt() -> PromptLoader:
    return PromptLoader(OUTLINE)


@pytest.fixture
def script_prompt() -> PromptLoader:
    return PromptLoader(EPISODE_SCRIPT)


# ============================================================================
# Domain Fixtures
# ============================================================================


@pytest.fixture
def project_repository() -> InMemoryProjectRepository:
    return InMemoryProjectRepository(max_projects=10)


@pytest.fixture
def sample_outline() -> list[EpisodeOutline]:
    return [
        EpisodeOutline(episode_number=1, title="初遇", synopsis="少年在山门前遇见师父。"),
        EpisodeOutline(episode_number=2, title="拜师", synopsis="少年通过考验正式拜师。"),
        EpisodeOutline(episode_number=3, title="下山", synopsis="师父命少年下山历练。"),
    ]


@pytest.fixture
def make_project(project_repository):
    """R: Factory that stores a NovelProject in the repository."""

    def _make(text: str = "第一章 少年上山拜师。", episode_count: int = 3, outline=None):
        project = NovelProject(
            id=uuid4(),
            file_name="测试小说.txt",
            novel_text=text,
            episode_count=episode_count,
            outline=list(outline or []),
        )
        project_repository.save_project(project)
        return project

    return _make


@pytest.fixture
def reset_container():
    """R: Fresh singletons (repository, LLM, builders) for each API test."""
    from shortdrama.container import clear_caches

    clear_caches()
    yield
    clear_caches()
