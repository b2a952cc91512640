"""
Name: Use Case Tests

Responsibilities:
  - UploadNovelUseCase: decoding, validation, storage
  - GenerateOutlineUseCase: success, warnings, upstream failure, streaming
  - GenerateEpisodeScriptUseCase: preconditions, degraded failures
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from shortdrama.application.outline_builder import OutlineBuilder
from shortdrama.application.script_builder import EMPTY_SCRIPT_MESSAGE, ScriptBuilder
from shortdrama.application.usecases import (
    DeleteProjectUseCase,
    DramaErrorCode,
    GenerateEpisodeScriptUseCase,
    GenerateOutlineUseCase,
    GetProjectUseCase,
    ListProjectsUseCase,
    MSG_OUTLINE_FAILED,
    MSG_SCRIPT_FAILED,
    UploadNovelInput,
    UploadNovelUseCase,
)
from shortdrama.crosscutting.exceptions import LLMError
from shortdrama.domain.entities import EpisodeOutline, GeneratedScript, ScriptStatus
from shortdrama.infrastructure.services.llm import FakeLLMService
from shortdrama.infrastructure.text import NovelChunker

pytestmark = pytest.mark.unit


def _failing_llm() -> MagicMock:
    llm = MagicMock()
    llm.generate = AsyncMock(side_effect=LLMError("upstream down"))
    return llm


@pytest.fixture
def outline_builder_factory(summary_prompt, outline_prompt):
    def _make(llm=None, *, chunk_size=10, max_chunks=3):
        return OutlineBuilder(
            llm or FakeLLMService(),
            summary_prompt=summary_prompt,
            outline_prompt=outline_prompt,
            chunker=NovelChunker(chunk_size=chunk_size, max_chunks=max_chunks),
            concurrency=2,
            excerpt_chars=5,
        )

    return _make


# =============================================================================
# Upload / Get / List / Delete
# =============================================================================


class TestUploadNovelUseCase:
    def _use_case(self, repo, **kwargs):
        params = {"max_episode_count": 100, "max_upload_bytes": 1_000}
        params.update(kwargs)
        return UploadNovelUseCase(repo, **params)

    def test_stores_decoded_project(self, project_repository):
        result = self._use_case(project_repository).execute(
            UploadNovelInput(
                file_name="你好.txt",
                content="\r\n你好，世界\r\n".encode("gb18030"),
                episode_count=40,
            )
        )

        assert result.error is None
        project = project_repository.get_project(result.project.id)
        assert project.novel_text == "你好，世界"
        assert project.title == "你好"
        assert project.episode_count == 40

    @pytest.mark.parametrize("episode_count", [0, -1, 101])
    def test_rejects_episode_count_out_of_range(self, project_repository, episode_count):
        result = self._use_case(project_repository).execute(
            UploadNovelInput(file_name="a.txt", content=b"text", episode_count=episode_count)
        )
        assert result.error.code == DramaErrorCode.VALIDATION_ERROR

    def test_rejects_blank_file(self, project_repository):
        result = self._use_case(project_repository).execute(
            UploadNovelInput(file_name="a.txt", content=b" \r\n\x00 ", episode_count=3)
        )
        assert result.error.code == DramaErrorCode.VALIDATION_ERROR
        assert project_repository.list_projects() == []

    def test_rejects_oversized_file(self, project_repository):
        result = self._use_case(project_repository, max_upload_bytes=4).execute(
            UploadNovelInput(file_name="a.txt", content=b"12345", episode_count=3)
        )
        assert result.error.code == DramaErrorCode.VALIDATION_ERROR


class TestProjectQueries:
    def test_get_project(self, project_repository, make_project):
        project = make_project()

        assert GetProjectUseCase(project_repository).execute(project.id).project is project

    def test_get_missing_project(self, project_repository):
        result = GetProjectUseCase(project_repository).execute(uuid4())

        assert result.error.code == DramaErrorCode.NOT_FOUND
        assert result.error.resource == "Project"

    def test_list_and_delete(self, project_repository, make_project):
        project = make_project()

        assert ListProjectsUseCase(project_repository).execute() == [project]
        assert DeleteProjectUseCase(project_repository).execute(project.id) is None
        assert DeleteProjectUseCase(project_repository).execute(project.id).code == (
            DramaErrorCode.NOT_FOUND
        )


# =============================================================================
# Outline
# =============================================================================


class TestGenerateOutlineUseCase:
    @pytest.mark.asyncio
    async def test_generates_and_stores_outline(
        self, project_repository, make_project, outline_builder_factory
    ):
        project = make_project(text="短篇小说", episode_count=3)
        project.store_script(GeneratedScript(episode_number=1, content="旧剧本"))

        result = await GenerateOutlineUseCase(
            project_repository, outline_builder_factory()
        ).execute(project.id)

        assert result.error is None
        assert [e.episode_number for e in result.outline] == [1, 2, 3]
        stored = project_repository.get_project(project.id)
        assert stored.outline == result.outline
        assert stored.scripts == {}

    @pytest.mark.asyncio
    async def test_reports_truncation_warning(
        self, project_repository, make_project, outline_builder_factory
    ):
        project = make_project(text="x" * 45, episode_count=2)

        result = await GenerateOutlineUseCase(
            project_repository, outline_builder_factory(max_chunks=3)
        ).execute(project.id)

        assert result.error is None
        assert len(result.warnings) == 1

    @pytest.mark.asyncio
    async def test_missing_project(self, project_repository, outline_builder_factory):
        result = await GenerateOutlineUseCase(
            project_repository, outline_builder_factory()
        ).execute(uuid4())

        assert result.error.code == DramaErrorCode.NOT_FOUND

    @pytest.mark.asyncio
    async def test_upstream_failure_is_service_unavailable(
        self, project_repository, make_project, outline_builder_factory, sample_outline
    ):
        project = make_project(text="短篇小说", outline=sample_outline)

        result = await GenerateOutlineUseCase(
            project_repository, outline_builder_factory(_failing_llm())
        ).execute(project.id)

        assert result.error.code == DramaErrorCode.SERVICE_UNAVAILABLE
        assert result.error.message == MSG_OUTLINE_FAILED
        assert project_repository.get_project(project.id).outline == sample_outline

    @pytest.mark.asyncio
    async def test_stream_ends_with_done(
        self, project_repository, make_project, outline_builder_factory
    ):
        project = make_project(text="y" * 25, episode_count=2)
        use_case = GenerateOutlineUseCase(project_repository, outline_builder_factory())

        events = [e async for e in use_case.stream(project.id)]

        kinds = [e.kind for e in events]
        assert kinds.count("progress") == 3
        assert kinds[-1] == "done"

    @pytest.mark.asyncio
    async def test_stream_error_event(
        self, project_repository, make_project, outline_builder_factory
    ):
        project = make_project(text="短篇小说")
        use_case = GenerateOutlineUseCase(
            project_repository, outline_builder_factory(_failing_llm())
        )

        events = [e async for e in use_case.stream(project.id)]

        assert events[-1].kind == "error"
        assert events[-1].code == DramaErrorCode.SERVICE_UNAVAILABLE.value
        assert events[-1].to_payload()["message"] == MSG_OUTLINE_FAILED

    @pytest.mark.asyncio
    async def test_closing_stream_does_not_store_outline(
        self, project_repository, make_project, outline_prompt, summary_prompt
    ):
        class SlowLLM(FakeLLMService):
            async def generate(self, prompt, **kwargs):
                await asyncio.sleep(10)
                return await super().generate(prompt, **kwargs)

        builder = OutlineBuilder(
            SlowLLM(),
            summary_prompt=summary_prompt,
            outline_prompt=outline_prompt,
            chunker=NovelChunker(chunk_size=10, max_chunks=3),
        )
        project = make_project(text="z" * 25)
        stream = GenerateOutlineUseCase(project_repository, builder).stream(project.id)

        first = await stream.__anext__()
        await stream.aclose()

        assert first.kind == "status"
        assert project_repository.get_project(project.id).outline == []


# =============================================================================
# Episode script
# =============================================================================


def _script_builder(llm, script_prompt) -> ScriptBuilder:
    return ScriptBuilder(llm, prompt=script_prompt, min_window_chars=100)


class TestGenerateEpisodeScriptUseCase:
    @pytest.mark.asyncio
    async def test_requires_outline(self, project_repository, make_project, script_prompt):
        project = make_project()

        result = await GenerateEpisodeScriptUseCase(
            project_repository, _script_builder(FakeLLMService(), script_prompt)
        ).execute(project.id, 1)

        assert result.error.code == DramaErrorCode.CONFLICT

    @pytest.mark.asyncio
    async def test_missing_episode(
        self, project_repository, make_project, script_prompt, sample_outline
    ):
        project = make_project(outline=sample_outline)

        result = await GenerateEpisodeScriptUseCase(
            project_repository, _script_builder(FakeLLMService(), script_prompt)
        ).execute(project.id, 9)

        assert result.error.code == DramaErrorCode.NOT_FOUND
        assert result.error.resource == "Episode"

    @pytest.mark.asyncio
    async def test_missing_project(self, project_repository, script_prompt):
        result = await GenerateEpisodeScriptUseCase(
            project_repository, _script_builder(FakeLLMService(), script_prompt)
        ).execute(uuid4(), 1)

        assert result.error.code == DramaErrorCode.NOT_FOUND

    @pytest.mark.asyncio
    async def test_generates_and_stores_script(
        self, project_repository, make_project, script_prompt, sample_outline
    ):
        project = make_project(outline=sample_outline)

        result = await GenerateEpisodeScriptUseCase(
            project_repository, _script_builder(FakeLLMService(), script_prompt)
        ).execute(project.id, 2)

        assert result.error is None
        assert result.script.status == ScriptStatus.READY
        assert project_repository.get_project(project.id).scripts[2] is result.script

    @pytest.mark.asyncio
    async def test_passes_previous_synopsis_and_project_total(
        self, project_repository, make_project, sample_outline
    ):
        project = make_project(outline=sample_outline, episode_count=40)
        builder = MagicMock()
        builder.build = AsyncMock(return_value="剧本")

        await GenerateEpisodeScriptUseCase(project_repository, builder).execute(
            project.id, 2
        )

        args = builder.build.await_args
        assert args.args == (project.novel_text, sample_outline[1], 40)
        assert args.kwargs == {"previous_synopsis": sample_outline[0].synopsis}

    @pytest.mark.asyncio
    async def test_upstream_failure_degrades_to_failed_script(
        self, project_repository, make_project, script_prompt, sample_outline
    ):
        project = make_project(outline=sample_outline)

        result = await GenerateEpisodeScriptUseCase(
            project_repository, _script_builder(_failing_llm(), script_prompt)
        ).execute(project.id, 1)

        assert result.error is None
        assert result.script.status == ScriptStatus.FAILED
        assert result.script.content == MSG_SCRIPT_FAILED
        assert project_repository.get_project(project.id).scripts[1].is_failed

    @pytest.mark.asyncio
    async def test_empty_output_is_marked_failed(
        self, project_repository, make_project, sample_outline
    ):
        project = make_project(outline=sample_outline)
        builder = MagicMock()
        builder.build = AsyncMock(return_value=EMPTY_SCRIPT_MESSAGE)

        result = await GenerateEpisodeScriptUseCase(project_repository, builder).execute(
            project.id, 1
        )

        assert result.script.status == ScriptStatus.FAILED

    @pytest.mark.asyncio
    async def test_script_is_discarded_when_outline_changes_mid_generation(
        self, project_repository, make_project, sample_outline
    ):
        project = make_project(outline=sample_outline)
        started, release = asyncio.Event(), asyncio.Event()

        async def slow_build(*args, **kwargs):
            started.set()
            await release.wait()
            return "旧大纲的剧本"

        builder = MagicMock()
        builder.build = AsyncMock(side_effect=slow_build)
        use_case = GenerateEpisodeScriptUseCase(project_repository, builder)

        pending = asyncio.create_task(use_case.execute(project.id, 1))
        await started.wait()
        project.replace_outline(
            [EpisodeOutline(episode_number=1, title="新开端", synopsis="新的梗概。")]
        )
        release.set()
        result = await pending

        assert result.error.code == DramaErrorCode.CONFLICT
        assert project_repository.get_project(project.id).scripts == {}

    @pytest.mark.asyncio
    async def test_script_is_discarded_when_project_deleted_mid_generation(
        self, project_repository, make_project, sample_outline
    ):
        project = make_project(outline=sample_outline)
        started, release = asyncio.Event(), asyncio.Event()

        async def slow_build(*args, **kwargs):
            started.set()
            await release.wait()
            return "剧本"

        builder = MagicMock()
        builder.build = AsyncMock(side_effect=slow_build)
        use_case = GenerateEpisodeScriptUseCase(project_repository, builder)

        pending = asyncio.create_task(use_case.execute(project.id, 1))
        await started.wait()
        project_repository.delete_project(project.id)
        release.set()
        result = await pending

        assert result.error.code == DramaErrorCode.NOT_FOUND
        assert project_repository.get_project(project.id) is None
