"""
Name: LLM Adapter Tests

Responsibilities:
  - GoogleLLMService builds GenerateContentConfig and wraps SDK errors
  - FakeLLMService is deterministic and honors array schemas
"""

import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from shortdrama.application.outline_builder import outline_response_schema
from shortdrama.crosscutting.exceptions import LLMError
from shortdrama.infrastructure.services.llm import FakeLLMService, GoogleLLMService
from shortdrama.infrastructure.services.retry import create_retry_decorator

pytestmark = pytest.mark.unit


def _no_retry(fn):
    return fn


def _client(generate) -> MagicMock:
    client = MagicMock()
    client.aio.models.generate_content = generate
    return client


class TestGoogleLLMService:
    @pytest.mark.asyncio
    async def test_generate_sends_model_prompt_and_config(self):
        generate = AsyncMock(return_value=SimpleNamespace(text="  剧本内容  "))
        service = GoogleLLMService(
            client=_client(generate), model_id="gemini-test", retry_decorator=_no_retry
        )

        text = await service.generate(
            "写剧本", system_instruction="你是分镜师", temperature=0.7
        )

        assert text == "剧本内容"
        kwargs = generate.await_args.kwargs
        assert kwargs["model"] == "gemini-test"
        assert kwargs["contents"] == "写剧本"
        assert kwargs["config"].temperature == 0.7
        assert kwargs["config"].response_mime_type is None

    @pytest.mark.asyncio
    async def test_schema_switches_to_json_mode(self):
        generate = AsyncMock(return_value=SimpleNamespace(text="[]"))
        service = GoogleLLMService(client=_client(generate), retry_decorator=_no_retry)

        await service.generate("大纲", response_schema=outline_response_schema(3))

        config = generate.await_args.kwargs["config"]
        assert config.response_mime_type == "application/json"
        assert config.response_schema is not None

    @pytest.mark.asyncio
    async def test_plain_prompt_sends_no_config(self):
        generate = AsyncMock(return_value=SimpleNamespace(text="摘要"))
        service = GoogleLLMService(client=_client(generate), retry_decorator=_no_retry)

        await service.generate("摘要")

        assert generate.await_args.kwargs["config"] is None

    @pytest.mark.asyncio
    async def test_sdk_errors_become_llm_error(self):
        generate = AsyncMock(side_effect=RuntimeError("boom"))
        service = GoogleLLMService(client=_client(generate), retry_decorator=_no_retry)

        with pytest.raises(LLMError) as exc_info:
            await service.generate("prompt")
        assert isinstance(exc_info.value.original_error, RuntimeError)

    @pytest.mark.asyncio
    async def test_transient_errors_are_retried(self):
        calls = []

        async def flaky(**kwargs):
            calls.append(kwargs)
            if len(calls) < 2:
                raise ConnectionError("connection reset")
            return SimpleNamespace(text="ok")

        service = GoogleLLMService(
            client=_client(flaky),
            retry_decorator=create_retry_decorator(
                max_attempts=3, base_delay=0, max_delay=0.01
            ),
        )

        assert await service.generate("prompt") == "ok"
        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_empty_prompt_is_rejected(self):
        generate = AsyncMock()
        service = GoogleLLMService(client=_client(generate), retry_decorator=_no_retry)

        with pytest.raises(LLMError):
            await service.generate("   ")
        generate.assert_not_awaited()

    def test_requires_api_key_or_client(self):
        with pytest.raises(LLMError):
            GoogleLLMService(api_key="")


class TestFakeLLMService:
    @pytest.mark.asyncio
    async def test_text_is_deterministic(self):
        service = FakeLLMService()

        first = await service.generate("同一个提示")
        second = await service.generate("同一个提示")

        assert first == second
        assert first != await service.generate("另一个提示")
        assert service.prompts == ["同一个提示", "同一个提示", "另一个提示"]

    @pytest.mark.asyncio
    async def test_array_schema_returns_requested_episode_count(self):
        service = FakeLLMService()

        raw = await service.generate("大纲", response_schema=outline_response_schema(4))

        episodes = json.loads(raw)
        assert [e["episode_number"] for e in episodes] == [1, 2, 3, 4]
        assert all(e["title"] and e["synopsis"] for e in episodes)
