"""Unit tests for the OpenAI-compatible generation provider and error mapping."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import openai
import pytest

from policy_advisor.config.settings import Settings
from policy_advisor.providers.llm.openai_provider import OpenAILLMProvider
from policy_advisor.providers.openai_errors import classify_openai_error
from policy_advisor.utils.errors import LLMError, ProviderErrorReason

# ======================================================================
# Shared helpers
# ======================================================================

_REQUEST = httpx.Request("POST", "https://openrouter.ai/api/v1/chat/completions")


def _settings(**overrides) -> Settings:
    defaults = {
        "openai_api_key": "sk-test",
        "openai_base_url": "https://openrouter.ai/api/v1",
        "llm_model": "openai/gpt-3.5-turbo",
    }
    defaults.update(overrides)
    return Settings(**defaults)


def _status_error(cls, status: int, code: str | None = None):
    response = httpx.Response(status, request=_REQUEST)
    return cls("upstream error", response=response, body={"code": code} if code else None)


def _completion(content: str | None) -> MagicMock:
    response = MagicMock()
    response.choices = [MagicMock(message=MagicMock(content=content))]
    response.usage = MagicMock(total_tokens=42)
    return response


def _client(**create_kwargs) -> MagicMock:
    client = MagicMock()
    client.chat.completions.create = AsyncMock(**create_kwargs)
    return client


# ======================================================================
# Error classification
# ======================================================================


class TestClassifyOpenAIError:
    @pytest.mark.parametrize(
        ("error", "reason"),
        [
            (_status_error(openai.AuthenticationError, 401), ProviderErrorReason.AUTH),
            (_status_error(openai.PermissionDeniedError, 403), ProviderErrorReason.AUTH),
            (_status_error(openai.APIStatusError, 402), ProviderErrorReason.QUOTA),
            (
                _status_error(openai.RateLimitError, 429, "insufficient_quota"),
                ProviderErrorReason.QUOTA,
            ),
            (_status_error(openai.RateLimitError, 429), ProviderErrorReason.RATE_LIMIT),
            (_status_error(openai.InternalServerError, 500), ProviderErrorReason.TRANSIENT),
            (openai.APIConnectionError(request=_REQUEST), ProviderErrorReason.TRANSIENT),
            (openai.APITimeoutError(request=_REQUEST), ProviderErrorReason.TRANSIENT),
        ],
    )
    def test_reason(self, error: openai.OpenAIError, reason: ProviderErrorReason) -> None:
        assert classify_openai_error(error) is reason


# ======================================================================
# OpenAILLMProvider
# ======================================================================


class TestOpenAILLMProvider:
    def test_provider_name_for_openrouter(self) -> None:
        provider = OpenAILLMProvider(_settings(), client=MagicMock())
        assert provider.get_provider_name() == "openrouter"

    def test_provider_name_for_other_base_url(self) -> None:
        provider = OpenAILLMProvider(
            _settings(openai_base_url="http://localhost:11434/v1"), client=MagicMock()
        )
        assert provider.get_provider_name() == "openai-compatible"

    def test_is_available(self) -> None:
        assert OpenAILLMProvider(_settings(), client=MagicMock()).is_available() is True
        assert (
            OpenAILLMProvider(_settings(openai_api_key=""), client=MagicMock()).is_available()
            is False
        )

    def test_client_built_with_attribution_headers(self) -> None:
        settings = _settings(site_url="https://hr.example.com", app_title="HR Advisor")
        with patch(
            "policy_advisor.providers.llm.openai_provider.openai.AsyncOpenAI"
        ) as client_cls:
            OpenAILLMProvider(settings)

        kwargs = client_cls.call_args.kwargs
        assert kwargs["default_headers"] == {
            "HTTP-Referer": "https://hr.example.com",
            "X-Title": "HR Advisor",
        }
        assert kwargs["base_url"] == "https://openrouter.ai/api/v1"
        assert kwargs["max_retries"] == 0

    @pytest.mark.asyncio
    async def test_complete_success(self) -> None:
        client = _client(return_value=_completion("Remote work needs approval."))
        provider = OpenAILLMProvider(_settings(), client=client)
        messages = [
            {"role": "system", "content": "system prompt"},
            {"role": "user", "content": "user prompt"},
        ]

        result = await provider.complete(messages, temperature=0.3, max_tokens=1000)

        assert result == "Remote work needs approval."
        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["messages"] == messages
        assert kwargs["model"] == "openai/gpt-3.5-turbo"
        assert kwargs["temperature"] == 0.3
        assert kwargs["max_tokens"] == 1000
        assert kwargs["top_p"] == 0.9

    @pytest.mark.asyncio
    async def test_complete_model_override(self) -> None:
        client = _client(return_value=_completion("ok"))
        provider = OpenAILLMProvider(_settings(), client=client)
        await provider.complete([{"role": "user", "content": "hi"}], model="other/model")
        assert client.chat.completions.create.call_args.kwargs["model"] == "other/model"

    @pytest.mark.asyncio
    async def test_complete_without_key(self) -> None:
        client = _client(return_value=_completion("never"))
        provider = OpenAILLMProvider(_settings(openai_api_key=""), client=client)

        with pytest.raises(LLMError) as exc_info:
            await provider.complete([{"role": "user", "content": "hi"}])

        assert exc_info.value.reason is ProviderErrorReason.AUTH
        client.chat.completions.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_complete_empty_choices(self) -> None:
        response = MagicMock()
        response.choices = []
        provider = OpenAILLMProvider(_settings(), client=_client(return_value=response))

        with pytest.raises(LLMError, match="No response generated"):
            await provider.complete([{"role": "user", "content": "hi"}])

    @pytest.mark.asyncio
    async def test_complete_none_content(self) -> None:
        provider = OpenAILLMProvider(
            _settings(), client=_client(return_value=_completion(None))
        )
        with pytest.raises(LLMError):
            await provider.complete([{"role": "user", "content": "hi"}])

    @pytest.mark.asyncio
    async def test_complete_timeout_is_transient(self) -> None:
        client = _client(side_effect=openai.APITimeoutError(request=_REQUEST))
        provider = OpenAILLMProvider(_settings(llm_timeout_seconds=60), client=client)

        with pytest.raises(LLMError, match="timed out") as exc_info:
            await provider.complete([{"role": "user", "content": "hi"}])

        assert exc_info.value.reason is ProviderErrorReason.TRANSIENT

    @pytest.mark.asyncio
    async def test_complete_quota_error(self) -> None:
        client = _client(side_effect=_status_error(openai.APIStatusError, 402))
        provider = OpenAILLMProvider(_settings(), client=client)

        with pytest.raises(LLMError) as exc_info:
            await provider.complete([{"role": "user", "content": "hi"}])

        assert exc_info.value.reason is ProviderErrorReason.QUOTA
        assert exc_info.value.provider_name == "openrouter"

    @pytest.mark.asyncio
    async def test_validate_credentials_success(self) -> None:
        provider = OpenAILLMProvider(_settings(), client=_client(return_value=_completion("hi")))
        assert await provider.validate_credentials() is True

    @pytest.mark.asyncio
    async def test_validate_credentials_failure(self) -> None:
        client = _client(side_effect=_status_error(openai.AuthenticationError, 401))
        provider = OpenAILLMProvider(_settings(), client=client)
        assert await provider.validate_credentials() is False

    @pytest.mark.asyncio
    async def test_validate_credentials_without_key(self) -> None:
        provider = OpenAILLMProvider(_settings(openai_api_key=""), client=MagicMock())
        assert await provider.validate_credentials() is False
