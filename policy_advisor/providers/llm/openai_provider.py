"""OpenAI-compatible LLM provider adapter.

Wraps the ``openai`` async client to implement :class:`ILLMProvider`.
The default endpoint is OpenRouter, which speaks the OpenAI chat
completions API; any other compatible base URL (OpenAI itself, a local
gateway) works by changing ``openai_base_url``.

OpenRouter asks callers to identify themselves with ``HTTP-Referer`` and
``X-Title`` headers, so they are sent on every request.
"""

from __future__ import annotations

import openai
import structlog

from policy_advisor.config.settings import Settings
from policy_advisor.interfaces.llm_provider import ChatMessage, ILLMProvider
from policy_advisor.providers.openai_errors import classify_openai_error
from policy_advisor.utils.errors import LLMError, ProviderErrorReason

logger = structlog.get_logger(logger_name=__name__)

_TOP_P = 0.9


class OpenAILLMProvider(ILLMProvider):
    """LLM provider backed by an OpenAI-compatible chat completions API.

    Every SDK exception is re-raised as :class:`LLMError` with a
    :class:`ProviderErrorReason`, so callers never import ``openai``.
    """

    def __init__(self, settings: Settings, client: openai.AsyncOpenAI | None = None) -> None:
        self._api_key = settings.openai_api_key
        self._model = settings.llm_model
        self._timeout = settings.llm_timeout_seconds
        self._base_url = settings.openai_base_url

        if client is None:
            client_kwargs: dict = {
                # The SDK refuses to build a client without a key; an
                # unconfigured provider fails at call time instead.
                "api_key": self._api_key or "not-configured",
                "timeout": openai.Timeout(self._timeout, connect=5.0),
                "max_retries": 0,
                "default_headers": {
                    "HTTP-Referer": settings.site_url,
                    "X-Title": settings.app_title,
                },
            }
            if self._base_url:
                client_kwargs["base_url"] = self._base_url
            client = openai.AsyncOpenAI(**client_kwargs)
        self._client = client

        self._provider_label = "openrouter" if "openrouter.ai" in self._base_url else "openai-compatible"

    # ------------------------------------------------------------------
    # ILLMProvider implementation
    # ------------------------------------------------------------------

    async def complete(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        temperature: float = 0.3,
        max_tokens: int = 1000,
    ) -> str:
        """Send *messages* verbatim and return the first choice's text."""
        if not self.is_available():
            raise LLMError(
                message="API key not configured",
                provider_name=self.get_provider_name(),
                reason=ProviderErrorReason.AUTH,
            )

        model_name = model or self._model
        try:
            response = await self._client.chat.completions.create(
                model=model_name,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
                top_p=_TOP_P,
            )
        except openai.APITimeoutError as exc:
            raise LLMError(
                message=f"Request timed out after {self._timeout:g}s",
                provider_name=self.get_provider_name(),
                reason=ProviderErrorReason.TRANSIENT,
            ) from exc
        except openai.OpenAIError as exc:
            reason = classify_openai_error(exc)
            logger.warning(
                "llm_completion_failed",
                model=model_name,
                provider=self._provider_label,
                reason=reason.value,
                error=str(exc),
            )
            raise LLMError(
                message=f"API error: {exc}",
                provider_name=self.get_provider_name(),
                reason=reason,
            ) from exc

        if not response.choices or response.choices[0].message.content is None:
            raise LLMError(
                message="No response generated",
                provider_name=self.get_provider_name(),
            )

        logger.info(
            "llm_completion",
            model=model_name,
            provider=self._provider_label,
            tokens=response.usage.total_tokens if response.usage else None,
        )
        return response.choices[0].message.content

    def get_model_name(self) -> str:
        return self._model

    def get_provider_name(self) -> str:
        """Return 'openrouter' or 'openai-compatible' depending on the base URL."""
        return self._provider_label

    def is_available(self) -> bool:
        """Return ``True`` if an API key is configured (doesn't verify it works)."""
        return bool(self._api_key)

    async def validate_credentials(self) -> bool:
        """Issue a one-message completion to verify the key is accepted."""
        if not self.is_available():
            return False
        try:
            await self.complete([{"role": "user", "content": "Hello"}], max_tokens=5)
        except LLMError as exc:
            logger.info("llm_credentials_invalid", reason=exc.reason.value, error=exc.message)
            return False
        return True
