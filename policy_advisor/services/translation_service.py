"""Role-prompted translation through the generation provider.

Two entry points with different failure behaviour:

- :meth:`TranslationService.translate` raises :class:`LLMError` on failure.
  The retrieval orchestrator uses it for generated answers, so a failed
  translation turns into the apology message instead of an answer in the
  wrong language.
- :meth:`TranslationService.translate_best_effort` returns the input text
  unchanged on failure and caches successes.  Used for the fixed system
  messages (no documents, apology), which are identical on every call.
"""

from __future__ import annotations

import hashlib

import structlog

from policy_advisor.config.languages import language_name
from policy_advisor.interfaces.cache_provider import ICacheProvider
from policy_advisor.interfaces.llm_provider import ILLMProvider
from policy_advisor.utils.errors import LLMError
from policy_advisor.utils.logging import get_logger

logger: structlog.BoundLogger = get_logger(__name__)

_TRANSLATION_TEMPERATURE = 0.3
_TRANSLATION_MAX_TOKENS = 1000


def _system_prompt(target_language: str) -> str:
    return (
        "You are a professional translator specializing in corporate policy documents. "
        f"Translate the following text to {target_language} while maintaining the exact "
        "meaning, context, and authoritative tone. Preserve any technical terms, policy "
        "references, and legal language. Return only the translation without explanations."
    )


class TranslationService:
    """Translate text from the base language into a supported language.

    Parameters
    ----------
    llm_provider:
        Generation provider used for the translation prompt.
    model:
        Model identifier for translations; ``None`` uses the provider default.
    base_language:
        Text is assumed to be in this language; requests for it are no-ops.
    cache:
        Optional cache for :meth:`translate_best_effort`.
    cache_ttl:
        TTL in seconds for cached translations.
    """

    def __init__(
        self,
        llm_provider: ILLMProvider,
        model: str | None = None,
        base_language: str = "en",
        cache: ICacheProvider | None = None,
        cache_ttl: int = 3600,
    ) -> None:
        self._llm = llm_provider
        self._model = model
        self._base_language = base_language
        self._cache = cache
        self._cache_ttl = cache_ttl

    @property
    def base_language(self) -> str:
        return self._base_language

    async def translate(self, text: str, language: str) -> str:
        """Translate *text* into *language*.

        Raises
        ------
        ValidationError
            If *language* is not supported.
        LLMError
            If the generation call fails or returns nothing.
        """
        target = language_name(language)
        if language == self._base_language or not text.strip():
            return text

        translated = await self._llm.complete(
            [
                {"role": "system", "content": _system_prompt(target)},
                {"role": "user", "content": text},
            ],
            model=self._model,
            temperature=_TRANSLATION_TEMPERATURE,
            max_tokens=_TRANSLATION_MAX_TOKENS,
        )
        if not translated.strip():
            raise LLMError(
                message="Translation returned empty text",
                provider_name=self._llm.get_provider_name(),
            )
        logger.debug("text_translated", language=language, chars=len(text))
        return translated

    async def translate_best_effort(self, text: str, language: str) -> str:
        """Like :meth:`translate`, but falls back to *text* on any generation failure.

        An unsupported *language* still raises :class:`ValidationError`.
        """
        language_name(language)
        if language == self._base_language:
            return text

        key = self._cache_key(text, language)
        if self._cache is not None:
            cached = await self._cache.get(key)
            if cached is not None:
                return cached

        try:
            translated = await self.translate(text, language)
        except Exception as exc:
            logger.warning(
                "translation_fallback",
                language=language,
                error_type=type(exc).__name__,
                error=str(exc),
            )
            return text

        if self._cache is not None:
            await self._cache.set(key, translated, ttl=self._cache_ttl)
        return translated

    @staticmethod
    def _cache_key(text: str, language: str) -> str:
        digest = hashlib.sha256(text.encode("utf-8")).hexdigest()[:16]
        return f"translation:{language}:{digest}"
