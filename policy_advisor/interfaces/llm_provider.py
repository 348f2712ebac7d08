"""Abstract base class for generation (chat completion) providers.

The retrieval orchestrator and the translation service both talk to the
model through this contract, so an OpenRouter, OpenAI or local
OpenAI-compatible backend can be swapped in one place (``main.py``).
"""

from __future__ import annotations

from abc import ABC, abstractmethod

# A chat message: {"role": "system" | "user" | "assistant", "content": "..."}
ChatMessage = dict[str, str]


# Concrete implementation: OpenAILLMProvider (policy_advisor/providers/llm/)
class ILLMProvider(ABC):
    """Contract for chat-completion services."""

    @abstractmethod
    async def complete(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        temperature: float = 0.3,
        max_tokens: int = 1000,
    ) -> str:
        """Generate a completion for an ordered list of chat messages.

        Parameters
        ----------
        messages:
            Ordered ``{"role", "content"}`` dicts sent verbatim.
        model:
            Model identifier; ``None`` uses the provider's configured default.
        temperature:
            Sampling temperature.
        max_tokens:
            Upper bound on generated tokens.

        Returns
        -------
        str
            Text of the first completion choice.

        Raises
        ------
        policy_advisor.utils.errors.LLMError
            With ``reason`` set to auth, quota, rate_limit or transient.
        """

    @abstractmethod
    def get_model_name(self) -> str:
        """Return the default model identifier used by :meth:`complete`."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier, e.g. ``"openrouter"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if credentials are configured (no network call)."""

    @abstractmethod
    async def validate_credentials(self) -> bool:
        """Perform a lightweight API call to confirm credentials are valid."""
