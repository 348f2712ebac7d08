"""Custom exception hierarchy for the policy advisor.

All application exceptions inherit from :class:`PolicyAdvisorError`, which
carries an optional ``provider_name`` so error handlers can identify which
external service (e.g. "openrouter", "openai_embedding", "sqlite") caused
the failure.

The hierarchy is organized by where the failure happens:

    PolicyAdvisorError  (base -- catch-all for any policy advisor error)
    +-- ValidationError           (malformed upload / query input)
    +-- NotFoundError             (unknown document or conversation)
    +-- ExtractionError           (text extraction from raw bytes)
    +-- InvalidTransitionError    (document left a terminal status)
    +-- ConfigurationError        (startup / unknown backend names)
    +-- SearchCorruptionError     (unreadable stored vector, per item)
    +-- ProviderError             (external model call, carries a reason)
        +-- EmbeddingProviderError
        +-- LLMError

``ProviderError.reason`` is a :class:`ProviderErrorReason` so callers can
branch on auth / quota / rate-limit / transient failures without parsing
message strings.
"""

from __future__ import annotations

from enum import Enum


class PolicyAdvisorError(Exception):
    """Base exception for all policy advisor errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name`` identifying which external service triggered the
    error.  The ``__str__`` method prefixes the provider name in brackets
    for structured log output, e.g. ``[openrouter] Rate limit exceeded``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Caller-facing rejections
# ---------------------------------------------------------------------------

class ValidationError(PolicyAdvisorError):
    """Raised when input is malformed (bad MIME type, size, empty query, ...)."""

    def __init__(
        self,
        message: str = "Invalid input",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class NotFoundError(PolicyAdvisorError):
    """Raised when a document or conversation does not exist."""

    def __init__(
        self,
        message: str = "Resource not found",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Ingestion errors
# ---------------------------------------------------------------------------

class ExtractionError(PolicyAdvisorError):
    """Raised when text cannot be extracted from the uploaded bytes."""

    def __init__(
        self,
        message: str = "Text extraction failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class InvalidTransitionError(PolicyAdvisorError):
    """Raised when a document status change would leave a terminal status."""

    def __init__(
        self,
        message: str = "Invalid document status transition",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ConfigurationError(PolicyAdvisorError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Retrieval errors
# ---------------------------------------------------------------------------

class SearchCorruptionError(PolicyAdvisorError):
    """Raised for a single stored chunk whose vector cannot be decoded.

    The vector index catches this per item: the chunk is skipped and
    logged, the search carries on.
    """

    def __init__(
        self,
        message: str = "Stored embedding vector is unreadable",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# External model provider errors
# ---------------------------------------------------------------------------

class ProviderErrorReason(str, Enum):
    """Machine-checkable cause of a provider failure."""

    AUTH = "auth"
    QUOTA = "quota"
    RATE_LIMIT = "rate_limit"
    TRANSIENT = "transient"


class ProviderError(PolicyAdvisorError):
    """Raised when an embedding or generation provider call fails.

    Callers decide on retries or fallbacks from :attr:`reason`; the core
    itself never retries.
    """

    def __init__(
        self,
        message: str = "External provider call failed",
        provider_name: str | None = None,
        reason: ProviderErrorReason = ProviderErrorReason.TRANSIENT,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
        self._reason = ProviderErrorReason(reason)

    @property
    def reason(self) -> ProviderErrorReason:
        return self._reason


class EmbeddingProviderError(ProviderError):
    """Raised when an embedding API call fails."""

    def __init__(
        self,
        message: str = "Embedding provider call failed",
        provider_name: str | None = None,
        reason: ProviderErrorReason = ProviderErrorReason.TRANSIENT,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name, reason=reason)


class LLMError(ProviderError):
    """Raised when a generation call fails or returns an unusable response."""

    def __init__(
        self,
        message: str = "LLM API call failed",
        provider_name: str | None = None,
        reason: ProviderErrorReason = ProviderErrorReason.TRANSIENT,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name, reason=reason)
