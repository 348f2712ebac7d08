"""Utility modules for the policy advisor.

- **errors** -- Exception hierarchy rooted at PolicyAdvisorError; provider
  failures carry a machine-checkable ``reason``.
- **concurrency** -- semaphore-bounded ``throttled_gather`` used to embed
  chunks concurrently while keeping results in input order.
- **logging** -- structlog setup with a dual-renderer pattern: coloured
  console output in development, structured JSON in production.
"""

# -- Domain exception hierarchy --------------------------------------------
from policy_advisor.utils.errors import (
    ConfigurationError,
    EmbeddingProviderError,
    ExtractionError,
    InvalidTransitionError,
    LLMError,
    NotFoundError,
    PolicyAdvisorError,
    ProviderError,
    ProviderErrorReason,
    SearchCorruptionError,
    ValidationError,
)

# -- Async concurrency helpers ---------------------------------------------
from policy_advisor.utils.concurrency import throttled_gather

# -- Structured logging setup ----------------------------------------------
from policy_advisor.utils.logging import configure_logging, get_logger

__all__ = [
    "ConfigurationError",
    "EmbeddingProviderError",
    "ExtractionError",
    "InvalidTransitionError",
    "LLMError",
    "NotFoundError",
    "PolicyAdvisorError",
    "ProviderError",
    "ProviderErrorReason",
    "SearchCorruptionError",
    "ValidationError",
    "configure_logging",
    "get_logger",
    "throttled_gather",
]
