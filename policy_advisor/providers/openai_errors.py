"""Mapping of ``openai`` SDK exceptions onto :class:`ProviderErrorReason`.

Shared by the OpenAI-compatible generation and embedding adapters so both
report the same failure taxonomy.
"""

from __future__ import annotations

import openai

from policy_advisor.utils.errors import ProviderErrorReason

_QUOTA_CODES = frozenset({"insufficient_quota", "billing_hard_limit_reached"})


def classify_openai_error(exc: openai.OpenAIError) -> ProviderErrorReason:
    """Return the reason code for an exception raised by the ``openai`` client.

    - 401 / 403                                   -> ``auth``
    - 402, or 429 with an ``insufficient_quota``  -> ``quota``
    - other 429                                   -> ``rate_limit``
    - timeouts, connection errors, 5xx, anything
      else                                        -> ``transient``
    """
    if isinstance(exc, (openai.AuthenticationError, openai.PermissionDeniedError)):
        return ProviderErrorReason.AUTH
    code = getattr(exc, "code", None)
    if isinstance(exc, openai.RateLimitError):
        if code in _QUOTA_CODES:
            return ProviderErrorReason.QUOTA
        return ProviderErrorReason.RATE_LIMIT
    if isinstance(exc, openai.APIStatusError):
        if exc.status_code == 402 or code in _QUOTA_CODES:
            return ProviderErrorReason.QUOTA
        if exc.status_code in (401, 403):
            return ProviderErrorReason.AUTH
        if exc.status_code == 429:
            return ProviderErrorReason.RATE_LIMIT
    return ProviderErrorReason.TRANSIENT
