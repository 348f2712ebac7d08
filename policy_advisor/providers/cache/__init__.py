"""Cache providers.

In-memory TTL-based cache used by the translation service so fixed system
messages are translated once per language.

MemoryCacheProvider is not shared across processes.  For multi-worker
deployments, swap in a Redis adapter implementing ICacheProvider.
"""

from policy_advisor.providers.cache.memory_cache import MemoryCacheProvider

__all__ = ["MemoryCacheProvider"]
