"""Cache providers.

Process-wide cache of decoded posts per tag, used to skip the upstream round
trip when the same tag is requested again inside the TTL window.

MemoryPostCache is dict-based: fast but not shared across processes. For
multi-worker deployments, swap in another IPostCache adapter without
changing the aggregation service.
"""

from blogfeed.providers.cache.memory_cache import MemoryPostCache

__all__ = ["MemoryPostCache"]
