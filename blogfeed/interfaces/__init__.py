"""Public interface definitions for blogfeed's external collaborators.

Business logic talks to the cache and the upstream provider only through
these abstract base classes; concrete adapters are built in
``blogfeed/main.py`` and injected, so tests can swap in mocks.

    Interface        →  Concrete implementation
    ─────────────────────────────────────────────
    IPostCache       →  MemoryPostCache        (blogfeed/providers/cache/)
    IPostProvider    →  HatchwaysPostProvider  (blogfeed/providers/posts/)
"""

from blogfeed.interfaces.post_cache import IPostCache
from blogfeed.interfaces.post_provider import IPostProvider

__all__ = ["IPostCache", "IPostProvider"]
