"""Django cache adapter for the engine's relevance cache.

Django's cache API has no prefix eviction. Every namespace (the part of a
key before the first ``:``) therefore carries a generation number that is
appended to each stored key. Evicting a namespace bumps its generation with
the cache's own atomic ``incr``; entries written under older generations
are never read again and expire through their timeout.
"""

from __future__ import annotations

import random
from typing import Any

from django.core.cache import caches

DEFAULT_GENERATION_PREFIX = 'autolink:generation:'


def _fresh_generation() -> int:
    # Random rather than 1 so a generation lost to culling never revives old entries.
    return random.getrandbits(48)


class DjangoCacheBackend:
    """Cache backend for the engine on top of a configured Django cache."""

    def __init__(self, cache_alias: str = 'default', *, generation_prefix: str = DEFAULT_GENERATION_PREFIX) -> None:
        self.cache = caches[cache_alias]
        self.generation_prefix = generation_prefix

    def get(self, key: str) -> Any:
        return self.cache.get(self._versioned(key))

    def set(self, key: str, value: Any, timeout: int) -> None:
        self.cache.set(self._versioned(key), value, timeout=timeout)

    def delete(self, key: str) -> None:
        self.cache.delete(self._versioned(key))

    def delete_prefix(self, prefix: str) -> None:
        """Evict every key under ``prefix``, which must be a namespace such as ``relevant:``."""

        namespace, separator, rest = prefix.partition(':')
        if not namespace or not separator or rest:
            raise ValueError(f'Only whole namespaces such as "relevant:" can be evicted, got {prefix!r}')
        generation_key = self._generation_key(namespace)
        try:
            self.cache.incr(generation_key)
        except ValueError:
            # Nothing stored under this namespace's current generation yet.
            if not self.cache.add(generation_key, _fresh_generation(), timeout=None):
                self.cache.incr(generation_key)

    def _generation_key(self, namespace: str) -> str:
        return f'{self.generation_prefix}{namespace}'

    def _generation(self, namespace: str) -> int:
        return int(self.cache.get_or_set(self._generation_key(namespace), _fresh_generation, timeout=None))

    def _versioned(self, key: str) -> str:
        namespace = key.partition(':')[0]
        return f'{key}:v{self._generation(namespace)}'
