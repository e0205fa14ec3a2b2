"""Cache facade for relevance results.

The engine never depends on the cache for correctness: every backend error
is logged and treated as a miss, after which results are recomputed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Protocol

from .types import DocumentId, ScoredCandidate

logger = logging.getLogger(__name__)

RELEVANT_NAMESPACE = "relevant"


class CacheBackend(Protocol):
    """Key/value store with expiration and prefix eviction."""

    def get(self, key: str) -> Any: ...

    def set(self, key: str, value: Any, timeout: int) -> None: ...

    def delete(self, key: str) -> None: ...

    def delete_prefix(self, prefix: str) -> None: ...


@dataclass(frozen=True)
class CacheKey:
    """Namespaced cache key, rendered as ``namespace:identifier``."""

    namespace: str
    identifier: str

    @classmethod
    def relevant(cls, source_id: DocumentId) -> "CacheKey":
        return cls(RELEVANT_NAMESPACE, str(source_id))

    def __str__(self) -> str:
        return f"{self.namespace}:{self.identifier}"


class RelevanceCache:
    """Stores ranked results per source document."""

    def __init__(self, backend: CacheBackend | None, timeout: int = 3600) -> None:
        self.backend = backend
        self.timeout = timeout

    def get(self, source_id: DocumentId) -> Optional[List[ScoredCandidate]]:
        if self.backend is None:
            return None
        key = CacheKey.relevant(source_id)
        try:
            value = self.backend.get(str(key))
        except Exception:
            logger.warning("Cache read failed for %s; recomputing", key, exc_info=True)
            return None
        if value is None:
            return None
        return list(value)

    def set(self, source_id: DocumentId, result: List[ScoredCandidate]) -> None:
        if self.backend is None:
            return
        key = CacheKey.relevant(source_id)
        try:
            self.backend.set(str(key), list(result), self.timeout)
        except Exception:
            logger.warning("Cache write failed for %s", key, exc_info=True)

    def invalidate(self, source_id: DocumentId) -> None:
        if self.backend is None:
            return
        key = CacheKey.relevant(source_id)
        try:
            self.backend.delete(str(key))
        except Exception:
            logger.warning("Cache delete failed for %s", key, exc_info=True)

    def invalidate_all(self) -> None:
        if self.backend is None:
            return
        prefix = f"{RELEVANT_NAMESPACE}:"
        try:
            self.backend.delete_prefix(prefix)
        except Exception:
            logger.warning("Cache eviction failed for prefix %s", prefix, exc_info=True)
