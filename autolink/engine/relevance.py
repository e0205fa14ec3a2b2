"""Coordinator for finding and ranking related documents."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional, Protocol, Sequence

from . import filters as filters_module
from . import scoring as scoring_module
from .cache import CacheBackend, RelevanceCache
from .config import EngineConfig, load_config
from .phrases import extract_phrases
from .types import Document, DocumentId, PhraseSet, ScoredCandidate, identifier_sort_key

logger = logging.getLogger(__name__)


class DocumentStore(Protocol):
    """Read/write access to documents, implemented by the host application."""

    def get_by_id(self, identifier: DocumentId) -> Optional[Document]: ...

    def query_published(self, types: Sequence[str], excluded_ids: Iterable[DocumentId]) -> List[Document]: ...

    def update_body(self, identifier: DocumentId, body: str) -> None: ...


def rank_candidates(candidates: Iterable[ScoredCandidate]) -> List[ScoredCandidate]:
    """Drop zero scores and order by score, then by target identifier."""

    kept = [candidate for candidate in candidates if candidate.score > 0]
    kept.sort(key=lambda item: (-item.score, identifier_sort_key(item.target_id)))
    return kept


class RelevanceEngine:
    """Scores a source document against the published corpus.

    Results are cached per source identifier. The cache is optional and any
    failure in it falls back to a full recomputation.
    """

    def __init__(
        self,
        store: DocumentStore,
        cache: CacheBackend | None = None,
        config: EngineConfig | None = None,
    ) -> None:
        self.store = store
        self.config = config or load_config(None)
        self.cache = RelevanceCache(cache, timeout=self.config.cache_expiration)

    def get_relevant_documents(self, source_id: DocumentId, limit: int | None = None) -> List[ScoredCandidate]:
        """Return the top ``limit`` related documents for ``source_id``."""

        if limit is None:
            limit = self.config.max_links_per_post

        cached = self.cache.get(source_id)
        if cached is not None:
            logger.debug("Relevance cache hit for %s", source_id)
            return cached[:limit]

        source = self.store.get_by_id(source_id)
        if source is None:
            logger.info("Document %s not found; no relevant documents", source_id)
            return []

        ranked = self.compute_relevant_documents(source)
        self.cache.set(source_id, ranked)
        return ranked[:limit]

    def compute_relevant_documents(self, source: Document) -> List[ScoredCandidate]:
        """Score every eligible target for ``source`` without touching the cache."""

        config = self.config
        source_phrases = extract_phrases(source.body, source.title, config)
        excluded = set(config.exclude_posts)
        excluded.add(source.identifier)
        targets = [
            target
            for target in self.store.query_published(config.post_types, excluded)
            if filters_module.allow_candidate(source, target, config)
        ]

        def evaluate(target: Document) -> ScoredCandidate:
            return self._score_target(source, target, source_phrases)

        workers = int(config.get("max_workers", 4))
        threshold = int(config.get("parallel_threshold", 50))
        if workers > 1 and len(targets) >= threshold:
            with ThreadPoolExecutor(max_workers=workers) as pool:
                scored = list(pool.map(evaluate, targets))
        else:
            scored = [evaluate(target) for target in targets]

        ranked = rank_candidates(scored)
        logger.info(
            "Scored %d candidates for document %s, %d relevant",
            len(targets),
            source.identifier,
            len(ranked),
        )
        return ranked

    def invalidate(self, source_id: DocumentId) -> None:
        self.cache.invalidate(source_id)

    def invalidate_all(self) -> None:
        self.cache.invalidate_all()

    def _score_target(self, source: Document, target: Document, source_phrases: PhraseSet) -> ScoredCandidate:
        value, matching = scoring_module.score(source, target, source_phrases, self.config)
        return ScoredCandidate(
            target_id=target.identifier,
            url=target.url,
            title=target.title,
            score=value,
            matching_phrases=matching,
        )
