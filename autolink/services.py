"""Service functions for linking stored documents to each other.

These functions glue the framework-free engine to the Django side: they
build an engine over the ORM store and the configured cache, decide
whether a document should be rewritten at all, and persist a rewritten
body only when links were actually added. Deciding *when* to call them
(on save, on a schedule, in bulk) is left to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List

from .cache import DjangoCacheBackend
from .conf import get_engine_config
from .engine.config import EngineConfig
from .engine.filters import skip_reason
from .engine.injector import inject
from .engine.relevance import RelevanceEngine
from .engine.types import DocumentId
from .store import DjangoDocumentStore

logger = logging.getLogger(__name__)

MISSING = 'missing'
SKIPPED = 'skipped'
UNCHANGED = 'unchanged'
LINKED = 'linked'


@dataclass(frozen=True)
class ProcessResult:
    """Outcome of processing a single document."""

    document_id: DocumentId
    status: str
    links_added: int = 0
    reason: str | None = None
    body: str | None = None


def build_engine(config: EngineConfig | None = None, cache_alias: str = 'default') -> RelevanceEngine:
    """Return a relevance engine over the ORM store and a Django cache."""

    return RelevanceEngine(
        DjangoDocumentStore(),
        cache=DjangoCacheBackend(cache_alias),
        config=config or get_engine_config(),
    )


def process_document(
    document_id: DocumentId,
    *,
    engine: RelevanceEngine | None = None,
    dry_run: bool = False,
) -> ProcessResult:
    """Insert links into one document and persist the new body.

    Parameters
    ----------
    document_id:
        Primary key of the document to rewrite.
    engine:
        Engine to use; a default one is built from settings when omitted.
    dry_run:
        When ``True`` the rewritten body is returned but not saved.

    Returns
    -------
    ProcessResult
        ``missing`` and ``skipped`` mean nothing was attempted, ``unchanged``
        means no link could be placed, ``linked`` means links were added.
    """

    engine = engine or build_engine()
    config = engine.config
    store = engine.store

    document = store.get_by_id(document_id)
    if document is None:
        logger.info('Document %s does not exist; nothing to link', document_id)
        return ProcessResult(document_id=document_id, status=MISSING)

    reason = skip_reason(document, config)
    if reason:
        logger.debug('Skipping document %s: %s', document_id, reason)
        return ProcessResult(document_id=document_id, status=SKIPPED, reason=reason)

    candidates = engine.get_relevant_documents(document.identifier, config.max_links_per_post)
    if not candidates:
        return ProcessResult(document_id=document_id, status=UNCHANGED, reason='no_candidates')

    result = inject(
        document.body,
        candidates,
        config.max_links_per_post,
        config.case_sensitive,
        anchor_words=config.anchor_phrase_words,
        skip_tags=config.skip_tags,
        anchor_class=str(config.get('anchor_class', 'auto-interlink')),
    )
    if result.skipped:
        return ProcessResult(document_id=document_id, status=UNCHANGED, reason='already_linked')
    if not result.links_added:
        return ProcessResult(document_id=document_id, status=UNCHANGED, reason='no_matches')

    if not dry_run:
        store.update_body(document.identifier, result.body)
    logger.info(
        'Inserted %d link(s) into document %s%s',
        result.links_added,
        document_id,
        ' (dry run)' if dry_run else '',
    )
    return ProcessResult(
        document_id=document_id,
        status=LINKED,
        links_added=result.links_added,
        body=result.body,
    )


def process_documents(
    document_ids: Iterable[DocumentId],
    *,
    engine: RelevanceEngine | None = None,
    dry_run: bool = False,
) -> List[ProcessResult]:
    """Process several documents one after another with a shared engine."""

    engine = engine or build_engine()
    return [process_document(document_id, engine=engine, dry_run=dry_run) for document_id in document_ids]
