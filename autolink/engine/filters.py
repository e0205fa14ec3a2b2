"""Guardrails deciding which documents take part in linking."""

from __future__ import annotations

from .config import EngineConfig
from .text import word_count
from .types import Document


def allow_candidate(source: Document, target: Document, config: EngineConfig) -> bool:
    """Return True when the target may receive a link from the source."""

    if target.identifier == source.identifier:
        return False
    if not target.is_published:
        return False
    if target.doc_type not in config.post_types:
        return False
    if target.identifier in config.exclude_posts:
        return False

    # Chronology guardrail: only applies when both sides carry a date.
    if source.published_at and target.published_at:
        if target.published_at > source.published_at and not config.get("link_to_newer_posts", True):
            return False
        if target.published_at < source.published_at and not config.get("link_to_older_posts", True):
            return False
    return True


def skip_reason(document: Document, config: EngineConfig) -> str | None:
    """Return why the document should not be rewritten, or None to proceed."""

    if not config.enabled:
        return "disabled"
    if document.doc_type not in config.post_types:
        return "type_excluded"
    if document.identifier in config.exclude_posts:
        return "excluded"
    if word_count(document.body) < config.min_post_length:
        return "too_short"
    return None
