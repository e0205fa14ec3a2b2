"""Signal receivers keeping cached relevance results fresh."""

from __future__ import annotations

from .cache import DjangoCacheBackend
from .engine.cache import RelevanceCache


def _relevance_cache() -> RelevanceCache:
    return RelevanceCache(DjangoCacheBackend())


def document_saved(sender, instance, **kwargs) -> None:
    _relevance_cache().invalidate(instance.pk)


def document_terms_changed(sender, instance, action, reverse=False, pk_set=None, **kwargs) -> None:
    if action not in ('post_add', 'post_remove', 'post_clear'):
        return
    cache = _relevance_cache()
    if not reverse:
        cache.invalidate(instance.pk)
    elif pk_set:
        # Changed from the term side: pk_set holds document keys.
        for pk in pk_set:
            cache.invalidate(pk)
    else:
        cache.invalidate_all()


def document_deleted(sender, instance, **kwargs) -> None:
    # Any cached result may reference the deleted document.
    _relevance_cache().invalidate_all()
