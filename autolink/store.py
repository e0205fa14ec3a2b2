"""Document store backed by the Django ORM."""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from django.utils import timezone

from .engine.types import PUBLISHED, Document, DocumentId
from .models import Document as DocumentModel


def to_engine_document(instance: DocumentModel) -> Document:
    """Convert a model instance into the engine's read-only document."""

    return Document(
        identifier=instance.pk,
        title=instance.title,
        body=instance.body,
        url=instance.url,
        doc_type=instance.doc_type,
        status=instance.status,
        categories=frozenset(term.pk for term in instance.categories.all()),
        tags=frozenset(term.pk for term in instance.tags.all()),
        published_at=instance.published_at,
    )


class DjangoDocumentStore:
    """Implements the engine's document store contract over ``Document`` rows."""

    def get_by_id(self, identifier: DocumentId) -> Optional[Document]:
        try:
            instance = DocumentModel.objects.prefetch_related('categories', 'tags').get(pk=identifier)
        except (DocumentModel.DoesNotExist, ValueError):
            return None
        return to_engine_document(instance)

    def query_published(self, types: Sequence[str], excluded_ids: Iterable[DocumentId]) -> List[Document]:
        queryset = (
            DocumentModel.objects.filter(status=PUBLISHED, doc_type__in=list(types))
            .exclude(pk__in=list(excluded_ids))
            .prefetch_related('categories', 'tags')
            .order_by('-published_at', 'pk')
        )
        return [to_engine_document(instance) for instance in queryset]

    def update_body(self, identifier: DocumentId, body: str) -> None:
        # A queryset update skips post_save: anchor text keeps the visible
        # text unchanged, so cached relevance stays valid.
        DocumentModel.objects.filter(pk=identifier).update(body=body, updated_at=timezone.now())
