from django.apps import AppConfig
from django.db.models.signals import m2m_changed, post_delete, post_save


class AutolinkConfig(AppConfig):
    """Configuration for the autolink Django app."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'autolink'

    def ready(self) -> None:
        from . import signals
        from .models import Document

        post_save.connect(signals.document_saved, sender=Document, dispatch_uid='autolink.document_saved')
        post_delete.connect(signals.document_deleted, sender=Document, dispatch_uid='autolink.document_deleted')
        for through in (Document.categories.through, Document.tags.through):
            m2m_changed.connect(
                signals.document_terms_changed,
                sender=through,
                dispatch_uid=f'autolink.terms_changed.{through.__name__}',
            )
