"""Database models for the autolink app.

The app stores documents (posts, pages, ...) together with the taxonomy
terms attached to them. The linking engine only reads these rows, except
for writing back a rewritten body once links have been inserted.
"""

from __future__ import annotations

from django.db import models

from .engine.types import PUBLISHED


class Term(models.Model):
    """A taxonomy term: either a category or a tag."""

    CATEGORY = 'category'
    TAG = 'tag'
    KIND_CHOICES = [(CATEGORY, 'Category'), (TAG, 'Tag')]

    name = models.CharField(max_length=200)
    slug = models.SlugField(max_length=200)
    kind = models.CharField(max_length=20, choices=KIND_CHOICES, db_index=True)

    class Meta:
        unique_together = ('kind', 'slug')

    def __str__(self) -> str:  # pragma: no cover - convenience display
        return f"{self.kind}:{self.slug}"


class Document(models.Model):
    """A document whose body may receive automatic internal links."""

    DRAFT = 'draft'
    STATUS_CHOICES = [(DRAFT, 'Draft'), (PUBLISHED, 'Published')]

    title = models.CharField(max_length=300)
    body = models.TextField(blank=True)
    doc_type = models.CharField(max_length=50, default='post', db_index=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=DRAFT, db_index=True)
    url = models.URLField(max_length=500)
    published_at = models.DateTimeField(null=True, blank=True)
    categories = models.ManyToManyField(
        Term,
        blank=True,
        related_name='category_documents',
        limit_choices_to={'kind': Term.CATEGORY},
    )
    tags = models.ManyToManyField(
        Term,
        blank=True,
        related_name='tag_documents',
        limit_choices_to={'kind': Term.TAG},
    )
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-published_at', 'pk']

    def __str__(self) -> str:  # pragma: no cover - convenience display
        return self.title
