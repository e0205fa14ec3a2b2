"""Typed data structures used by the autolink engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, FrozenSet, List, Optional, Union

DocumentId = Union[int, str]

# Phrase -> weight, ordered by descending weight. Consumers never mutate it.
PhraseSet = Dict[str, int]

PUBLISHED = "publish"


@dataclass(frozen=True)
class Document:
    """Read-only view of a document as handed over by the document store."""

    identifier: DocumentId
    title: str
    body: str
    url: str
    doc_type: str = "post"
    status: str = PUBLISHED
    categories: FrozenSet[DocumentId] = frozenset()
    tags: FrozenSet[DocumentId] = frozenset()
    published_at: Optional[datetime] = None

    @property
    def is_published(self) -> bool:
        return self.status == PUBLISHED


@dataclass(frozen=True)
class ScoredCandidate:
    """Target document scored against a source document."""

    target_id: DocumentId
    url: str
    title: str
    score: int
    matching_phrases: Dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class LinkInsertion:
    """Details about a link that was inserted into a body."""

    phrase: str
    anchor_text: str
    target_id: DocumentId
    url: str
    context: str | None = None


@dataclass(frozen=True)
class InjectionResult:
    """Rewritten body plus the links that were added to it."""

    body: str
    insertions: List[LinkInsertion] = field(default_factory=list)
    skipped: bool = False

    @property
    def links_added(self) -> int:
        return len(self.insertions)

    @property
    def changed(self) -> bool:
        return bool(self.insertions)


def identifier_sort_key(identifier: DocumentId) -> tuple:
    """Order integer identifiers numerically and everything else as text."""

    if isinstance(identifier, int) and not isinstance(identifier, bool):
        return (0, identifier, "")
    return (1, 0, str(identifier))
