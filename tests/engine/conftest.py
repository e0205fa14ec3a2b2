"""Shared fixtures and in-memory collaborators for engine tests."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence

import pytest

from autolink.engine.config import load_config
from autolink.engine.types import PUBLISHED, Document, ScoredCandidate


@pytest.fixture()
def engine_config():
    """Provide a fresh default configuration; tests adjust options through ``raw``."""

    return load_config(None)


def make_document(
    identifier: Any,
    title: str,
    body: str,
    *,
    doc_type: str = "post",
    status: str = PUBLISHED,
    categories: Iterable[Any] = (),
    tags: Iterable[Any] = (),
    published_at: datetime | None = None,
) -> Document:
    return Document(
        identifier=identifier,
        title=title,
        body=body,
        url=f"https://example.com/{identifier}/",
        doc_type=doc_type,
        status=status,
        categories=frozenset(categories),
        tags=frozenset(tags),
        published_at=published_at,
    )


def make_candidate(target_id: Any, phrases: Dict[str, int], score: int = 100) -> ScoredCandidate:
    return ScoredCandidate(
        target_id=target_id,
        url=f"https://example.com/{target_id}/",
        title=f"Target {target_id}",
        score=score,
        matching_phrases=dict(phrases),
    )


class MemoryStore:
    """Dictionary-backed document store."""

    def __init__(self, documents: Iterable[Document]) -> None:
        self.documents = {document.identifier: document for document in documents}
        self.updates: Dict[Any, str] = {}
        self.queries = 0

    def get_by_id(self, identifier: Any) -> Optional[Document]:
        return self.documents.get(identifier)

    def query_published(self, types: Sequence[str], excluded_ids: Iterable[Any]) -> List[Document]:
        self.queries += 1
        excluded = set(excluded_ids)
        return [
            document
            for document in self.documents.values()
            if document.is_published and document.doc_type in types and document.identifier not in excluded
        ]

    def update_body(self, identifier: Any, body: str) -> None:
        self.updates[identifier] = body


class MemoryCache:
    """Cache backend keeping values and timeouts in dictionaries."""

    def __init__(self) -> None:
        self.data: Dict[str, Any] = {}
        self.timeouts: Dict[str, int] = {}

    def get(self, key: str) -> Any:
        return self.data.get(key)

    def set(self, key: str, value: Any, timeout: int) -> None:
        self.data[key] = value
        self.timeouts[key] = timeout

    def delete(self, key: str) -> None:
        self.data.pop(key, None)

    def delete_prefix(self, prefix: str) -> None:
        for key in [key for key in self.data if key.startswith(prefix)]:
            del self.data[key]


class BrokenCache:
    """Cache backend whose every operation fails."""

    def get(self, key: str) -> Any:
        raise ConnectionError("cache down")

    def set(self, key: str, value: Any, timeout: int) -> None:
        raise ConnectionError("cache down")

    def delete(self, key: str) -> None:
        raise ConnectionError("cache down")

    def delete_prefix(self, prefix: str) -> None:
        raise ConnectionError("cache down")
