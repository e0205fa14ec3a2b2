"""Pairwise relevance scoring between documents."""

from __future__ import annotations

from typing import Dict, Tuple

from .config import EngineConfig
from .phrases import extract_phrases
from .types import Document, PhraseSet


def phrase_overlap(source_phrases: PhraseSet, target_phrases: PhraseSet) -> int:
    """Sum ``min(source_weight, target_weight) * len(phrase)`` over shared phrases."""

    total = 0
    for phrase, weight in source_phrases.items():
        other = target_phrases.get(phrase)
        if other is None:
            continue
        total += min(weight, other) * len(phrase)
    return total


def taxonomy_boost(source: Document, target: Document, config: EngineConfig) -> int:
    """Return the category and tag boosts for the pair."""

    boost = 0
    if config.get("same_category_boost", True):
        boost += int(config.get("category_boost", 50)) * len(source.categories & target.categories)
    if config.get("same_tag_boost", True):
        boost += int(config.get("tag_boost", 30)) * len(source.tags & target.tags)
    return boost


def matching_phrases(source_phrases: PhraseSet, target_phrases: PhraseSet) -> Dict[str, int]:
    """Return shared source phrases ranked as anchor-text candidates.

    The ranking uses the *source* weight times the phrase length, which is
    not the ``min`` of both weights used by :func:`phrase_overlap`. The two
    orders differ on purpose and must stay separate.
    """

    shared = [(phrase, weight) for phrase, weight in source_phrases.items() if phrase in target_phrases]
    shared.sort(key=lambda item: item[1] * len(item[0]), reverse=True)
    return dict(shared)


def score(
    source: Document,
    target: Document,
    source_phrases: PhraseSet,
    config: EngineConfig,
    target_phrases: PhraseSet | None = None,
) -> Tuple[int, Dict[str, int]]:
    """Return ``(score, matching_phrases)`` for a (source, target) pairing."""

    if target_phrases is None:
        target_phrases = extract_phrases(target.body, target.title, config)

    total = phrase_overlap(source_phrases, target_phrases)
    total += taxonomy_boost(source, target, config)
    return total, matching_phrases(source_phrases, target_phrases)
