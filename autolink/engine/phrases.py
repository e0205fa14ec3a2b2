"""Weighted n-gram phrase extraction."""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Sequence

from .config import EngineConfig
from .text import sentence_tokens, tokenize
from .types import PhraseSet

STOPWORDS = frozenset(
    """
    a about above after again against all almost also am an and any are as at
    be because been before being below between both but by
    can cannot could did do does doing down during
    each either else ever every few for from further
    get gets got had has have having he her here hers herself him himself his how however
    i if in into is it its itself just
    let many may me might more most much must my myself
    neither no nor not now of off often on once only or other our ours ourselves out over own
    per rather same she should since so some such
    than that the their theirs them themselves then there these they this those though through
    to too under until up upon us very via
    was we were what when where whether which while who whom whose why will with within without would
    yet you your yours yourself yourselves
    """.split()
)


def is_stopword(token: str) -> bool:
    return token.lower() in STOPWORDS


def remove_stopwords(tokens: Iterable[str]) -> List[str]:
    return [token for token in tokens if not is_stopword(token)]


def iter_windows(tokens: Sequence[str], min_words: int, max_words: int) -> Iterator[str]:
    """Yield every contiguous window of ``min_words``..``max_words`` tokens."""

    for size in range(min_words, max_words + 1):
        for start in range(0, len(tokens) - size + 1):
            yield " ".join(tokens[start:start + size])


def extract_phrases(body: str, title: str, config: EngineConfig) -> PhraseSet:
    """Return the weighted phrase set for a document.

    Body phrases score one point per occurrence. Title phrases add
    ``title_phrase_boost`` per occurrence and a title that collapses to a
    single phrase-sized window adds ``whole_title_boost`` on top. Phrases
    never span a sentence boundary of the body.
    """

    case_sensitive = config.case_sensitive
    min_words, max_words = config.scoring_phrase_words
    min_chars = config.min_keyword_length
    max_chars = config.max_keyword_length

    def accept(phrase: str) -> bool:
        return min_chars <= len(phrase) <= max_chars

    weights: Dict[str, int] = {}

    def add(phrase: str, amount: int) -> None:
        if accept(phrase):
            weights[phrase] = weights.get(phrase, 0) + amount

    for segment in sentence_tokens(body, case_sensitive):
        for phrase in iter_windows(remove_stopwords(segment), min_words, max_words):
            add(phrase, 1)

    if title and title.strip():
        # The title is one unit: it is never split at sentence punctuation.
        title_tokens = remove_stopwords(tokenize(title, case_sensitive))
        title_boost = int(config.get("title_phrase_boost", 5))
        for phrase in iter_windows(title_tokens, min_words, max_words):
            add(phrase, title_boost)
        if min_words <= len(title_tokens) <= max_words:
            add(" ".join(title_tokens), int(config.get("whole_title_boost", 10)))

    ordered = sorted(weights.items(), key=lambda item: item[1], reverse=True)
    return dict(ordered)
