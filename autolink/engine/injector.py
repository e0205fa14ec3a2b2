"""Content-safe link injection.

The body is parsed with BeautifulSoup and phrases are matched only inside
text nodes, so a match can never touch an attribute, cross a tag boundary
or land inside an element listed in ``skip_tags``. Anchors are always
skipped, including the ones inserted earlier in the same pass, and so are
shortcode tags sitting inside text.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import Iterable, List, Sequence, Tuple

from bs4 import BeautifulSoup, NavigableString, Tag  # type: ignore
from bs4.element import PreformattedString  # type: ignore

from .text import SHORTCODE_RE
from .types import InjectionResult, LinkInsertion, ScoredCandidate

logger = logging.getLogger(__name__)

# Attribute carried by every link this engine writes.
ANCHOR_MARKER = "data-autolink"

DEFAULT_SKIP_TAGS: Tuple[str, ...] = ("a", "script", "style", "code", "pre", "textarea")

# Never hold linkable prose, whatever skip_tags says.
ALWAYS_SKIPPED = frozenset({"a", "script", "style"})

# Word boundary template used when compiling matchers for phrases
WORD_BOUNDARY = r"(?<![\w-]){term}(?![\w-])"


class MarkupIntegrityError(RuntimeError):
    """Raised when a rewritten body no longer matches the text it came from."""


def _parse(body: str) -> BeautifulSoup:
    # html.parser keeps fragments as they are; lxml would wrap them in <html><body>.
    return BeautifulSoup(body, "html.parser")


def _marked_anchors(soup: BeautifulSoup) -> List[Tag]:
    return soup.find_all("a", attrs={ANCHOR_MARKER: True})


def has_marker(body: str) -> bool:
    """Return True when ``body`` already holds a link written by this engine."""

    if not body or ANCHOR_MARKER not in body:
        return False
    return bool(_marked_anchors(_parse(body)))


def _new_anchor(soup: BeautifulSoup, url: str, title: str, text: str, anchor_class: str) -> Tag:
    anchor = soup.new_tag(
        "a",
        attrs={"href": url, "title": title, "class": anchor_class, ANCHOR_MARKER: "1"},
    )
    anchor.string = text
    return anchor


def build_anchor(url: str, title: str, text: str, anchor_class: str = "auto-interlink") -> Tag:
    """Return a detached anchor element wrapping ``text``."""

    return _new_anchor(_parse(""), url, title, text, anchor_class)


@lru_cache(maxsize=1024)
def _phrase_pattern(phrase: str, case_sensitive: bool) -> re.Pattern[str]:
    term = r"\s+".join(re.escape(word) for word in phrase.split())
    flags = 0 if case_sensitive else re.IGNORECASE
    return re.compile(WORD_BOUNDARY.format(term=term), flags)


def anchor_phrases(matching: dict, anchor_words: Tuple[int, int]) -> List[str]:
    """Eligible anchor phrases, longest first, then in scorer order."""

    low, high = anchor_words
    eligible = [phrase for phrase in matching if low <= len(phrase.split()) <= high]
    eligible.sort(key=lambda phrase: len(phrase.split()), reverse=True)
    return eligible


def _should_skip(node: NavigableString, skipped: frozenset) -> bool:
    """Return True if any ancestor of ``node`` is one of the ``skipped`` tags."""

    parent = node.parent
    while parent is not None and getattr(parent, "name", None):
        if parent.name.lower() in skipped:
            return True
        parent = parent.parent
    return False


def _first_match(pattern: re.Pattern[str], text: str) -> re.Match[str] | None:
    """First match in ``text`` that does not overlap a shortcode tag."""

    shortcodes = [match.span() for match in SHORTCODE_RE.finditer(text)]
    for match in pattern.finditer(text):
        if not any(start < match.end() and match.start() < end for start, end in shortcodes):
            return match
    return None


def _extract_context_snippet(text: str, match: re.Match[str], window: int = 45) -> str:
    """Return a trimmed snippet of ``text`` surrounding the match."""

    start = max(0, match.start() - window)
    end = min(len(text), match.end() + window)
    snippet = text[start:end].strip()
    return re.sub(r"\s+", " ", snippet)


def _link_first(
    soup: BeautifulSoup,
    pattern: re.Pattern[str],
    candidate: ScoredCandidate,
    anchor_class: str,
    skipped: frozenset,
) -> Tuple[str, str] | None:
    """Link the first linkable match in document order; return (anchor text, context)."""

    for node in soup.find_all(string=True):
        # Comments, CDATA, doctypes and processing instructions are not prose.
        if isinstance(node, PreformattedString) or _should_skip(node, skipped):
            continue
        original = str(node)
        match = _first_match(pattern, original)
        if match is None:
            continue

        after = original[match.end():]
        if after:
            node.insert_after(after)
        node.insert_after(_new_anchor(soup, candidate.url, candidate.title, match.group(0), anchor_class))
        before = original[:match.start()]
        if before:
            node.replace_with(before)
        else:
            node.extract()
        return match.group(0), _extract_context_snippet(original, match)
    return None


def verify_rewrite(expected_text: str, rewritten: str, links: int) -> None:
    """Check that ``rewritten`` keeps the visible text and holds ``links`` marked anchors."""

    check = _parse(rewritten)
    if check.get_text() != expected_text:
        raise MarkupIntegrityError("rewritten body changed the visible text")
    found = len(_marked_anchors(check))
    if found != links:
        raise MarkupIntegrityError(f"expected {links} marked link(s), found {found}")


def inject(
    body: str,
    candidates: Iterable[ScoredCandidate],
    budget: int,
    case_sensitive: bool = False,
    *,
    anchor_words: Tuple[int, int] = (1, 3),
    skip_tags: Sequence[str] = DEFAULT_SKIP_TAGS,
    anchor_class: str = "auto-interlink",
) -> InjectionResult:
    """Insert at most ``budget`` links into ``body`` for the ranked candidates.

    Candidates are visited in the given order and each one receives at most
    one link, anchored on the first of its phrases found in linkable text.
    A body that already carries engine links is returned untouched with
    ``skipped`` set, so reprocessing never stacks links. When no link is
    placed the original body is returned as given.
    """

    if not body:
        return InjectionResult(body=body)

    soup = _parse(body)
    if _marked_anchors(soup):
        return InjectionResult(body=body, skipped=True)
    if budget <= 0:
        return InjectionResult(body=body)

    expected_text = soup.get_text()
    skipped = ALWAYS_SKIPPED | {tag.lower() for tag in skip_tags}
    inserted: List[LinkInsertion] = []

    for candidate in candidates:
        if len(inserted) >= budget:
            break
        for phrase in anchor_phrases(candidate.matching_phrases, anchor_words):
            found = _link_first(soup, _phrase_pattern(phrase, case_sensitive), candidate, anchor_class, skipped)
            if found is None:
                continue
            anchor_text, context = found
            inserted.append(
                LinkInsertion(
                    phrase=phrase,
                    anchor_text=anchor_text,
                    target_id=candidate.target_id,
                    url=candidate.url,
                    context=context or None,
                )
            )
            break

    if not inserted:
        return InjectionResult(body=body)

    rewritten = str(soup)
    try:
        verify_rewrite(expected_text, rewritten, len(inserted))
    except MarkupIntegrityError:
        logger.warning("Discarding %d link(s): rewritten body failed integrity check", len(inserted), exc_info=True)
        return InjectionResult(body=body)
    return InjectionResult(body=rewritten, insertions=inserted)
