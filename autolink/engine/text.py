"""Shared text utilities for the autolink engine."""

from __future__ import annotations

import html
import re
from typing import List

from bs4 import BeautifulSoup  # type: ignore

_TOKEN_RE = re.compile(r"\b[\w-]+\b")
_SENTENCE_RE = re.compile(r"[.!?]+")
# Opening, closing and self-closing shortcode tags: [gallery ids="1"], [/caption], [embed /]
SHORTCODE_RE = re.compile(r"\[/?[A-Za-z][\w-]*(?:\s[^\[\]]*)?/?\]")
_WHITESPACE_RE = re.compile(r"\s+")


def strip_markup(text: str) -> str:
    """Return the visible text of ``text`` with tags and shortcodes removed."""

    if not text:
        return ""
    if "<" in text:
        try:
            soup = BeautifulSoup(text, 'lxml')
        except Exception:
            # Fallback to html.parser if lxml isn't installed
            soup = BeautifulSoup(text, 'html.parser')
        for element in soup(["script", "style"]):
            element.decompose()
        text = soup.get_text(" ")
    else:
        text = html.unescape(text)
    text = SHORTCODE_RE.sub(" ", text)
    return _WHITESPACE_RE.sub(" ", text).strip()


def _words(plain: str, case_sensitive: bool) -> List[str]:
    tokens = _TOKEN_RE.findall(plain)
    if case_sensitive:
        return tokens
    return [token.lower() for token in tokens]


def tokenize(text: str, case_sensitive: bool = False) -> List[str]:
    """Return normalized word tokens from raw (possibly marked-up) text."""

    return _words(strip_markup(text), case_sensitive)


def split_sentences(plain: str) -> List[str]:
    """Split already-stripped text into sentence-like segments."""

    return [segment for segment in _SENTENCE_RE.split(plain) if segment.strip()]


def sentence_tokens(text: str, case_sensitive: bool = False) -> List[List[str]]:
    """Return the tokens of every sentence segment in ``text``."""

    segments = []
    for sentence in split_sentences(strip_markup(text)):
        tokens = _words(sentence, case_sensitive)
        if tokens:
            segments.append(tokens)
    return segments


def word_count(text: str) -> int:
    """Number of word tokens in the visible text."""

    return len(tokenize(text))
