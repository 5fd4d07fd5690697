"""
Text Tokenizer and Frequency Ranker for free-text answers.

tokenize() normalizes one answer into a filtered token stream;
word_frequencies() ranks terms across many answers for a word cloud.
Weights are raw occurrence counts: font sizing belongs to the renderer.
"""

from __future__ import annotations

import re
from collections import Counter
from typing import AbstractSet, Iterable, Iterator, List, Optional

from livepoll.config import DEFAULT_TOP_N, MIN_TOKEN_LENGTH, STOP_WORDS
from livepoll.model import TermWeight

_URL_RE = re.compile(r"[a-z][a-z0-9+.\-]*://\S+")
_DISALLOWED_RE = re.compile(r"[^a-z0-9 ']")
_WHITESPACE_RE = re.compile(r"\s+")


def normalize(text: Optional[str]) -> str:
    """Lowercase, drop URLs and punctuation, collapse whitespace."""
    if not text:
        return ""
    cleaned = text.lower()
    cleaned = _URL_RE.sub(" ", cleaned)
    # whitespace first so tabs and newlines survive as separators
    cleaned = _WHITESPACE_RE.sub(" ", cleaned)
    cleaned = _DISALLOWED_RE.sub(" ", cleaned)
    return _WHITESPACE_RE.sub(" ", cleaned).strip()


class TokenStream:
    """
    Lazy, restartable sequence of tokens for one piece of text.

    Each iteration re-reads the normalized text from the start.
    """

    def __init__(self, text: Optional[str], stop_words: AbstractSet[str] = STOP_WORDS):
        self._cleaned = normalize(text)
        self._stop_words = stop_words

    def __iter__(self) -> Iterator[str]:
        if not self._cleaned:
            return
        for raw in self._cleaned.split(" "):
            token = raw.strip("'")
            if len(token) < MIN_TOKEN_LENGTH or token in self._stop_words:
                continue
            yield token

    def __repr__(self) -> str:
        return f"TokenStream({self._cleaned!r})"


def tokenize(text: Optional[str], stop_words: AbstractSet[str] = STOP_WORDS) -> TokenStream:
    return TokenStream(text, stop_words)


def word_frequencies(
    texts: Iterable[Optional[str]],
    top_n: int = DEFAULT_TOP_N,
    stop_words: AbstractSet[str] = STOP_WORDS,
) -> List[TermWeight]:
    """
    Count terms across texts and return the top_n by descending count.

    Ties are broken alphabetically so the output is deterministic.
    """
    if top_n <= 0:
        return []
    counts: Counter = Counter()
    for text in texts:
        counts.update(tokenize(text, stop_words))
    ranked = sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))
    return [TermWeight(term=term, weight=count) for term, count in ranked[:top_n]]
