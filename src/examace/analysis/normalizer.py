"""
Module: analysis.normalizer

Purpose:
    Text normalization and tokenization for question matching. Two
    questions that differ only in numbering, punctuation, case or
    inflection normalize to comparable forms.

Key Functions:
    - normalize_text(): Canonical lowercase text without enumeration
    - clean_text(): Replace non-alphanumerics with spaces
    - tokenize(): Stemmed content tokens with stopwords removed

Key Constants:
    - STOPWORDS: Academic stopwords ignored during matching
    - TECHNICAL_TERMS: Acronyms that are never stemmed

Dependencies:
    - nltk: Porter stemmer

Used By:
    - examace.analysis.similarity: Token multisets for cosine scoring
    - examace.analysis.concepts: Normalized text for the concept cache
    - examace.extractor.classification: Keyword overlap
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import List

from nltk.stem.porter import PorterStemmer


__all__ = [
    "STOPWORDS",
    "TECHNICAL_TERMS",
    "normalize_text",
    "clean_text",
    "tokenize",
    "stem",
]


STOPWORDS = frozenset({
    "a", "an", "the", "is", "are", "was", "were", "of", "in", "on", "at",
    "to", "for", "with", "by", "explain", "define", "describe", "what",
    "write", "short", "note", "discuss", "state", "list", "mention",
    "illustrate", "expression", "derive", "about", "briefly",
})

TECHNICAL_TERMS = frozenset({
    "tcp", "udp", "sql", "acid", "osi", "cpu", "alu", "dma", "iot",
    "api", "url", "http", "html", "css", "bfs", "dfs", "fifo", "lifo",
})

_LEADING_ENUM_RE = re.compile(r"^[\d\w]+[.)]\s*")
_LEADING_SUB_ENUM_RE = re.compile(r"^[\d\w]+\s+[\d\w]+[.)]\s*")
_NON_ALNUM_SPACE_RE = re.compile(r"[^a-z0-9\s]")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")
_WHITESPACE_RE = re.compile(r"\s+")
_TOKEN_RE = re.compile(r"[a-z0-9]+")

_STEMMER = PorterStemmer()


def normalize_text(text: str) -> str:
    """
    Normalize question text for matching.

    Lowercases, strips one leading "5." / "a)" marker and then one
    "1 a)" style marker, drops punctuation and collapses whitespace.
    Idempotent.

    Example:
        >>> normalize_text("1. What is TCP?")
        'what is tcp'
    """
    if not text:
        return ""
    lowered = text.lower()
    lowered = _LEADING_ENUM_RE.sub("", lowered, count=1)
    lowered = _LEADING_SUB_ENUM_RE.sub("", lowered, count=1)
    lowered = _NON_ALNUM_SPACE_RE.sub("", lowered)
    return _WHITESPACE_RE.sub(" ", lowered).strip()


def clean_text(text: str) -> str:
    """Lowercase and replace runs of non-alphanumerics with one space."""
    if not text:
        return ""
    return _NON_ALNUM_RE.sub(" ", text.lower()).strip()


@lru_cache(maxsize=8192)
def stem(token: str) -> str:
    """Porter-stem a lowercase token, leaving protected acronyms untouched."""
    if token in TECHNICAL_TERMS:
        return token
    return _STEMMER.stem(token)


def tokenize(text: str) -> List[str]:
    """
    Split text into stemmed content tokens.

    Tokens of length <= 2 and STOPWORDS are dropped before stemming.
    Order and duplicates are preserved so callers can count frequencies.

    Example:
        >>> tokenize("Explain the working of TCP protocols")
        ['work', 'tcp', 'protocol']
    """
    if not text:
        return []
    return [
        stem(token)
        for token in _TOKEN_RE.findall(clean_text(text))
        if len(token) > 2 and token not in STOPWORDS
    ]
