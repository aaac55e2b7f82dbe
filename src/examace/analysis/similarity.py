"""
Module: analysis.similarity

Purpose:
    Term-frequency cosine similarity between two question texts. No IDF
    and no smoothing: the score depends only on the two token multisets.

Key Functions:
    - cosine_similarity(): Score two texts in [0, 1]
    - token_counts(): Token multiset for a text

Dependencies:
    - numpy: Vector arithmetic
    - .normalizer.tokenize

Used By:
    - examace.analysis.concepts: Candidate scoring
    - examace.analysis.grouping: Pairwise grouping
"""

from __future__ import annotations

from collections import Counter

import numpy as np

from .normalizer import tokenize


def token_counts(text: str) -> Counter:
    """Return the stemmed token multiset of text."""
    return Counter(tokenize(text))


def _vectors(a: Counter, b: Counter) -> tuple[np.ndarray, np.ndarray]:
    vocab = sorted(set(a) | set(b))
    v1 = np.fromiter((a.get(t, 0) for t in vocab), dtype=np.float64, count=len(vocab))
    v2 = np.fromiter((b.get(t, 0) for t in vocab), dtype=np.float64, count=len(vocab))
    return v1, v2


def cosine_similarity(text_a: str, text_b: str) -> float:
    """
    Cosine similarity of the term-frequency vectors of two texts.

    Returns:
        Score in [0, 1]. 0.0 when either side has no tokens; exactly 1.0
        when both token multisets are identical.

    Example:
        >>> cosine_similarity("What is TCP?", "Define TCP")
        1.0
    """
    counts_a = token_counts(text_a)
    counts_b = token_counts(text_b)
    if not counts_a or not counts_b:
        return 0.0
    if counts_a == counts_b:
        return 1.0

    v1, v2 = _vectors(counts_a, counts_b)
    denom = float(np.linalg.norm(v1) * np.linalg.norm(v2))
    if denom == 0.0:
        return 0.0
    score = float(np.dot(v1, v2)) / denom
    return min(1.0, max(0.0, score))
