"""
Unit Tests for Cosine Similarity

Tests for term-frequency cosine scoring between question texts.
"""

import pytest

from examace.analysis.similarity import cosine_similarity, token_counts


PAIRS = [
    ("What is TCP?", "Define TCP"),
    ("Explain the OSI reference model", "Describe the TCP/IP model"),
    ("Explain paging with an example", "Compare paging and segmentation"),
    ("Define deadlock", "Explain the structure of a B-tree"),
    ("", "Explain paging"),
]


class TestCosineSimilarity:
    """Tests for cosine_similarity()."""

    @pytest.mark.parametrize("a,b", PAIRS)
    def test_similarity_when_arguments_swapped_then_symmetric(self, a, b):
        """sim(a, b) == sim(b, a)."""
        assert cosine_similarity(a, b) == cosine_similarity(b, a)

    @pytest.mark.parametrize("a,b", PAIRS)
    def test_similarity_when_any_pair_then_bounded(self, a, b):
        """Scores stay within [0, 1]."""
        score = cosine_similarity(a, b)
        assert 0.0 <= score <= 1.0

    @pytest.mark.parametrize("text", [
        "Explain the OSI reference model",
        "Explain paging paging paging with an example",
        "Describe the ACID properties",
    ])
    def test_similarity_when_same_text_then_exactly_one(self, text):
        """sim(a, a) == 1.0 for text with tokens."""
        assert cosine_similarity(text, text) == 1.0

    def test_similarity_when_only_stopwords_differ_then_one(self):
        """Stopwords and numbering do not affect the score."""
        assert cosine_similarity("1. What is TCP?", "Define TCP") == 1.0

    def test_similarity_when_disjoint_vocabulary_then_zero(self):
        assert cosine_similarity("Define deadlock", "Explain the structure of a B-tree") == 0.0

    def test_similarity_when_empty_side_then_zero(self):
        """No tokens on either side gives 0.0."""
        assert cosine_similarity("", "Explain paging") == 0.0
        assert cosine_similarity("What is the", "What is the") == 0.0

    def test_similarity_when_partial_overlap_then_between(self):
        """One shared token of two on each side scores 0.5."""
        score = cosine_similarity("paging memory", "paging kernel")
        assert score == pytest.approx(0.5)


class TestTokenCounts:
    """Tests for token_counts()."""

    def test_token_counts_when_repeated_tokens_then_counted(self):
        counts = token_counts("stack stack heap")
        assert counts["stack"] == 2
        assert counts["heap"] == 1
