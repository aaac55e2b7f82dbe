"""
Unit Tests for Text Normalization

Tests for normalize_text(), clean_text() and tokenize().
"""

import pytest

from examace.analysis.normalizer import (
    STOPWORDS,
    TECHNICAL_TERMS,
    clean_text,
    normalize_text,
    stem,
    tokenize,
)


class TestNormalizeText:
    """Tests for normalize_text()."""

    def test_normalize_when_numbered_question_then_strips_number_and_punctuation(self):
        """Leading enumeration, case and punctuation are removed."""
        assert normalize_text("1. What is TCP?") == "what is tcp"

    def test_normalize_when_letter_marker_then_strips_marker(self):
        """A leading "a)" marker is removed."""
        assert normalize_text("a) Define the OSI model") == "define the osi model"

    def test_normalize_when_sub_enumeration_then_strips_both_markers(self):
        """A "5 b)" style marker is removed."""
        assert normalize_text("5 b) Explain paging") == "explain paging"

    def test_normalize_when_extra_whitespace_then_collapses(self):
        """Runs of whitespace collapse to single spaces."""
        assert normalize_text("  Explain   the\tOSI   model  ") == "explain the osi model"

    def test_normalize_when_empty_then_returns_empty(self):
        assert normalize_text("") == ""

    @pytest.mark.parametrize("text", [
        "1. What is TCP? (10)",
        "5 a) Explain round-robin scheduling.",
        "Q3. Describe the ACID properties of transactions!",
        "  a)  b)  nested markers  ",
        "2023 question paper",
    ])
    def test_normalize_when_applied_twice_then_idempotent(self, text):
        """normalize(normalize(x)) == normalize(x)."""
        once = normalize_text(text)
        assert normalize_text(once) == once


class TestCleanText:
    """Tests for clean_text()."""

    def test_clean_when_punctuation_then_replaced_with_space(self):
        assert clean_text("Round-robin, FIFO & SJF") == "round robin fifo sjf"


class TestTokenize:
    """Tests for tokenize()."""

    def test_tokenize_when_sentence_then_drops_stopwords_and_stems(self):
        """Stopwords and short tokens are dropped, the rest stemmed."""
        assert tokenize("Explain the working of TCP protocols") == ["work", "tcp", "protocol"]

    def test_tokenize_when_acronym_then_not_stemmed(self):
        """Protected technical terms are kept verbatim."""
        for term in ("acid", "dfs", "lifo"):
            assert stem(term) == term
        assert "acid" in tokenize("Explain ACID properties")

    def test_tokenize_when_only_stopwords_then_empty(self):
        assert tokenize("What is the") == []

    def test_tokenize_when_duplicates_then_preserved(self):
        """Duplicates are kept so callers can count term frequency."""
        assert tokenize("stack stack heap") == ["stack", "stack", "heap"]

    def test_tokenize_when_inflected_forms_then_same_stem(self):
        assert tokenize("algorithms") == tokenize("algorithm")

    def test_constants_when_inspected_then_immutable(self):
        """Word lists are frozen sets."""
        assert isinstance(STOPWORDS, frozenset)
        assert isinstance(TECHNICAL_TERMS, frozenset)
        assert "explain" in STOPWORDS
        assert "tcp" in TECHNICAL_TERMS
