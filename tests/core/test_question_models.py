"""
Unit Tests for Question and Concept Models

Tests for DocumentMetadata, FinalizedQuestion serialization and the
append-only ConceptCache.
"""

import pytest

from examace.core.models.concepts import ConceptCache, ConceptCacheEntry
from examace.core.models.questions import DocumentMetadata, FinalizedQuestion


class TestDocumentMetadata:
    """Tests for DocumentMetadata validation."""

    def test_init_when_valid_then_defaults_applied(self):
        meta = DocumentMetadata(subject_id="os", year=2023)
        assert meta.semester == "Unknown"
        assert meta.source_name == ""

    @pytest.mark.parametrize("subject_id,year", [
        ("", 2023),
        ("   ", 2023),
        ("os", 1850),
        ("os", 3000),
    ])
    def test_init_when_invalid_then_raises(self, subject_id, year):
        with pytest.raises(ValueError):
            DocumentMetadata(subject_id=subject_id, year=year)


class TestFinalizedQuestion:
    """Tests for FinalizedQuestion."""

    @pytest.fixture
    def question(self):
        return FinalizedQuestion(
            text="What is TCP?",
            normalized_text="what is tcp",
            concept_id="C1",
            marks=10,
            question_number="1",
            unit="Unit 1",
            topic="Introduction & Basics",
            year=2021,
            subject_id="os",
        )

    def test_init_when_negative_marks_then_raises(self, question):
        with pytest.raises(ValueError, match="cannot be negative"):
            FinalizedQuestion(**{**question.to_dict(), "marks": -1})

    def test_with_paper_when_called_then_new_instance(self, question):
        attached = question.with_paper("P1")

        assert attached.paper_id == "P1"
        assert question.paper_id is None
        assert attached.to_dict()["paper_id"] == "P1"
        assert "paper_id" not in question.to_dict()

    def test_from_dict_when_round_trip_then_equal(self, question):
        assert FinalizedQuestion.from_dict(question.with_paper("P1").to_dict()) == question.with_paper("P1")

    def test_from_dict_when_legacy_record_then_defaults_filled(self):
        """Records without normalized_text or concept_id still load."""
        restored = FinalizedQuestion.from_dict({
            "text": "1. What is TCP?",
            "year": "2020",
            "subject_id": "os",
        })

        assert restored.normalized_text == "what is tcp"
        assert restored.concept_id is None
        assert restored.marks == 0
        assert restored.topic == "Uncategorized"
        assert restored.year == 2020


class TestConceptCache:
    """Tests for ConceptCache."""

    def test_append_when_entries_added_then_insertion_order(self):
        cache = ConceptCache([ConceptCacheEntry("what is tcp", "C1")])
        cache.append(ConceptCacheEntry("osi model", "C2"))

        assert [e.concept_id for e in cache] == ["C1", "C2"]
        assert len(cache) == 2

    def test_iter_when_appending_during_scan_then_scan_unchanged(self):
        cache = ConceptCache([ConceptCacheEntry("a", "C1")])
        seen = []
        for entry in cache:
            seen.append(entry.concept_id)
            cache.append(ConceptCacheEntry("b", "C2"))

        assert seen == ["C1"]
        assert len(cache) == 2

    def test_from_records_when_mixed_records_then_usable_entries(self):
        cache = ConceptCache.from_records([
            {"text": "What is TCP?", "normalized_text": "what is tcp", "concept_id": "C1"},
            {"text": "2. Define paging", "id": "legacy-7"},
            {"text": "No id at all"},
        ])

        entries = list(cache)
        assert [e.concept_id for e in entries] == ["C1", "legacy-7"]
        assert entries[1].normalized_text == "define paging"
        assert entries[1].text == "2. Define paging"
