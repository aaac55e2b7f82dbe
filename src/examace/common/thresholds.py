"""Centralized threshold and magic number configuration.

This module contains the similarity cut-offs, confidence levels and length
limits used throughout segmentation, concept matching and classification.
Having these in one place makes tuning easier and documents each value.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ConceptMatchThresholds:
    """Thresholds for incremental concept-id assignment."""

    auto_accept: float = 0.80  # At or above: same concept, no oracle call
    oracle_check: float = 0.25  # Lower edge of the ambiguous band
    # Applied when the oracle is down. Equal to oracle_check, so every
    # ambiguous candidate is accepted rather than under-merged.
    fallback_accept: float = 0.25
    oracle_timeout_s: float = 10.0  # Hard bound on one oracle consultation


@dataclass(frozen=True)
class LegacyGroupingThresholds:
    """Thresholds for pairwise grouping of questions without concept ids.

    Kept separate from ConceptMatchThresholds: the legacy path is stricter
    on fallback (0.65) than the concept path (0.25).
    """

    auto_accept: float = 0.75
    oracle_check: float = 0.50
    fallback_accept: float = 0.65
    oracle_timeout_s: float = 10.0


@dataclass(frozen=True)
class SegmentationThresholds:
    """Length limits for the line-based segmenter."""

    min_line_chars: int = 3  # Shorter lines dropped (bare "OR" excepted)
    max_marks_line_chars: int = 15  # Marks-only line must be shorter
    min_orphan_chars: int = 25  # Orphan line must be longer to open a question
    min_question_chars: int = 5  # Cleaned text must be longer to be emitted


@dataclass(frozen=True)
class ClassificationThresholds:
    """Confidence levels and vote minimum for topic classification."""

    min_keyword_overlap: int = 2
    structural_confidence: float = 1.0
    keyword_confidence: float = 0.8
    fallback_confidence: float = 0.1


@dataclass(frozen=True)
class ReportThresholds:
    """Limits for subject-level repetition reports."""

    min_documents: int = 2  # A single paper cannot exhibit repetition
    max_repeated: int = 10


# Global instances for easy import
CONCEPT_THRESHOLDS = ConceptMatchThresholds()
LEGACY_GROUPING_THRESHOLDS = LegacyGroupingThresholds()
SEGMENTATION_THRESHOLDS = SegmentationThresholds()
CLASSIFICATION_THRESHOLDS = ClassificationThresholds()
REPORT_THRESHOLDS = ReportThresholds()
