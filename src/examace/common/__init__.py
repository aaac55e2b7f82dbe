"""Common utilities shared across the toolkit."""

from __future__ import annotations

from .syllabus import (
    DEFAULT_SYLLABUS,
    GENERAL_TOPIC,
    GENERAL_UNIT,
    Syllabus,
    TopicDefinition,
    canonical_unit_label,
    load_syllabus,
    roman_to_int,
)
from .thresholds import (
    CLASSIFICATION_THRESHOLDS,
    CONCEPT_THRESHOLDS,
    LEGACY_GROUPING_THRESHOLDS,
    REPORT_THRESHOLDS,
    SEGMENTATION_THRESHOLDS,
    ClassificationThresholds,
    ConceptMatchThresholds,
    LegacyGroupingThresholds,
    ReportThresholds,
    SegmentationThresholds,
)

__all__ = [
    # syllabus
    "DEFAULT_SYLLABUS",
    "GENERAL_TOPIC",
    "GENERAL_UNIT",
    "Syllabus",
    "TopicDefinition",
    "canonical_unit_label",
    "load_syllabus",
    "roman_to_int",
    # thresholds
    "CLASSIFICATION_THRESHOLDS",
    "CONCEPT_THRESHOLDS",
    "LEGACY_GROUPING_THRESHOLDS",
    "REPORT_THRESHOLDS",
    "SEGMENTATION_THRESHOLDS",
    "ClassificationThresholds",
    "ConceptMatchThresholds",
    "LegacyGroupingThresholds",
    "ReportThresholds",
    "SegmentationThresholds",
]
