"""
Module: extractor.classification

Purpose:
    Topic classification for segmented questions. A unit header seen on
    the paper is trusted first; otherwise syllabus keywords vote, and
    questions with too little evidence fall back to "General Concepts".

Key Classes:
    - TopicAssignment: Classified unit, topic and confidence
    - TopicClassifier: classify() against one syllabus

Dependencies:
    - examace.common.syllabus: Unit tables
    - examace.analysis.normalizer: Stemmed tokens

Used By:
    - extractor.pipeline: Topic for each finalized question
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from examace.analysis.normalizer import tokenize
from examace.common.syllabus import (
    DEFAULT_SYLLABUS,
    GENERAL_TOPIC,
    GENERAL_UNIT,
    Syllabus,
    canonical_unit_label,
)
from examace.common.thresholds import CLASSIFICATION_THRESHOLDS, ClassificationThresholds

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TopicAssignment:
    """
    Result of classifying one question.

    Attributes:
        topic: Topic name from the syllabus, or "General Concepts".
        unit: Unit label, or "General".
        confidence: 1.0 structural, 0.8 keyword vote, 0.1 fallback.
    """
    topic: str
    unit: str
    confidence: float

    def to_dict(self) -> Dict[str, Any]:
        return {"topic": self.topic, "unit": self.unit, "confidence": self.confidence}


class TopicClassifier:
    """
    Classifies questions against a syllabus.

    Keywords are stemmed with the same tokenizer as questions, so
    "algorithms" in a question matches the keyword "algorithm". A
    multi-word keyword ("real-time") matches only when all of its tokens
    are present.

    Example:
        >>> clf = TopicClassifier()
        >>> clf.classify("Explain paging", "Unit 3").topic
        'Advanced Analysis'
    """

    def __init__(
        self,
        syllabus: Syllabus = DEFAULT_SYLLABUS,
        thresholds: ClassificationThresholds = CLASSIFICATION_THRESHOLDS,
    ):
        self.syllabus = syllabus
        self.thresholds = thresholds
        self._keyword_stems: List[Tuple[str, List[FrozenSet[str]]]] = []
        for unit, definition in syllabus.items():
            stems = [frozenset(tokenize(k)) for k in definition.keywords]
            self._keyword_stems.append((unit, [s for s in stems if s]))

    def _structural(self, inferred_unit: Optional[str]) -> Optional[str]:
        if not inferred_unit or inferred_unit == GENERAL_UNIT:
            return None
        unit = canonical_unit_label(inferred_unit)
        return unit if unit in self.syllabus else None

    def keyword_votes(self, text: str) -> Dict[str, int]:
        """Number of matching keywords per unit, in syllabus order."""
        tokens = set(tokenize(text))
        return {
            unit: sum(1 for stems in keywords if stems <= tokens)
            for unit, keywords in self._keyword_stems
        }

    def classify(self, text: str, inferred_unit: Optional[str] = None) -> TopicAssignment:
        """
        Classify one question.

        Args:
            text: Question text.
            inferred_unit: Unit context from the segmenter ("General" if none).

        Returns:
            TopicAssignment.
        """
        t = self.thresholds
        unit = self._structural(inferred_unit)
        if unit is not None:
            return TopicAssignment(self.syllabus[unit].name, unit, t.structural_confidence)

        best_unit: Optional[str] = None
        best_overlap = 0
        for candidate, overlap in self.keyword_votes(text).items():
            # Strictly greater: the first unit wins ties.
            if overlap > best_overlap:
                best_unit, best_overlap = candidate, overlap

        if best_unit is not None and best_overlap >= t.min_keyword_overlap:
            return TopicAssignment(self.syllabus[best_unit].name, best_unit, t.keyword_confidence)

        return TopicAssignment(GENERAL_TOPIC, GENERAL_UNIT, t.fallback_confidence)
