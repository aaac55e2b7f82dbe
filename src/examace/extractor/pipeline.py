"""
Module: extractor.pipeline

Purpose:
    Main pipeline orchestrator for one document. Validates the input
    text, segments it into raw questions, assigns concept ids against
    the subject's concept cache, classifies topics and produces
    finalized questions.

Key Functions:
    - process_document(): Main entry point for one document's text

Key Classes:
    - ExtractionResult: Container for extraction output

Dependencies:
    - examace.extractor.structuring: Segmentation
    - examace.analysis.concepts: Concept matching
    - examace.extractor.classification: Topic mapping

Used By:
    - examace.store.jsonl_store: ingest_document() under the subject lock
    - examace.cli: ingest command
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from examace.analysis.concepts import ConceptMatcher
from examace.analysis.oracle import SemanticOracle
from examace.common.syllabus import load_syllabus
from examace.core.errors import InputTooShortError
from examace.core.models.concepts import ConceptCache
from examace.core.models.questions import DocumentMetadata, FinalizedQuestion

from .classification import TopicClassifier
from .config import ExtractionConfig
from .structuring.segmenter import segment_questions
from .timing import TimingLog, timed_phase
from .utils.text import cleaned_length

logger = logging.getLogger(__name__)


@dataclass
class ExtractionResult:
    """
    Result of processing one document.

    Attributes:
        questions: Finalized questions in document order.
        warnings: Warning messages (empty segmentation, per-question failures).
        timing: Phase timings for the run.
        match_stats: Count of concept assignments per method
            ("auto", "oracle", "fallback", "new").
    """
    questions: List[FinalizedQuestion]
    warnings: List[str] = field(default_factory=list)
    timing: TimingLog = field(default_factory=TimingLog)
    match_stats: Dict[str, int] = field(default_factory=dict)

    @property
    def question_count(self) -> int:
        return len(self.questions)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "question_count": self.question_count,
            "questions": [q.to_dict() for q in self.questions],
            "warnings": list(self.warnings),
            "match_stats": dict(self.match_stats),
            "timing": self.timing.to_dict(),
        }


def validate_text(text: str, minimum: int) -> None:
    """
    Reject text too short to be a text-based paper.

    Raises:
        InputTooShortError: If the cleaned length is below ``minimum``.
    """
    length = cleaned_length(text or "")
    if length < minimum:
        raise InputTooShortError(length, minimum)


def process_document(
    text: str,
    metadata: DocumentMetadata,
    cache: Optional[ConceptCache] = None,
    *,
    oracle: Optional[SemanticOracle] = None,
    config: Optional[ExtractionConfig] = None,
    classifier: Optional[TopicClassifier] = None,
) -> ExtractionResult:
    """
    Turn one document's text into finalized questions.

    Pipeline:
    1. Validate the text length (scanned PDFs have almost no text)
    2. Segment into raw question records
    3. For each record:
       a. Assign a concept id against the cache (appending to it)
       b. Classify unit and topic
       c. Build the FinalizedQuestion

    Args:
        text: Raw text of the document.
        metadata: Subject, year and semester supplied by the caller.
        cache: Subject concept cache, owned by the caller for this run.
            A fresh empty cache is used when None.
        oracle: Semantic oracle for ambiguous matches.
        config: Run configuration.
        classifier: Topic classifier; built from config.syllabus_path if None.

    Returns:
        ExtractionResult with questions, warnings and timing.

    Raises:
        InputTooShortError: If the text fails validation. Nothing else
            escapes; per-question failures become warnings.

    Example:
        >>> result = process_document(text, DocumentMetadata("os", 2023))
        >>> print(f"Extracted {result.question_count} questions")
        Extracted 12 questions
    """
    config = config or ExtractionConfig()
    cache = cache if cache is not None else ConceptCache()
    warnings: List[str] = []
    questions: List[FinalizedQuestion] = []
    timing_log = TimingLog()
    source = metadata.source_name or f"{metadata.subject_id}/{metadata.year}"

    validate_text(text, config.min_text_chars)

    if classifier is None:
        classifier = TopicClassifier(load_syllabus(config.syllabus_path))

    with timed_phase(timing_log, "segmentation"):
        records = segment_questions(text)
    logger.info(f"Detected {len(records)} questions in {source}")

    if not records:
        warnings.append("No questions detected in document")
        return ExtractionResult(questions=[], warnings=warnings, timing=timing_log)

    active_oracle = oracle if config.use_oracle else None
    with ConceptMatcher(active_oracle, config.thresholds) as matcher:
        with timed_phase(timing_log, "questions"):
            for position, record in enumerate(records, 1):
                label = record.question_number
                timing_id = f"{position}:{label}"
                try:
                    with timed_phase(timing_log, "concept_matching", question_id=timing_id):
                        assignment = matcher.assign(record.text, cache)
                    with timed_phase(timing_log, "classification", question_id=timing_id):
                        topic = classifier.classify(record.text, record.unit)

                    questions.append(FinalizedQuestion(
                        text=record.text,
                        normalized_text=assignment.normalized_text,
                        concept_id=assignment.concept_id,
                        marks=record.marks_hint,
                        question_number=label,
                        unit=topic.unit,
                        topic=topic.topic,
                        year=metadata.year,
                        subject_id=metadata.subject_id,
                    ))
                except Exception as e:
                    msg = f"Failed to process question {label}: {e} [Document: {source}]"
                    logger.warning(
                        msg,
                        extra={
                            "subject_id": metadata.subject_id,
                            "year": metadata.year,
                            "question_number": label,
                            "error": str(e),
                        },
                    )
                    warnings.append(msg)
        match_stats = dict(matcher.stats)

    logger.debug(timing_log.summary())
    logger.info(
        f"Completed {source}: {len(questions)} questions "
        f"({match_stats.get('new', 0)} new concepts)",
        extra={
            "subject_id": metadata.subject_id,
            "year": metadata.year,
            "question_count": len(questions),
        },
    )

    return ExtractionResult(
        questions=questions,
        warnings=warnings,
        timing=timing_log,
        match_stats=match_stats,
    )
