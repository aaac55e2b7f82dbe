"""
Module: analysis.repetition

Purpose:
    Fold finalized questions into concept groups ranked by how many
    distinct years they appeared in, and summarize a subject's corpus
    into a report (repeated questions, topic weightage, year span).

Key Functions:
    - build_group(): One ConceptGroup from its variants
    - aggregate_repetitions(): Group by concept id, rank by year count
    - build_subject_report(): Subject-level summary

Key Classes:
    - SubjectReport: Report value object

Dependencies:
    - examace.core.models

Used By:
    - examace.cli: report command
    - examace.analysis.grouping: build_group for legacy groups
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from examace.common.thresholds import REPORT_THRESHOLDS
from examace.core.models.concepts import ConceptGroup
from examace.core.models.questions import FinalizedQuestion

logger = logging.getLogger(__name__)


def build_group(concept_id: Optional[str], variants: Sequence[FinalizedQuestion]) -> ConceptGroup:
    """
    Build a ConceptGroup from its member questions.

    The representative is the longest text; max() keeps the first-seen
    variant on ties. Years are distinct and sorted descending.
    """
    if not variants:
        raise ValueError("A concept group needs at least one variant")
    representative = max(variants, key=lambda q: len(q.text))
    years = tuple(sorted({q.year for q in variants}, reverse=True))
    return ConceptGroup(
        concept_id=concept_id,
        representative_text=representative.text,
        variants=tuple(variants),
        occurrence_years=years,
    )


def aggregate_repetitions(questions: Sequence[FinalizedQuestion]) -> List[ConceptGroup]:
    """
    Group questions by concept id and rank the groups.

    Questions without a concept id become singleton groups. Groups are
    stable-sorted by distinct-year count, descending, so equal counts keep
    first-seen order.

    Example:
        >>> groups = aggregate_repetitions(questions)
        >>> groups[0].count, groups[0].occurrence_years
        (2, (2022, 2021))
    """
    by_concept: Dict[str, List[FinalizedQuestion]] = {}
    # Singletons are interleaved in first-seen order with the concept groups.
    order: List[Tuple[Optional[str], List[FinalizedQuestion]]] = []
    for q in questions:
        if q.concept_id:
            bucket = by_concept.get(q.concept_id)
            if bucket is None:
                bucket = []
                by_concept[q.concept_id] = bucket
                order.append((q.concept_id, bucket))
            bucket.append(q)
        else:
            order.append((None, [q]))

    groups = [build_group(cid, members) for cid, members in order]
    groups.sort(key=lambda g: g.count, reverse=True)
    return groups


@dataclass(frozen=True)
class SubjectReport:
    """
    Summary of a subject's question corpus.

    Attributes:
        papers_count: Number of stored papers for the subject.
        total_questions: Number of stored questions.
        repeated: Groups seen in more than one year (empty below the
            minimum paper count).
        topic_weightage: (topic, question count), descending.
        year_span: (earliest, latest) year, or None for an empty corpus.
        top_topic: Most frequent topic, or None.
        top_topic_pct: Share of the top topic, rounded percent.
        group_count: Total number of concept groups.
    """
    papers_count: int
    total_questions: int
    repeated: Tuple[ConceptGroup, ...]
    topic_weightage: Tuple[Tuple[str, int], ...]
    year_span: Optional[Tuple[int, int]]
    top_topic: Optional[str]
    top_topic_pct: int
    group_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "papers_count": self.papers_count,
            "total_questions": self.total_questions,
            "repeated": [g.to_dict() for g in self.repeated],
            "topic_weightage": [{"topic": t, "count": c} for t, c in self.topic_weightage],
            "year_span": list(self.year_span) if self.year_span else None,
            "top_topic": self.top_topic,
            "top_topic_pct": self.top_topic_pct,
            "group_count": self.group_count,
        }


def build_subject_report(
    questions: Sequence[FinalizedQuestion],
    papers_count: int,
    min_documents: int = REPORT_THRESHOLDS.min_documents,
    limit: int = REPORT_THRESHOLDS.max_repeated,
    groups: Optional[Sequence[ConceptGroup]] = None,
) -> SubjectReport:
    """
    Summarize a subject's corpus.

    Args:
        questions: Every stored question for the subject.
        papers_count: Number of stored papers.
        min_documents: Repetitions are only reported from this many papers.
        limit: Maximum number of repeated groups reported.
        groups: Precomputed ranked groups (e.g. legacy grouping). Computed
            with aggregate_repetitions() when None.

    Returns:
        SubjectReport.
    """
    if groups is None:
        groups = aggregate_repetitions(questions)

    if papers_count >= min_documents:
        repeated = tuple(g for g in groups if g.count > 1)[:limit]
    else:
        repeated = ()
        logger.info(
            f"Only {papers_count} paper(s) stored; at least {min_documents} needed to report repetitions"
        )

    topic_counts = Counter(q.topic or "Uncategorized" for q in questions)
    weightage = tuple(sorted(topic_counts.items(), key=lambda kv: kv[1], reverse=True))

    total = len(questions)
    top_topic = weightage[0][0] if weightage else None
    top_pct = round(weightage[0][1] / total * 100) if weightage else 0

    years = [q.year for q in questions]
    year_span = (min(years), max(years)) if years else None

    return SubjectReport(
        papers_count=papers_count,
        total_questions=total,
        repeated=repeated,
        topic_weightage=weightage,
        year_span=year_span,
        top_topic=top_topic,
        top_topic_pct=top_pct,
        group_count=len(groups),
    )
