"""
Module: questions

Purpose:
    Question records passed between the segmenter, the concept matcher and
    the store. Raw records are ephemeral per document parse; finalized
    questions are immutable once created.

Key Classes:
    - DocumentMetadata: Caller-supplied facts about one uploaded paper
    - RawQuestionRecord: Segmenter output for one question
    - FinalizedQuestion: Fully processed question ready for persistence

Dependencies:
    - dataclasses (std)

Used By:
    - extractor.structuring.segmenter: Produces RawQuestionRecord
    - extractor.pipeline: Produces FinalizedQuestion
    - analysis.repetition: Groups FinalizedQuestion by concept
    - store.jsonl_store: Serializes FinalizedQuestion
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class DocumentMetadata:
    """
    Metadata supplied alongside one document's text.

    Attributes:
        subject_id: Subject the paper belongs to.
        year: Exam year, e.g. 2023.
        semester: Free-form semester/session label.
        source_name: Original file name, for logs and the store.

    Example:
        >>> DocumentMetadata(subject_id="os", year=2023, semester="May/June")
    """
    subject_id: str
    year: int
    semester: str = "Unknown"
    source_name: str = ""

    def __post_init__(self) -> None:
        if not self.subject_id or not self.subject_id.strip():
            raise ValueError("subject_id must be non-empty")
        if not (1900 <= self.year <= 2100):
            raise ValueError(f"year must be 1900-2100: {self.year}")


@dataclass(frozen=True)
class RawQuestionRecord:
    """
    One question as segmented from document text.

    Attributes:
        text: Cleaned question text with numbering and marks removed.
        marks_hint: Marks parsed from the paper, 0 when none were found.
        question_number: Label like "5", "5a" or "Q3" for unnumbered text.
        unit: Unit context in force when the question opened ("General" if none).
        is_alternative: True for the first question after an OR separator.
    """
    text: str
    marks_hint: int = 0
    question_number: str = ""
    unit: str = "General"
    is_alternative: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "marks_hint": self.marks_hint,
            "question_number": self.question_number,
            "unit": self.unit,
            "is_alternative": self.is_alternative,
        }


@dataclass(frozen=True)
class FinalizedQuestion:
    """
    A fully processed question (immutable).

    Attributes:
        text: Question text as displayed.
        normalized_text: Output of normalize_text(text), cached for matching.
        concept_id: Cluster id shared by equivalent questions. None only
            for legacy records that predate concept matching.
        marks: Marks allocated on the paper (0 when unknown).
        question_number: Label like "5a".
        unit: Unit label after topic mapping.
        topic: Human-readable topic name.
        year: Exam year.
        subject_id: Owning subject.
        paper_id: Store id of the source paper, if persisted.

    Invariants:
        - marks >= 0
        - normalized_text is a pure function of text
    """
    text: str
    normalized_text: str
    concept_id: Optional[str]
    marks: int
    question_number: str
    unit: str
    topic: str
    year: int
    subject_id: str
    paper_id: Optional[str] = None

    def __post_init__(self) -> None:
        if self.marks < 0:
            raise ValueError(f"marks cannot be negative: {self.marks}")

    def with_paper(self, paper_id: str) -> FinalizedQuestion:
        """Return a copy attached to a stored paper."""
        return replace(self, paper_id=paper_id)

    def to_dict(self) -> Dict[str, Any]:
        d = {
            "text": self.text,
            "normalized_text": self.normalized_text,
            "concept_id": self.concept_id,
            "marks": self.marks,
            "question_number": self.question_number,
            "unit": self.unit,
            "topic": self.topic,
            "year": self.year,
            "subject_id": self.subject_id,
        }
        if self.paper_id:
            d["paper_id"] = self.paper_id
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> FinalizedQuestion:
        """
        Deserialize from dictionary.

        Legacy records may lack normalized_text or concept_id; the former
        is recomputed, the latter stays None.
        """
        text = data["text"]
        normalized = data.get("normalized_text")
        if not normalized:
            from examace.analysis.normalizer import normalize_text
            normalized = normalize_text(text)
        return cls(
            text=text,
            normalized_text=normalized,
            concept_id=data.get("concept_id") or None,
            marks=int(data.get("marks") or 0),
            question_number=str(data.get("question_number", "")),
            unit=data.get("unit") or "General",
            topic=data.get("topic") or "Uncategorized",
            year=int(data["year"]),
            subject_id=str(data["subject_id"]),
            paper_id=data.get("paper_id"),
        )

    def __repr__(self) -> str:
        """Concise representation for debugging."""
        return (
            f"FinalizedQuestion({self.question_number!r}, year={self.year}, "
            f"concept={self.concept_id!r}, topic={self.topic!r})"
        )
