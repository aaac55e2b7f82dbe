"""
Module: store.jsonl_store

Purpose:
    File-backed question store. Each subject gets a directory holding
    append-only JSONL files for its papers and questions, plus a lock
    file that serializes ingestion. Concept matching is order-dependent
    and reads the whole subject cache, so the lock spans the full
    load-cache, match and append window.

    Layout:
        <root>/<subject>/papers.jsonl
        <root>/<subject>/questions.jsonl
        <root>/<subject>/.lock

Key Classes:
    - PaperRecord: One ingested paper
    - QuestionStore: Read/append access to one store root
    - IngestResult: Paper id plus the extraction result
    - SubjectAudit: Per-subject consistency summary

Key Functions:
    - ingest_document(): Process one document and persist it atomically
      with respect to other ingests of the same subject

Dependencies:
    - portalocker (via store.file_locking): Cross-process locking

Used By:
    - examace.cli: ingest, report and audit commands
"""

from __future__ import annotations

import logging
import re
import uuid
from collections import Counter
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Generator, Iterable, List, Optional, Tuple

from examace.analysis.oracle import SemanticOracle
from examace.core.models.concepts import ConceptCache
from examace.core.models.questions import DocumentMetadata, FinalizedQuestion
from examace.extractor.classification import TopicClassifier
from examace.extractor.config import ExtractionConfig
from examace.extractor.pipeline import ExtractionResult, process_document

from .file_locking import exclusive_lock, locked_append_jsonl, locked_read_jsonl

logger = logging.getLogger(__name__)

QUESTIONS_FILE = "questions.jsonl"
PAPERS_FILE = "papers.jsonl"
LOCK_FILE = ".lock"

_UNSAFE_CHARS_RE = re.compile(r"[^A-Za-z0-9_.-]+")


def subject_slug(subject_id: str) -> str:
    """
    Directory name for a subject id.

    Example:
        >>> subject_slug("Operating Systems/CS301")
        'Operating_Systems_CS301'
    """
    slug = _UNSAFE_CHARS_RE.sub("_", subject_id.strip()).strip("._")
    if not slug:
        raise ValueError(f"Subject id has no usable characters: {subject_id!r}")
    return slug


@dataclass(frozen=True)
class PaperRecord:
    """
    One ingested question paper.

    Attributes:
        paper_id: Store id (uuid4 hex).
        subject_id: Owning subject.
        year: Exam year.
        semester: Semester/session label.
        original_name: Source file name.
        uploaded_at: ISO-8601 UTC timestamp.
        question_count: Questions stored for this paper.
        processed: True once the paper's questions are stored.
    """
    paper_id: str
    subject_id: str
    year: int
    semester: str = "Unknown"
    original_name: str = ""
    uploaded_at: str = ""
    question_count: int = 0
    processed: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "paper_id": self.paper_id,
            "subject_id": self.subject_id,
            "year": self.year,
            "semester": self.semester,
            "original_name": self.original_name,
            "uploaded_at": self.uploaded_at,
            "question_count": self.question_count,
            "processed": self.processed,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> PaperRecord:
        return cls(
            paper_id=str(data["paper_id"]),
            subject_id=str(data["subject_id"]),
            year=int(data["year"]),
            semester=data.get("semester") or "Unknown",
            original_name=data.get("original_name", ""),
            uploaded_at=data.get("uploaded_at", ""),
            question_count=int(data.get("question_count", 0)),
            processed=bool(data.get("processed", True)),
        )


@dataclass(frozen=True)
class SubjectAudit:
    """
    Consistency summary for one subject.

    Attributes:
        subject_id: Subject audited.
        papers: Stored papers in upload order.
        question_count: Stored questions.
        by_year: Question count per year, ascending year.
        by_paper: Question count per paper id ("null" for none).
        orphaned: Questions whose paper id is missing from papers.jsonl.
        missing_concepts: Questions stored without a concept id.
        samples: First few question texts.
    """
    subject_id: str
    papers: Tuple[PaperRecord, ...]
    question_count: int
    by_year: Tuple[Tuple[int, int], ...]
    by_paper: Tuple[Tuple[str, int], ...]
    orphaned: int
    missing_concepts: int
    samples: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "subject_id": self.subject_id,
            "papers": [p.to_dict() for p in self.papers],
            "question_count": self.question_count,
            "by_year": {str(y): c for y, c in self.by_year},
            "by_paper": dict(self.by_paper),
            "orphaned": self.orphaned,
            "missing_concepts": self.missing_concepts,
            "samples": list(self.samples),
        }


class QuestionStore:
    """
    JSONL-backed question and paper store.

    Example:
        >>> store = QuestionStore(Path("data"))
        >>> with store.subject_lock("os"):
        ...     cache = store.load_concept_cache("os")
    """

    def __init__(self, root: Path):
        self.root = Path(root)

    def subject_dir(self, subject_id: str) -> Path:
        return self.root / subject_slug(subject_id)

    def _questions_path(self, subject_id: str) -> Path:
        return self.subject_dir(subject_id) / QUESTIONS_FILE

    def _papers_path(self, subject_id: str) -> Path:
        return self.subject_dir(subject_id) / PAPERS_FILE

    @contextmanager
    def subject_lock(self, subject_id: str) -> Generator[None, None, None]:
        """Exclusive per-subject lock; serializes ingests of one subject."""
        with exclusive_lock(self.subject_dir(subject_id) / LOCK_FILE):
            yield

    def list_subjects(self) -> List[str]:
        """Subject ids with stored papers or questions, sorted."""
        if not self.root.exists():
            return []
        subjects = set()
        for child in self.root.iterdir():
            if not child.is_dir():
                continue
            for name in (PAPERS_FILE, QUESTIONS_FILE):
                path = child / name
                if not path.exists():
                    continue
                for record in locked_read_jsonl(path):
                    if record.get("subject_id"):
                        subjects.add(str(record["subject_id"]))
                        break
        return sorted(subjects)

    # ------------------------------------------------------------------
    # Questions
    # ------------------------------------------------------------------

    def load_question_records(self, subject_id: str) -> List[Dict[str, Any]]:
        return locked_read_jsonl(self._questions_path(subject_id))

    def load_questions(self, subject_id: str) -> List[FinalizedQuestion]:
        """All stored questions for a subject, in insertion order."""
        return [FinalizedQuestion.from_dict(r) for r in self.load_question_records(subject_id)]

    def load_concept_cache(self, subject_id: str) -> ConceptCache:
        """Concept cache for a subject, in insertion order."""
        cache = ConceptCache.from_records(self.load_question_records(subject_id))
        logger.debug(f"Loaded concept cache for {subject_id}: {len(cache)} entries")
        return cache

    def append_questions(self, subject_id: str, questions: Iterable[FinalizedQuestion]) -> int:
        return locked_append_jsonl(
            self._questions_path(subject_id), (q.to_dict() for q in questions)
        )

    # ------------------------------------------------------------------
    # Papers
    # ------------------------------------------------------------------

    def load_papers(self, subject_id: str) -> List[PaperRecord]:
        return [PaperRecord.from_dict(r) for r in locked_read_jsonl(self._papers_path(subject_id))]

    def count_papers(self, subject_id: str) -> int:
        """Number of processed papers for a subject."""
        return sum(1 for p in self.load_papers(subject_id) if p.processed)

    def record_paper(self, metadata: DocumentMetadata, question_count: int, paper_id: Optional[str] = None) -> PaperRecord:
        paper = PaperRecord(
            paper_id=paper_id or uuid.uuid4().hex,
            subject_id=metadata.subject_id,
            year=metadata.year,
            semester=metadata.semester,
            original_name=metadata.source_name,
            uploaded_at=datetime.now(timezone.utc).isoformat(timespec="seconds"),
            question_count=question_count,
        )
        locked_append_jsonl(self._papers_path(metadata.subject_id), [paper.to_dict()])
        return paper

    # ------------------------------------------------------------------
    # Audit
    # ------------------------------------------------------------------

    def audit_subject(self, subject_id: str, sample_size: int = 3) -> SubjectAudit:
        papers = self.load_papers(subject_id)
        records = self.load_question_records(subject_id)
        known_papers = {p.paper_id for p in papers}

        by_year = Counter(int(r.get("year") or 0) for r in records)
        by_paper = Counter(str(r.get("paper_id") or "null") for r in records)
        orphaned = sum(c for pid, c in by_paper.items() if pid not in known_papers)
        missing = sum(1 for r in records if not r.get("concept_id"))

        return SubjectAudit(
            subject_id=subject_id,
            papers=tuple(papers),
            question_count=len(records),
            by_year=tuple(sorted(by_year.items())),
            by_paper=tuple(by_paper.items()),
            orphaned=orphaned,
            missing_concepts=missing,
            samples=tuple(str(r.get("text", ""))[:80] for r in records[:sample_size]),
        )


@dataclass(frozen=True)
class IngestResult:
    """Outcome of ingesting one document."""
    paper: PaperRecord
    extraction: ExtractionResult

    @property
    def question_count(self) -> int:
        return self.paper.question_count


def ingest_document(
    store: QuestionStore,
    text: str,
    metadata: DocumentMetadata,
    *,
    oracle: Optional[SemanticOracle] = None,
    config: Optional[ExtractionConfig] = None,
    classifier: Optional[TopicClassifier] = None,
) -> IngestResult:
    """
    Process one document and persist its paper and questions.

    Holds the subject lock while loading the concept cache, matching
    and appending, so two concurrent ingests of one subject cannot both
    mint ids for the same new concept.

    Raises:
        InputTooShortError: Propagated from the pipeline; nothing is stored.
        StoreError: If existing records are corrupt.
    """
    subject_id = metadata.subject_id
    with store.subject_lock(subject_id):
        cache = store.load_concept_cache(subject_id)
        result = process_document(
            text, metadata, cache, oracle=oracle, config=config, classifier=classifier
        )
        paper_id = uuid.uuid4().hex
        questions = [q.with_paper(paper_id) for q in result.questions]
        store.append_questions(subject_id, questions)
        paper = store.record_paper(metadata, len(questions), paper_id=paper_id)

    logger.info(
        f"Stored paper {paper.paper_id[:8]} for {subject_id} ({metadata.year}): "
        f"{paper.question_count} questions",
        extra={"subject_id": subject_id, "paper_id": paper.paper_id},
    )
    return IngestResult(paper=paper, extraction=result)
