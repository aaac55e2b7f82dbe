"""
Module: extractor.timing

Purpose:
    Timing instrumentation for document runs. Records how long each
    phase of a run took (segmentation, matching, classification) at the
    document level and per question, so slow oracle consultations show
    up next to the questions that caused them.

Key Classes:
    - TimingLog: Document and question phase durations

Key Functions:
    - timed_phase: Context manager for timing code blocks

Dependencies:
    - time (std)
    - contextlib (std)

Used By:
    - extractor.pipeline: Per-run instrumentation
    - examace.cli: --timing-log output
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Generator, List, Optional, Tuple

logger = logging.getLogger(__name__)


@dataclass
class TimingLog:
    """
    Phase durations for one document run.

    Attributes:
        document_timings: phase -> seconds for whole-document phases.
        question_timings: "position:label" -> {phase -> seconds}; position is
            1-based so repeated labels stay separate.

    Example:
        >>> log = TimingLog()
        >>> with timed_phase(log, "segmentation"):
        ...     records = segment_questions(text)
        >>> log.document_timings["segmentation"] < 1.0
        True
    """
    document_timings: Dict[str, float] = field(default_factory=dict)
    question_timings: Dict[str, Dict[str, float]] = field(default_factory=dict)

    def log_document(self, phase: str, duration: float) -> None:
        self.document_timings[phase] = duration

    def log_question(self, question_id: str, phase: str, duration: float) -> None:
        self.question_timings.setdefault(question_id, {})[phase] = duration

    @property
    def total(self) -> float:
        return sum(self.document_timings.values())

    def get_phase_totals(self) -> Dict[str, float]:
        """Sum each per-question phase across all questions."""
        totals: Dict[str, float] = {}
        for phases in self.question_timings.values():
            for phase, duration in phases.items():
                totals[phase] = totals.get(phase, 0.0) + duration
        return totals

    def get_slowest_questions(self, n: int = 3) -> List[Tuple[str, float]]:
        """The N questions with the largest summed phase time."""
        ranked = [(qid, sum(phases.values())) for qid, phases in self.question_timings.items()]
        ranked.sort(key=lambda x: x[1], reverse=True)
        return ranked[:n]

    def summary(self) -> str:
        """Human-readable timing summary."""
        lines = ["", "=== Document Timing Summary ==="]
        for phase, duration in self.document_timings.items():
            lines.append(f"  {phase:20s} {duration:.3f}s")

        totals = self.get_phase_totals()
        if totals:
            lines.append("Per-question totals:")
            for phase, duration in sorted(totals.items(), key=lambda x: -x[1]):
                lines.append(f"  {phase:20s} {duration:.3f}s")

        slowest = self.get_slowest_questions()
        if slowest:
            lines.append("Slowest questions:")
            for qid, duration in slowest:
                lines.append(f"  {qid}: {duration:.3f}s")
        lines.append("")
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "document_timings": self.document_timings,
            "question_timings": self.question_timings,
            "phase_totals": self.get_phase_totals(),
        }

    def save(self, path: Path, run_id: str) -> None:
        """
        Merge this run into a shared JSON timing file under ``run_id``.

        Uses file locking, so concurrent ingests can share one file.
        """
        from examace.store.file_locking import locked_read_modify_write_json

        def merge(existing: Dict[str, Any]) -> Dict[str, Any]:
            existing.setdefault("runs", {})[run_id] = self.to_dict()
            return existing

        locked_read_modify_write_json(Path(path), merge, default=lambda: {"runs": {}})
        logger.debug(f"Merged timing data for {run_id} into {path}")


@contextmanager
def timed_phase(
    log: TimingLog,
    phase: str,
    question_id: Optional[str] = None,
) -> Generator[None, None, None]:
    """
    Time a block and record it on ``log``.

    Records a question-level metric when ``question_id`` is given,
    otherwise a document-level one. Recorded even if the block raises.
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed = time.perf_counter() - start
        if question_id:
            log.log_question(question_id, phase, elapsed)
        else:
            log.log_document(phase, elapsed)
