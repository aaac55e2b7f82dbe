"""
Module: extractor.structuring.segmenter

Purpose:
    Line-based state machine that segments document text into raw
    question records. Lines are classified by an ordered list of rules;
    the first rule that handles a line wins:

        unit header > OR separator > question start > continuation

    Continuation covers, in order: marks-only lines, sub-questions
    embedded mid-line, plain continuation of the open question and
    orphan lines that read like questions.

Key Classes:
    - SegmenterState: SCANNING (no open question) / ACCUMULATING
    - Segmenter: Incremental feed()/finish() parser

Key Functions:
    - segment_questions(): Raw text to RawQuestionRecord list

Dependencies:
    - extractor.detection: Line detectors
    - extractor.utils.text: Pre-processing and commit cleaning

Used By:
    - extractor.pipeline: First phase of document processing
"""

from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from examace.common.syllabus import GENERAL_UNIT
from examace.common.thresholds import SEGMENTATION_THRESHOLDS, SegmentationThresholds
from examace.core.models.questions import RawQuestionRecord

from ..detection.headers import is_or_separator, parse_unit_header
from ..detection.marks import find_trailing_marks, is_marks_only_line, strip_trailing_marks
from ..detection.numerals import find_embedded_subquestion, looks_like_question, parse_question_start
from ..utils.text import clean_question_text, preprocess_lines

logger = logging.getLogger(__name__)

LEFTOVER_HEADER_RE = re.compile(r"^(Unit|Section|Part)\s+\w+$", re.IGNORECASE)
TRAILING_LETTER_RE = re.compile(r"[a-z]$", re.IGNORECASE)


class SegmenterState(enum.Enum):
    SCANNING = "scanning"
    ACCUMULATING = "accumulating"


@dataclass
class _QuestionBuilder:
    """Mutable buffer for the question being accumulated."""
    number: str
    unit: str
    text: str = ""
    marks: int = 0
    is_alternative: bool = False

    def append(self, line: str) -> None:
        if not self.text:
            self.text = line
        elif self.text.endswith("-"):
            # Hyphenated word split across lines
            self.text = self.text[:-1] + line
        else:
            self.text = f"{self.text} {line}"


@dataclass
class Segmenter:
    """
    Incremental question segmenter.

    Feed pre-processed lines one at a time, then call finish() to flush
    the last open question.

    Example:
        >>> seg = Segmenter()
        >>> for line in ["1. What is TCP? (10)", "2. Explain OSI model (12 marks)"]:
        ...     seg.feed(line)
        >>> [(q.question_number, q.marks_hint) for q in seg.finish()]
        [('1', 10), ('2', 12)]
    """
    thresholds: SegmentationThresholds = SEGMENTATION_THRESHOLDS
    state: SegmenterState = SegmenterState.SCANNING
    unit: str = GENERAL_UNIT
    records: List[RawQuestionRecord] = field(default_factory=list)
    discarded: int = 0
    _current: Optional[_QuestionBuilder] = field(default=None, init=False, repr=False)
    _after_or: bool = field(default=False, init=False, repr=False)

    def __post_init__(self) -> None:
        self._rules: Sequence[Callable[[str], bool]] = (
            self._on_unit_header,
            self._on_or_separator,
            self._on_question_start,
            self._on_continuation,
        )

    # ------------------------------------------------------------------
    # Buffer management
    # ------------------------------------------------------------------

    def _open(self, number: str, text: str, marks: int = 0) -> None:
        self._current = _QuestionBuilder(
            number=number,
            unit=self.unit,
            text=text,
            marks=marks,
            is_alternative=self._after_or,
        )
        self._after_or = False
        self.state = SegmenterState.ACCUMULATING

    def _commit(self) -> None:
        current = self._current
        self._current = None
        self.state = SegmenterState.SCANNING
        if current is None:
            return

        cleaned = clean_question_text(current.text)
        if len(cleaned) <= self.thresholds.min_question_chars or LEFTOVER_HEADER_RE.match(cleaned):
            self.discarded += 1
            logger.debug(f"Discarded fragment {cleaned!r} (number={current.number!r})")
            return

        self.records.append(RawQuestionRecord(
            text=cleaned,
            marks_hint=current.marks,
            question_number=current.number or f"Q{len(self.records) + 1}",
            unit=current.unit,
            is_alternative=current.is_alternative,
        ))

    # ------------------------------------------------------------------
    # Rules, in priority order. Each returns True when it handled the line.
    # ------------------------------------------------------------------

    def _on_unit_header(self, line: str) -> bool:
        label = parse_unit_header(line)
        if label is None:
            return False
        self._commit()
        self.unit = label
        return True

    def _on_or_separator(self, line: str) -> bool:
        if not is_or_separator(line):
            return False
        self._commit()
        self._after_or = True
        return True

    def _on_question_start(self, line: str) -> bool:
        numeral = parse_question_start(line)
        if numeral is None:
            return False
        self._commit()
        content, marks = strip_trailing_marks(numeral.content)
        self._open(numeral.label, content, marks or 0)
        return True

    def _on_continuation(self, line: str) -> bool:
        current = self._current

        if is_marks_only_line(line):
            if current is not None:
                hint = find_trailing_marks(line)
                current.marks = hint.value if hint else current.marks
            return True

        embedded = find_embedded_subquestion(line)
        if embedded is not None:
            previous_number = current.number if current is not None else ""
            if current is not None:
                current.append(embedded.prefix)
                if embedded.marks is not None:
                    current.marks = embedded.marks
                self._commit()
            if embedded.number:
                number = f"{embedded.number}{embedded.letter}"
            else:
                number = TRAILING_LETTER_RE.sub("", previous_number) + embedded.letter
            content, marks = strip_trailing_marks(embedded.content)
            self._open(number, content, marks or 0)
            return True

        if current is not None:
            content, marks = strip_trailing_marks(line)
            if marks is not None:
                current.marks = marks
            current.append(content)
            return True

        if len(line) > self.thresholds.min_orphan_chars and looks_like_question(line):
            self._open("", line)
            return True

        self.discarded += 1
        logger.debug(f"Skipped orphan line {line[:60]!r}")
        return True

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def feed(self, line: str) -> None:
        """Process one pre-processed line."""
        for rule in self._rules:
            if rule(line):
                return

    def finish(self) -> List[RawQuestionRecord]:
        """Flush the open question and return all records."""
        self._commit()
        return list(self.records)


def segment_questions(text: str) -> List[RawQuestionRecord]:
    """
    Segment raw document text into question records.

    Args:
        text: Raw text of one document.

    Returns:
        Records in document order. Empty if nothing looks like a question.

    Example:
        >>> [q.question_number for q in segment_questions("5 a Define CPU\\n5 b Explain ALU")]
        ['5a', '5b']
    """
    segmenter = Segmenter()
    for line in preprocess_lines(text):
        segmenter.feed(line)
    records = segmenter.finish()
    logger.debug(
        f"Segmented {len(records)} question(s), discarded {segmenter.discarded} fragment(s)"
    )
    return records
