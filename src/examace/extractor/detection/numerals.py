"""
Module: extractor.detection.numerals

Purpose:
    Question numbering detection on single text lines. Recognizes the
    many ways papers enumerate questions and sub-questions ("1.", "Q.3",
    "5 a", "5a)", "1(a)", "2 Explain ..."), sub-questions embedded in the
    middle of a wrapped line, and unnumbered lines that still read like
    questions.

Key Functions:
    - parse_question_start(): Number, letter and content of a question line
    - find_embedded_subquestion(): Split "... text. 7 b Define ..." lines
    - looks_like_question(): Interrogative/instructional keyword check

Key Classes:
    - QuestionNumeral: Detected enumeration at the start of a line
    - EmbeddedSubQuestion: A sub-question found mid-line

Used By:
    - extractor.structuring.segmenter: Question-start and continuation rules
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional


# Tried in order; the first alternative that fits wins.
QUESTION_START_RE = re.compile(
    r"^(?:[Qq]\.?\s*)?(\d{1,2})"
    r"(?:"
    r"\s*\(([a-zA-Z])\)"                    # 1(a)  1 (a)
    r"|\.?([a-zA-Z])[).]?(?=\s|$)"         # 1a  1.a  1a)  1.a.
    r"|[.)]\s*([a-zA-Z])\)(?=\s|$)"        # 1. a)  1)a)
    r"|\s+([a-zA-Z])[).]?(?=\s|$)"         # 5 a  5 a)  5 a.
    r"|[.)](?!\d)"                         # 1.  1)
    r"|\s+(?![Mm]arks?\b)(?=[A-Z][a-z])"   # 2 Explain
    r")\s*"
)

EMBEDDED_SUBQ_RE = re.compile(r"^(.+?)[.?!]\s+(\d+)\s+([a-z])\s+(.+)", re.IGNORECASE)
EMBEDDED_MARKS_RE = re.compile(r"^(.+?)\s+\(?(\d+)\s*Marks?\)?\s+([a-z])\s+(.+)", re.IGNORECASE)

QUESTION_KEYWORD_RE = re.compile(
    r"\b(what|why|how|explain|define|describe|discuss|list|name|write|draw"
    r"|state|derive|prove|show|calculate|find)\b",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class QuestionNumeral:
    """
    Enumeration detected at the start of a line.

    Attributes:
        number: Question digits, e.g. "5".
        letter: Lowercase sub-question letter, "" if none.
        content: Remainder of the line after the enumeration.

    Example:
        >>> parse_question_start("5 a Define CPU").label
        '5a'
    """
    number: str
    letter: str
    content: str

    @property
    def label(self) -> str:
        return f"{self.number}{self.letter}"


@dataclass(frozen=True)
class EmbeddedSubQuestion:
    """
    A sub-question that starts in the middle of a line.

    Attributes:
        prefix: Text before the sub-question (belongs to the open question).
        number: Question digits, "" when only a letter was given.
        letter: Lowercase sub-question letter.
        content: Text of the new sub-question.
        marks: Marks stated between prefix and sub-question, if any.
    """
    prefix: str
    number: str
    letter: str
    content: str
    marks: Optional[int] = None


def parse_question_start(line: str) -> Optional[QuestionNumeral]:
    """
    Detect a question enumeration at the start of a line.

    Args:
        line: Trimmed text line.

    Returns:
        QuestionNumeral, or None if the line does not start a question.

    Example:
        >>> q = parse_question_start("Q.3 (b) Explain paging")
        >>> q.label, q.content
        ('3b', 'Explain paging')
    """
    match = QUESTION_START_RE.match(line)
    if not match:
        return None
    letter = next((g for g in match.groups()[1:] if g), "")
    return QuestionNumeral(
        number=match.group(1),
        letter=letter.lower(),
        content=line[match.end():].strip(),
    )


def find_embedded_subquestion(line: str) -> Optional[EmbeddedSubQuestion]:
    """
    Detect a sub-question that begins mid-line.

    Two forms are recognized, sentence form first:
        "... scheduling. 7 b Define paging"  -> number "7", letter "b"
        "... scheduling (12 Marks) b Write"  -> letter "b", marks 12

    Returns:
        EmbeddedSubQuestion, or None.
    """
    match = EMBEDDED_SUBQ_RE.match(line)
    if match:
        return EmbeddedSubQuestion(
            prefix=match.group(1).strip(),
            number=match.group(2),
            letter=match.group(3).lower(),
            content=match.group(4).strip(),
        )
    match = EMBEDDED_MARKS_RE.match(line)
    if match:
        return EmbeddedSubQuestion(
            prefix=match.group(1).strip(),
            number="",
            letter=match.group(3).lower(),
            content=match.group(4).strip(),
            marks=int(match.group(2)),
        )
    return None


def looks_like_question(line: str) -> bool:
    """True if the line contains an interrogative or instructional keyword."""
    return QUESTION_KEYWORD_RE.search(line) is not None
