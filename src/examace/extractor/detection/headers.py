"""
Module: extractor.detection.headers

Purpose:
    Structural and noise line detection. Unit/section headers set the
    unit context for the questions that follow; OR separators split
    alternative questions; institutional boilerplate (college names,
    instructions, disclaimers, page furniture) is filtered out before
    segmentation.

Key Functions:
    - parse_unit_header(): "UNIT - IV" -> "Unit 4"
    - is_or_separator(): Bare "OR" / "(OR)" line
    - is_noise_line(): Boilerplate that never belongs to a question

Key Constants:
    - NOISE_PHRASES: Lowercase substrings that mark a noise line
    - DISCLAIMERS: Exam-hall instructions

Dependencies:
    - examace.common.syllabus: Roman numeral conversion

Used By:
    - extractor.utils.text: Line filtering
    - extractor.structuring.segmenter: Header and OR rules
"""

from __future__ import annotations

import re
from typing import Optional

from examace.common.syllabus import roman_to_int

from .numerals import looks_like_question


UNIT_HEADER_RE = re.compile(
    r"^(?:UNIT|MODULE|PART|SECTION)\s*[-:]?\s*([IVX]+|\d+|[A-Z])\b", re.IGNORECASE
)
OR_SEPARATOR_RE = re.compile(r"^(?:\s*OR\s*|\(OR\))$", re.IGNORECASE)
SEPARATOR_LINE_RE = re.compile(r"^[-=_*]{3,}$")
ANSWER_ANY_RE = re.compile(r"^Answer\s+any\s+", re.IGNORECASE)

# Header tokens at line start. Each needs a word boundary (or its usual
# punctuation) so "Time complexity ..." or "Notes on ..." survive.
NOISE_START_RE = re.compile(
    r"^(?:Page\b|Contd\b|Sem\b|Subject\b|Time\s*[:\-]|Max\.?\s*Marks\b|Duration\b"
    r"|Branch\b|Course\b|Programme\b|College\b|Institute\b|Affiliated\b"
    r"|Month\s*[:\-]|Year\s*[:\-]|Instructions\b|Answer\s+any\b|S\.\s*N\.?"
    r"|Total\s+(?:marks|pages|no)\b|Reg\.?\s*No\b|Autonomous\b|Examination\b"
    r"|Note\s*[:\-]|Missing\b|Bloom\b|USN\b)",
    re.IGNORECASE,
)

NOISE_PHRASES = (
    "college of engineering",
    "institute of technology",
    "semester",
    "examination",
    "supplementary",
    "important note",
    "general instructions",
    "answer any five",
    "time:",
    "date:",
    "max marks:",
    "marks:",
    "course code",
)

# Institution names; also common in genuine questions ("a university database"),
# so only noise when the line does not read like a question.
INSTITUTION_PHRASES = ("university",)

DISCLAIMERS = (
    "malpractice",
    "diagonal cross lines",
    "revealing of identification",
    "suitably assumed",
    "missing data",
    "blank page",
    "rough work",
)


def parse_unit_header(line: str) -> Optional[str]:
    """
    Return the canonical unit label for a header line.

    Roman numerals are converted to digits so "UNIT-IV" and "Unit 4"
    give the same label.

    Example:
        >>> parse_unit_header("UNIT - IV")
        'Unit 4'
        >>> parse_unit_header("Section B")
        'Unit B'
        >>> parse_unit_header("Unitary matrices") is None
        True
    """
    match = UNIT_HEADER_RE.match(line)
    if not match:
        return None
    ident = match.group(1).upper()
    if ident.isdigit():
        return f"Unit {int(ident)}"
    roman = roman_to_int(ident)
    if roman is not None:
        return f"Unit {roman}"
    return f"Unit {ident}"


def is_or_separator(line: str) -> bool:
    return OR_SEPARATOR_RE.match(line) is not None


def is_noise_line(line: str) -> bool:
    """
    True if the line is institutional boilerplate.

    Example:
        >>> is_noise_line("Time: 3 Hours")
        True
        >>> is_noise_line("Time complexity of merge sort")
        False
    """
    if SEPARATOR_LINE_RE.match(line):
        return True
    if NOISE_START_RE.match(line) or ANSWER_ANY_RE.match(line):
        return True
    lowered = line.lower()
    if any(phrase in lowered for phrase in NOISE_PHRASES):
        return True
    if any(p in lowered for p in INSTITUTION_PHRASES) and not looks_like_question(line):
        return True
    return any(d in lowered for d in DISCLAIMERS)
