"""
Module: extractor.detection.marks

Purpose:
    Mark allocation detection on text lines - identifies trailing
    "(10)", "[5]", "(12 marks)", "(4 m)" or "[6 pts]" allocations.

Key Functions:
    - find_trailing_marks(): Locate a mark allocation at the end of a line
    - strip_trailing_marks(): Split a line into content and marks
    - is_marks_only_line(): Short line holding nothing but an allocation

Key Classes:
    - MarksHint: Immutable dataclass for a detected allocation

Used By:
    - extractor.structuring.segmenter: Marks on question and marks lines
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Tuple

from examace.common.thresholds import SEGMENTATION_THRESHOLDS


MARKS_RE = re.compile(r"[(\[]\s*(\d+)\s*(?:marks|m|pts)?\s*[)\]]\s*$", re.IGNORECASE)
MARKS_ONLY_RE = re.compile(r"^\s*[(\[]\s*\d+\s*(?:marks|m|pts)?\s*[)\]]\s*$", re.IGNORECASE)


@dataclass(frozen=True)
class MarksHint:
    """
    Detected mark allocation.

    Attributes:
        value: Mark value.
        start: Index in the line where the allocation begins.

    Example:
        >>> find_trailing_marks("Explain OSI model (12 marks)")
        MarksHint(value=12, start=18)
    """
    value: int
    start: int


def find_trailing_marks(line: str) -> Optional[MarksHint]:
    """Return the mark allocation at the end of line, if any."""
    match = MARKS_RE.search(line)
    if not match:
        return None
    return MarksHint(value=int(match.group(1)), start=match.start())


def strip_trailing_marks(line: str) -> Tuple[str, Optional[int]]:
    """
    Remove a trailing mark allocation.

    Returns:
        (content without the allocation, marks or None)

    Example:
        >>> strip_trailing_marks("What is TCP? (10)")
        ('What is TCP?', 10)
    """
    hint = find_trailing_marks(line)
    if hint is None:
        return line, None
    return line[:hint.start].strip(), hint.value


def is_marks_only_line(line: str) -> bool:
    """True for a short line such as "(10)" or "[5 Marks]" with no other text."""
    if len(line) >= SEGMENTATION_THRESHOLDS.max_marks_line_chars:
        return False
    return MARKS_ONLY_RE.match(line) is not None
