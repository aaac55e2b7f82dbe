"""
Module: extractor.utils.text

Purpose:
    Text cleaning utilities for raw document text. Removes page-break
    artifacts, splits into trimmed lines and drops boilerplate before
    segmentation, and cleans committed question text.

Key Functions:
    - strip_page_breaks(): Remove "Page (3) Break" / "Page 2 of 4" artifacts
    - preprocess_lines(): Raw text to the segmenter's line stream
    - clean_question_text(): Remove Bloom tags and stray trailing numbers
    - cleaned_length(): Character count used for the scanned-PDF check

Used By:
    - extractor.structuring.segmenter: Line stream and commit cleaning
    - extractor.pipeline: Minimum length validation
"""

from __future__ import annotations

import logging
import re
from typing import List

from examace.common.thresholds import SEGMENTATION_THRESHOLDS

from ..detection.headers import is_noise_line, is_or_separator

logger = logging.getLogger(__name__)

PAGE_BREAK_RE = re.compile(
    r"[-]*\s*Page\s*\(?\d+\)?\s*Break\s*[-]*|Page\s*\d+\s*(?:of\s*\d+)?",
    re.IGNORECASE,
)
# Narrower form used only for the input length check.
PAGE_BREAK_MARKER_RE = re.compile(r"Page\s*\(\d+\)\s*Break", re.IGNORECASE)

BLOOM_WITH_MARKS_RE = re.compile(r"\bL\d+\s+\d{1,2}\b", re.IGNORECASE)
BLOOM_RE = re.compile(r"\bL\d+\b", re.IGNORECASE)
TRAILING_NUMBER_RE = re.compile(r"\s+\d{1,2}\s*$")
WHITESPACE_RE = re.compile(r"\s+")


def strip_page_breaks(text: str) -> str:
    """Remove page-break and page-number artifacts left by PDF decoders."""
    return PAGE_BREAK_RE.sub("", text)


def cleaned_length(text: str) -> int:
    """
    Length of text after removing page-break markers and outer whitespace.

    Example:
        >>> cleaned_length("----Page (0) Break----\\n  ")
        8
    """
    return len(PAGE_BREAK_MARKER_RE.sub("", text).strip())


def preprocess_lines(text: str) -> List[str]:
    """
    Split raw document text into the segmenter's line stream.

    Lines are trimmed; page-break artifacts, separator lines, lines
    shorter than the minimum (a bare "OR" excepted) and boilerplate are
    dropped.

    Args:
        text: Raw text of one document.

    Returns:
        Non-empty lines in document order.
    """
    normalized = text.replace("\r\n", "\n").replace("\r", "\n")
    normalized = strip_page_breaks(normalized)

    lines: List[str] = []
    dropped = 0
    for raw in normalized.split("\n"):
        line = raw.strip()
        if not line:
            continue
        if is_or_separator(line):
            lines.append(line)
            continue
        if len(line) < SEGMENTATION_THRESHOLDS.min_line_chars or is_noise_line(line):
            dropped += 1
            continue
        lines.append(line)

    logger.debug(f"Pre-processing kept {len(lines)} line(s), dropped {dropped}")
    return lines


def clean_question_text(text: str) -> str:
    """
    Clean committed question text.

    Removes Bloom level tags ("L3", "L2 10") and a trailing bare 1-2
    digit number (usually marks or a CO column), then collapses
    whitespace.

    Example:
        >>> clean_question_text("Explain paging L3 6")
        'Explain paging'
    """
    cleaned = BLOOM_WITH_MARKS_RE.sub("", text)
    cleaned = BLOOM_RE.sub("", cleaned)
    cleaned = TRAILING_NUMBER_RE.sub("", cleaned)
    return WHITESPACE_RE.sub(" ", cleaned).strip()
