"""
Module: core.errors

Purpose:
    Exception hierarchy shared by the extractor, analysis and store
    packages.

Key Classes:
    - ExamAceError: Base class for all toolkit errors
    - InputTooShortError: Document text too short to be a text-based paper
    - OracleUnavailableError: Semantic oracle failed or timed out
    - MalformedOracleResponseError: Oracle replied with an unusable payload
    - StoreError: Corrupt or unreadable store records
    - DocumentReadError: Source PDF cannot be opened

Used By:
    - extractor.pipeline: Raises InputTooShortError before segmentation
    - analysis.concepts: Catches oracle errors and applies fallback
    - store.jsonl_store: Raises StoreError
    - extractor.utils.pdf: Raises DocumentReadError
"""

from __future__ import annotations


class ExamAceError(Exception):
    """Base class for toolkit errors."""


class InputTooShortError(ExamAceError):
    """
    Raised when a document has too little text to segment.

    Usually means the source PDF is a scanned image with no text layer.

    Attributes:
        length: Cleaned character count of the rejected text.
        minimum: Required minimum character count.
    """

    def __init__(self, length: int, minimum: int):
        super().__init__(
            f"Document has {length} characters after cleaning (minimum {minimum}). "
            "It is likely a scanned/image PDF; convert it with an OCR tool and retry."
        )
        self.length = length
        self.minimum = minimum


class OracleUnavailableError(ExamAceError):
    """Raised when the semantic oracle cannot give a decision."""


class MalformedOracleResponseError(OracleUnavailableError):
    """Raised when the oracle reply cannot be parsed into a boolean decision."""

    def __init__(self, message: str, raw: str = ""):
        super().__init__(message)
        self.raw = raw


class StoreError(ExamAceError):
    """Raised when store records cannot be read or written."""

    def __init__(self, message: str, path: str = "", line: int = 0):
        super().__init__(message)
        self.path = path
        self.line = line


class DocumentReadError(ExamAceError):
    """Raised when a source document cannot be opened or decoded."""

    def __init__(self, message: str, path: str = ""):
        super().__init__(message)
        self.path = path
