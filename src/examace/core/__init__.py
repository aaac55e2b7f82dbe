"""
ExamAce Core Package

Shared data models and the error hierarchy. These are the single source of
truth for every record that crosses a module boundary.
"""

from .errors import (
    DocumentReadError,
    ExamAceError,
    InputTooShortError,
    MalformedOracleResponseError,
    OracleUnavailableError,
    StoreError,
)
from .models import (
    ConceptAssignment,
    ConceptCache,
    ConceptCacheEntry,
    ConceptGroup,
    DocumentMetadata,
    FinalizedQuestion,
    RawQuestionRecord,
)

__all__ = [
    "DocumentReadError",
    "ExamAceError",
    "InputTooShortError",
    "MalformedOracleResponseError",
    "OracleUnavailableError",
    "StoreError",
    "ConceptAssignment",
    "ConceptCache",
    "ConceptCacheEntry",
    "ConceptGroup",
    "DocumentMetadata",
    "FinalizedQuestion",
    "RawQuestionRecord",
]
