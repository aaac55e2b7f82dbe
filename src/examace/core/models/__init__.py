"""
Core Models Package

Immutable data models shared by the extractor, analysis and store packages.

All value objects are frozen dataclasses, so they are safe to pass between
pipeline stages and can be used as dict keys. The one mutable structure,
ConceptCache, is append-only and owned by a single ingestion run.
"""

from .questions import DocumentMetadata, RawQuestionRecord, FinalizedQuestion
from .concepts import (
    ConceptAssignment,
    ConceptCache,
    ConceptCacheEntry,
    ConceptGroup,
)

__all__ = [
    "DocumentMetadata",
    "RawQuestionRecord",
    "FinalizedQuestion",
    "ConceptAssignment",
    "ConceptCache",
    "ConceptCacheEntry",
    "ConceptGroup",
]
