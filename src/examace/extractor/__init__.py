"""
Module: extractor

Purpose:
    Document-to-question pipeline: validates document text, segments it
    into questions, assigns concept ids and classifies topics.

Key Functions:
    - process_document(): Main entry point for one document
    - segment_questions(): Segmentation only

Key Classes:
    - ExtractionConfig: Configuration for a run
    - ExtractionResult: Container for run output
    - TopicClassifier: Syllabus-based topic mapping

Dependencies:
    - examace.analysis: Normalization and concept matching
    - fitz (PyMuPDF): PDF text layer (extractor.utils.pdf)

Used By:
    - examace.store: ingest_document()
    - examace.cli: ingest command
"""

from .classification import TopicAssignment, TopicClassifier
from .config import ExtractionConfig
from .pipeline import ExtractionResult, process_document
from .structuring.segmenter import segment_questions

__all__ = [
    "process_document",
    "segment_questions",
    "ExtractionConfig",
    "ExtractionResult",
    "TopicAssignment",
    "TopicClassifier",
]
