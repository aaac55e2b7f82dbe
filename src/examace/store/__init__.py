"""
Module: store

Purpose:
    File-backed persistence for papers and questions, with per-subject
    exclusive locking around ingestion.

Key Modules:
    - jsonl_store: QuestionStore and ingest_document()
    - file_locking: portalocker helpers
"""

from .jsonl_store import (
    IngestResult,
    PaperRecord,
    QuestionStore,
    SubjectAudit,
    ingest_document,
    subject_slug,
)

__all__ = [
    "IngestResult",
    "PaperRecord",
    "QuestionStore",
    "SubjectAudit",
    "ingest_document",
    "subject_slug",
]
