"""
Module: extractor.structuring

Purpose:
    Turns the cleaned line stream of one document into raw question
    records.

Key Modules:
    - segmenter: Line-based state machine
"""

from .segmenter import Segmenter, SegmenterState, segment_questions

__all__ = ["Segmenter", "SegmenterState", "segment_questions"]
