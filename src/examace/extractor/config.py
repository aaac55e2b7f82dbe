"""
Module: extractor.config

Purpose:
    Configuration dataclass for a document run. Provides immutable
    settings for input validation, oracle use and the syllabus.

Key Classes:
    - ExtractionConfig: Main configuration for extraction

Dependencies:
    - dataclasses: For frozen dataclass support

Used By:
    - extractor.pipeline: Uses ExtractionConfig for run settings
    - examace.cli: Builds ExtractionConfig from flags
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from examace.common.thresholds import CONCEPT_THRESHOLDS, ConceptMatchThresholds


@dataclass(frozen=True)
class ExtractionConfig:
    """
    Configuration for the document pipeline.

    Attributes:
        min_text_chars: Minimum cleaned text length; shorter input is
            treated as a scanned PDF (default 100).
        use_oracle: Consult the semantic oracle for ambiguous matches
            (default True). When False the fallback threshold applies.
        syllabus_path: JSON syllabus file; None uses the built-in table.
        thresholds: Concept matching thresholds.
    """
    min_text_chars: int = 100
    use_oracle: bool = True
    syllabus_path: Optional[Path] = None
    thresholds: ConceptMatchThresholds = field(default_factory=lambda: CONCEPT_THRESHOLDS)
