"""Question normalization, similarity, concept matching and repetition analysis."""

from __future__ import annotations

from .concepts import ConceptMatcher, OracleGate
from .grouping import group_similar_questions
from .normalizer import STOPWORDS, TECHNICAL_TERMS, clean_text, normalize_text, tokenize
from .oracle import OllamaOracle, SemanticOracle, StaticOracle, parse_decision
from .repetition import SubjectReport, aggregate_repetitions, build_group, build_subject_report
from .similarity import cosine_similarity

__all__ = [
    "ConceptMatcher",
    "OracleGate",
    "group_similar_questions",
    "STOPWORDS",
    "TECHNICAL_TERMS",
    "clean_text",
    "normalize_text",
    "tokenize",
    "OllamaOracle",
    "SemanticOracle",
    "StaticOracle",
    "parse_decision",
    "SubjectReport",
    "aggregate_repetitions",
    "build_group",
    "build_subject_report",
    "cosine_similarity",
]
