"""
Module: concepts

Purpose:
    Concept cache and concept group models. The cache is the ordered,
    append-only shadow of a subject's stored questions that the concept
    matcher scans; groups are the aggregated repetition view.

Key Classes:
    - ConceptCacheEntry: (normalized_text, concept_id, text) triple
    - ConceptCache: Ordered append-only list of entries for one subject
    - ConceptAssignment: Result of matching one question
    - ConceptGroup: All variants of one concept with occurrence years

Dependencies:
    - dataclasses (std)
    - .questions.FinalizedQuestion

Used By:
    - analysis.concepts.ConceptMatcher: Scans and appends to ConceptCache
    - analysis.repetition: Builds ConceptGroup
    - store.jsonl_store: Loads ConceptCache from records
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Literal, Mapping, Optional, Tuple

from .questions import FinalizedQuestion


MatchMethod = Literal["auto", "oracle", "fallback", "new"]


@dataclass(frozen=True)
class ConceptCacheEntry:
    """
    Lightweight shadow of one already-assigned question.

    Attributes:
        normalized_text: Normalized question text used for similarity.
        concept_id: Concept the question belongs to.
        text: Original text, shown to the oracle when available.
    """
    normalized_text: str
    concept_id: str
    text: str = ""


class ConceptCache:
    """
    Ordered, append-only concept cache for one subject.

    Loaded once per document run and appended to as the run assigns ids,
    so duplicates inside one fresh document collapse onto each other.
    Iteration order is insertion order; there is no removal.

    Example:
        >>> cache = ConceptCache([ConceptCacheEntry("what is tcp", "C1")])
        >>> cache.append(ConceptCacheEntry("osi model", "C2"))
        >>> [e.concept_id for e in cache]
        ['C1', 'C2']
    """

    def __init__(self, entries: Optional[Iterable[ConceptCacheEntry]] = None) -> None:
        self._entries: List[ConceptCacheEntry] = list(entries or [])

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> ConceptCache:
        """
        Build a cache from store records.

        Records missing normalized_text are normalized on the fly. Records
        missing concept_id fall back to their "id" field, and are skipped
        when they have neither.
        """
        from examace.analysis.normalizer import normalize_text

        entries: List[ConceptCacheEntry] = []
        for record in records:
            text = str(record.get("text") or "")
            concept_id = record.get("concept_id") or record.get("id")
            if not concept_id:
                continue
            normalized = record.get("normalized_text") or normalize_text(text)
            entries.append(ConceptCacheEntry(normalized, str(concept_id), text))
        return cls(entries)

    def append(self, entry: ConceptCacheEntry) -> None:
        self._entries.append(entry)

    def __iter__(self) -> Iterator[ConceptCacheEntry]:
        # Snapshot so appends during a scan never extend the scan.
        return iter(tuple(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"ConceptCache({len(self._entries)} entries)"


@dataclass(frozen=True)
class ConceptAssignment:
    """
    Outcome of matching one question against the cache.

    Attributes:
        concept_id: Matched or newly minted concept id.
        normalized_text: Normalized form of the matched question.
        similarity: Score against the matched candidate (0.0 for new).
        method: "auto" (>= auto threshold), "oracle" (oracle affirmed),
            "fallback" (oracle unavailable, fallback threshold met) or "new".
    """
    concept_id: str
    normalized_text: str
    similarity: float
    method: MatchMethod

    @property
    def is_new(self) -> bool:
        return self.method == "new"


@dataclass(frozen=True)
class ConceptGroup:
    """
    All variants of one concept with their distinct occurrence years.

    Attributes:
        concept_id: Shared concept id (None for a legacy singleton).
        representative_text: Longest variant text (first-seen on ties).
        variants: Member questions in first-seen order.
        occurrence_years: Distinct years, descending.

    Example:
        >>> group.count  # distinct years, not len(variants)
        2
    """
    concept_id: Optional[str]
    representative_text: str
    variants: Tuple[FinalizedQuestion, ...]
    occurrence_years: Tuple[int, ...]

    @property
    def count(self) -> int:
        """Number of distinct years the concept appeared in."""
        return len(self.occurrence_years)

    @property
    def is_repeated(self) -> bool:
        return self.count > 1

    def to_dict(self, include_variants: bool = False) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "concept_id": self.concept_id,
            "text": self.representative_text,
            "count": self.count,
            "years": list(self.occurrence_years),
            "variant_count": len(self.variants),
        }
        if include_variants:
            d["variants"] = [v.to_dict() for v in self.variants]
        return d
