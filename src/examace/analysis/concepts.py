"""
Module: analysis.concepts

Purpose:
    Incremental concept-id assignment. Each new question is scored
    against an ordered concept cache; high scores reuse the candidate's
    id, ambiguous scores are settled by the semantic oracle (or by a
    fallback threshold when the oracle is unavailable), and anything
    else receives a fresh id.

Key Classes:
    - OracleGate: Timeout-bounded, failure-tolerant oracle consultation
    - ConceptMatcher: assign() one question against a ConceptCache

Dependencies:
    - concurrent.futures (std): Hard timeout around oracle calls
    - .similarity.cosine_similarity
    - .normalizer.normalize_text

Used By:
    - examace.extractor.pipeline: Concept ids for every segmented question
    - examace.analysis.grouping: Shares OracleGate
"""

from __future__ import annotations

import logging
import uuid
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from typing import Optional

from examace.common.thresholds import CONCEPT_THRESHOLDS, ConceptMatchThresholds
from examace.core.errors import OracleUnavailableError
from examace.core.models.concepts import ConceptAssignment, ConceptCache, ConceptCacheEntry

from .normalizer import normalize_text
from .oracle import SemanticOracle
from .similarity import cosine_similarity

logger = logging.getLogger(__name__)


class OracleGate:
    """
    Wraps a SemanticOracle with a hard timeout and failure capture.

    consult() returns True/False when the oracle decided, and None when
    it is unavailable for any reason: not configured, raised, replied
    with garbage, or exceeded the timeout. Calls run on a single worker
    thread; a timed-out worker is abandoned and replaced.

    Abandoned workers are still joined at interpreter exit, so an oracle
    whose judge_equivalence() never returns delays process shutdown.
    Implementations must honour the ``timeout`` they are given.
    """

    def __init__(self, oracle: Optional[SemanticOracle], timeout: float):
        self.oracle = oracle
        self.timeout = timeout
        self._executor: Optional[ThreadPoolExecutor] = None
        self._warned = False
        self.calls = 0
        self.failures = 0

    def _get_executor(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="oracle")
        return self._executor

    def _note_failure(self, reason: str) -> None:
        self.failures += 1
        if not self._warned:
            logger.warning(
                f"Semantic oracle unavailable ({reason}); using fallback threshold",
                extra={"oracle": repr(self.oracle)},
            )
            self._warned = True
        else:
            logger.debug(f"Oracle unavailable: {reason}")

    def consult(self, text_a: str, text_b: str) -> Optional[bool]:
        if self.oracle is None:
            return None
        self.calls += 1
        future = self._get_executor().submit(
            self.oracle.judge_equivalence, text_a, text_b, self.timeout
        )
        try:
            return bool(future.result(timeout=self.timeout))
        except FutureTimeout:
            future.cancel()
            # Stuck worker would block every later call; start a fresh one.
            self._executor.shutdown(wait=False)
            self._executor = None
            self._note_failure(f"timed out after {self.timeout}s")
            return None
        except OracleUnavailableError as exc:
            self._note_failure(str(exc))
            return None
        except Exception as exc:
            self._note_failure(f"{type(exc).__name__}: {exc}")
            return None

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=False)
            self._executor = None

    def __enter__(self) -> OracleGate:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class ConceptMatcher:
    """
    Assigns concept ids to questions against a caller-owned cache.

    Results depend on cache order: the first candidate that clears a
    threshold wins, not the best-scoring one. assign() appends every
    assignment to the cache so later questions in the same run can
    match earlier ones.

    Example:
        >>> cache = ConceptCache([ConceptCacheEntry("what is tcp", "C1")])
        >>> with ConceptMatcher() as matcher:
        ...     matcher.assign("Define TCP", cache).concept_id
        'C1'
    """

    def __init__(
        self,
        oracle: Optional[SemanticOracle] = None,
        thresholds: ConceptMatchThresholds = CONCEPT_THRESHOLDS,
    ):
        self.thresholds = thresholds
        self.gate = OracleGate(oracle, thresholds.oracle_timeout_s)
        self.stats: Counter = Counter()

    def _match(self, text: str, normalized: str, cache: ConceptCache) -> ConceptAssignment:
        t = self.thresholds
        for entry in cache:
            if not entry.normalized_text or not entry.concept_id:
                continue
            score = cosine_similarity(normalized, entry.normalized_text)

            if score >= t.auto_accept:
                return ConceptAssignment(entry.concept_id, normalized, score, "auto")

            if score >= t.oracle_check:
                decision = self.gate.consult(text, entry.text or entry.normalized_text)
                if decision is True:
                    return ConceptAssignment(entry.concept_id, normalized, score, "oracle")
                if decision is None and score >= t.fallback_accept:
                    return ConceptAssignment(entry.concept_id, normalized, score, "fallback")

        return ConceptAssignment(uuid.uuid4().hex, normalized, 0.0, "new")

    def assign(self, text: str, cache: ConceptCache) -> ConceptAssignment:
        """
        Assign a concept id to one question and record it in the cache.

        Args:
            text: Raw question text.
            cache: Subject cache, scanned in order and appended to.

        Returns:
            ConceptAssignment with the id and the method that decided it.
        """
        normalized = normalize_text(text)
        result = self._match(text, normalized, cache)
        cache.append(ConceptCacheEntry(normalized, result.concept_id, text))
        self.stats[result.method] += 1
        logger.debug(
            f"Concept {result.concept_id[:8]} via {result.method} "
            f"(sim={result.similarity:.2f}) for {text[:50]!r}"
        )
        return result

    def close(self) -> None:
        self.gate.close()

    def __enter__(self) -> ConceptMatcher:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
