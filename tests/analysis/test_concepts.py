"""
Unit Tests for Concept Matching

Tests for ConceptMatcher.assign() and the OracleGate that bounds oracle
consultations. Oracles are StaticOracle stubs; no model server is used.
"""

import pytest

from examace.analysis.concepts import ConceptMatcher, OracleGate
from examace.analysis.oracle import StaticOracle
from examace.common.thresholds import ConceptMatchThresholds
from examace.core.errors import MalformedOracleResponseError, OracleUnavailableError
from examace.core.models.concepts import ConceptCache, ConceptCacheEntry


# "paging memory" vs "paging kernel" scores 0.5: inside the ambiguous band.
AMBIGUOUS_CACHED = "paging memory"
AMBIGUOUS_NEW = "paging kernel"


@pytest.fixture
def tcp_cache():
    return ConceptCache([ConceptCacheEntry("what is tcp", "C1", "What is TCP?")])


@pytest.fixture
def ambiguous_cache():
    return ConceptCache([ConceptCacheEntry(AMBIGUOUS_CACHED, "C7", "Paging memory")])


class TestConceptMatcherAssign:
    """Tests for ConceptMatcher.assign()."""

    def test_assign_when_high_similarity_then_reuses_id_without_oracle(self, tcp_cache):
        """A score >= auto_accept reuses the cached id; the oracle is not asked."""
        # Arrange
        oracle = StaticOracle(answer=False)

        # Act
        with ConceptMatcher(oracle) as matcher:
            result = matcher.assign("Define TCP", tcp_cache)

        # Assert
        assert result.concept_id == "C1"
        assert result.method == "auto"
        assert oracle.calls == []

    def test_assign_when_disjoint_questions_then_two_new_ids(self):
        """Zero similarity mints a fresh id for each question."""
        cache = ConceptCache()
        with ConceptMatcher() as matcher:
            first = matcher.assign("Define deadlock", cache)
            second = matcher.assign("Explain the structure of a B-tree", cache)

        assert first.is_new and second.is_new
        assert first.concept_id != second.concept_id
        assert first.concept_id and second.concept_id

    def test_assign_when_called_then_appends_to_cache(self):
        """Each assignment is visible to later questions in the same run."""
        cache = ConceptCache()
        with ConceptMatcher() as matcher:
            first = matcher.assign("1. What is TCP?", cache)
            second = matcher.assign("Define TCP", cache)

        assert len(cache) == 2
        assert [e.concept_id for e in cache] == [first.concept_id, first.concept_id]
        assert second.method == "auto"
        assert list(cache)[0].normalized_text == "what is tcp"

    def test_assign_when_oracle_affirms_then_reuses_id(self, ambiguous_cache):
        oracle = StaticOracle(answer=True)
        with ConceptMatcher(oracle) as matcher:
            result = matcher.assign(AMBIGUOUS_NEW, ambiguous_cache)

        assert result.concept_id == "C7"
        assert result.method == "oracle"
        assert oracle.calls == [(AMBIGUOUS_NEW, "Paging memory")]

    def test_assign_when_oracle_denies_then_new_id(self, ambiguous_cache):
        oracle = StaticOracle(answer=False)
        with ConceptMatcher(oracle) as matcher:
            result = matcher.assign(AMBIGUOUS_NEW, ambiguous_cache)

        assert result.is_new
        assert result.concept_id != "C7"
        assert len(oracle.calls) == 1

    def test_assign_when_no_oracle_then_fallback_threshold(self, ambiguous_cache):
        """Without an oracle, a score >= fallback_accept is accepted."""
        with ConceptMatcher(None) as matcher:
            result = matcher.assign(AMBIGUOUS_NEW, ambiguous_cache)

        assert result.concept_id == "C7"
        assert result.method == "fallback"

    @pytest.mark.parametrize("error", [
        OracleUnavailableError("connection refused"),
        MalformedOracleResponseError("not json", raw="??"),
        RuntimeError("boom"),
        KeyError("isSame"),
    ])
    def test_assign_when_oracle_fails_then_fallback(self, ambiguous_cache, error):
        """Oracle errors never escape; the fallback threshold decides."""
        oracle = StaticOracle(error=error)
        with ConceptMatcher(oracle) as matcher:
            result = matcher.assign(AMBIGUOUS_NEW, ambiguous_cache)

        assert result.method == "fallback"
        assert matcher.gate.failures == 1

    def test_assign_when_oracle_times_out_then_fallback(self, ambiguous_cache):
        """A slow oracle is abandoned after the timeout."""
        thresholds = ConceptMatchThresholds(oracle_timeout_s=0.05)
        oracle = StaticOracle(answer=True, delay=0.5)
        with ConceptMatcher(oracle, thresholds) as matcher:
            result = matcher.assign(AMBIGUOUS_NEW, ambiguous_cache)

        assert result.method == "fallback"
        assert result.concept_id == "C7"

    def test_assign_when_fallback_above_score_then_new(self, ambiguous_cache):
        """A stricter fallback threshold rejects the ambiguous candidate."""
        thresholds = ConceptMatchThresholds(fallback_accept=0.65)
        with ConceptMatcher(None, thresholds) as matcher:
            result = matcher.assign(AMBIGUOUS_NEW, ambiguous_cache)

        assert result.is_new

    def test_assign_when_several_candidates_then_first_match_wins(self):
        """Cache order decides, not the best score."""
        cache = ConceptCache([
            ConceptCacheEntry("paging memory", "FIRST"),
            ConceptCacheEntry("paging kernel", "BEST"),
        ])
        with ConceptMatcher(None) as matcher:
            result = matcher.assign("paging kernel", cache)

        assert result.concept_id == "FIRST"

    def test_assign_when_entry_has_no_text_then_skipped(self):
        cache = ConceptCache([ConceptCacheEntry("", "EMPTY")])
        with ConceptMatcher() as matcher:
            result = matcher.assign("Define TCP", cache)

        assert result.is_new

    def test_stats_when_assignments_made_then_counted(self, tcp_cache):
        with ConceptMatcher() as matcher:
            matcher.assign("Define TCP", tcp_cache)
            matcher.assign("Explain deadlock avoidance", tcp_cache)

        assert matcher.stats["auto"] == 1
        assert matcher.stats["new"] == 1


class TestOracleGate:
    """Tests for OracleGate.consult()."""

    def test_consult_when_no_oracle_then_none(self):
        with OracleGate(None, timeout=1.0) as gate:
            assert gate.consult("a", "b") is None
            assert gate.calls == 0

    def test_consult_when_oracle_answers_then_passes_through(self):
        with OracleGate(StaticOracle(answer=True), timeout=1.0) as gate:
            assert gate.consult("a", "b") is True

    def test_consult_when_timeout_then_recovers_for_next_call(self):
        """A timed-out worker is replaced so later calls still run."""
        oracle = StaticOracle(answer=True, delay=0.3)
        with OracleGate(oracle, timeout=0.05) as gate:
            assert gate.consult("a", "b") is None
            oracle.delay = 0.0
            assert gate.consult("c", "d") is True
            assert gate.failures == 1
