"""
Unit Tests for Legacy Pairwise Grouping

Tests for group_similar_questions() on questions without concept ids.
"""

from examace.analysis.grouping import group_similar_questions
from examace.analysis.oracle import StaticOracle


class TestGroupSimilarQuestions:
    """Tests for group_similar_questions()."""

    def test_grouping_when_near_duplicates_then_merged(self, question_factory):
        questions = [
            question_factory("What is TCP?", 2021),
            question_factory("Define deadlock", 2021),
            question_factory("Define TCP", 2022),
        ]

        groups = group_similar_questions(questions)

        assert len(groups) == 2
        assert len(groups[0].variants) == 2
        assert groups[0].occurrence_years == (2022, 2021)

    def test_grouping_when_ambiguous_and_oracle_affirms_then_merged(self, question_factory):
        """Scores in [0.50, 0.75) ask the oracle."""
        questions = [
            question_factory("paging memory", 2021),
            question_factory("paging kernel", 2022),
        ]
        oracle = StaticOracle(answer=True)

        groups = group_similar_questions(questions, oracle=oracle)

        assert len(groups) == 1
        assert len(oracle.calls) == 1

    def test_grouping_when_ambiguous_without_oracle_then_strict_fallback(self, question_factory):
        """The legacy fallback (0.65) rejects a 0.5 score."""
        questions = [
            question_factory("paging memory", 2021),
            question_factory("paging kernel", 2022),
        ]

        groups = group_similar_questions(questions)

        assert len(groups) == 2

    def test_grouping_when_seed_has_concept_then_group_keeps_it(self, question_factory):
        questions = [
            question_factory("What is TCP?", 2021, "C1"),
            question_factory("Define TCP", 2022),
        ]

        groups = group_similar_questions(questions)

        assert groups[0].concept_id == "C1"
        assert groups[0].count == 2
