"""
Module: analysis.grouping

Purpose:
    Pairwise similarity grouping for question corpora that have no
    concept ids. Each ungrouped question seeds a group and absorbs every
    later ungrouped question that is similar enough. Quadratic in the
    number of questions; concept ids make this unnecessary for new data.

Key Functions:
    - group_similar_questions(): Greedy pairwise grouping

Dependencies:
    - .similarity.cosine_similarity
    - .concepts.OracleGate

Used By:
    - examace.cli: report --legacy
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from examace.common.thresholds import LEGACY_GROUPING_THRESHOLDS, LegacyGroupingThresholds
from examace.core.models.concepts import ConceptGroup
from examace.core.models.questions import FinalizedQuestion

from .concepts import OracleGate
from .oracle import SemanticOracle
from .repetition import build_group
from .similarity import cosine_similarity

logger = logging.getLogger(__name__)


def group_similar_questions(
    questions: Sequence[FinalizedQuestion],
    oracle: Optional[SemanticOracle] = None,
    thresholds: LegacyGroupingThresholds = LEGACY_GROUPING_THRESHOLDS,
) -> List[ConceptGroup]:
    """
    Group questions by pairwise similarity.

    Scores at or above ``auto_accept`` join the seed's group. Scores in
    the ambiguous band ask the oracle; if it is unavailable the stricter
    ``fallback_accept`` threshold decides. Groups carry the seed's
    concept id (None for legacy records) and are sorted by variant count.

    Args:
        questions: Questions in stored order.
        oracle: Optional semantic oracle.
        thresholds: Legacy thresholds.

    Returns:
        Groups sorted by number of variants, descending.
    """
    t = thresholds
    grouped = [False] * len(questions)
    groups: List[ConceptGroup] = []

    with OracleGate(oracle, t.oracle_timeout_s) as gate:
        for i, seed in enumerate(questions):
            if grouped[i]:
                continue
            grouped[i] = True
            members = [seed]

            for j in range(i + 1, len(questions)):
                if grouped[j]:
                    continue
                other = questions[j]
                score = cosine_similarity(seed.text, other.text)

                if score >= t.auto_accept:
                    accept = True
                elif score >= t.oracle_check:
                    decision = gate.consult(seed.text, other.text)
                    accept = decision if decision is not None else score >= t.fallback_accept
                else:
                    accept = False

                if accept:
                    grouped[j] = True
                    members.append(other)

            groups.append(build_group(seed.concept_id, members))

    groups.sort(key=lambda g: len(g.variants), reverse=True)
    logger.info(f"Grouped {len(questions)} question(s) into {len(groups)} group(s)")
    return groups
