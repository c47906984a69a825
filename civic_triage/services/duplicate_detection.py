"""
Duplicate Detection Service - near-duplicate check for new problem reports.

DESIGN PRINCIPLES:
- Pure functions over explicit snapshots (no database access here)
- Only open problems (pending / in_progress) in the same category and
  municipality are candidates
- Advisory only: flagging a duplicate never blocks a report
"""

import logging
import re
from typing import FrozenSet, Iterable, List, Optional

from civic_triage.core.scoring import ScoringConfig, default_scoring_config
from civic_triage.models.analytics import DuplicateCheckResult, DuplicateMatch
from civic_triage.models.problem import Category, Problem, ProblemStatus
from civic_triage.utils.municipality import same_municipality

logger = logging.getLogger(__name__)

_NON_WORD = re.compile(r"\W+")

OPEN_STATUSES = (ProblemStatus.PENDING, ProblemStatus.IN_PROGRESS)


def tokenize(text: Optional[str]) -> FrozenSet[str]:
    """Lower-cased word tokens; punctuation and empty fragments dropped."""
    if not text:
        return frozenset()
    return frozenset(token for token in _NON_WORD.split(text.lower()) if token)


def similarity(text1: Optional[str], text2: Optional[str]) -> float:
    """
    Jaccard similarity of the token sets, between 0.0 and 1.0.

    Two empty texts have similarity 0.0.
    """
    words1 = tokenize(text1)
    words2 = tokenize(text2)
    union = words1 | words2
    if not union:
        return 0.0
    return len(words1 & words2) / len(union)


class DuplicateMatcher:
    """
    Finds likely duplicates of a draft among existing problems.

    A candidate is a duplicate when its title similarity exceeds the title
    threshold OR its description similarity exceeds the description threshold.
    """

    def __init__(self, config: Optional[ScoringConfig] = None):
        self.config = config or default_scoring_config()

    def is_candidate(self, problem: Problem, category: Category, municipality: str) -> bool:
        return (
            problem.category == category
            and same_municipality(problem.location.municipality, municipality)
            and problem.status in OPEN_STATUSES
        )

    def find_duplicates(
        self,
        title: str,
        description: str,
        category: Category,
        municipality: str,
        candidate_pool: Iterable[Problem],
    ) -> DuplicateCheckResult:
        cfg = self.config
        scored: List[tuple] = []

        for problem in candidate_pool:
            if not self.is_candidate(problem, category, municipality):
                continue

            title_similarity = similarity(title, problem.title)
            description_similarity = similarity(description, problem.description)
            if (
                title_similarity > cfg.title_similarity_threshold
                or description_similarity > cfg.description_similarity_threshold
            ):
                match = DuplicateMatch(
                    problem_id=problem.id,
                    title=problem.title,
                    status=problem.status.value,
                    title_similarity=round(title_similarity, 4),
                    description_similarity=round(description_similarity, 4),
                    combined_similarity=round(title_similarity + description_similarity, 4),
                )
                scored.append((match, problem.created_at))

        scored.sort(key=lambda item: (-item[0].combined_similarity, item[1], item[0].problem_id))
        matches = [match for match, _ in scored[:cfg.max_duplicate_matches]]

        if matches:
            logger.info(
                f"Possible duplicate of {[m.problem_id for m in matches]} "
                f"({category.value}, {municipality})"
            )

        return DuplicateCheckResult(
            is_duplicate=bool(matches),
            matches=matches,
            similarity_score=round(matches[0].combined_similarity / 2, 4) if matches else 0.0,
        )
