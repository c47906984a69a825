"""
Priority Scoring Service - urgency score for reported problems.

DESIGN PRINCIPLES:
- Priority score is SYSTEM-DERIVED and recalculable at any time
- Pure function of a problem snapshot and the current time
- Weights come from ScoringConfig, never from literals at call sites
- Ranking is deterministic: equal scores keep creation order
"""

import logging
from datetime import datetime
from typing import Iterable, List, Optional

from civic_triage.core.scoring import ScoringConfig, default_scoring_config
from civic_triage.models.analytics import PriorityBreakdown, RankedProblem, RankingResult
from civic_triage.models.problem import Priority, Problem, ProblemStatus
from civic_triage.utils.time import Clock, days_between, utc_now

logger = logging.getLogger(__name__)


class PriorityScorer:
    """
    Calculates an urgency score from a problem snapshot.

    Factors:
    1. Upvotes (community endorsement)
    2. Category weight (electrical and water outrank street and other)
    3. Age in days, capped so old problems cannot dominate forever
    4. Comment activity
    """

    def __init__(self, config: Optional[ScoringConfig] = None, clock: Clock = utc_now):
        self.config = config or default_scoring_config()
        self.clock = clock

    def explain(self, problem: Problem, now: Optional[datetime] = None) -> PriorityBreakdown:
        """Per-factor contribution, before rounding."""
        now = now or self.clock()
        cfg = self.config

        age_days = max(days_between(problem.created_at, now), 0.0)

        return PriorityBreakdown(
            upvotes=cfg.upvote_weight * problem.upvote_count,
            category=cfg.category_weights.get(problem.category.value, 0),
            age=min(age_days * cfg.age_weight_per_day, cfg.age_cap),
            comments=cfg.comment_weight * len(problem.comments),
        )

    def score(self, problem: Problem, now: Optional[datetime] = None) -> float:
        breakdown = self.explain(problem, now)
        total = breakdown.upvotes + breakdown.category + breakdown.age + breakdown.comments
        score = round(total, 2)
        logger.debug(f"Priority score {score} for problem {problem.id}: {breakdown}")
        return score

    def priority_level(self, score: float) -> Priority:
        if score >= self.config.critical_threshold:
            return Priority.CRITICAL
        if score >= self.config.high_threshold:
            return Priority.HIGH
        if score >= self.config.medium_threshold:
            return Priority.MEDIUM
        return Priority.LOW

    def rank(
        self,
        problems: Iterable[Problem],
        limit: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> RankingResult:
        """
        Rank pending problems by score, highest first.

        Ties are broken by earlier creation time, then id, so the ordering is
        reproducible. Non-pending problems are ignored.
        """
        now = now or self.clock()
        ranked: List[RankedProblem] = []
        for problem in problems:
            if problem.status != ProblemStatus.PENDING:
                continue
            breakdown = self.explain(problem, now)
            score = self.score(problem, now)
            ranked.append(RankedProblem(
                problem=problem,
                priority_score=score,
                priority_level=self.priority_level(score),
                breakdown=breakdown,
            ))

        ranked.sort(key=lambda r: (-r.priority_score, r.problem.created_at, r.problem.id))
        total = len(ranked)
        if limit is not None:
            ranked = ranked[:limit]

        logger.info(f"Ranked {total} pending problems (returning {len(ranked)})")
        return RankingResult(prioritized_problems=ranked, total_count=total)
