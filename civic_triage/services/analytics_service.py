"""
Analytics Service - admin dashboard statistics over problem snapshots.
"""

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Tuple

from civic_triage.models.analytics import GroupCount, MonthlyCount, ProblemStats, StatsOverview
from civic_triage.models.problem import Problem, ProblemStatus
from civic_triage.utils.time import ensure_utc

logger = logging.getLogger(__name__)

MONTHS_REPORTED = 12


class AnalyticsService:
    """Aggregates counts by status, category, municipality and month."""

    def get_stats(self, problems: Iterable[Problem]) -> ProblemStats:
        problems = list(problems)

        status_counts: Dict[ProblemStatus, int] = defaultdict(int)
        by_category: Dict[str, GroupCount] = {}
        by_municipality: Dict[str, GroupCount] = {}
        monthly: Dict[Tuple[int, int], MonthlyCount] = {}

        for problem in problems:
            resolved = problem.status == ProblemStatus.RESOLVED
            status_counts[problem.status] += 1

            self._bump(by_category, problem.category.value, resolved)
            self._bump(by_municipality, problem.location.municipality, resolved)

            created = ensure_utc(problem.created_at)
            key = (created.year, created.month)
            bucket = monthly.setdefault(key, MonthlyCount(year=key[0], month=key[1]))
            bucket.reported += 1
            if resolved:
                bucket.resolved += 1

        total = len(problems)
        resolved_total = status_counts[ProblemStatus.RESOLVED]
        overview = StatsOverview(
            total=total,
            resolved=resolved_total,
            pending=status_counts[ProblemStatus.PENDING],
            in_progress=status_counts[ProblemStatus.IN_PROGRESS],
            rejected=status_counts[ProblemStatus.REJECTED],
            resolution_rate=round(resolved_total / total * 100, 2) if total else 0.0,
        )

        recent_months: List[MonthlyCount] = [
            monthly[key] for key in sorted(monthly, reverse=True)[:MONTHS_REPORTED]
        ]

        logger.debug(f"Computed stats over {total} problems")
        return ProblemStats(
            overview=overview,
            by_category=by_category,
            by_municipality=by_municipality,
            monthly=recent_months,
        )

    @staticmethod
    def _bump(groups: Dict[str, GroupCount], key: str, resolved: bool) -> None:
        group = groups.setdefault(key, GroupCount())
        group.count += 1
        if resolved:
            group.resolved += 1
