"""
Department Assignment - pick the least-loaded eligible department.

Eligible departments share the problem's category and municipality. Each is
scored from its workload snapshot; the best score wins, ties go to fewer
active cases and then to directory order.
"""

import logging
from typing import Iterable, List, Optional

from civic_triage.core.errors import NoCandidateError
from civic_triage.core.scoring import ScoringConfig, default_scoring_config
from civic_triage.models.analytics import AssignmentSuggestion, DepartmentScore
from civic_triage.models.department import Department
from civic_triage.models.problem import Problem
from civic_triage.utils.municipality import same_municipality

logger = logging.getLogger(__name__)


class AssignmentSelector:

    def __init__(self, config: Optional[ScoringConfig] = None):
        self.config = config or default_scoring_config()

    def workload_score(self, department: Department) -> float:
        """base - penalty * active_cases + bonus * completion_rate, floored at 0."""
        cfg = self.config
        workload = department.workload
        score = (
            cfg.workload_base_score
            - cfg.active_case_penalty * workload.active_cases
            + cfg.completion_rate_bonus * workload.completion_rate
        )
        return round(max(0.0, score), 2)

    def candidates(self, problem: Problem, departments: Iterable[Department]) -> List[Department]:
        return [
            d for d in departments
            if d.category == problem.category
            and same_municipality(d.municipality, problem.location.municipality)
        ]

    def select(self, problem: Problem, departments: Iterable[Department]) -> AssignmentSuggestion:
        eligible = self.candidates(problem, departments)
        if not eligible:
            raise NoCandidateError(
                f"No departments found for category {problem.category.value} "
                f"in {problem.location.municipality}"
            )

        scored = [
            (DepartmentScore(department=d, score=self.workload_score(d)), index)
            for index, d in enumerate(eligible)
        ]
        scored.sort(key=lambda item: (-item[0].score, item[0].department.workload.active_cases, item[1]))
        ranked = [entry for entry, _ in scored]

        selected = ranked[0]
        alternatives = ranked[1:1 + self.config.max_alternatives]
        logger.info(
            f"Suggested department {selected.department.id} (score {selected.score}) "
            f"for problem {problem.id} out of {len(ranked)} candidates"
        )
        return AssignmentSuggestion(selected=selected, alternatives=alternatives)
