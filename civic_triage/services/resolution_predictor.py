"""
Resolution Predictor - expected days to resolve, from resolved history.

Averages how long resolved problems of the same category in the same
municipality took, then scales by the requested priority. Confidence grows
with the number of past cases and is capped below certainty.
"""

import logging
import math
from typing import Iterable, List, Optional

from civic_triage.core.scoring import ScoringConfig, default_scoring_config
from civic_triage.models.analytics import ResolutionPrediction
from civic_triage.models.problem import Category, Priority, Problem, ProblemStatus
from civic_triage.utils.municipality import same_municipality
from civic_triage.utils.time import days_between

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Nearest integer with halves rounded up (2.5 -> 3); round() would give 2."""
    return int(math.floor(value + 0.5))


class ResolutionPredictor:

    def __init__(self, config: Optional[ScoringConfig] = None):
        self.config = config or default_scoring_config()

    def history_pool(
        self,
        problems: Iterable[Problem],
        category: Category,
        municipality: str,
    ) -> List[Problem]:
        return [
            p for p in problems
            if p.status == ProblemStatus.RESOLVED
            and p.category == category
            and same_municipality(p.location.municipality, municipality)
            and p.resolution_details is not None
        ]

    def average_days(self, pool: List[Problem]) -> float:
        """Mean resolution time in days; the configured default for an empty pool."""
        if not pool:
            return self.config.default_resolution_days
        try:
            durations = [
                days_between(p.created_at, p.resolution_details.resolved_at)
                for p in pool
            ]
            return sum(durations) / len(durations)
        except (TypeError, ValueError) as e:
            logger.warning(f"Failed to average resolution times, using default: {e}")
            return self.config.default_resolution_days

    def confidence(self, sample_size: int) -> float:
        cfg = self.config
        return round(min(cfg.confidence_base + cfg.confidence_per_sample * sample_size, cfg.confidence_cap), 4)

    def predict(
        self,
        category: Category,
        municipality: str,
        priority: Priority,
        history: Iterable[Problem],
    ) -> ResolutionPrediction:
        pool = self.history_pool(history, category, municipality)
        average = self.average_days(pool)
        multiplier = self.config.priority_multipliers.get(Priority(priority).value, 1.0)
        predicted = round_half_up(average * multiplier)

        logger.debug(
            f"Predicted {predicted} days for {category.value} in {municipality} "
            f"(avg {average:.2f} x {multiplier}, n={len(pool)})"
        )

        return ResolutionPrediction(
            predicted_days=predicted,
            confidence=self.confidence(len(pool)),
            sample_size=len(pool),
            average_days=round(average, 2),
        )
