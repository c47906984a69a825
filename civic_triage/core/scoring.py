"""
Heuristic weight tables for the scorers.

Scorers receive a ScoringConfig instead of reading globals, so tests and
callers can tune weights per instance without touching shared state.
"""

from typing import Dict

from pydantic import BaseModel, ConfigDict

from civic_triage.core.settings import Settings, settings


class ScoringConfig(BaseModel):
    """Immutable snapshot of every tunable scoring constant."""

    model_config = ConfigDict(frozen=True)

    category_weights: Dict[str, float]
    upvote_weight: float
    age_weight_per_day: float
    age_cap: float
    comment_weight: float
    critical_threshold: float
    high_threshold: float
    medium_threshold: float

    priority_multipliers: Dict[str, float]
    default_resolution_days: float
    confidence_base: float
    confidence_per_sample: float
    confidence_cap: float

    title_similarity_threshold: float
    description_similarity_threshold: float
    max_duplicate_matches: int

    workload_base_score: float
    active_case_penalty: float
    completion_rate_bonus: float
    max_alternatives: int

    @classmethod
    def from_settings(cls, s: Settings) -> "ScoringConfig":
        return cls(
            category_weights=dict(s.CATEGORY_WEIGHTS),
            upvote_weight=s.UPVOTE_WEIGHT,
            age_weight_per_day=s.AGE_WEIGHT_PER_DAY,
            age_cap=s.AGE_CAP,
            comment_weight=s.COMMENT_WEIGHT,
            critical_threshold=s.CRITICAL_THRESHOLD,
            high_threshold=s.HIGH_THRESHOLD,
            medium_threshold=s.MEDIUM_THRESHOLD,
            priority_multipliers=dict(s.PRIORITY_MULTIPLIERS),
            default_resolution_days=s.DEFAULT_RESOLUTION_DAYS,
            confidence_base=s.CONFIDENCE_BASE,
            confidence_per_sample=s.CONFIDENCE_PER_SAMPLE,
            confidence_cap=s.CONFIDENCE_CAP,
            title_similarity_threshold=s.TITLE_SIMILARITY_THRESHOLD,
            description_similarity_threshold=s.DESCRIPTION_SIMILARITY_THRESHOLD,
            max_duplicate_matches=s.MAX_DUPLICATE_MATCHES,
            workload_base_score=s.WORKLOAD_BASE_SCORE,
            active_case_penalty=s.ACTIVE_CASE_PENALTY,
            completion_rate_bonus=s.COMPLETION_RATE_BONUS,
            max_alternatives=s.MAX_ALTERNATIVES,
        )


def default_scoring_config() -> ScoringConfig:
    """Scoring config built from the process settings."""
    return ScoringConfig.from_settings(settings)
