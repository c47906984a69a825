"""
Response models for the read-only scoring and analytics operations.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from civic_triage.models.department import Department
from civic_triage.models.problem import Priority, Problem


class PriorityBreakdown(BaseModel):
    """Per-factor contribution to a priority score."""
    upvotes: float
    category: float
    age: float
    comments: float


class RankedProblem(BaseModel):
    problem: Problem
    priority_score: float
    priority_level: Priority
    breakdown: Optional[PriorityBreakdown] = None


class RankingResult(BaseModel):
    prioritized_problems: List[RankedProblem]
    total_count: int


class DuplicateMatch(BaseModel):
    problem_id: str
    title: str
    status: str
    title_similarity: float
    description_similarity: float
    combined_similarity: float


class DuplicateCheckResult(BaseModel):
    is_duplicate: bool
    matches: List[DuplicateMatch] = Field(default_factory=list)
    similarity_score: float = 0.0


class ResolutionPrediction(BaseModel):
    predicted_days: int
    confidence: float
    sample_size: int
    average_days: float


class DepartmentScore(BaseModel):
    department: Department
    score: float


class AssignmentSuggestion(BaseModel):
    selected: DepartmentScore
    alternatives: List[DepartmentScore] = Field(default_factory=list)


class GroupCount(BaseModel):
    count: int = 0
    resolved: int = 0


class MonthlyCount(BaseModel):
    year: int
    month: int
    reported: int = 0
    resolved: int = 0


class StatsOverview(BaseModel):
    total: int
    resolved: int
    pending: int
    in_progress: int
    rejected: int
    resolution_rate: float


class ProblemStats(BaseModel):
    overview: StatsOverview
    by_category: Dict[str, GroupCount]
    by_municipality: Dict[str, GroupCount]
    monthly: List[MonthlyCount]


class SentimentResult(BaseModel):
    sentiment: str
    score: float
    positive_words: int
    negative_words: int
    is_positive: bool
    is_negative: bool
    is_neutral: bool


class ProgressUpdate(BaseModel):
    progress_update: str
    suggested_actions: List[str]
    estimated_timeline: str
