"""
Triage Engine - single entry point for the HTTP layer and scripts.

Wires the problem store, the directory, the clock and the scoring config into
the lifecycle controller and the read-only scorers. Mutations go to the
controller; analytics read store snapshots and never block writers.
"""

import logging
from datetime import timedelta
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from civic_triage.core.errors import NotFoundError, ValidationError
from civic_triage.core.scoring import ScoringConfig, default_scoring_config
from civic_triage.core.settings import settings
from civic_triage.directory import Directory, create_directory
from civic_triage.models.analytics import (
    AssignmentSuggestion,
    DuplicateCheckResult,
    ProblemStats,
    ProgressUpdate,
    RankingResult,
    ResolutionPrediction,
    SentimentResult,
)
from civic_triage.models.problem import (
    Category,
    Comment,
    Priority,
    Problem,
    ProblemDraft,
    ProblemStatus,
    ResolutionPayload,
    UpvoteResult,
)
from civic_triage.services.analytics_service import AnalyticsService
from civic_triage.services.assignment import AssignmentSelector
from civic_triage.services.comment_sentiment import analyze_sentiment
from civic_triage.services.duplicate_detection import OPEN_STATUSES, DuplicateMatcher
from civic_triage.services.lifecycle import LifecycleController
from civic_triage.services.priority_scoring import PriorityScorer
from civic_triage.services.progress_updates import generate_progress_update
from civic_triage.services.resolution_predictor import ResolutionPredictor
from civic_triage.store import ProblemStore, create_problem_store
from civic_triage.utils.time import Clock, utc_now

logger = logging.getLogger(__name__)


def _parse_enum(enum_cls, value, field: str):
    try:
        return enum_cls(value.strip().lower() if isinstance(value, str) else value)
    except ValueError:
        allowed = [member.value for member in enum_cls]
        raise ValidationError(f"Invalid {field} '{value}'. Allowed: {allowed}", field=field)


def _coerce_draft(draft: Union[ProblemDraft, Dict[str, Any]]) -> ProblemDraft:
    if isinstance(draft, ProblemDraft):
        return draft
    try:
        return ProblemDraft.model_validate(draft)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ()))
        raise ValidationError(f"Invalid problem draft: {field}: {first.get('msg')}", field=field or None)


class TriageEngine:

    def __init__(
        self,
        store: ProblemStore,
        directory: Directory,
        clock: Clock = utc_now,
        config: Optional[ScoringConfig] = None,
        award_points: Optional[int] = None,
    ):
        self.store = store
        self.directory = directory
        self.clock = clock
        self.config = config or default_scoring_config()

        self.lifecycle = LifecycleController(store, directory, clock=clock, award_points=award_points)
        self.scorer = PriorityScorer(self.config, clock=clock)
        self.matcher = DuplicateMatcher(self.config)
        self.predictor = ResolutionPredictor(self.config)
        self.selector = AssignmentSelector(self.config)
        self.analytics = AnalyticsService()

    # Mutations

    def create_problem(self, draft: Union[ProblemDraft, Dict[str, Any]]) -> Problem:
        return self.lifecycle.create(_coerce_draft(draft))

    def toggle_upvote(self, problem_id: str, user_id: str) -> UpvoteResult:
        return self.lifecycle.toggle_upvote(problem_id, user_id)

    def add_comment(
        self,
        problem_id: str,
        author_id: Optional[str],
        text: str,
        is_anonymous: bool = False,
    ) -> Comment:
        return self.lifecycle.add_comment(problem_id, author_id, text, is_anonymous=is_anonymous)

    def change_status(
        self,
        problem_id: str,
        target_status: str,
        actor: str,
        resolution: Optional[ResolutionPayload] = None,
        note: Optional[str] = None,
    ) -> Problem:
        return self.lifecycle.transition_status(problem_id, target_status, actor, resolution=resolution, note=note)

    def assign_department(self, problem_id: str, department_id: str) -> Problem:
        return self.lifecycle.assign_department(problem_id, department_id)

    def set_priority(self, problem_id: str, priority: str) -> Problem:
        return self.lifecycle.set_priority(problem_id, priority)

    def add_tags(self, problem_id: str, tags: List[str]) -> Problem:
        return self.lifecycle.add_tags(problem_id, tags)

    def estimate_resolution(self, problem_id: str) -> Problem:
        """Store now + predicted days as the problem's estimated resolution time."""
        problem = self.store.get(problem_id)
        prediction = self.predict_resolution(
            problem.category, problem.location.municipality, problem.priority
        )
        when = self.clock() + timedelta(days=prediction.predicted_days)
        return self.lifecycle.set_estimated_resolution(problem_id, when)

    # Reads

    def get_problem(self, problem_id: str) -> Problem:
        return self.store.get(problem_id)

    def list_problems(
        self,
        category: Optional[str] = None,
        municipality: Optional[str] = None,
        status: Optional[str] = None,
    ) -> List[Problem]:
        return self.store.find(
            category=_parse_enum(Category, category, "category") if category else None,
            municipality=municipality or None,
            statuses=[_parse_enum(ProblemStatus, status, "status")] if status else None,
        )

    # Analytics

    def rank_pending(self, limit: Optional[int] = None) -> RankingResult:
        pending = self.store.find(statuses=[ProblemStatus.PENDING])
        return self.scorer.rank(pending, limit=settings.RANK_LIMIT if limit is None else limit)

    def check_duplicates(self, draft: Union[ProblemDraft, Dict[str, Any]]) -> DuplicateCheckResult:
        draft = _coerce_draft(draft)
        if not draft.category or not draft.municipality:
            raise ValidationError("category and municipality are required for a duplicate check")
        category = _parse_enum(Category, draft.category, "category")

        pool = self.store.find(category=category, municipality=draft.municipality, statuses=OPEN_STATUSES)
        return self.matcher.find_duplicates(
            title=draft.title or "",
            description=draft.description or "",
            category=category,
            municipality=draft.municipality,
            candidate_pool=pool,
        )

    def predict_resolution(
        self,
        category: Union[str, Category],
        municipality: str,
        priority: Union[str, Priority] = Priority.MEDIUM,
    ) -> ResolutionPrediction:
        if not municipality or not str(municipality).strip():
            raise ValidationError("municipality is required", field="municipality")
        category = _parse_enum(Category, category, "category")
        priority = _parse_enum(Priority, priority, "priority")

        history = self.store.find(category=category, municipality=municipality, statuses=[ProblemStatus.RESOLVED])
        return self.predictor.predict(category, municipality, priority, history)

    def suggest_assignment(self, problem_id: str) -> AssignmentSuggestion:
        problem = self.store.get(problem_id)
        departments = self.directory.list_departments(
            category=problem.category, municipality=problem.location.municipality
        )
        return self.selector.select(problem, departments)

    def get_stats(self) -> ProblemStats:
        return self.analytics.get_stats(self.store.find())

    def analyze_sentiment(self, text: str) -> SentimentResult:
        if text is None or not text.strip():
            raise ValidationError("text must not be empty", field="text")
        return analyze_sentiment(text)

    def progress_update(self, problem_id: str) -> ProgressUpdate:
        problem = self.store.get(problem_id)
        department_name = None
        if problem.assigned_to:
            try:
                department_name = self.directory.get_department(problem.assigned_to).name
            except NotFoundError:
                logger.warning(f"Problem {problem_id} is assigned to unknown department {problem.assigned_to}")
        return generate_progress_update(problem, department_name)

    def health(self) -> Dict[str, Any]:
        self.store.ping()
        return {"connected": True, "backend": self.store.backend_name}


# Global engine instance
_engine: Optional[TriageEngine] = None


def get_triage_engine() -> TriageEngine:
    """Get or create the TriageEngine singleton."""
    global _engine
    if _engine is None:
        _engine = TriageEngine(create_problem_store(), create_directory())
    return _engine


def set_triage_engine(engine: Optional[TriageEngine]) -> None:
    """Replace the singleton (None resets it)."""
    global _engine
    _engine = engine
