"""
Triage analytics endpoints - ranking, duplicate check, prediction, assignment.

All endpoints here are read-only and advisory.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from civic_triage.models.analytics import (
    AssignmentSuggestion,
    DuplicateCheckResult,
    ProgressUpdate,
    RankingResult,
    ResolutionPrediction,
    SentimentResult,
)
from civic_triage.models.problem import ProblemDraft
from civic_triage.services.engine import TriageEngine, get_triage_engine

router = APIRouter(prefix="/ai", tags=["Triage"])


class PredictionRequest(BaseModel):
    category: str
    municipality: str
    priority: str = "medium"


class SentimentRequest(BaseModel):
    text: str = Field(..., max_length=1000)


@router.get("/prioritize", response_model=RankingResult)
def prioritize_problems(
    limit: Optional[int] = Query(None, ge=1, le=100, description="Maximum problems returned"),
    engine: TriageEngine = Depends(get_triage_engine),
):
    """Pending problems, most urgent first."""
    return engine.rank_pending(limit=limit)


@router.post("/check-duplicates", response_model=DuplicateCheckResult)
def check_duplicates(draft: ProblemDraft, engine: TriageEngine = Depends(get_triage_engine)):
    return engine.check_duplicates(draft)


@router.post("/predict-resolution", response_model=ResolutionPrediction)
def predict_resolution(request: PredictionRequest, engine: TriageEngine = Depends(get_triage_engine)):
    return engine.predict_resolution(request.category, request.municipality, request.priority)


@router.get("/problems/{problem_id}/suggest-department", response_model=AssignmentSuggestion)
def suggest_department(problem_id: str, engine: TriageEngine = Depends(get_triage_engine)):
    return engine.suggest_assignment(problem_id)


@router.get("/problems/{problem_id}/progress-update", response_model=ProgressUpdate)
def progress_update(problem_id: str, engine: TriageEngine = Depends(get_triage_engine)):
    return engine.progress_update(problem_id)


@router.post("/sentiment", response_model=SentimentResult)
def comment_sentiment(request: SentimentRequest, engine: TriageEngine = Depends(get_triage_engine)):
    return engine.analyze_sentiment(request.text)
