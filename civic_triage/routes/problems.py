"""
Problem endpoints - citizen reporting, upvotes and comments.

Engine errors are translated to HTTP responses by the handler in main.py.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Header, Query, status
from pydantic import BaseModel, Field

from civic_triage.models.problem import Comment, Problem, ProblemDraft, UpvoteResult
from civic_triage.services.engine import TriageEngine, get_triage_engine

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/problems", tags=["Problems"])


class CommentRequest(BaseModel):
    text: str = Field(..., max_length=1000, description="Comment text")
    is_anonymous: bool = False


@router.post("", response_model=Problem, status_code=status.HTTP_201_CREATED)
def report_problem(draft: ProblemDraft, engine: TriageEngine = Depends(get_triage_engine)):
    """Submit a new problem. It starts out pending."""
    logger.info(f"POST /problems - category={draft.category}, municipality={draft.municipality}")
    return engine.create_problem(draft)


@router.get("", response_model=List[Problem])
def list_problems(
    category: Optional[str] = Query(None, description="Filter by category"),
    municipality: Optional[str] = Query(None, description="Filter by municipality"),
    status_filter: Optional[str] = Query(None, alias="status", description="Filter by status"),
    engine: TriageEngine = Depends(get_triage_engine),
):
    return engine.list_problems(category=category, municipality=municipality, status=status_filter)


@router.get("/{problem_id}", response_model=Problem)
def get_problem(problem_id: str, engine: TriageEngine = Depends(get_triage_engine)):
    return engine.get_problem(problem_id)


@router.post("/{problem_id}/upvote", response_model=UpvoteResult)
def toggle_upvote(
    problem_id: str,
    user_id: str = Header(..., alias="X-User-ID", description="Voting user"),
    engine: TriageEngine = Depends(get_triage_engine),
):
    """Upvote, or withdraw an existing upvote by the same user."""
    return engine.toggle_upvote(problem_id, user_id)


@router.post("/{problem_id}/comments", response_model=Comment, status_code=status.HTTP_201_CREATED)
def add_comment(
    problem_id: str,
    request: CommentRequest,
    user_id: Optional[str] = Header(None, alias="X-User-ID", description="Commenting user"),
    engine: TriageEngine = Depends(get_triage_engine),
):
    return engine.add_comment(problem_id, user_id, request.text, is_anonymous=request.is_anonymous)
